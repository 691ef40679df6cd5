# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import TypedDict

import pendulum

from taskflow.model.entity_id import TaskId


class NoDueDatePolicy(StrEnum):
    """Where a task without a due date ends on the timeline."""

    SAME_DAY = "same_day"
    ONE_MONTH = "one_month"
    EXCLUDE = "exclude"


class TimelineWindow(TypedDict):
    month: pendulum.Date
    start: pendulum.Date
    end: pendulum.Date
    weeks: int


class TaskBar(TypedDict):
    task_id: TaskId
    start: pendulum.Date
    end: pendulum.Date
    week: int
    row: int
    start_day: int
    end_day: int
    left_percent: float
    width_percent: float
    continues_before: bool
    continues_after: bool


class TimelineLayout(TypedDict):
    window: TimelineWindow
    bars: list[TaskBar]
    row_count: int
    corrected_task_ids: list[TaskId]
