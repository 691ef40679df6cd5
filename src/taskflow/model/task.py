# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import Optional, TypedDict

import pendulum

from taskflow.model.entity_id import TaskId, UserId


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Task(TypedDict):
    id: TaskId
    user_id: UserId
    title: str
    description: Optional[str]
    status: TaskStatus
    due_date: Optional[pendulum.Date]
    created_at: pendulum.DateTime
    updated_at: pendulum.DateTime


class TaskDraft(TypedDict):
    """A task as submitted for creation, before the backend assigns ids and stamps."""

    user_id: UserId
    title: str
    description: Optional[str]
    status: TaskStatus
    due_date: Optional[pendulum.Date]


class TaskChanges(TypedDict, total=False):
    """Editable task fields. Absent keys are left unchanged."""

    title: str
    description: Optional[str]
    status: TaskStatus
    due_date: Optional[pendulum.Date]
