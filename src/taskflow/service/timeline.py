# SPDX-License-Identifier: MIT

import logging
from typing import Optional

import pendulum

from taskflow.error import TimelineCapacityError
from taskflow.model.entity_id import TaskId
from taskflow.model.task import Task
from taskflow.model.timeline import (
    NoDueDatePolicy,
    TaskBar,
    TimelineLayout,
    TimelineWindow,
)
from taskflow.time import datetime_to_local_date

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def month_window(month: pendulum.Date) -> TimelineWindow:
    """
    Expand the month containing ``month`` to the full weeks covering it.

    The window starts on the Monday on or before the first of the month and
    ends on the Sunday on or after its last day.
    """
    first_of_month = pendulum.date(month.year, month.month, 1)
    start = first_of_month.start_of("week")
    end = first_of_month.end_of("month").end_of("week")
    days = start.diff(end).in_days() + 1
    return {
        "month": first_of_month,
        "start": start,
        "end": end,
        "weeks": days // DAYS_PER_WEEK,
    }


def task_span(
    task: Task,
    no_due_date_policy: NoDueDatePolicy = NoDueDatePolicy.SAME_DAY,
    tz: str = "local",
) -> Optional[tuple[pendulum.Date, pendulum.Date]]:
    """
    Get the [start, end] days a task occupies on the timeline.

    The span starts on the creation day and ends on the due date. A due date
    before the creation day yields the span with its bounds put in order.

    Returns:
        The (start, end) days, or None when the policy excludes the task
    """
    start = datetime_to_local_date(task["created_at"], tz)
    end = task["due_date"]
    if end is None:
        match no_due_date_policy:
            case NoDueDatePolicy.SAME_DAY:
                end = start
            case NoDueDatePolicy.ONE_MONTH:
                end = start.add(months=1)
            case NoDueDatePolicy.EXCLUDE:
                return None
    if end < start:
        return end, start
    return start, end


def has_inverted_span(task: Task, tz: str = "local") -> bool:
    """Check whether a task is due before the day it was created."""
    if task["due_date"] is None:
        return False
    return task["due_date"] < datetime_to_local_date(task["created_at"], tz)


def compute_timeline(
    tasks: list[Task],
    window: TimelineWindow,
    no_due_date_policy: NoDueDatePolicy = NoDueDatePolicy.SAME_DAY,
    tz: str = "local",
    max_rows: Optional[int] = None,
) -> TimelineLayout:
    """
    Lay out tasks as bars on the week grid of a timeline window.

    Each visible task is assigned the first packing row where its day range
    does not overlap an already placed task, in input order. A task spanning
    several weeks is split into one bar per week row, all sharing that row.

    Args:
        tasks: Tasks to place; their order decides packing ties
        window: The visible window, see month_window
        no_due_date_policy: Where tasks without a due date end
        tz: Time zone used to truncate creation timestamps to days
        max_rows: Packing row limit. None lets rows grow as needed.

    Returns:
        The layout with its bars, the number of packing rows used and the ids
        of visible tasks whose inverted span was put in order

    Raises:
        TimelineCapacityError: If a task would need a row beyond max_rows
    """
    rows: list[list[tuple[int, int]]] = []
    bars: list[TaskBar] = []
    corrected_task_ids: list[TaskId] = []

    for task in tasks:
        span = task_span(task, no_due_date_policy, tz)
        if span is None:
            continue
        start, end = span

        # Skip tasks that do not intersect the window
        if start > window["end"] or end < window["start"]:
            continue

        if has_inverted_span(task, tz):
            logger.debug("task %s is due before it was created", task["id"])
            corrected_task_ids.append(task["id"])

        clamped_start = max(start, window["start"])
        clamped_end = min(end, window["end"])
        offset_start = window["start"].diff(clamped_start).in_days()
        offset_end = window["start"].diff(clamped_end).in_days()

        row = _assign_row(rows, offset_start, offset_end, max_rows)
        bars.extend(
            _split_into_week_bars(
                task["id"],
                window,
                row,
                offset_start,
                offset_end,
                clipped_before=start < clamped_start,
                clipped_after=end > clamped_end,
            )
        )

    return {
        "window": window,
        "bars": bars,
        "row_count": len(rows),
        "corrected_task_ids": corrected_task_ids,
    }


def intervals_overlap(
    start: int, end: int, other_start: int, other_end: int
) -> bool:
    return not (end < other_start or start > other_end)


def _assign_row(
    rows: list[list[tuple[int, int]]],
    offset_start: int,
    offset_end: int,
    max_rows: Optional[int],
) -> int:
    for index, intervals in enumerate(rows):
        if not any(
            intervals_overlap(offset_start, offset_end, start, end)
            for start, end in intervals
        ):
            intervals.append((offset_start, offset_end))
            return index

    if max_rows is not None and len(rows) >= max_rows:
        raise TimelineCapacityError(max_rows)

    rows.append([(offset_start, offset_end)])
    return len(rows) - 1


def _split_into_week_bars(
    task_id: TaskId,
    window: TimelineWindow,
    row: int,
    offset_start: int,
    offset_end: int,
    clipped_before: bool,
    clipped_after: bool,
) -> list[TaskBar]:
    start_week, start_day = divmod(offset_start, DAYS_PER_WEEK)
    end_week, end_day = divmod(offset_end, DAYS_PER_WEEK)

    bars: list[TaskBar] = []
    for week in range(start_week, end_week + 1):
        first_day = start_day if week == start_week else 0
        last_day = end_day if week == end_week else DAYS_PER_WEEK - 1
        days_spanned = last_day - first_day + 1
        week_start = window["start"].add(days=week * DAYS_PER_WEEK)
        bars.append(
            {
                "task_id": task_id,
                "start": week_start.add(days=first_day),
                "end": week_start.add(days=last_day),
                "week": week,
                "row": row,
                "start_day": first_day,
                "end_day": last_day,
                "left_percent": first_day / DAYS_PER_WEEK * 100,
                "width_percent": days_spanned / DAYS_PER_WEEK * 100,
                "continues_before": week > start_week or clipped_before,
                "continues_after": week < end_week or clipped_after,
            }
        )
    return bars


def bars_by_week(layout: TimelineLayout) -> dict[int, list[TaskBar]]:
    """Group the bars of a layout by week row, every week present."""
    grouped: dict[int, list[TaskBar]] = {
        week: [] for week in range(layout["window"]["weeks"])
    }
    for bar in layout["bars"]:
        grouped[bar["week"]].append(bar)
    return grouped
