# SPDX-License-Identifier: MIT

from typing import Optional

from rich.markup import escape

from taskflow.color import COMPLETED_TASK_COLOR, OVERDUE_COLOR, status_color
from taskflow.model.task import Task, TaskStatus
from taskflow.service.task import is_overdue, status_label
from taskflow.time import date_to_display_str


def task_state(task: Task) -> str:
    if task["status"] == TaskStatus.DONE:
        return "X"
    elif task["status"] == TaskStatus.IN_PROGRESS:
        return "~"
    return " "


def format_status(task: Task) -> str:
    color = status_color(task["status"])
    return f"[{color}]{status_label(task['status'])}[/{color}]"


def format_due(task: Task) -> str:
    if task["due_date"] is None:
        return ""
    due = date_to_display_str(task["due_date"])
    if is_overdue(task):
        return f"[{OVERDUE_COLOR}]{due} (Overdue)[/{OVERDUE_COLOR}]"
    return due


def dim_if_done(task: Task, value: str) -> str:
    value = escape(value)
    if task["status"] == TaskStatus.DONE:
        return f"[{COMPLETED_TASK_COLOR}]{value}[/{COMPLETED_TASK_COLOR}]"
    return value


def truncate(text: Optional[str], width: int) -> str:
    if text is None:
        return ""
    if len(text) <= width:
        return text
    if width <= 1:
        return text[:width]
    return text[: width - 1] + "…"
