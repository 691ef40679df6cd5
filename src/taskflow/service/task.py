# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from taskflow.error import TaskValidationError
from taskflow.model.entity_id import UserId
from taskflow.model.task import Task, TaskChanges, TaskDraft, TaskStatus
from taskflow.template.task import get_task_draft_template
from taskflow.time import today


def build_task_draft(
    user_id: UserId,
    title: str,
    description: Optional[str] = None,
    status: TaskStatus = TaskStatus.TODO,
    due_date: Optional[pendulum.Date] = None,
) -> TaskDraft:
    """
    Build a validated draft for a new task.

    An empty description is stored as no description.
    """
    draft = get_task_draft_template(user_id)
    draft["title"] = validate_title(title)
    draft["description"] = description or None
    draft["status"] = TaskStatus(status)
    draft["due_date"] = due_date
    return draft


def validate_changes(changes: TaskChanges) -> TaskChanges:
    validated: TaskChanges = {}
    if "title" in changes:
        validated["title"] = validate_title(changes["title"])
    if "description" in changes:
        validated["description"] = changes["description"] or None
    if "status" in changes:
        validated["status"] = TaskStatus(changes["status"])
    if "due_date" in changes:
        validated["due_date"] = changes["due_date"]
    return validated


def validate_title(title: str) -> str:
    title = title.strip()
    if title == "":
        raise TaskValidationError("Task title cannot be empty")
    return title


def is_overdue(task: Task, tz: str = "local") -> bool:
    return (
        task["due_date"] is not None
        and task["due_date"] < today(tz)
        and task["status"] != TaskStatus.DONE
    )


def status_label(status: TaskStatus) -> str:
    match status:
        case TaskStatus.TODO:
            return "To Do"
        case TaskStatus.IN_PROGRESS:
            return "In Progress"
        case TaskStatus.DONE:
            return "Done"
