# SPDX-License-Identifier: MIT

from typing import Optional

from taskflow.model.task import Task, TaskStatus
from taskflow.query.filter_type import StatusFilter


def filter_tasks(
    tasks: list[Task],
    status_filter: StatusFilter = StatusFilter.ALL,
    search: Optional[str] = None,
) -> list[Task]:
    """
    Filter tasks by status and a free-text search.

    Args:
        tasks: Tasks to filter; the input order is kept
        status_filter: "all", "incomplete" (anything not done) or an exact status
        search: Case-insensitive substring matched against title or description.
            A blank search matches every task.

    Returns:
        The matching tasks
    """
    return [
        task
        for task in tasks
        if matches_status(task, status_filter) and matches_search(task, search)
    ]


def matches_status(task: Task, status_filter: StatusFilter) -> bool:
    match status_filter:
        case StatusFilter.ALL:
            return True
        case StatusFilter.INCOMPLETE:
            return task["status"] != TaskStatus.DONE
        case StatusFilter.TODO | StatusFilter.IN_PROGRESS | StatusFilter.DONE:
            return task["status"] == TaskStatus(status_filter.value)
    raise ValueError(f"Unknown status filter: {status_filter}")


def matches_search(task: Task, search: Optional[str]) -> bool:
    if search is None or search.strip() == "":
        return True
    query = search.lower()
    if query in task["title"].lower():
        return True
    return task["description"] is not None and query in task["description"].lower()
