# SPDX-License-Identifier: MIT

from taskflow.model.task import Task
from taskflow.query.filter_type import SortOrder


def sort_tasks(tasks: list[Task], sort_order: SortOrder) -> list[Task]:
    """
    Sort tasks by creation or due date.

    Tasks without a due date always come last when sorting by due date,
    whichever direction is requested. The sort is stable.
    """
    match sort_order:
        case SortOrder.CREATED_DESC:
            return sorted(tasks, key=lambda task: task["created_at"], reverse=True)
        case SortOrder.CREATED_ASC:
            return sorted(tasks, key=lambda task: task["created_at"])
        case SortOrder.DUE_ASC | SortOrder.DUE_DESC:
            none_items = [task for task in tasks if task["due_date"] is None]
            value_items = [task for task in tasks if task["due_date"] is not None]
            value_items.sort(
                key=lambda task: task["due_date"],  # type: ignore[arg-type,return-value]
                reverse=sort_order == SortOrder.DUE_DESC,
            )
            return value_items + none_items
    raise ValueError(f"Unknown sort order: {sort_order}")
