# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.table import Table

from taskflow.model.task import Task
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.time import datetime_to_display_local_date_str
from taskflow.view.util import dim_if_done, format_due, format_status, task_state
from taskflow.view.views.header import header


def tasks_view(
    user_email: Optional[str],
    report_name: str,
    tasks: list[Task],
    total: int,
    columns: list[str] = ["id", "state", "title", "status", "due", "created"],
) -> None:
    """
    Print tasks as a table followed by how many of the user's tasks are shown.

    Args:
        user_email: Email of the signed-in user, shown in the header
        report_name: Sub header naming the listing
        tasks: The filtered and sorted tasks to show
        total: Number of tasks before filtering
        columns: Columns to print, in order
    """
    header(user_email, report_name)

    tasks_table = Table(box=box.SIMPLE)
    for column in columns:
        tasks_table.add_column(column)

    for task in tasks:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = str(ID_MAP_REPO.associate_id(task["id"]))
            elif column == "state":
                column_value = task_state(task)
            elif column == "title":
                column_value = dim_if_done(task, task["title"])
            elif column == "description":
                column_value = dim_if_done(task, task["description"] or "")
            elif column == "status":
                column_value = format_status(task)
            elif column == "due":
                column_value = format_due(task)
            elif column == "created":
                column_value = datetime_to_display_local_date_str(task["created_at"])
            row.append(column_value)
        tasks_table.add_row(*row)

    console = Console()
    if len(tasks) == 0:
        console.print(Padding("No tasks found", (1, 1)))
    else:
        console.print(tasks_table)
    console.print(Padding(f"Showing {len(tasks)} of {total} tasks", (0, 1)))


def single_task_view(user_email: Optional[str], task: Task) -> None:
    header(user_email, "task")

    task_table = Table(box=box.SIMPLE)
    task_table.add_column("property")
    task_table.add_column("value")

    task_table.add_row("id", str(ID_MAP_REPO.associate_id(task["id"])))
    task_table.add_row("title", escape(task["title"]))
    task_table.add_row("description", escape(task["description"] or ""))
    task_table.add_row("status", format_status(task))
    task_table.add_row("due", format_due(task))
    task_table.add_row(
        "created", datetime_to_display_local_date_str(task["created_at"])
    )
    task_table.add_row(
        "updated", datetime_to_display_local_date_str(task["updated_at"])
    )

    console = Console()
    console.print(task_table)
