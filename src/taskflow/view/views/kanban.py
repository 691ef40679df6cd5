# SPDX-License-Identifier: MIT

from itertools import zip_longest
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from taskflow.color import status_color
from taskflow.model.task import Task, TaskStatus
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.service.task import status_label
from taskflow.view.util import dim_if_done, format_due
from taskflow.view.views.header import header


def group_by_status(tasks: list[Task]) -> dict[TaskStatus, list[Task]]:
    grouped: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        grouped[task["status"]].append(task)
    return grouped


def kanban_view(user_email: Optional[str], tasks: list[Task]) -> None:
    header(user_email, "kanban")

    grouped = group_by_status(tasks)

    board = Table(box=box.SIMPLE, expand=True)
    for status in TaskStatus:
        color = status_color(status)
        board.add_column(
            f"[{color}]{status_label(status)}[/{color}] ({len(grouped[status])})",
            ratio=1,
        )

    for row in zip_longest(*(grouped[status] for status in TaskStatus)):
        board.add_row(*(_card(task) if task is not None else "" for task in row))

    console = Console()
    console.print(board)


def _card(task: Task) -> str:
    card = f"{ID_MAP_REPO.associate_id(task['id'])} {dim_if_done(task, task['title'])}"
    due = format_due(task)
    if due != "":
        card += f"\n{due}"
    return card
