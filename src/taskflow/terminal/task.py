# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console

from taskflow.error import TaskFlowError
from taskflow.model.task import TaskChanges, TaskStatus
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.terminal.custom_typer import AliasedTyperGroup
from taskflow.terminal.parse import parse_date, parse_task_id
from taskflow.terminal.session import exit_with_error, load_controller, require_user
from taskflow.view.views import task as task_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DATE_HELP = "valid inputs: YYYY-MM-DD, today, yesterday, tomorrow, or day offset like 1, -1"


@app.command("add, a", no_args_is_help=True)
def add(
    title: str,
    description: Annotated[
        Optional[str], typer.Option("--description", "-d")
    ] = None,
    status: Annotated[
        TaskStatus, typer.Option("--status", "-s", case_sensitive=False)
    ] = TaskStatus.TODO,
    due: Annotated[
        Optional[pendulum.Date],
        typer.Option("--due", "-u", parser=parse_date, help=DATE_HELP),
    ] = None,
) -> None:
    user = require_user()
    controller = load_controller(user)

    try:
        task = controller.create(title, description, status, due)
    except TaskFlowError as e:
        exit_with_error(e)

    task_report.single_task_view(user["email"], task)


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: str,
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    description: Annotated[
        Optional[str], typer.Option("--description", "-d")
    ] = None,
    remove_description: Annotated[
        bool, typer.Option("--remove-description", "-rd")
    ] = False,
    status: Annotated[
        Optional[TaskStatus], typer.Option("--status", "-s", case_sensitive=False)
    ] = None,
    due: Annotated[
        Optional[pendulum.Date],
        typer.Option("--due", "-u", parser=parse_date, help=DATE_HELP),
    ] = None,
    remove_due: Annotated[bool, typer.Option("--remove-due", "-ru")] = False,
) -> None:
    task_id = parse_task_id(id)
    user = require_user()
    controller = load_controller(user)

    changes: TaskChanges = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if remove_description:
        changes["description"] = None
    if status is not None:
        changes["status"] = status
    if due is not None:
        changes["due_date"] = due
    if remove_due:
        changes["due_date"] = None

    if not changes:
        exit_with_error("Nothing to modify")

    try:
        task = controller.update(task_id, changes)
    except TaskFlowError as e:
        exit_with_error(e)

    task_report.single_task_view(user["email"], task)


@app.command("move, mv", no_args_is_help=True)
def move(
    id: str,
    status: Annotated[TaskStatus, typer.Argument(case_sensitive=False)],
) -> None:
    """Move a task to another status column."""
    task_id = parse_task_id(id)
    user = require_user()
    controller = load_controller(user)

    try:
        task = controller.change_status(task_id, status)
    except TaskFlowError as e:
        exit_with_error(e)

    task_report.single_task_view(user["email"], task)


@app.command("toggle, tg", no_args_is_help=True)
def toggle(id: str) -> None:
    """Mark a task done, or reopen a done task."""
    task_id = parse_task_id(id)
    user = require_user()
    controller = load_controller(user)

    try:
        task = controller.toggle_complete(task_id)
    except TaskFlowError as e:
        exit_with_error(e)

    task_report.single_task_view(user["email"], task)


@app.command("delete, del", no_args_is_help=True)
def delete(
    id: str,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    task_id = parse_task_id(id)
    user = require_user()
    controller = load_controller(user)

    task = controller.cache.get(task_id)
    if task is None:
        exit_with_error(f"Task {id} not found")
    if not yes:
        typer.confirm(f"Delete '{task['title']}'?", abort=True)

    try:
        controller.delete(task_id)
    except TaskFlowError as e:
        exit_with_error(e)

    Console().print(f"Deleted task {ID_MAP_REPO.associate_id(task_id)}")


@app.command("show, s", no_args_is_help=True)
def show(id: str) -> None:
    task_id = parse_task_id(id)
    user = require_user()
    controller = load_controller(user)

    task = controller.cache.get(task_id)
    if task is None:
        exit_with_error(f"Task {id} not found")
    task_report.single_task_view(user["email"], task)
