# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer

from taskflow.backend.port import TaskOrder
from taskflow.error import TaskFlowError
from taskflow.model.timeline import NoDueDatePolicy
from taskflow.query.filter import filter_tasks
from taskflow.query.filter_type import SortOrder, StatusFilter
from taskflow.query.sort import sort_tasks
from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.service.timeline import compute_timeline, month_window
from taskflow.terminal.custom_typer import AliasedTyperGroup
from taskflow.terminal.parse import parse_month
from taskflow.terminal.session import exit_with_error, load_controller, require_user
from taskflow.time import today
from taskflow.view.views.kanban import kanban_view
from taskflow.view.views.task import tasks_view
from taskflow.view.views.timeline import timeline_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("list, l")
def list_tasks(
    status: Annotated[
        StatusFilter, typer.Option("--status", "-s", case_sensitive=False)
    ] = StatusFilter.ALL,
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-q", help="Match title or description"),
    ] = None,
    sort: Annotated[
        Optional[SortOrder],
        typer.Option("--sort", "-o", case_sensitive=False),
    ] = None,
) -> None:
    config = CONFIGURATION_REPO.get_config()
    sort_order = sort if sort is not None else SortOrder(config["default_sort"])

    user = require_user()
    controller = load_controller(user)
    ID_MAP_REPO.clear_ids()

    all_tasks = controller.cache.tasks
    tasks = sort_tasks(filter_tasks(all_tasks, status, search), sort_order)
    tasks_view(user["email"], "tasks", tasks, len(all_tasks))


@app.command("kanban, k")
def kanban(
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-q", help="Match title or description"),
    ] = None,
) -> None:
    user = require_user()
    controller = load_controller(user, TaskOrder.CREATED_DESC)
    ID_MAP_REPO.clear_ids()

    kanban_view(user["email"], filter_tasks(controller.cache.tasks, search=search))


@app.command("timeline, tl")
def timeline(
    month: Annotated[
        Optional[pendulum.Date],
        typer.Option("--month", "-m", parser=parse_month, help="valid input: YYYY-MM"),
    ] = None,
    previous: Annotated[
        int, typer.Option("--previous", "-p", help="Months before --month")
    ] = 0,
    next: Annotated[int, typer.Option("--next", "-n", help="Months after --month")] = 0,
    no_due_date: Annotated[
        Optional[NoDueDatePolicy],
        typer.Option(
            "--no-due-date",
            case_sensitive=False,
            help="Where tasks without a due date end",
        ),
    ] = None,
    max_rows: Annotated[
        Optional[int], typer.Option("--max-rows", min=1, help="Packing row limit")
    ] = None,
    status: Annotated[
        StatusFilter, typer.Option("--status", "-s", case_sensitive=False)
    ] = StatusFilter.ALL,
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-q", help="Match title or description"),
    ] = None,
) -> None:
    config = CONFIGURATION_REPO.get_config()
    policy = (
        no_due_date
        if no_due_date is not None
        else NoDueDatePolicy(config["timeline_no_due_date"])
    )
    row_limit = max_rows if max_rows is not None else config.get("timeline_max_rows")

    shown_month = month if month is not None else today()
    shown_month = shown_month.add(months=next - previous)
    window = month_window(shown_month)

    user = require_user()
    controller = load_controller(user, TaskOrder.DUE_ASC)
    ID_MAP_REPO.clear_ids()

    tasks = filter_tasks(controller.cache.tasks, status, search)
    try:
        layout = compute_timeline(tasks, window, policy, max_rows=row_limit)
    except TaskFlowError as e:
        exit_with_error(e)

    unscheduled_tasks = (
        [task for task in tasks if task["due_date"] is None]
        if policy == NoDueDatePolicy.EXCLUDE
        else []
    )
    timeline_view(user["email"], layout, tasks, unscheduled_tasks)
