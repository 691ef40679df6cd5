# SPDX-License-Identifier: MIT

import logging
from typing import NoReturn, Optional

import typer

from taskflow.backend.factory import get_auth_backend, get_task_backend
from taskflow.backend.port import TaskOrder
from taskflow.error import TaskFlowError
from taskflow.model.user import User
from taskflow.service.optimistic import OptimisticUpdateController
from taskflow.service.task_cache import TaskCache

logger = logging.getLogger(__name__)


def exit_with_error(error: TaskFlowError | str) -> NoReturn:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def require_user() -> User:
    """Get the signed-in user or exit with a hint to sign in."""
    try:
        user = get_auth_backend().current_user()
    except TaskFlowError as e:
        exit_with_error(e)
    if user is None:
        exit_with_error("Not signed in. Run 'taskflow auth sign-in' first.")
    return user


def load_controller(
    user: User, order: Optional[TaskOrder] = TaskOrder.CREATED_DESC
) -> OptimisticUpdateController:
    """Load the user's tasks into a cache and wrap it in a controller."""
    try:
        backend = get_task_backend()
        tasks = backend.list_tasks(user["id"], order)
    except TaskFlowError as e:
        exit_with_error(e)
    logger.debug("loaded %d tasks for user %s", len(tasks), user["id"])
    return OptimisticUpdateController(TaskCache(tasks), backend, user["id"])
