# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from taskflow.model.entity_id import TaskId
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.time import date_from_str, month_from_str, today

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


def parse_date(date_param: Optional[str | int]) -> Optional[pendulum.Date]:
    """
    Parse a due date given on the command line.

    Accepts YYYY-MM-DD, today (t), tomorrow (o), yesterday (y) or a day offset
    from today such as 1 or -1.
    """
    if date_param is None:
        return None

    date = str(date_param)

    if re.match(r"^\d{4}-\d{2}-\d{2}$", date):
        try:
            return date_from_str(date)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {e}")

    if re.match(r"^-?\d+$", date):
        return today().add(days=int(date))

    if date == "today" or date == "t":
        return today()
    if date == "tomorrow" or date == "o":
        return today().add(days=1)
    if date == "yesterday" or date == "y":
        return today().subtract(days=1)
    raise typer.BadParameter("Incorrect date format")


def parse_month(month_param: Optional[str]) -> Optional[pendulum.Date]:
    if month_param is None:
        return None
    if not re.match(r"^\d{4}-\d{2}$", month_param):
        raise typer.BadParameter("Month must be in YYYY-MM format")
    try:
        return month_from_str(month_param)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid month: {e}")


def parse_task_id(id_param: str) -> TaskId:
    """
    Resolve the short id printed by the views, or a full task id, to a task id.
    """
    id_param = id_param.strip()
    if UUID_PATTERN.match(id_param.lower()):
        return id_param.lower()

    if not re.match(r"^\d+$", id_param):
        raise typer.BadParameter(f"Invalid task id: '{id_param}'")

    task_id = ID_MAP_REPO.get_real_id(int(id_param))
    if task_id is None:
        raise typer.BadParameter(
            f"No task with id {id_param}; list tasks to refresh the ids"
        )
    return task_id
