# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich.console import Console
from rich.padding import Padding
from rich.text import Text

from taskflow.color import CORRECTED_SPAN_COLOR, bar_color
from taskflow.model.entity_id import TaskId
from taskflow.model.task import Task
from taskflow.model.timeline import TaskBar, TimelineLayout
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.service.timeline import DAYS_PER_WEEK, bars_by_week
from taskflow.view.util import truncate
from taskflow.view.views.header import header

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def timeline_view(
    user_email: Optional[str],
    layout: TimelineLayout,
    tasks: list[Task],
    unscheduled_tasks: list[Task] = [],
    day_width: int = 10,
) -> None:
    """
    Display a month of tasks as bars on a week grid.

    Each week is a day-number line followed by one line per packing row. Bars
    are placed from their left and width percentages, so a week is
    ``7 * day_width`` characters wide. Bars that carry on into the previous or
    next week are drawn with an open end.

    Args:
        user_email: Email of the signed-in user, shown in the header
        layout: The computed layout for the month
        tasks: The tasks the layout was computed from, for titles
        unscheduled_tasks: Tasks without a due date left off the grid
        day_width: Characters per day column
    """
    window = layout["window"]
    header(user_email, "timeline")

    console = Console()
    console.print(
        Padding(f"[bold]{window['month'].format('MMMM YYYY')}[/bold]", (1, 1, 0, 1))
    )

    tasks_by_id = {task["id"]: task for task in tasks}
    colors = _bar_colors(layout)
    week_width = DAYS_PER_WEEK * day_width

    lines: list[Text] = [
        Text("".join(name.ljust(day_width) for name in WEEKDAY_NAMES), style="bold")
    ]
    for week, bars in bars_by_week(layout).items():
        week_start = window["start"].add(days=week * DAYS_PER_WEEK)
        lines.append(_day_numbers_line(week_start, window["month"], day_width))

        rows = sorted({bar["row"] for bar in bars})
        for row in rows:
            row_bars = sorted(
                (bar for bar in bars if bar["row"] == row),
                key=lambda bar: bar["start_day"],
            )
            lines.append(
                _bar_line(row_bars, tasks_by_id, colors, week_width, layout)
            )
        lines.append(Text(""))

    for line in lines:
        console.print(Padding(line, (0, 1)))

    if layout["corrected_task_ids"]:
        corrected = ", ".join(
            str(ID_MAP_REPO.associate_id(task_id))
            for task_id in layout["corrected_task_ids"]
        )
        console.print(
            Padding(
                f"[{CORRECTED_SPAN_COLOR}]Due before created, shown reversed: "
                f"{corrected}[/{CORRECTED_SPAN_COLOR}]",
                (0, 1),
            )
        )

    if unscheduled_tasks:
        console.print(Padding("[bold]Tasks without due dates[/bold]", (1, 1, 0, 1)))
        for task in unscheduled_tasks:
            line = Text(f"{ID_MAP_REPO.associate_id(task['id'])} ")
            line.append(task["title"])
            console.print(Padding(line, (0, 1)))


def _bar_colors(layout: TimelineLayout) -> dict[TaskId, str]:
    colors: dict[TaskId, str] = {}
    for bar in layout["bars"]:
        if bar["task_id"] not in colors:
            colors[bar["task_id"]] = bar_color(len(colors))
    return colors


def _day_numbers_line(
    week_start: pendulum.Date, month: pendulum.Date, day_width: int
) -> Text:
    line = Text()
    for offset in range(DAYS_PER_WEEK):
        day = week_start.add(days=offset)
        style = "" if day.month == month.month else "bright_black"
        line.append(str(day.day).ljust(day_width), style=style)
    return line


def _bar_line(
    bars: list[TaskBar],
    tasks_by_id: dict[TaskId, Task],
    colors: dict[TaskId, str],
    week_width: int,
    layout: TimelineLayout,
) -> Text:
    line = Text()
    cursor = 0
    for bar in bars:
        start_column = round(bar["left_percent"] / 100 * week_width)
        width = round(bar["width_percent"] / 100 * week_width)
        if start_column > cursor:
            line.append(" " * (start_column - cursor))

        line.append(
            _bar_label(bar, tasks_by_id, width),
            style=_bar_style(bar, colors, layout),
        )
        cursor = start_column + width
    return line


def _bar_label(bar: TaskBar, tasks_by_id: dict[TaskId, Task], width: int) -> str:
    task = tasks_by_id.get(bar["task_id"])
    title = task["title"] if task is not None else ""
    left = "◀" if bar["continues_before"] else "["
    right = "▶" if bar["continues_after"] else "]"
    label = f"{ID_MAP_REPO.associate_id(bar['task_id'])} {title}"
    inner_width = max(width - 2, 0)
    return f"{left}{truncate(label, inner_width).ljust(inner_width)}{right}"[:width]


def _bar_style(bar: TaskBar, colors: dict[TaskId, str], layout: TimelineLayout) -> str:
    if bar["task_id"] in layout["corrected_task_ids"]:
        return f"black on {CORRECTED_SPAN_COLOR}"
    return f"white on {colors[bar['task_id']]}"
