# SPDX-License-Identifier: MIT

from taskflow.model.task import TaskStatus

COMPLETED_TASK_COLOR = "bright_black"
OVERDUE_COLOR = "red"
CORRECTED_SPAN_COLOR = "yellow"

# Bar colors cycle through these so neighbouring bars stay distinguishable
BAR_COLORS = [
    "blue",
    "green",
    "magenta",
    "cyan",
    "dark_orange",
    "purple",
    "gold",
    "spring_green",
]


def status_color(status: TaskStatus) -> str:
    match status:
        case TaskStatus.TODO:
            return "blue"
        case TaskStatus.IN_PROGRESS:
            return "dark_orange"
        case TaskStatus.DONE:
            return "green"


def bar_color(index: int) -> str:
    return BAR_COLORS[index % len(BAR_COLORS)]
