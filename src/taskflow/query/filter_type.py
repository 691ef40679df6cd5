# SPDX-License-Identifier: MIT

from enum import StrEnum


class StatusFilter(StrEnum):
    ALL = "all"
    INCOMPLETE = "incomplete"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class SortOrder(StrEnum):
    CREATED_DESC = "created-desc"
    CREATED_ASC = "created-asc"
    DUE_ASC = "due-asc"
    DUE_DESC = "due-desc"
