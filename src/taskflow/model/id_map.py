# SPDX-License-Identifier: MIT

from typing import TypedDict

from taskflow.model.entity_id import TaskId


class IdMap(TypedDict):
    """
    Short numeric ids shown in views, mapped to task ids and back.

    Example:

    Task with an id of "3f6c...".
    Synthetic id for that task is 7.

    real_task_id = id_map["synthetic_to_real"][7] # returns "3f6c..."
    """

    synthetic_to_real: dict[int, TaskId]
    real_to_synthetic: dict[TaskId, int]
