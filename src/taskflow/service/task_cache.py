# SPDX-License-Identifier: MIT

from types import MappingProxyType
from typing import Mapping, Optional, cast

from taskflow.model.entity_id import TaskId
from taskflow.model.mutation import (
    CreateMutation,
    DeleteMutation,
    MutationKind,
    Mutations,
    StatusChangeMutation,
    UpdateMutation,
)
from taskflow.model.task import Task

type TaskState = Mapping[TaskId, Task]


def reduce(state: TaskState, mutation: Mutations) -> TaskState:
    """
    Apply a mutation to a task state and return the new state.

    The input state is never modified, so any earlier state can be kept as a
    snapshot and restored later.
    """
    match mutation["kind"]:
        case MutationKind.CREATE:
            return reduce_create(state, cast(CreateMutation, mutation))
        case MutationKind.UPDATE:
            return reduce_update(state, cast(UpdateMutation, mutation))
        case MutationKind.DELETE:
            return reduce_delete(state, cast(DeleteMutation, mutation))
        case MutationKind.STATUS_CHANGE:
            return reduce_status_change(state, cast(StatusChangeMutation, mutation))
    raise ValueError(f"Unknown mutation kind: {mutation['kind']}")


def reduce_create(state: TaskState, mutation: CreateMutation) -> TaskState:
    # Newest first, like the list view's default order
    task = mutation["task"]
    new_state = {task["id"]: task}
    new_state.update((id, t) for id, t in state.items() if id != task["id"])
    return MappingProxyType(new_state)


def reduce_update(state: TaskState, mutation: UpdateMutation) -> TaskState:
    task = mutation["task"]
    if task["id"] not in state:
        return state
    return MappingProxyType(
        {id: task if id == task["id"] else t for id, t in state.items()}
    )


def reduce_delete(state: TaskState, mutation: DeleteMutation) -> TaskState:
    if mutation["task_id"] not in state:
        return state
    return MappingProxyType(
        {id: t for id, t in state.items() if id != mutation["task_id"]}
    )


def reduce_status_change(
    state: TaskState, mutation: StatusChangeMutation
) -> TaskState:
    task_id = mutation["task_id"]
    if task_id not in state:
        return state
    changed: Task = {
        **state[task_id],
        "status": mutation["status"],
        "updated_at": mutation["updated_at"],
    }
    return MappingProxyType(
        {id: changed if id == task_id else t for id, t in state.items()}
    )


class TaskCache:
    """Client-side cache of a user's tasks, keyed by task id in display order."""

    def __init__(self, tasks: Optional[list[Task]] = None) -> None:
        self._state: TaskState = MappingProxyType(
            {task["id"]: task for task in tasks or []}
        )

    @property
    def tasks(self) -> list[Task]:
        return list(self._state.values())

    def __len__(self) -> int:
        return len(self._state)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._state

    def get(self, task_id: TaskId) -> Optional[Task]:
        return self._state.get(task_id)

    def dispatch(self, mutation: Mutations) -> None:
        self._state = reduce(self._state, mutation)

    def snapshot(self) -> TaskState:
        return self._state

    def restore(self, snapshot: TaskState) -> None:
        self._state = snapshot
