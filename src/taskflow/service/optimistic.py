# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Optional, cast

import pendulum

from taskflow.backend.port import TaskBackend
from taskflow.error import TaskNotFoundError
from taskflow.model.entity_id import TaskId, UserId
from taskflow.model.mutation import MutationKind, Mutations
from taskflow.model.task import Task, TaskChanges, TaskStatus
from taskflow.service.task import build_task_draft, validate_changes
from taskflow.service.task_cache import TaskCache
from taskflow.time import now_utc

logger = logging.getLogger(__name__)


class OptimisticUpdateController:
    """
    Apply task mutations to the cache first, then confirm them with the backend.

    Every write is a single attempt scoped by task id and owning user id and
    carries the cached ``updated_at`` as the expected version. When the write
    fails, the cache is restored to its snapshot from before the mutation and
    the error is raised to the caller. When it succeeds, the cached task is
    replaced by the row the backend returned.
    """

    def __init__(self, cache: TaskCache, backend: TaskBackend, user_id: UserId) -> None:
        self._cache = cache
        self._backend = backend
        self._user_id = user_id

    @property
    def cache(self) -> TaskCache:
        return self._cache

    def create(
        self,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
        due_date: Optional[pendulum.Date] = None,
    ) -> Task:
        draft = build_task_draft(self._user_id, title, description, status, due_date)
        # The backend assigns the id, so there is nothing to show before it answers
        task = self._backend.insert_task(draft)
        logger.info("created task %s", task["id"])
        self._cache.dispatch({"kind": MutationKind.CREATE, "task": task})
        return task

    def update(self, task_id: TaskId, changes: TaskChanges) -> Task:
        task = self._require(task_id)
        validated = validate_changes(changes)
        optimistic_task = cast(Task, {**task, **validated, "updated_at": now_utc()})
        confirmed = self._apply(
            {"kind": MutationKind.UPDATE, "task": optimistic_task},
            lambda: self._backend.update_task(
                task_id, self._user_id, validated, task["updated_at"]
            ),
        )
        return cast(Task, confirmed)

    def change_status(self, task_id: TaskId, status: TaskStatus) -> Task:
        task = self._require(task_id)
        if task["status"] == status:
            return task
        confirmed = self._apply(
            {
                "kind": MutationKind.STATUS_CHANGE,
                "task_id": task_id,
                "status": status,
                "updated_at": now_utc(),
            },
            lambda: self._backend.update_task(
                task_id, self._user_id, {"status": status}, task["updated_at"]
            ),
        )
        return cast(Task, confirmed)

    def toggle_complete(self, task_id: TaskId) -> Task:
        task = self._require(task_id)
        new_status = (
            TaskStatus.TODO if task["status"] == TaskStatus.DONE else TaskStatus.DONE
        )
        return self.change_status(task_id, new_status)

    def delete(self, task_id: TaskId) -> None:
        task = self._require(task_id)
        self._apply(
            {"kind": MutationKind.DELETE, "task_id": task_id},
            lambda: self._backend.delete_task(
                task_id, self._user_id, task["updated_at"]
            ),
        )

    def _require(self, task_id: TaskId) -> Task:
        task = self._cache.get(task_id)
        if task is None:
            logger.error("task %s not found in cache", task_id)
            raise TaskNotFoundError(task_id)
        return task

    def _apply(
        self, mutation: Mutations, write: Callable[[], Optional[Task]]
    ) -> Optional[Task]:
        snapshot = self._cache.snapshot()
        self._cache.dispatch(mutation)

        try:
            confirmed = write()
        except Exception as e:
            logger.warning(
                "%s write failed, rolling back: %s", mutation["kind"], e
            )
            self._cache.restore(snapshot)
            raise

        logger.info("%s confirmed", mutation["kind"])
        if confirmed is not None:
            self._cache.dispatch({"kind": MutationKind.UPDATE, "task": confirmed})
        return confirmed
