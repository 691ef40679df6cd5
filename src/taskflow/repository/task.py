# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

import pendulum
from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskflow import configuration, time
from taskflow.backend.port import TaskOrder
from taskflow.error import BackendError, StaleWriteError, TaskNotFoundError
from taskflow.model.entity_id import TaskId, UserId, generate_entity_id
from taskflow.model.task import Task, TaskChanges, TaskDraft, TaskStatus
from taskflow.query.filter_type import SortOrder
from taskflow.query.sort import sort_tasks

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    Task store keeping one YAML file per task under a directory per user.

    Writes go straight to disk so a failed write is reported to the caller
    of the mutation that caused it.
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self._data_dir = data_dir

    @property
    def data_dir(self) -> Path:
        if self._data_dir is not None:
            return self._data_dir
        return configuration.DATA_TASKS_DIR

    def __user_dir(self, user_id: UserId) -> Path:
        return self.data_dir / user_id

    def __task_path(self, task_id: TaskId, user_id: UserId) -> Path:
        return self.__user_dir(user_id) / f"{task_id}.yaml"

    def __read_task(self, file_path: Path) -> Task:
        try:
            raw_task = load(file_path.read_text(), Loader=Loader)
        except (OSError, YAMLError) as e:
            raise BackendError(f"Could not read task file {file_path.name}") from e
        return self.__convert_task_for_deserialization(raw_task)

    def __write_task(self, task: Task) -> None:
        serializable_task = self.__convert_task_for_serialization(deepcopy(task))
        file_path = self.__task_path(task["id"], task["user_id"])
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(dump(serializable_task, Dumper=Dumper))
        except OSError as e:
            raise BackendError(f"Could not write task {task['id']}") from e

    def __convert_task_for_serialization(self, task: Task) -> dict[str, Any]:
        serializable_task = cast(dict[str, Any], task)
        serializable_task["status"] = task["status"].value
        serializable_task["due_date"] = time.convert_date_to_iso(task["due_date"])
        serializable_task["created_at"] = time.datetime_to_iso_str(task["created_at"])
        serializable_task["updated_at"] = time.datetime_to_iso_str(task["updated_at"])
        return serializable_task

    def __convert_task_for_deserialization(self, task: dict[str, Any]) -> Task:
        deserializable_task = task
        deserializable_task["status"] = TaskStatus(deserializable_task["status"])
        deserializable_task["due_date"] = time.date_from_iso(
            deserializable_task["due_date"]
        )
        deserializable_task["created_at"] = time.datetime_from_str(
            deserializable_task["created_at"]
        )
        deserializable_task["updated_at"] = time.datetime_from_str(
            deserializable_task["updated_at"]
        )
        return cast(Task, deserializable_task)

    def __get_owned_task(self, task_id: TaskId, user_id: UserId) -> Task:
        file_path = self.__task_path(task_id, user_id)
        if not file_path.is_file():
            raise TaskNotFoundError(task_id)
        task = self.__read_task(file_path)
        if task["user_id"] != user_id:
            raise TaskNotFoundError(task_id)
        return task

    def list_tasks(
        self, user_id: UserId, order: Optional[TaskOrder] = None
    ) -> list[Task]:
        user_dir = self.__user_dir(user_id)
        if not user_dir.is_dir():
            return []

        tasks = [
            self.__read_task(file_path)
            for file_path in user_dir.iterdir()
            if file_path.suffix == ".yaml"
        ]
        tasks = [task for task in tasks if task["user_id"] == user_id]

        # Files have no order of their own; creation order stands in for insertion order
        tasks = sort_tasks(tasks, SortOrder.CREATED_ASC)
        match order:
            case TaskOrder.CREATED_DESC:
                tasks = sort_tasks(tasks, SortOrder.CREATED_DESC)
            case TaskOrder.DUE_ASC:
                tasks = sort_tasks(tasks, SortOrder.DUE_ASC)
        return tasks

    def insert_task(self, draft: TaskDraft) -> Task:
        now = time.now_utc()
        task: Task = {
            "id": generate_entity_id(),
            "user_id": draft["user_id"],
            "title": draft["title"],
            "description": draft["description"],
            "status": draft["status"],
            "due_date": draft["due_date"],
            "created_at": now,
            "updated_at": now,
        }
        self.__write_task(task)
        logger.info("inserted task %s for user %s", task["id"], task["user_id"])
        return deepcopy(task)

    def update_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        changes: TaskChanges,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> Task:
        task = self.__get_owned_task(task_id, user_id)
        if expected_updated_at is not None and task["updated_at"] != expected_updated_at:
            logger.warning("rejected stale update of task %s", task_id)
            raise StaleWriteError(task_id)

        if "title" in changes:
            task["title"] = changes["title"]
        if "description" in changes:
            task["description"] = changes["description"]
        if "status" in changes:
            task["status"] = changes["status"]
        if "due_date" in changes:
            task["due_date"] = changes["due_date"]
        task["updated_at"] = time.now_utc()

        self.__write_task(task)
        logger.info("updated task %s", task_id)
        return deepcopy(task)

    def delete_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> None:
        task = self.__get_owned_task(task_id, user_id)
        if expected_updated_at is not None and task["updated_at"] != expected_updated_at:
            logger.warning("rejected stale delete of task %s", task_id)
            raise StaleWriteError(task_id)

        try:
            self.__task_path(task_id, user_id).unlink()
        except OSError as e:
            raise BackendError(f"Could not delete task {task_id}") from e
        logger.info("deleted task %s", task_id)


TASK_REPO = TaskRepository()
