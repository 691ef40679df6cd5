# SPDX-License-Identifier: MIT

import pendulum
import pytest

from taskflow.backend.port import TaskOrder
from taskflow.error import StaleWriteError, TaskNotFoundError
from taskflow.model.task import TaskDraft, TaskStatus
from taskflow.repository.task import TaskRepository

from .fakes import USER_ID


def draft(title: str = "Task", due: pendulum.Date | None = None) -> TaskDraft:
    return {
        "user_id": USER_ID,
        "title": title,
        "description": "details",
        "status": TaskStatus.TODO,
        "due_date": due,
    }


def test_insert_then_list_round_trips_fields(task_repo: TaskRepository) -> None:
    due = pendulum.date(2024, 4, 10)
    inserted = task_repo.insert_task(draft(due=due))

    (listed,) = task_repo.list_tasks(USER_ID)

    assert listed == inserted
    assert listed["due_date"] == due
    assert listed["status"] == TaskStatus.TODO
    assert listed["created_at"] == listed["updated_at"]


def test_list_is_scoped_to_the_user(task_repo: TaskRepository) -> None:
    task_repo.insert_task(draft())

    assert task_repo.list_tasks("someone-else") == []


def test_list_orders(task_repo: TaskRepository) -> None:
    first = task_repo.insert_task(draft("first", pendulum.date(2024, 4, 20)))
    second = task_repo.insert_task(draft("second"))
    third = task_repo.insert_task(draft("third", pendulum.date(2024, 4, 2)))

    newest_first = task_repo.list_tasks(USER_ID, TaskOrder.CREATED_DESC)
    by_due = task_repo.list_tasks(USER_ID, TaskOrder.DUE_ASC)

    assert [t["id"] for t in newest_first] == [third["id"], second["id"], first["id"]]
    assert [t["id"] for t in by_due] == [third["id"], first["id"], second["id"]]


def test_update_applies_changes_and_bumps_version(task_repo: TaskRepository) -> None:
    task = task_repo.insert_task(draft())

    updated = task_repo.update_task(
        task["id"],
        USER_ID,
        {"status": TaskStatus.DONE, "due_date": None, "title": "Renamed"},
        task["updated_at"],
    )

    assert updated["status"] == TaskStatus.DONE
    assert updated["title"] == "Renamed"
    assert updated["updated_at"] >= task["updated_at"]
    assert task_repo.list_tasks(USER_ID) == [updated]


def test_update_with_outdated_version_is_rejected(task_repo: TaskRepository) -> None:
    task = task_repo.insert_task(draft())
    outdated = task["updated_at"].subtract(minutes=1)

    with pytest.raises(StaleWriteError):
        task_repo.update_task(task["id"], USER_ID, {"title": "x"}, outdated)

    assert task_repo.list_tasks(USER_ID) == [task]


def test_update_of_another_users_task_is_not_found(task_repo: TaskRepository) -> None:
    task = task_repo.insert_task(draft())

    with pytest.raises(TaskNotFoundError):
        task_repo.update_task(task["id"], "someone-else", {"title": "x"})


def test_delete(task_repo: TaskRepository) -> None:
    task = task_repo.insert_task(draft())

    task_repo.delete_task(task["id"], USER_ID, task["updated_at"])

    assert task_repo.list_tasks(USER_ID) == []
    with pytest.raises(TaskNotFoundError):
        task_repo.delete_task(task["id"], USER_ID)
