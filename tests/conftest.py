# SPDX-License-Identifier: MIT

import itertools
from pathlib import Path
from typing import Optional

import pendulum
import pytest

from taskflow import configuration
from taskflow.model.task import Task, TaskStatus
from taskflow.model.user import User
from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.repository.task import TaskRepository
from taskflow.repository.user import AUTH_REPO, AuthRepository
from taskflow.view import state as view_state

from .fakes import USER_ID, TaskFactory


@pytest.fixture()
def make_task() -> TaskFactory:
    """
    Build tasks created at noon UTC on a given day.

    Timeline tests pass ``tz="UTC"`` so the creation day does not depend on
    the machine's time zone.
    """
    counter = itertools.count(1)

    def _make(
        title: str = "Task",
        created: str = "2024-04-01",
        due: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
        description: Optional[str] = None,
        user_id: str = USER_ID,
        task_id: Optional[str] = None,
    ) -> Task:
        number = next(counter)
        created_day = pendulum.Date.fromisoformat(created)
        created_at = pendulum.datetime(
            created_day.year, created_day.month, created_day.day, 12, tz="UTC"
        ).add(seconds=number)
        return {
            "id": task_id if task_id is not None else f"task-{number}",
            "user_id": user_id,
            "title": title,
            "description": description,
            "status": status,
            "due_date": pendulum.Date.fromisoformat(due) if due is not None else None,
            "created_at": created_at,
            "updated_at": created_at,
        }

    return _make


@pytest.fixture()
def task_repo(tmp_path: Path) -> TaskRepository:
    return TaskRepository(tmp_path / "tasks")


@pytest.fixture()
def auth_repo(tmp_path: Path) -> AuthRepository:
    return AuthRepository(tmp_path / "users.yaml", tmp_path / "session.yaml")


@pytest.fixture()
def isolated_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point configuration and data paths at a temporary directory."""
    data_path = tmp_path / "data"
    monkeypatch.setattr(configuration, "CONFIG_PATH", tmp_path / "config")
    monkeypatch.setattr(
        configuration, "APP_CONFIG_PATH", tmp_path / "config" / "config.yaml"
    )
    monkeypatch.setattr(configuration, "DATA_PATH", data_path)
    monkeypatch.setattr(configuration, "DATA_TASKS_DIR", data_path / "tasks")
    monkeypatch.setattr(configuration, "DATA_USERS_PATH", data_path / "users.yaml")
    monkeypatch.setattr(configuration, "DATA_SESSION_PATH", data_path / "session.yaml")
    monkeypatch.setattr(
        configuration, "DATA_AUTH_STORAGE_PATH", data_path / "auth_storage.yaml"
    )
    monkeypatch.setattr(configuration, "DATA_ID_MAP_PATH", data_path / "id_map.yaml")

    monkeypatch.setattr(CONFIGURATION_REPO, "_config", None)
    monkeypatch.setattr(CONFIGURATION_REPO, "is_dirty", False)
    monkeypatch.setattr(ID_MAP_REPO, "_id_map", None)
    monkeypatch.setattr(ID_MAP_REPO, "is_dirty", False)
    view_state.set_show_header(True)
    return tmp_path


@pytest.fixture()
def signed_in(isolated_app: Path) -> User:
    result = AUTH_REPO.sign_up("ada@example.com", "secret1")
    assert result["verification_code"] is not None
    return AUTH_REPO.verify(result["verification_code"])["user"]
