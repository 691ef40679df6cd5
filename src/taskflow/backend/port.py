# SPDX-License-Identifier: MIT

"""
Ports for the hosted collaborators TaskFlow delegates to.

Commands and services depend on these Protocols rather than on a concrete
store, so the local YAML store and the Supabase client are interchangeable.
"""

from enum import StrEnum
from typing import Optional, Protocol

import pendulum

from taskflow.model.entity_id import TaskId, UserId
from taskflow.model.task import Task, TaskChanges, TaskDraft
from taskflow.model.user import Session, SignUpResult, User


class TaskOrder(StrEnum):
    CREATED_DESC = "created-desc"
    DUE_ASC = "due-asc"


class TaskBackend(Protocol):
    def list_tasks(
        self, user_id: UserId, order: Optional[TaskOrder] = None
    ) -> list[Task]: ...

    def insert_task(self, draft: TaskDraft) -> Task: ...

    def update_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        changes: TaskChanges,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> Task:
        """
        Update the task owned by ``user_id``.

        Raises TaskNotFoundError when no such task exists for the user and
        StaleWriteError when ``expected_updated_at`` no longer matches.
        """
        ...

    def delete_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> None: ...


class AuthBackend(Protocol):
    def sign_up(
        self, email: str, password: str, redirect_url: Optional[str] = None
    ) -> SignUpResult: ...

    def verify(self, code: str) -> Session:
        """Exchange a verification code for a session."""
        ...

    def sign_in(self, email: str, password: str) -> Session: ...

    def current_user(self) -> Optional[User]: ...

    def sign_out(self) -> None: ...

    def request_password_reset(
        self, email: str, redirect_url: Optional[str] = None
    ) -> Optional[str]: ...

    def reset_password(self, code: str, new_password: str) -> Session: ...
