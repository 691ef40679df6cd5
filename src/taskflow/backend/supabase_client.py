# SPDX-License-Identifier: MIT

"""Adapters driving a hosted Supabase project through the supabase client."""

import logging
from pathlib import Path
from typing import Any, Optional, cast

import pendulum
from postgrest.exceptions import APIError
from supabase import AuthError as SupabaseAuthError
from supabase import Client, ClientOptions, create_client
from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskflow import configuration, time
from taskflow.backend.port import TaskOrder
from taskflow.error import (
    AuthError,
    BackendError,
    ConfigurationError,
    StaleWriteError,
    TaskNotFoundError,
)
from taskflow.model.entity_id import TaskId, UserId
from taskflow.model.task import Task, TaskChanges, TaskDraft, TaskStatus
from taskflow.model.user import Session, SignUpResult, User

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"


def connect(url: Optional[str], key: Optional[str]) -> Client:
    missing = [
        name
        for name, value in (("SUPABASE_URL", url), ("SUPABASE_ANON_KEY", key))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing Supabase settings: {', '.join(missing)}. Set them with "
            "'taskflow config set' or in the environment."
        )
    logger.info("connecting to supabase at %s...", cast(str, url)[:30])
    return create_client(
        cast(str, url),
        cast(str, key),
        options=ClientOptions(storage=YamlAuthStorage()),  # type: ignore[arg-type]
    )


class YamlAuthStorage:
    """
    Key-value storage for the auth client, kept in a YAML file.

    Each command runs in a fresh process, so the PKCE code verifier written by
    sign-up or forgot-password must be on disk for verify and reset-password
    to exchange the emailed code.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.DATA_AUTH_STORAGE_PATH

    def __load(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        return load(self.path.read_text(), Loader=Loader) or {}

    def __save(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump(items, Dumper=Dumper))

    def get_item(self, key: str) -> Optional[str]:
        return self.__load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self.__load()
        items[key] = value
        self.__save(items)

    def remove_item(self, key: str) -> None:
        items = self.__load()
        if items.pop(key, None) is not None:
            self.__save(items)


def convert_row_to_task(row: dict[str, Any]) -> Task:
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "title": row["title"],
        "description": row.get("description"),
        "status": TaskStatus(row["status"]),
        "due_date": time.date_from_iso(row.get("due_date")),
        "created_at": time.datetime_from_str(row["created_at"]),
        "updated_at": time.datetime_from_str(row["updated_at"]),
    }


def convert_changes_to_row(changes: TaskChanges) -> dict[str, Any]:
    row: dict[str, Any] = {}
    if "title" in changes:
        row["title"] = changes["title"]
    if "description" in changes:
        row["description"] = changes["description"]
    if "status" in changes:
        row["status"] = changes["status"].value
    if "due_date" in changes:
        row["due_date"] = time.convert_date_to_iso(changes["due_date"])
    return row


class SupabaseTaskBackend:
    def __init__(self, client: Client) -> None:
        self._client = client

    def list_tasks(
        self, user_id: UserId, order: Optional[TaskOrder] = None
    ) -> list[Task]:
        query = self._client.table(TASKS_TABLE).select("*").eq("user_id", user_id)
        match order:
            case TaskOrder.CREATED_DESC:
                query = query.order("created_at", desc=True)
            case TaskOrder.DUE_ASC:
                query = query.order("due_date")
        try:
            response = query.execute()
        except APIError as e:
            logger.error("error fetching tasks: %s", e)
            raise BackendError(f"Could not load tasks: {e.message}") from e
        return [convert_row_to_task(row) for row in response.data]

    def insert_task(self, draft: TaskDraft) -> Task:
        row = {
            "user_id": draft["user_id"],
            "title": draft["title"],
            "description": draft["description"],
            "status": draft["status"].value,
            "due_date": time.convert_date_to_iso(draft["due_date"]),
        }
        try:
            response = self._client.table(TASKS_TABLE).insert(row).execute()
        except APIError as e:
            logger.error("error creating task: %s", e)
            raise BackendError(f"Failed to create task: {e.message}") from e
        return convert_row_to_task(response.data[0])

    def update_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        changes: TaskChanges,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> Task:
        row = convert_changes_to_row(changes)
        row["updated_at"] = time.datetime_to_iso_str(time.now_utc())
        query = (
            self._client.table(TASKS_TABLE)
            .update(row)
            .eq("id", task_id)
            .eq("user_id", user_id)
        )
        if expected_updated_at is not None:
            query = query.eq("updated_at", time.datetime_to_iso_str(expected_updated_at))
        try:
            response = query.execute()
        except APIError as e:
            logger.error("error updating task %s: %s", task_id, e)
            raise BackendError(f"Failed to update task: {e.message}") from e

        if not response.data:
            self.__raise_missing_or_stale(task_id, user_id)
        return convert_row_to_task(response.data[0])

    def delete_task(
        self,
        task_id: TaskId,
        user_id: UserId,
        expected_updated_at: Optional[pendulum.DateTime] = None,
    ) -> None:
        query = (
            self._client.table(TASKS_TABLE)
            .delete()
            .eq("id", task_id)
            .eq("user_id", user_id)
        )
        if expected_updated_at is not None:
            query = query.eq("updated_at", time.datetime_to_iso_str(expected_updated_at))
        try:
            response = query.execute()
        except APIError as e:
            logger.error("error deleting task %s: %s", task_id, e)
            raise BackendError(f"Failed to delete task: {e.message}") from e

        if not response.data:
            self.__raise_missing_or_stale(task_id, user_id)

    def __raise_missing_or_stale(self, task_id: TaskId, user_id: UserId) -> None:
        # No row matched: either it is gone or its version moved on
        try:
            response = (
                self._client.table(TASKS_TABLE)
                .select("id")
                .eq("id", task_id)
                .eq("user_id", user_id)
                .execute()
            )
        except APIError as e:
            raise BackendError(f"Could not check task {task_id}: {e.message}") from e
        if response.data:
            raise StaleWriteError(task_id)
        raise TaskNotFoundError(task_id)


class SupabaseAuthBackend:
    """
    Auth adapter over the Supabase auth client.

    The client keeps its session in memory only, so the tokens are stored in
    the session file and restored on the next invocation.
    """

    def __init__(self, client: Client, session_path: Optional[Path] = None) -> None:
        self._client = client
        self._session_path = session_path
        self._restored = False

    @property
    def session_path(self) -> Path:
        if self._session_path is not None:
            return self._session_path
        return configuration.DATA_SESSION_PATH

    def __restore_session(self) -> None:
        if self._restored or not self.session_path.is_file():
            return
        self._restored = True
        stored = load(self.session_path.read_text(), Loader=Loader)
        if stored is None:
            return
        try:
            self._client.auth.set_session(
                stored["access_token"], stored["refresh_token"]
            )
        except SupabaseAuthError as e:
            logger.warning("stored session rejected: %s", e)
            self.session_path.unlink()

    def __store_session(self, session: Any) -> Session:
        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        self.session_path.write_text(
            dump(
                {
                    "access_token": session.access_token,
                    "refresh_token": session.refresh_token,
                },
                Dumper=Dumper,
            )
        )
        self._restored = True
        return {
            "user": self.__convert_user(session.user),
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "created_at": time.now_utc(),
        }

    def __convert_user(self, user: Any) -> User:
        return {
            "id": user.id,
            "email": user.email or "",
            "confirmed_at": (
                pendulum.instance(user.email_confirmed_at)
                if user.email_confirmed_at is not None
                else None
            ),
            "created_at": pendulum.instance(user.created_at),
        }

    def sign_up(
        self, email: str, password: str, redirect_url: Optional[str] = None
    ) -> SignUpResult:
        credentials: dict[str, Any] = {"email": email, "password": password}
        if redirect_url is not None:
            credentials["options"] = {"email_redirect_to": redirect_url}
        try:
            response = self._client.auth.sign_up(credentials)  # type: ignore[arg-type]
        except SupabaseAuthError as e:
            logger.error("signup error: %s", e)
            raise AuthError(e.message) from e
        if response.user is None:
            raise AuthError("Sign up did not return a user")
        return {"user": self.__convert_user(response.user), "verification_code": None}

    def verify(self, code: str) -> Session:
        try:
            response = self._client.auth.exchange_code_for_session(
                {"auth_code": code}  # type: ignore[typeddict-item]
            )
        except SupabaseAuthError as e:
            logger.error("error exchanging code: %s", e)
            raise AuthError(e.message) from e
        if response.session is None:
            raise AuthError("No session created from code")
        return self.__store_session(response.session)

    def sign_in(self, email: str, password: str) -> Session:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as e:
            logger.error("authentication error: %s", e)
            raise AuthError(e.message) from e
        if response.session is None:
            raise AuthError("Sign in did not return a session")
        return self.__store_session(response.session)

    def current_user(self) -> Optional[User]:
        self.__restore_session()
        try:
            response = self._client.auth.get_user()
        except SupabaseAuthError as e:
            logger.info("no current user: %s", e)
            return None
        if response is None or response.user is None:
            return None
        return self.__convert_user(response.user)

    def sign_out(self) -> None:
        self.__restore_session()
        try:
            self._client.auth.sign_out()
        except SupabaseAuthError as e:
            raise AuthError(e.message) from e
        if self.session_path.is_file():
            self.session_path.unlink()

    def request_password_reset(
        self, email: str, redirect_url: Optional[str] = None
    ) -> Optional[str]:
        options = {"redirect_to": redirect_url} if redirect_url is not None else {}
        try:
            self._client.auth.reset_password_for_email(email, options)  # type: ignore[arg-type]
        except SupabaseAuthError as e:
            raise AuthError(e.message) from e
        return None

    def reset_password(self, code: str, new_password: str) -> Session:
        session = self.verify(code)
        try:
            self._client.auth.update_user({"password": new_password})
        except SupabaseAuthError as e:
            raise AuthError(e.message) from e
        return session
