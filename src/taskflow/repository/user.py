# SPDX-License-Identifier: MIT

import hashlib
import hmac
import logging
import secrets
from pathlib import Path
from typing import Any, Optional

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskflow import configuration, time
from taskflow.error import AuthError, BackendError
from taskflow.model.entity_id import generate_entity_id
from taskflow.model.user import Session, SignUpResult, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PASSWORD_HASH_ITERATIONS = 120_000


def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode(), bytes.fromhex(salt), PASSWORD_HASH_ITERATIONS
    ).hex()


class AuthRepository:
    """
    Local stand-in for the hosted auth provider.

    Users live in a single YAML file, the signed-in session in another.
    Verification and reset codes are handed back to the caller instead of
    being emailed.
    """

    def __init__(
        self, users_path: Optional[Path] = None, session_path: Optional[Path] = None
    ) -> None:
        self._users_path = users_path
        self._session_path = session_path

    @property
    def users_path(self) -> Path:
        if self._users_path is not None:
            return self._users_path
        return configuration.DATA_USERS_PATH

    @property
    def session_path(self) -> Path:
        if self._session_path is not None:
            return self._session_path
        return configuration.DATA_SESSION_PATH

    def __read_yaml(self, file_path: Path) -> Any:
        if not file_path.is_file():
            return None
        try:
            return load(file_path.read_text(), Loader=Loader)
        except (OSError, YAMLError) as e:
            raise BackendError(f"Could not read {file_path.name}") from e

    def __write_yaml(self, file_path: Path, data: Any) -> None:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(dump(data, Dumper=Dumper))
        except OSError as e:
            raise BackendError(f"Could not write {file_path.name}") from e

    def __load_records(self) -> list[dict[str, Any]]:
        data = self.__read_yaml(self.users_path)
        if data is None:
            return []
        return list(data["users"])

    def __save_records(self, records: list[dict[str, Any]]) -> None:
        self.__write_yaml(self.users_path, {"users": records})

    def __find_record(
        self, records: list[dict[str, Any]], key: str, value: str
    ) -> Optional[dict[str, Any]]:
        for record in records:
            if record.get(key) == value:
                return record
        return None

    def __convert_record_to_user(self, record: dict[str, Any]) -> User:
        return {
            "id": record["id"],
            "email": record["email"],
            "confirmed_at": time.datetime_from_str_optional(record["confirmed_at"]),
            "created_at": time.datetime_from_str(record["created_at"]),
        }

    def __start_session(self, record: dict[str, Any]) -> Session:
        now = time.now_utc()
        session: Session = {
            "user": self.__convert_record_to_user(record),
            "access_token": secrets.token_urlsafe(32),
            "refresh_token": None,
            "created_at": now,
        }
        self.__write_yaml(
            self.session_path,
            {
                "user_id": record["id"],
                "access_token": session["access_token"],
                "created_at": time.datetime_to_iso_str(now),
            },
        )
        logger.info("session started for user %s", record["id"])
        return session

    def sign_up(
        self, email: str, password: str, redirect_url: Optional[str] = None
    ) -> SignUpResult:
        email = email.strip().lower()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )

        records = self.__load_records()
        if self.__find_record(records, "email", email) is not None:
            raise AuthError("User already registered")

        salt = secrets.token_hex(16)
        code = secrets.token_urlsafe(16)
        record: dict[str, Any] = {
            "id": generate_entity_id(),
            "email": email,
            "password_salt": salt,
            "password_hash": hash_password(password, salt),
            "confirmed_at": None,
            "created_at": time.datetime_to_iso_str(time.now_utc()),
            "verification_code": code,
            "reset_code": None,
        }
        records.append(record)
        self.__save_records(records)
        logger.info("signed up user %s", record["id"])
        return {"user": self.__convert_record_to_user(record), "verification_code": code}

    def verify(self, code: str) -> Session:
        records = self.__load_records()
        record = self.__find_record(records, "verification_code", code)
        if record is None:
            logger.warning("verification with unknown code")
            raise AuthError("Verification code is invalid or has expired")

        record["confirmed_at"] = time.datetime_to_iso_str(time.now_utc())
        record["verification_code"] = None
        self.__save_records(records)
        return self.__start_session(record)

    def sign_in(self, email: str, password: str) -> Session:
        records = self.__load_records()
        record = self.__find_record(records, "email", email.strip().lower())
        if record is None or not hmac.compare_digest(
            record["password_hash"], hash_password(password, record["password_salt"])
        ):
            logger.warning("failed sign in")
            raise AuthError("Invalid login credentials")
        if record["confirmed_at"] is None:
            raise AuthError("Email not confirmed")
        return self.__start_session(record)

    def current_user(self) -> Optional[User]:
        """
        Return the user named by the session file.

        The stored access token is not checked. The local store is single-user
        and lives in the user's own data directory, so whoever can edit the
        session file can already read every task file.
        """
        session_data = self.__read_yaml(self.session_path)
        if session_data is None:
            return None
        record = self.__find_record(
            self.__load_records(), "id", session_data["user_id"]
        )
        if record is None:
            return None
        return self.__convert_record_to_user(record)

    def sign_out(self) -> None:
        if self.session_path.is_file():
            try:
                self.session_path.unlink()
            except OSError as e:
                raise BackendError("Could not remove the session") from e
        logger.info("signed out")

    def request_password_reset(
        self, email: str, redirect_url: Optional[str] = None
    ) -> Optional[str]:
        records = self.__load_records()
        record = self.__find_record(records, "email", email.strip().lower())
        if record is None:
            # Unknown addresses look the same as known ones to the caller
            logger.info("password reset requested for unknown email")
            return None

        code = secrets.token_urlsafe(16)
        record["reset_code"] = code
        self.__save_records(records)
        # No mail is sent locally; the log file is the only place the code appears
        logger.info("password reset code for user %s: %s", record["id"], code)
        return code

    def reset_password(self, code: str, new_password: str) -> Session:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )

        records = self.__load_records()
        record = self.__find_record(records, "reset_code", code)
        if record is None:
            raise AuthError("Reset code is invalid or has expired")

        salt = secrets.token_hex(16)
        record["password_salt"] = salt
        record["password_hash"] = hash_password(new_password, salt)
        record["reset_code"] = None
        if record["confirmed_at"] is None:
            record["confirmed_at"] = time.datetime_to_iso_str(time.now_utc())
        self.__save_records(records)
        logger.info("password reset for user %s", record["id"])
        return self.__start_session(record)


AUTH_REPO = AuthRepository()
