# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from taskflow.model.entity_id import UserId


class User(TypedDict):
    id: UserId
    email: str
    confirmed_at: Optional[pendulum.DateTime]
    created_at: pendulum.DateTime


class Session(TypedDict):
    user: User
    access_token: str
    refresh_token: Optional[str]
    created_at: pendulum.DateTime


class SignUpResult(TypedDict):
    user: User
    # Only the local backend hands the code back; hosted providers email it.
    verification_code: Optional[str]
