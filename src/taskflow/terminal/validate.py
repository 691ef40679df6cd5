# SPDX-License-Identifier: MIT

import re

import typer

from taskflow.repository.user import MIN_PASSWORD_LENGTH

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(email: str) -> str:
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise typer.BadParameter("Please enter a valid email address")
    return email


def validate_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise typer.BadParameter(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return password


def validate_passwords_match(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise typer.BadParameter("Passwords do not match")
