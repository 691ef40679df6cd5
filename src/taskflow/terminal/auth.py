# SPDX-License-Identifier: MIT

from typing import Annotated

import typer
from rich.console import Console

from taskflow import configuration
from taskflow.backend.factory import get_auth_backend, get_redirect_url
from taskflow.error import TaskFlowError
from taskflow.logging_setup import LOG_FILE_NAME
from taskflow.model.user import Session
from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.repository.id_map import ID_MAP_REPO
from taskflow.terminal.custom_typer import AliasedTyperGroup
from taskflow.terminal.session import exit_with_error, require_user
from taskflow.terminal.validate import (
    validate_email,
    validate_password,
    validate_passwords_match,
)
from taskflow.view.views.header import header

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

console = Console()


def _signed_in(session: Session) -> None:
    # Short ids belong to the previous user's listing
    ID_MAP_REPO.clear_ids()
    header(session["user"]["email"], "signed in")
    console.print(f"Signed in as [bold]{session['user']['email']}[/bold]")


@app.command("sign-up, su", no_args_is_help=True)
def sign_up(
    email: Annotated[str, typer.Argument(callback=validate_email)],
    password: Annotated[
        str,
        typer.Option(
            "--password",
            "-p",
            prompt=True,
            hide_input=True,
            callback=validate_password,
        ),
    ],
    confirm_password: Annotated[
        str,
        typer.Option(
            "--confirm-password",
            "-cp",
            prompt="Confirm password",
            hide_input=True,
        ),
    ],
) -> None:
    """Create an account; it must be verified before signing in."""
    validate_passwords_match(password, confirm_password)

    try:
        result = get_auth_backend().sign_up(email, password, get_redirect_url())
    except TaskFlowError as e:
        exit_with_error(e)

    console.print(f"Check {result['user']['email']} to confirm your account.")
    if result["verification_code"] is not None:
        console.print(
            f"Verification code: [bold]{result['verification_code']}[/bold] "
            f"(taskflow auth verify {result['verification_code']})"
        )


@app.command("verify, ve", no_args_is_help=True)
def verify(code: str) -> None:
    """Exchange a verification code for a session."""
    try:
        session = get_auth_backend().verify(code)
    except TaskFlowError as e:
        exit_with_error(e)
    _signed_in(session)


@app.command("sign-in, si", no_args_is_help=True)
def sign_in(
    email: Annotated[str, typer.Argument(callback=validate_email)],
    password: Annotated[
        str, typer.Option("--password", "-p", prompt=True, hide_input=True)
    ],
) -> None:
    try:
        session = get_auth_backend().sign_in(email, password)
    except TaskFlowError as e:
        exit_with_error(e)
    _signed_in(session)


@app.command("sign-out, so")
def sign_out() -> None:
    try:
        get_auth_backend().sign_out()
    except TaskFlowError as e:
        exit_with_error(e)
    ID_MAP_REPO.clear_ids()
    console.print("Signed out")


@app.command("whoami, w")
def whoami() -> None:
    user = require_user()
    console.print(user["email"])


@app.command("forgot-password, fp", no_args_is_help=True)
def forgot_password(
    email: Annotated[str, typer.Argument(callback=validate_email)],
) -> None:
    """Request a password reset code."""
    try:
        get_auth_backend().request_password_reset(email, get_redirect_url())
    except TaskFlowError as e:
        exit_with_error(e)

    # Identical output whether or not the account exists
    console.print("If an account exists for that email, a reset link has been sent.")
    if CONFIGURATION_REPO.get_config()["backend"] == "local":
        console.print(
            f"The local store writes reset codes to {configuration.LOG_PATH / LOG_FILE_NAME}"
        )


@app.command("reset-password, rp", no_args_is_help=True)
def reset_password(
    code: str,
    password: Annotated[
        str,
        typer.Option(
            "--password",
            "-p",
            prompt="New password",
            hide_input=True,
            callback=validate_password,
        ),
    ],
    confirm_password: Annotated[
        str,
        typer.Option(
            "--confirm-password",
            "-cp",
            prompt="Confirm password",
            hide_input=True,
        ),
    ],
) -> None:
    validate_passwords_match(password, confirm_password)

    try:
        session = get_auth_backend().reset_password(code, password)
    except TaskFlowError as e:
        exit_with_error(e)
    _signed_in(session)
