# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from taskflow.terminal import auth, configuration, task, view
from taskflow.terminal.custom_typer import OrderedAliasedTyperGroup
from taskflow.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="TaskFlow - Task management with a timeline in the CLI",
    no_args_is_help=True,
)
app.add_typer(auth.app, name="auth, a", help="Sign up, sign in and manage your account")
app.add_typer(task.app, name="task, t", help="Create and change tasks")
app.add_typer(view.app, name="view, v", help="List, board and timeline views")
app.add_typer(configuration.app, name="config, c", help="Show and change settings")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in views",
        ),
    ] = False,
) -> None:
    """
    TaskFlow - Task management with a timeline in the CLI

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
