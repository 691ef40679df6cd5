# SPDX-License-Identifier: MIT

from typing import Annotated, Literal, Optional

import typer
from rich.console import Console
from rich.table import Table

from taskflow import configuration
from taskflow.model.timeline import NoDueDatePolicy
from taskflow.query.filter_type import SortOrder
from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _mask(secret: Optional[str]) -> str:
    if secret is None:
        return "None"
    return secret[:6] + "…" if len(secret) > 6 else "…"


@app.command("show, sh")
def show() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("backend", config["backend"])
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("supabase_url", config["supabase_url"] or "None")
    table.add_row("supabase_key", _mask(config["supabase_key"]))
    table.add_row("redirect_url", config["redirect_url"] or "None")
    table.add_row(
        "show_header", "✓ Enabled" if config["show_header"] else "✗ Disabled"
    )
    table.add_row("default_sort", config["default_sort"])
    table.add_row("timeline_no_due_date", config["timeline_no_due_date"])
    table.add_row(
        "timeline_max_rows", str(config.get("timeline_max_rows") or "Unlimited")
    )

    console.print(table)
    console.print()
    console.print(f"Config file: {configuration.APP_CONFIG_PATH}")
    console.print(f"Log directory: {configuration.LOG_PATH}")


@app.command("set, s")
def set(
    backend: Annotated[
        Optional[str],
        typer.Option("--backend", help="Task and auth store: local or supabase"),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Directory for the local store"),
    ] = None,
    remove_data_path: Annotated[
        bool, typer.Option("--remove-data-path", help="Use the default data path")
    ] = False,
    supabase_url: Annotated[Optional[str], typer.Option("--supabase-url")] = None,
    supabase_key: Annotated[
        Optional[str], typer.Option("--supabase-key", help="Anon key of the project")
    ] = None,
    redirect_url: Annotated[
        Optional[str],
        typer.Option("--redirect-url", help="Where confirmation emails link to"),
    ] = None,
    show_header: Annotated[
        Optional[bool], typer.Option("--show-header/--no-show-header")
    ] = None,
    default_sort: Annotated[
        Optional[SortOrder],
        typer.Option("--default-sort", case_sensitive=False),
    ] = None,
    timeline_no_due_date: Annotated[
        Optional[NoDueDatePolicy],
        typer.Option("--timeline-no-due-date", case_sensitive=False),
    ] = None,
    timeline_max_rows: Annotated[
        Optional[int], typer.Option("--timeline-max-rows", min=1)
    ] = None,
    remove_timeline_max_rows: Annotated[
        bool, typer.Option("--remove-timeline-max-rows")
    ] = False,
) -> None:
    """Update configuration settings."""
    backend_type: Optional[Literal["local", "supabase"]] = None
    if backend is not None:
        if backend not in ("local", "supabase"):
            raise typer.BadParameter("Backend must be 'local' or 'supabase'")
        backend_type = "local" if backend == "local" else "supabase"

    CONFIGURATION_REPO.update_config(
        backend=backend_type,
        data_path=data_path,
        remove_data_path=remove_data_path,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        redirect_url=redirect_url,
        show_header=show_header,
        default_sort=default_sort.value if default_sort is not None else None,
        timeline_no_due_date=(
            timeline_no_due_date.value if timeline_no_due_date is not None else None
        ),
        timeline_max_rows=timeline_max_rows,
        remove_timeline_max_rows=remove_timeline_max_rows,
    )
    show()
