# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from taskflow.view.state import get_show_header


def header(user_email: Optional[str], sub_header: Optional[str] = None) -> None:
    """Print the application header with the signed-in user."""
    if not get_show_header():
        return

    additional = ""
    if sub_header is not None:
        additional = f"[sandy_brown]{sub_header}[/sandy_brown]"

    print(Padding("[dark_orange]taskflow[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(additional, (0, 1)))
    if user_email is not None:
        print(Padding(f"[plum1]{user_email}[/plum1]", (0, 1)))
