# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer
import typer.core


class AliasedTyperGroup(typer.core.TyperGroup):
    """TyperGroup resolving comma-separated command aliases such as "task, t"."""

    _CMD_SPLIT_P = re.compile(r" ?, ?")

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd_name = self._group_cmd_name(cmd_name)
        return super().get_command(ctx, cmd_name)

    def _group_cmd_name(self, default_name: str) -> str:
        for cmd in self.commands.values():
            name = cmd.name
            if name and default_name in self._CMD_SPLIT_P.split(name):
                return name
        return default_name


class OrderedAliasedTyperGroup(AliasedTyperGroup):
    """Top level group listing command groups in workflow order in its help."""

    COMMAND_ORDER = ["auth, a", "task, t", "view, v", "config, c"]

    def list_commands(self, ctx: click.Context) -> list[str]:
        result = [name for name in self.COMMAND_ORDER if name in self.commands]
        result += [name for name in self.commands if name not in result]
        return result
