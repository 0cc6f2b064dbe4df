"""
This module provides custom click command line parameters for column definitions and
column assignments, as well as an ordered command group class which prints its help
output in sections.
"""
from __future__ import annotations

import ast
from typing import Any

import click

from .output import warn


# ==== Custom parameter types ==========================================================

# A custom parameter:
# * needs a name
# * needs to pass through None unchanged
# * needs to convert from a string
# * needs to convert its result type through unchanged (eg: needs to be idempotent)
# * needs to be able to deal with param and context being None. This can be the case
#   when the object is used with prompt inputs.


def parse_value(text: str) -> Any:
    """
    Interprets a command line value as a Python literal if it is a number or a quoted
    string and as a plain string otherwise.

    :param text: Value from the command line.
    :returns: Parsed value.
    """
    try:
        value = ast.literal_eval(text)
    except (SyntaxError, ValueError):
        return text

    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value

    return text


class ColumnDefinition(click.ParamType):
    """A command line parameter of the form ``NAME:TYPE``, e.g., ``id:INTEGER PRIMARY
    KEY``. Converts to a :class:`litequery.main.ColumnSpec`."""

    name = "column"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Any:
        from ..main import ColumnSpec

        if value is None or isinstance(value, ColumnSpec):
            return value

        name, sep, column_type = value.partition(":")

        if not sep or not name or not column_type:
            self.fail(f"'{value}' is not of the form NAME:TYPE", param, ctx)

        return ColumnSpec(name.strip(), column_type.strip())


class Assignment(click.ParamType):
    """A command line parameter of the form ``COLUMN=VALUE``. Converts to a tuple of
    column name and value parsed with :func:`parse_value`."""

    name = "assignment"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Any:
        if value is None or isinstance(value, tuple):
            return value

        column, sep, text = value.partition("=")

        if not sep or not column:
            self.fail(f"'{value}' is not of the form COLUMN=VALUE", param, ctx)

        return column.strip(), parse_value(text)


# ==== custom command group with ordered output ========================================


class OrderedGroup(click.Group):
    """Click command group with customizable sections of help output."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.sections: dict[str, list[tuple[str, click.Command]]] = {}

    def add_command(
        self, cmd: click.Command, name: str | None = None, section: str = ""
    ) -> None:
        name = name or cmd.name

        if name is None:
            raise TypeError("Command has no name.")

        self.sections[section] = self.sections.get(section, []) + [(name, cmd)]
        super().add_command(cmd, name)

    def format_commands(
        self, ctx: click.Context, formatter: click.HelpFormatter
    ) -> None:
        commands = []

        for name in self.commands:
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            commands.append((name, cmd))

        if len(commands) > 0:
            max_len = max(len(name) for name, cmd in commands)
            limit = formatter.width - 6 - max_len

            for section, cmd_list in self.sections.items():
                rows = []

                for name, cmd in cmd_list:
                    name = name.ljust(max_len)
                    help_str = cmd.get_short_help_str(limit)
                    rows.append((name, help_str))

                if rows:
                    with formatter.section(section):
                        formatter.write_dl(rows)


# ==== custom exceptions ===============================================================


class CliException(click.ClickException):
    """
    Subclass of :class:`click.ClickException` with a nicely formatted error message.
    """

    def show(self, file: Any = None) -> None:
        warn(self.format_message())
