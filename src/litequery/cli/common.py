from __future__ import annotations

import asyncio
import functools
import sys
from typing import Any, Callable, Coroutine, TypeVar, TYPE_CHECKING
from typing_extensions import ParamSpec

import click

from .output import warn

if TYPE_CHECKING:
    from ..main import Database


P = ParamSpec("P")
T = TypeVar("T")


def convert_api_errors(func: Callable[P, T]) -> Callable[P, T]:
    """
    Decorator that catches a LiteQueryError and prints a formatted error message to
    stdout before exiting. Calls ``sys.exit(1)`` after printing the error to stdout.
    """

    from ..exceptions import LiteQueryError

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except LiteQueryError as exc:
            warn(f"{exc.title}. {exc.message}")
            sys.exit(1)

    return wrapper


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Runs a database coroutine to completion from synchronous CLI code."""
    return asyncio.run(coro)


def get_database(ctx: click.Context) -> Database:
    """
    Returns the database selected on the command line, creating it on first use. This
    is deferred until a command runs so that ``--help`` has no side effects.
    """
    if ctx.obj.get("db") is None:
        from ..main import Database
        from ..logging import setup_logging

        setup_logging(ctx.obj["config_name"], file=True, stderr=ctx.obj["verbose"])

        ctx.obj["db"] = Database(
            ctx.obj["database"],
            directory=ctx.obj["directory"],
            config_name=ctx.obj["config_name"],
        )

    return ctx.obj["db"]


def inject_database(f: Callable[..., T]) -> Callable[..., Any]:
    """Decorator which passes the selected :class:`Database` as first argument."""

    @click.pass_context
    def wrapper(ctx: click.Context, *args: Any, **kwargs: Any) -> Any:
        db = get_database(ctx)
        return ctx.invoke(f, db, *args, **kwargs)

    return functools.update_wrapper(wrapper, f)


config_option = click.option(
    "-c",
    "--config-name",
    default="litequery",
    is_eager=True,
    expose_value=True,
    help="Run command with the given configuration.",
)
directory_option = click.option(
    "-d",
    "--directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory of database files. Defaults to the configured directory.",
)
verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Print log messages to stderr.",
)
