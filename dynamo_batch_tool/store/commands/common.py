"""
Helpers shared by store commands.
"""

from typing import Any

import click

from ..utils import error_json, error_text, parse_number, to_json


def fail(ctx: click.Context, text: bool, error: str, solution: str, exit_code: int) -> None:
    """Print an error in the requested format and exit with exit_code."""
    if text:
        click.echo(error_text(error, solution), err=True)
    else:
        click.echo(to_json(error_json(error, solution, exit_code)), err=True)
    ctx.exit(exit_code)


def number_callback(ctx: click.Context, param: click.Parameter, value: str | None) -> Any:
    """Click callback converting a sort key argument to int or Decimal."""
    if value is None:
        return None
    try:
        return parse_number(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)
