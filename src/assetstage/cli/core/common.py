#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import importlib.metadata
from collections.abc import Callable
from typing import Any

import typer
from rich.traceback import install as install_rich_traceback

from ..ui import console_err

DISTRIBUTION_NAME = "assetstage"
ERROR_EXIT_CODE = 2
_REPORTED_ERRORS = (OSError, RuntimeError, ValueError, TypeError, LookupError)


def _run_cli(func: Callable[[], Any], *, debug: bool) -> None:
    """Run a command body, turning staging and input errors into ``ERROR_EXIT_CODE``.

    A non-zero integer returned by ``func`` becomes the exit code. Under
    ``--debug`` errors propagate with a rich traceback instead.
    """
    if debug:
        install_rich_traceback(show_locals=True)
    try:
        result = func()
    except _REPORTED_ERRORS as exc:
        if debug:
            raise
        console_err.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=ERROR_EXIT_CODE)
    if isinstance(result, int) and result != 0:
        raise typer.Exit(code=result)


def _ctx_value(ctx: typer.Context, key: str, default: Any = None) -> Any:
    if not isinstance(ctx.obj, dict):
        return default
    return ctx.obj.get(key, default)


def _format_callback(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"ts", "d.ts"}:
        normalized = "typescript"
    if normalized not in {"python", "typescript"}:
        raise typer.BadParameter("format must be python or typescript")
    return normalized


def _get_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"
