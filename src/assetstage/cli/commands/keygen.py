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

import os
from pathlib import Path

import typer

from ...crypto.age_runtime import generate_identity
from ..core.common import _ctx_value, _run_cli
from ..ui import console, console_err

_KEYGEN_HELP = (
    "Generate an age identity for encrypting asset archives.\n\n"
    "The identity is the secret to store in the decryption key variable; the\n"
    "recipient is what `age -r` needs to produce the archive.\n\n"
    "Examples:\n"
    "  assetstage keygen\n"
    "  assetstage keygen --output ./assets.key\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_KEYGEN_HELP)(keygen)


def keygen(
    ctx: typer.Context,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the identity to this file (mode 600) instead of stdout.",
        rich_help_panel="Output",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing identity file.",
        rich_help_panel="Output",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        identity, recipient = generate_identity()
        if output is None:
            for line in (f"# public key: {recipient}", identity):
                console.print(line, markup=False, highlight=False, soft_wrap=True)
            return
        _write_identity_file(output, identity=identity, recipient=recipient, force=force)
        console_err.print(f"Public key: {recipient}", markup=False, highlight=False, soft_wrap=True)

    _run_cli(_run, debug=debug_value)


def _write_identity_file(path: Path, *, identity: str, recipient: str, force: bool) -> None:
    target = path.expanduser()
    if target.exists() and not force:
        raise FileExistsError(f"identity file already exists: {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
    fd = os.open(target, flags, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(f"# public key: {recipient}\n{identity}\n")
    if os.name != "nt":
        os.chmod(target, 0o600)
