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

import typer
from rich.table import Table

from ...config import StagingConfig, load_staging_config, resolve_config_path
from ...crypto.keys import describe_key
from ..core.common import _ctx_value, _run_cli
from ..ui import console

_CONFIG_HELP = (
    "Show the active TOML config and the settings it resolves to.\n\n"
    "The decryption key is reported only as set or unset.\n\n"
    "Examples:\n"
    "  assetstage config\n"
    "  assetstage config --config ./assetstage.toml\n"
    "  assetstage config --print-path\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_CONFIG_HELP)(config)


def config(
    ctx: typer.Context,
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Inspect this config file (overrides the default).",
        rich_help_panel="Config",
    ),
    print_path: bool = typer.Option(
        False,
        "--print-path",
        help="Print the resolved config path and exit.",
        rich_help_panel="Behavior",
    ),
) -> None:
    config_value = config or _ctx_value(ctx, "config")
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        if print_path:
            console.print(str(resolve_config_path(config_value)), markup=False, soft_wrap=True)
            return
        console.print(_config_table(load_staging_config(config_value)))

    _run_cli(_run, debug=debug_value)


def _config_table(staging_config: StagingConfig) -> Table:
    key = describe_key(staging_config.key_env)
    table = Table(title=str(staging_config.source or "defaults"), title_style="title")
    table.add_column("Setting", style="accent")
    table.add_column("Value")
    rows = (
        ("archive.path", str(staging_config.archive_path)),
        ("key.env", f"{key['env']} ({key['value']})"),
        ("staging.dir", str(staging_config.staging_dir or "(scratch)")),
        ("staging.name", staging_config.staging_name),
        ("manifest.module", staging_config.manifest_module),
        ("manifest.format", staging_config.manifest_format),
        ("manifest.path", str(staging_config.manifest_path or "(not written)")),
    )
    for name, value in rows:
        table.add_row(name, value)
    return table
