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

from pathlib import Path

import typer

from ...config import load_staging_config
from ...staging.host import LocalHost
from ...staging.manifest import generate_manifest, validate_module_name, write_manifest
from ...staging.pipeline import AssetStager
from ..core.common import _ctx_value, _format_callback, _run_cli
from ..core.log import configure_logging
from ..ui import console

_MANIFEST_HELP = (
    "Render the asset manifest for a staging directory without decrypting anything.\n\n"
    "Examples:\n"
    "  assetstage manifest --dir ./assets\n"
    "  assetstage manifest --dir ./assets --format typescript --output assets.d.ts\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_MANIFEST_HELP)(manifest)


def manifest(
    ctx: typer.Context,
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Use this TOML config file.",
        rich_help_panel="Config",
    ),
    directory: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Staging directory to scan (defaults to the configured one).",
        rich_help_panel="Paths",
    ),
    module: str | None = typer.Option(
        None,
        "--module",
        help="Module name for the declaration.",
        rich_help_panel="Manifest",
    ),
    manifest_format: str | None = typer.Option(
        None,
        "--format",
        help="Manifest format: python or typescript.",
        callback=_format_callback,
        rich_help_panel="Manifest",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the declaration here instead of stdout.",
        rich_help_panel="Manifest",
    ),
) -> None:
    config_value = config or _ctx_value(ctx, "config")
    quiet_value = bool(_ctx_value(ctx, "quiet"))
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        staging_config = load_staging_config(config_value)
        fmt = manifest_format or staging_config.manifest_format
        module_name = validate_module_name(module or staging_config.manifest_module, fmt)
        scan_dir = directory
        if scan_dir is None:
            host = LocalHost(logger=configure_logging(quiet=True, debug=debug_value))
            scan_dir = AssetStager(staging_config).setup(host).staging_dir
        result = generate_manifest(scan_dir, module=module_name)
        if output is None:
            console.print(
                result.render(fmt), end="", markup=False, highlight=False, soft_wrap=True
            )
            return
        changed = write_manifest(result, output, fmt=fmt)
        if not quiet_value:
            state = "Wrote" if changed else "Unchanged"
            console.print(f"{state} {output} ({len(result.names)} asset(s))")

    _run_cli(_run, debug=debug_value)
