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

import dataclasses
from pathlib import Path

import typer

from ...config import load_staging_config
from ...errors import AuthenticationError, ExtractionError
from ...staging.host import LocalHost
from ...staging.pipeline import StageOutcome, StageResult, run_staging
from ..core.common import _ctx_value, _format_callback, _run_cli
from ..core.log import _warn, configure_logging
from ..ui import console

_STAGE_HELP = (
    "Decrypt and extract the asset archive, then publish the asset manifest.\n\n"
    "Extraction is skipped when the staging directory already has content; the\n"
    "manifest is regenerated from the directory in every case.\n\n"
    "Examples:\n"
    "  assetstage stage\n"
    "  assetstage stage --config ./assetstage.toml --manifest-out assets.pyi\n"
    "  assetstage stage --staging-dir ./assets --require-assets\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_STAGE_HELP)(stage)


def stage(
    ctx: typer.Context,
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Use this TOML config file.",
        rich_help_panel="Config",
    ),
    staging_dir: Path | None = typer.Option(
        None,
        "--staging-dir",
        help="Stage assets into this directory (overrides the config).",
        rich_help_panel="Paths",
    ),
    archive: Path | None = typer.Option(
        None,
        "--archive",
        help="Encrypted archive to read (overrides the config).",
        rich_help_panel="Paths",
    ),
    manifest_out: Path | None = typer.Option(
        None,
        "--manifest-out",
        help="Write the manifest declaration to this path.",
        rich_help_panel="Manifest",
    ),
    manifest_format: str | None = typer.Option(
        None,
        "--format",
        help="Manifest format: python or typescript.",
        callback=_format_callback,
        rich_help_panel="Manifest",
    ),
    require_assets: bool = typer.Option(
        False,
        "--require-assets",
        help="Exit with code 1 when the archive or key is missing.",
        rich_help_panel="Behavior",
    ),
    best_effort: bool = typer.Option(
        False,
        "--best-effort",
        help="Log decryption and extraction failures instead of failing.",
        rich_help_panel="Behavior",
    ),
) -> None:
    config_value = config or _ctx_value(ctx, "config")
    quiet_value = bool(_ctx_value(ctx, "quiet"))
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> int:
        staging_config = load_staging_config(config_value)
        overrides: dict[str, object] = {}
        if staging_dir is not None:
            overrides["staging_dir"] = staging_dir.expanduser().resolve()
        if archive is not None:
            overrides["archive_path"] = archive.expanduser().resolve()
        if manifest_out is not None:
            overrides["manifest_path"] = manifest_out.expanduser().resolve()
        if manifest_format is not None:
            overrides["manifest_format"] = manifest_format
        if overrides:
            staging_config = dataclasses.replace(staging_config, **overrides)
        host = LocalHost(
            logger=configure_logging(quiet=quiet_value, debug=debug_value),
            manifest_path=staging_config.manifest_path,
            manifest_format=staging_config.manifest_format,
        )
        try:
            result = run_staging(staging_config, host)
        except (AuthenticationError, ExtractionError) as exc:
            if not best_effort:
                raise
            _warn(f"assets unavailable: {exc}", quiet=quiet_value)
            return 0
        _print_result(result, quiet=quiet_value)
        if require_assets and not result.assets_available:
            return 1
        return 0

    _run_cli(_run, debug=debug_value)


def _print_result(result: StageResult, *, quiet: bool) -> None:
    if quiet:
        return
    if result.manifest is None:
        console.print(f"[warning]No assets staged[/warning] ({result.outcome.value}).")
        return
    label = "Staged" if result.outcome is StageOutcome.STAGED else "Already staged"
    console.print(
        f"[success]{label}[/success] {len(result.manifest.names)} asset(s) "
        f"in {result.plan.staging_dir}"
    )
