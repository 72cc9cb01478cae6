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
import logging
import os
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..config.loader import StagingConfig
from ..crypto.age_runtime import decrypt_archive
from ..crypto.keys import describe_key, require_key_name, resolve_decryption_key
from ..errors import (
    AuthenticationError,
    ExtractionError,
    MissingArchiveError,
    MissingKeyError,
)
from .extract import ExtractionResult, extract_archive
from .host import BuildHost
from .manifest import Manifest, generate_manifest

_DIR_MODE = 0o755


class StageOutcome(str, Enum):
    STAGED = "staged"
    ALREADY_STAGED = "already-staged"
    MISSING_ARCHIVE = "missing-archive"
    MISSING_KEY = "missing-key"


@dataclass(frozen=True)
class StagingPlan:
    """Everything the execution phase needs, computed once during setup."""

    archive_path: Path
    staging_dir: Path
    key_env: str
    manifest_module: str


@dataclass(frozen=True)
class StageResult:
    outcome: StageOutcome
    plan: StagingPlan
    manifest: Manifest | None = None
    extraction: ExtractionResult | None = None

    @property
    def assets_available(self) -> bool:
        return self.manifest is not None


class AssetStager:
    """Two-phase staging of an encrypted asset archive.

    ``setup`` runs once when the host is being configured and performs no
    archive I/O. ``execute`` may run any number of times; once the staging
    directory holds files it only regenerates the manifest.
    """

    def __init__(
        self,
        config: StagingConfig,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config
        self._environ = environ

    @property
    def config(self) -> StagingConfig:
        return self._config

    def setup(self, host: BuildHost) -> StagingPlan:
        key_env = require_key_name(self._config.key_env)
        host.require_secret(key_env)
        staging_dir = self._config.staging_dir
        if staging_dir is None:
            staging_dir = host.allocate_scratch_dir(self._config.staging_name)
        host.register_asset_dir(staging_dir)
        plan = StagingPlan(
            archive_path=self._config.archive_path,
            staging_dir=staging_dir,
            key_env=key_env,
            manifest_module=self._config.manifest_module,
        )
        host.logger.debug("Planned asset staging into %s", staging_dir)
        return plan

    def execute(self, plan: StagingPlan, host: BuildHost) -> StageResult:
        log = host.logger
        log.debug(
            "Running asset staging with configuration: %s",
            {
                "archive": str(plan.archive_path),
                "staging_dir": str(plan.staging_dir),
                "key": describe_key(plan.key_env, environ=self._environ),
                "module": plan.manifest_module,
            },
        )

        if _has_content(plan.staging_dir):
            log.info(
                "Skipping extraction of assets since %s already has content.",
                plan.staging_dir,
            )
            manifest = self._publish_manifest(plan, host)
            return StageResult(StageOutcome.ALREADY_STAGED, plan, manifest=manifest)

        if plan.staging_dir.exists() and not plan.staging_dir.is_dir():
            log.error("%s exists and is not a directory", plan.staging_dir)
            raise ExtractionError(f"staging path {plan.staging_dir} is not a directory")

        if not plan.archive_path.is_file():
            log.error("%s not found", plan.archive_path)
            return StageResult(StageOutcome.MISSING_ARCHIVE, plan)

        try:
            plaintext = self._decrypt(plan)
        except MissingKeyError as exc:
            log.error("%s", exc)
            return StageResult(StageOutcome.MISSING_KEY, plan)
        except MissingArchiveError as exc:
            log.error("%s", exc)
            return StageResult(StageOutcome.MISSING_ARCHIVE, plan)
        except AuthenticationError as exc:
            log.error("Could not decrypt %s: %s", plan.archive_path, exc)
            raise

        try:
            extraction = _extract_into_place(plaintext, plan.staging_dir, logger=log)
        except ExtractionError as exc:
            log.error("Could not extract %s: %s", plan.archive_path, exc)
            raise
        log.info(
            "Extracted %d of %d archive entries into %s.",
            extraction.entry_count,
            extraction.entries_read,
            plan.staging_dir,
        )
        if extraction.warnings:
            log.info("Skipped %d archive entries; see warnings above.", len(extraction.warnings))

        manifest = self._publish_manifest(plan, host)
        return StageResult(
            StageOutcome.STAGED,
            plan,
            manifest=manifest,
            extraction=extraction,
        )

    def _decrypt(self, plan: StagingPlan) -> bytes:
        # key lookup happens before the archive is read
        key = resolve_decryption_key(plan.key_env, environ=self._environ)
        ciphertext = _read_archive(plan.archive_path)
        return decrypt_archive(ciphertext, key=key)

    def _publish_manifest(self, plan: StagingPlan, host: BuildHost) -> Manifest:
        manifest = generate_manifest(
            plan.staging_dir,
            module=plan.manifest_module,
            logger=host.logger,
        )
        host.inject_types(manifest)
        return manifest


def run_staging(
    config: StagingConfig,
    host: BuildHost,
    *,
    environ: Mapping[str, str] | None = None,
) -> StageResult:
    stager = AssetStager(config, environ=environ)
    plan = stager.setup(host)
    return stager.execute(plan, host)


def _has_content(path: Path) -> bool:
    if not path.is_dir():
        return False
    with os.scandir(path) as entries:
        return any(True for _ in entries)


def _extract_into_place(
    data: bytes,
    staging_dir: Path,
    *,
    logger: logging.Logger,
) -> ExtractionResult:
    """Extract into a hidden sibling directory, then move it to ``staging_dir``.

    A failed extraction leaves ``staging_dir`` untouched, so the next run starts
    over instead of publishing a partial asset set.
    """
    try:
        staging_dir.parent.mkdir(parents=True, exist_ok=True)
        work_dir = Path(
            tempfile.mkdtemp(
                prefix=f".{staging_dir.name}.",
                suffix=".partial",
                dir=staging_dir.parent,
            )
        )
        os.chmod(work_dir, _DIR_MODE)
    except OSError as exc:
        raise ExtractionError(f"cannot prepare staging directory {staging_dir}: {exc}") from exc
    try:
        result = extract_archive(data, work_dir, logger=logger)
        _move_into_place(work_dir, staging_dir)
    except BaseException:
        shutil.rmtree(work_dir, ignore_errors=True)
        raise
    return dataclasses.replace(
        result,
        dest_dir=staging_dir,
        files=tuple(staging_dir / path.name for path in result.files),
    )


def _move_into_place(work_dir: Path, staging_dir: Path) -> None:
    try:
        if staging_dir.is_dir():
            # only an empty directory gets this far
            staging_dir.rmdir()
        os.replace(work_dir, staging_dir)
    except OSError as exc:
        raise ExtractionError(f"cannot move staged assets into {staging_dir}: {exc}") from exc


def _read_archive(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise MissingArchiveError(path) from exc
