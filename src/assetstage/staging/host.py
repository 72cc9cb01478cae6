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

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..config.installer import user_cache_root
from .manifest import Manifest, ManifestFormat, write_manifest


class BuildHost(Protocol):
    """Services the surrounding build system offers to the staging pipeline."""

    logger: logging.Logger

    def require_secret(self, var_name: str) -> None: ...

    def allocate_scratch_dir(self, name: str) -> Path: ...

    def register_asset_dir(self, path: Path) -> None: ...

    def inject_types(self, manifest: Manifest) -> None: ...


@dataclass
class LocalHost:
    """Standalone host used by the command line and by tests.

    Scratch directories live under the per-user cache root and are not created
    until extraction needs them. Injected manifests are kept in memory and, when
    ``manifest_path`` is set, written to disk.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("assetstage"))
    manifest_path: Path | None = None
    manifest_format: ManifestFormat = "python"
    cache_root: Path | None = None
    required_secrets: list[str] = field(default_factory=list)
    asset_dirs: list[Path] = field(default_factory=list)
    injected: list[Manifest] = field(default_factory=list)

    def require_secret(self, var_name: str) -> None:
        if var_name not in self.required_secrets:
            self.required_secrets.append(var_name)

    def allocate_scratch_dir(self, name: str) -> Path:
        root = self.cache_root or user_cache_root()
        return root / name

    def register_asset_dir(self, path: Path) -> None:
        if path not in self.asset_dirs:
            self.asset_dirs.append(path)
        self.logger.debug("Registered asset directory %s", path)

    def inject_types(self, manifest: Manifest) -> None:
        self.injected.append(manifest)
        if self.manifest_path is None:
            return
        changed = write_manifest(manifest, self.manifest_path, fmt=self.manifest_format)
        if changed:
            self.logger.info("Wrote asset manifest to %s", self.manifest_path)
        else:
            self.logger.debug("Asset manifest %s is up to date", self.manifest_path)
