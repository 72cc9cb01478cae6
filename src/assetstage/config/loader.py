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

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from ..crypto.keys import DEFAULT_KEY_ENV, require_key_name
from ..staging.manifest import (
    DEFAULT_MANIFEST_MODULE,
    MANIFEST_FORMATS,
    ManifestFormat,
    validate_module_name,
)
from .installer import DEFAULT_CONFIG_PATH, resolve_config_path

DEFAULT_ARCHIVE_NAME = "assets.tar.gz.age"
DEFAULT_STAGING_NAME = "assets"


@dataclass(frozen=True)
class StagingConfig:
    archive_path: Path
    key_env: str = DEFAULT_KEY_ENV
    staging_dir: Path | None = None
    staging_name: str = DEFAULT_STAGING_NAME
    manifest_module: str = DEFAULT_MANIFEST_MODULE
    manifest_format: ManifestFormat = "python"
    manifest_path: Path | None = None
    source: Path | None = None


def load_staging_config(path: str | Path | None = None) -> StagingConfig:
    config_path = resolve_config_path(path)
    data = _load_toml(config_path)
    base_dir = Path.cwd() if config_path == DEFAULT_CONFIG_PATH else config_path.parent
    return parse_staging_config(data, base_dir=base_dir, source=config_path)


def parse_staging_config(
    data: dict[str, object],
    *,
    base_dir: Path,
    source: Path | None = None,
) -> StagingConfig:
    archive_cfg = _get_dict(data, "archive")
    key_cfg = _get_dict(data, "key")
    staging_cfg = _get_dict(data, "staging")
    manifest_cfg = _get_dict(data, "manifest")

    archive_value = _parse_optional_unset_str(archive_cfg.get("path"), field="archive.path")
    archive_path = _resolve_path(archive_value or DEFAULT_ARCHIVE_NAME, base_dir)

    key_value = _parse_optional_unset_str(key_cfg.get("env"), field="key.env")
    try:
        key_env = require_key_name(key_value or DEFAULT_KEY_ENV)
    except ValueError as exc:
        raise ValueError(f"key.env: {exc}") from exc

    staging_value = _parse_optional_unset_str(staging_cfg.get("dir"), field="staging.dir")
    staging_dir = _resolve_path(staging_value, base_dir) if staging_value else None
    staging_name = _parse_staging_name(staging_cfg.get("name"), field="staging.name")

    manifest_format = _parse_manifest_format(manifest_cfg.get("format"), field="manifest.format")
    module_value = _parse_optional_unset_str(manifest_cfg.get("module"), field="manifest.module")
    try:
        manifest_module = validate_module_name(
            module_value or DEFAULT_MANIFEST_MODULE, manifest_format
        )
    except ValueError as exc:
        raise ValueError(f"manifest.module: {exc}") from exc
    manifest_value = _parse_optional_unset_str(manifest_cfg.get("path"), field="manifest.path")
    manifest_path = _resolve_path(manifest_value, base_dir) if manifest_value else None

    return StagingConfig(
        archive_path=archive_path,
        key_env=key_env,
        staging_dir=staging_dir,
        staging_name=staging_name,
        manifest_module=manifest_module,
        manifest_format=manifest_format,
        manifest_path=manifest_path,
        source=source,
    )


def _resolve_path(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


def _parse_staging_name(value: object, *, field: str) -> str:
    name = _parse_optional_unset_str(value, field=field)
    if name is None:
        return DEFAULT_STAGING_NAME
    if name in {".", ".."} or "/" in name or "\\" in name:
        raise ValueError(f"{field} must be a plain directory name")
    return name


def _parse_manifest_format(value: object, *, field: str) -> ManifestFormat:
    if value is None:
        return "python"
    if not isinstance(value, str):
        raise ValueError(f"{field} must be one of: {', '.join(MANIFEST_FORMATS)}")
    normalized = value.strip().lower()
    if not normalized:
        return "python"
    if normalized in {"ts", "d.ts"}:
        normalized = "typescript"
    if normalized not in MANIFEST_FORMATS:
        raise ValueError(f"{field} must be one of: {', '.join(MANIFEST_FORMATS)}")
    return cast(ManifestFormat, normalized)


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_optional_unset_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    normalized = value.strip()
    return normalized or None
