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

from platformdirs import user_cache_dir

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config/default.toml"
LOCAL_CONFIG_NAME = "assetstage.toml"
CONFIG_PATH_ENV = "ASSETSTAGE_CONFIG"
CACHE_DIR_ENV = "ASSETSTAGE_CACHE_DIR"


def user_cache_root() -> Path:
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_cache_dir("assetstage", appauthor=False))


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise FileNotFoundError(f"config file not found: {explicit}")
        return explicit

    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        resolved = Path(env_path).expanduser()
        if not resolved.is_file():
            raise FileNotFoundError(f"{CONFIG_PATH_ENV} points to a missing file: {resolved}")
        return resolved

    local = Path.cwd() / LOCAL_CONFIG_NAME
    if local.is_file():
        return local

    return DEFAULT_CONFIG_PATH
