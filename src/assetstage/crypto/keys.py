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
import re
from collections.abc import Mapping

from ..errors import MissingKeyError

DEFAULT_KEY_ENV = "ASSETSTAGE_DECRYPTION_KEY"

_KEY_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def require_key_name(var_name: str) -> str:
    """Validate the name of the variable that will hold the identity."""
    name = var_name.strip() if isinstance(var_name, str) else ""
    if not name:
        raise ValueError("decryption key variable name cannot be empty")
    if not _KEY_NAME_RE.match(name):
        raise ValueError(f"invalid decryption key variable name: {var_name!r}")
    return name


def resolve_decryption_key(
    var_name: str,
    *,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Look up the identity stored under ``var_name``.

    Raises MissingKeyError when the variable is absent or blank. The value is
    returned as-is apart from surrounding whitespace.
    """
    name = require_key_name(var_name)
    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None or not value.strip():
        raise MissingKeyError(name)
    return value.strip()


def describe_key(var_name: str, *, environ: Mapping[str, str] | None = None) -> dict[str, str]:
    source = os.environ if environ is None else environ
    present = bool((source.get(var_name) or "").strip())
    return {"env": var_name, "value": "<redacted>" if present else "<unset>"}
