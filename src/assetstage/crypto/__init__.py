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

from .age_runtime import (
    AGE_SECRET_KEY_PREFIX,
    decrypt_archive,
    encrypt_archive,
    generate_identity,
    parse_identity,
)
from .keys import DEFAULT_KEY_ENV, describe_key, require_key_name, resolve_decryption_key

__all__ = [
    "AGE_SECRET_KEY_PREFIX",
    "DEFAULT_KEY_ENV",
    "decrypt_archive",
    "describe_key",
    "encrypt_archive",
    "generate_identity",
    "parse_identity",
    "require_key_name",
    "resolve_decryption_key",
]
