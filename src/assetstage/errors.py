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

from dataclasses import dataclass


class StagingError(RuntimeError):
    """Base class for asset staging failures."""


class MissingKeyError(StagingError):
    def __init__(self, var_name: str) -> None:
        super().__init__(f"decryption key variable {var_name} is not set or empty")
        self.var_name = var_name


class MissingArchiveError(StagingError):
    def __init__(self, path: object) -> None:
        super().__init__(f"encrypted archive not found: {path}")
        self.path = path


@dataclass
class AuthenticationError(StagingError):
    backend: str
    detail: str

    def __str__(self) -> str:
        message = self.detail.strip() or "unknown error"
        return f"decryption ({self.backend}) failed: {message}"


class ExtractionError(StagingError):
    """The archive stream as a whole could not be read."""
