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

"""Stage encrypted asset archives for build steps."""

from .config import StagingConfig, load_staging_config
from .crypto import decrypt_archive, resolve_decryption_key
from .errors import (
    AuthenticationError,
    ExtractionError,
    MissingArchiveError,
    MissingKeyError,
    StagingError,
)
from .staging.extract import ExtractionResult, ExtractionWarning, extract_archive
from .staging.host import BuildHost, LocalHost
from .staging.manifest import Manifest, generate_manifest
from .staging.pipeline import (
    AssetStager,
    StageOutcome,
    StageResult,
    StagingPlan,
    run_staging,
)

__all__ = [
    "AssetStager",
    "AuthenticationError",
    "BuildHost",
    "ExtractionError",
    "ExtractionResult",
    "ExtractionWarning",
    "LocalHost",
    "Manifest",
    "MissingArchiveError",
    "MissingKeyError",
    "StageOutcome",
    "StageResult",
    "StagingConfig",
    "StagingError",
    "StagingPlan",
    "decrypt_archive",
    "extract_archive",
    "generate_manifest",
    "load_staging_config",
    "resolve_decryption_key",
    "run_staging",
]
