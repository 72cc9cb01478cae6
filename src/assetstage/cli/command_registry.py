#!/usr/bin/env python3
from __future__ import annotations

import typer

from .commands import (
    config as config_command,
    keygen as keygen_command,
    manifest as manifest_command,
    stage as stage_command,
)


def register(app: typer.Typer) -> None:
    stage_command.register(app)
    manifest_command.register(app)
    keygen_command.register(app)
    config_command.register(app)
