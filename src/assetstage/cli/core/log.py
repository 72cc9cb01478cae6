#!/usr/bin/env python3
from __future__ import annotations

import logging

from rich.logging import RichHandler

from ..ui import console_err

LOGGER_NAME = "assetstage"


def configure_logging(*, quiet: bool, debug: bool) -> logging.Logger:
    """Route the assetstage logger through rich on stderr."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console_err,
        show_time=False,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    logger.addHandler(handler)
    if debug:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def _warn(message: str, *, quiet: bool) -> None:
    if quiet:
        return
    console_err.print(f"[yellow]Warning:[/yellow] {message}")
