"""Root logger setup for the command line."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``SHELFSWEEP_LOG_LEVEL`` when omitted) into a number."""

    if level is None:
        level = os.getenv("SHELFSWEEP_LOG_LEVEL") or logging.INFO
    if isinstance(level, int):
        return level
    try:
        return logging.getLevelNamesMapping()[level.strip().upper()]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown log level: {level!r}") from exc


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Install the terse CLI handler on the root logger.

    Without ``force`` an already configured root logger is left alone.
    """

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
