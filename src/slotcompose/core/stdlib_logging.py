from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from slotcompose.core.config.domains import LoggingConfig

LOGGER_NAME = "slotcompose"

_CONFIGURED_TARGET: str | None = None
_INSTALLED_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    *,
    level: Optional[str] = None,
    log_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> logging.Logger:
    """Attach a handler to the ``slotcompose`` logger.

    Explicit arguments win over ``logging.level`` / ``logging.path`` from config.
    Without a path, records go to stderr. Idempotent per target: calling again
    with the same target only updates the level.
    """
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER

    cfg = LoggingConfig(config_dir=config_dir)
    level_name = level or cfg.level
    path = log_path if log_path is not None else cfg.path
    target = str(Path(path).resolve()) if path is not None else "<stderr>"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_name(level_name))

    if _CONFIGURED_TARGET == target and _INSTALLED_HANDLER is not None:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level_name))
        return logger

    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    if path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level_name))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _CONFIGURED_TARGET = target
    return logger


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER
    logger = logging.getLogger(LOGGER_NAME)
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _CONFIGURED_TARGET = None
    _INSTALLED_HANDLER = None


__all__ = ["LOGGER_NAME", "configure_logging", "reset_logging_for_tests"]
