"""Domain-specific configuration for stdlib logging.

This config controls:
- The level applied to the ``slotcompose`` logger
- Whether records go to a file (``logging.path``) or to stderr
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "WARNING") or "WARNING").upper()

    @cached_property
    def path(self) -> Optional[Path]:
        raw = str(self.section.get("path", "") or "").strip()
        return Path(raw).expanduser() if raw else None


__all__ = ["LoggingConfig"]
