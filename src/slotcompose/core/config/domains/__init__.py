"""Domain configuration accessors."""
from __future__ import annotations

from .cache import CacheConfig
from .logging import LoggingConfig
from .merge import MergeConfig

__all__ = ["CacheConfig", "LoggingConfig", "MergeConfig"]
