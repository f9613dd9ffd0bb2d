"""Configuration loading for slotcompose.

Bundled YAML defaults are merged with an optional overlay directory and
``SLOTCOMPOSE_*`` environment overrides, validated, and cached.
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached, register_cache_clearer
from .domains import CacheConfig, LoggingConfig, MergeConfig
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "CacheConfig",
    "ConfigManager",
    "LoggingConfig",
    "MergeConfig",
    "clear_all_caches",
    "get_cached_config",
    "is_cached",
    "register_cache_clearer",
]
