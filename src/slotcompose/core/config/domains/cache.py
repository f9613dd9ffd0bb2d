"""Domain-specific configuration for resolution caches."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class CacheConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "cache"

    @cached_property
    def enabled(self) -> bool:
        return bool(self.section.get("enabled", True))


__all__ = ["CacheConfig"]
