"""Domain-specific configuration for the property merge rule."""
from __future__ import annotations

from functools import cached_property
from typing import FrozenSet

from slotcompose.core.utils.merge import DEFAULT_JOIN_KEYS

from ..base import BaseDomainConfig


class MergeConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "merge"

    @cached_property
    def join_keys(self) -> FrozenSet[str]:
        keys = self.section.get("joinKeys")
        if keys is None:
            return DEFAULT_JOIN_KEYS
        return frozenset(str(k) for k in keys if k)

    @cached_property
    def concat_sequences(self) -> bool:
        return bool(self.section.get("concatSequences", True))


__all__ = ["MergeConfig"]
