"""Shared utilities for slotcompose."""
from __future__ import annotations

from .merge import deep_merge, join_class_names, merge_arrays, merge_props, merge_props_many

__all__ = ["deep_merge", "join_class_names", "merge_arrays", "merge_props", "merge_props_many"]
