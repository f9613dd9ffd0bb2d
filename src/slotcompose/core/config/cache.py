"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs, plus a registry of clearers so derived caches (token and settings
memoization) can be dropped together with the configuration they depend on.
"""
from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "SLOTCOMPOSE_"
CONFIG_DIR_ENV = "SLOTCOMPOSE_CONFIG_DIR"

_config_cache: Dict[str, Dict[str, Any]] = {}
_cache_clearers: Dict[str, Callable[[], None]] = {}


def resolve_config_dir(config_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the overlay directory: explicit argument, then ``$SLOTCOMPOSE_CONFIG_DIR``."""
    if config_dir is not None:
        return Path(config_dir).expanduser().resolve()
    raw = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if raw:
        return Path(raw).expanduser().resolve()
    return None


def _cache_key(config_dir: Optional[Path]) -> str:
    base = str(config_dir) if config_dir is not None else "<bundled>"

    # Include SLOTCOMPOSE_* env vars and overlay mtimes so a changed
    # environment or overlay file never returns stale config.
    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files: list[tuple[str, int, int]] = []
    if config_dir is not None and config_dir.is_dir():
        from slotcompose.core.utils.io import iter_yaml_files

        for p in iter_yaml_files(config_dir):
            st = p.stat()
            files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{base}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(config_dir: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same config dict instance while the overlay directory, its
    files and the ``SLOTCOMPOSE_*`` environment are unchanged.

    Args:
        config_dir: Overlay directory. Falls back to ``$SLOTCOMPOSE_CONFIG_DIR``.
        validate: Whether to validate against the bundled schema.

    Returns:
        Configuration dictionary (cached; treat as immutable).
    """
    resolved = resolve_config_dir(config_dir)
    key = _cache_key(resolved)

    if key not in _config_cache:
        logger.debug("config cache miss: %s", key)
        # Lazy import to avoid circular dependency
        from .manager import ConfigManager

        manager = ConfigManager(config_dir=resolved)
        _config_cache[key] = manager.load_config(validate=validate)

    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the config cache and every registered derived cache."""
    _config_cache.clear()
    for name, clearer in list(_cache_clearers.items()):
        logger.debug("clearing cache: %s", name)
        clearer()


def register_cache_clearer(name: str, clearer: Callable[[], None]) -> None:
    """Register an additional cache clearer to run inside ``clear_all_caches()``."""
    _cache_clearers[name] = clearer


def is_cached(config_dir: Optional[Path] = None) -> bool:
    """Check if config for ``config_dir`` is cached."""
    return _cache_key(resolve_config_dir(config_dir)) in _config_cache


__all__ = [
    "ENV_PREFIX",
    "CONFIG_DIR_ENV",
    "resolve_config_dir",
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
]
