import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'slotcompose'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_slotcompose_caches
from slotcompose.core.definition import SlotStyleEntry, define_component
from slotcompose.core.styling import StylingResolver
from slotcompose.core.theme import Theme


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Strip SLOTCOMPOSE_* env vars and reset caches around every test."""
    for key in list(os.environ):
        if key.startswith("SLOTCOMPOSE_"):
            monkeypatch.delenv(key, raising=False)
    reset_slotcompose_caches()
    yield
    reset_slotcompose_caches()


@pytest.fixture
def theme() -> Theme:
    return Theme(
        name="light",
        settings={
            "Button": {"root": {"className": "theme-btn", "color": "themed"}},
        },
        values={"primary": "#0078d4", "spacing": 4},
    )


@pytest.fixture
def resolver() -> StylingResolver:
    return StylingResolver()


def _root_styles(props, tokens, theme):
    return {"style": {"color": tokens["color"], "padding": tokens["padding"]}}


def _icon_styles(props, tokens, theme):
    return {"style": {"width": tokens["size"]}}


@pytest.fixture
def button():
    """A small two-slot component used across styling tests."""
    return define_component(
        display_name="Button",
        slots={
            "root": SlotStyleEntry(
                factory=_root_styles,
                tokens={"color": lambda t: t["primary"], "padding": 2},
            ),
            "icon": SlotStyleEntry(
                factory=_icon_styles,
                tokens={"size": 16},
                filter=lambda props: bool(props.get("icon")),
            ),
        },
        settings=[{"root": {"className": "btn", "classes": ["base"]}}],
        statics={"kind": "button"},
    )
