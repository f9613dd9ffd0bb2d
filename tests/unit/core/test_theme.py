from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from slotcompose.core.exceptions import ConfigError
from slotcompose.core.theme import Theme, load_theme, theme_settings


def test_theme_exposes_values_and_settings(theme: Theme) -> None:
    assert theme["primary"] == "#0078d4"
    assert theme.get("missing", "fallback") == "fallback"
    assert theme_settings(theme, "Button")["root"]["color"] == "themed"


def test_theme_contents_are_read_only(theme: Theme) -> None:
    with pytest.raises(TypeError):
        theme.values["primary"] = "red"  # type: ignore[index]


def test_themes_compare_by_identity() -> None:
    assert Theme(name="a") != Theme(name="a")


def test_theme_settings_supports_mappings_and_objects() -> None:
    assert theme_settings({"settings": {"X": {"root": {}}}}, "X") == {"root": {}}
    assert theme_settings(SimpleNamespace(settings={"X": {"a": {}}}), "X") == {"a": {}}
    assert theme_settings({"values": {}}, "X") is None
    assert theme_settings(object(), "X") is None
    assert theme_settings(None, "X") is None


def test_extend_deep_merges_without_touching_original(theme: Theme) -> None:
    dark = theme.extend(name="dark", values={"primary": "#000"}, settings={"Button": {"root": {"color": "dark"}}})
    assert dark.name == "dark"
    assert dark["primary"] == "#000"
    assert dark["spacing"] == 4
    assert theme_settings(dark, "Button")["root"] == {"className": "theme-btn", "color": "dark"}
    assert theme["primary"] == "#0078d4"
    assert theme.to_dict()["settings"]["Button"]["root"]["color"] == "themed"


def test_load_theme_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "theme.yaml"
    path.write_text(
        "name: contrast\n"
        "values:\n"
        "  primary: '#fff'\n"
        "settings:\n"
        "  Button:\n"
        "    root:\n"
        "      className: hc\n",
        encoding="utf-8",
    )
    loaded = load_theme(path)
    assert loaded.name == "contrast"
    assert loaded["primary"] == "#fff"
    assert theme_settings(loaded, "Button") == {"root": {"className": "hc"}}


def test_load_theme_rejects_non_mapping_sections(tmp_path: Path) -> None:
    path = tmp_path / "theme.yaml"
    path.write_text("values: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_theme(path)
