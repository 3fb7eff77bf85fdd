from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.themes import (
    CLEAN_LIGHT,
    CLEAN_LIGHT_CONFIG,
    MIDNIGHT_GLASS,
    THEME_CATEGORIES,
    Theme,
    ThemeRegistry,
    default_theme_registry,
    merge_theme_overrides,
    validate_theme_config,
)


def test_builtin_themes_are_complete() -> None:
    assert validate_theme_config(CLEAN_LIGHT.config) == []
    assert validate_theme_config(MIDNIGHT_GLASS.config) == []


def test_merge_without_overrides_copies_base() -> None:
    merged = merge_theme_overrides(CLEAN_LIGHT_CONFIG)
    assert merged == CLEAN_LIGHT_CONFIG
    merged["colors"]["background"]["main"] = "#000000"
    assert CLEAN_LIGHT_CONFIG["colors"]["background"]["main"] == "#ffffff"


def test_merge_replaces_top_level_keys_inside_category() -> None:
    merged = merge_theme_overrides(CLEAN_LIGHT_CONFIG, {"colors": {"primary": "#ff0000"}})
    assert merged["colors"]["primary"] == "#ff0000"
    assert merged["colors"]["secondary"] == CLEAN_LIGHT_CONFIG["colors"]["secondary"]
    assert merged["typography"] == CLEAN_LIGHT_CONFIG["typography"]


def test_merge_replaces_nested_objects_wholesale() -> None:
    merged = merge_theme_overrides(
        CLEAN_LIGHT_CONFIG, {"colors": {"background": {"main": "#000"}}})
    assert merged["colors"]["background"] == {"main": "#000"}
    assert "alt" not in merged["colors"]["background"]
    assert "overlay" not in merged["colors"]["background"]
    assert validate_theme_config(merged) == [
        "colors.background.alt",
        "colors.background.overlay",
    ]


def test_merge_does_not_mutate_inputs() -> None:
    base = copy.deepcopy(CLEAN_LIGHT_CONFIG)
    overrides = {"effects": {"blur": "4px"}}
    merge_theme_overrides(base, overrides)
    assert base == CLEAN_LIGHT_CONFIG
    assert overrides == {"effects": {"blur": "4px"}}


def test_merge_ignores_unknown_categories() -> None:
    merged = merge_theme_overrides(CLEAN_LIGHT_CONFIG, {"sounds": {"click": "pop"}})
    assert set(merged) == set(THEME_CATEGORIES)


def test_theme_from_dict_backfills_missing_categories() -> None:
    theme = Theme.from_dict({
        "id": "partial",
        "name": "Partial",
        "config": {"colors": dict(CLEAN_LIGHT_CONFIG["colors"], primary="#123456")},
    })
    assert theme.config["colors"]["primary"] == "#123456"
    assert theme.config["shadows"] == CLEAN_LIGHT_CONFIG["shadows"]
    assert theme.to_dict()["id"] == "partial"


def test_registry_default_and_resolve() -> None:
    registry = default_theme_registry()
    assert registry.default().id == "clean-light"
    assert registry.resolve("midnight-glass") is MIDNIGHT_GLASS
    assert registry.resolve("does-not-exist").id == "clean-light"
    assert registry.get(None) is None
    assert {t.id for t in registry.public()} == {"clean-light", "midnight-glass"}


def test_empty_registry_has_no_default() -> None:
    with pytest.raises(LookupError):
        ThemeRegistry().default()


def test_merge_background_scenario() -> None:
    base = copy.deepcopy(CLEAN_LIGHT_CONFIG)
    base["colors"]["background"] = {"main": "#fff", "alt": "#eee", "overlay": "#ddd"}
    merged = merge_theme_overrides(base, {"colors": {"background": {"main": "#000"}}})
    assert merged["colors"]["background"] == {"main": "#000"}
    assert merge_theme_overrides(base, {"colors": {"background": {"main": "#000"}}}) == merged
