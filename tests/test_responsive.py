from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.models import CustomizationState
from funnelbuilder.core.responsive import (
    DEFAULT_SPACER,
    ResponsiveState,
    SizePair,
    clamp,
    generate_spacer_id,
    line_height_for,
    normalize_viewport,
)


def test_spacer_id_is_deterministic() -> None:
    assert generate_spacer_id("trigger-template-1", 1, "heading") == "trigger-template-1_p1_after_heading"
    assert generate_spacer_id("trigger-template-1", 1, "heading") == generate_spacer_id(
        "trigger-template-1", 1, "heading")


def test_normalize_viewport_rejects_unknown() -> None:
    assert normalize_viewport("mobile") == "mobile"
    with pytest.raises(ValueError):
        normalize_viewport("tablet")


def test_size_pair_with_value_keeps_other_viewport() -> None:
    pair = SizePair(48, 32).with_value("mobile", 10)
    assert pair == SizePair(48, 10)
    assert pair.get("desktop") == 48


def test_clamp_and_line_height() -> None:
    assert clamp(-5, 0, 300) == 0
    assert clamp(500, 0, 300) == 300
    assert clamp(5000, 20) == 5000
    assert line_height_for(48) == 72


def test_text_sizes_are_isolated_per_viewport() -> None:
    state = ResponsiveState(CustomizationState())
    state.set_text_size("heading", "desktop", 60)
    state.set_text_size("heading", "mobile", 20)
    assert state.text_size("heading", "desktop") == 60
    assert state.text_size("heading", "mobile") == 20


def test_text_size_defaults() -> None:
    state = ResponsiveState(CustomizationState(text_sizes={}))
    assert state.text_size("heading", "desktop") == 48
    assert state.text_size("subheading", "mobile") == 20
    assert state.text_size("unknown", "mobile") is None
    assert state.text_size("unknown", "mobile", default=16) == 16


def test_button_and_logo_sizes() -> None:
    state = ResponsiveState(CustomizationState())
    assert state.button_scale("ctaText", "desktop") == 100
    state.set_button_scale("ctaText", "mobile", 120)
    assert state.button_scale("ctaText", "mobile") == 120
    assert state.button_scale("ctaText", "desktop") == 100
    assert state.logo_size("desktop") == 48
    state.set_logo_size("mobile", 50)
    assert state.logo_size("mobile") == 50
    assert state.logo_size("desktop") == 48


def test_spacer_created_lazily_from_default() -> None:
    document = CustomizationState()
    state = ResponsiveState(document)
    spacer_id = generate_spacer_id("trigger-template-1", 1, "vsl")
    assert state.spacer_height(spacer_id, "desktop") == DEFAULT_SPACER.desktop
    assert spacer_id not in document.universal_spacers

    state.set_spacer(spacer_id, "mobile", 10)
    assert document.universal_spacers[spacer_id] == {"desktop": 48, "mobile": 10}


def test_spacer_seed_uses_call_site_default() -> None:
    document = CustomizationState()
    state = ResponsiveState(document)
    state.set_spacer("s", "desktop", 100, SizePair(80, 60))
    assert document.universal_spacers["s"] == {"desktop": 100, "mobile": 60}


def test_spacer_id_differs_per_page() -> None:
    assert generate_spacer_id("trigger-template-1", 1, "heading") != generate_spacer_id(
        "trigger-template-1", 2, "heading")
