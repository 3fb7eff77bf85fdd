from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.models import CustomizationState
from funnelbuilder.core.styling import (
    FONT_GROUPS,
    FontGroup,
    FontGroupRegistry,
    generate_funnel_styles,
    get_google_fonts_url,
    get_text_element_style,
    get_theme_styles,
)


def test_classic_font_group_heading_uses_playfair() -> None:
    styles = generate_funnel_styles({"fontGroup": "classic", "themeMode": "light"})
    style = get_text_element_style("heading", styles)
    assert style["fontFamily"].startswith('"Playfair Display"')
    assert style["fontWeight"] == "700"
    assert style["lineHeight"] == "1.2"


def test_unknown_font_group_falls_back_to_professional() -> None:
    styles = generate_funnel_styles({"fontGroup": "comic"})
    assert styles.fonts["heading"].startswith('"Inter"')


def test_accepts_customization_state() -> None:
    styles = generate_funnel_styles(CustomizationState(font_group="modern", theme_mode="dark"))
    assert styles.theme == "dark"
    assert styles.colors["background"] == "#0f172a"
    assert styles.fonts["subheading"].startswith('"Montserrat"')


def test_role_typography() -> None:
    styles = generate_funnel_styles({})
    assert get_text_element_style("subheading", styles)["fontWeight"] == "600"
    assert get_text_element_style("body", styles)["lineHeight"] == "1.6"
    cta = get_text_element_style("cta", styles)
    assert cta["color"] == "#ffffff"
    assert cta["lineHeight"] == "1.2"


def test_overrides_win() -> None:
    styles = generate_funnel_styles({})
    style = get_text_element_style("heading", styles, {"color": "#123456", "fontWeight": "300"})
    assert style["color"] == "#123456"
    assert style["fontWeight"] == "300"


def test_unknown_role_is_rejected() -> None:
    with pytest.raises(ValueError):
        get_text_element_style("caption", generate_funnel_styles({}))


def test_theme_styles_follow_mode() -> None:
    assert get_theme_styles(False)["background"] == "#ffffff"
    assert get_theme_styles(True)["textPrimary"] == "#f8fafc"


def test_google_fonts_url_per_group() -> None:
    assert "Playfair+Display" in get_google_fonts_url("classic")
    assert get_google_fonts_url(None) == FONT_GROUPS.resolve("professional").google_fonts_url


def test_registry_requires_every_role() -> None:
    registry = FontGroupRegistry()
    broken = FontGroup(key="x", name="X", description="", fonts=("A",), primary="A",
                       css_mapping={"heading": "A"})
    with pytest.raises(ValueError):
        registry.register(broken)


def test_non_string_font_group_falls_back() -> None:
    for value in (["classic"], {"key": "modern"}, 3):
        styles = generate_funnel_styles({"fontGroup": value})
        assert styles.fonts["heading"].startswith('"Inter"')
    assert get_google_fonts_url(None) == FONT_GROUPS.resolve("professional").google_fonts_url
