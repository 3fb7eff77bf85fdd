"""Style resolution: font groups and light/dark mode to per-role styles.

This is the lightweight path used when a funnel has no full theme selected.
It never touches the theme compiler in :mod:`funnelbuilder.core.theme_css`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

TEXT_ROLES: Tuple[str, ...] = ("heading", "subheading", "body", "cta")
DEFAULT_FONT_GROUP = "professional"

# fontWeight / lineHeight per role.
ROLE_TYPOGRAPHY: Dict[str, Dict[str, str]] = {
    "heading": {"fontWeight": "700", "lineHeight": "1.2"},
    "subheading": {"fontWeight": "600", "lineHeight": "1.4"},
    "body": {"fontWeight": "400", "lineHeight": "1.6"},
    "cta": {"fontWeight": "600", "lineHeight": "1.2"},
}

_SYSTEM_SANS = '-apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'


@dataclass(frozen=True)
class FontGroup:
    key: str
    name: str
    description: str
    fonts: Tuple[str, ...]
    primary: str
    css_mapping: Mapping[str, str]
    google_fonts_url: str = ""


class FontGroupRegistry:
    """Named font groups; unknown names resolve to the fallback group."""

    def __init__(self, groups: Sequence[FontGroup] = (), fallback: str = DEFAULT_FONT_GROUP) -> None:
        self._groups: Dict[str, FontGroup] = {}
        self.fallback = fallback
        for group in groups:
            self.register(group)

    def register(self, group: FontGroup) -> None:
        missing = [role for role in TEXT_ROLES if role not in group.css_mapping]
        if missing:
            raise ValueError(f"Font group {group.key} lacks roles: {', '.join(missing)}")
        self._groups[group.key] = group

    def get(self, key: str) -> Optional[FontGroup]:
        return self._groups.get(key)

    def names(self) -> List[str]:
        return list(self._groups)

    def resolve(self, key: Optional[str]) -> FontGroup:
        if not isinstance(key, str):
            if key is not None:
                logger.debug("Ignoring non-string font group %r", key)
            key = ""
        group = self._groups.get(key)
        if group is None:
            if key:
                logger.debug("Unknown font group %r, using %s", key, self.fallback)
            group = self._groups[self.fallback]
        return group


PROFESSIONAL = FontGroup(
    key="professional",
    name="Professional",
    description="Clean, readable fonts for business",
    fonts=("Inter", "Roboto", "Open Sans"),
    primary="Inter",
    css_mapping={
        "heading": f'"Inter", {_SYSTEM_SANS}',
        "subheading": f'"Inter", {_SYSTEM_SANS}',
        "body": f'"Open Sans", {_SYSTEM_SANS}',
        "cta": f'"Roboto", {_SYSTEM_SANS}',
    },
    google_fonts_url=(
        "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700"
        "&family=Open+Sans:wght@400;500;600&family=Roboto:wght@400;500;600;700&display=swap"
    ),
)

CLASSIC = FontGroup(
    key="classic",
    name="Classic",
    description="Traditional, elegant typography",
    fonts=("Georgia", "Times New Roman", "Playfair Display"),
    primary="Georgia",
    css_mapping={
        "heading": '"Playfair Display", Georgia, "Times New Roman", serif',
        "subheading": 'Georgia, "Times New Roman", serif',
        "body": 'Georgia, "Times New Roman", serif',
        "cta": '"Playfair Display", Georgia, serif',
    },
    google_fonts_url=(
        "https://fonts.googleapis.com/css2?family=Playfair+Display:wght@400;500;600;700"
        "&family=Georgia:wght@400;500;600;700&display=swap"
    ),
)

MODERN = FontGroup(
    key="modern",
    name="Modern",
    description="Contemporary, stylish fonts",
    fonts=("Poppins", "Montserrat", "Nunito Sans"),
    primary="Poppins",
    css_mapping={
        "heading": f'"Poppins", {_SYSTEM_SANS}',
        "subheading": f'"Montserrat", {_SYSTEM_SANS}',
        "body": f'"Nunito Sans", {_SYSTEM_SANS}',
        "cta": f'"Poppins", {_SYSTEM_SANS}',
    },
    google_fonts_url=(
        "https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700"
        "&family=Montserrat:wght@400;500;600;700&family=Nunito+Sans:wght@400;500;600;700&display=swap"
    ),
)

FONT_GROUPS = FontGroupRegistry([PROFESSIONAL, CLASSIC, MODERN])


@dataclass
class FunnelStyles:
    colors: Dict[str, str]
    fonts: Dict[str, str]
    theme: str = "light"
    spacing: Dict[str, str] = field(default_factory=lambda: {"section": "2rem", "text": "1rem"})


def _read(customization: Any, key: str, attr: str) -> Any:
    if isinstance(customization, Mapping):
        return customization.get(key)
    return getattr(customization, attr, None)


def generate_funnel_styles(customization: Any, registry: FontGroupRegistry = FONT_GROUPS) -> FunnelStyles:
    """Resolve a customization (mapping or CustomizationState) to styles."""

    group = registry.resolve(_read(customization, "fontGroup", "font_group"))
    is_dark = _read(customization, "themeMode", "theme_mode") == "dark"
    return FunnelStyles(
        colors={
            "primary": "#3b82f6",
            "secondary": "#1e40af",
            "accent": "#059669",
            "background": "#0f172a" if is_dark else "#ffffff",
            "text": "#f8fafc" if is_dark else "#1e293b",
        },
        fonts={role: group.css_mapping[role] for role in TEXT_ROLES},
        theme="dark" if is_dark else "light",
    )


def get_text_element_style(
    element_type: str,
    styles: FunnelStyles,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Inline style for one text role; ``overrides`` win over everything."""

    if element_type not in ROLE_TYPOGRAPHY:
        raise ValueError(f"Unknown text element type: {element_type!r}")
    style: Dict[str, Any] = {
        "fontFamily": styles.fonts[element_type],
        "color": "#ffffff" if element_type == "cta" else styles.colors["text"],
    }
    style.update(ROLE_TYPOGRAPHY[element_type])
    if overrides:
        style.update(overrides)
    return style


def get_theme_styles(is_dark: bool = False) -> Dict[str, str]:
    """Page-level palette used by the template sections."""

    return {
        "background": "#0f172a" if is_dark else "#ffffff",
        "headerBg": "rgba(15, 23, 42, 0.9)" if is_dark else "rgba(255, 255, 255, 0.95)",
        "textPrimary": "#f8fafc" if is_dark else "#1e293b",
        "textSecondary": "#cbd5e1" if is_dark else "#475569",
        "accent": "#3b82f6",
        "ctaGradient": "linear-gradient(135deg, #3b82f6, #1e40af)",
        "sectionBg": "rgba(30, 41, 59, 0.5)" if is_dark else "rgba(248, 250, 252, 0.5)",
        "cardBg": "rgba(51, 65, 85, 0.8)" if is_dark else "rgba(255, 255, 255, 0.9)",
        "borderColor": "rgba(148, 163, 184, 0.2)" if is_dark else "rgba(148, 163, 184, 0.3)",
    }


def get_google_fonts_url(font_group: Optional[str], registry: FontGroupRegistry = FONT_GROUPS) -> str:
    return registry.resolve(font_group).google_fonts_url
