"""Theme configuration model, override merge and theme catalog."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

ThemeConfig = Dict[str, Dict[str, Any]]
ThemeOverrides = Mapping[str, Mapping[str, Any]]

THEME_CATEGORIES = (
    "colors",
    "typography",
    "spacing",
    "animations",
    "borders",
    "shadows",
    "effects",
)

# Every path a complete config must carry.
REQUIRED_THEME_KEYS: Dict[str, tuple[str, ...]] = {
    "colors": (
        "primary", "secondary", "accent",
        "background.main", "background.alt", "background.overlay",
        "text.primary", "text.secondary", "text.muted", "text.inverse",
        "border", "shadow",
    ),
    "typography": (
        "fonts.heading", "fonts.body", "fonts.accent",
        "sizes.hero", "sizes.h1", "sizes.h2", "sizes.h3", "sizes.body", "sizes.small",
        "weights.light", "weights.regular", "weights.medium", "weights.semibold", "weights.bold",
        "lineHeights.tight", "lineHeights.normal", "lineHeights.relaxed",
    ),
    "spacing": ("section", "element", "tight", "normal", "loose"),
    "animations": (
        "entrances.fadeIn", "entrances.slideUp", "entrances.scaleIn",
        "hover.lift", "hover.glow", "hover.scale",
        "transitions.fast", "transitions.normal", "transitions.slow", "transitions.easing",
    ),
    "borders": (
        "radius.none", "radius.small", "radius.medium", "radius.large", "radius.full",
        "width",
    ),
    "shadows": ("none", "small", "medium", "large", "glow"),
    "effects": ("blur", "opacity"),
}


CLEAN_LIGHT_CONFIG: ThemeConfig = {
    "colors": {
        "primary": "#3b82f6",
        "secondary": "#1e40af",
        "accent": "#059669",
        "background": {
            "main": "#ffffff",
            "alt": "rgba(248, 250, 252, 0.9)",
            "overlay": "rgba(255, 255, 255, 0.8)",
        },
        "text": {
            "primary": "#1e293b",
            "secondary": "#475569",
            "muted": "#94a3b8",
            "inverse": "#ffffff",
        },
        "border": "rgba(148, 163, 184, 0.3)",
        "shadow": "rgba(15, 23, 42, 0.12)",
    },
    "typography": {
        "fonts": {
            "heading": '"Inter", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif',
            "body": '"Open Sans", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif',
            "accent": '"JetBrains Mono", "Fira Code", monospace',
        },
        "sizes": {
            "hero": {"desktop": "4rem", "mobile": "2.5rem"},
            "h1": {"desktop": "3rem", "mobile": "2.25rem"},
            "h2": {"desktop": "2.25rem", "mobile": "1.75rem"},
            "h3": {"desktop": "1.5rem", "mobile": "1.25rem"},
            "body": {"desktop": "1.125rem", "mobile": "1rem"},
            "small": {"desktop": "0.875rem", "mobile": "0.8125rem"},
        },
        "weights": {"light": 300, "regular": 400, "medium": 500, "semibold": 600, "bold": 700},
        "lineHeights": {"tight": 1.2, "normal": 1.5, "relaxed": 1.75},
    },
    "spacing": {
        "section": {"desktop": "6rem", "mobile": "4rem"},
        "element": {"desktop": "2rem", "mobile": "1.5rem"},
        "tight": "0.5rem",
        "normal": "1rem",
        "loose": "2rem",
    },
    "animations": {
        "entrances": {
            "fadeIn": "fadeIn 0.6s ease-out both",
            "slideUp": "slideUp 0.6s ease-out both",
            "scaleIn": "scaleIn 0.5s ease-out both",
        },
        "hover": {
            "lift": "translateY(-4px)",
            "glow": "0 0 24px rgba(59, 130, 246, 0.35)",
            "scale": "scale(1.05)",
        },
        "transitions": {
            "fast": "150ms",
            "normal": "250ms",
            "slow": "400ms",
            "easing": "cubic-bezier(0.4, 0, 0.2, 1)",
        },
    },
    "borders": {
        "radius": {
            "none": "0",
            "small": "0.375rem",
            "medium": "0.75rem",
            "large": "1.25rem",
            "full": "9999px",
        },
        "width": "1px",
    },
    "shadows": {
        "none": "none",
        "small": "0 1px 3px rgba(15, 23, 42, 0.08)",
        "medium": "0 10px 25px rgba(15, 23, 42, 0.12)",
        "large": "0 25px 50px rgba(15, 23, 42, 0.18)",
        "glow": "0 0 30px rgba(59, 130, 246, 0.35)",
    },
    "effects": {"blur": "12px", "opacity": 0.9},
}


def _midnight_glass_config() -> ThemeConfig:
    config = copy.deepcopy(CLEAN_LIGHT_CONFIG)
    config["colors"].update({
        "primary": "#60a5fa",
        "secondary": "#a855f7",
        "accent": "#22d3ee",
        "background": {
            "main": "#0f172a",
            "alt": "rgba(30, 41, 59, 0.55)",
            "overlay": "rgba(15, 23, 42, 0.7)",
        },
        "text": {
            "primary": "#f8fafc",
            "secondary": "#cbd5e1",
            "muted": "#64748b",
            "inverse": "#0f172a",
        },
        "border": "rgba(148, 163, 184, 0.2)",
        "shadow": "rgba(2, 6, 23, 0.5)",
    })
    config["typography"]["fonts"].update({
        "heading": '"Poppins", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif',
        "body": '"Nunito Sans", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif',
    })
    config["shadows"]["glow"] = "0 0 40px rgba(96, 165, 250, 0.45)"
    config["effects"] = {"blur": "18px", "opacity": 0.85}
    return config


def merge_theme_overrides(base: ThemeConfig, overrides: Optional[ThemeOverrides] = None) -> ThemeConfig:
    """Apply a per-funnel override fragment on top of a base config.

    The merge is one level deep: within a category, a key supplied by the
    override replaces the base value outright. A nested object such as
    ``colors.background`` is therefore replaced as a whole, so keys the
    override leaves out are dropped rather than inherited.
    """

    merged: ThemeConfig = {}
    for category in THEME_CATEGORIES:
        section = dict(base.get(category, {}))
        if overrides:
            section.update(overrides.get(category) or {})
        merged[category] = copy.deepcopy(section)
    if overrides:
        unknown = sorted(set(overrides) - set(THEME_CATEGORIES))
        if unknown:
            logger.debug("Ignoring unknown theme override categories: %s", ", ".join(unknown))
    return merged


def _lookup(section: Mapping[str, Any], dotted: str) -> Any:
    node: Any = section
    for part in dotted.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def validate_theme_config(config: Mapping[str, Any]) -> List[str]:
    """Return the ``category.key`` paths missing from ``config``."""

    missing: List[str] = []
    for category, keys in REQUIRED_THEME_KEYS.items():
        section = config.get(category)
        for key in keys:
            if not isinstance(section, Mapping) or _lookup(section, key) is None:
                missing.append(f"{category}.{key}")
    return missing


@dataclass
class Theme:
    id: str
    name: str
    config: ThemeConfig
    is_default: bool = False
    is_public: bool = True
    description: str = ""
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_default": self.is_default,
            "is_public": self.is_public,
            "config": copy.deepcopy(self.config),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Theme":
        """Build a theme from a host record.

        Categories the record lacks are filled from the Clean Light config.
        """

        raw_config = data.get("config")
        config = copy.deepcopy(CLEAN_LIGHT_CONFIG)
        if isinstance(raw_config, Mapping):
            for category in THEME_CATEGORIES:
                section = raw_config.get(category)
                if isinstance(section, Mapping):
                    config[category] = copy.deepcopy(dict(section))
        missing = validate_theme_config(config)
        if missing:
            logger.warning("Theme %s is missing keys: %s", data.get("id"), ", ".join(missing))
        tags = data.get("tags")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "Untitled theme")),
            config=config,
            is_default=bool(data.get("is_default", False)),
            is_public=bool(data.get("is_public", True)),
            description=str(data.get("description") or ""),
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        )


class ThemeRegistry:
    """Injectable theme catalog."""

    def __init__(self, themes: Sequence[Theme] = ()) -> None:
        self._themes: Dict[str, Theme] = {}
        for theme in themes:
            self.register(theme)

    def register(self, theme: Theme) -> None:
        self._themes[theme.id] = theme

    def get(self, theme_id: Optional[str]) -> Optional[Theme]:
        if not theme_id:
            return None
        return self._themes.get(theme_id)

    def ids(self) -> List[str]:
        return list(self._themes)

    def public(self) -> List[Theme]:
        return [theme for theme in self._themes.values() if theme.is_public]

    def default(self) -> Theme:
        for theme in self._themes.values():
            if theme.is_default:
                return theme
        if not self._themes:
            raise LookupError("Theme registry is empty")
        return next(iter(self._themes.values()))

    def resolve(self, theme_id: Optional[str]) -> Theme:
        theme = self.get(theme_id)
        if theme is None:
            if theme_id:
                logger.debug("Unknown theme %r, using default", theme_id)
            return self.default()
        return theme


CLEAN_LIGHT = Theme(
    id="clean-light",
    name="Clean Light",
    config=CLEAN_LIGHT_CONFIG,
    is_default=True,
    description="Bright, neutral surfaces with blue accents.",
    tags=["light", "minimal"],
)

MIDNIGHT_GLASS = Theme(
    id="midnight-glass",
    name="Midnight Glass",
    config=_midnight_glass_config(),
    description="Dark translucent cards over a deep navy background.",
    tags=["dark", "glass"],
)


def default_theme_registry() -> ThemeRegistry:
    return ThemeRegistry([CLEAN_LIGHT, MIDNIGHT_GLASS])


DEFAULT_THEMES = default_theme_registry()
