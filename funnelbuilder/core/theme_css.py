"""Compile theme configs into CSS variables and a theme-scoped stylesheet."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple

from .themes import Theme, ThemeConfig, ThemeOverrides, merge_theme_overrides

MOBILE_BREAKPOINT_PX = 768

# Tokens swapped to their mobile value inside the breakpoint block.
MOBILE_SIZE_TOKENS = ("hero", "h1", "h2", "h3", "body", "small")
MOBILE_SPACING_TOKENS = ("section", "element")
MOBILE_OVERRIDE_VARIABLES = tuple(
    [f"--theme-size-{name}" for name in MOBILE_SIZE_TOKENS]
    + [f"--theme-space-{name}" for name in MOBILE_SPACING_TOKENS]
)

KEYFRAMES_BLOCK = """@keyframes fadeIn {
  from { opacity: 0; }
  to { opacity: 1; }
}

@keyframes slideUp {
  from {
    opacity: 0;
    transform: translateY(20px);
  }
  to {
    opacity: 1;
    transform: translateY(0);
  }
}

@keyframes scaleIn {
  from {
    opacity: 0;
    transform: scale(0.95);
  }
  to {
    opacity: 1;
    transform: scale(1);
  }
}
"""

logger = logging.getLogger(__name__)


def _variable_paths() -> Tuple[Tuple[str, str], ...]:
    paths = [
        # Colors
        ("--theme-color-primary", "colors.primary"),
        ("--theme-color-secondary", "colors.secondary"),
        ("--theme-color-accent", "colors.accent"),
        ("--theme-bg-main", "colors.background.main"),
        ("--theme-bg-alt", "colors.background.alt"),
        ("--theme-bg-overlay", "colors.background.overlay"),
        ("--theme-text-primary", "colors.text.primary"),
        ("--theme-text-secondary", "colors.text.secondary"),
        ("--theme-text-muted", "colors.text.muted"),
        ("--theme-text-inverse", "colors.text.inverse"),
        ("--theme-border", "colors.border"),
        ("--theme-shadow-color", "colors.shadow"),
        # Typography
        ("--theme-font-heading", "typography.fonts.heading"),
        ("--theme-font-body", "typography.fonts.body"),
        ("--theme-font-accent", "typography.fonts.accent"),
    ]
    for name in MOBILE_SIZE_TOKENS:
        paths.append((f"--theme-size-{name}", f"typography.sizes.{name}.desktop"))
        paths.append((f"--theme-size-{name}-mobile", f"typography.sizes.{name}.mobile"))
    for name in ("light", "regular", "medium", "semibold", "bold"):
        paths.append((f"--theme-weight-{name}", f"typography.weights.{name}"))
    for name in ("tight", "normal", "relaxed"):
        paths.append((f"--theme-line-{name}", f"typography.lineHeights.{name}"))
    # Spacing
    for name in MOBILE_SPACING_TOKENS:
        paths.append((f"--theme-space-{name}", f"spacing.{name}.desktop"))
        paths.append((f"--theme-space-{name}-mobile", f"spacing.{name}.mobile"))
    for name in ("tight", "normal", "loose"):
        paths.append((f"--theme-space-{name}", f"spacing.{name}"))
    # Animations
    paths += [
        ("--theme-anim-fade-in", "animations.entrances.fadeIn"),
        ("--theme-anim-slide-up", "animations.entrances.slideUp"),
        ("--theme-anim-scale-in", "animations.entrances.scaleIn"),
    ]
    for name in ("lift", "glow", "scale"):
        paths.append((f"--theme-hover-{name}", f"animations.hover.{name}"))
    for name in ("fast", "normal", "slow", "easing"):
        paths.append((f"--theme-transition-{name}", f"animations.transitions.{name}"))
    # Borders
    for name in ("none", "small", "medium", "large", "full"):
        paths.append((f"--theme-radius-{name}", f"borders.radius.{name}"))
    paths.append(("--theme-border-width", "borders.width"))
    # Shadows
    for name in ("none", "small", "medium", "large", "glow"):
        paths.append((f"--theme-shadow-{name}", f"shadows.{name}"))
    # Effects
    paths.append(("--theme-effect-blur", "effects.blur"))
    paths.append(("--theme-effect-opacity", "effects.opacity"))
    return tuple(paths)


CSS_VARIABLE_PATHS = _variable_paths()


def _str(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# Characters that would end a declaration, a block, a comment or the
# surrounding <style> element.
_UNSAFE_VALUE = re.compile(r"[;{}<>\\]|/\*|\*/")


def _escape_css_string(text: str) -> str:
    """Escape ``text`` for use inside a double-quoted CSS string."""

    out = []
    for char in text:
        if char in '"\\<>' or not char.isprintable():
            out.append(f"\\{ord(char):x} ")
        else:
            out.append(char)
    return "".join(out)


def _comment_text(text: str) -> str:
    return re.sub(r"[<>]|/\*|\*/", "", text)


def _lookup(config: Mapping[str, Any], dotted: str) -> Any:
    node: Any = config
    for part in dotted.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def theme_to_css_variables(config: ThemeConfig) -> Dict[str, str]:
    """Flatten a theme config into ``--theme-*`` custom properties.

    A value missing from ``config`` (for example a nested colour dropped by
    an override) leaves its variable out instead of failing the compile.
    """

    variables: Dict[str, str] = {}
    for name, path in CSS_VARIABLE_PATHS:
        value = _lookup(config, path)
        if value is None or isinstance(value, Mapping):
            logger.debug("Theme value %s is missing, skipping %s", path, name)
            continue
        text = _str(value)
        if _UNSAFE_VALUE.search(text):
            logger.warning("Rejecting unsafe theme value for %s: %r", name, text)
            continue
        variables[name] = text
    return variables


def generate_theme_css(theme: Theme, overrides: Optional[ThemeOverrides] = None) -> str:
    """Return a self-contained stylesheet scoped to ``[data-theme="<id>"]``.

    Keyframe names are global; emitting two themes into one document
    defines ``fadeIn``/``slideUp``/``scaleIn`` twice.
    """

    config = merge_theme_overrides(theme.config, overrides)
    variables = theme_to_css_variables(config)
    scope = f'[data-theme="{_escape_css_string(theme.id)}"]'
    declarations = "\n".join(f"  {key}: {value};" for key, value in variables.items())
    mobile_lines = [
        f"    {name}: {variables[f'{name}-mobile']};"
        for name in MOBILE_OVERRIDE_VARIABLES
        if f"{name}-mobile" in variables
    ]
    mobile_block = "\n".join(mobile_lines)
    headings = ",\n".join(f"{scope} h{level}" for level in range(1, 7))
    body_text = ",\n".join(f"{scope} {tag}" for tag in ("body", "p", "div"))
    accent = ",\n".join(f"{scope} {tag}" for tag in ("code", "pre", ".accent-font"))

    return f"""/* Theme: {_comment_text(theme.name)} */
{scope} {{
{declarations}
}}

/* Apply background to theme wrapper */
{scope} {{
  background: var(--theme-bg-main);
  min-height: 100vh;
  position: relative;
}}

/* Glass morphism cards within theme */
{scope} .glass-card {{
  background: var(--theme-bg-alt);
  backdrop-filter: blur(var(--theme-effect-blur));
  -webkit-backdrop-filter: blur(var(--theme-effect-blur));
  border: var(--theme-border-width) solid var(--theme-border);
}}

/* Theme overlay backgrounds */
{scope} .theme-overlay {{
  background: var(--theme-bg-overlay);
  backdrop-filter: blur(calc(var(--theme-effect-blur) / 2));
  -webkit-backdrop-filter: blur(calc(var(--theme-effect-blur) / 2));
}}

/* Apply theme fonts */
{headings} {{
  font-family: var(--theme-font-heading);
  color: var(--theme-text-primary);
}}

{body_text} {{
  font-family: var(--theme-font-body);
  color: var(--theme-text-primary);
}}

{accent} {{
  font-family: var(--theme-font-accent);
}}

/* Responsive adjustments */
@media (max-width: {MOBILE_BREAKPOINT_PX}px) {{
  {scope} {{
{mobile_block}
  }}
}}

/* Animation keyframes */
{KEYFRAMES_BLOCK}"""


# Inline style tables referencing the theme variables.
THEME_STYLES: Dict[str, Dict[str, str]] = {
    "hero": {
        "fontFamily": "var(--theme-font-heading)",
        "fontSize": "var(--theme-size-hero)",
        "fontWeight": "var(--theme-weight-bold)",
        "lineHeight": "var(--theme-line-tight)",
        "color": "var(--theme-text-primary)",
    },
    "h1": {
        "fontFamily": "var(--theme-font-heading)",
        "fontSize": "var(--theme-size-h1)",
        "fontWeight": "var(--theme-weight-bold)",
        "lineHeight": "var(--theme-line-tight)",
        "color": "var(--theme-text-primary)",
    },
    "h2": {
        "fontFamily": "var(--theme-font-heading)",
        "fontSize": "var(--theme-size-h2)",
        "fontWeight": "var(--theme-weight-semibold)",
        "lineHeight": "var(--theme-line-tight)",
        "color": "var(--theme-text-primary)",
    },
    "h3": {
        "fontFamily": "var(--theme-font-heading)",
        "fontSize": "var(--theme-size-h3)",
        "fontWeight": "var(--theme-weight-semibold)",
        "lineHeight": "var(--theme-line-normal)",
        "color": "var(--theme-text-primary)",
    },
    "body": {
        "fontFamily": "var(--theme-font-body)",
        "fontSize": "var(--theme-size-body)",
        "fontWeight": "var(--theme-weight-regular)",
        "lineHeight": "var(--theme-line-normal)",
        "color": "var(--theme-text-primary)",
    },
    "bodySecondary": {
        "fontFamily": "var(--theme-font-body)",
        "fontSize": "var(--theme-size-body)",
        "fontWeight": "var(--theme-weight-regular)",
        "lineHeight": "var(--theme-line-normal)",
        "color": "var(--theme-text-secondary)",
    },
    "small": {
        "fontFamily": "var(--theme-font-body)",
        "fontSize": "var(--theme-size-small)",
        "fontWeight": "var(--theme-weight-regular)",
        "lineHeight": "var(--theme-line-normal)",
        "color": "var(--theme-text-muted)",
    },
    "button": {
        "fontFamily": "var(--theme-font-body)",
        "fontSize": "var(--theme-size-body)",
        "fontWeight": "var(--theme-weight-medium)",
        "padding": "var(--theme-space-tight) var(--theme-space-normal)",
        "borderRadius": "var(--theme-radius-medium)",
        "transition": "all var(--theme-transition-normal) var(--theme-transition-easing)",
    },
    "buttonPrimary": {
        "backgroundColor": "var(--theme-color-primary)",
        "color": "var(--theme-text-inverse)",
        "border": "none",
    },
    "buttonSecondary": {
        "backgroundColor": "transparent",
        "color": "var(--theme-color-primary)",
        "border": "var(--theme-border-width) solid var(--theme-color-primary)",
    },
    "section": {
        "padding": "var(--theme-space-section) var(--theme-space-element)",
        "backgroundColor": "var(--theme-bg-main)",
    },
    "sectionAlt": {
        "padding": "var(--theme-space-section) var(--theme-space-element)",
        "backgroundColor": "var(--theme-bg-alt)",
    },
    "card": {
        "padding": "var(--theme-space-element)",
        "backgroundColor": "var(--theme-bg-overlay)",
        "borderRadius": "var(--theme-radius-medium)",
        "boxShadow": "var(--theme-shadow-medium)",
        "border": "var(--theme-border-width) solid var(--theme-border)",
    },
    "fadeIn": {"animation": "var(--theme-anim-fade-in)"},
    "slideUp": {"animation": "var(--theme-anim-slide-up)"},
    "scaleIn": {"animation": "var(--theme-anim-scale-in)"},
    "hoverLift": {
        "transition": "transform var(--theme-transition-normal) var(--theme-transition-easing)",
    },
    "hoverGlow": {
        "transition": "box-shadow var(--theme-transition-normal) var(--theme-transition-easing)",
    },
}

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def style_to_css(style: Mapping[str, Any]) -> str:
    """Render a camelCase style mapping as an inline declaration list."""

    parts = []
    for key, value in style.items():
        if value is None or value == "":
            continue
        prop = key if key.startswith("--") else _CAMEL.sub("-", key).lower()
        parts.append(f"{prop}: {_str(value)}")
    return "; ".join(parts)
