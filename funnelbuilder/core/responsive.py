"""Per-viewport sizing state for the live editor.

Every value is keyed by ``(identifier, viewport)``. Desktop and mobile are
stored side by side and never converted into one another.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models import (
    DEFAULT_BUTTON_SIZES,
    DEFAULT_LOGO_SIZE,
    DEFAULT_TEXT_SIZES,
    CustomizationState,
)

VIEWPORTS: Tuple[str, ...] = ("desktop", "mobile")

DEFAULT_BUTTON_SCALE = 100
LINE_HEIGHT_RATIO = 1.5


def normalize_viewport(value: str) -> str:
    if value not in VIEWPORTS:
        raise ValueError(f"Unknown viewport: {value!r}")
    return value


@dataclass(frozen=True)
class SizePair:
    desktop: float
    mobile: float

    def get(self, viewport: str) -> float:
        return self.desktop if normalize_viewport(viewport) == "desktop" else self.mobile

    def with_value(self, viewport: str, value: float) -> "SizePair":
        if normalize_viewport(viewport) == "desktop":
            return SizePair(value, self.mobile)
        return SizePair(self.desktop, value)

    def to_dict(self) -> Dict[str, float]:
        return {"desktop": self.desktop, "mobile": self.mobile}


DEFAULT_SPACER = SizePair(48, 32)
SPACER_MIN = 0
SPACER_MAX = 300


def generate_spacer_id(template_id: str, page_number: int, after_component: str) -> str:
    return f"{template_id}_p{page_number}_after_{after_component}"


def line_height_for(font_size: float) -> float:
    return LINE_HEIGHT_RATIO * font_size


def clamp(value: float, lower: float, upper: Optional[float] = None) -> float:
    value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


class ResponsiveState:
    """Read/write view over the sizing tables of a customization document."""

    def __init__(self, document: CustomizationState) -> None:
        self.document = document

    # Text ---------------------------------------------------------------
    def text_size(self, field_id: str, viewport: str, default: Optional[float] = None) -> Optional[float]:
        table = self.document.text_sizes.get(normalize_viewport(viewport), {})
        if field_id in table:
            return table[field_id]
        if default is not None:
            return default
        return DEFAULT_TEXT_SIZES[viewport].get(field_id)

    def set_text_size(self, field_id: str, viewport: str, value: float) -> None:
        self.document.text_sizes.setdefault(normalize_viewport(viewport), {})[field_id] = value

    # Buttons ------------------------------------------------------------
    def button_scale(self, field_id: str, viewport: str) -> float:
        table = self.document.button_sizes.get(normalize_viewport(viewport), {})
        if field_id in table:
            return table[field_id]
        return DEFAULT_BUTTON_SIZES[viewport].get(field_id, DEFAULT_BUTTON_SCALE)

    def set_button_scale(self, field_id: str, viewport: str, value: float) -> None:
        self.document.button_sizes.setdefault(normalize_viewport(viewport), {})[field_id] = value

    # Logo ---------------------------------------------------------------
    def logo_size(self, viewport: str) -> float:
        viewport = normalize_viewport(viewport)
        return self.document.logo_size.get(viewport, DEFAULT_LOGO_SIZE[viewport])

    def set_logo_size(self, viewport: str, value: float) -> None:
        self.document.logo_size[normalize_viewport(viewport)] = value

    # Spacers ------------------------------------------------------------
    def spacer_height(self, spacer_id: str, viewport: str, default: SizePair = DEFAULT_SPACER) -> float:
        pair = self.document.universal_spacers.get(spacer_id)
        viewport = normalize_viewport(viewport)
        if pair and viewport in pair:
            return pair[viewport]
        return default.get(viewport)

    def set_spacer(
        self,
        spacer_id: str,
        viewport: str,
        value: float,
        default: SizePair = DEFAULT_SPACER,
    ) -> None:
        """Store a spacer height, creating the pair on first write.

        The untouched viewport is seeded from the call-site default.
        """

        viewport = normalize_viewport(viewport)
        pair = self.document.universal_spacers.get(spacer_id)
        if pair is None:
            pair = default.to_dict()
            self.document.universal_spacers[spacer_id] = pair
        pair[viewport] = value
