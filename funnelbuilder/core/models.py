"""Data models for the funnel builder."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_TEMPLATE_ID = "trigger-template-1"

DEFAULT_TEXT_SIZES: Dict[str, Dict[str, float]] = {
    "desktop": {
        "heading": 48,
        "subheading": 24,
        "caseStudiesHeading": 36,
        "bookingHeading": 48,
    },
    "mobile": {
        "heading": 36,
        "subheading": 20,
        "caseStudiesHeading": 28,
        "bookingHeading": 36,
    },
}

DEFAULT_BUTTON_SIZES: Dict[str, Dict[str, float]] = {
    "desktop": {"ctaText": 100},
    "mobile": {"ctaText": 100},
}

DEFAULT_LOGO_SIZE: Dict[str, float] = {"desktop": 48, "mobile": 36}

FIELD_KINDS = ("text", "longText", "heading")

# Keys of the persisted document that map onto CustomizationState attributes.
_KNOWN_KEYS = {
    "templateId",
    "content",
    "textSizes",
    "buttonSizes",
    "logoSize",
    "universalSpacers",
    "fontGroup",
    "themeMode",
    "themeId",
    "themeOverrides",
    "logoUrl",
    "companyName",
    "footerText",
}


def _number(val: Any, default: Optional[float] = None) -> Optional[float]:
    if isinstance(val, bool):
        return default
    if isinstance(val, (int, float)):
        return val
    try:
        parsed = float(str(val))
    except (TypeError, ValueError):
        return default
    return int(parsed) if parsed.is_integer() else parsed


def _viewport_table(raw: Any, default: Dict[str, Dict[str, float]]) -> Dict[str, Dict[str, float]]:
    """Parse a ``{viewport: {key: number}}`` table, keeping viewports apart."""

    if not isinstance(raw, dict):
        return copy.deepcopy(default)
    table: Dict[str, Dict[str, float]] = {}
    for viewport in ("desktop", "mobile"):
        entries = raw.get(viewport)
        if not isinstance(entries, dict):
            table[viewport] = dict(default.get(viewport, {}))
            continue
        parsed: Dict[str, float] = {}
        for key, value in entries.items():
            number = _number(value)
            if number is not None:
                parsed[str(key)] = number
        table[viewport] = parsed
    return table


@dataclass(frozen=True)
class TemplateField:
    """An editable content slot declared by a template."""

    id: str
    kind: str
    label: str
    placeholder: str
    section: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "type": self.kind,
            "label": self.label,
            "placeholder": self.placeholder,
            "section": self.section,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateField":
        kind = str(data.get("type", data.get("kind", "text")))
        if kind == "textarea":
            kind = "longText"
        if kind not in FIELD_KINDS:
            kind = "text"
        return cls(
            id=str(data.get("id", "")),
            kind=kind,
            label=str(data.get("label", "")),
            placeholder=str(data.get("placeholder", "")),
            section=str(data.get("section", "")),
        )


@dataclass
class CaseStudy:
    name: str = ""
    description: str = ""
    result: str = ""
    media_url: str = ""
    media_type: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "result": self.result,
            "mediaUrl": self.media_url,
            "mediaType": self.media_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaseStudy":
        # Host records use either camelCase or snake_case media keys.
        return cls(
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            result=str(data.get("result") or ""),
            media_url=str(data.get("mediaUrl") or data.get("media_url") or ""),
            media_type=str(data.get("mediaType") or data.get("media_type") or ""),
        )


@dataclass
class CustomizationState:
    """The persisted customization document for one funnel.

    This is the unit the host round-trips to its store. Sizes are kept per
    viewport and never derived from one another.
    """

    template_id: str = DEFAULT_TEMPLATE_ID
    content: Dict[str, str] = field(default_factory=dict)
    text_sizes: Dict[str, Dict[str, float]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_TEXT_SIZES))
    button_sizes: Dict[str, Dict[str, float]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_BUTTON_SIZES))
    logo_size: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_LOGO_SIZE))
    universal_spacers: Dict[str, Dict[str, float]] = field(default_factory=dict)
    font_group: str = "professional"
    theme_mode: str = "light"
    theme_id: Optional[str] = None
    theme_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    logo_url: str = ""
    company_name: str = ""
    footer_text: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_dark(self) -> bool:
        return self.theme_mode == "dark"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            key: copy.deepcopy(value)
            for key, value in self.extra.items()
            if key not in _KNOWN_KEYS
        }
        payload.update({
            "templateId": self.template_id,
            "content": dict(self.content),
            "textSizes": copy.deepcopy(self.text_sizes),
            "buttonSizes": copy.deepcopy(self.button_sizes),
            "logoSize": dict(self.logo_size),
            "universalSpacers": copy.deepcopy(self.universal_spacers),
            "fontGroup": self.font_group,
            "themeMode": self.theme_mode,
            "themeId": self.theme_id,
            "themeOverrides": copy.deepcopy(self.theme_overrides),
            "logoUrl": self.logo_url,
            "companyName": self.company_name,
            "footerText": self.footer_text,
        })
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomizationState":
        def safe_str(val: Any, default: str = "") -> str:
            return str(val) if isinstance(val, str) else default

        content_raw = data.get("content")
        content: Dict[str, str] = {}
        if isinstance(content_raw, dict):
            content = {str(k): str(v) for k, v in content_raw.items() if v is not None}

        logo_raw = data.get("logoSize")
        logo_size = dict(DEFAULT_LOGO_SIZE)
        if isinstance(logo_raw, dict):
            for viewport in ("desktop", "mobile"):
                number = _number(logo_raw.get(viewport))
                if number is not None:
                    logo_size[viewport] = number

        spacers: Dict[str, Dict[str, float]] = {}
        spacers_raw = data.get("universalSpacers")
        if isinstance(spacers_raw, dict):
            for spacer_id, pair in spacers_raw.items():
                if not isinstance(pair, dict):
                    continue
                desktop = _number(pair.get("desktop"))
                mobile = _number(pair.get("mobile"))
                if desktop is None or mobile is None:
                    continue
                spacers[str(spacer_id)] = {"desktop": desktop, "mobile": mobile}

        overrides_raw = data.get("themeOverrides")
        overrides: Dict[str, Dict[str, Any]] = {}
        if isinstance(overrides_raw, dict):
            overrides = {
                str(k): copy.deepcopy(v)
                for k, v in overrides_raw.items()
                if isinstance(v, dict)
            }

        theme_mode = safe_str(data.get("themeMode"), "light")
        if theme_mode not in {"light", "dark"}:
            theme_mode = "light"
        theme_id = data.get("themeId")

        return cls(
            template_id=safe_str(data.get("templateId"), DEFAULT_TEMPLATE_ID) or DEFAULT_TEMPLATE_ID,
            content=content,
            text_sizes=_viewport_table(data.get("textSizes"), DEFAULT_TEXT_SIZES),
            button_sizes=_viewport_table(data.get("buttonSizes"), DEFAULT_BUTTON_SIZES),
            logo_size=logo_size,
            universal_spacers=spacers,
            font_group=safe_str(data.get("fontGroup"), "professional") or "professional",
            theme_mode=theme_mode,
            theme_id=str(theme_id) if isinstance(theme_id, str) and theme_id else None,
            theme_overrides=overrides,
            logo_url=safe_str(data.get("logoUrl")),
            company_name=safe_str(data.get("companyName")),
            footer_text=safe_str(data.get("footerText")),
            extra={
                str(k): copy.deepcopy(v)
                for k, v in data.items()
                if k not in _KNOWN_KEYS
            },
        )


@dataclass
class FunnelRecord:
    """The slice of a host funnel record the renderer reads."""

    id: str = ""
    name: str = "My Funnel"
    template_id: str = DEFAULT_TEMPLATE_ID
    vsl_url: str = ""
    vsl_type: str = "none"
    case_studies: List[CaseStudy] = field(default_factory=list)
    customization: CustomizationState = field(default_factory=CustomizationState)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "template_id": self.template_id,
            "vsl_url": self.vsl_url,
            "vsl_type": self.vsl_type,
            "case_studies": [cs.to_dict() for cs in self.case_studies],
            "customization": self.customization.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunnelRecord":
        studies_raw = data.get("case_studies", [])
        studies = [
            CaseStudy.from_dict(cs)
            for cs in (studies_raw if isinstance(studies_raw, list) else [])
            if isinstance(cs, dict)
        ]
        custom_raw = data.get("customization")
        customization = (
            CustomizationState.from_dict(custom_raw)
            if isinstance(custom_raw, dict)
            else CustomizationState()
        )
        template_id = str(data.get("template_id") or customization.template_id)
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "My Funnel")),
            template_id=template_id,
            vsl_url=str(data.get("vsl_url") or ""),
            vsl_type=str(data.get("vsl_type") or "none"),
            case_studies=studies,
            customization=customization,
        )
