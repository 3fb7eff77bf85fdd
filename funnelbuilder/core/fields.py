"""Template field registry: editable content slots per template."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import TemplateField

TemplateContent = Dict[str, str]


TRIGGER_TEMPLATE_1_FIELDS: Tuple[TemplateField, ...] = (
    TemplateField(
        id="heading",
        kind="heading",
        label="Main Heading",
        placeholder="Your Compelling Headline Here",
        section="hero",
    ),
    TemplateField(
        id="subheading",
        kind="text",
        label="Subheading",
        placeholder="Your powerful subheadline that explains the value",
        section="hero",
    ),
    TemplateField(
        id="ctaText",
        kind="text",
        label="CTA Button Text",
        placeholder="Get Started Now",
        section="cta",
    ),
    TemplateField(
        id="caseStudiesHeading",
        kind="text",
        label="Case Studies Heading",
        placeholder="Success Stories",
        section="case-studies",
    ),
    TemplateField(
        id="caseStudiesSubtext",
        kind="text",
        label="Case Studies Subtext",
        placeholder="See what others have achieved",
        section="case-studies",
    ),
    TemplateField(
        id="bookingHeading",
        kind="heading",
        label="Booking Page Heading",
        placeholder="Book Your Strategy Call",
        section="booking",
    ),
)


def get_field_value(
    field_id: str,
    content: Optional[Mapping[str, str]],
    fields: Iterable[TemplateField],
) -> str:
    """Return the content value for a field, its placeholder, or ``""``."""

    value = (content or {}).get(field_id)
    if value:
        return str(value)
    for entry in fields:
        if entry.id == field_id:
            return entry.placeholder
    return ""


def get_default_content(fields: Iterable[TemplateField]) -> TemplateContent:
    return {entry.id: entry.placeholder for entry in fields}


def set_field_value(content: Mapping[str, str], field_id: str, value: str) -> TemplateContent:
    """Return a copy of ``content`` with one field overwritten."""

    updated = dict(content)
    updated[field_id] = value
    return updated


@dataclass(frozen=True)
class TemplateDefinition:
    id: str
    name: str
    fields: Tuple[TemplateField, ...]
    # Section order per page number; spacers sit after each listed section.
    pages: Tuple[Tuple[str, ...], ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def sections(self, page: int) -> Tuple[str, ...]:
        if page < 1 or page > len(self.pages):
            raise ValueError(f"{self.id} has no page {page}")
        return self.pages[page - 1]

    def field(self, field_id: str) -> Optional[TemplateField]:
        for entry in self.fields:
            if entry.id == field_id:
                return entry
        return None


class TemplateRegistry:
    """Catalog of templates keyed by id.

    A template's field list is closed once registered; changing it is a
    schema migration for the host, so re-registering an id is rejected.
    """

    def __init__(self, templates: Sequence[TemplateDefinition] = ()) -> None:
        self._templates: Dict[str, TemplateDefinition] = {}
        for template in templates:
            self.register(template)

    def register(self, template: TemplateDefinition) -> None:
        if template.id in self._templates:
            raise ValueError(f"Template already registered: {template.id}")
        self._templates[template.id] = template

    def get(self, template_id: str) -> Optional[TemplateDefinition]:
        return self._templates.get(template_id)

    def fields_for(self, template_id: str) -> Tuple[TemplateField, ...]:
        template = self._templates.get(template_id)
        return template.fields if template else ()

    def template_ids(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def default_content(self, template_id: str) -> TemplateContent:
        return get_default_content(self.fields_for(template_id))

    def field_value(self, template_id: str, field_id: str, content: Optional[Mapping[str, str]]) -> str:
        return get_field_value(field_id, content, self.fields_for(template_id))


TRIGGER_TEMPLATE_1 = TemplateDefinition(
    id="trigger-template-1",
    name="Trigger Template",
    fields=TRIGGER_TEMPLATE_1_FIELDS,
    pages=(
        ("header", "heading", "subheading", "vsl", "cta", "case-studies", "cta-2"),
        ("header", "booking-heading", "calendar", "case-studies"),
    ),
)

DEFAULT_TEMPLATES = TemplateRegistry([TRIGGER_TEMPLATE_1])
