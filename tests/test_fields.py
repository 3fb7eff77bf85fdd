from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.fields import (
    DEFAULT_TEMPLATES,
    TRIGGER_TEMPLATE_1,
    TRIGGER_TEMPLATE_1_FIELDS,
    TemplateDefinition,
    TemplateRegistry,
    get_default_content,
    get_field_value,
    set_field_value,
)
from funnelbuilder.core.models import TemplateField


def test_get_field_value_prefers_content() -> None:
    content = {"heading": "Grow your plumbing business"}
    assert get_field_value("heading", content, TRIGGER_TEMPLATE_1_FIELDS) == "Grow your plumbing business"


def test_get_field_value_falls_back_to_placeholder_for_missing_or_empty() -> None:
    assert get_field_value("subheading", {}, TRIGGER_TEMPLATE_1_FIELDS) == (
        "Your powerful subheadline that explains the value"
    )
    assert get_field_value("ctaText", {"ctaText": ""}, TRIGGER_TEMPLATE_1_FIELDS) == "Get Started Now"
    assert get_field_value("heading", None, TRIGGER_TEMPLATE_1_FIELDS) == "Your Compelling Headline Here"


def test_get_field_value_unknown_field_is_empty_string() -> None:
    assert get_field_value("nope", {}, TRIGGER_TEMPLATE_1_FIELDS) == ""


def test_get_default_content_maps_every_field_to_placeholder() -> None:
    content = get_default_content(TRIGGER_TEMPLATE_1_FIELDS)
    assert set(content) == {f.id for f in TRIGGER_TEMPLATE_1_FIELDS}
    assert content["bookingHeading"] == "Book Your Strategy Call"
    assert content["caseStudiesHeading"] == "Success Stories"


def test_set_field_value_returns_copy() -> None:
    original = {"heading": "A"}
    updated = set_field_value(original, "heading", "B")
    assert updated == {"heading": "B"}
    assert original == {"heading": "A"}


def test_registry_rejects_duplicate_template_ids() -> None:
    registry = TemplateRegistry([TRIGGER_TEMPLATE_1])
    with pytest.raises(ValueError):
        registry.register(TRIGGER_TEMPLATE_1)


def test_registry_lookups() -> None:
    assert "trigger-template-1" in DEFAULT_TEMPLATES
    assert DEFAULT_TEMPLATES.fields_for("missing") == ()
    assert DEFAULT_TEMPLATES.field_value("trigger-template-1", "caseStudiesSubtext", {}) == (
        "See what others have achieved"
    )
    assert DEFAULT_TEMPLATES.default_content("missing") == {}


def test_template_sections_are_page_scoped() -> None:
    assert TRIGGER_TEMPLATE_1.page_count == 2
    assert TRIGGER_TEMPLATE_1.sections(1)[0] == "header"
    assert "calendar" in TRIGGER_TEMPLATE_1.sections(2)
    with pytest.raises(ValueError):
        TRIGGER_TEMPLATE_1.sections(3)


def test_custom_template_registration() -> None:
    field = TemplateField(id="title", kind="heading", label="Title", placeholder="Hello", section="hero")
    registry = TemplateRegistry()
    registry.register(TemplateDefinition(id="mini", name="Mini", fields=(field,), pages=(("title",),)))
    assert registry.template_ids() == ["mini"]
    assert registry.field_value("mini", "title", {"title": ""}) == "Hello"
    assert registry.get("mini").field("title") == field


def test_template_field_from_dict_normalises_kind() -> None:
    field = TemplateField.from_dict({"id": "x", "type": "textarea", "label": "X"})
    assert field.kind == "longText"
    assert TemplateField.from_dict({"id": "y", "type": "weird"}).kind == "text"
    assert field.to_dict()["type"] == "longText"
