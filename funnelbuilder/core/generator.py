"""Funnel page rendering and export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from jinja2 import DictLoader, Environment, select_autoescape

from .fields import DEFAULT_TEMPLATES, TemplateRegistry
from .media import resolve_video_embed
from .models import CaseStudy, CustomizationState, FunnelRecord
from .responsive import ResponsiveState, generate_spacer_id, line_height_for, normalize_viewport
from .styling import (
    FONT_GROUPS,
    FontGroupRegistry,
    generate_funnel_styles,
    get_google_fonts_url,
    get_text_element_style,
    get_theme_styles,
)
from .theme_css import THEME_STYLES, generate_theme_css, style_to_css
from .themes import DEFAULT_THEMES, Theme, ThemeOverrides, ThemeRegistry

logger = logging.getLogger(__name__)

PAGE_FILENAMES = {1: "index.html", 2: "page-2.html"}

# field id -> (text role, palette key used for its colour)
FIELD_ROLES: Dict[str, tuple] = {
    "heading": ("heading", None),
    "subheading": ("subheading", "textSecondary"),
    "ctaText": ("cta", None),
    "caseStudiesHeading": ("heading", "textPrimary"),
    "caseStudiesSubtext": ("body", "textSecondary"),
    "bookingHeading": ("heading", None),
}

# text role -> inline theme style tables
THEMED_ROLES: Dict[str, Sequence[str]] = {
    "heading": ("h1",),
    "subheading": ("bodySecondary",),
    "body": ("bodySecondary",),
    "cta": ("button", "buttonPrimary"),
}

PAGE_TEMPLATE = """\
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title }}</title>
  {% if fonts_url %}<link rel="stylesheet" href="{{ fonts_url }}">{% endif %}
  <style>
    body { margin: 0; }
    .funnel { background-color: {{ palette.background }}; min-height: 100vh; }
    .funnel.view-mobile { max-width: 390px; margin: 0 auto; }
    .funnel-container { max-width: 56rem; margin: 0 auto; padding: 0 1.5rem; }
    .funnel-header { padding: 1.5rem; border-bottom: 1px solid {{ palette.borderColor }}; text-align: center; }
    .funnel-logo { object-fit: contain; }
    .funnel-section { text-align: center; padding: 1rem 0; }
    .funnel-cta { display: inline-block; padding: 1rem 3rem; border: none; border-radius: 0.5rem;
                  background: {{ palette.ctaGradient }}; text-decoration: none; }
    .funnel-video { position: relative; aspect-ratio: 16 / 9; border-radius: 0.5rem; overflow: hidden; }
    .funnel-video iframe, .funnel-video video { width: 100%; height: 100%; border: 0; }
    .funnel-video-placeholder { display: flex; align-items: center; justify-content: center;
                                background: {{ palette.sectionBg }}; color: {{ palette.textSecondary }}; }
    .funnel-cases { display: grid; grid-template-columns: repeat(auto-fit, minmax(16rem, 1fr)); gap: 2rem; }
    .funnel-case { padding: 1.5rem; border-radius: 0.5rem; background-color: {{ palette.cardBg }}; }
    .funnel-case img, .funnel-case video { width: 100%; height: 12rem; object-fit: cover;
                                           border-radius: 0.5rem; border: 1px solid {{ palette.borderColor }}; }
    .funnel-calendar { min-height: 600px; display: flex; align-items: center; justify-content: center;
                       background: #ffffff; border-radius: 0.5rem; color: #6b7280; }
    .funnel-footer { padding: 2rem 1.5rem; text-align: center; border-top: 1px solid {{ palette.borderColor }};
                     background-color: {{ palette.sectionBg }}; color: {{ palette.textSecondary }}; font-size: 0.875rem; }
    {% if editor %}
    [data-field-id] { cursor: pointer; }
    [data-field-id]:hover { outline: 2px solid #93c5fd; }
    .funnel-spacer { border-top: 1px dashed #d1d5db; border-bottom: 1px dashed #d1d5db; }
    {% endif %}
  </style>
  {% if theme_css %}<style>
{{ theme_css | safe }}
  </style>{% endif %}
</head>
<body>
<div class="funnel view-{{ view }}"{% if theme_id %} data-theme="{{ theme_id }}"{% endif %}>
{%- macro text(field_id, tag="div") -%}
<{{ tag }}{% if editor %} data-field-id="{{ field_id }}"{% endif %} style="{{ fields[field_id].style }}">{{ fields[field_id].text }}</{{ tag }}>
{%- endmacro -%}
{%- macro cta() -%}
{% if editor %}
<div class="funnel-cta" data-field-id="ctaText" data-button="true" style="{{ fields.ctaText.style }}">{{ fields.ctaText.text }}</div>
{% else %}
<a class="funnel-cta" href="{{ cta_href }}" style="{{ fields.ctaText.style }}">{{ fields.ctaText.text }}</a>
{% endif %}
{%- endmacro -%}
{%- macro case_studies() -%}
<section class="funnel-section">
  {{ text("caseStudiesHeading", "h2") }}
  {{ text("caseStudiesSubtext", "p") }}
  <div class="funnel-cases">
  {% for study in cases %}
    <div class="funnel-case">
      {% if study.media_url %}
        {% if study.is_image %}<img src="{{ study.media_url }}" alt="{{ study.name }}">
        {% else %}<video src="{{ study.media_url }}" controls></video>{% endif %}
      {% endif %}
      <h3 style="{{ case_styles.name }}">{{ study.name }}</h3>
      <p style="{{ case_styles.description }}">{{ study.description }}</p>
      <div style="{{ case_styles.result }}">{{ study.result }}</div>
    </div>
  {% else %}
    <p style="{{ case_styles.description }}">{{ empty_cases }}</p>
  {% endfor %}
  </div>
</section>
{%- endmacro %}
{% for section in sections %}
{% if section.name == "header" %}
<header class="funnel-header">
  {% if logo_url %}
  <img class="funnel-logo" src="{{ logo_url }}" alt="Logo" style="height: {{ logo_height }}px"{% if editor %} data-logo="true"{% endif %}>
  {% else %}
  <span style="font-size: 1.5rem; font-weight: 700; color: {{ palette.textPrimary }}">{{ company_name }}</span>
  {% endif %}
</header>
{% elif section.name == "heading" %}
<section class="funnel-section">{{ text("heading", "h1") }}</section>
{% elif section.name == "subheading" %}
<section class="funnel-section">{{ text("subheading", "p") }}</section>
{% elif section.name == "vsl" %}
<section class="funnel-section">
  {% if video.is_iframe %}
  <div class="funnel-video"><iframe src="{{ video.src }}" allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" allowfullscreen></iframe></div>
  {% elif video.kind == "file" %}
  <div class="funnel-video"><video src="{{ video.src }}" controls></video></div>
  {% else %}
  <div class="funnel-video funnel-video-placeholder"><p>{{ video.placeholder }}</p></div>
  {% endif %}
</section>
{% elif section.name in ("cta", "cta-2") %}
<section class="funnel-section">{{ cta() }}</section>
{% elif section.name == "case-studies" %}
{{ case_studies() }}
{% elif section.name == "booking-heading" %}
<section class="funnel-section">{{ text("bookingHeading", "h1") }}</section>
{% elif section.name == "calendar" %}
<section class="funnel-section"><div class="funnel-calendar">Calendar booking widget will be embedded here</div></section>
{% endif %}
{% if section.spacer %}
<div class="funnel-spacer"{% if editor %} data-spacer-id="{{ section.spacer.id }}"{% endif %} style="height: {{ section.spacer.height }}px"></div>
{% endif %}
{% endfor %}
<footer class="funnel-footer">{{ footer_text }}</footer>
</div>
</body>
</html>
"""


def _env() -> Environment:
    return Environment(
        loader=DictLoader({"page.html.j2": PAGE_TEMPLATE}),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _px(value: float) -> str:
    return f"{value:g}px"


def _element_style(
    field_id: str,
    role: str,
    palette_key: Optional[str],
    palette: Mapping[str, str],
    funnel_styles: Any,
    responsive: ResponsiveState,
    view: str,
    themed: bool,
) -> str:
    if themed:
        style: Dict[str, Any] = {}
        for table in THEMED_ROLES[role]:
            style.update(THEME_STYLES[table])
    else:
        overrides = {"color": palette[palette_key]} if palette_key else None
        style = get_text_element_style(role, funnel_styles, overrides)
    size = responsive.text_size(field_id, view)
    if size is not None:
        style.pop("lineHeight", None)
        style["fontSize"] = _px(size)
        style["lineHeight"] = _px(line_height_for(size))
    if role == "cta":
        style["transform"] = f"scale({responsive.button_scale(field_id, view) / 100:g})"
    return style_to_css(style)


def render_funnel_page(
    template_id: str,
    page: int,
    content: Optional[Mapping[str, str]],
    customization: CustomizationState,
    case_studies: Sequence[CaseStudy] = (),
    theme: Optional[Theme] = None,
    overrides: Optional[ThemeOverrides] = None,
    view: str = "desktop",
    editor: bool = False,
    registry: TemplateRegistry = DEFAULT_TEMPLATES,
    vsl_url: str = "",
    vsl_type: str = "",
    font_groups: FontGroupRegistry = FONT_GROUPS,
) -> str:
    """Render one page of a funnel template to a standalone HTML document.

    Sizes and spacers come from ``customization`` for the given ``view``
    only. When ``theme`` is given its compiled stylesheet is embedded and
    the page is scoped with ``data-theme``.
    """

    template = registry.get(template_id)
    if template is None:
        raise KeyError(template_id)
    view = normalize_viewport(view)
    section_names = template.sections(page)

    responsive = ResponsiveState(customization)
    funnel_styles = generate_funnel_styles(customization, font_groups)
    palette = get_theme_styles(customization.is_dark)
    themed = theme is not None

    fields: Dict[str, Dict[str, str]] = {}
    for entry in template.fields:
        role, palette_key = FIELD_ROLES.get(entry.id, ("body", None))
        fields[entry.id] = {
            "text": registry.field_value(template_id, entry.id, content),
            "style": _element_style(
                entry.id, role, palette_key, palette, funnel_styles, responsive, view, themed),
        }

    sections: List[Dict[str, Any]] = []
    for index, name in enumerate(section_names):
        spacer = None
        if index < len(section_names) - 1:
            spacer_id = generate_spacer_id(template_id, page, name)
            spacer = {"id": spacer_id, "height": f"{responsive.spacer_height(spacer_id, view):g}"}
        sections.append({"name": name, "spacer": spacer})

    cases = [
        {
            "name": study.name or f"Case Study {index + 1}",
            "description": study.description or "Description not available.",
            "result": study.result or "Amazing Result",
            "media_url": study.media_url,
            "is_image": study.media_type == "image",
        }
        for index, study in enumerate(case_studies)
    ]
    case_styles = {
        "name": style_to_css(get_text_element_style(
            "subheading", funnel_styles, {"color": palette["textPrimary"], "fontSize": "1.25rem"})),
        "description": style_to_css(get_text_element_style(
            "body", funnel_styles, {"color": palette["textSecondary"]})),
        "result": style_to_css(get_text_element_style(
            "subheading", funnel_styles, {"color": palette["accent"], "fontWeight": "700"})),
    }

    company_name = customization.company_name or "Your Business"
    theme_css = generate_theme_css(theme, overrides) if theme is not None else ""
    html = _env().get_template("page.html.j2").render(
        title=company_name,
        fonts_url="" if themed else get_google_fonts_url(customization.font_group, font_groups),
        palette=palette,
        theme_css=theme_css,
        theme_id=theme.id if theme is not None else "",
        view=view,
        editor=editor,
        sections=sections,
        fields=fields,
        video=resolve_video_embed(vsl_url, vsl_type),
        cases=cases,
        case_styles=case_styles,
        empty_cases="Case studies will appear here when added" if editor else "No case studies added yet.",
        cta_href=PAGE_FILENAMES.get(page + 1, "#"),
        logo_url=customization.logo_url,
        logo_height=f"{responsive.logo_size(view):g}",
        company_name=company_name,
        footer_text=customization.footer_text or f"© {company_name}. All rights reserved.",
    )
    logger.debug("Rendered %s page %d (%s, editor=%s)", template_id, page, view, editor)
    return html


def render_funnel(
    record: FunnelRecord,
    output_dir: str | Path,
    theme: Optional[Theme] = None,
    themes: ThemeRegistry = DEFAULT_THEMES,
    view: str = "desktop",
    registry: TemplateRegistry = DEFAULT_TEMPLATES,
) -> List[Path]:
    """Write every page of ``record`` to ``output_dir`` and return the paths."""

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    customization = record.customization
    if theme is None:
        theme = themes.get(customization.theme_id)
    template = registry.get(record.template_id)
    if template is None:
        raise KeyError(record.template_id)

    written: List[Path] = []
    for page in range(1, template.page_count + 1):
        html = render_funnel_page(
            record.template_id,
            page,
            customization.content,
            customization,
            record.case_studies,
            theme=theme,
            overrides=customization.theme_overrides or None,
            view=view,
            registry=registry,
            vsl_url=record.vsl_url,
            vsl_type=record.vsl_type,
        )
        path = output_dir / PAGE_FILENAMES.get(page, f"page-{page}.html")
        path.write_text(html, encoding="utf-8")
        written.append(path)
    logger.info("Exported %d pages to %s", len(written), output_dir)
    return written
