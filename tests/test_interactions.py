from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Tuple

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.interactions import (
    ChangeEvent,
    EditorCallbacks,
    EditorSession,
    InteractionState,
    PointerBus,
)
from funnelbuilder.core.models import CustomizationState
from funnelbuilder.core.responsive import generate_spacer_id

SPACER_ID = generate_spacer_id("trigger-template-1", 1, "heading")


def test_pointer_bus_subscription_lifecycle() -> None:
    bus = PointerBus()
    activity: List[bool] = []
    moves: List[Tuple[float, float]] = []
    bus.on_active_changed = activity.append

    with bus.subscribe(lambda x, y: moves.append((x, y)), lambda x, y: None) as subscription:
        assert bus.listener_count == 1
        bus.dispatch_move(1, 2)
    assert bus.listener_count == 0
    subscription.release()
    bus.dispatch_move(3, 4)

    assert moves == [(1, 2)]
    assert activity == [True, False]


def test_callbacks_emit_ignores_unset_hooks() -> None:
    callbacks = EditorCallbacks()
    callbacks.emit("on_spacing_change", "x", 10)
    seen: List[float] = []
    callbacks.on_logo_size_change = seen.append
    callbacks.emit("on_logo_size_change", 40)
    assert seen == [40]


def test_spacer_drag_is_clamped_to_bounds() -> None:
    document = CustomizationState()
    session = EditorSession(document, view="desktop")
    spacer = session.spacer(SPACER_ID)

    spacer.pointer_enter()
    assert spacer.state is InteractionState.HOVERED
    assert spacer.pointer_down(0, 100)
    assert spacer.state is InteractionState.DRAGGING

    session.bus.dispatch_move(0, -900)
    assert document.universal_spacers[SPACER_ID]["desktop"] == 0
    session.bus.dispatch_move(0, 1100)
    assert document.universal_spacers[SPACER_ID]["desktop"] == 300
    assert document.universal_spacers[SPACER_ID]["mobile"] == 32

    session.bus.dispatch_up(0, 1100)
    assert spacer.state is InteractionState.IDLE
    assert session.bus.listener_count == 0


def test_spacer_drag_emits_relative_to_start_value() -> None:
    document = CustomizationState()
    session = EditorSession(document, view="mobile")
    spacer = session.spacer(SPACER_ID)
    events: List[ChangeEvent] = []
    session.subscribe(events.append)

    spacer.pointer_enter()
    spacer.pointer_down(10, 50)
    session.bus.dispatch_move(10, 60)
    session.bus.dispatch_move(10, 70)
    session.bus.dispatch_up(10, 70)

    assert [e.value for e in events] == [42, 52]
    assert events[-1] == ChangeEvent("spacing", SPACER_ID, "mobile", 52)
    assert spacer.height() == 52
    assert spacer.label() == "Drag to adjust"


def test_leave_is_ignored_while_dragging() -> None:
    session = EditorSession(CustomizationState())
    spacer = session.spacer(SPACER_ID)
    spacer.pointer_enter()
    spacer.pointer_down(0, 0)
    spacer.pointer_leave()
    assert spacer.dragging
    spacer.pointer_leave()
    session.bus.dispatch_up(0, 0)
    assert spacer.state is InteractionState.IDLE


def test_dispose_mid_drag_releases_listeners() -> None:
    session = EditorSession(CustomizationState())
    spacer = session.spacer(SPACER_ID)
    spacer.pointer_down(0, 0)
    assert session.bus.listener_count == 1
    session.dispose()
    assert session.bus.listener_count == 0
    assert spacer.state is InteractionState.IDLE


def test_live_mode_ignores_pointer_input() -> None:
    document = CustomizationState()
    session = EditorSession(document, editor=False)
    spacer = session.spacer(SPACER_ID)
    spacer.pointer_enter()
    assert spacer.state is InteractionState.IDLE
    assert not spacer.pointer_down(0, 0)
    assert session.bus.listener_count == 0
    assert session.element("heading").click() is None
    assert session.selection is None


def test_spacer_hit_region_has_minimum() -> None:
    document = CustomizationState(universal_spacers={SPACER_ID: {"desktop": 5, "mobile": 5}})
    session = EditorSession(document)
    spacer = session.spacer(SPACER_ID)
    assert spacer.height() == 5
    assert spacer.hit_height() == 20
    assert spacer.render_height() == 5


def test_logo_resizer_has_lower_bound_only() -> None:
    document = CustomizationState()
    session = EditorSession(document)
    logo = session.logo()

    logo.pointer_enter()
    assert logo.show_help
    logo.pointer_down(100, 0)
    assert not logo.show_help
    session.bus.dispatch_move(50, 0)
    assert document.logo_size["desktop"] == 20
    session.bus.dispatch_move(400, 500)
    assert document.logo_size["desktop"] == 348
    assert document.logo_size["mobile"] == 36
    session.bus.dispatch_up(400, 500)


def test_element_click_selects_without_editing() -> None:
    document = CustomizationState(content={"heading": "Hi"})
    session = EditorSession(document)
    selection = session.element("ctaText", is_cta_button=True).click()

    assert selection is not None
    assert selection.kind == "button"
    assert session.selection == selection
    assert document.content == {"heading": "Hi"}
    assert session.element("heading").click().kind == "text"


def test_element_style_uses_active_viewport() -> None:
    session = EditorSession(CustomizationState())
    heading = session.element("heading")
    assert heading.style() == {"fontSize": "48px", "lineHeight": "72px"}
    session.set_view("mobile")
    assert heading.style() == {"fontSize": "36px", "lineHeight": "54px"}


def test_cta_style_has_scale() -> None:
    session = EditorSession(CustomizationState())
    session.change_button_size("ctaText", 120)
    assert session.element("ctaText", is_cta_button=True).style() == {"transform": "scale(1.2)"}
    assert "transform" not in session.element("heading").style()


def test_viewport_isolation_through_session() -> None:
    document = CustomizationState()
    session = EditorSession(document, view="desktop")
    session.change_text_size("heading", 60)
    session.set_view("mobile")
    session.change_text_size("heading", 20)

    assert document.text_sizes["desktop"]["heading"] == 60
    assert document.text_sizes["mobile"]["heading"] == 20
    session.set_view("desktop")
    assert session.element("heading").font_size() == 60


def test_edit_field_updates_content() -> None:
    document = CustomizationState()
    session = EditorSession(document)
    session.edit_field("subheading", "Fresh copy")
    assert document.content["subheading"] == "Fresh copy"


def test_view_switch_ends_running_drag() -> None:
    document = CustomizationState()
    bus = PointerBus()
    session = EditorSession(document, view="desktop", bus=bus)
    spacer = session.spacer(SPACER_ID)
    document.universal_spacers[SPACER_ID] = {"desktop": 200, "mobile": 10}

    spacer.pointer_down(0, 0)
    session.set_view("mobile")
    bus.dispatch_move(0, 5)
    bus.dispatch_up(0, 5)

    assert spacer.state is InteractionState.IDLE
    assert bus.listener_count == 0
    assert document.universal_spacers[SPACER_ID] == {"desktop": 200, "mobile": 10}


def test_logo_drag_does_not_leak_into_other_view() -> None:
    document = CustomizationState()
    bus = PointerBus()
    session = EditorSession(document, view="mobile", bus=bus)
    logo = session.logo()
    before_desktop = logo.responsive.logo_size("desktop")
    before_mobile = logo.responsive.logo_size("mobile")

    logo.pointer_down(0, 0)
    session.set_view("desktop")
    bus.dispatch_move(30, 0)

    assert logo.responsive.logo_size("desktop") == before_desktop
    assert logo.responsive.logo_size("mobile") == before_mobile


def test_cta_display_size_combines_font_size_and_scale() -> None:
    session = EditorSession(CustomizationState())
    button = session.element("ctaText", is_cta_button=True)
    assert button.display_size(18) == 18
    session.change_button_size("ctaText", 150)
    assert button.display_size(18) == 27
    session.change_text_size("ctaText", 24)
    assert button.display_size(18) == 36
    assert session.element("heading").display_size(16) == 16
