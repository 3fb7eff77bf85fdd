"""Interaction state machines behind the live editing overlay.

The controllers here are toolkit independent. A UI layer feeds them
enter/leave/press events from its widgets and forwards document level
pointer moves and releases through a :class:`PointerBus`. Listener lifetime
is tied to a :class:`PointerSubscription` acquired when a drag starts and
released when it ends or when the controller is disposed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .fields import set_field_value
from .models import CustomizationState
from .responsive import (
    DEFAULT_SPACER,
    SPACER_MAX,
    SPACER_MIN,
    ResponsiveState,
    SizePair,
    clamp,
    line_height_for,
    normalize_viewport,
)

logger = logging.getLogger(__name__)

PointerHandler = Callable[[float, float], None]
ViewProvider = Callable[[], str]

LOGO_MIN_SIZE = 20
SPACER_HIT_MIN = 20


class InteractionState(enum.Enum):
    IDLE = "idle"
    HOVERED = "hovered"
    DRAGGING = "dragging"


class PointerSubscription:
    """Handle for one pair of document level pointer listeners."""

    def __init__(self, bus: "PointerBus", on_move: PointerHandler, on_up: PointerHandler) -> None:
        self._bus = bus
        self.on_move = on_move
        self.on_up = on_up
        self.active = True

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self._bus._remove(self)

    def __enter__(self) -> "PointerSubscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()


class PointerBus:
    """Dispatches document level pointer moves and releases to subscribers.

    ``on_active_changed`` is called with ``True`` when the first listener is
    attached and ``False`` when the last one is released, so a toolkit
    bridge only hooks global input while a drag is running.
    """

    def __init__(self) -> None:
        self._subscriptions: List[PointerSubscription] = []
        self.on_active_changed: Optional[Callable[[bool], None]] = None

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, on_move: PointerHandler, on_up: PointerHandler) -> PointerSubscription:
        subscription = PointerSubscription(self, on_move, on_up)
        self._subscriptions.append(subscription)
        if len(self._subscriptions) == 1 and self.on_active_changed:
            self.on_active_changed(True)
        return subscription

    def _remove(self, subscription: PointerSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            if not self._subscriptions and self.on_active_changed:
                self.on_active_changed(False)

    def dispatch_move(self, x: float, y: float) -> None:
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_move(x, y)

    def dispatch_up(self, x: float, y: float) -> None:
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_up(x, y)


@dataclass(frozen=True)
class ElementSelection:
    """Message sent to the settings surface when an element is clicked."""

    field_id: str
    kind: str
    is_cta_button: bool = False


@dataclass
class EditorCallbacks:
    on_spacing_change: Optional[Callable[[str, float], None]] = None
    on_text_size_change: Optional[Callable[[str, float], None]] = None
    on_button_size_change: Optional[Callable[[str, float], None]] = None
    on_logo_size_change: Optional[Callable[[float], None]] = None
    on_element_click: Optional[Callable[[str, str, bool], None]] = None
    on_field_edit: Optional[Callable[[str, str], None]] = None

    def emit(self, name: str, *args: Any) -> None:
        handler = getattr(self, name)
        if handler is not None:
            handler(*args)


class DragController:
    """idle -> hovered -> dragging state machine shared by drag primitives."""

    def __init__(self, bus: PointerBus, current_view: ViewProvider, editor: bool = True) -> None:
        self.bus = bus
        self._current_view = current_view
        self.editor = editor
        self.state = InteractionState.IDLE
        self._subscription: Optional[PointerSubscription] = None
        self._start_pointer = 0.0
        self._start_value = 0.0

    @property
    def view(self) -> str:
        return normalize_viewport(self._current_view())

    @property
    def hovered(self) -> bool:
        return self.state is not InteractionState.IDLE

    @property
    def dragging(self) -> bool:
        return self.state is InteractionState.DRAGGING

    def current_value(self) -> float:
        raise NotImplementedError

    def _pointer_axis(self, x: float, y: float) -> float:
        return y

    def _value_for(self, start_value: float, delta: float) -> float:
        raise NotImplementedError

    def _emit(self, value: float) -> None:
        raise NotImplementedError

    def pointer_enter(self) -> None:
        if self.editor and self.state is InteractionState.IDLE:
            self.state = InteractionState.HOVERED

    def pointer_leave(self) -> None:
        if self.state is InteractionState.HOVERED:
            self.state = InteractionState.IDLE

    def pointer_down(self, x: float, y: float) -> bool:
        """Start a drag; returns ``False`` when the press is ignored."""

        if not self.editor or self.dragging:
            return False
        self._start_pointer = self._pointer_axis(x, y)
        self._start_value = self.current_value()
        self._subscription = self.bus.subscribe(self._on_document_move, self._on_document_up)
        self.state = InteractionState.DRAGGING
        return True

    def _on_document_move(self, x: float, y: float) -> None:
        if not self.dragging:
            return
        delta = self._pointer_axis(x, y) - self._start_pointer
        self._emit(self._value_for(self._start_value, delta))

    def _on_document_up(self, x: float, y: float) -> None:
        self._end_drag()

    def _end_drag(self) -> None:
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        self.state = InteractionState.IDLE

    def dispose(self) -> None:
        """Release listeners on teardown, including mid-drag."""

        if self.dragging:
            logger.debug("Disposing %s mid-drag", type(self).__name__)
        self._end_drag()


class SpacerController(DragController):
    """Vertical whitespace between two sections, adjustable by dragging."""

    def __init__(
        self,
        spacer_id: str,
        state: ResponsiveState,
        bus: PointerBus,
        callbacks: EditorCallbacks,
        current_view: ViewProvider,
        default_spacing: SizePair = DEFAULT_SPACER,
        min_height: float = SPACER_MIN,
        max_height: float = SPACER_MAX,
        editor: bool = True,
    ) -> None:
        super().__init__(bus, current_view, editor)
        self.spacer_id = spacer_id
        self.responsive = state
        self.callbacks = callbacks
        self.default_spacing = default_spacing
        self.min_height = min_height
        self.max_height = max_height

    def height(self) -> float:
        return self.responsive.spacer_height(self.spacer_id, self.view, self.default_spacing)

    def current_value(self) -> float:
        return self.height()

    def hit_height(self) -> float:
        """Height of the interactive area; never below a clickable minimum."""

        if not self.editor:
            return self.height()
        return max(SPACER_HIT_MIN, self.height())

    def render_height(self) -> float:
        return self.height()

    def label(self) -> str:
        if self.hovered:
            return f"{self.height():g}px"
        return "Drag to adjust"

    def _value_for(self, start_value: float, delta: float) -> float:
        return clamp(start_value + delta, self.min_height, self.max_height)

    def _emit(self, value: float) -> None:
        self.callbacks.emit("on_spacing_change", self.spacer_id, value)


class LogoResizer(DragController):
    """Logo height driven by horizontal drags; aspect ratio is kept by the view."""

    def __init__(
        self,
        state: ResponsiveState,
        bus: PointerBus,
        callbacks: EditorCallbacks,
        current_view: ViewProvider,
        min_size: float = LOGO_MIN_SIZE,
        editor: bool = True,
    ) -> None:
        super().__init__(bus, current_view, editor)
        self.responsive = state
        self.callbacks = callbacks
        self.min_size = min_size

    @property
    def show_help(self) -> bool:
        return self.state is InteractionState.HOVERED

    def size(self) -> float:
        return self.responsive.logo_size(self.view)

    def current_value(self) -> float:
        return self.size()

    def _pointer_axis(self, x: float, y: float) -> float:
        return x

    def _value_for(self, start_value: float, delta: float) -> float:
        return clamp(start_value + delta, self.min_size)

    def _emit(self, value: float) -> None:
        self.callbacks.emit("on_logo_size_change", value)


def _px(value: float) -> str:
    return f"{value:g}px"


class EditableElement:
    """Clickable text or CTA button. Clicking selects, it never edits."""

    def __init__(
        self,
        field_id: str,
        state: ResponsiveState,
        callbacks: EditorCallbacks,
        current_view: ViewProvider,
        is_cta_button: bool = False,
        editor: bool = True,
    ) -> None:
        self.field_id = field_id
        self.responsive = state
        self.callbacks = callbacks
        self._current_view = current_view
        self.is_cta_button = is_cta_button
        self.editor = editor

    @property
    def kind(self) -> str:
        return "button" if self.is_cta_button else "text"

    @property
    def view(self) -> str:
        return normalize_viewport(self._current_view())

    def click(self) -> Optional[ElementSelection]:
        if not self.editor:
            return None
        selection = ElementSelection(self.field_id, self.kind, self.is_cta_button)
        self.callbacks.emit("on_element_click", self.field_id, self.kind, self.is_cta_button)
        return selection

    def font_size(self) -> Optional[float]:
        return self.responsive.text_size(self.field_id, self.view)

    def button_scale(self) -> Optional[float]:
        if not self.is_cta_button:
            return None
        return self.responsive.button_scale(self.field_id, self.view)

    def display_size(self, base_size: float) -> float:
        """Rendered font size: stored size (or ``base_size``) times the CTA scale."""

        size = self.font_size()
        if size is None:
            size = base_size
        scale = self.button_scale()
        if scale is not None:
            size = size * scale / 100
        return size

    def style(self) -> Dict[str, str]:
        style: Dict[str, str] = {}
        size = self.font_size()
        if size is not None:
            style["fontSize"] = _px(size)
            style["lineHeight"] = _px(line_height_for(size))
        scale = self.button_scale()
        if scale is not None:
            style["transform"] = f"scale({scale / 100:g})"
        return style


@dataclass(frozen=True)
class ChangeEvent:
    kind: str
    identifier: str
    viewport: Optional[str]
    value: Any


class EditorSession:
    """Binds editor callbacks to one customization document.

    Every size or spacing event is written for the active viewport only.
    Switching the viewport never reads or writes the other one.
    """

    def __init__(
        self,
        document: CustomizationState,
        view: str = "desktop",
        editor: bool = True,
        bus: Optional[PointerBus] = None,
    ) -> None:
        self.document = document
        self.responsive = ResponsiveState(document)
        self.view = normalize_viewport(view)
        self.editor = editor
        self.bus = bus or PointerBus()
        self.selection: Optional[ElementSelection] = None
        self._listeners: List[Callable[[ChangeEvent], None]] = []
        self._controllers: List[DragController] = []
        self.callbacks = EditorCallbacks(
            on_spacing_change=self._spacing_changed,
            on_text_size_change=self._text_size_changed,
            on_button_size_change=self._button_size_changed,
            on_logo_size_change=self._logo_size_changed,
            on_element_click=self._element_clicked,
            on_field_edit=self._field_edited,
        )

    # Observers ------------------------------------------------------------
    def subscribe(self, listener: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def set_view(self, view: str) -> None:
        # A running drag started from the old viewport's value; end it first.
        for controller in self._controllers:
            if controller.dragging:
                controller.dispose()
        self.view = normalize_viewport(view)
        self._notify(ChangeEvent("view", "", self.view, self.view))

    def current_view(self) -> str:
        return self.view

    # Primitive factories ------------------------------------------------
    def spacer(
        self,
        spacer_id: str,
        default_spacing: SizePair = DEFAULT_SPACER,
        min_height: float = SPACER_MIN,
        max_height: float = SPACER_MAX,
    ) -> SpacerController:
        controller = SpacerController(
            spacer_id,
            self.responsive,
            self.bus,
            self.callbacks,
            self.current_view,
            default_spacing=default_spacing,
            min_height=min_height,
            max_height=max_height,
            editor=self.editor,
        )
        self._controllers.append(controller)
        return controller

    def logo(self) -> LogoResizer:
        controller = LogoResizer(self.responsive, self.bus, self.callbacks, self.current_view, editor=self.editor)
        self._controllers.append(controller)
        return controller

    def element(self, field_id: str, is_cta_button: bool = False) -> EditableElement:
        return EditableElement(
            field_id,
            self.responsive,
            self.callbacks,
            self.current_view,
            is_cta_button=is_cta_button,
            editor=self.editor,
        )

    def dispose(self) -> None:
        for controller in self._controllers:
            controller.dispose()
        self._controllers.clear()

    # Settings surface entry points --------------------------------------
    def change_text_size(self, field_id: str, value: float) -> None:
        self.callbacks.emit("on_text_size_change", field_id, value)

    def change_button_size(self, field_id: str, value: float) -> None:
        self.callbacks.emit("on_button_size_change", field_id, value)

    def edit_field(self, field_id: str, value: str) -> None:
        self.callbacks.emit("on_field_edit", field_id, value)

    # Callback handlers --------------------------------------------------
    def _spacing_changed(self, spacer_id: str, value: float) -> None:
        default = DEFAULT_SPACER
        for controller in self._controllers:
            if isinstance(controller, SpacerController) and controller.spacer_id == spacer_id:
                default = controller.default_spacing
                break
        self.responsive.set_spacer(spacer_id, self.view, value, default)
        self._notify(ChangeEvent("spacing", spacer_id, self.view, value))

    def _text_size_changed(self, field_id: str, value: float) -> None:
        self.responsive.set_text_size(field_id, self.view, value)
        self._notify(ChangeEvent("textSize", field_id, self.view, value))

    def _button_size_changed(self, field_id: str, value: float) -> None:
        self.responsive.set_button_scale(field_id, self.view, value)
        self._notify(ChangeEvent("buttonSize", field_id, self.view, value))

    def _logo_size_changed(self, value: float) -> None:
        self.responsive.set_logo_size(self.view, value)
        self._notify(ChangeEvent("logoSize", "logo", self.view, value))

    def _element_clicked(self, field_id: str, kind: str, is_cta_button: bool) -> None:
        self.selection = ElementSelection(field_id, kind, is_cta_button)
        self._notify(ChangeEvent("selection", field_id, None, self.selection))

    def _field_edited(self, field_id: str, value: str) -> None:
        self.document.content = set_field_value(self.document.content, field_id, value)
        self._notify(ChangeEvent("content", field_id, None, value))
