"""Qt widgets for the live editing overlay.

Each widget is a thin shell over a controller from
:mod:`funnelbuilder.core.interactions`; painting only reflects controller
state and every edit goes out through the session callbacks.
"""

from __future__ import annotations

from typing import Optional, cast

from PyQt6 import QtCore, QtGui, QtWidgets

from ..core.interactions import (
    EditableElement,
    InteractionState,
    LogoResizer,
    PointerBus,
    SpacerController,
)

IDLE_BORDER = QtGui.QColor("#d1d5db")
HOVER_FILL = QtGui.QColor("#f3f4f6")
DRAG_FILL = QtGui.QColor("#dbeafe")
DRAG_BORDER = QtGui.QColor("#3b82f6")
LABEL_COLOR = QtGui.QColor("#6b7280")
CTA_BASE_SIZE = 18


class QtPointerBridge(QtCore.QObject):
    """Feeds application wide mouse moves and releases into a PointerBus.

    The filter is only installed while the bus has subscribers.
    """

    def __init__(self, bus: PointerBus, app: Optional[QtCore.QCoreApplication] = None) -> None:
        super().__init__()
        self.bus = bus
        self._app = app or QtWidgets.QApplication.instance()
        self._installed = False
        bus.on_active_changed = self._set_active

    def _set_active(self, active: bool) -> None:
        if self._app is None or active == self._installed:
            return
        if active:
            self._app.installEventFilter(self)
        else:
            self._app.removeEventFilter(self)
        self._installed = active

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:  # noqa: N802 (Qt override)
        # Window level delivery only, so each physical event is seen once.
        if not isinstance(obj, QtGui.QWindow):
            return False
        kind = event.type()
        if kind == QtCore.QEvent.Type.MouseMove:
            pos = cast(QtGui.QMouseEvent, event).globalPosition()
            self.bus.dispatch_move(pos.x(), pos.y())
        elif kind == QtCore.QEvent.Type.MouseButtonRelease:
            pos = cast(QtGui.QMouseEvent, event).globalPosition()
            self.bus.dispatch_up(pos.x(), pos.y())
        return False


class SpacerWidget(QtWidgets.QWidget):
    def __init__(self, controller: SpacerController, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.setMouseTracking(True)
        if controller.editor:
            self.setCursor(QtCore.Qt.CursorShape.SizeVerCursor)
        self.refresh()

    def refresh(self) -> None:
        self.setFixedHeight(int(round(self.controller.hit_height())))
        self.update()

    def enterEvent(self, event: QtGui.QEnterEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.pointer_enter()
        self.update()
        super().enterEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.pointer_leave()
        self.update()
        super().leaveEvent(event)

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802 (Qt override)
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            pos = event.globalPosition()
            if self.controller.pointer_down(pos.x(), pos.y()):
                self.update()
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802 (Qt override)
        super().mouseReleaseEvent(event)
        self.update()

    def hideEvent(self, event: QtGui.QHideEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.dispose()
        super().hideEvent(event)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # noqa: N802 (Qt override)
        if not self.controller.editor:
            return
        painter = QtGui.QPainter(self)
        rect = self.rect().adjusted(0, 0, -1, -1)
        state = self.controller.state
        if state is InteractionState.DRAGGING:
            painter.fillRect(rect, DRAG_FILL)
            painter.setPen(QtGui.QPen(DRAG_BORDER, 2))
        elif state is InteractionState.HOVERED:
            painter.fillRect(rect, HOVER_FILL)
            painter.setPen(QtGui.QPen(IDLE_BORDER, 1))
        else:
            painter.setPen(QtGui.QPen(IDLE_BORDER, 1, QtCore.Qt.PenStyle.DashLine))
        painter.drawLine(rect.topLeft(), rect.topRight())
        painter.drawLine(rect.bottomLeft(), rect.bottomRight())
        if state is not InteractionState.IDLE:
            painter.setPen(LABEL_COLOR)
            painter.drawText(rect, QtCore.Qt.AlignmentFlag.AlignCenter, self.controller.label())
        painter.end()


class LogoWidget(QtWidgets.QLabel):
    """Logo image (or company name) resized by horizontal drags."""

    def __init__(
        self,
        controller: LogoResizer,
        logo_path: str = "",
        company_name: str = "",
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.company_name = company_name or "Your Business"
        self._pixmap = QtGui.QPixmap(logo_path) if logo_path else QtGui.QPixmap()
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.setMouseTracking(True)
        if controller.editor:
            self.setCursor(QtCore.Qt.CursorShape.SizeHorCursor)
        self.refresh()

    def refresh(self) -> None:
        height = max(1, int(round(self.controller.size())))
        if self._pixmap.isNull():
            font = self.font()
            font.setBold(True)
            font.setPixelSize(max(12, height // 2))
            self.setFont(font)
            self.setText(self.company_name)
            self.setFixedHeight(height)
        else:
            self.setPixmap(self._pixmap.scaledToHeight(
                height, QtCore.Qt.TransformationMode.SmoothTransformation))
            self.setFixedHeight(height)
        self.setToolTip("Drag left or right to resize" if self.controller.show_help else "")

    def enterEvent(self, event: QtGui.QEnterEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.pointer_enter()
        self.refresh()
        super().enterEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.pointer_leave()
        self.refresh()
        super().leaveEvent(event)

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802 (Qt override)
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            pos = event.globalPosition()
            if self.controller.pointer_down(pos.x(), pos.y()):
                event.accept()
                return
        super().mousePressEvent(event)

    def hideEvent(self, event: QtGui.QHideEvent) -> None:  # noqa: N802 (Qt override)
        self.controller.dispose()
        super().hideEvent(event)


class EditableLabel(QtWidgets.QLabel):
    """Text or CTA button on the canvas; a click selects it."""

    clicked = QtCore.pyqtSignal(str)

    def __init__(self, element: EditableElement, text: str, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(text, parent)
        self.element = element
        self.selected = False
        self.setWordWrap(not element.is_cta_button)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        if element.editor:
            self.setCursor(QtCore.Qt.CursorShape.PointingHandCursor)
        self.refresh()

    def refresh(self, text: Optional[str] = None) -> None:
        if text is not None:
            self.setText(text)
        font = self.font()
        if self.element.is_cta_button:
            font.setPixelSize(max(1, int(round(self.element.display_size(CTA_BASE_SIZE)))))
            font.setWeight(QtGui.QFont.Weight.DemiBold)
        elif self.element.font_size() is not None:
            font.setPixelSize(max(1, int(round(self.element.display_size(0)))))
        self.setFont(font)
        sheet = []
        if self.element.is_cta_button:
            sheet.append("background: qlineargradient(x1:0, y1:0, x2:1, y2:1, stop:0 #3b82f6, stop:1 #1e40af);"
                         " color: #ffffff; border-radius: 8px; padding: 12px 36px;")
        if self.selected:
            sheet.append("border: 2px solid #3b82f6;")
        self.setStyleSheet(" ".join(sheet))

    def set_selected(self, selected: bool) -> None:
        self.selected = selected
        self.refresh()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802 (Qt override)
        if event.button() == QtCore.Qt.MouseButton.LeftButton and self.element.click() is not None:
            self.clicked.emit(self.element.field_id)
            event.accept()
            return
        super().mousePressEvent(event)
