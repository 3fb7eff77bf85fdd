"""Main application window for the funnel builder."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from PyQt6 import QtCore, QtGui, QtWidgets
from PyQt6.QtWebEngineWidgets import QWebEngineView

from ..core import generator, storage
from ..core.fields import DEFAULT_TEMPLATES, TemplateDefinition
from ..core.interactions import ChangeEvent, EditorSession
from ..core.media import resolve_video_embed
from ..core.models import CustomizationState, FunnelRecord
from ..core.responsive import generate_spacer_id
from ..core.settings import SettingsManager
from ..core.styling import FONT_GROUPS
from ..core.themes import DEFAULT_THEMES
from .overlay import EditableLabel, LogoWidget, QtPointerBridge, SpacerWidget

logger = logging.getLogger(__name__)

APP_TITLE = "Funnel Builder"
FILE_FILTER = "Funnel Project (*.funnel)"
MOBILE_CANVAS_WIDTH = 390
QWIDGETSIZE_MAX = 16777215
VSL_TYPES = ("none", "youtube", "vimeo", "video")


class EditorWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: Optional[SettingsManager] = None) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1400, 860)

        self.settings = settings or SettingsManager()
        self.templates = DEFAULT_TEMPLATES
        self.themes = DEFAULT_THEMES
        self.record: Optional[FunnelRecord] = None
        self.record_path: Optional[Path] = None
        self.session: Optional[EditorSession] = None
        self._bridge: Optional[QtPointerBridge] = None
        self._unsubscribe = None
        self._page = 1
        self._dirty = False
        self._loading_panel = False

        self._spacers: Dict[str, List[SpacerWidget]] = {}
        self._labels: Dict[str, List[EditableLabel]] = {}
        self._logo: Optional[LogoWidget] = None

        self._debounce = QtCore.QTimer(self)
        self._debounce.setInterval(400)
        self._debounce.setSingleShot(True)
        self._debounce.timeout.connect(self.update_preview)

        self._build_ui()
        self._build_menu()
        self._bind_events()

        self.new_funnel(FunnelRecord(name="My Funnel"))

    # ------------------------------------------------------------------ UI --
    def _build_ui(self) -> None:
        splitter = QtWidgets.QSplitter(self)
        splitter.setOrientation(QtCore.Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        # Canvas
        left_panel = QtWidgets.QWidget(self)
        left_layout = QtWidgets.QVBoxLayout(left_panel)
        left_layout.setContentsMargins(6, 6, 6, 6)
        left_layout.setSpacing(6)

        toolbar = QtWidgets.QHBoxLayout()
        self.btn_desktop = QtWidgets.QPushButton("Desktop", left_panel)
        self.btn_mobile = QtWidgets.QPushButton("Mobile", left_panel)
        for btn in (self.btn_desktop, self.btn_mobile):
            btn.setCheckable(True)
        self.view_group = QtWidgets.QButtonGroup(left_panel)
        self.view_group.setExclusive(True)
        self.view_group.addButton(self.btn_desktop)
        self.view_group.addButton(self.btn_mobile)
        self.page_combo = QtWidgets.QComboBox(left_panel)
        toolbar.addWidget(self.btn_desktop)
        toolbar.addWidget(self.btn_mobile)
        toolbar.addStretch(1)
        toolbar.addWidget(QtWidgets.QLabel("Page", left_panel))
        toolbar.addWidget(self.page_combo)

        self.canvas_scroll = QtWidgets.QScrollArea(left_panel)
        self.canvas_scroll.setWidgetResizable(True)
        self.canvas = QtWidgets.QWidget()
        self.canvas_layout = QtWidgets.QVBoxLayout(self.canvas)
        self.canvas_layout.setContentsMargins(24, 12, 24, 12)
        self.canvas_layout.setSpacing(0)
        self.canvas_scroll.setWidget(self.canvas)

        left_layout.addLayout(toolbar)
        left_layout.addWidget(self.canvas_scroll, 1)

        # Settings panel
        mid_panel = QtWidgets.QWidget(self)
        mid_layout = QtWidgets.QVBoxLayout(mid_panel)
        mid_layout.setContentsMargins(6, 6, 6, 6)

        element_box = QtWidgets.QGroupBox("Selected element", mid_panel)
        element_form = QtWidgets.QFormLayout(element_box)
        self.selection_label = QtWidgets.QLabel("Click a text or button on the canvas", element_box)
        self.selection_label.setWordWrap(True)
        self.content_edit = QtWidgets.QPlainTextEdit(element_box)
        self.content_edit.setMaximumHeight(90)
        self.size_spin = QtWidgets.QSpinBox(element_box)
        self.size_spin.setRange(8, 200)
        self.size_label = QtWidgets.QLabel("Font size (px)", element_box)
        element_form.addRow(self.selection_label)
        element_form.addRow("Text", self.content_edit)
        element_form.addRow(self.size_label, self.size_spin)

        funnel_box = QtWidgets.QGroupBox("Funnel", mid_panel)
        funnel_form = QtWidgets.QFormLayout(funnel_box)
        self.company_edit = QtWidgets.QLineEdit(funnel_box)
        self.logo_edit = QtWidgets.QLineEdit(funnel_box)
        self.logo_edit.setPlaceholderText("Path or URL to a logo image")
        self.footer_edit = QtWidgets.QLineEdit(funnel_box)
        self.vsl_url_edit = QtWidgets.QLineEdit(funnel_box)
        self.vsl_url_edit.setPlaceholderText("https://youtube.com/watch?v=...")
        self.vsl_type_combo = QtWidgets.QComboBox(funnel_box)
        self.vsl_type_combo.addItems(VSL_TYPES)
        funnel_form.addRow("Company", self.company_edit)
        funnel_form.addRow("Logo", self.logo_edit)
        funnel_form.addRow("Footer", self.footer_edit)
        funnel_form.addRow("Video URL", self.vsl_url_edit)
        funnel_form.addRow("Video type", self.vsl_type_combo)

        style_box = QtWidgets.QGroupBox("Style", mid_panel)
        style_form = QtWidgets.QFormLayout(style_box)
        self.font_combo = QtWidgets.QComboBox(style_box)
        for key in FONT_GROUPS.names():
            group = FONT_GROUPS.get(key)
            self.font_combo.addItem(group.name if group else key, key)
        self.mode_combo = QtWidgets.QComboBox(style_box)
        self.mode_combo.addItem("Light", "light")
        self.mode_combo.addItem("Dark", "dark")
        self.theme_combo = QtWidgets.QComboBox(style_box)
        self.theme_combo.addItem("No theme", "")
        for theme in self.themes.public():
            self.theme_combo.addItem(theme.name, theme.id)
        style_form.addRow("Fonts", self.font_combo)
        style_form.addRow("Mode", self.mode_combo)
        style_form.addRow("Theme", self.theme_combo)

        mid_layout.addWidget(element_box)
        mid_layout.addWidget(funnel_box)
        mid_layout.addWidget(style_box)
        mid_layout.addStretch(1)

        # Preview
        right_panel = QtWidgets.QWidget(self)
        right_layout = QtWidgets.QVBoxLayout(right_panel)
        right_layout.setContentsMargins(6, 6, 6, 6)
        right_layout.setSpacing(6)

        self.preview = QWebEngineView(right_panel)
        right_layout.addWidget(QtWidgets.QLabel("Preview", right_panel))
        right_layout.addWidget(self.preview, 1)

        splitter.addWidget(left_panel)
        splitter.addWidget(mid_panel)
        splitter.addWidget(right_panel)
        splitter.setSizes([560, 320, 520])

        self.status = self.statusBar()

    def _build_menu(self) -> None:
        bar = self.menuBar()
        if bar is None:
            bar = QtWidgets.QMenuBar(self)
            self.setMenuBar(bar)

        file_menu = bar.addMenu("&File")
        self.act_new = QtGui.QAction("New Funnel", self)
        self.act_open = QtGui.QAction("Open Funnel…", self)
        self.act_save = QtGui.QAction("Save", self)
        self.act_save_as = QtGui.QAction("Save As…", self)
        self.act_export = QtGui.QAction("Export Pages…", self)
        self.act_quit = QtGui.QAction("Quit", self)
        self.act_new.setShortcut(QtGui.QKeySequence.StandardKey.New)
        self.act_open.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        self.act_save.setShortcut(QtGui.QKeySequence.StandardKey.Save)

        if file_menu is not None:
            file_menu.addActions([self.act_new, self.act_open])
            file_menu.addSeparator()
            file_menu.addActions([self.act_save, self.act_save_as])
            file_menu.addSeparator()
            file_menu.addAction(self.act_export)
            file_menu.addSeparator()
            file_menu.addAction(self.act_quit)

        help_menu = bar.addMenu("&Help")
        self.act_about = QtGui.QAction("About", self)
        if help_menu is not None:
            help_menu.addAction(self.act_about)

    def _bind_events(self) -> None:
        self.btn_desktop.clicked.connect(lambda: self.set_view("desktop"))
        self.btn_mobile.clicked.connect(lambda: self.set_view("mobile"))
        self.page_combo.currentIndexChanged.connect(self._on_page_changed)

        self.content_edit.textChanged.connect(self._on_content_edited)
        self.size_spin.valueChanged.connect(self._on_size_edited)

        self.company_edit.textChanged.connect(lambda text: self._set_customization("company_name", text))
        self.logo_edit.textChanged.connect(lambda text: self._set_customization("logo_url", text))
        self.footer_edit.textChanged.connect(lambda text: self._set_customization("footer_text", text))
        self.vsl_url_edit.textChanged.connect(lambda text: self._set_record("vsl_url", text))
        self.vsl_type_combo.currentTextChanged.connect(lambda text: self._set_record("vsl_type", text))
        self.font_combo.currentIndexChanged.connect(
            lambda _: self._set_customization("font_group", self.font_combo.currentData()))
        self.mode_combo.currentIndexChanged.connect(
            lambda _: self._set_customization("theme_mode", self.mode_combo.currentData()))
        self.theme_combo.currentIndexChanged.connect(
            lambda _: self._set_customization("theme_id", self.theme_combo.currentData() or None))

        self.act_new.triggered.connect(self.new_funnel_dialog)
        self.act_open.triggered.connect(self.open_funnel_dialog)
        self.act_save.triggered.connect(self.save_funnel)
        self.act_save_as.triggered.connect(self.save_funnel_as)
        self.act_export.triggered.connect(self.export_funnel)
        self.act_quit.triggered.connect(self.close)
        self.act_about.triggered.connect(self.show_about)

    # ------------------------------------------------------------ Funnels --
    @property
    def template(self) -> TemplateDefinition:
        assert self.record is not None
        template = self.templates.get(self.record.template_id)
        if template is None:
            raise KeyError(self.record.template_id)
        return template

    def new_funnel_dialog(self) -> None:
        name, ok = QtWidgets.QInputDialog.getText(self, "New Funnel", "Funnel name:", text="My Funnel")
        if not ok or not name.strip():
            return
        self.new_funnel(FunnelRecord(name=name.strip()))

    def new_funnel(self, record: FunnelRecord) -> None:
        record.customization = CustomizationState(
            template_id=record.template_id,
            font_group=self.settings.get("font_group", "professional"),
            theme_id=self.settings.get("default_theme") or None,
        )
        self._load_record(record, None)
        self._dirty = False
        self.update_window_title()

    def _load_record(self, record: FunnelRecord, path: Optional[Path]) -> None:
        if record.template_id not in self.templates:
            raise KeyError(record.template_id)
        if self.session is not None:
            self.session.dispose()
        if self._unsubscribe is not None:
            self._unsubscribe()
        self.record = record
        self.record_path = path
        view = self.settings.get("default_view", "desktop")
        self.session = EditorSession(record.customization, view=view if view in ("desktop", "mobile") else "desktop")
        self._bridge = QtPointerBridge(self.session.bus)
        self._unsubscribe = self.session.subscribe(self._on_session_change)
        self._page = 1

        self.page_combo.blockSignals(True)
        self.page_combo.clear()
        for page in range(1, self.template.page_count + 1):
            self.page_combo.addItem(f"Page {page}", page)
        self.page_combo.blockSignals(False)
        (self.btn_desktop if self.session.view == "desktop" else self.btn_mobile).setChecked(True)

        self._load_panel()
        self._rebuild_canvas()
        self.update_preview()

    def open_funnel_dialog(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Open Funnel", "", FILE_FILTER)
        if not path:
            return
        try:
            record = storage.load_funnel(path)
            self._load_record(record, Path(path))
        except (OSError, ValueError, KeyError) as exc:
            logger.exception("Failed to open %s", path)
            QtWidgets.QMessageBox.critical(self, "Open failed", f"Could not open {path}:\n{exc}")
            return
        self._dirty = False
        self.update_window_title()
        if self.status is not None:
            self.status.showMessage(f"Opened {os.path.basename(path)}", 4000)

    def save_funnel(self) -> None:
        if self.record is None:
            return
        if not self.record_path:
            self.save_funnel_as()
            return
        self._write(self.record_path)

    def save_funnel_as(self) -> None:
        if self.record is None:
            return
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Save Funnel As", "", FILE_FILTER)
        if not path:
            return
        path = path if path.endswith(".funnel") else f"{path}.funnel"
        if self._write(Path(path)):
            self.record_path = Path(path)
            self.update_window_title()

    def _write(self, path: Path) -> bool:
        assert self.record is not None
        try:
            storage.save_funnel(path, self.record)
        except OSError as exc:
            logger.exception("Failed to save %s", path)
            QtWidgets.QMessageBox.critical(self, "Save failed", f"Could not save {path}:\n{exc}")
            return False
        self._dirty = False
        self.update_window_title()
        if self.status is not None:
            self.status.showMessage(f"Saved {path.name}", 4000)
        return True

    def export_funnel(self) -> None:
        if self.record is None:
            return
        out_dir = QtWidgets.QFileDialog.getExistingDirectory(self, "Export Pages To…")
        if not out_dir:
            return
        try:
            written = generator.render_funnel(self.record, out_dir, themes=self.themes, registry=self.templates)
        except OSError as exc:
            logger.exception("Export to %s failed", out_dir)
            QtWidgets.QMessageBox.critical(self, "Export failed", str(exc))
            return
        if self.status is not None:
            self.status.showMessage(f"Exported {len(written)} pages to {out_dir}", 5000)
        QtWidgets.QMessageBox.information(self, "Export complete", f"Your funnel was exported to:\n{out_dir}")

    # ------------------------------------------------------------- Canvas --
    def set_view(self, view: str) -> None:
        if self.session is None or self.session.view == view:
            return
        self.session.set_view(view)

    def _on_page_changed(self, index: int) -> None:
        page = self.page_combo.itemData(index)
        if page is None or page == self._page:
            return
        self._page = int(page)
        self._rebuild_canvas()
        self.update_preview()

    def _clear_canvas(self) -> None:
        if self.session is not None:
            self.session.dispose()
        while self.canvas_layout.count():
            item = self.canvas_layout.takeAt(0)
            widget = item.widget() if item is not None else None
            if widget is not None:
                widget.deleteLater()
        self._spacers.clear()
        self._labels.clear()
        self._logo = None

    def _add_label(self, field_id: str, is_cta_button: bool = False) -> None:
        assert self.session is not None and self.record is not None
        element = self.session.element(field_id, is_cta_button=is_cta_button)
        text = self.templates.field_value(self.record.template_id, field_id, self.record.customization.content)
        label = EditableLabel(element, text, self.canvas)
        label.set_selected(self.session.selection is not None and self.session.selection.field_id == field_id)
        self._labels.setdefault(field_id, []).append(label)
        if is_cta_button:
            row = QtWidgets.QHBoxLayout()
            row.addStretch(1)
            row.addWidget(label)
            row.addStretch(1)
            holder = QtWidgets.QWidget(self.canvas)
            holder.setLayout(row)
            self.canvas_layout.addWidget(holder)
        else:
            self.canvas_layout.addWidget(label)

    def _add_note(self, text: str) -> None:
        note = QtWidgets.QLabel(text, self.canvas)
        note.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        note.setMinimumHeight(120)
        note.setStyleSheet("background: #f3f4f6; color: #6b7280; border-radius: 8px;")
        self.canvas_layout.addWidget(note)

    def _rebuild_canvas(self) -> None:
        if self.record is None or self.session is None:
            return
        self._clear_canvas()
        customization = self.record.customization
        template = self.template
        sections = template.sections(self._page)
        spacer_min = self.settings.get_int("spacer_min", 0)
        spacer_max = self.settings.get_int("spacer_max", 300)

        for index, name in enumerate(sections):
            if name == "header":
                logo_path = customization.logo_url if os.path.isfile(customization.logo_url) else ""
                self._logo = LogoWidget(self.session.logo(), logo_path, customization.company_name, self.canvas)
                self.canvas_layout.addWidget(self._logo)
            elif name == "heading":
                self._add_label("heading")
            elif name == "subheading":
                self._add_label("subheading")
            elif name == "vsl":
                embed = resolve_video_embed(self.record.vsl_url, self.record.vsl_type)
                self._add_note(embed.placeholder or f"{embed.kind.title()} video\n{embed.src}")
            elif name in ("cta", "cta-2"):
                self._add_label("ctaText", is_cta_button=True)
            elif name == "case-studies":
                self._add_label("caseStudiesHeading")
                self._add_label("caseStudiesSubtext")
                count = len(self.record.case_studies)
                self._add_note(f"{count} case studies" if count else "Case studies will appear here when added")
            elif name == "booking-heading":
                self._add_label("bookingHeading")
            elif name == "calendar":
                self._add_note("Calendar booking widget will be embedded here")
            if index < len(sections) - 1:
                spacer_id = generate_spacer_id(template.id, self._page, name)
                controller = self.session.spacer(spacer_id, min_height=spacer_min, max_height=spacer_max)
                widget = SpacerWidget(controller, self.canvas)
                self._spacers.setdefault(spacer_id, []).append(widget)
                self.canvas_layout.addWidget(widget)
        self.canvas_layout.addStretch(1)

        if self.session.view == "mobile":
            self.canvas.setMaximumWidth(MOBILE_CANVAS_WIDTH)
        else:
            self.canvas.setMaximumWidth(QWIDGETSIZE_MAX)

    # ------------------------------------------------------ Session events --
    def _on_session_change(self, event: ChangeEvent) -> None:
        if event.kind == "spacing":
            for widget in self._spacers.get(event.identifier, []):
                widget.refresh()
        elif event.kind == "logoSize":
            if self._logo is not None:
                self._logo.refresh()
        elif event.kind in ("textSize", "buttonSize"):
            for label in self._labels.get(event.identifier, []):
                label.refresh()
        elif event.kind == "content":
            for label in self._labels.get(event.identifier, []):
                label.refresh(str(event.value))
        elif event.kind == "selection":
            for field_id, labels in self._labels.items():
                for label in labels:
                    label.set_selected(field_id == event.identifier)
            self._load_selection()
            return
        elif event.kind == "view":
            self._rebuild_canvas()
            self._load_selection()
        self._mark_dirty()
        self._debounce.start()

    def _mark_dirty(self) -> None:
        if not self._dirty:
            self._dirty = True
            self.update_window_title()

    # --------------------------------------------------------------- Panel --
    def _load_panel(self) -> None:
        assert self.record is not None
        customization = self.record.customization
        self._loading_panel = True
        try:
            self.company_edit.setText(customization.company_name)
            self.logo_edit.setText(customization.logo_url)
            self.footer_edit.setText(customization.footer_text)
            self.vsl_url_edit.setText(self.record.vsl_url)
            self.vsl_type_combo.setCurrentText(
                self.record.vsl_type if self.record.vsl_type in VSL_TYPES else "none")
            self.font_combo.setCurrentIndex(max(0, self.font_combo.findData(customization.font_group)))
            self.mode_combo.setCurrentIndex(max(0, self.mode_combo.findData(customization.theme_mode)))
            self.theme_combo.setCurrentIndex(max(0, self.theme_combo.findData(customization.theme_id or "")))
        finally:
            self._loading_panel = False
        self._load_selection()

    def _load_selection(self) -> None:
        selection = self.session.selection if self.session is not None else None
        enabled = selection is not None
        self.content_edit.setEnabled(enabled)
        self.size_spin.setEnabled(enabled)
        if selection is None or self.record is None or self.session is None:
            return
        field = self.template.field(selection.field_id)
        self._loading_panel = True
        try:
            view = self.session.view
            self.selection_label.setText(f"{field.label if field else selection.field_id} ({view})")
            self.content_edit.setPlainText(self.templates.field_value(
                self.record.template_id, selection.field_id, self.record.customization.content))
            if selection.is_cta_button:
                self.size_label.setText("Button scale (%)")
                self.size_spin.setRange(50, 200)
                value = self.session.responsive.button_scale(selection.field_id, view)
            else:
                self.size_label.setText("Font size (px)")
                self.size_spin.setRange(8, 200)
                value = self.session.responsive.text_size(selection.field_id, view, default=16)
            self.size_spin.setValue(int(round(value or 0)))
        finally:
            self._loading_panel = False

    def _on_content_edited(self) -> None:
        if self._loading_panel or self.session is None or self.session.selection is None:
            return
        self.session.edit_field(self.session.selection.field_id, self.content_edit.toPlainText())

    def _on_size_edited(self, value: int) -> None:
        if self._loading_panel or self.session is None or self.session.selection is None:
            return
        selection = self.session.selection
        if selection.is_cta_button:
            self.session.change_button_size(selection.field_id, value)
        else:
            self.session.change_text_size(selection.field_id, value)

    def _set_customization(self, attr: str, value: object) -> None:
        if self._loading_panel or self.record is None:
            return
        setattr(self.record.customization, attr, value)
        if attr in ("company_name", "logo_url"):
            self._rebuild_canvas()
        self._mark_dirty()
        self._debounce.start()

    def _set_record(self, attr: str, value: str) -> None:
        if self._loading_panel or self.record is None:
            return
        setattr(self.record, attr, value)
        self._rebuild_canvas()
        self._mark_dirty()
        self._debounce.start()

    # ------------------------------------------------------------- Preview --
    def update_preview(self) -> None:
        if self.record is None or self.session is None:
            return
        customization = self.record.customization
        html = generator.render_funnel_page(
            self.record.template_id,
            self._page,
            customization.content,
            customization,
            self.record.case_studies,
            theme=self.themes.get(customization.theme_id),
            overrides=customization.theme_overrides or None,
            view=self.session.view,
            registry=self.templates,
            vsl_url=self.record.vsl_url,
            vsl_type=self.record.vsl_type,
        )
        base = QtCore.QUrl.fromLocalFile(f"{self.record_path.parent}{os.sep}") if self.record_path else QtCore.QUrl()
        self.preview.setHtml(html, base)

    # ---------------------------------------------------------------- Misc --
    def show_about(self) -> None:
        QtWidgets.QMessageBox.information(
            self,
            "About",
            f"{APP_TITLE}\n\nA funnel page editor with live per-viewport sizing, built with PyQt6.",
        )

    def update_window_title(self) -> None:
        name = self.record.name if self.record else "Untitled"
        suffix = f" - {self.record_path.name}" if self.record_path else ""
        marker = "*" if self._dirty else ""
        self.setWindowTitle(f"{APP_TITLE} - {name}{marker}{suffix}")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # noqa: N802 (Qt override)
        if self.session is not None:
            self.session.dispose()
        super().closeEvent(event)
