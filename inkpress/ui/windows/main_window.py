"""
Main application window for Inkpress.
"""

import logging
import os
from typing import List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor, QIntValidator, QKeySequence, QPixmap, QIcon
from PyQt5.QtWidgets import (
    QAction,
    QApplication,
    QColorDialog,
    QComboBox,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QProgressDialog,
    QScrollArea,
    QSpinBox,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from inkpress import config
from inkpress.controllers import EditorController
from inkpress.core.document.convert import images_to_pdf, pages_to_images
from inkpress.core.document.pdf_reader import Raster
from inkpress.core.errors import LoadFailure
from inkpress.core.export import ExportWorker
from inkpress.core.page.render_worker import RenderGeneration, RenderWorker
from inkpress.core.text_edit import TextEditPhase
from inkpress.ui.widgets import PageCanvas, Tool
from inkpress.utils.warning_manager import WarningType, warning_manager

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main editor window: one page at a time, tools on top."""

    def __init__(self, controller: Optional[EditorController] = None):
        super().__init__()

        # Initialize core components
        self._init_core_components(controller)

        # Setup UI
        self._setup_window()
        self._setup_ui()
        self._setup_connections()
        self._update_actions()

    def _init_core_components(self, controller: Optional[EditorController]):
        """Initialize editing state and background work bookkeeping."""
        self.controller = controller or EditorController(parent=self)
        if self.controller.parent_widget is None:
            self.controller.parent_widget = self

        # View state
        self.zoom = config.DEFAULT_ZOOM
        self.current_page_index = 0

        # Live rendering
        self.render_generation = RenderGeneration()
        self._render_workers: List[RenderWorker] = []

        # File state
        self.current_file_path: Optional[str] = None

        # Export worker (created when needed)
        self.export_worker: Optional[ExportWorker] = None

    def _setup_window(self):
        """Setup main window properties."""
        self.setWindowTitle("Inkpress")
        self.setMinimumSize(800, 600)

    def _setup_ui(self):
        """Setup the user interface."""
        self._create_actions()
        self._create_menus()
        self._create_toolbar()
        self._create_tool_bar_row()
        self._setup_layout()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _create_actions(self):
        def action(text, callback, shortcut=None):
            act = QAction(text, self)
            if shortcut is not None:
                act.setShortcut(QKeySequence(shortcut))
            act.triggered.connect(callback)
            self.addAction(act)
            return act

        self.open_action = action("&Open PDF...", self.open_pdf, QKeySequence.Open)
        self.save_action = action("&Save PDF...", self.save_pdf, QKeySequence.Save)
        self.images_to_pdf_action = action("Images to PDF...", self.convert_images_to_pdf)
        self.pdf_to_images_action = action("PDF to Images...", self.convert_pdf_to_images)
        self.discard_action = action("&Discard Session", self.discard_session)
        self.quit_action = action("&Quit", self.close, QKeySequence.Quit)

        self.undo_action = action("&Undo", self.undo, "Ctrl+Z")
        self.redo_action = action("&Redo", self.redo, "Ctrl+Y")
        # Ctrl+Shift+Z also redoes
        self.redo_alt_action = action("Redo", self.redo, "Ctrl+Shift+Z")

        self.add_page_action = action("Add &Blank Page", self.add_blank_page)
        self.merge_action = action("&Add Pages from PDF...", self.merge_pdf)
        self.delete_page_action = action("&Delete Page", self.delete_page)
        self.rotate_left_action = action(
            "Rotate &Left", lambda: self.rotate_page(-90), "Ctrl+L"
        )
        self.rotate_right_action = action(
            "Rotate &Right", lambda: self.rotate_page(90), "Ctrl+R"
        )
        self.move_back_action = action("Move Page &Up", lambda: self.move_page(-1))
        self.move_forward_action = action("Move Page Do&wn", lambda: self.move_page(1))
        self.move_to_action = action("Move Page &To...", self.move_page_to)

        self.zoom_in_action = action("Zoom &In", lambda: self.adjust_zoom(1), "Ctrl+=")
        self.zoom_out_action = action("Zoom &Out", lambda: self.adjust_zoom(-1), "Ctrl+-")
        self.prev_page_action = action("&Previous Page", self.previous_page, "PgUp")
        self.next_page_action = action("&Next Page", self.next_page, "PgDown")

    def _create_menus(self):
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.open_action)
        file_menu.addAction(self.save_action)
        file_menu.addSeparator()
        file_menu.addAction(self.images_to_pdf_action)
        file_menu.addAction(self.pdf_to_images_action)
        file_menu.addSeparator()
        file_menu.addAction(self.discard_action)
        file_menu.addAction(self.quit_action)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.undo_action)
        edit_menu.addAction(self.redo_action)

        page_menu = menu_bar.addMenu("&Page")
        for act in (
            self.add_page_action,
            self.merge_action,
            self.delete_page_action,
            None,
            self.rotate_left_action,
            self.rotate_right_action,
            None,
            self.move_back_action,
            self.move_forward_action,
            self.move_to_action,
        ):
            if act is None:
                page_menu.addSeparator()
            else:
                page_menu.addAction(act)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.zoom_in_action)
        view_menu.addAction(self.zoom_out_action)
        view_menu.addSeparator()
        view_menu.addAction(self.prev_page_action)
        view_menu.addAction(self.next_page_action)

    def _create_toolbar(self):
        """Create the top toolbar with file, history and navigation controls."""
        self.top_frame = QFrame()
        self.top_frame.setObjectName("TopFrame")
        self.top_layout = QHBoxLayout(self.top_frame)
        self.top_layout.setContentsMargins(10, 8, 10, 8)
        self.top_layout.setSpacing(8)

        self._add_toolbar_button("Open", self.open_action)
        self._add_toolbar_button("Save", self.save_action)
        self._add_toolbar_separator(self.top_layout)
        self._add_toolbar_button("Undo", self.undo_action)
        self._add_toolbar_button("Redo", self.redo_action)
        self._add_toolbar_separator(self.top_layout)

        # File info
        self.file_name_label = QLabel("No PDF Loaded", self.top_frame)
        self.file_name_label.setStyleSheet("font-weight: bold; color: #8899AA;")
        self.top_layout.addWidget(self.file_name_label)
        self.top_layout.addStretch(1)

        self._create_page_navigation()
        self._add_toolbar_separator(self.top_layout)
        self._create_zoom_controls()
        self._add_toolbar_separator(self.top_layout)

        self._add_toolbar_button("+ Page", self.add_page_action)
        self._add_toolbar_button("Delete", self.delete_page_action)
        self._add_toolbar_button("⟲", self.rotate_left_action)
        self._add_toolbar_button("⟳", self.rotate_right_action)

    def _add_toolbar_button(self, text: str, act: QAction, layout=None) -> QToolButton:
        btn = QToolButton()
        btn.setDefaultAction(act)
        btn.setText(text)
        (layout or self.top_layout).addWidget(btn)
        return btn

    def _add_toolbar_separator(self, layout):
        separator = QFrame()
        separator.setFrameShape(QFrame.VLine)
        separator.setFrameShadow(QFrame.Sunken)
        layout.addWidget(separator)

    def _create_page_navigation(self):
        """Create page navigation controls."""
        self.page_input = QLineEdit(self.top_frame)
        self.page_input.setFixedWidth(50)
        self.page_input.setAlignment(Qt.AlignCenter)
        self.page_input.setValidator(QIntValidator(1, 9999))
        self.page_input.returnPressed.connect(self.page_number_changed)
        self.top_layout.addWidget(self.page_input)

        self.total_pages_label = QLabel("/ 0", self.top_frame)
        self.top_layout.addWidget(self.total_pages_label)

    def _create_zoom_controls(self):
        """Create zoom controls."""
        self._add_toolbar_button("-", self.zoom_out_action)
        self.zoom_label = QLabel(self._zoom_text(), self.top_frame)
        self.zoom_label.setFixedWidth(50)
        self.zoom_label.setAlignment(Qt.AlignCenter)
        self.top_layout.addWidget(self.zoom_label)
        self._add_toolbar_button("+", self.zoom_in_action)

    def _create_tool_bar_row(self):
        """Create the drawing tool row."""
        self.tool_frame = QFrame()
        self.tool_frame.setObjectName("ToolFrame")
        self.tool_layout = QHBoxLayout(self.tool_frame)
        self.tool_layout.setContentsMargins(10, 4, 10, 4)
        self.tool_layout.setSpacing(6)

        self.tool_buttons = {}
        for tool, label in (
            (Tool.DRAW, "Draw"),
            (Tool.HIGHLIGHT, "Highlight"),
            (Tool.ERASER, "Eraser"),
            (Tool.WHITEOUT, "Whiteout"),
            (Tool.TEXT, "Text"),
            (Tool.SELECT, "Select"),
        ):
            btn = QToolButton(self.tool_frame)
            btn.setText(label)
            btn.setCheckable(True)
            btn.setAutoExclusive(True)
            btn.clicked.connect(lambda checked, t=tool: self.set_tool(t))
            self.tool_layout.addWidget(btn)
            self.tool_buttons[tool] = btn
        self.tool_buttons[Tool.DRAW].setChecked(True)

        self._add_toolbar_separator(self.tool_layout)

        for rgb in config.PALETTE:
            swatch = QToolButton(self.tool_frame)
            swatch.setFixedSize(20, 20)
            swatch.setStyleSheet(f"background-color: rgb{tuple(rgb)}; border: none;")
            swatch.clicked.connect(lambda checked, c=rgb: self._update_color_button(c))
            self.tool_layout.addWidget(swatch)

        self.color_button = QToolButton(self.tool_frame)
        self.color_button.setToolTip("Color")
        self.color_button.clicked.connect(self.choose_color)
        self.tool_layout.addWidget(self.color_button)

        self.brush_spin = QSpinBox(self.tool_frame)
        self.brush_spin.setRange(1, 50)
        self.brush_spin.setValue(int(config.DEFAULT_BRUSH_SIZE))
        self.brush_spin.setToolTip("Brush size")
        self.brush_spin.valueChanged.connect(self._on_brush_size_changed)
        self.tool_layout.addWidget(self.brush_spin)

        self.font_combo = QComboBox(self.tool_frame)
        self.font_combo.addItems(config.FONTS)
        self.font_combo.setCurrentText(config.DEFAULT_FONT)
        self.tool_layout.addWidget(self.font_combo)
        self.tool_layout.addStretch(1)

    def _setup_layout(self):
        """Setup main window layout."""
        self.canvas = PageCanvas()
        self._update_color_button(config.PALETTE[0])

        self.page_container = QWidget()
        container_layout = QVBoxLayout(self.page_container)
        container_layout.setAlignment(Qt.AlignHCenter | Qt.AlignTop)
        container_layout.setContentsMargins(20, 20, 20, 20)
        container_layout.addWidget(self.canvas)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.page_container)

        # Inline editor floating over the page while typing text
        self.text_input = QLineEdit(self.canvas)
        self.text_input.hide()

        central = QWidget()
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.addWidget(self.top_frame)
        main_layout.addWidget(self.tool_frame)
        main_layout.addWidget(self.scroll_area)
        self.setCentralWidget(central)

    def _setup_connections(self):
        """Connect controller and canvas signals."""
        self.controller.session_changed.connect(self._on_session_changed)
        self.controller.pages_changed.connect(self._on_pages_changed)
        self.controller.annotations_changed.connect(self._on_annotations_changed)

        self.canvas.stroke_finished.connect(self._on_stroke_finished)
        self.canvas.whiteout_finished.connect(self._on_whiteout_finished)
        self.canvas.text_requested.connect(self._on_text_requested)
        self.canvas.text_pick_requested.connect(self._on_text_pick_requested)

        self.text_input.returnPressed.connect(self.commit_text)
        self.text_input.textEdited.connect(self._on_text_edited)

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def open_pdf(self):
        """Open a PDF file dialog."""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open PDF", "", "PDF Files (*.pdf)"
        )
        if file_path:
            self.load_pdf(file_path)

    def load_pdf(self, file_path: str) -> bool:
        """Start a new session on a PDF file."""
        if not self._confirm_discard():
            return False
        if not self.controller.open_file(file_path):
            return False
        self.current_file_path = file_path
        self.file_name_label.setText(os.path.basename(file_path))
        return True

    def discard_session(self):
        if self.controller.session is None:
            return
        if not warning_manager.show_confirmation(
            self,
            WarningType.DISCARD_SESSION,
            "Discard Session",
            "Close the document and throw away all edits?",
            show_dont_ask=False,
        ):
            return
        self.current_file_path = None
        self.controller.discard_session()

    def _confirm_discard(self) -> bool:
        """Ask before replacing a session that has unsaved edits."""
        session = self.controller.session
        if session is None or not session.has_unsaved_changes:
            return True
        result = warning_manager.show_save_discard_cancel(
            self,
            WarningType.EXIT_UNSAVED,
            "Unsaved Changes",
            "You have unsaved edits. Do you want to save them first?",
        )
        if result == QMessageBox.Save:
            return self.save_pdf(wait=True)
        return result == QMessageBox.Discard

    def save_pdf(self, wait: bool = False) -> bool:
        """
        Flatten annotations and write the edited PDF.

        Args:
            wait: Block until the export worker is done

        Returns:
            True if the export was started (or, with ``wait``, succeeded)
        """
        session = self.controller.session
        if session is None:
            QMessageBox.warning(self, "No PDF", "No PDF document is currently loaded.")
            return False
        if self.export_worker is not None:
            return False
        self.commit_text()

        default_dir = (
            os.path.dirname(self.current_file_path) if self.current_file_path else ""
        )
        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Edited PDF",
            os.path.join(default_dir, config.OUTPUT_FILENAME),
            "PDF Files (*.pdf)",
            options=QFileDialog.DontConfirmOverwrite,
        )
        if not output_path:
            return False
        if os.path.exists(output_path) and not warning_manager.show_confirmation(
            self,
            WarningType.OVERWRITE_FILE,
            "Overwrite File",
            f"{os.path.basename(output_path)} already exists. Replace it?",
        ):
            return False

        # Create progress dialog
        progress = QProgressDialog("Preparing export...", None, 0, 100, self)
        progress.setWindowTitle("Saving PDF")
        progress.setWindowModality(Qt.WindowModality.WindowModal)
        progress.setMinimumDuration(0)
        progress.setCancelButton(None)
        progress.setAutoClose(False)
        progress.setAutoReset(False)
        progress.show()

        self.export_worker = ExportWorker(session, output_path)
        outcome = {"success": False}

        def on_progress(message):
            progress.setLabelText(message)

        def on_page_progress(current, total):
            if total > 0:
                progress.setValue(int((current / total) * 100))
                progress.setLabelText(f"Processing pages: {current}/{total}")

        def on_finished(success, message):
            progress.close()
            outcome["success"] = success
            if success:
                session.mark_saved()
                self.controller.save_state()
                QMessageBox.information(self, "Success", message)
            else:
                QMessageBox.critical(self, "Save Failed", message)
            self._update_actions()

        self.export_worker.progress.connect(on_progress)
        self.export_worker.page_progress.connect(on_page_progress)
        self.export_worker.export_finished.connect(on_finished)
        self.export_worker.finished.connect(self._on_export_worker_done)
        self.export_worker.start()

        if wait:
            self.export_worker.wait()
            QApplication.processEvents()
            return outcome["success"]
        return True

    def _on_export_worker_done(self):
        if self.export_worker is not None:
            self.export_worker.deleteLater()
            self.export_worker = None

    def convert_images_to_pdf(self):
        """Build a PDF from image files and open it for editing."""
        file_paths, _ = QFileDialog.getOpenFileNames(
            self, "Select Images", "", "Images (*.png *.jpg *.jpeg)"
        )
        if not file_paths:
            return
        output_path, _ = QFileDialog.getSaveFileName(
            self, "Save PDF", "images.pdf", "PDF Files (*.pdf)"
        )
        if not output_path:
            return

        try:
            images = []
            for path in file_paths:
                with open(path, "rb") as f:
                    images.append(f.read())
            data = images_to_pdf(images)
            with open(output_path, "wb") as f:
                f.write(data)
        except (OSError, LoadFailure) as e:
            logger.error("Image conversion failed: %s", e)
            QMessageBox.critical(self, "Conversion Failed", str(e))
            return

        self.load_pdf(output_path)

    def convert_pdf_to_images(self):
        """Write each page of a PDF as a PNG file."""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Select PDF", "", "PDF Files (*.pdf)"
        )
        if not file_path:
            return
        output_dir = QFileDialog.getExistingDirectory(self, "Select Output Folder")
        if not output_dir:
            return

        base_name = os.path.splitext(os.path.basename(file_path))[0]
        try:
            with open(file_path, "rb") as f:
                images = pages_to_images(f.read())
            for number, png in enumerate(images, start=1):
                with open(
                    os.path.join(output_dir, f"{base_name}-page-{number}.png"), "wb"
                ) as f:
                    f.write(png)
        except (OSError, LoadFailure) as e:
            logger.error("PDF conversion failed: %s", e)
            QMessageBox.critical(self, "Conversion Failed", str(e))
            return

        QMessageBox.information(
            self, "Conversion Complete", f"Wrote {len(images)} image(s) to {output_dir}"
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self):
        self.controller.undo()

    def redo(self):
        self.controller.redo()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def add_blank_page(self):
        index = self.controller.add_blank_page()
        if index is not None:
            self.show_page(index)

    def merge_pdf(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Add Pages from PDF", "", "PDF Files (*.pdf)"
        )
        if file_path:
            self.controller.merge_file(file_path)

    def delete_page(self):
        index = self.current_page_index
        if self.controller.page_has_annotations(index):
            if not warning_manager.show_confirmation(
                self,
                WarningType.DELETE_ANNOTATED_PAGE,
                "Delete Page",
                "This page has annotations. Delete it anyway?",
            ):
                return
        self.controller.delete_page(index)

    def rotate_page(self, delta: int):
        self.controller.rotate_page(self.current_page_index, delta)

    def move_page(self, offset: int):
        session = self.controller.session
        if session is None:
            return
        target = self.current_page_index + offset
        if not 0 <= target < session.page_count:
            return
        if self.controller.reorder_pages(self.current_page_index, target):
            self.show_page(target)

    def move_page_to(self):
        session = self.controller.session
        if session is None:
            return
        number, ok = QInputDialog.getInt(
            self, "Move Page", "New position:", self.current_page_index + 1, 1,
            session.page_count,
        )
        if ok and self.controller.reorder_pages(self.current_page_index, number - 1):
            self.show_page(number - 1)

    # ------------------------------------------------------------------
    # Navigation and zoom
    # ------------------------------------------------------------------

    def show_page(self, page_index: int):
        session = self.controller.session
        if session is None:
            return
        self.commit_text()
        self.current_page_index = max(0, min(page_index, session.page_count - 1))
        self._update_page_display()
        self.render_current_page()

    def previous_page(self):
        self.show_page(self.current_page_index - 1)

    def next_page(self):
        self.show_page(self.current_page_index + 1)

    def page_number_changed(self):
        text = self.page_input.text()
        if text:
            self.show_page(int(text) - 1)

    def adjust_zoom(self, direction: int):
        """Step the zoom in or out, clamped to the allowed range."""
        new_zoom = round(self.zoom + direction * config.ZOOM_STEP, 2)
        new_zoom = max(config.MIN_ZOOM, min(config.MAX_ZOOM, new_zoom))
        if new_zoom == self.zoom:
            return
        self.zoom = new_zoom
        self.zoom_label.setText(self._zoom_text())
        self.commit_text()
        self.render_current_page()

    def _zoom_text(self) -> str:
        return f"{round(self.zoom * 100)}%"

    def _update_page_display(self):
        current, total = self.controller.page_info(self.current_page_index)
        self.page_input.setText(str(current) if total else "")
        self.total_pages_label.setText(f"/ {total}")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_current_page(self):
        """Start a background render of the current page at the current zoom."""
        session = self.controller.session
        if session is None:
            self.canvas.clear()
            return

        generation = self.render_generation.next()
        slot = session.slot_at(self.current_page_index)
        device_scale = self.devicePixelRatioF()
        worker = RenderWorker(
            generation,
            self.current_page_index,
            session.source_bytes(self.current_page_index),
            slot.source.page_index,
            self.zoom * device_scale,
            slot.rotation,
            session.rasterizer,
        )
        worker.rendered.connect(self._on_page_rendered)
        worker.failed.connect(self._on_render_failed)
        worker.finished.connect(lambda w=worker: self._on_render_worker_done(w))
        self._render_workers.append(worker)
        worker.start()

    def _on_page_rendered(self, generation: int, raster: Raster):
        if not self.render_generation.is_current(generation):
            return
        session = self.controller.session
        if session is None:
            return

        image = raster.to_qimage()
        image.setDevicePixelRatio(self.devicePixelRatioF())
        transform = session.view_transform(
            self.current_page_index, raster.width, raster.height
        )
        self.canvas.set_page(
            image, transform, session.get_annotations(self.current_page_index)
        )

    def _on_render_failed(self, generation: int, page_index: int, message: str):
        if not self.render_generation.is_current(generation):
            return
        self.canvas.clear()
        self.statusBar().showMessage(
            f"Page {page_index + 1} could not be rendered: {message}", 5000
        )

    def _on_render_worker_done(self, worker: RenderWorker):
        if worker in self._render_workers:
            self._render_workers.remove(worker)
        worker.deleteLater()

    # ------------------------------------------------------------------
    # Tools and annotations
    # ------------------------------------------------------------------

    def set_tool(self, tool: Tool):
        self.commit_text()
        self.canvas.set_tool(tool)
        self.tool_buttons[tool].setChecked(True)

    def choose_color(self):
        current = QColor(*self.canvas.color)
        color = QColorDialog.getColor(current, self, "Choose Color")
        if color.isValid():
            self._update_color_button((color.red(), color.green(), color.blue()))

    def _update_color_button(self, rgb):
        self.canvas.color = tuple(rgb)
        pixmap = QPixmap(16, 16)
        pixmap.fill(QColor(*rgb))
        self.color_button.setIcon(QIcon(pixmap))

    def _on_brush_size_changed(self, value: int):
        self.canvas.brush_size = float(value)

    def _on_stroke_finished(self, points, kind):
        width = self.canvas.brush_size / self.canvas.pixels_per_unit()
        self.controller.create_stroke(
            self.current_page_index, points, kind, self.canvas.color, width
        )

    def _on_whiteout_finished(self, start, end):
        self.controller.create_whiteout(self.current_page_index, start, end)

    def _on_text_requested(self, anchor):
        self.commit_text()
        size = self.canvas.brush_size * config.TEXT_SIZE_PER_BRUSH
        if self.controller.begin_text(
            self.current_page_index,
            anchor,
            self.font_combo.currentText(),
            size,
            self.canvas.color,
        ):
            self._show_text_input("")

    def _on_text_pick_requested(self, point):
        self.commit_text()
        if self.controller.begin_text_edit(self.current_page_index, point):
            self._show_text_input(self.controller.text_editor.state.draft)

    def _show_text_input(self, text: str):
        state = self.controller.text_editor.state
        transform = self.canvas.transform
        x, y = transform.to_screen(
            state.anchor[0], state.anchor[1], self.canvas.width(), self.canvas.height()
        )
        height = max(20, round(state.font_size * self.canvas.pixels_per_unit()) + 8)
        # The anchor is the text baseline
        self.text_input.setGeometry(round(x), round(y) - height, 240, height)
        self.text_input.setText(text)
        self.text_input.show()
        self.text_input.setFocus()

    def _on_text_edited(self, text: str):
        if self.controller.text_editor is not None:
            self.controller.text_editor.update_draft(text)

    def commit_text(self):
        """Finish the pending text entry, if any."""
        editor = self.controller.text_editor
        if editor is None or editor.state.phase == TextEditPhase.IDLE:
            self.text_input.hide()
            return
        draft = self.text_input.text()
        self.text_input.hide()
        self.controller.commit_text(draft)

    def cancel_text(self):
        self.text_input.hide()
        self.controller.cancel_text()

    # ------------------------------------------------------------------
    # Controller signals
    # ------------------------------------------------------------------

    def _on_session_changed(self):
        # "Don't ask again" choices last for one document
        warning_manager.reset_all_warnings()
        self.text_input.hide()
        self.current_page_index = 0
        if self.controller.session is None:
            self.file_name_label.setText("No PDF Loaded")
        elif self.current_file_path is None:
            self.file_name_label.setText("Restored session")
        self._update_page_display()
        self.render_current_page()
        self._update_actions()

    def _on_pages_changed(self):
        session = self.controller.session
        if session is None:
            return
        self.current_page_index = min(self.current_page_index, session.page_count - 1)
        self._update_page_display()
        self.render_current_page()
        self._update_actions()

    def _on_annotations_changed(self):
        session = self.controller.session
        if session is not None:
            self.canvas.set_annotations(
                session.get_annotations(self.current_page_index)
            )
        self._update_actions()

    def _update_actions(self):
        has_session = self.controller.session is not None
        for act in (
            self.save_action,
            self.discard_action,
            self.add_page_action,
            self.merge_action,
            self.delete_page_action,
            self.rotate_left_action,
            self.rotate_right_action,
            self.move_back_action,
            self.move_forward_action,
            self.move_to_action,
        ):
            act.setEnabled(has_session)
        self.undo_action.setEnabled(self.controller.can_undo())
        self.redo_action.setEnabled(self.controller.can_redo())
        self.redo_alt_action.setEnabled(self.controller.can_redo())

        title = "Inkpress"
        if has_session and self.controller.session.has_unsaved_changes:
            title += " *"
        self.setWindowTitle(title)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def keyPressEvent(self, event):  # type: ignore[override]
        """Handle keyboard shortcuts."""
        if event.key() == Qt.Key.Key_Escape:
            self.cancel_text()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event):  # type: ignore[override]
        """Handle window close, offering to save unsaved edits."""
        session = self.controller.session
        if session is not None and session.has_unsaved_changes:
            result = warning_manager.show_save_discard_cancel(
                self,
                WarningType.EXIT_UNSAVED,
                "Unsaved Changes",
                "You have unsaved edits. Do you want to save them before exiting?",
                show_dont_ask=True,
            )
            if result == QMessageBox.Save:
                if not self.save_pdf(wait=True):
                    event.ignore()
                    return
            elif result == QMessageBox.Discard:
                self.controller.store.clear()
            else:
                event.ignore()
                return

        self.commit_text()
        for worker in list(self._render_workers):
            worker.wait()
        event.accept()
