"""
Controller for editing operations and user-facing error reporting.
"""
import logging
from typing import List, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtWidgets import QMessageBox, QWidget

from inkpress import config
from inkpress.core.annotations.models import Color, Point, Stroke, StrokeKind, Whiteout
from inkpress.core.errors import LoadFailure, StructuralEditFailure
from inkpress.core.persistence import SessionStore
from inkpress.core.session import EditorSession
from inkpress.core.text_edit import TextEditor

logger = logging.getLogger(__name__)


class EditorController(QObject):
    """Routes UI gestures to the session and keeps the stored copy current."""

    # Signals
    session_changed = pyqtSignal()  # A document was opened or restored
    pages_changed = pyqtSignal()  # Page slots were added/removed/moved/rotated
    annotations_changed = pyqtSignal()  # Annotations of any page changed

    def __init__(self, store: Optional[SessionStore] = None, parent: QWidget = None):
        super().__init__()
        self.parent_widget = parent
        self.store = store if store is not None else SessionStore()
        self.session: Optional[EditorSession] = None
        self.text_editor: Optional[TextEditor] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def open_bytes(self, data: bytes) -> bool:
        """
        Start a new session on PDF bytes.

        Returns:
            True if the document was loaded
        """
        try:
            session = EditorSession.from_pdf(data)
        except LoadFailure as e:
            logger.error("Load failed: %s", e)
            QMessageBox.critical(self.parent_widget, "Error", str(e))
            return False
        self._set_session(session)
        self.save_state()
        return True

    def open_file(self, file_path: str) -> bool:
        try:
            with open(file_path, "rb") as f:
                data = f.read()
        except OSError as e:
            QMessageBox.critical(self.parent_widget, "Error", f"Cannot read file: {e}")
            return False
        return self.open_bytes(data)

    def restore_session(self) -> bool:
        """
        Reopen the session saved by a previous run.

        Returns:
            True if a session was restored
        """
        try:
            session = self.store.load()
        except LoadFailure as e:
            logger.warning("Discarding stored session: %s", e)
            self.store.clear()
            return False
        if session is None:
            return False
        self._set_session(session)
        return True

    def discard_session(self) -> None:
        self.session = None
        self.text_editor = None
        self.store.clear()
        self.session_changed.emit()

    def _set_session(self, session: EditorSession) -> None:
        self.session = session
        self.text_editor = TextEditor(session)
        self.session_changed.emit()

    def save_state(self) -> None:
        """Keep the stored session in step with the editor."""
        if self.session is None:
            return
        try:
            self.store.save(self.session)
        except OSError as e:
            logger.warning("Auto-save failed: %s", e)

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def create_stroke(
        self,
        page_index: int,
        points: List[Point],
        kind: StrokeKind,
        color: Color,
        width: float,
    ) -> bool:
        """
        Create a stroke annotation from a finished pointer gesture.

        Args:
            page_index: Page where the stroke was drawn
            points: Page-space points
            kind: Ink, highlight or erase
            color: RGB color tuple
            width: Stroke width in page units

        Returns:
            True if the annotation was created
        """
        if not points or self.session is None:
            return False
        stroke = Stroke(points=tuple(points), color=color, width=width, kind=kind)
        return self._add(page_index, stroke)

    def create_whiteout(self, page_index: int, start: Point, end: Point) -> bool:
        if self.session is None:
            return False
        whiteout = Whiteout(start[0], start[1], end[0] - start[0], end[1] - start[1])
        if whiteout.width == 0 or whiteout.height == 0:
            return False
        return self._add(page_index, whiteout)

    def _add(self, page_index: int, annotation) -> bool:
        if not self.session.add_annotation(page_index, annotation):
            return False
        self.annotations_changed.emit()
        self.save_state()
        return True

    def begin_text(
        self,
        page_index: int,
        anchor: Point,
        font_family: str = config.DEFAULT_FONT,
        font_size: float = config.DEFAULT_FONT_SIZE,
        color: Color = (0, 0, 0),
    ) -> bool:
        if self.text_editor is None:
            return False
        return self.text_editor.begin_placing(
            page_index, anchor, font_family, font_size, color
        )

    def begin_text_edit(self, page_index: int, point: Point) -> bool:
        if self.text_editor is None:
            return False
        return self.text_editor.begin_editing(page_index, point)

    def commit_text(self, draft: str) -> bool:
        if self.text_editor is None:
            return False
        self.text_editor.update_draft(draft)
        if not self.text_editor.commit():
            return False
        self.annotations_changed.emit()
        self.save_state()
        return True

    def cancel_text(self) -> None:
        if self.text_editor is not None:
            self.text_editor.cancel()

    def undo(self) -> bool:
        """
        Undo the last edit.

        Returns:
            True if undo was successful
        """
        if self.session is None or not self.session.undo():
            return False
        self._after_history_step()
        return True

    def redo(self) -> bool:
        """
        Redo the last undone edit.

        Returns:
            True if redo was successful
        """
        if self.session is None or not self.session.redo():
            return False
        self._after_history_step()
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.session is not None and self.session.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.session is not None and self.session.can_redo()

    def _after_history_step(self) -> None:
        self.cancel_text()
        # A history step may carry page changes as well
        self.pages_changed.emit()
        self.annotations_changed.emit()
        self.save_state()

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def add_blank_page(self) -> Optional[int]:
        return self._structural_edit("Add Page", lambda s: s.add_blank_page())

    def delete_page(self, page_index: int) -> bool:
        return (
            self._structural_edit("Delete Page", lambda s: s.delete_page(page_index))
            is not None
        )

    def rotate_page(self, page_index: int, delta: int) -> bool:
        return (
            self._structural_edit(
                "Rotate Page", lambda s: s.rotate_page(page_index, delta)
            )
            is not None
        )

    def reorder_pages(self, from_index: int, to_index: int) -> bool:
        return (
            self._structural_edit(
                "Move Page", lambda s: s.reorder_pages(from_index, to_index) or True
            )
            is not None
        )

    def merge_file(self, file_path: str) -> Optional[int]:
        """
        Append the pages of another PDF.

        Returns:
            Number of pages added, or None on failure
        """
        try:
            with open(file_path, "rb") as f:
                data = f.read()
        except OSError as e:
            QMessageBox.warning(self.parent_widget, "Add Pages", f"Cannot read file: {e}")
            return None
        return self._structural_edit("Add Pages", lambda s: s.merge_pages_from(data))

    def _structural_edit(self, title: str, edit):
        if self.session is None:
            return None
        self.cancel_text()
        try:
            result = edit(self.session)
        except StructuralEditFailure as e:
            logger.info("%s rejected: %s", title, e)
            QMessageBox.warning(self.parent_widget, title, str(e))
            return None
        self.pages_changed.emit()
        self.annotations_changed.emit()
        self.save_state()
        return result

    def page_has_annotations(self, page_index: int) -> bool:
        return self.session is not None and bool(
            self.session.get_annotations(page_index)
        )

    def page_info(self, page_index: int) -> Tuple[int, int]:
        """(1-based page number, page count) for display."""
        if self.session is None:
            return 0, 0
        return page_index + 1, self.session.page_count
