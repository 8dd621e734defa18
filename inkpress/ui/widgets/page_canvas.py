"""
Live view of one page with its annotations and the drawing tools.
"""
from enum import Enum
from typing import List, Optional, Sequence

from PyQt5.QtCore import QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter, QTransform
from PyQt5.QtWidgets import QWidget

from inkpress import config
from inkpress.core.annotations.models import (
    Annotation,
    Color,
    Point,
    Stroke,
    StrokeKind,
    Whiteout,
)
from inkpress.core.page.painter import paint_annotations
from inkpress.core.page.transform import ViewTransform


class Tool(Enum):
    DRAW = "draw"
    HIGHLIGHT = "highlight"
    ERASER = "eraser"
    WHITEOUT = "whiteout"
    TEXT = "text"
    SELECT = "select"


STROKE_KINDS = {
    Tool.DRAW: StrokeKind.INK,
    Tool.HIGHLIGHT: StrokeKind.HIGHLIGHT,
    Tool.ERASER: StrokeKind.ERASE,
}


class PageCanvas(QWidget):
    """
    Shows a rendered page and turns pointer gestures into page-space shapes.

    The widget only reports finished gestures; it never changes annotations
    itself. Pointer positions go through the page's ViewTransform, the same
    one the exporter rebuilds at its own scale.
    """

    # Signals
    stroke_finished = pyqtSignal(list, object)  # page-space points, StrokeKind
    whiteout_finished = pyqtSignal(tuple, tuple)  # page-space start, end
    text_requested = pyqtSignal(tuple)  # page-space anchor
    text_pick_requested = pyqtSignal(tuple)  # page-space point

    def __init__(self, parent=None):
        super().__init__(parent)

        # Page data
        self.image: Optional[QImage] = None
        self.transform: Optional[ViewTransform] = None
        self.annotations: Sequence[Annotation] = ()

        # Tool state
        self.tool = Tool.DRAW
        self.color: Color = (0, 0, 0)
        self.brush_size = config.DEFAULT_BRUSH_SIZE  # screen pixels

        # Gesture in progress
        self._points: List[Point] = []
        self._drag_start: Optional[Point] = None
        self._drag_end: Optional[Point] = None

        self.setMouseTracking(False)
        self.setFocusPolicy(Qt.StrongFocus)

    def set_page(
        self, image: QImage, transform: ViewTransform, annotations: Sequence[Annotation]
    ) -> None:
        """Show a freshly rendered page."""
        self.image = image
        self.transform = transform
        self.annotations = annotations
        self._reset_gesture()

        # Logical size; the raster may be denser on HiDPI screens
        ratio = image.devicePixelRatioF() or 1.0
        width = round(image.width() / ratio)
        height = round(image.height() / ratio)
        self.setFixedSize(width, height)
        self.update()

    def set_annotations(self, annotations: Sequence[Annotation]) -> None:
        self.annotations = annotations
        self.update()

    def clear(self) -> None:
        self.image = None
        self.transform = None
        self.annotations = ()
        self._reset_gesture()
        self.update()

    def set_tool(self, tool: Tool) -> None:
        self._reset_gesture()
        self.tool = tool

    def pixels_per_unit(self) -> float:
        """On-screen pixels per page unit at the current zoom."""
        if self.transform is None or not self.width():
            return 1.0
        return self.transform.scale * self.width() / self.transform.raster_width

    def to_page_space(self, pos) -> Point:
        return self.transform.to_page_space(pos.x(), pos.y(), self.width(), self.height())

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        """Custom paint event to render the page."""
        if self.image is None or self.transform is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.drawImage(QRectF(0, 0, self.width(), self.height()), self.image)

        to_widget = QTransform.fromScale(
            self.width() / self.transform.raster_width,
            self.height() / self.transform.raster_height,
        )
        paint_annotations(painter, self.annotations, self.transform, to_widget)

        pending = self._pending_annotation()
        if pending is not None:
            paint_annotations(painter, [pending], self.transform, to_widget)
            if self.tool == Tool.WHITEOUT:
                self._paint_drag_outline(painter, pending, to_widget)

        painter.end()

    def _pending_annotation(self) -> Optional[Annotation]:
        if self._points:
            return Stroke(
                points=tuple(self._points),
                color=self.color,
                width=self.brush_size / self.pixels_per_unit(),
                kind=STROKE_KINDS[self.tool],
            )
        if self._drag_start is not None and self._drag_end is not None:
            (x0, y0), (x1, y1) = self._drag_start, self._drag_end
            return Whiteout(x0, y0, x1 - x0, y1 - y0)
        return None

    def _paint_drag_outline(self, painter: QPainter, whiteout: Whiteout, to_widget):
        painter.save()
        painter.setTransform(self.transform.to_qtransform() * to_widget)
        painter.setPen(QColor(120, 120, 120))
        painter.drawRect(QRectF(whiteout.x, whiteout.y, whiteout.width, whiteout.height))
        painter.restore()

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        if self.transform is None or event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)

        point = self.to_page_space(event.pos())
        if self.tool == Tool.TEXT:
            self.text_requested.emit(point)
        elif self.tool == Tool.SELECT:
            self.text_pick_requested.emit(point)
        elif self.tool == Tool.WHITEOUT:
            self._drag_start = point
            self._drag_end = point
        else:
            self._points = [point]
        self.update()

    def mouseMoveEvent(self, event):
        if self.transform is None or not event.buttons() & Qt.LeftButton:
            return super().mouseMoveEvent(event)

        point = self.to_page_space(event.pos())
        if self._points:
            self._points.append(point)
        elif self._drag_start is not None:
            self._drag_end = point
        self.update()

    def mouseReleaseEvent(self, event):
        if self.transform is None or event.button() != Qt.LeftButton:
            return super().mouseReleaseEvent(event)

        point = self.to_page_space(event.pos())
        if self._points and self._points[-1] != point:
            self._points.append(point)
        elif self._drag_start is not None:
            self._drag_end = point

        if self._points:
            self.stroke_finished.emit(list(self._points), STROKE_KINDS[self.tool])
        elif self._drag_start is not None and self._drag_end is not None:
            start, end = self._drag_start, self._drag_end
            if start != end:
                self.whiteout_finished.emit(start, end)
        self._reset_gesture()
        self.update()

    def leaveEvent(self, event):
        # Leaving the page ends the gesture as if the button was released
        if self._points or self._drag_start is not None:
            if self._points:
                self.stroke_finished.emit(list(self._points), STROKE_KINDS[self.tool])
            self._reset_gesture()
            self.update()
        super().leaveEvent(event)

    def _reset_gesture(self) -> None:
        self._points = []
        self._drag_start = None
        self._drag_end = None
