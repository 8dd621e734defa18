"""
Annotation drawing shared by the live canvas and the flatten pipeline.

Both passes hand a QPainter and a ViewTransform to ``paint_annotations``;
annotations are drawn in page units under the transform, so widths, font
sizes and rotation come out the same at any scale.
"""
from typing import Iterable, Optional

from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QColor, QFont, QPainter, QPainterPath, QPen, QTransform

from inkpress import config
from ..annotations.models import (
    Annotation,
    AnnotationType,
    Stroke,
    StrokeKind,
    Text,
    Whiteout,
)
from .transform import ViewTransform


def paint_annotations(
    painter: QPainter,
    annotations: Iterable[Annotation],
    transform: ViewTransform,
    base: Optional[QTransform] = None,
) -> None:
    """
    Draw annotations in insertion order, later ones on top.

    Args:
        painter: Active painter on the target surface
        annotations: Records to draw
        transform: Page space to target pixels
        base: Extra transform applied after ``transform`` (e.g. the
            raster-to-widget scale of the live canvas)
    """
    painter.save()
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setRenderHint(QPainter.TextAntialiasing)
    page_to_target = transform.to_qtransform()
    if base is not None:
        page_to_target = page_to_target * base
    painter.setTransform(page_to_target, True)

    for annotation in annotations:
        painter.save()
        if annotation.annotation_type == AnnotationType.STROKE:
            _paint_stroke(painter, annotation)
        elif annotation.annotation_type == AnnotationType.TEXT:
            _paint_text(painter, annotation)
        elif annotation.annotation_type == AnnotationType.WHITEOUT:
            _paint_whiteout(painter, annotation)
        painter.restore()

    painter.restore()


def stroke_color(stroke: Stroke) -> QColor:
    if stroke.kind == StrokeKind.ERASE:
        return QColor(*config.PAGE_BACKGROUND)
    return QColor(*stroke.color)


def _paint_stroke(painter: QPainter, stroke: Stroke) -> None:
    pen = QPen(stroke_color(stroke))
    pen.setWidthF(stroke.width)
    pen.setCapStyle(Qt.RoundCap)
    pen.setJoinStyle(Qt.RoundJoin)
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)

    if stroke.kind == StrokeKind.HIGHLIGHT:
        painter.setOpacity(config.HIGHLIGHT_OPACITY)

    points = [QPointF(x, y) for x, y in stroke.points]
    if len(points) == 1:
        # A tap leaves a round dot the size of the pen
        painter.drawPoint(points[0])
        return

    # One path so overlapping segments of a highlight do not darken
    path = QPainterPath(points[0])
    for point in points[1:]:
        path.lineTo(point)
    painter.drawPath(path)


def _paint_text(painter: QPainter, text: Text) -> None:
    font = QFont(text.font_family)
    # Pixel size is in page units here and the painter transform scales it
    font.setPixelSize(max(1, round(text.font_size)))
    painter.setFont(font)
    painter.setPen(QColor(*text.color))

    x, y = text.anchor
    line_spacing = painter.fontMetrics().lineSpacing()
    for line_number, line in enumerate(text.text.split("\n")):
        painter.drawText(QPointF(x, y + line_number * line_spacing), line)


def _paint_whiteout(painter: QPainter, whiteout: Whiteout) -> None:
    painter.setPen(Qt.NoPen)
    painter.fillRect(
        QRectF(whiteout.x, whiteout.y, whiteout.width, whiteout.height),
        QColor(*config.PAGE_BACKGROUND),
    )
