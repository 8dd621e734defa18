"""
Mapping between page space and pixels.

Page space is the unrotated page in points with a top-left origin, the
coordinate system PyMuPDF uses for page content. Rotation is clockwise,
like the PDF ``/Rotate`` key. Scale is taken from the raster that was
actually produced, never from the zoom that was requested, so rounding in
the rasterizer cannot make pointer input drift.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt5.QtGui import QTransform

Point = Tuple[float, float]


@dataclass(frozen=True)
class ViewTransform:
    """How one raster of one page relates to that page's own coordinates."""

    page_width: float
    page_height: float
    rotation: int
    raster_width: float
    raster_height: float

    @classmethod
    def for_scale(
        cls, page_width: float, page_height: float, rotation: int, scale: float
    ) -> "ViewTransform":
        """Transform for a raster rendered at exactly ``scale`` pixels per point."""
        rotated_width, rotated_height = rotated_size(page_width, page_height, rotation)
        return cls(
            page_width,
            page_height,
            rotation % 360,
            rotated_width * scale,
            rotated_height * scale,
        )

    @property
    def rotated_size(self) -> Tuple[float, float]:
        return rotated_size(self.page_width, self.page_height, self.rotation)

    @property
    def scale_x(self) -> float:
        return self.raster_width / self.rotated_size[0]

    @property
    def scale_y(self) -> float:
        return self.raster_height / self.rotated_size[1]

    @property
    def scale(self) -> float:
        """Mean pixels per point, for sizes that must stay isotropic."""
        return (self.scale_x + self.scale_y) / 2.0

    def to_raster(self, px: float, py: float) -> Point:
        """Page space to raster pixels."""
        rx, ry = _rotate(px, py, self.page_width, self.page_height, self.rotation)
        return rx * self.scale_x, ry * self.scale_y

    def from_raster(self, rx: float, ry: float) -> Point:
        """Raster pixels to page space."""
        return _unrotate(
            rx / self.scale_x,
            ry / self.scale_y,
            self.page_width,
            self.page_height,
            self.rotation,
        )

    def to_page_space(
        self,
        pointer_x: float,
        pointer_y: float,
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
        device_scale: float = 1.0,
    ) -> Point:
        """
        Convert a pointer position on the displayed page to page space.

        Args:
            pointer_x, pointer_y: Pointer position relative to the page's
                top-left corner on screen, in logical pixels
            viewport_width, viewport_height: Displayed size of the page in
                logical pixels; when omitted the raster is assumed to be
                shown at ``raster / device_scale``
            device_scale: Device pixel ratio the raster was rendered for

        Returns:
            (x, y) in page space
        """
        ratio_x, ratio_y = self._display_ratio(
            viewport_width, viewport_height, device_scale
        )
        return self.from_raster(pointer_x * ratio_x, pointer_y * ratio_y)

    def to_screen(
        self,
        px: float,
        py: float,
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
        device_scale: float = 1.0,
    ) -> Point:
        """Inverse of ``to_page_space``."""
        ratio_x, ratio_y = self._display_ratio(
            viewport_width, viewport_height, device_scale
        )
        rx, ry = self.to_raster(px, py)
        return rx / ratio_x, ry / ratio_y

    def to_qtransform(self) -> QTransform:
        """Page space to raster pixels as a QTransform, for painting."""
        w, h = self.page_width, self.page_height
        if self.rotation == 90:
            rotation = QTransform(0, 1, -1, 0, h, 0)
        elif self.rotation == 180:
            rotation = QTransform(-1, 0, 0, -1, w, h)
        elif self.rotation == 270:
            rotation = QTransform(0, -1, 1, 0, 0, w)
        else:
            rotation = QTransform()
        return rotation * QTransform.fromScale(self.scale_x, self.scale_y)

    def _display_ratio(
        self,
        viewport_width: Optional[float],
        viewport_height: Optional[float],
        device_scale: float,
    ) -> Tuple[float, float]:
        # Raster pixels per displayed pixel
        ratio_x = self.raster_width / viewport_width if viewport_width else device_scale
        ratio_y = (
            self.raster_height / viewport_height if viewport_height else device_scale
        )
        return ratio_x, ratio_y


def rotated_size(width: float, height: float, rotation: int) -> Tuple[float, float]:
    """Size of a page once displayed with ``rotation``."""
    if rotation % 180:
        return height, width
    return width, height


def _rotate(x: float, y: float, w: float, h: float, rotation: int) -> Point:
    if rotation == 90:
        return h - y, x
    if rotation == 180:
        return w - x, h - y
    if rotation == 270:
        return y, w - x
    return x, y


def _unrotate(u: float, v: float, w: float, h: float, rotation: int) -> Point:
    if rotation == 90:
        return v, h - u
    if rotation == 180:
        return w - u, h - v
    if rotation == 270:
        return w - v, u
    return u, v
