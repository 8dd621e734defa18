"""
Page rasterizer backed by PyMuPDF.
"""
import logging
from dataclasses import dataclass
from typing import List

import fitz  # PyMuPDF
from PyQt5.QtGui import QImage

from ..errors import LoadFailure, RasterizeFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageGeometry:
    """Unrotated page size in points plus the page's own rotation."""

    width: float
    height: float
    rotation: int = 0


@dataclass(frozen=True)
class Raster:
    """RGB pixel buffer of one rendered page."""

    width: int
    height: int
    stride: int
    samples: bytes

    def to_qimage(self) -> QImage:
        image = QImage(
            self.samples, self.width, self.height, self.stride, QImage.Format_RGB888
        )
        # Detach from the Python buffer before it goes away
        return image.convertToFormat(QImage.Format_ARGB32_Premultiplied)


def open_pdf(data: bytes) -> fitz.Document:
    """
    Parse PDF bytes.

    Raises:
        LoadFailure: If the bytes are not a readable PDF
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise LoadFailure(f"Error loading PDF: {e}") from e
    if doc.page_count == 0:
        doc.close()
        raise LoadFailure("Error loading PDF: document has no pages")
    return doc


class PdfPageRasterizer:
    """
    Renders pages straight from document bytes.

    Every call opens its own document, so calls never share mutable state
    and can be repeated freely.
    """

    def describe(self, document_bytes: bytes) -> List[PageGeometry]:
        """
        Get the geometry of every page.

        Args:
            document_bytes: Raw PDF data

        Returns:
            One PageGeometry per page, in page order
        """
        with open_pdf(document_bytes) as doc:
            pages = []
            for page in doc:
                rect = page.rect  # already rotated by PyMuPDF
                if page.rotation % 180:
                    pages.append(PageGeometry(rect.height, rect.width, page.rotation))
                else:
                    pages.append(PageGeometry(rect.width, rect.height, page.rotation))
            return pages

    def render(
        self, document_bytes: bytes, page_number: int, scale: float, rotation: int
    ) -> Raster:
        """
        Render a page to an RGB raster.

        Args:
            document_bytes: Raw PDF data
            page_number: 0-based page index inside that document
            scale: Pixels per point
            rotation: Absolute page rotation to render with

        Returns:
            The rendered raster

        Raises:
            RasterizeFailure: If the page cannot be rendered
        """
        try:
            with open_pdf(document_bytes) as doc:
                page = doc.load_page(page_number)
                page.set_rotation(rotation)
                pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
                return Raster(pix.width, pix.height, pix.stride, bytes(pix.samples))
        except Exception as e:
            logger.warning("Rendering page %d failed: %s", page_number + 1, e)
            raise RasterizeFailure(page_number, str(e)) from e
