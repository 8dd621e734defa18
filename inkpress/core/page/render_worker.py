"""
Background rendering for the live page view.
"""
import logging

from PyQt5.QtCore import QThread, pyqtSignal

from ..document.pdf_reader import PdfPageRasterizer
from ..errors import RasterizeFailure

logger = logging.getLogger(__name__)


class RenderGeneration:
    """
    Monotonic counter naming the newest render request.

    A completion carrying an older number belongs to a page, zoom or
    rotation that is no longer on screen and must be dropped.
    """

    def __init__(self):
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, generation: int) -> bool:
        return generation == self._current


class RenderWorker(QThread):
    """Worker thread rendering one page without freezing the UI."""

    # Signals
    rendered = pyqtSignal(int, object)  # generation, Raster
    failed = pyqtSignal(int, int, str)  # generation, page_index, message

    def __init__(
        self,
        generation: int,
        page_index: int,
        document_bytes: bytes,
        source_page: int,
        scale: float,
        rotation: int,
        rasterizer: PdfPageRasterizer = None,
        parent=None,
    ):
        super().__init__(parent)
        self.generation = generation
        self.page_index = page_index
        self._document_bytes = document_bytes
        self._source_page = source_page
        self._scale = scale
        self._rotation = rotation
        self._rasterizer = rasterizer or PdfPageRasterizer()

    def run(self):
        """Render the page in the background thread."""
        try:
            raster = self._rasterizer.render(
                self._document_bytes, self._source_page, self._scale, self._rotation
            )
        except RasterizeFailure as e:
            logger.warning("Live render of page %d failed: %s", self.page_index + 1, e)
            self.failed.emit(self.generation, self.page_index, str(e))
            return
        self.rendered.emit(self.generation, raster)
