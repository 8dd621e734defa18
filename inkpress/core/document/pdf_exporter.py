"""
Flatten annotations into page imagery and assemble the output PDF.
"""
import logging
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import fitz  # PyMuPDF
from PyQt5.QtCore import QBuffer, QByteArray, QIODevice
from PyQt5.QtGui import QImage, QPainter

from inkpress import config
from ..annotations.models import Annotation
from ..errors import ExportFailure, RasterizeFailure
from ..page.painter import paint_annotations
from ..page.transform import ViewTransform
from .pages import DocumentState, PageSlot
from .pdf_builder import PdfDocumentBuilder
from .pdf_reader import PageGeometry, PdfPageRasterizer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def encode_png(image: QImage) -> bytes:
    """Encode a QImage as PNG bytes."""
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.WriteOnly)
    if not image.save(buffer, "PNG"):
        raise ExportFailure("Failed to encode page image")
    buffer.close()
    return bytes(data)


class PDFExporter:
    """
    Builds the final document from the page slots.

    Slots are processed one after another. Pages without annotations are
    copied as they are; annotated pages are re-rendered at the export scale,
    painted over with the same routine the live canvas uses, and replaced by
    a single full-page image. Editor state is only read.
    """

    def __init__(
        self,
        rasterizer: Optional[PdfPageRasterizer] = None,
        builder: Optional[PdfDocumentBuilder] = None,
        scale: float = config.EXPORT_SCALE,
    ):
        self.rasterizer = rasterizer or PdfPageRasterizer()
        self.builder = builder or PdfDocumentBuilder()
        self.scale = scale

    def export(
        self,
        sources: Mapping[str, bytes],
        document: DocumentState,
        annotations: Mapping[str, Tuple[Annotation, ...]],
        progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """
        Produce the output PDF.

        Args:
            sources: Registered document bytes by key
            document: Page slots in output order
            annotations: Annotations by slot id
            progress: Optional callback receiving (done, total) pages

        Returns:
            Bytes of the finished PDF

        Raises:
            RasterizeFailure: A page could not be rendered; carries the
                output page index. Nothing is saved.
            ExportFailure: The builder could not assemble or save the result
        """
        handles: Dict[str, fitz.Document] = {}
        geometry: Dict[str, List[PageGeometry]] = {}
        output = self.builder.new_document()
        total = document.page_count

        try:
            for index, slot in enumerate(document.slots):
                if progress:
                    progress(index, total)

                key = slot.source.document_key
                if key not in sources:
                    raise ExportFailure(
                        f"Page {index + 1} refers to unknown document {key!r}"
                    )
                if key not in handles:
                    handles[key] = self.builder.load(sources[key])

                try:
                    self.builder.copy_page_from(output, handles[key], slot.source.page_index)
                    self.builder.set_page_rotation(output, index, slot.rotation)
                except Exception as e:
                    raise ExportFailure(f"Failed to copy page {index + 1}: {e}") from e

                page_annotations = annotations.get(slot.slot_id, ())
                if not page_annotations:
                    continue

                if key not in geometry:
                    geometry[key] = self.rasterizer.describe(sources[key])
                page_geometry = geometry[key][slot.source.page_index]

                image = self.flatten_page(
                    index, sources[key], slot, page_geometry, page_annotations
                )
                try:
                    self.builder.replace_page_content_with_image(
                        output, index, encode_png(image)
                    )
                except ExportFailure:
                    raise
                except Exception as e:
                    raise ExportFailure(f"Failed to flatten page {index + 1}: {e}") from e
                logger.debug(
                    "Flattened page %d (%d annotations)", index + 1, len(page_annotations)
                )

            if progress:
                progress(total, total)

            try:
                return self.builder.save(output)
            except Exception as e:
                raise ExportFailure(f"Failed to save document: {e}") from e
        finally:
            output.close()
            for handle in handles.values():
                handle.close()

    def flatten_page(
        self,
        index: int,
        document_bytes: bytes,
        slot: PageSlot,
        geometry: PageGeometry,
        annotations: Tuple[Annotation, ...],
    ) -> QImage:
        """
        Render one slot at the export scale with its annotations on top.

        Raises:
            RasterizeFailure: With ``index`` as the failing page
        """
        try:
            raster = self.rasterizer.render(
                document_bytes, slot.source.page_index, self.scale, slot.rotation
            )
        except RasterizeFailure as e:
            raise RasterizeFailure(index, e.reason) from e

        image = raster.to_qimage()
        transform = ViewTransform(
            geometry.width,
            geometry.height,
            slot.rotation,
            image.width(),
            image.height(),
        )

        painter = QPainter(image)
        try:
            paint_annotations(painter, annotations, transform)
        finally:
            painter.end()
        return image
