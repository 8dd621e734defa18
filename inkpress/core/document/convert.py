"""
Conversions between PDFs and page images.
"""
import logging
from typing import Iterable, List

import fitz  # PyMuPDF

from ..errors import LoadFailure
from .pdf_reader import open_pdf

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = ("png", "jpeg", "jpg")


def images_to_pdf(images: Iterable[bytes]) -> bytes:
    """
    Build a PDF with one page per image, each page the size of its image.

    Args:
        images: Encoded PNG or JPEG images

    Returns:
        Bytes of the new PDF

    Raises:
        LoadFailure: If no image could be read
    """
    doc = fitz.open()
    try:
        for number, data in enumerate(images, start=1):
            try:
                pixmap = fitz.Pixmap(data)
            except Exception as e:
                # Unsupported files are skipped, the rest still convert
                logger.warning("Skipping image %d: %s", number, e)
                continue
            page = doc.new_page(width=pixmap.width, height=pixmap.height)
            page.insert_image(page.rect, stream=data)

        if doc.page_count == 0:
            raise LoadFailure("None of the images could be read")
        return doc.tobytes(garbage=4, deflate=True)
    finally:
        doc.close()


def pages_to_images(document_bytes: bytes, scale: float = 2.0) -> List[bytes]:
    """
    Render every page of a PDF to PNG.

    Args:
        document_bytes: Raw PDF data
        scale: Pixels per point

    Returns:
        PNG bytes per page, in page order
    """
    with open_pdf(document_bytes) as doc:
        matrix = fitz.Matrix(scale, scale)
        return [page.get_pixmap(matrix=matrix, alpha=False).tobytes("png") for page in doc]
