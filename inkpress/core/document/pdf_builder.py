"""
Document builder backed by PyMuPDF.

Handles are plain ``fitz.Document`` objects.
"""
import fitz  # PyMuPDF

from .pdf_reader import open_pdf


class PdfDocumentBuilder:
    """Creates and mutates output PDFs page by page."""

    def load(self, data: bytes) -> fitz.Document:
        return open_pdf(data)

    def new_document(self) -> fitz.Document:
        return fitz.open()

    def blank_document(self, width: float, height: float) -> bytes:
        """Bytes of a one-page document with an empty page of the given size."""
        doc = fitz.open()
        try:
            doc.new_page(width=width, height=height)
            return doc.tobytes(garbage=4, deflate=True)
        finally:
            doc.close()

    def add_blank_page(self, handle: fitz.Document, width: float, height: float) -> None:
        handle.new_page(width=width, height=height)

    def remove_page(self, handle: fitz.Document, index: int) -> None:
        handle.delete_page(index)

    def set_page_rotation(self, handle: fitz.Document, index: int, degrees: int) -> None:
        handle[index].set_rotation(degrees)

    def copy_page_from(
        self, handle: fitz.Document, donor: fitz.Document, donor_index: int
    ) -> fitz.Page:
        """Append one page of ``donor`` to ``handle`` and return the copy."""
        handle.insert_pdf(donor, from_page=donor_index, to_page=donor_index)
        return handle[handle.page_count - 1]

    def replace_page_content_with_image(
        self, handle: fitz.Document, index: int, image_bytes: bytes
    ) -> None:
        """
        Swap a page for one showing only ``image_bytes``.

        The new page keeps the visible size of the old one (after rotation)
        and has no rotation of its own; the image already shows the page
        the way it was displayed.

        Args:
            handle: Document being built
            index: 0-based page index
            image_bytes: Encoded image (PNG) covering the whole page
        """
        rect = handle[index].rect
        handle.delete_page(index)
        page = handle.new_page(pno=index, width=rect.width, height=rect.height)
        page.insert_image(page.rect, stream=image_bytes)

    def save(self, handle: fitz.Document) -> bytes:
        return handle.tobytes(garbage=4, deflate=True)
