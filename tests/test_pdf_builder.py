"""Tests for the PyMuPDF-backed document builder."""
import fitz

from conftest import make_pdf
from inkpress.core.document import PdfDocumentBuilder


def test_blank_document_has_requested_size():
    data = PdfDocumentBuilder().blank_document(300, 200)
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 1
        assert (doc[0].rect.width, doc[0].rect.height) == (300, 200)


def test_page_operations_on_handle():
    builder = PdfDocumentBuilder()
    donor = builder.load(make_pdf(2, label=True))
    handle = builder.new_document()
    try:
        builder.copy_page_from(handle, donor, 1)
        builder.add_blank_page(handle, 100, 100)
        builder.set_page_rotation(handle, 0, 90)
        assert handle.page_count == 2
        assert handle[0].rotation == 90
        assert "Page 2" in handle[0].get_text()

        builder.remove_page(handle, 1)
        data = builder.save(handle)
    finally:
        handle.close()
        donor.close()

    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 1


def test_replace_page_content_keeps_visible_size():
    builder = PdfDocumentBuilder()
    handle = builder.load(make_pdf(1, rotations=[90]))
    png = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 10, 10), False).tobytes("png")
    try:
        builder.replace_page_content_with_image(handle, 0, png)
        page = handle[0]
        assert page.rotation == 0
        assert (round(page.rect.width), round(page.rect.height)) == (842, 595)
        assert page.get_text().strip() == ""
        assert len(page.get_images()) == 1
    finally:
        handle.close()
