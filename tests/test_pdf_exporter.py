"""Tests for flattening annotations into the output PDF."""
import fitz
import pytest

from conftest import make_pdf, render_page
from inkpress.core.annotations import Stroke, Whiteout
from inkpress.core.document import PDFExporter, PdfDocumentBuilder, PdfPageRasterizer
from inkpress.core.document import pages
from inkpress.core.document.pages import PRIMARY_DOCUMENT, PageSource
from inkpress.core.errors import ExportFailure, RasterizeFailure
from inkpress.core.session import EditorSession

RED = (255, 0, 0)


def is_red(pixel):
    return pixel[0] > 200 and pixel[1] < 60 and pixel[2] < 60


def is_white(pixel):
    return all(channel > 245 for channel in pixel)


class FailingRasterizer(PdfPageRasterizer):
    """Fails to render one source page and counts render calls."""

    def __init__(self, failing_page):
        self.failing_page = failing_page
        self.calls = 0

    def render(self, document_bytes, page_number, scale, rotation):
        self.calls += 1
        if page_number == self.failing_page:
            raise RasterizeFailure(page_number, "simulated")
        return super().render(document_bytes, page_number, scale, rotation)


def test_unannotated_pages_are_copied_unchanged(qapp, labelled_pdf):
    session = EditorSession.from_pdf(labelled_pdf)
    session.add_annotation(1, Whiteout(0, 0, 50, 50))
    output = session.export()

    with fitz.open(stream=output, filetype="pdf") as doc:
        assert doc.page_count == 3
        assert "Page 1" in doc[0].get_text()
        assert "Page 3" in doc[2].get_text()
        # The flattened page is an image only
        assert doc[1].get_text().strip() == ""
        assert len(doc[1].get_images()) == 1

    for index in (0, 2):
        assert render_page(output, index).samples == render_page(labelled_pdf, index).samples


def test_stroke_over_whiteout_stays_visible(qapp):
    session = EditorSession.from_pdf(make_pdf(1))
    session.add_annotation(0, Whiteout(100, 50, 300, 300))
    session.add_annotation(0, Stroke(points=((100, 100), (200, 100)), color=RED, width=5))

    output = session.export(scale=2.0)
    pixmap = render_page(output, 0, scale=2.0)
    assert is_red(pixmap.pixel(300, 200))
    assert is_white(pixmap.pixel(300, 400))


def test_whiteout_covers_page_content(qapp, labelled_pdf):
    session = EditorSession.from_pdf(labelled_pdf)
    before = render_page(labelled_pdf, 0)
    assert not all(is_white(before.pixel(x, 66)) for x in range(72, 140))

    session.add_annotation(0, Whiteout(60, 40, 200, 50))
    output = session.export(scale=1.0)
    after = render_page(output, 0)
    assert all(is_white(after.pixel(x, 66)) for x in range(72, 140))


def test_rotated_page_flattens_as_displayed(qapp):
    session = EditorSession.from_pdf(make_pdf(1))
    session.rotate_page(0, 90)
    # Horizontal in page space, vertical once turned clockwise
    session.add_annotation(0, Stroke(points=((80, 100), (120, 100)), color=RED, width=6))

    output = session.export(scale=2.0)
    with fitz.open(stream=output, filetype="pdf") as doc:
        page = doc[0]
        assert (round(page.rect.width), round(page.rect.height)) == (842, 595)
        assert page.rotation == 0

    pixmap = render_page(output, 0, scale=2.0)
    # (80..120, 100) maps to x = 842 - 100, y = 80..120
    assert is_red(pixmap.pixel(2 * 742, 2 * 100))


def test_rotation_of_unannotated_page_is_kept(qapp, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf)
    session.rotate_page(2, 270)
    with fitz.open(stream=session.export(), filetype="pdf") as doc:
        assert doc[2].rotation == 270


def test_rasterize_failure_aborts_with_output_index(qapp, blank_pdf):
    """The error names the output position, and no later page is rendered."""
    rasterizer = FailingRasterizer(failing_page=2)
    session = EditorSession.from_pdf(blank_pdf, rasterizer=rasterizer)
    session.reorder_pages(2, 0)  # source page 2 is now first
    session.add_annotation(0, Whiteout(0, 0, 10, 10))
    session.add_annotation(2, Whiteout(0, 0, 10, 10))

    progress = []
    with pytest.raises(RasterizeFailure) as excinfo:
        session.export(progress=lambda done, total: progress.append(done))

    assert excinfo.value.page_index == 0
    assert rasterizer.calls == 1
    assert progress == [0]


def test_unknown_document_key_fails():
    document = pages.document_from_sources([(PageSource("missing", 0), 0)])
    with pytest.raises(ExportFailure):
        PDFExporter().export({PRIMARY_DOCUMENT: make_pdf(1)}, document, {})


def test_progress_reports_every_page(qapp, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf)
    reports = []
    session.export(progress=lambda done, total: reports.append((done, total)))
    assert reports == [(0, 3), (1, 3), (2, 3), (3, 3)]


class BrokenSaveBuilder(PdfDocumentBuilder):
    def save(self, handle):
        raise RuntimeError("cannot serialize")


class BrokenImageBuilder(PdfDocumentBuilder):
    def replace_page_content_with_image(self, handle, index, image_bytes):
        raise ValueError("bad image")


def test_save_error_becomes_export_failure(qapp, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf, builder=BrokenSaveBuilder())
    with pytest.raises(ExportFailure, match="cannot serialize"):
        session.export()


def test_image_swap_error_becomes_export_failure(qapp, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf, builder=BrokenImageBuilder())
    session.add_annotation(1, Whiteout(0, 0, 10, 10))
    with pytest.raises(ExportFailure, match="page 2"):
        session.export()
