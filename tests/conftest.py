"""Shared fixtures: PDFs generated with PyMuPDF and a headless Qt platform."""
import os

# Must be set before anything imports Qt
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import fitz  # noqa: E402
import pytest  # noqa: E402

A4 = (595.0, 842.0)


def make_pdf(page_count=3, size=A4, rotations=None, label=False):
    """Build a PDF in memory; optionally stamp each page with its number."""
    doc = fitz.open()
    for number in range(page_count):
        page = doc.new_page(width=size[0], height=size[1])
        if label:
            page.insert_text((72, 72), f"Page {number + 1}", fontsize=20)
        if rotations:
            page.set_rotation(rotations[number])
    data = doc.tobytes()
    doc.close()
    return data


def render_page(pdf_bytes, index, scale=1.0):
    """Render one page of a PDF to a PyMuPDF pixmap."""
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return doc[index].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)


@pytest.fixture
def blank_pdf():
    """Three blank A4 pages."""
    return make_pdf(3)


@pytest.fixture
def labelled_pdf():
    """Three A4 pages carrying the text "Page N"."""
    return make_pdf(3, label=True)


@pytest.fixture
def session_store(tmp_path):
    from inkpress.core.persistence import SessionStore

    return SessionStore(tmp_path / "session")
