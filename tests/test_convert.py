"""Tests for image/PDF conversion."""
import fitz
import pytest

from conftest import make_pdf
from inkpress.core.document.convert import images_to_pdf, pages_to_images
from inkpress.core.errors import LoadFailure


def make_png(width, height, color=(255, 0, 0)):
    pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pixmap.set_rect(pixmap.irect, color)
    return pixmap.tobytes("png")


def test_images_become_pages_of_their_size():
    data = images_to_pdf([make_png(40, 30), make_png(20, 60)])
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 2
        assert (doc[0].rect.width, doc[0].rect.height) == (40, 30)
        assert (doc[1].rect.width, doc[1].rect.height) == (20, 60)


def test_unreadable_images_are_skipped():
    data = images_to_pdf([b"not an image", make_png(10, 10)])
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 1


def test_no_readable_image_fails():
    with pytest.raises(LoadFailure):
        images_to_pdf([b"nope"])


def test_pages_to_images_renders_every_page():
    images = pages_to_images(make_pdf(2, size=(100, 50)), scale=2.0)
    assert len(images) == 2
    pixmap = fitz.Pixmap(images[0])
    assert (pixmap.width, pixmap.height) == (200, 100)
