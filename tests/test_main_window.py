"""Smoke tests for the editor window."""
import pytest

from inkpress import config
from inkpress.controllers import EditorController
from inkpress.core.document import PdfPageRasterizer
from inkpress.ui.windows import MainWindow


@pytest.fixture
def window(qtbot, session_store, blank_pdf, tmp_path):
    window = MainWindow(EditorController(store=session_store))
    qtbot.addWidget(window)
    path = tmp_path / "doc.pdf"
    path.write_bytes(blank_pdf)
    assert window.load_pdf(str(path))
    qtbot.waitUntil(lambda: window.canvas.image is not None, timeout=5000)
    return window


def test_opened_document_is_shown(window):
    assert window.file_name_label.text() == "doc.pdf"
    assert window.total_pages_label.text() == "/ 3"
    assert window.page_input.text() == "1"
    assert not window.undo_action.isEnabled()


def test_zoom_is_clamped(window):
    window.zoom = config.MAX_ZOOM
    window.adjust_zoom(1)
    assert window.zoom == config.MAX_ZOOM
    window.adjust_zoom(-1)
    assert window.zoom == pytest.approx(config.MAX_ZOOM - config.ZOOM_STEP)


def test_stale_render_is_dropped(window, blank_pdf):
    raster = PdfPageRasterizer().render(blank_pdf, 0, 1.0, 0)
    stale = window.render_generation.current
    window.render_generation.next()
    window.canvas.clear()

    window._on_page_rendered(stale, raster)
    assert window.canvas.image is None


def test_navigation_and_page_edits(window):
    window.next_page()
    assert window.current_page_index == 1
    window.rotate_page(90)
    assert window.controller.session.slot_at(1).rotation == 90
    assert window.undo_action.isEnabled()

    window.undo()
    assert window.controller.session.slot_at(1).rotation == 0
    window.add_blank_page()
    assert window.current_page_index == 3
    assert window.total_pages_label.text() == "/ 4"
    # Nothing to save when the window closes at teardown
    window.controller.session.mark_saved()
