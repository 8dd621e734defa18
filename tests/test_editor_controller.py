"""Tests for the controller between UI gestures and the session."""
import pytest
from PyQt5.QtWidgets import QMessageBox

from conftest import make_pdf
from inkpress.controllers import EditorController
from inkpress.core.annotations import StrokeKind


@pytest.fixture
def messages(monkeypatch):
    """Record message boxes instead of showing them."""
    shown = []
    for kind in ("critical", "warning", "information"):
        monkeypatch.setattr(
            QMessageBox,
            kind,
            staticmethod(lambda *args, kind=kind: shown.append((kind, args[1]))),
        )
    return shown


@pytest.fixture
def controller(qapp, session_store, blank_pdf):
    controller = EditorController(store=session_store)
    assert controller.open_bytes(blank_pdf)
    return controller


def test_open_invalid_pdf_reports_error(qapp, session_store, messages):
    controller = EditorController(store=session_store)
    assert not controller.open_bytes(b"garbage")
    assert controller.session is None
    assert messages[0][0] == "critical"


def test_stroke_emits_change_and_autosaves(qtbot, controller, session_store):
    with qtbot.waitSignal(controller.annotations_changed):
        assert controller.create_stroke(
            0, [(10, 10), (20, 20)], StrokeKind.INK, (255, 0, 0), 4
        )
    restored = session_store.load()
    assert len(restored.get_annotations(0)) == 1


def test_zero_area_whiteout_is_ignored(controller):
    assert not controller.create_whiteout(0, (10, 10), (10, 50))
    assert controller.create_whiteout(0, (10, 10), (40, 50))
    assert controller.page_has_annotations(0)


def test_text_flow(controller):
    assert controller.begin_text(1, (100, 100))
    assert controller.commit_text("Hello")
    assert controller.begin_text_edit(1, (100, 100))
    assert controller.commit_text("World")
    assert controller.session.get_annotations(1)[0].text == "World"


def test_undo_redo_emit_page_changes(qtbot, controller):
    controller.rotate_page(0, 90)
    with qtbot.waitSignal(controller.pages_changed):
        assert controller.undo()
    assert controller.session.slot_at(0).rotation == 0
    assert controller.can_redo()
    assert controller.redo()
    assert not controller.redo()


def test_rejected_structural_edit_is_reported(qapp, session_store, messages):
    controller = EditorController(store=session_store)
    controller.open_bytes(make_pdf(1))
    assert not controller.delete_page(0)
    assert messages == [("warning", "Delete Page")]
    assert controller.session.page_count == 1


def test_page_operations(controller, tmp_path):
    assert controller.add_blank_page() == 3
    assert controller.reorder_pages(3, 0)
    donor = tmp_path / "donor.pdf"
    donor.write_bytes(make_pdf(2))
    assert controller.merge_file(str(donor)) == 2
    assert controller.page_info(0) == (1, 6)


def test_restore_session(qapp, controller, session_store):
    controller.create_whiteout(0, (0, 0), (10, 10))
    other = EditorController(store=session_store)
    assert other.restore_session()
    assert other.page_has_annotations(0)


def test_corrupted_store_is_discarded(qapp, session_store, blank_pdf):
    EditorController(store=session_store).open_bytes(blank_pdf)
    session_store.json_path.write_text("[]", encoding="utf-8")
    controller = EditorController(store=session_store)
    assert not controller.restore_session()
    assert not session_store.exists()
