"""Tests for saving and restoring the session between runs."""
import json

import pytest

from conftest import make_pdf
from inkpress.core.annotations import Text, Whiteout
from inkpress.core.errors import LoadFailure
from inkpress.core.session import EditorSession


def test_load_without_saved_session(session_store):
    assert not session_store.exists()
    assert session_store.load() is None


def test_save_and_load_round_trip(session_store, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf)
    session.add_annotation(0, Text(anchor=(100, 100), text="kept"))
    session.merge_pages_from(make_pdf(1, size=(200, 200)))
    session.add_annotation(3, Whiteout(0, 0, 20, 20))
    session.undo()

    session_store.save(session)
    restored = session_store.load()

    assert restored.document == session.document
    assert restored.annotation_map() == session.annotation_map()
    assert restored.sources == session.sources
    assert restored.can_redo()
    assert restored.has_unsaved_changes


def test_save_removes_files_of_previous_session(session_store, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf)
    session.merge_pages_from(make_pdf(1))
    session_store.save(session)
    assert len(list(session_store.directory.glob("*.pdf"))) == 2

    session_store.save(EditorSession.from_pdf(blank_pdf))
    assert len(list(session_store.directory.glob("*.pdf"))) == 1


def test_corrupted_session_raises_load_failure(session_store, blank_pdf):
    session_store.save(EditorSession.from_pdf(blank_pdf))
    session_store.json_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LoadFailure):
        session_store.load()


def test_missing_document_file_raises_load_failure(session_store, blank_pdf):
    session_store.save(EditorSession.from_pdf(blank_pdf))
    payload = json.loads(session_store.json_path.read_text(encoding="utf-8"))
    for file_name in payload["documents"].values():
        (session_store.directory / file_name).unlink()
    with pytest.raises(LoadFailure):
        session_store.load()


def test_clear_removes_everything(session_store, blank_pdf):
    session_store.save(EditorSession.from_pdf(blank_pdf))
    session_store.clear()
    assert not session_store.exists()
    assert list(session_store.directory.iterdir()) == []


def test_interrupted_save_keeps_previous_session_loadable(
    session_store, blank_pdf, monkeypatch
):
    session = EditorSession.from_pdf(blank_pdf)
    session.add_blank_page()
    session_store.save(session)
    saved_document = session.document

    session.merge_pages_from(make_pdf(1, size=(200, 200)))
    write_atomic = session_store._write_atomic

    def fail_on_index(path, data):
        if path.suffix == ".json":
            raise OSError("disk full")
        write_atomic(path, data)

    monkeypatch.setattr(session_store, "_write_atomic", fail_on_index)
    with pytest.raises(OSError):
        session_store.save(session)
    monkeypatch.undo()

    restored = session_store.load()
    assert restored.document == saved_document
    assert restored.source_bytes(0) == blank_pdf
    for index in range(restored.page_count):
        restored.page_geometry(index)


def test_unchanged_documents_are_not_rewritten(session_store, blank_pdf):
    session = EditorSession.from_pdf(blank_pdf)
    session_store.save(session)
    (document_file,) = session_store.directory.glob("*.pdf")
    first_write = document_file.stat().st_mtime_ns

    session.add_blank_page()
    session_store.save(session)
    assert document_file.stat().st_mtime_ns == first_write
