"""Tests for the background export thread."""
import os

import fitz

from inkpress.core.annotations import Whiteout
from inkpress.core.document import PdfDocumentBuilder
from inkpress.core.export import ExportWorker
from inkpress.core.session import EditorSession


class BrokenSaveBuilder(PdfDocumentBuilder):
    def save(self, handle):
        raise RuntimeError("cannot serialize")


def run_worker(session, output_path):
    worker = ExportWorker(session, str(output_path))
    results = []
    worker.export_finished.connect(lambda ok, message: results.append((ok, message)))
    worker.run()
    return results


def test_export_writes_output_file(qapp, blank_pdf, tmp_path):
    session = EditorSession.from_pdf(blank_pdf)
    session.add_annotation(0, Whiteout(0, 0, 50, 50))
    output_path = tmp_path / "out.pdf"

    results = run_worker(session, output_path)

    assert results == [(True, "PDF saved successfully!")]
    with fitz.open(str(output_path)) as doc:
        assert doc.page_count == 3


def test_builder_error_is_reported(qapp, blank_pdf, tmp_path):
    session = EditorSession.from_pdf(blank_pdf, builder=BrokenSaveBuilder())
    output_path = tmp_path / "out.pdf"

    results = run_worker(session, output_path)

    assert len(results) == 1
    ok, message = results[0]
    assert not ok
    assert "cannot serialize" in message
    assert os.listdir(tmp_path) == []


def test_unexpected_error_is_reported(qapp, blank_pdf, tmp_path, monkeypatch):
    session = EditorSession.from_pdf(blank_pdf)

    def explode(**kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(session, "export", explode)
    results = run_worker(session, tmp_path / "out.pdf")

    assert results == [(False, "Unexpected error during export: boom")]


def test_finished_signal_reaches_thread_owner(qtbot, blank_pdf, tmp_path):
    session = EditorSession.from_pdf(blank_pdf, builder=BrokenSaveBuilder())
    worker = ExportWorker(session, str(tmp_path / "out.pdf"))

    with qtbot.waitSignal(worker.export_finished, timeout=10000) as blocker:
        worker.start()
    worker.wait()

    assert blocker.args[0] is False
