"""Tests for the pending text edit state machine."""
from inkpress.core.annotations import Stroke, Text
from inkpress.core.session import EditorSession
from inkpress.core.text_edit import TextEditor, TextEditPhase


def make_editor(pdf):
    session = EditorSession.from_pdf(pdf)
    return session, TextEditor(session)


def test_placing_commits_new_text(blank_pdf):
    session, editor = make_editor(blank_pdf)
    assert editor.begin_placing(1, (100, 100), "Georgia", 30, (0, 0, 255))
    assert editor.state.phase == TextEditPhase.PLACING
    editor.update_draft("  Hello  ")

    assert editor.commit()
    assert not editor.is_active
    (text,) = session.get_annotations(1)
    assert text == Text((100, 100), "Hello", "Georgia", 30, (0, 0, 255))


def test_blank_draft_adds_nothing(blank_pdf):
    session, editor = make_editor(blank_pdf)
    editor.begin_placing(0, (10, 10))
    editor.update_draft("   ")
    assert not editor.commit()
    assert session.get_annotations(0) == ()
    assert not session.can_undo()


def test_placing_on_missing_page_is_refused(blank_pdf):
    _, editor = make_editor(blank_pdf)
    assert not editor.begin_placing(9, (10, 10))
    assert not editor.is_active


def test_editing_changes_existing_text(blank_pdf):
    session, editor = make_editor(blank_pdf)
    session.add_annotation(0, Stroke(points=((5, 5),)))
    session.add_annotation(0, Text(anchor=(100, 100), text="old"))

    assert editor.begin_editing(0, (120, 110))
    assert editor.state.draft == "old"
    assert editor.state.position == 1
    editor.update_draft("new")
    assert editor.commit()
    assert session.get_annotations(0)[1].text == "new"


def test_editing_without_hit(blank_pdf):
    _, editor = make_editor(blank_pdf)
    assert not editor.begin_editing(0, (300, 300))
    assert not editor.is_active


def test_unchanged_edit_does_not_touch_history(blank_pdf):
    session, editor = make_editor(blank_pdf)
    session.add_annotation(0, Text(anchor=(100, 100), text="same"))
    editor.begin_editing(0, (100, 100))
    assert not editor.commit()
    session.undo()
    assert session.get_annotations(0) == ()


def test_edit_follows_page_that_moved(blank_pdf):
    session, editor = make_editor(blank_pdf)
    session.add_annotation(0, Text(anchor=(100, 100), text="old"))
    editor.begin_editing(0, (100, 100))
    session.reorder_pages(0, 2)

    editor.update_draft("new")
    assert editor.commit()
    assert session.get_annotations(2)[0].text == "new"


def test_cancel_drops_draft(blank_pdf):
    session, editor = make_editor(blank_pdf)
    editor.begin_placing(0, (10, 10))
    editor.update_draft("never")
    editor.cancel()
    assert not editor.commit()
    assert session.get_annotations(0) == ()
