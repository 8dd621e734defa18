"""Tests for annotation records and the per-page store."""
import pytest

from inkpress.core.annotations import AnnotationManager, Stroke, StrokeKind, Text, Whiteout
from inkpress.core.annotations.models import annotation_from_dict
from inkpress.core.errors import WrongAnnotationKind


def test_stroke_needs_points():
    with pytest.raises(ValueError):
        Stroke(points=())


def test_whiteout_normalizes_negative_drag():
    """Dragging up-left gives the same rectangle as dragging down-right."""
    whiteout = Whiteout(200, 150, -100, -50)
    assert whiteout.rect == (100, 150 - 50, 100, 50)


def test_dict_form_keeps_every_field():
    records = [
        Stroke(points=((1, 2), (3, 4)), color=(255, 0, 0), width=3, kind=StrokeKind.HIGHLIGHT),
        Text(anchor=(10, 20), text="Hello", font_family="Georgia", font_size=18),
        Whiteout(5, 6, 7, 8),
    ]
    for record in records:
        assert annotation_from_dict(record.to_dict()) == record


def test_annotations_keep_insertion_order():
    manager = AnnotationManager()
    first = Whiteout(0, 0, 10, 10)
    second = Stroke(points=((1, 1),))
    manager.add_annotation("slot-a", first)
    manager.add_annotation("slot-a", second)
    assert manager.get_annotations("slot-a") == (first, second)
    assert manager.get_annotations("slot-b") == ()


def test_edit_text_replaces_record():
    manager = AnnotationManager()
    manager.add_annotation("slot", Text(anchor=(100, 100), text="Hello"))
    edited = manager.edit_text("slot", 0, "World")
    assert edited.text == "World"
    assert edited.anchor == (100.0, 100.0)
    assert manager.get_annotations("slot") == (edited,)


def test_edit_text_rejects_other_kinds():
    manager = AnnotationManager()
    manager.add_annotation("slot", Stroke(points=((1, 1),)))
    with pytest.raises(WrongAnnotationKind):
        manager.edit_text("slot", 0, "nope")
    with pytest.raises(IndexError):
        manager.edit_text("slot", 5, "nope")


def test_pick_text_prefers_topmost_within_radius():
    manager = AnnotationManager()
    manager.add_annotation("slot", Text(anchor=(100, 100), text="bottom"))
    manager.add_annotation("slot", Stroke(points=((100, 100),)))
    manager.add_annotation("slot", Text(anchor=(110, 100), text="top"))

    position, text = manager.pick_text_at("slot", (105, 100), radius=50)
    assert (position, text.text) == (2, "top")
    assert manager.pick_text_at("slot", (400, 400), radius=50) is None


def test_snapshot_shares_records_and_is_independent():
    manager = AnnotationManager()
    stroke = Stroke(points=((1, 1),))
    manager.add_annotation("slot", stroke)
    snapshot = manager.snapshot()

    manager.add_annotation("slot", Whiteout(0, 0, 1, 1))
    assert snapshot["slot"] == (stroke,)
    assert snapshot["slot"][0] is manager.get_annotations("slot")[0]


def test_retain_drops_unknown_slots():
    manager = AnnotationManager()
    manager.add_annotation("keep", Whiteout(0, 0, 1, 1))
    manager.add_annotation("drop", Whiteout(0, 0, 1, 1))
    manager.retain(["keep"])
    assert manager.get_annotations("keep")
    assert manager.get_annotations("drop") == ()
    assert manager.get_annotation_count() == 1
