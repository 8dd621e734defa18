"""Tests for once-per-session warnings."""
from PyQt5.QtWidgets import QMessageBox

from inkpress.utils.warning_manager import WarningManager, WarningType


def test_suppressed_warning_repeats_remembered_answer(qapp):
    manager = WarningManager()
    manager.suppress_warning(WarningType.DELETE_ANNOTATED_PAGE, QMessageBox.No)

    assert not manager.should_show_warning(WarningType.DELETE_ANNOTATED_PAGE)
    assert not manager.show_confirmation(
        None, WarningType.DELETE_ANNOTATED_PAGE, "Delete Page", "Sure?"
    )


def test_suppressed_without_answer_confirms(qapp):
    manager = WarningManager()
    manager.suppress_warning(WarningType.OVERWRITE_FILE)
    assert manager.show_confirmation(None, WarningType.OVERWRITE_FILE, "t", "m")


def test_remembered_save_choice_is_returned(qapp):
    manager = WarningManager()
    manager.suppress_warning(WarningType.EXIT_UNSAVED, QMessageBox.Discard)
    assert (
        manager.show_save_discard_cancel(None, WarningType.EXIT_UNSAVED)
        == QMessageBox.Discard
    )


def test_reset_all_warnings(qapp):
    manager = WarningManager()
    manager.suppress_warning(WarningType.EXIT_UNSAVED)
    manager.reset_all_warnings()
    assert manager.should_show_warning(WarningType.EXIT_UNSAVED)
