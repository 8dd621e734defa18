"""
Confirmation dialogs the user can silence for the rest of a session.
"""
from enum import Enum
from typing import Dict

from PyQt5.QtWidgets import QCheckBox, QMessageBox, QWidget


class WarningType(Enum):
    """Prompts that offer "don't ask again"."""

    DELETE_ANNOTATED_PAGE = "delete_annotated_page"
    DISCARD_SESSION = "discard_session"
    EXIT_UNSAVED = "exit_unsaved"
    OVERWRITE_FILE = "overwrite_file"


class WarningManager:
    """
    Remembers the answer of every silenced prompt.

    A silenced prompt is not shown again until ``reset_all_warnings``; asking
    it returns the answer the user gave when they ticked the checkbox.
    """

    def __init__(self):
        self._remembered: Dict[WarningType, int] = {}

    def should_show_warning(self, warning_type: WarningType) -> bool:
        return warning_type not in self._remembered

    def suppress_warning(
        self, warning_type: WarningType, answer: int = QMessageBox.Yes
    ) -> None:
        """Stop asking ``warning_type`` and answer it with ``answer`` instead."""
        self._remembered[warning_type] = answer

    def reset_all_warnings(self) -> None:
        self._remembered.clear()

    def show_warning(
        self,
        parent: QWidget,
        warning_type: WarningType,
        title: str,
        message: str,
        buttons: int = QMessageBox.Yes | QMessageBox.No,
        default_button: int = QMessageBox.No,
        show_dont_ask: bool = True,
    ) -> int:
        """
        Ask the user, unless the prompt was silenced earlier.

        Returns:
            The QMessageBox button that was chosen (or remembered)
        """
        if warning_type in self._remembered:
            return self._remembered[warning_type]

        msg_box = QMessageBox(QMessageBox.Question, title, message, buttons, parent)
        msg_box.setDefaultButton(default_button)
        dont_ask = QCheckBox("Don't ask again this session") if show_dont_ask else None
        if dont_ask is not None:
            msg_box.setCheckBox(dont_ask)

        answer = msg_box.exec_()
        if dont_ask is not None and dont_ask.isChecked():
            self.suppress_warning(warning_type, answer)
        return answer

    def show_confirmation(
        self,
        parent: QWidget,
        warning_type: WarningType,
        title: str,
        message: str,
        show_dont_ask: bool = True,
    ) -> bool:
        """Yes/No prompt; True means Yes."""
        answer = self.show_warning(
            parent, warning_type, title, message, show_dont_ask=show_dont_ask
        )
        return answer == QMessageBox.Yes

    def show_save_discard_cancel(
        self,
        parent: QWidget,
        warning_type: WarningType,
        title: str = "Unsaved Changes",
        message: str = "You have unsaved changes. Do you want to save them?",
        show_dont_ask: bool = False,
    ) -> int:
        """
        Returns:
            QMessageBox.Save, QMessageBox.Discard, or QMessageBox.Cancel
        """
        return self.show_warning(
            parent,
            warning_type,
            title,
            message,
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Save,
            show_dont_ask,
        )


warning_manager = WarningManager()
