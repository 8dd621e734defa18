"""
Application entry point.
"""
import logging
import os
import sys

from PyQt5.QtWidgets import QApplication

from inkpress import config
from inkpress.controllers import EditorController
from inkpress.ui.windows import MainWindow
from inkpress.utils import setup_logging

logger = logging.getLogger(__name__)


def main():
    """
    Run the editor.

    A PDF path on the command line starts a new session on that file;
    otherwise the session from the previous run is restored if there is one.
    """
    setup_logging(config.LOG_LEVEL)
    app = QApplication(sys.argv)
    app.setApplicationName("Inkpress")

    controller = EditorController()
    window = MainWindow(controller)

    file_path = sys.argv[1] if len(sys.argv) > 1 else None
    if file_path and os.path.exists(file_path):
        window.load_pdf(file_path)
    elif controller.restore_session():
        logger.info("Restored previous session")

    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
