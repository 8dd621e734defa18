# core/export/export_worker.py

import logging
import os
import tempfile

from PyQt5.QtCore import QThread, pyqtSignal

from inkpress.core.errors import InkpressError, RasterizeFailure
from inkpress.core.session import EditorSession

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Worker thread for flattening and saving the document without freezing the UI."""

    # Signals
    export_finished = pyqtSignal(bool, str)  # success, message
    progress = pyqtSignal(str)  # status message
    page_progress = pyqtSignal(int, int)  # current, total pages

    def __init__(self, session: EditorSession, output_pdf: str, parent=None):
        super().__init__(parent)
        self.session = session
        self.output_pdf = output_pdf
        self.temp_path = None

    def run(self):
        """Execute the export in a background thread."""
        try:
            self.progress.emit("Flattening annotations...")
            data = self.session.export(progress=self.page_progress.emit)

            self.progress.emit("Finalizing...")
            # Write next to the target, then swap, so a failed write never
            # leaves a truncated file behind
            output_dir = os.path.dirname(os.path.abspath(self.output_pdf))
            temp_fd, self.temp_path = tempfile.mkstemp(suffix=".pdf", dir=output_dir)
            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
            os.replace(self.temp_path, self.output_pdf)
            self.temp_path = None

            logger.info("Saved %s", self.output_pdf)
            self.export_finished.emit(True, "PDF saved successfully!")

        except RasterizeFailure as e:
            self._cleanup()
            logger.error("Export aborted: %s", e)
            self.export_finished.emit(
                False, f"Export aborted: page {e.page_index + 1} could not be rendered."
            )
        except (InkpressError, OSError) as e:
            self._cleanup()
            logger.exception("Export failed")
            self.export_finished.emit(False, f"Error during export: {e}")
        except Exception as e:
            self._cleanup()
            logger.exception("Unexpected error during export")
            self.export_finished.emit(False, f"Unexpected error during export: {e}")

    def _cleanup(self):
        if self.temp_path and os.path.exists(self.temp_path):
            os.remove(self.temp_path)
        self.temp_path = None
