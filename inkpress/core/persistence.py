"""
Handles persistence of the editing session across restarts.
"""
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from inkpress import config
from .errors import LoadFailure
from .session import EditorSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Saves one session under a single well-known name.

    ``<name>.json`` holds page slots, annotations and history; each
    registered document is written next to it as ``<name>-<sha1>.pdf``.
    """

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        name: str = config.SESSION_NAME,
    ):
        if directory is None:
            from inkpress.utils.resource_loader import get_session_dir

            directory = get_session_dir()
        self.directory = Path(directory)
        self.name = name

    @property
    def json_path(self) -> Path:
        return self.directory / f"{self.name}.json"

    def exists(self) -> bool:
        """Check if a saved session exists."""
        return self.json_path.exists()

    def save(self, session: EditorSession) -> None:
        """
        Write the session to disk.

        Args:
            session: Session to save
        """
        self.directory.mkdir(parents=True, exist_ok=True)

        documents: Dict[str, str] = {}
        for key, data in sorted(session.sources.items()):
            # Named by content: a file on disk never changes its bytes
            file_name = f"{self.name}-{hashlib.sha1(data).hexdigest()}.pdf"
            path = self.directory / file_name
            if not path.exists():
                self._write_atomic(path, data)
            documents[key] = file_name

        payload = {"documents": documents, "state": session.state_to_dict()}
        self._write_atomic(
            self.json_path, json.dumps(payload, indent=2).encode("utf-8")
        )

        # Files left over from a session that had more documents
        keep = set(documents.values())
        for stale in self.directory.glob(f"{self.name}-*.pdf"):
            if stale.name not in keep:
                stale.unlink()

    def load(self, **kwargs) -> Optional[EditorSession]:
        """
        Restore the saved session.

        Returns:
            The session, or None if nothing was saved

        Raises:
            LoadFailure: If the saved files are unreadable
        """
        if not self.exists():
            return None

        try:
            payload = json.loads(self.json_path.read_text(encoding="utf-8"))
            sources = {
                key: (self.directory / file_name).read_bytes()
                for key, file_name in payload["documents"].items()
            }
            return EditorSession.from_state_dict(sources, payload["state"], **kwargs)
        except LoadFailure:
            raise
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise LoadFailure(f"Stored session is corrupted: {e}") from e

    def clear(self) -> None:
        """Delete the saved session."""
        if self.json_path.exists():
            self.json_path.unlink()
        for document in self.directory.glob(f"{self.name}-*.pdf"):
            document.unlink()

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, temp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, path)
        except OSError:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        logger.debug("Wrote %s (%d bytes)", path.name, len(data))
