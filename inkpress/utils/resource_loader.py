"""
Per-user directories for session data and caches.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Inkpress"


def get_cache_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the cache directory for session-scoped files.

    Args:
        app_name: Name of the application

    Returns:
        Path to the cache directory
    """
    if os.name == "nt":  # Windows
        cache_dir = (
            Path(os.environ.get("LOCALAPPDATA", os.path.expanduser("~")))
            / app_name
            / "cache"
        )
    elif sys.platform == "darwin":  # macOS
        cache_dir = Path.home() / "Library" / "Caches" / app_name
    else:  # Linux
        cache_dir = Path(
            os.environ.get("XDG_CACHE_HOME", os.path.expanduser("~/.cache"))
        ) / app_name

    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def get_session_dir(app_name: str = APP_NAME) -> Path:
    """Directory holding the persisted editing session."""
    session_dir = get_cache_dir(app_name) / "session"
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir
