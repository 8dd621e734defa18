"""
Utility functions and helpers.
"""
from .log import setup_logging
from .resource_loader import get_cache_dir, get_session_dir

__all__ = [
    "setup_logging",
    "get_cache_dir",
    "get_session_dir",
]
