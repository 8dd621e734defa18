"""Logging configuration for Inkpress."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """Set up application-wide logging on the root logger."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # PyMuPDF warnings are noisy on damaged files
    logging.getLogger("fitz").setLevel(logging.WARNING)
