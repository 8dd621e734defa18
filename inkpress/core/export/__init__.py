"""
Background export of the flattened document.
"""
from .export_worker import ExportWorker

__all__ = ["ExportWorker"]
