"""
Annotation system for PDF documents.
"""
from .manager import AnnotationManager
from .models import (
    Annotation,
    AnnotationType,
    Stroke,
    StrokeKind,
    Text,
    Whiteout,
    annotation_from_dict,
)
from .undo_redo import Snapshot, UndoRedoStack

__all__ = [
    "Annotation",
    "AnnotationType",
    "Stroke",
    "StrokeKind",
    "Text",
    "Whiteout",
    "annotation_from_dict",
    "AnnotationManager",
    "Snapshot",
    "UndoRedoStack",
]
