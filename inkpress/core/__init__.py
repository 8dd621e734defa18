"""
Core business logic for Inkpress.
"""
from .annotations import AnnotationManager, Stroke, StrokeKind, Text, Whiteout
from .errors import (
    InkpressError,
    LoadFailure,
    NothingToRedo,
    NothingToUndo,
    RasterizeFailure,
    StructuralEditFailure,
    WrongAnnotationKind,
)
from .session import EditorSession
from .text_edit import TextEditor

__all__ = [
    "AnnotationManager",
    "Stroke",
    "StrokeKind",
    "Text",
    "Whiteout",
    "InkpressError",
    "LoadFailure",
    "NothingToRedo",
    "NothingToUndo",
    "RasterizeFailure",
    "StructuralEditFailure",
    "WrongAnnotationKind",
    "EditorSession",
    "TextEditor",
]
