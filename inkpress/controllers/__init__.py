"""
Controllers coordinating between UI and business logic.
"""
from .editor_controller import EditorController

__all__ = ["EditorController"]
