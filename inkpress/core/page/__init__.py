"""
Page geometry and drawing shared by the live view and the exporter.
"""
from .painter import paint_annotations
from .transform import ViewTransform

__all__ = ["ViewTransform", "paint_annotations"]
