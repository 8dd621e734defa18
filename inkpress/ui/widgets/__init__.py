from .page_canvas import PageCanvas, Tool

__all__ = ["PageCanvas", "Tool"]
