"""
Error types raised by the editing core.
"""
from typing import Optional


class InkpressError(Exception):
    """Base class for all editor errors."""


class LoadFailure(InkpressError):
    """Source bytes could not be parsed as a document."""


class RasterizeFailure(InkpressError):
    """A page could not be rendered."""

    def __init__(self, page_index: int, reason: Optional[str] = None):
        self.page_index = page_index
        self.reason = reason
        message = f"Failed to render page {page_index + 1}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StructuralEditFailure(InkpressError):
    """A page add/delete/rotate/reorder/merge was rejected; state is unchanged."""


class ExportFailure(InkpressError):
    """The output document could not be assembled or saved."""


class WrongAnnotationKind(InkpressError):
    """An operation expected a different annotation variant."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a {expected} annotation, found {actual}")


class NothingToUndo(InkpressError):
    """The history cursor is already at the oldest snapshot."""


class NothingToRedo(InkpressError):
    """The history cursor is already at the newest snapshot."""
