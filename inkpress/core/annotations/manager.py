"""
Per-page annotation store.

Annotations are grouped by page slot id, not by page position, so pages can
be inserted, deleted and reordered without re-keying anything.
"""
import math
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .models import Annotation, AnnotationType, Point, Text
from ..errors import WrongAnnotationKind

AnnotationMap = Mapping[str, Tuple[Annotation, ...]]


class AnnotationManager:
    """Holds the annotation lists of every page slot of one document."""

    def __init__(self, annotations: Optional[AnnotationMap] = None):
        self._annotations: Dict[str, Tuple[Annotation, ...]] = {}
        if annotations:
            self.restore(annotations)

    def add_annotation(self, slot_id: str, annotation: Annotation) -> None:
        """
        Append an annotation to a page; it draws on top of earlier ones.

        Args:
            slot_id: Page slot the annotation belongs to
            annotation: Record to add
        """
        self._annotations[slot_id] = self._annotations.get(slot_id, ()) + (
            annotation,
        )

    def edit_text(self, slot_id: str, position: int, new_text: str) -> Text:
        """
        Replace the string of the text annotation at ``position``.

        Args:
            slot_id: Page slot holding the annotation
            position: Index into that page's annotation list
            new_text: Replacement string

        Returns:
            The new text record

        Raises:
            IndexError: If ``position`` is outside the page's list
            WrongAnnotationKind: If the record there is not text
        """
        page_annotations = self._annotations.get(slot_id, ())
        if not 0 <= position < len(page_annotations):
            raise IndexError(f"No annotation at position {position}")

        current = page_annotations[position]
        if current.annotation_type != AnnotationType.TEXT:
            raise WrongAnnotationKind(
                AnnotationType.TEXT.value, current.annotation_type.value
            )

        edited = current.with_text(new_text)
        self._annotations[slot_id] = (
            page_annotations[:position] + (edited,) + page_annotations[position + 1 :]
        )
        return edited

    def get_annotations(self, slot_id: str) -> Tuple[Annotation, ...]:
        """Annotations of a page in render order."""
        return self._annotations.get(slot_id, ())

    def pick_text_at(
        self, slot_id: str, point: Point, radius: float
    ) -> Optional[Tuple[int, Text]]:
        """
        Find the topmost text annotation anchored near a point.

        Args:
            slot_id: Page slot to search
            point: Page-space point (x, y)
            radius: Hit-test tolerance in page units

        Returns:
            Tuple of (position, record), or None
        """
        page_annotations = self.get_annotations(slot_id)
        for position in range(len(page_annotations) - 1, -1, -1):
            annotation = page_annotations[position]
            if annotation.annotation_type != AnnotationType.TEXT:
                continue
            distance = math.hypot(
                annotation.anchor[0] - point[0], annotation.anchor[1] - point[1]
            )
            if distance <= radius:
                return position, annotation
        return None

    def retain(self, slot_ids: Iterable[str]) -> None:
        """Drop annotations of every page not listed."""
        keep = set(slot_ids)
        for slot_id in [s for s in self._annotations if s not in keep]:
            del self._annotations[slot_id]

    def snapshot(self) -> Dict[str, Tuple[Annotation, ...]]:
        """
        Copy of the mapping for the history log.

        Per-page tuples of immutable records are shared, not cloned.
        """
        return {slot_id: anns for slot_id, anns in self._annotations.items() if anns}

    def restore(self, annotations: AnnotationMap) -> None:
        """Replace the whole mapping, e.g. after undo/redo."""
        self._annotations = {
            slot_id: tuple(anns) for slot_id, anns in annotations.items() if anns
        }

    def get_annotation_count(self) -> int:
        """Get total number of annotations."""
        return sum(len(anns) for anns in self._annotations.values())
