"""
Page slots of the document being edited.

Every structural edit returns a new ``DocumentState``; nothing here mutates
in place. A slot keeps the identifier it was created with for its whole
life, so annotations keyed by that identifier follow the page wherever it
moves.
"""
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import StructuralEditFailure

PRIMARY_DOCUMENT = "primary"
VALID_ROTATIONS = (0, 90, 180, 270)


def new_slot_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PageSource:
    """Where a slot's content comes from: a registered document and a page in it."""

    document_key: str
    page_index: int


@dataclass(frozen=True)
class PageSlot:
    slot_id: str
    source: PageSource
    rotation: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot_id": self.slot_id,
            "document_key": self.source.document_key,
            "page_index": self.source.page_index,
            "rotation": self.rotation,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PageSlot":
        return PageSlot(
            slot_id=data["slot_id"],
            source=PageSource(data["document_key"], data["page_index"]),
            rotation=data.get("rotation", 0),
        )


@dataclass(frozen=True)
class DocumentState:
    """Ordered page slots; a slot's current index is its position."""

    slots: Tuple[PageSlot, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.slots)

    def slot_at(self, index: int) -> PageSlot:
        if not 0 <= index < len(self.slots):
            raise IndexError(f"Page index {index} out of range")
        return self.slots[index]

    def index_of(self, slot_id: str) -> Optional[int]:
        for index, slot in enumerate(self.slots):
            if slot.slot_id == slot_id:
                return index
        return None

    def slot_ids(self) -> List[str]:
        return [slot.slot_id for slot in self.slots]

    def to_dict(self) -> Dict[str, Any]:
        return {"slots": [slot.to_dict() for slot in self.slots]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DocumentState":
        return DocumentState(
            tuple(PageSlot.from_dict(s) for s in data.get("slots", []))
        )


def _check_index(state: DocumentState, index: int, action: str) -> None:
    if not 0 <= index < state.page_count:
        raise StructuralEditFailure(
            f"Cannot {action} page {index + 1}: document has {state.page_count} pages"
        )


def _normalize_rotation(degrees: int) -> int:
    if degrees % 90:
        raise StructuralEditFailure(
            f"Rotation must be a multiple of 90 degrees, got {degrees}"
        )
    return degrees % 360


def document_from_sources(
    sources: Iterable[Tuple[PageSource, int]]
) -> DocumentState:
    """
    Build a state with one fresh slot per source page.

    Args:
        sources: (source, rotation) pairs in page order
    """
    return DocumentState(
        tuple(
            PageSlot(new_slot_id(), source, _normalize_rotation(rotation))
            for source, rotation in sources
        )
    )


def insert_blank_page(
    state: DocumentState, source: PageSource, index: Optional[int] = None
) -> DocumentState:
    """
    Add a slot showing a blank page.

    Args:
        state: Current document state
        source: The generated blank page to show
        index: Position to insert at; appends when None
    """
    if index is None:
        index = state.page_count
    if not 0 <= index <= state.page_count:
        raise StructuralEditFailure(f"Cannot insert a page at position {index + 1}")

    slot = PageSlot(new_slot_id(), source, 0)
    return DocumentState(state.slots[:index] + (slot,) + state.slots[index:])


def delete_page(state: DocumentState, index: int) -> DocumentState:
    _check_index(state, index, "delete")
    if state.page_count <= 1:
        raise StructuralEditFailure("Cannot delete the last page")
    return DocumentState(state.slots[:index] + state.slots[index + 1 :])


def rotate_page(state: DocumentState, index: int, delta: int) -> DocumentState:
    """Turn a page clockwise by ``delta`` degrees (negative turns it back)."""
    _check_index(state, index, "rotate")
    delta = _normalize_rotation(delta)
    slot = state.slots[index]
    rotated = replace(slot, rotation=(slot.rotation + delta) % 360)
    return DocumentState(state.slots[:index] + (rotated,) + state.slots[index + 1 :])


def reorder_pages(
    state: DocumentState, from_index: int, to_index: int
) -> DocumentState:
    """Move the page at ``from_index`` so that it ends up at ``to_index``."""
    _check_index(state, from_index, "move")
    _check_index(state, to_index, "move")
    slots = list(state.slots)
    slot = slots.pop(from_index)
    slots.insert(to_index, slot)
    return DocumentState(tuple(slots))


def merge_pages_from(
    state: DocumentState, donor_key: str, donor_rotations: List[int]
) -> DocumentState:
    """
    Append every page of a donor document.

    Args:
        state: Current document state
        donor_key: Key the donor's bytes are registered under
        donor_rotations: Own rotation of each donor page, in page order
    """
    if not donor_rotations:
        raise StructuralEditFailure("Donor document has no pages")
    appended = document_from_sources(
        (PageSource(donor_key, page_index), rotation)
        for page_index, rotation in enumerate(donor_rotations)
    )
    return DocumentState(state.slots + appended.slots)
