"""
Pending text entry as an explicit state machine.

Idle -> Placing(page, anchor) when the text tool is clicked on a page,
Idle -> Editing(page, slot, position) when an existing text is clicked.
``commit`` writes the draft to the session, ``cancel`` drops it; both go
back to Idle.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from inkpress import config
from .annotations.models import Color, Point, Text
from .session import EditorSession


class TextEditPhase(Enum):
    IDLE = "idle"
    PLACING = "placing"
    EDITING = "editing"


@dataclass(frozen=True)
class PendingTextEdit:
    phase: TextEditPhase = TextEditPhase.IDLE
    page_index: int = -1
    anchor: Optional[Point] = None
    slot_id: Optional[str] = None
    position: int = -1
    draft: str = ""
    font_family: str = config.DEFAULT_FONT
    font_size: float = config.DEFAULT_FONT_SIZE
    color: Color = (0, 0, 0)


IDLE = PendingTextEdit()


class TextEditor:
    """Drives one pending text edit at a time against a session."""

    def __init__(self, session: EditorSession):
        self.session = session
        self.state = IDLE

    @property
    def is_active(self) -> bool:
        return self.state.phase != TextEditPhase.IDLE

    def begin_placing(
        self,
        page_index: int,
        anchor: Point,
        font_family: str = config.DEFAULT_FONT,
        font_size: float = config.DEFAULT_FONT_SIZE,
        color: Color = (0, 0, 0),
    ) -> bool:
        """Start typing a new text at ``anchor``; any previous draft is dropped."""
        if not 0 <= page_index < self.session.page_count:
            return False
        self.state = PendingTextEdit(
            phase=TextEditPhase.PLACING,
            page_index=page_index,
            anchor=anchor,
            font_family=font_family,
            font_size=font_size,
            color=color,
        )
        return True

    def begin_editing(self, page_index: int, point: Point) -> bool:
        """
        Start editing the text annotation nearest ``point``.

        Returns:
            False if there is no text close enough
        """
        hit = self.session.pick_text_at(page_index, point)
        if hit is None:
            return False
        position, text = hit
        self.state = PendingTextEdit(
            phase=TextEditPhase.EDITING,
            page_index=page_index,
            anchor=text.anchor,
            slot_id=self.session.slot_at(page_index).slot_id,
            position=position,
            draft=text.text,
            font_family=text.font_family,
            font_size=text.font_size,
            color=text.color,
        )
        return True

    def update_draft(self, draft: str) -> None:
        if self.is_active:
            self.state = replace(self.state, draft=draft)

    def commit(self) -> bool:
        """
        Apply the draft and return to Idle.

        Returns:
            True if the session changed
        """
        state, self.state = self.state, IDLE

        if state.phase == TextEditPhase.PLACING:
            text = state.draft.strip()
            if not text:
                return False
            return self.session.add_annotation(
                state.page_index,
                Text(
                    anchor=state.anchor,
                    text=text,
                    font_family=state.font_family,
                    font_size=state.font_size,
                    color=state.color,
                ),
            )

        if state.phase == TextEditPhase.EDITING:
            # The page may have moved since editing started
            page_index = self.session.document.index_of(state.slot_id)
            if page_index is None:
                return False
            current = self.session.get_annotations(page_index)
            if (
                state.position < len(current)
                and getattr(current[state.position], "text", None) == state.draft
            ):
                return False
            return self.session.edit_text(page_index, state.position, state.draft)

        return False

    def cancel(self) -> None:
        self.state = IDLE
