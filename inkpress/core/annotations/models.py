"""
Annotation records.

Records are immutable. Editing a text annotation produces a new record, so
snapshots taken by the history log can share records safely.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union

from inkpress import config

Point = Tuple[float, float]
Color = Tuple[int, int, int]


class AnnotationType(Enum):
    STROKE = "stroke"
    TEXT = "text"
    WHITEOUT = "whiteout"


class StrokeKind(Enum):
    INK = "ink"
    HIGHLIGHT = "highlight"
    ERASE = "erase"


@dataclass(frozen=True)
class Stroke:
    """A freehand path in page space."""

    annotation_type: ClassVar[AnnotationType] = AnnotationType.STROKE

    points: Tuple[Point, ...]
    color: Color = (0, 0, 0)  # RGB tuple (0-255)
    width: float = config.DEFAULT_BRUSH_SIZE  # page units
    kind: StrokeKind = StrokeKind.INK

    def __post_init__(self):
        if not self.points:
            raise ValueError("A stroke needs at least one point")
        object.__setattr__(
            self, "points", tuple((float(x), float(y)) for x, y in self.points)
        )
        object.__setattr__(self, "color", tuple(int(c) for c in self.color))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.annotation_type.value,
            "points": [[x, y] for x, y in self.points],
            "color": list(self.color),
            "width": self.width,
            "kind": self.kind.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Stroke":
        return Stroke(
            points=tuple(tuple(p) for p in data["points"]),
            color=tuple(data.get("color", (0, 0, 0))),
            width=data.get("width", config.DEFAULT_BRUSH_SIZE),
            kind=StrokeKind(data.get("kind", StrokeKind.INK.value)),
        )


@dataclass(frozen=True)
class Text:
    """Typed text anchored at its baseline origin."""

    annotation_type: ClassVar[AnnotationType] = AnnotationType.TEXT

    anchor: Point
    text: str
    font_family: str = config.DEFAULT_FONT
    font_size: float = config.DEFAULT_FONT_SIZE  # page units
    color: Color = (0, 0, 0)

    def __post_init__(self):
        object.__setattr__(
            self, "anchor", (float(self.anchor[0]), float(self.anchor[1]))
        )
        object.__setattr__(self, "color", tuple(int(c) for c in self.color))

    def with_text(self, text: str) -> "Text":
        """Return a copy carrying a new string at the same anchor."""
        return replace(self, text=text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.annotation_type.value,
            "anchor": list(self.anchor),
            "text": self.text,
            "font_family": self.font_family,
            "font_size": self.font_size,
            "color": list(self.color),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Text":
        return Text(
            anchor=tuple(data["anchor"]),
            text=data["text"],
            font_family=data.get("font_family", config.DEFAULT_FONT),
            font_size=data.get("font_size", config.DEFAULT_FONT_SIZE),
            color=tuple(data.get("color", (0, 0, 0))),
        )


@dataclass(frozen=True)
class Whiteout:
    """Opaque white rectangle blanking page content."""

    annotation_type: ClassVar[AnnotationType] = AnnotationType.WHITEOUT

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        # A drag towards the top-left yields negative extents
        if self.width < 0:
            object.__setattr__(self, "x", self.x + self.width)
            object.__setattr__(self, "width", -self.width)
        if self.height < 0:
            object.__setattr__(self, "y", self.y + self.height)
            object.__setattr__(self, "height", -self.height)

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.annotation_type.value,
            "rect": list(self.rect),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Whiteout":
        x, y, width, height = data["rect"]
        return Whiteout(x=x, y=y, width=width, height=height)


Annotation = Union[Stroke, Text, Whiteout]

_ANNOTATION_CLASSES = {
    AnnotationType.STROKE: Stroke,
    AnnotationType.TEXT: Text,
    AnnotationType.WHITEOUT: Whiteout,
}


def annotation_from_dict(data: Dict[str, Any]) -> Annotation:
    """Create an annotation of the right variant from its dictionary form."""
    annotation_type = AnnotationType(data["type"])
    return _ANNOTATION_CLASSES[annotation_type].from_dict(data)
