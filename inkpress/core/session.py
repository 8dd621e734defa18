"""
Editing session: one document, its annotations and its history.
"""
import hashlib
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from inkpress import config
from .annotations.manager import AnnotationManager
from .annotations.models import Annotation, Point, Text, annotation_from_dict
from .annotations.undo_redo import Snapshot, UndoRedoStack
from .document import pages
from .document.pages import PRIMARY_DOCUMENT, DocumentState, PageSlot, PageSource
from .document.pdf_builder import PdfDocumentBuilder
from .document.pdf_exporter import PDFExporter, ProgressCallback
from .document.pdf_reader import PageGeometry, PdfPageRasterizer
from .errors import (
    LoadFailure,
    NothingToRedo,
    NothingToUndo,
    StructuralEditFailure,
    WrongAnnotationKind,
)
from .page.transform import ViewTransform

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Owns everything one editing sitting changes.

    Pages are addressed by their current index at this boundary; internally
    annotations are keyed by the page slot's stable id. Every mutation ends
    with a history commit of the annotations together with the page slots.
    """

    def __init__(
        self,
        sources: Mapping[str, bytes],
        document: DocumentState,
        rasterizer: Optional[PdfPageRasterizer] = None,
        builder: Optional[PdfDocumentBuilder] = None,
        history_limit: int = config.HISTORY_LIMIT,
    ):
        self.sources: Dict[str, bytes] = dict(sources)
        self.document = document
        self.rasterizer = rasterizer or PdfPageRasterizer()
        self.builder = builder or PdfDocumentBuilder()

        self.annotation_manager = AnnotationManager()
        self.history = UndoRedoStack(Snapshot({}, document), max_size=history_limit)
        self._saved_state: Snapshot = self.history.current
        self._geometry: Dict[str, List[PageGeometry]] = {}

    @classmethod
    def from_pdf(cls, data: bytes, **kwargs) -> "EditorSession":
        """
        Start a session on a PDF, one page slot per page.

        Raises:
            LoadFailure: If the bytes are not a readable PDF
        """
        rasterizer = kwargs.get("rasterizer") or PdfPageRasterizer()
        kwargs["rasterizer"] = rasterizer
        geometry = rasterizer.describe(data)
        document = pages.document_from_sources(
            (PageSource(PRIMARY_DOCUMENT, index), page.rotation)
            for index, page in enumerate(geometry)
        )
        session = cls({PRIMARY_DOCUMENT: data}, document, **kwargs)
        session._geometry[PRIMARY_DOCUMENT] = geometry
        logger.info("Loaded document with %d pages", len(geometry))
        return session

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return self.document.page_count

    def slot_at(self, page_index: int) -> PageSlot:
        return self.document.slot_at(page_index)

    def source_bytes(self, page_index: int) -> bytes:
        return self.sources[self.slot_at(page_index).source.document_key]

    def page_geometry(self, page_index: int) -> PageGeometry:
        """Unrotated size of the page shown in a slot."""
        source = self.slot_at(page_index).source
        if source.document_key not in self._geometry:
            self._geometry[source.document_key] = self.rasterizer.describe(
                self.sources[source.document_key]
            )
        return self._geometry[source.document_key][source.page_index]

    def view_transform(
        self, page_index: int, raster_width: float, raster_height: float
    ) -> ViewTransform:
        """Transform for a raster of the page as it is rotated now."""
        geometry = self.page_geometry(page_index)
        return ViewTransform(
            geometry.width,
            geometry.height,
            self.slot_at(page_index).rotation,
            raster_width,
            raster_height,
        )

    def add_blank_page(
        self,
        width: float = config.BLANK_PAGE_SIZE[0],
        height: float = config.BLANK_PAGE_SIZE[1],
        index: Optional[int] = None,
    ) -> int:
        """
        Add an empty page, at the end unless ``index`` is given.

        Returns:
            Index of the new page
        """
        key = f"blank-{width:g}x{height:g}"
        new_document = pages.insert_blank_page(
            self.document, PageSource(key, 0), index
        )
        if key not in self.sources:
            self.sources[key] = self.builder.blank_document(width, height)
        self._apply_structure(new_document)
        return index if index is not None else self.page_count - 1

    def delete_page(self, page_index: int) -> Tuple[Annotation, ...]:
        """
        Remove a page together with its annotations.

        Returns:
            The annotations that were discarded

        Raises:
            StructuralEditFailure: Bad index, or the page is the last one
        """
        new_document = pages.delete_page(self.document, page_index)
        discarded = self.annotation_manager.get_annotations(
            self.slot_at(page_index).slot_id
        )
        self._apply_structure(new_document)
        if discarded:
            logger.info(
                "Deleted page %d with %d annotations", page_index + 1, len(discarded)
            )
        return discarded

    def rotate_page(self, page_index: int, delta: int) -> int:
        """Rotate a page clockwise by ``delta`` degrees and return the new rotation."""
        self._apply_structure(pages.rotate_page(self.document, page_index, delta))
        return self.slot_at(page_index).rotation

    def reorder_pages(self, from_index: int, to_index: int) -> None:
        self._apply_structure(pages.reorder_pages(self.document, from_index, to_index))

    def merge_pages_from(self, donor_bytes: bytes) -> int:
        """
        Append all pages of another PDF.

        Returns:
            Number of pages added

        Raises:
            StructuralEditFailure: If the donor cannot be read
        """
        try:
            geometry = self.rasterizer.describe(donor_bytes)
        except LoadFailure as e:
            raise StructuralEditFailure(f"Cannot merge pages: {e}") from e

        key = "donor-" + hashlib.md5(donor_bytes).hexdigest()
        new_document = pages.merge_pages_from(
            self.document, key, [page.rotation for page in geometry]
        )
        self.sources.setdefault(key, donor_bytes)
        self._geometry[key] = geometry
        self._apply_structure(new_document)
        return len(geometry)

    def _apply_structure(self, new_document: DocumentState) -> None:
        self.document = new_document
        self.annotation_manager.retain(new_document.slot_ids())
        self._commit()

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def add_annotation(self, page_index: int, annotation: Annotation) -> bool:
        """
        Add an annotation to a page.

        Returns:
            False (and nothing changes) when the page does not exist
        """
        if not 0 <= page_index < self.page_count:
            logger.debug("Ignoring annotation for missing page %d", page_index)
            return False
        self.annotation_manager.add_annotation(
            self.slot_at(page_index).slot_id, annotation
        )
        self._commit()
        return True

    def edit_text(self, page_index: int, position: int, new_text: str) -> bool:
        """
        Change the string of a text annotation.

        Returns:
            True if the text was changed
        """
        if not 0 <= page_index < self.page_count:
            return False
        try:
            self.annotation_manager.edit_text(
                self.slot_at(page_index).slot_id, position, new_text
            )
        except (IndexError, WrongAnnotationKind) as e:
            logger.debug("Text edit ignored: %s", e)
            return False
        self._commit()
        return True

    def get_annotations(self, page_index: int) -> Tuple[Annotation, ...]:
        if not 0 <= page_index < self.page_count:
            return ()
        return self.annotation_manager.get_annotations(self.slot_at(page_index).slot_id)

    def pick_text_at(
        self, page_index: int, point: Point, radius: float = config.TEXT_HIT_RADIUS
    ) -> Optional[Tuple[int, Text]]:
        if not 0 <= page_index < self.page_count:
            return None
        return self.annotation_manager.pick_text_at(
            self.slot_at(page_index).slot_id, point, radius
        )

    def annotation_map(self) -> Dict[str, Tuple[Annotation, ...]]:
        return self.annotation_manager.snapshot()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        self.history.commit(Snapshot(self.annotation_manager.snapshot(), self.document))

    def _restore(self, snapshot: Snapshot) -> None:
        self.document = snapshot.document
        self.annotation_manager.restore(snapshot.annotations)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        """
        Perform undo operation.

        Returns:
            True if undo was successful
        """
        try:
            self._restore(self.history.undo())
        except NothingToUndo:
            return False
        return True

    def redo(self) -> bool:
        """
        Perform redo operation.

        Returns:
            True if redo was successful
        """
        try:
            self._restore(self.history.redo())
        except NothingToRedo:
            return False
        return True

    @property
    def has_unsaved_changes(self) -> bool:
        return self.history.current != self._saved_state

    def mark_saved(self) -> None:
        """Mark the current state as the one last written out."""
        self._saved_state = self.history.current

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(
        self,
        progress: Optional[ProgressCallback] = None,
        scale: float = config.EXPORT_SCALE,
    ) -> bytes:
        """
        Flatten all annotations and return the final PDF.

        Raises:
            RasterizeFailure: With the index of the page that failed
        """
        logger.info(
            "Exporting %d pages with %d annotations",
            self.page_count,
            self.annotation_manager.get_annotation_count(),
        )
        exporter = PDFExporter(self.rasterizer, self.builder, scale)
        return exporter.export(
            self.sources, self.document, self.annotation_map(), progress
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def state_to_dict(self) -> Dict[str, Any]:
        """Page slots, annotations and full history (document bytes excluded)."""
        return {
            "history": [_snapshot_to_dict(s) for s in self.history.snapshots],
            "cursor": self.history.cursor,
            "saved": self.history.current == self._saved_state,
        }

    @classmethod
    def from_state_dict(
        cls, sources: Mapping[str, bytes], data: Dict[str, Any], **kwargs
    ) -> "EditorSession":
        snapshots = [_snapshot_from_dict(s) for s in data["history"]]
        if not snapshots:
            raise LoadFailure("Stored session has no history")
        cursor = data.get("cursor", len(snapshots) - 1)
        if not 0 <= cursor < len(snapshots):
            raise LoadFailure(f"Stored history cursor {cursor} is out of range")

        missing = {
            slot.source.document_key
            for snapshot in snapshots
            for slot in snapshot.document.slots
        } - set(sources)
        if missing:
            raise LoadFailure(f"Stored session lacks documents: {sorted(missing)}")

        session = cls(sources, snapshots[cursor].document, **kwargs)
        session.history.snapshots = snapshots
        session.history.cursor = cursor
        session._restore(snapshots[cursor])
        session._saved_state = (
            session.history.current if data.get("saved", False) else snapshots[0]
        )
        return session


def _snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "document": snapshot.document.to_dict(),
        "annotations": {
            slot_id: [ann.to_dict() for ann in anns]
            for slot_id, anns in snapshot.annotations.items()
        },
    }


def _snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    return Snapshot(
        annotations={
            slot_id: tuple(annotation_from_dict(a) for a in anns)
            for slot_id, anns in data.get("annotations", {}).items()
        },
        document=DocumentState.from_dict(data["document"]),
    )
