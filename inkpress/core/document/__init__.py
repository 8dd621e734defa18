"""
PDF document handling and manipulation.
"""
from .pages import DocumentState, PageSlot, PageSource
from .pdf_builder import PdfDocumentBuilder
from .pdf_exporter import PDFExporter
from .pdf_reader import PageGeometry, PdfPageRasterizer, Raster

__all__ = [
    "DocumentState",
    "PageSlot",
    "PageSource",
    "PdfDocumentBuilder",
    "PDFExporter",
    "PageGeometry",
    "PdfPageRasterizer",
    "Raster",
]
