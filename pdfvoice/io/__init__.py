"""Document input components for pdfvoice.

This package contains the page-wise text sources the extraction coordinator
reads from.
"""

from .pdf_text_extractor import InMemoryTextSource, PdfTextSource, PypdfTextSource

__all__ = ["InMemoryTextSource", "PdfTextSource", "PypdfTextSource"]
