"""PDF text source interfaces.

Responsibilities:
- Define the page-wise text source consumed by the extraction coordinator.
- Provide a `pypdf`-backed implementation for text-based PDFs.

Page numbers are 1-based everywhere in this module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..errors import PdfExtractionError


class PdfTextSource(Protocol):
    """Protocol for page-wise document text retrieval."""

    def page_count(self) -> int:
        """Return the number of pages in the document."""

    def page_text(self, page_number: int) -> str:
        """Return raw text of one 1-based page, or `""` for image-only pages."""


class PypdfTextSource:
    """Text source for text-based PDFs using `pypdf`."""

    def __init__(self, pdf_path: Path) -> None:
        """Open the PDF eagerly so a broken file fails before any page is read."""

        self.pdf_path = pdf_path
        if not pdf_path.exists():
            raise PdfExtractionError(f"Input PDF not found: {pdf_path}")
        try:
            self._reader = PdfReader(str(pdf_path))
        except (PdfReadError, OSError, ValueError) as exc:
            raise PdfExtractionError(f"Could not load PDF document {pdf_path}: {exc}") from exc

    def page_count(self) -> int:
        try:
            return len(self._reader.pages)
        except PdfReadError as exc:
            raise PdfExtractionError(
                f"Could not determine page count for PDF: {self.pdf_path}"
            ) from exc

    def page_text(self, page_number: int) -> str:
        """Extract one page's text with form feeds turned into newlines."""

        if page_number < 1 or page_number > self.page_count():
            raise PdfExtractionError(
                f"Page {page_number} is outside document {self.pdf_path} "
                f"(1-{self.page_count()})."
            )
        try:
            extracted_text = self._reader.pages[page_number - 1].extract_text()
        except PdfReadError as exc:
            raise PdfExtractionError(
                f"Failed to extract text from page {page_number} of {self.pdf_path}: {exc}"
            ) from exc
        return (extracted_text or "").replace("\f", "\n").strip()


class InMemoryTextSource:
    """Text source over page strings that were already extracted elsewhere."""

    def __init__(self, pages: Sequence[str]) -> None:
        self._pages = list(pages)

    def page_count(self) -> int:
        return len(self._pages)

    def page_text(self, page_number: int) -> str:
        if page_number < 1 or page_number > len(self._pages):
            raise PdfExtractionError(
                f"Page {page_number} is outside the document (1-{len(self._pages)})."
            )
        return self._pages[page_number - 1]
