"""Page-range text extraction and chunk bookkeeping.

Responsibilities:
- Pull per-page text for the selected range and prepare it for speech.
- Own the current page range, extraction result, and chunk cursor.
- Replace prepared state wholesale whenever the range or chunk size changes.

`build_result` only reads the text source and settings, so it may run on a
worker thread; `install_result` is the single place state is swapped in.
"""

from __future__ import annotations

from dataclasses import replace

from ..config import ReaderConfig
from ..errors import PdfExtractionError
from ..io.pdf_text_extractor import PdfTextSource
from ..models.datatypes import Chunk, ExtractionResult, PageRange
from ..telemetry.logger import RunLogger
from ..text.chunking import Chunker, count_words
from ..text.normalizer import EMPTY_TEXT_PLACEHOLDER, TextNormalizer, page_marker


class ExtractionCoordinator:
    """Prepare chunked speech text for a page range of one document."""

    def __init__(
        self,
        source: PdfTextSource,
        config: ReaderConfig | None = None,
        normalizer: TextNormalizer | None = None,
        chunker: Chunker | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Bind to a document and select all of its pages."""

        self.source = source
        self.config = (config or ReaderConfig()).normalized()
        self.normalizer = normalizer or TextNormalizer()
        self.chunker = chunker or Chunker()
        self.run_logger = run_logger or RunLogger()
        self._page_range = PageRange.whole_document(self._safe_page_count())
        self._result = ExtractionResult.failure("Nothing extracted yet.", self._page_range)
        self._current_chunk_index = 0

    @property
    def page_range(self) -> PageRange:
        return self._page_range

    @property
    def result(self) -> ExtractionResult:
        return self._result

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._result.chunks

    @property
    def total_chunks(self) -> int:
        return len(self._result.chunks)

    @property
    def is_chunked(self) -> bool:
        return self._result.is_chunked

    @property
    def current_chunk_index(self) -> int:
        return self._current_chunk_index

    def set_page_range(self, start: int, end: int) -> ExtractionResult:
        """Clamp and select a new range, drop prepared chunks, and re-extract."""

        self.select_page_range(start, end)
        return self.extract_current_range()

    def set_start_page(self, page: int) -> ExtractionResult:
        """Move the start page, pulling the end page along when it falls behind."""

        return self.set_page_range(page, max(page, self._page_range.end_page))

    def set_end_page(self, page: int) -> ExtractionResult:
        """Move the end page, never before the current start page."""

        return self.set_page_range(self._page_range.start_page, page)

    def select_page_range(self, start: int, end: int) -> PageRange:
        """Clamp and record a range without extracting; prepared chunks are discarded."""

        self._page_range = PageRange.clamped(start, end, self._safe_page_count())
        self._result = ExtractionResult.failure("Extraction pending.", self._page_range)
        self._current_chunk_index = 0
        return self._page_range

    def extract_current_range(self) -> ExtractionResult:
        """Extract the current range and install the result."""

        return self.install_result(self.build_result(self._page_range))

    def install_result(self, result: ExtractionResult) -> ExtractionResult:
        """Replace the prepared state with `result` and rewind the chunk cursor."""

        self._result = result
        self._current_chunk_index = 0
        return result

    def build_result(self, page_range: PageRange) -> ExtractionResult:
        """Extract, normalize, and chunk `page_range` without touching coordinator state."""

        self.run_logger.log_stage_start(
            "extract", start=page_range.start_page, end=page_range.end_page
        )
        try:
            total_pages = self.source.page_count()
            if total_pages <= 0:
                return self._fail("PDF document has no pages.", page_range)
            if not page_range.is_valid or page_range.end_page > total_pages:
                return self._fail("Invalid page range.", page_range)
            raw_text = self._collect_page_text(page_range)
        except PdfExtractionError as exc:
            return self._fail(f"Error extracting text: {exc}", page_range)

        if not raw_text.strip():
            return self._fail("No text could be extracted from the specified pages.", page_range)

        full_text = self.normalizer.normalize(raw_text)
        speech_text = full_text
        if not self.config.speak_page_markers:
            speech_text = self.normalizer.normalize(self.normalizer.strip_page_markers(full_text))

        result = ExtractionResult(
            success=True,
            full_text=full_text,
            speech_text=speech_text,
            page_range=page_range,
        )
        result = self._chunk(result)
        self.run_logger.log_stage_complete(
            "extract",
            chunks=len(result.chunks),
            chunked=result.is_chunked,
            words=result.total_words,
        )
        return result

    def _collect_page_text(self, page_range: PageRange) -> str:
        """Concatenate page texts, each preceded by its page marker; unspeakable pages are skipped."""

        parts: list[str] = []
        for page_number in page_range.pages():
            page_text = self.source.page_text(page_number)
            if not page_text or self.normalizer.normalize(page_text) == EMPTY_TEXT_PLACEHOLDER:
                continue
            parts.append(f"{page_marker(page_number)}\n{page_text}\n")
        return "\n".join(parts)

    def _chunk(self, result: ExtractionResult) -> ExtractionResult:
        """Attach chunks: split when over the threshold, otherwise one logical chunk."""

        threshold = self.config.chunk_size_words
        word_count = count_words(result.speech_text)
        if word_count > threshold:
            chunks = tuple(self.chunker.to_chunks(result.speech_text, threshold))
            self.run_logger.log_event("chunk", "split", chunks=len(chunks), threshold=threshold)
            return replace(result, chunks=chunks, is_chunked=True)
        single = Chunk(index=0, text=result.speech_text, word_count=word_count)
        return replace(result, chunks=(single,), is_chunked=False)

    def _fail(self, message: str, page_range: PageRange) -> ExtractionResult:
        self.run_logger.log_stage_failure("extract", error_type="extraction_error")
        return ExtractionResult.failure(message, page_range)

    def _safe_page_count(self) -> int:
        try:
            return self.source.page_count()
        except PdfExtractionError:
            return 0

    def current_chunk(self) -> Chunk | None:
        """Return the chunk under the cursor, or `None` when nothing is prepared."""

        if not self._result.success or not self._result.chunks:
            return None
        return self._result.chunks[self._current_chunk_index]

    def current_chunk_text(self) -> str:
        chunk = self.current_chunk()
        return chunk.text if chunk is not None else ""

    def next_chunk(self) -> bool:
        """Advance the cursor; returns `False` without moving at the last chunk."""

        return self.select_chunk(self._current_chunk_index + 1)

    def previous_chunk(self) -> bool:
        """Step the cursor back; returns `False` without moving at the first chunk."""

        return self.select_chunk(self._current_chunk_index - 1)

    def select_chunk(self, index: int) -> bool:
        """Move the cursor to `index` when it names an existing chunk."""

        if index < 0 or index >= self.total_chunks:
            return False
        self._current_chunk_index = index
        return True

    def force_rechunk(self) -> ExtractionResult:
        """Rebuild the chunk list from the last speech text with current settings."""

        if not self._result.success:
            return self._result
        rechunked = self._chunk(replace(self._result, chunks=(), is_chunked=False))
        return self.install_result(rechunked)

    def set_chunk_size(self, words: int) -> ExtractionResult:
        """Apply a clamped chunk-size threshold and re-chunk the prepared text."""

        self.config = self.config.with_chunk_size(words)
        return self.force_rechunk()
