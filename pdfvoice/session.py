"""Reader session facade.

Responsibilities:
- Wire one document, extraction coordinator, playback sequencer, and engine.
- Funnel every control operation and engine callback through one serial executor.
- Run page-range extraction in the background, discarding superseded results.

Key types:
- `ReaderSession`: the object a CLI or UI drives.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from time import monotonic
from typing import Callable

from .config import ReaderConfig
from .io.pdf_text_extractor import PdfTextSource
from .models.datatypes import ExtractionResult, PageRange, PlaybackSnapshot, PlaybackState
from .reading.extraction import ExtractionCoordinator
from .reading.sequencer import (
    CompletionCallback,
    PlaybackEvent,
    PlaybackListener,
    PlaybackSequencer,
    TickerFactory,
)
from .reading.serial import SerialExecutor
from .reading.ticker import RepeatingTicker, TickCallback
from .telemetry.logger import RunLogger
from .tts.engine import SpeechEngine


class _SerialEngineListener:
    """Forward engine callbacks onto the session's serial executor."""

    def __init__(self, serial: SerialExecutor, sequencer: PlaybackSequencer) -> None:
        self._serial = serial
        self._sequencer = sequencer

    def on_started(self, utterance_id: int) -> None:
        self._serial.post(self._sequencer.on_started, utterance_id)

    def on_progress(
        self, utterance_id: int, fraction: float, current_word: int, total_words: int
    ) -> None:
        self._serial.post(
            self._sequencer.on_progress, utterance_id, fraction, current_word, total_words
        )

    def on_finished(self, utterance_id: int) -> None:
        self._serial.post(self._sequencer.on_finished, utterance_id)

    def on_cancelled(self, utterance_id: int) -> None:
        self._serial.post(self._sequencer.on_cancelled, utterance_id)

    def on_failed(self, utterance_id: int, detail: str) -> None:
        self._serial.post(self._sequencer.on_failed, utterance_id, detail)


class ReaderSession:
    """Load a PDF range, prepare chunks, and read them aloud.

    Changing the page range or chunk size always stops playback first. Chunk
    navigation while reading restarts playback at the new chunk.
    """

    def __init__(
        self,
        source: PdfTextSource,
        engine: SpeechEngine,
        config: ReaderConfig | None = None,
        *,
        clock: Callable[[], float] = monotonic,
        ticker_factory: TickerFactory | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self.config = (config or ReaderConfig()).normalized()
        self.engine = engine
        self.run_logger = run_logger or RunLogger()
        self._serial = SerialExecutor("pdfvoice-session")
        self._extractor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdfvoice-extract")
        self._generation = 0
        self._on_complete: CompletionCallback | None = None
        self._restarting = False

        self.coordinator = ExtractionCoordinator(
            source, self.config, run_logger=self.run_logger
        )
        self.sequencer = PlaybackSequencer(
            engine,
            self.config,
            clock=clock,
            ticker_factory=ticker_factory or self._default_ticker,
            run_logger=self.run_logger,
            bind_engine=False,
        )
        self.sequencer.add_listener(self._follow_chunk_cursor)
        engine.bind(_SerialEngineListener(self._serial, self.sequencer))

    def _default_ticker(self) -> RepeatingTicker:
        return RepeatingTicker(self.config.progress_interval_seconds, runner=self._run_tick)

    def _run_tick(self, callback: TickCallback) -> bool:
        if self._serial.closed:
            return False
        try:
            return self._serial.call(callback)
        except RuntimeError:
            # executor shut down between the check and the submit
            return False

    @property
    def extraction(self) -> ExtractionResult:
        return self.coordinator.result

    @property
    def page_range(self) -> PageRange:
        return self.coordinator.page_range

    def add_listener(self, listener: PlaybackListener) -> None:
        self.sequencer.add_listener(listener)

    def snapshot(self) -> PlaybackSnapshot:
        return self.sequencer.snapshot()

    # Extraction

    def load(self) -> ExtractionResult:
        """Extract the currently selected range (the whole document after construction)."""

        return self._serial.call(self.coordinator.extract_current_range)

    def set_page_range(self, start: int, end: int) -> ExtractionResult:
        """Stop playback, select a clamped range, and extract it before returning."""

        return self._serial.call(self._set_page_range, start, end)

    def _set_page_range(self, start: int, end: int) -> ExtractionResult:
        self._stop_playback()
        self._generation += 1
        return self.coordinator.set_page_range(start, end)

    def set_page_range_async(self, start: int, end: int) -> Future[ExtractionResult | None]:
        """Stop playback and extract a range in the background.

        The future resolves to the installed result, or `None` when a newer
        range request superseded this one before it finished.
        """

        generation, page_range = self._serial.call(self._begin_range_request, start, end)
        return self._extractor.submit(self._extract_in_background, generation, page_range)

    def _begin_range_request(self, start: int, end: int) -> tuple[int, PageRange]:
        self._stop_playback()
        self._generation += 1
        return self._generation, self.coordinator.select_page_range(start, end)

    def _extract_in_background(
        self, generation: int, page_range: PageRange
    ) -> ExtractionResult | None:
        result = self.coordinator.build_result(page_range)
        return self._serial.call(self._install_if_current, generation, result)

    def _install_if_current(
        self, generation: int, result: ExtractionResult
    ) -> ExtractionResult | None:
        if generation != self._generation:
            self.run_logger.log_debug(
                "extract", "discard_stale", generation=generation, current=self._generation
            )
            return None
        return self.coordinator.install_result(result)

    def set_chunk_size(self, words: int) -> ExtractionResult:
        """Stop playback and re-chunk the prepared text with a clamped threshold."""

        return self._serial.call(self._set_chunk_size, words)

    def _set_chunk_size(self, words: int) -> ExtractionResult:
        self._stop_playback()
        self.config = self.config.with_chunk_size(words)
        return self.coordinator.set_chunk_size(words)

    # Playback

    def start_reading(
        self,
        from_chunk: int | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> bool:
        """Speak prepared chunks from `from_chunk` (default: the chunk cursor)."""

        return self._serial.call(self._start_reading, from_chunk, on_complete)

    def _start_reading(
        self, from_chunk: int | None, on_complete: CompletionCallback | None
    ) -> bool:
        result = self.coordinator.result
        if not result.success or not result.chunks:
            self.run_logger.log_warning(
                "playback", "nothing_to_read", reason=result.error_message or "no_chunks"
            )
            return False
        index = self.coordinator.current_chunk_index if from_chunk is None else from_chunk
        if not self.coordinator.select_chunk(index):
            self.run_logger.log_warning("playback", "chunk_out_of_range", chunk=index)
            return False
        self._stop_playback()
        self._on_complete = on_complete
        return self.sequencer.start(result.chunks, index, self._playback_completed)

    def pause(self) -> None:
        self._serial.call(self.sequencer.pause)

    def resume(self) -> None:
        self._serial.call(self.sequencer.resume)

    def stop(self) -> None:
        self._serial.call(self._stop_playback)

    def next_chunk(self) -> bool:
        """Move to the next chunk; restarts speech there when reading."""

        return self._serial.call(self._step_chunk, 1)

    def previous_chunk(self) -> bool:
        """Move to the previous chunk; restarts speech there when reading."""

        return self._serial.call(self._step_chunk, -1)

    def _step_chunk(self, step: int) -> bool:
        if not self.coordinator.select_chunk(self.coordinator.current_chunk_index + step):
            return False
        if self.sequencer.state is not PlaybackState.STOPPED:
            self._restarting = True
            try:
                self.sequencer.start(
                    self.coordinator.chunks,
                    self.coordinator.current_chunk_index,
                    self._playback_completed,
                )
            finally:
                self._restarting = False
        return True

    def _stop_playback(self) -> None:
        self.sequencer.stop()

    def _playback_completed(self, outcome: str) -> None:
        if self._restarting and outcome == "stopped":
            return
        callback = self._on_complete
        self._on_complete = None
        if callback is not None:
            callback(outcome)

    def _follow_chunk_cursor(self, event: PlaybackEvent) -> None:
        if event.kind == "chunk_started":
            self.coordinator.select_chunk(event.snapshot.current_chunk_index)

    # Lifecycle

    def flush(self) -> None:
        """Wait until queued control operations and engine callbacks have run."""

        self._serial.flush()

    def close(self) -> None:
        """Stop playback and release worker threads."""

        if self._serial.closed:
            return
        self._serial.call(self._stop_playback)
        self._extractor.shutdown(wait=True)
        self._serial.shutdown(wait=True)
        shutdown = getattr(self.engine, "shutdown", None)
        if callable(shutdown):
            shutdown()

    def __enter__(self) -> ReaderSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
