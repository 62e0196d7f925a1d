"""Chunked playback state machine.

Responsibilities:
- Drive a speech engine through a chunk list one utterance at a time.
- Track pause/resume/stop transitions and aggregate reading progress.
- Stop playback when the engine goes silent without making progress.

State transitions are synchronous and guarded by one re-entrant lock, so the
sequencer can be exercised directly in tests with a fake engine and clock.
Engine callbacks name the utterance they belong to; events for anything but
the active utterance are ignored, which makes late callbacks after `stop()`
harmless.

Progress is an approximation. When the engine reports word boundaries the
reported fraction is used; otherwise it is estimated from unpaused elapsed
time and the configured words-per-minute rate.
"""

from __future__ import annotations

from dataclasses import dataclass
import itertools
import math
import threading
from time import monotonic
from typing import Callable, Iterable

from ..config import ReaderConfig
from ..errors import EngineFailure, EngineStartFailure, PlaybackError, PlaybackStall
from ..models.datatypes import Chunk, PlaybackSnapshot, PlaybackState
from ..telemetry.logger import RunLogger
from ..tts.engine import SpeechEngine
from .ticker import RepeatingTicker

CompletionCallback = Callable[[str], None]
TickerFactory = Callable[[], RepeatingTicker]


@dataclass(frozen=True, slots=True)
class PlaybackEvent:
    """Notification delivered to sequencer listeners.

    Attributes:
        kind: `state_changed`, `chunk_started`, `progress`, `finished`, or `error`.
        snapshot: Playback state right after the event.
        error: Failure details for `error` events.
        outcome: Completion outcome for `finished` events.
    """

    kind: str
    snapshot: PlaybackSnapshot
    error: PlaybackError | None = None
    outcome: str | None = None


PlaybackListener = Callable[[PlaybackEvent], None]


class PlaybackSequencer:
    """Speak chunks in order with pause, resume, stop, and progress tracking.

    The completion callback given to `start` fires exactly once per accepted
    start with one of `finished`, `stopped`, `cancelled`, `stalled`, `failed`.
    """

    def __init__(
        self,
        engine: SpeechEngine,
        config: ReaderConfig | None = None,
        clock: Callable[[], float] = monotonic,
        ticker_factory: TickerFactory | None = None,
        run_logger: RunLogger | None = None,
        bind_engine: bool = True,
    ) -> None:
        """Create a stopped sequencer; binds itself as the engine listener by default."""

        self.engine = engine
        self.config = (config or ReaderConfig()).normalized()
        self._clock = clock
        self._ticker_factory = ticker_factory
        self._ticker: RepeatingTicker | None = None
        self.run_logger = run_logger or RunLogger()
        self._lock = threading.RLock()
        self._listeners: list[PlaybackListener] = []
        self._utterance_ids = itertools.count(1)
        self._on_complete: CompletionCallback | None = None
        self._reset()
        if bind_engine:
            engine.bind(self)

    def _reset(self) -> None:
        """Zero every playback field and return to `STOPPED`."""

        self._state = PlaybackState.STOPPED
        self._chunks: tuple[Chunk, ...] = ()
        self._index = 0
        self._total_words = 0
        self._utterance_id: int | None = None
        self._chunk_started_at = 0.0
        self._chunk_paused_seconds = 0.0
        self._chunk_fraction = 0.0
        self._reported_fraction: float | None = None
        self._last_signal_at = 0.0
        self._paused_at: float | None = None
        self._paused_seconds = 0.0
        self._finished_while_paused = False

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._chunks

    @property
    def active_utterance_id(self) -> int | None:
        return self._utterance_id

    def add_listener(self, listener: PlaybackListener) -> None:
        """Register a callback for playback events; it must not block."""

        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: PlaybackListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # Control operations

    def start(
        self,
        chunks: Iterable[Chunk],
        start_index: int = 0,
        on_complete: CompletionCallback | None = None,
    ) -> bool:
        """Begin speaking `chunks` from `start_index`.

        Playback already in progress is stopped first. Returns `False` when the
        chunk list is empty, the index is out of range, or the engine fails to
        start; a rejected chunk list never invokes `on_complete`.
        """

        chunk_list = tuple(chunks)
        with self._lock:
            if self._state is not PlaybackState.STOPPED:
                self._halt("stopped")
            if not chunk_list or not 0 <= start_index < len(chunk_list):
                self.run_logger.log_warning(
                    "playback", "start_rejected", chunks=len(chunk_list), start=start_index
                )
                return False

            self._chunks = chunk_list
            self._total_words = sum(chunk.word_count for chunk in chunk_list)
            self._index = start_index
            self._on_complete = on_complete
            self._state = PlaybackState.SPEAKING
            self.run_logger.log_event(
                "playback", "start", chunks=len(chunk_list), start=start_index
            )
            self._notify("state_changed")
            if not self._dispatch_current():
                return False
            self._arm_ticker()
            return True

    def pause(self) -> None:
        """Pause speaking; a no-op unless currently `SPEAKING`."""

        with self._lock:
            if self._state is not PlaybackState.SPEAKING:
                return
            now = self._clock()
            self._update_chunk_fraction(now)
            detail = self._call_engine(self.engine.pause)
            if detail is not None:
                self._fail(EngineFailure(f"Speech engine failed to pause: {detail}",
                                         chunk_index=self._index), "failed")
                return
            self._paused_at = now
            self._state = PlaybackState.PAUSED
            self._cancel_ticker()
            self.run_logger.log_event("playback", "pause", chunk=self._index)
            self._notify("state_changed")

    def resume(self) -> None:
        """Resume from `PAUSED`, excluding the paused interval from progress timing."""

        with self._lock:
            if self._state is not PlaybackState.PAUSED:
                return
            now = self._clock()
            paused_for = max(0.0, now - (self._paused_at if self._paused_at is not None else now))
            self._paused_seconds += paused_for
            self._chunk_paused_seconds += paused_for
            self._last_signal_at += paused_for
            self._paused_at = None
            self._state = PlaybackState.SPEAKING
            self.run_logger.log_event(
                "playback", "resume", chunk=self._index, paused_seconds=f"{paused_for:.2f}"
            )
            if self._finished_while_paused:
                self._finished_while_paused = False
                self._notify("state_changed")
                self._advance()
                if self._state is PlaybackState.SPEAKING:
                    self._arm_ticker()
                return

            detail = self._call_engine(self.engine.resume)
            if detail is not None:
                self._fail(EngineFailure(f"Speech engine failed to resume: {detail}",
                                         chunk_index=self._index), "failed")
                return
            self._notify("state_changed")
            self._arm_ticker()

    def stop(self) -> None:
        """Stop the engine and reset all playback state; safe from any state."""

        with self._lock:
            self._halt("stopped")

    def tick(self) -> bool:
        """Refresh progress and apply the stall guard.

        Returns `False` once the sequencer is no longer speaking, which tells
        the ticker to stop; a stale tick after `stop()` is a no-op.
        """

        with self._lock:
            if self._state is not PlaybackState.SPEAKING:
                return False
            now = self._clock()
            self._update_chunk_fraction(now)
            quiet_for = now - self._last_signal_at
            engine_fraction = self._reported_fraction or 0.0
            if (
                quiet_for >= self.config.stall_timeout_seconds
                and engine_fraction < self.config.stall_progress_threshold
            ):
                self._fail(
                    PlaybackStall(
                        f"Playback stalled: no speech engine progress for {quiet_for:.0f}s "
                        f"on chunk {self._index + 1} of {len(self._chunks)}.",
                        chunk_index=self._index,
                    ),
                    "stalled",
                )
                return False
            self._notify("progress")
            return True

    def snapshot(self) -> PlaybackSnapshot:
        """Return current state and aggregate progress."""

        with self._lock:
            if self._state is PlaybackState.STOPPED or not self._chunks:
                return PlaybackSnapshot()
            if self._state is PlaybackState.SPEAKING:
                self._update_chunk_fraction(self._clock())
            total_chunks = len(self._chunks)
            overall = min(1.0, (self._index + self._chunk_fraction) / total_chunks)
            return PlaybackSnapshot(
                state=self._state,
                current_chunk_index=self._index,
                total_chunks=total_chunks,
                progress=overall,
                current_word_index=math.floor(overall * self._total_words),
                total_words=self._total_words,
                paused_seconds=self._paused_seconds,
            )

    # Engine callbacks

    def on_started(self, utterance_id: int) -> None:
        with self._lock:
            if not self._is_active(utterance_id):
                return
            self._last_signal_at = self._clock()

    def on_progress(
        self, utterance_id: int, fraction: float, current_word: int, total_words: int
    ) -> None:
        """Record engine-reported progress; it never moves backwards within a chunk."""

        _ = (current_word, total_words)
        with self._lock:
            if not self._is_active(utterance_id):
                return
            bounded = max(0.0, min(1.0, fraction))
            self._reported_fraction = max(self._reported_fraction or 0.0, bounded)
            now = self._clock()
            self._last_signal_at = now
            self._update_chunk_fraction(now)
            self._notify("progress")

    def on_finished(self, utterance_id: int) -> None:
        """Advance to the next chunk, or finish when the last one completed."""

        with self._lock:
            if not self._is_active(utterance_id):
                self.run_logger.log_debug("playback", "stale_finish", utterance=utterance_id)
                return
            if self._state is PlaybackState.PAUSED:
                self._finished_while_paused = True
                return
            self._advance()

    def on_cancelled(self, utterance_id: int) -> None:
        with self._lock:
            if not self._is_active(utterance_id):
                return
            self.run_logger.log_warning("playback", "engine_cancelled", chunk=self._index)
            self._finish("cancelled")

    def on_failed(self, utterance_id: int, detail: str) -> None:
        with self._lock:
            if not self._is_active(utterance_id):
                return
            self._fail(
                EngineFailure(f"Speech engine error: {detail}", chunk_index=self._index),
                "failed",
            )

    # Internals

    def _is_active(self, utterance_id: int) -> bool:
        return self._state is not PlaybackState.STOPPED and utterance_id == self._utterance_id

    def _dispatch_current(self) -> bool:
        """Hand the current chunk to the engine under a fresh utterance id."""

        chunk = self._chunks[self._index]
        self._utterance_id = next(self._utterance_ids)
        now = self._clock()
        self._chunk_started_at = now
        self._last_signal_at = now
        self._chunk_paused_seconds = 0.0
        self._chunk_fraction = 0.0
        self._reported_fraction = None

        detail: str | None = None
        try:
            accepted = self.engine.speak(chunk.text, self._utterance_id)
        except Exception as exc:
            accepted = False
            detail = str(exc) or type(exc).__name__
        if not accepted:
            message = (
                f"Speech engine failed to start chunk {self._index + 1} of {len(self._chunks)}"
            )
            if detail:
                message = f"{message}: {detail}"
            self._fail(EngineStartFailure(message, chunk_index=self._index), "failed")
            return False

        self.run_logger.log_event(
            "playback",
            "chunk_start",
            chunk=self._index,
            total=len(self._chunks),
            words=chunk.word_count,
        )
        self._notify("chunk_started")
        return True

    def _advance(self) -> None:
        if self._index < len(self._chunks) - 1:
            self._index += 1
            self._dispatch_current()
            return
        self._finish("finished")

    def _update_chunk_fraction(self, now: float) -> float:
        if self._reported_fraction is not None:
            fraction = self._reported_fraction
        else:
            fraction = self._estimated_fraction(now)
        self._chunk_fraction = max(self._chunk_fraction, max(0.0, min(1.0, fraction)))
        return self._chunk_fraction

    def _estimated_fraction(self, now: float) -> float:
        """Estimate chunk progress from unpaused elapsed time and speaking rate."""

        if not self._chunks:
            return 0.0
        chunk = self._chunks[self._index]
        if chunk.word_count <= 0:
            return 0.0
        end = self._paused_at if self._paused_at is not None else now
        active_seconds = end - self._chunk_started_at - self._chunk_paused_seconds
        estimated_duration = chunk.word_count / (self.config.words_per_minute / 60.0)
        return active_seconds / estimated_duration

    def _call_engine(self, action: Callable[[], None]) -> str | None:
        """Run an engine control call and return an error detail instead of raising."""

        try:
            action()
        except Exception as exc:
            return str(exc) or type(exc).__name__
        return None

    def _halt(self, outcome: str) -> None:
        """Stop the engine unconditionally, then reset and report `outcome`."""

        detail = self._call_engine(self.engine.stop)
        if detail is not None:
            self.run_logger.log_warning("engine", "stop_failed", detail=detail)
        was_active = self._state is not PlaybackState.STOPPED
        self._finish(outcome, notify=was_active)

    def _fail(self, error: PlaybackError, outcome: str) -> None:
        self.run_logger.log_stage_failure("playback", error_type=error.kind, chunk=self._index)
        detail = self._call_engine(self.engine.stop)
        if detail is not None:
            self.run_logger.log_warning("engine", "stop_failed", detail=detail)
        self._cancel_ticker()
        self._reset()
        self._notify("error", error=error)
        self._notify("state_changed")
        self._complete(outcome)

    def _finish(self, outcome: str, notify: bool = True) -> None:
        self._cancel_ticker()
        self._reset()
        if notify:
            self.run_logger.log_event("playback", outcome)
            self._notify("state_changed")
        self._complete(outcome, notify=notify)

    def _complete(self, outcome: str, notify: bool = True) -> None:
        """Fire the pending completion callback once."""

        callback = self._on_complete
        self._on_complete = None
        if notify:
            self._notify("finished", outcome=outcome)
        if callback is None:
            return
        try:
            callback(outcome)
        except Exception as exc:
            self.run_logger.log_stage_failure(
                "playback", error_type=type(exc).__name__, callback="on_complete"
            )

    def _notify(
        self, kind: str, error: PlaybackError | None = None, outcome: str | None = None
    ) -> None:
        if not self._listeners:
            return
        event = PlaybackEvent(kind=kind, snapshot=self.snapshot(), error=error, outcome=outcome)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                self.run_logger.log_stage_failure(
                    "playback", error_type=type(exc).__name__, callback="listener"
                )

    def _arm_ticker(self) -> None:
        if self._ticker_factory is None:
            return
        self._cancel_ticker()
        self._ticker = self._ticker_factory()
        self._ticker.start(self.tick)

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
