"""Domain exceptions for extraction, playback, and CLI diagnostics."""

from __future__ import annotations


class ReaderStageError(RuntimeError):
    """Raised when a specific command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class PdfExtractionError(RuntimeError):
    """Raised when a PDF document or one of its pages cannot be read."""


class PlaybackError(RuntimeError):
    """Playback failure surfaced to listeners; never raised out of the sequencer."""

    kind = "playback_error"

    def __init__(self, detail: str, *, chunk_index: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.chunk_index = chunk_index


class EngineStartFailure(PlaybackError):
    """The speech engine rejected or failed to start a chunk."""

    kind = "engine_start_failure"


class EngineFailure(PlaybackError):
    """The speech engine reported an error while speaking a chunk."""

    kind = "engine_failure"


class PlaybackStall(PlaybackError):
    """The engine went silent without meaningful progress and playback was stopped."""

    kind = "playback_stall"
