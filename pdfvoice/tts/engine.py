"""Speech engine contracts.

Responsibilities:
- Define the engine-agnostic capability the playback sequencer drives.
- Define the callback surface engines use to report utterance events.

Every callback carries the utterance id passed to `speak`, so listeners can
discard events from utterances that were already cancelled.
"""

from __future__ import annotations

from typing import Protocol


class SpeechEngineListener(Protocol):
    """Receiver of engine events for utterances started via `SpeechEngine.speak`."""

    def on_started(self, utterance_id: int) -> None:
        """Audio for the utterance began."""

    def on_progress(
        self, utterance_id: int, fraction: float, current_word: int, total_words: int
    ) -> None:
        """The engine reached `fraction` of the utterance text."""

    def on_finished(self, utterance_id: int) -> None:
        """The utterance was spoken completely."""

    def on_cancelled(self, utterance_id: int) -> None:
        """The utterance ended before completion."""

    def on_failed(self, utterance_id: int, detail: str) -> None:
        """The engine hit an error while speaking the utterance."""


class SpeechEngine(Protocol):
    """Protocol for text-to-speech engines."""

    def bind(self, listener: SpeechEngineListener) -> None:
        """Register the receiver of utterance events."""

    def speak(self, text: str, utterance_id: int) -> bool:
        """Start speaking `text`; return `False` when the engine cannot start."""

    def pause(self) -> None:
        """Pause the active utterance."""

    def resume(self) -> None:
        """Resume a paused utterance."""

    def stop(self) -> None:
        """Cancel the active utterance; safe to call when idle."""


class NullEngineListener:
    """Listener that ignores every event; used until an engine is bound."""

    def on_started(self, utterance_id: int) -> None:
        _ = utterance_id

    def on_progress(
        self, utterance_id: int, fraction: float, current_word: int, total_words: int
    ) -> None:
        _ = (utterance_id, fraction, current_word, total_words)

    def on_finished(self, utterance_id: int) -> None:
        _ = utterance_id

    def on_cancelled(self, utterance_id: int) -> None:
        _ = utterance_id

    def on_failed(self, utterance_id: int, detail: str) -> None:
        _ = (utterance_id, detail)
