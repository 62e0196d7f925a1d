"""Deterministic test doubles shared across the unit and integration suites."""

from __future__ import annotations

import threading
from typing import Callable

from pdfvoice.models.datatypes import Chunk
from pdfvoice.tts.engine import NullEngineListener, SpeechEngineListener


def make_chunks(*word_counts: int) -> tuple[Chunk, ...]:
    """Build chunks whose texts contain exactly the requested number of words."""

    return tuple(
        Chunk(
            index=index,
            text=" ".join(f"c{index}w{word}" for word in range(count)),
            word_count=count,
        )
        for index, count in enumerate(word_counts)
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTicker:
    """Ticker double that records arming and cancellation without threads."""

    def __init__(self) -> None:
        self.callback: Callable[[], bool] | None = None
        self.cancelled = False

    def start(self, callback: Callable[[], bool]) -> None:
        self.callback = callback

    def cancel(self) -> None:
        self.cancelled = True


class FakeEngine:
    """Speech engine double that records calls and lets tests drive callbacks."""

    def __init__(self, accept: bool = True, speak_error: Exception | None = None) -> None:
        self.listener: SpeechEngineListener = NullEngineListener()
        self.accept = accept
        self.speak_error = speak_error
        self.spoken: list[tuple[int, str]] = []
        self.calls: list[str] = []

    def bind(self, listener: SpeechEngineListener) -> None:
        self.listener = listener

    def speak(self, text: str, utterance_id: int) -> bool:
        self.calls.append("speak")
        if self.speak_error is not None:
            raise self.speak_error
        if not self.accept:
            return False
        self.spoken.append((utterance_id, text))
        return True

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def stop(self) -> None:
        self.calls.append("stop")

    @property
    def last_utterance_id(self) -> int:
        return self.spoken[-1][0]

    @property
    def spoken_texts(self) -> list[str]:
        return [text for _, text in self.spoken]

    def finish_current(self) -> None:
        self.listener.on_finished(self.last_utterance_id)

    def report_progress(self, fraction: float) -> None:
        total = len(self.spoken[-1][1].split())
        self.listener.on_progress(self.last_utterance_id, fraction, int(fraction * total), total)


class AutoFinishEngine(FakeEngine):
    """Engine double that reports every utterance as spoken right away."""

    def speak(self, text: str, utterance_id: int) -> bool:
        accepted = super().speak(text, utterance_id)
        if accepted:
            words = len(text.split())
            self.listener.on_started(utterance_id)
            self.listener.on_progress(utterance_id, 1.0, words, words)
            self.listener.on_finished(utterance_id)
        return accepted


class FakeAudioPlayer:
    """Audio player double that stays "playing" until a test calls `finish()`."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[str] = []
        self.played: list[bytes] = []
        self.playing = False
        self.started = threading.Event()

    def play(self, audio: bytes) -> None:
        self.calls.append("play")
        if self.error is not None:
            raise self.error
        self.played.append(audio)
        self.playing = True
        self.started.set()

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def stop(self) -> None:
        self.calls.append("stop")
        self.playing = False

    def is_playing(self) -> bool:
        return self.playing

    def close(self) -> None:
        self.calls.append("close")

    def finish(self) -> None:
        self.playing = False


class RecordingListener:
    """Thread-safe engine listener that records events and signals terminal ones."""

    def __init__(self) -> None:
        self.events: list[tuple[object, ...]] = []
        self.done = threading.Event()
        self._lock = threading.Lock()

    def _record(self, *event: object) -> None:
        with self._lock:
            self.events.append(event)

    def on_started(self, utterance_id: int) -> None:
        self._record("started", utterance_id)

    def on_progress(
        self, utterance_id: int, fraction: float, current_word: int, total_words: int
    ) -> None:
        self._record("progress", utterance_id, fraction, current_word, total_words)

    def on_finished(self, utterance_id: int) -> None:
        self._record("finished", utterance_id)
        self.done.set()

    def on_cancelled(self, utterance_id: int) -> None:
        self._record("cancelled", utterance_id)
        self.done.set()

    def on_failed(self, utterance_id: int, detail: str) -> None:
        self._record("failed", utterance_id, detail)
        self.done.set()


class InMemoryCredentialStore:
    """Credential store kept in memory so tests never touch the OS keyring."""

    def __init__(self, initial_api_key: str | None = None) -> None:
        self._api_key = initial_api_key

    def is_available(self) -> bool:
        return True

    def get_api_key(self) -> str | None:
        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        self._api_key = api_key.strip()

    def clear_api_key(self) -> bool:
        """Clear API key and return whether one existed."""

        existed = self._api_key is not None
        self._api_key = None
        return existed
