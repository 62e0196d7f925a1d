"""Speech engine backed by the platform voices exposed through `pyttsx3`.

Responsibilities:
- Own one `pyttsx3` engine on a dedicated thread driven by an external loop.
- Translate `pyttsx3` word and utterance callbacks into listener events.
- Emulate pause/resume by stopping and re-speaking from the last spoken word.

`pyttsx3` drivers are not safe to drive from several threads, so every engine
call happens on the worker thread; public methods only enqueue commands.
"""

from __future__ import annotations

from dataclasses import dataclass
import queue
import threading
from typing import Any, Callable

import pyttsx3

from ..telemetry.logger import RunLogger
from ..text.chunking import count_words, split_words
from .engine import NullEngineListener, SpeechEngineListener
from .voices import VoiceProfile

_LOOP_POLL_SECONDS = 0.05
_READY_TIMEOUT_SECONDS = 10.0
_SHUTDOWN = object()

EngineFactory = Callable[[], Any]


@dataclass(slots=True)
class _Utterance:
    """Word bookkeeping for the utterance currently owned by the engine."""

    utterance_id: int
    words: list[str]
    segment: int = 0
    base_word: int = 0
    spoken_words: int = 0
    paused: bool = False

    @property
    def name(self) -> str:
        return f"{self.utterance_id}:{self.segment}"

    def remaining_text(self) -> str:
        return " ".join(self.words[self.spoken_words :])


def list_system_voices(engine_factory: EngineFactory = pyttsx3.init) -> list[VoiceProfile]:
    """Return the voices installed for the platform speech driver."""

    engine = engine_factory()
    voices = engine.getProperty("voices") or []
    rate = engine.getProperty("rate")
    profiles: list[VoiceProfile] = []
    for voice in voices:
        languages = getattr(voice, "languages", None) or []
        language = languages[0] if languages else None
        if isinstance(language, bytes):
            language = language.decode("utf-8", errors="ignore").strip("\x05 ")
        profiles.append(
            VoiceProfile(
                name=str(getattr(voice, "name", None) or voice.id),
                voice_id=str(voice.id),
                words_per_minute=int(rate) if isinstance(rate, (int, float)) else 180,
                language=str(language) if language else None,
            )
        )
    return profiles


class SystemSpeechEngine:
    """Speak utterances aloud through the operating system's voices."""

    def __init__(
        self,
        voice: VoiceProfile,
        engine_factory: EngineFactory = pyttsx3.init,
        run_logger: RunLogger | None = None,
    ) -> None:
        self.voice = voice
        self._engine_factory = engine_factory
        self.run_logger = run_logger or RunLogger()
        self._listener: SpeechEngineListener = NullEngineListener()
        self._commands: queue.Queue[Any] = queue.Queue()
        self._ready = threading.Event()
        self._startup_error: str | None = None
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._current: _Utterance | None = None

    def bind(self, listener: SpeechEngineListener) -> None:
        self._listener = listener

    def speak(self, text: str, utterance_id: int) -> bool:
        if not split_words(text) or not self._ensure_started():
            return False
        self._commands.put(("speak", text, utterance_id))
        return True

    def pause(self) -> None:
        self._commands.put(("pause",))

    def resume(self) -> None:
        self._commands.put(("resume",))

    def stop(self) -> None:
        if self._thread is not None:
            self._commands.put(("stop",))

    def shutdown(self, timeout: float | None = 2.0) -> None:
        """Stop the worker thread and release the driver."""

        thread = self._thread
        if thread is None:
            return
        self._commands.put(_SHUTDOWN)
        thread.join(timeout)

    def _ensure_started(self) -> bool:
        with self._start_lock:
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._run, name="pdfvoice-system-tts", daemon=True
                )
                self._thread.start()
        self._ready.wait(_READY_TIMEOUT_SECONDS)
        if self._startup_error is not None or not self._ready.is_set():
            self.run_logger.log_stage_failure(
                "engine", error_type="startup", detail=self._startup_error or "timeout"
            )
            return False
        return True

    def _run(self) -> None:
        try:
            engine = self._engine_factory()
            engine.setProperty("rate", self.voice.words_per_minute)
            if self.voice.voice_id:
                engine.setProperty("voice", self.voice.voice_id)
            engine.connect("started-utterance", self._on_utterance_started)
            engine.connect("started-word", self._on_word)
            engine.connect("finished-utterance", self._on_utterance_finished)
            engine.connect("error", self._on_error)
            engine.startLoop(False)
        except Exception as exc:
            self._startup_error = str(exc) or type(exc).__name__
            self._ready.set()
            return

        self._ready.set()
        try:
            while True:
                try:
                    command = self._commands.get(timeout=_LOOP_POLL_SECONDS)
                except queue.Empty:
                    command = None
                if command is _SHUTDOWN:
                    break
                if command is not None:
                    self._apply(engine, command)
                engine.iterate()
        finally:
            engine.endLoop()

    def _apply(self, engine: Any, command: tuple[Any, ...]) -> None:
        action = command[0]
        current = self._current
        if action == "speak":
            _, text, utterance_id = command
            if current is not None:
                engine.stop()
            self._current = _Utterance(utterance_id=utterance_id, words=split_words(text))
            engine.say(text, self._current.name)
        elif action == "stop":
            self._current = None
            engine.stop()
        elif action == "pause" and current is not None and not current.paused:
            current.paused = True
            engine.stop()
        elif action == "resume" and current is not None and current.paused:
            current.paused = False
            current.segment += 1
            current.base_word = max(0, current.spoken_words - 1)
            current.spoken_words = current.base_word
            remaining = current.remaining_text()
            if remaining:
                engine.say(remaining, current.name)
            else:
                self._current = None
                self._listener.on_finished(current.utterance_id)

    def _owns(self, name: str | None) -> _Utterance | None:
        current = self._current
        if current is None or current.paused or name != current.name:
            return None
        return current

    def _on_utterance_started(self, name: str | None) -> None:
        current = self._owns(name)
        if current is not None and current.segment == 0:
            self._listener.on_started(current.utterance_id)

    def _on_word(self, name: str | None, location: int, length: int) -> None:
        current = self._owns(name)
        if current is None:
            return
        segment_text = " ".join(current.words[current.base_word :])
        spoken = current.base_word + count_words(segment_text[: location + length])
        current.spoken_words = max(current.spoken_words, min(spoken, len(current.words)))
        total = len(current.words)
        self._listener.on_progress(
            current.utterance_id, current.spoken_words / total, current.spoken_words, total
        )

    def _on_utterance_finished(self, name: str | None, completed: bool) -> None:
        current = self._owns(name)
        if current is None:
            return
        self._current = None
        if completed:
            self._listener.on_finished(current.utterance_id)
        else:
            self._listener.on_cancelled(current.utterance_id)

    def _on_error(self, name: str | None, exception: Exception) -> None:
        current = self._owns(name)
        if current is None:
            return
        self._current = None
        self._listener.on_failed(current.utterance_id, str(exception) or type(exception).__name__)
