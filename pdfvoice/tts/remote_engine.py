"""Speech engine backed by an OpenAI-compatible speech service.

Responsibilities:
- Render each utterance to WAV through `SpeechServiceClient` and store it.
- Play the rendered audio and report elapsed/duration progress.
- Send liveness heartbeats while a render request is still in flight.
- Report start, completion, cancellation, and failures per utterance id.

Rendering and playback run on one daemon thread per utterance; only the most
recent utterance is live, earlier ones are cancelled when a new one is spoken.
Player calls happen only on render threads, and only the utterance that owns
the player may pause, resume, or stop it.
"""

from __future__ import annotations

import math
from pathlib import Path
import threading
from time import monotonic
from typing import Callable

from ..telemetry.logger import RunLogger
from ..text.chunking import count_words
from .audio_player import AudioPlaybackError, AudioPlayer, wav_duration_seconds
from .engine import NullEngineListener, SpeechEngineListener
from .speech_client import SpeechServiceClient, SpeechServiceError
from .voices import VoiceProfile

_PLAYBACK_POLL_SECONDS = 0.1
_DEFAULT_HEARTBEAT_SECONDS = 1.0


class RemoteSpeechEngine:
    """Synthesize utterances remotely, store them as numbered WAV files, and play them."""

    def __init__(
        self,
        client: SpeechServiceClient,
        *,
        model: str,
        voice: VoiceProfile,
        output_dir: Path | None,
        player: AudioPlayer | None = None,
        heartbeat_seconds: float = _DEFAULT_HEARTBEAT_SECONDS,
        clock: Callable[[], float] = monotonic,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Configure rendering; without a `player` utterances finish once rendered."""

        self.client = client
        self.model = model
        self.voice = voice
        self.output_dir = output_dir
        self.player = player
        self.heartbeat_seconds = heartbeat_seconds
        self._clock = clock
        self.run_logger = run_logger or RunLogger()
        self.rendered_paths: list[Path] = []
        self._listener: SpeechEngineListener = NullEngineListener()
        self._lock = threading.Lock()
        self._player_lock = threading.Lock()
        self._player_owner: int | None = None
        self._cancel: threading.Event | None = None
        self._resume = threading.Event()
        self._resume.set()
        self._worker: threading.Thread | None = None

    def bind(self, listener: SpeechEngineListener) -> None:
        self._listener = listener

    def speak(self, text: str, utterance_id: int) -> bool:
        if not text.strip():
            return False
        cancel = threading.Event()
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
            self._cancel = cancel
            self._resume.set()
            self._worker = threading.Thread(
                target=self._render,
                args=(text, utterance_id, cancel),
                name=f"pdfvoice-remote-{utterance_id}",
                daemon=True,
            )
            self._worker.start()
        return True

    def pause(self) -> None:
        self._resume.clear()

    def resume(self) -> None:
        self._resume.set()

    def stop(self) -> None:
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
            self._cancel = None
            self._resume.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the most recent render thread to exit."""

        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    def shutdown(self, timeout: float | None = 2.0) -> None:
        """Cancel the live utterance and release the audio device."""

        self.stop()
        self.join(timeout)
        if self.player is not None:
            self.player.close()

    def _render(self, text: str, utterance_id: int, cancel: threading.Event) -> None:
        listener = self._listener
        words = count_words(text)
        listener.on_started(utterance_id)
        self.run_logger.log_debug("engine", "render_start", utterance=utterance_id)

        rendered = threading.Event()
        heartbeat = threading.Thread(
            target=self._heartbeat,
            args=(listener, utterance_id, words, cancel, rendered),
            name=f"pdfvoice-heartbeat-{utterance_id}",
            daemon=True,
        )
        heartbeat.start()
        try:
            audio = self.client.synthesize_speech(
                model=self.model,
                voice=self.voice.voice_id or self.voice.name,
                text=text,
                response_format="wav",
                speed=self.voice.words_per_minute / 180.0,
            )
        except SpeechServiceError as exc:
            self.run_logger.log_stage_failure(
                "engine", error_type=exc.failure_kind, utterance=utterance_id
            )
            if not cancel.is_set():
                listener.on_failed(utterance_id, str(exc))
            return
        finally:
            rendered.set()
            heartbeat.join()

        if cancel.is_set():
            listener.on_cancelled(utterance_id)
            return
        if self.output_dir is not None and not self._store(listener, utterance_id, audio):
            return

        while not self._resume.wait(_PLAYBACK_POLL_SECONDS):
            if cancel.is_set():
                break
        if cancel.is_set():
            listener.on_cancelled(utterance_id)
            return

        if self.player is not None and not self._play(listener, utterance_id, audio, words, cancel):
            return
        listener.on_progress(utterance_id, 1.0, words, words)
        listener.on_finished(utterance_id)

    def _heartbeat(
        self,
        listener: SpeechEngineListener,
        utterance_id: int,
        words: int,
        cancel: threading.Event,
        rendered: threading.Event,
    ) -> None:
        """Report zero progress periodically until the render request returns."""

        while not rendered.wait(self.heartbeat_seconds):
            if cancel.is_set():
                return
            listener.on_progress(utterance_id, 0.0, 0, words)

    def _store(self, listener: SpeechEngineListener, utterance_id: int, audio: bytes) -> bool:
        assert self.output_dir is not None
        output_path = self.output_dir / f"utterance-{utterance_id:04d}.wav"
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(audio)
        except OSError as exc:
            listener.on_failed(utterance_id, f"Could not write `{output_path}`: {exc}")
            return False
        self.rendered_paths.append(output_path)
        self.run_logger.log_event(
            "engine", "rendered", utterance=utterance_id, path=output_path, bytes=len(audio)
        )
        return True

    def _play(
        self,
        listener: SpeechEngineListener,
        utterance_id: int,
        audio: bytes,
        words: int,
        cancel: threading.Event,
    ) -> bool:
        """Play `audio` until it ends; returns `False` when cancelled or failed."""

        player = self.player
        assert player is not None
        duration = wav_duration_seconds(audio)
        started_at = self._clock()
        try:
            with self._player_lock:
                self._player_owner = utterance_id
                player.play(audio)
        except AudioPlaybackError as exc:
            listener.on_failed(utterance_id, f"Audio playback failed: {exc}")
            return False

        paused_seconds = 0.0
        paused_at: float | None = None
        while True:
            if cancel.is_set():
                self._control_player(utterance_id, player.stop, release=True)
                listener.on_cancelled(utterance_id)
                return False
            if not self._resume.is_set():
                if paused_at is None:
                    self._control_player(utterance_id, player.pause)
                    paused_at = self._clock()
                self._resume.wait(_PLAYBACK_POLL_SECONDS)
                continue
            if paused_at is not None:
                self._control_player(utterance_id, player.resume)
                paused_seconds += self._clock() - paused_at
                paused_at = None
            if not player.is_playing():
                break

            fraction = 0.0
            if duration > 0:
                elapsed = self._clock() - started_at - paused_seconds
                fraction = max(0.0, min(1.0, elapsed / duration))
            listener.on_progress(utterance_id, fraction, math.floor(fraction * words), words)
            cancel.wait(_PLAYBACK_POLL_SECONDS)

        with self._player_lock:
            if self._player_owner == utterance_id:
                self._player_owner = None
        return True

    def _control_player(
        self, utterance_id: int, action: Callable[[], None], release: bool = False
    ) -> None:
        with self._player_lock:
            if self._player_owner != utterance_id:
                return
            action()
            if release:
                self._player_owner = None
