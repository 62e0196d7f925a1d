"""Audio playback for rendered speech.

Responsibilities:
- Play WAV bytes through `pygame.mixer.music` with pause/resume/stop control.
- Report WAV durations so playback progress can be derived from elapsed time.
"""

from __future__ import annotations

import io
from typing import Protocol
import wave

import pygame


class AudioPlaybackError(RuntimeError):
    """Raised when the audio device or decoder cannot play rendered speech."""


class AudioPlayer(Protocol):
    """Protocol for players driven by the remote speech engine's render thread."""

    def play(self, audio: bytes) -> None:
        """Start playing `audio` from the beginning, replacing anything playing."""

    def pause(self) -> None:
        """Hold playback at the current position."""

    def resume(self) -> None:
        """Continue playback from where it was paused."""

    def stop(self) -> None:
        """Stop playback; safe to call when idle."""

    def is_playing(self) -> bool:
        """Return whether audio is still audible (`False` once it ran out or stopped)."""

    def close(self) -> None:
        """Release the audio device."""


def wav_duration_seconds(audio: bytes) -> float:
    """Return the duration of a WAV payload, or `0.0` when the header is unreadable."""

    try:
        with wave.open(io.BytesIO(audio), "rb") as wav_file:
            frames = wav_file.getnframes()
            rate = wav_file.getframerate()
    except (wave.Error, EOFError):
        return 0.0
    if rate <= 0:
        return 0.0
    return frames / float(rate)


class PygameAudioPlayer:
    """Play speech through the `pygame` mixer's music channel."""

    def play(self, audio: bytes) -> None:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            pygame.mixer.music.load(io.BytesIO(audio), "wav")
            pygame.mixer.music.play()
        except pygame.error as exc:
            raise AudioPlaybackError(str(exc) or "audio device unavailable") from exc

    def pause(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.pause()

    def resume(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.unpause()

    def stop(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.stop()

    def is_playing(self) -> bool:
        return bool(pygame.mixer.get_init()) and bool(pygame.mixer.music.get_busy())

    def close(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.music.stop()
            pygame.mixer.quit()
