"""Speech engine construction.

Responsibilities:
- Resolve the configured engine identifier to a concrete `SpeechEngine`.
- Keep playback and CLI code independent from engine class construction.
"""

from __future__ import annotations

from ..config import ReaderConfig
from ..telemetry.logger import RunLogger
from .audio_player import PygameAudioPlayer
from .engine import SpeechEngine
from .remote_engine import RemoteSpeechEngine
from .speech_client import SpeechServiceClient
from .system_engine import SystemSpeechEngine
from .voices import VoiceProfile


def create_speech_engine(
    config: ReaderConfig,
    api_key: str | None = None,
    run_logger: RunLogger | None = None,
) -> SpeechEngine:
    """Create the speech engine named by `config.engine`."""

    normalized = config.normalized()
    if normalized.engine == "system":
        voice = VoiceProfile(
            name=normalized.voice or "default",
            voice_id=normalized.voice,
            words_per_minute=normalized.words_per_minute,
        )
        return SystemSpeechEngine(voice=voice, run_logger=run_logger)
    if normalized.engine == "remote":
        client = SpeechServiceClient(
            base_url=normalized.remote_base_url,
            api_key=api_key if api_key is not None else normalized.api_key,
        )
        voice = VoiceProfile(
            name=normalized.remote_voice,
            voice_id=normalized.voice or normalized.remote_voice,
            words_per_minute=normalized.words_per_minute,
        )
        return RemoteSpeechEngine(
            client,
            model=normalized.remote_model,
            voice=voice,
            output_dir=normalized.output_dir,
            player=PygameAudioPlayer() if normalized.play_audio else None,
            run_logger=run_logger,
        )
    raise ValueError(f"Unsupported speech engine `{normalized.engine}`.")
