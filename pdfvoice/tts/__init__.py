"""Speech engine abstractions.

This package contains the engine contracts driven by playback, the system and
remote engine implementations, audio playback, and voice profile types.
"""

from .audio_player import AudioPlaybackError, AudioPlayer, PygameAudioPlayer, wav_duration_seconds
from .engine import NullEngineListener, SpeechEngine, SpeechEngineListener
from .factory import create_speech_engine
from .remote_engine import RemoteSpeechEngine
from .speech_client import SpeechServiceClient, SpeechServiceError
from .system_engine import SystemSpeechEngine, list_system_voices
from .voices import VoiceProfile

__all__ = [
    "AudioPlaybackError",
    "AudioPlayer",
    "NullEngineListener",
    "PygameAudioPlayer",
    "RemoteSpeechEngine",
    "SpeechEngine",
    "SpeechEngineListener",
    "SpeechServiceClient",
    "SpeechServiceError",
    "SystemSpeechEngine",
    "VoiceProfile",
    "create_speech_engine",
    "list_system_voices",
    "wav_duration_seconds",
]
