"""Voice profile models for synthesis configuration.

Responsibilities:
- Represent engine voice identities and speaking rate.
- Decouple playback logic from engine-specific naming.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Declarative voice profile passed through to speech engines.

    Attributes:
        name: Human-readable profile name.
        voice_id: Engine-native voice identifier, or `None` for the engine default.
        words_per_minute: Speaking rate.
        language: Optional language tag reported by the engine.
    """

    name: str
    voice_id: str | None = None
    words_per_minute: int = 180
    language: str | None = None
