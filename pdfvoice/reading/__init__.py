"""Reading workflow: extraction bookkeeping and chunked playback.

This package contains the page-range extraction coordinator, the playback
sequencer state machine, and the threading helpers that drive them.
"""

from .extraction import ExtractionCoordinator
from .sequencer import PlaybackEvent, PlaybackSequencer
from .serial import SerialExecutor
from .ticker import RepeatingTicker

__all__ = [
    "ExtractionCoordinator",
    "PlaybackEvent",
    "PlaybackSequencer",
    "RepeatingTicker",
    "SerialExecutor",
]
