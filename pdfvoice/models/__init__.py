"""Shared typed data models for pdfvoice.

This package contains dataclasses used across extraction and playback modules
to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    Chunk,
    ExtractionResult,
    PageRange,
    PlaybackSnapshot,
    PlaybackState,
)

__all__ = [
    "Chunk",
    "ExtractionResult",
    "PageRange",
    "PlaybackSnapshot",
    "PlaybackState",
]
