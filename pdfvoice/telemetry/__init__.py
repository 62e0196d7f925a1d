"""Telemetry and observability helpers.

This package emits deterministic event lines for extraction and playback.
"""

from .logger import RunLogger, configure_logging

__all__ = ["RunLogger", "configure_logging"]
