"""Top-level package for pdfvoice.

This package reads selected page ranges of text-based PDFs aloud: it extracts
and normalizes page text for speech, splits it into word chunks, and drives a
speech engine through them. The main entry point is `ReaderSession`.
"""

from .session import ReaderSession

__all__ = ["ReaderSession", "__version__"]

__version__ = "0.1.0"
