"""Shared pytest fixtures for the full pdfvoice test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from loguru import logger
import pytest

from tests.pdf_factory import write_text_pdf


@pytest.fixture(autouse=True)
def _reset_loguru_handlers() -> Iterator[None]:
    """Drop sinks installed by CLI invocations so later tests never log to closed streams."""

    yield
    logger.remove()


@pytest.fixture
def three_page_pdf_path(tmp_path: Path) -> Path:
    """Provide a PDF whose three pages each read `Hello world`."""

    return write_text_pdf(
        tmp_path / "three_pages.pdf",
        [["Hello world"], ["Hello world"], ["Hello world"]],
    )


@pytest.fixture
def pdf_with_blank_page_path(tmp_path: Path) -> Path:
    """Provide a PDF with a text page, a blank page, and another text page."""

    return write_text_pdf(
        tmp_path / "with_blank.pdf",
        [["First page text"], [], ["Third page text"]],
    )
