"""Unit tests for CLI presentation helpers."""

from __future__ import annotations

import pytest
import typer

from pdfvoice.cli_rendering import (
    echo_extraction_summary,
    exit_with_command_error,
    format_chunk_row,
    format_progress_line,
)
from pdfvoice.errors import ReaderStageError
from pdfvoice.models.datatypes import (
    Chunk,
    ExtractionResult,
    PageRange,
    PlaybackSnapshot,
    PlaybackState,
)


def test_format_chunk_row_truncates_long_previews() -> None:
    chunk = Chunk(index=2, text="word " * 40, word_count=40)

    row = format_chunk_row(chunk)

    assert row.startswith("3. words=40 word word")
    assert row.endswith("...")
    assert len(row) == len("3. words=40 ") + 60


def test_format_chunk_row_collapses_whitespace() -> None:
    assert format_chunk_row(Chunk(index=0, text="a\n  b", word_count=2)) == "1. words=2 a b"


def test_format_progress_line_uses_one_based_chunk_and_percent() -> None:
    snapshot = PlaybackSnapshot(
        state=PlaybackState.SPEAKING,
        current_chunk_index=1,
        total_chunks=4,
        progress=0.375,
        current_word_index=15,
        total_words=40,
    )

    assert format_progress_line(snapshot) == (
        "[progress] state=speaking chunk=2/4 word=15/40 progress=38%"
    )


def test_echo_extraction_summary_prints_range_words_and_mode(
    capsys: pytest.CaptureFixture[str],
) -> None:
    result = ExtractionResult(
        success=True,
        chunks=(Chunk(0, "a b", 2), Chunk(1, "c", 1)),
        page_range=PageRange(2, 3, 5),
        is_chunked=True,
    )

    echo_extraction_summary(result)

    assert capsys.readouterr().out.splitlines() == [
        "Pages: 2-3 of 5",
        "Words: 3",
        "Chunks: 2 (chunked)",
    ]


def test_exit_with_command_error_prints_stage_and_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Stage errors should print stage, detail, and hint on stderr and exit with code 1."""

    error = ReaderStageError(stage="extract", detail="No text found.", hint="Try OCR first.")

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("extract", error)

    assert exc_info.value.exit_code == 1
    err = capsys.readouterr().err
    assert "extract failed at stage `extract`: No text found." in err
    assert "Hint: Try OCR first." in err


def test_exit_with_command_error_handles_plain_exceptions(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(typer.Exit):
        exit_with_command_error("read", RuntimeError("boom"))

    assert "read failed: boom" in capsys.readouterr().err
