"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
extraction summaries, chunk rows, and playback progress lines.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PlaybackError, ReaderStageError
from .models.datatypes import Chunk, ExtractionResult, PlaybackSnapshot
from .tts.voices import VoiceProfile

_PREVIEW_CHARS = 60


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ReaderStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_extraction_summary(result: ExtractionResult) -> None:
    """Print the page range, word count, and chunking mode of an extraction."""

    page_range = result.page_range
    typer.echo(
        f"Pages: {page_range.start_page}-{page_range.end_page} of {page_range.total_pages}"
    )
    typer.echo(f"Words: {result.total_words}")
    mode = "chunked" if result.is_chunked else "single"
    typer.echo(f"Chunks: {len(result.chunks)} ({mode})")


def format_chunk_row(chunk: Chunk) -> str:
    """Return one `index. words preview` row for a chunk."""

    compact = " ".join(chunk.text.split())
    if len(compact) > _PREVIEW_CHARS:
        compact = f"{compact[: _PREVIEW_CHARS - 3]}..."
    return f"{chunk.index + 1}. words={chunk.word_count} {compact}"


def echo_chunk_rows(chunks: tuple[Chunk, ...] | list[Chunk]) -> None:
    for chunk in chunks:
        typer.echo(format_chunk_row(chunk))


def format_progress_line(snapshot: PlaybackSnapshot) -> str:
    """Return a deterministic progress line for a playback snapshot."""

    return (
        f"[progress] state={snapshot.state.value} "
        f"chunk={snapshot.current_chunk_index + 1}/{snapshot.total_chunks} "
        f"word={snapshot.current_word_index}/{snapshot.total_words} "
        f"progress={snapshot.progress * 100:.0f}%"
    )


def echo_playback_error(error: PlaybackError) -> None:
    typer.secho(f"Playback error ({error.kind}): {error.detail}", fg=typer.colors.RED, err=True)


def echo_voice_list(voices: list[VoiceProfile]) -> None:
    """Print one row per installed voice, sorted by name."""

    for voice in sorted(voices, key=lambda item: item.name.lower()):
        language = f" [{voice.language}]" if voice.language else ""
        typer.echo(f"{voice.name}{language}: {voice.voice_id}")
