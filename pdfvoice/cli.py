"""Command-line interface for pdfvoice.

Responsibilities:
- Expose commands to inspect, extract, chunk, and read PDF page ranges aloud.
- Convert CLI arguments into `ReaderConfig` and map failures to diagnostics.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import threading
from typing import Annotated

import click
import typer

from .cli_rendering import (
    echo_chunk_rows,
    echo_extraction_summary,
    echo_playback_error,
    echo_voice_list,
    exit_with_command_error,
    format_progress_line,
)
from .config import ConfigLoader, ReaderConfig
from .credentials import create_credential_store
from .errors import PdfExtractionError, PlaybackError, ReaderStageError
from .io.pdf_text_extractor import PdfTextSource, PypdfTextSource
from .models.datatypes import ExtractionResult
from .parsing import normalize_optional_string
from .reading.extraction import ExtractionCoordinator
from .reading.sequencer import PlaybackEvent
from .session import ReaderSession
from .telemetry.logger import RunLogger, configure_logging
from .text.normalizer import TextNormalizer
from .tts.factory import create_speech_engine
from .tts.system_engine import list_system_voices

app = typer.Typer(
    name="pdfvoice",
    no_args_is_help=True,
    help="Read PDF page ranges aloud.",
)

_PROGRESS_LINE_SECONDS = 1.0

StartOption = Annotated[int, typer.Option("--start", help="First page to read (1-based).")]
EndOption = Annotated[
    int | None, typer.Option("--end", help="Last page to read; defaults to the last page.")
]
ConfigOption = Annotated[
    Path | None, typer.Option("--config", help="YAML config file with reader settings.")
]
ChunkSizeOption = Annotated[
    int | None,
    typer.Option("--chunk-size", help="Words per chunk (clamped to 1000-50000)."),
]


@app.callback()
def main_callback(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level for diagnostic lines on stderr."),
    ] = "WARNING",
) -> None:
    """Read PDF page ranges aloud."""

    configure_logging(level=log_level.upper())


def open_text_source(pdf_path: Path) -> PdfTextSource:
    """Open a PDF as a page-wise text source."""

    return PypdfTextSource(pdf_path)


def _open_source_or_fail(pdf_path: Path) -> PdfTextSource:
    try:
        return open_text_source(pdf_path)
    except PdfExtractionError as exc:
        raise ReaderStageError(
            stage="open",
            detail=str(exc),
            hint="Pass a readable, text-based PDF file.",
        ) from exc


def _load_config(config_path: Path | None) -> ReaderConfig:
    """Load YAML config when given, otherwise `PDFVOICE_*` environment settings."""

    try:
        if config_path is None:
            return ConfigLoader.from_env()
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ReaderStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ReaderStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config keys/values and rerun.",
        ) from exc


def _resolve_config(config_path: Path | None, **overrides: object) -> ReaderConfig:
    """Apply non-`None` CLI overrides on top of loaded settings."""

    config = _load_config(config_path)
    explicit = {key: value for key, value in overrides.items() if value is not None}
    try:
        return replace(config, **explicit).normalized()
    except ValueError as exc:
        raise ReaderStageError(
            stage="config",
            detail=str(exc),
            hint="Use `pdfvoice --help` to see supported option values.",
        ) from exc


def _extract(
    source: PdfTextSource,
    config: ReaderConfig,
    start: int,
    end: int | None,
) -> ExtractionResult:
    coordinator = ExtractionCoordinator(source, config, run_logger=RunLogger())
    last_page = end if end is not None else coordinator.page_range.total_pages
    result = coordinator.set_page_range(start, last_page)
    if not result.success:
        raise ReaderStageError(
            stage="extract",
            detail=result.error_message,
            hint="Choose pages that contain selectable text.",
        )
    return result


@app.command("info")
def info_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
) -> None:
    """Print the page count of a PDF."""

    try:
        source = _open_source_or_fail(input_pdf)
        pages = source.page_count()
    except Exception as exc:
        exit_with_command_error("info", exc)

    typer.echo(f"File: {input_pdf}")
    typer.echo(f"Pages: {pages}")


@app.command("normalize")
def normalize_command(
    text: Annotated[
        str | None, typer.Argument(help="Text to normalize; read from stdin when omitted.")
    ] = None,
) -> None:
    """Print text prepared for speech synthesis."""

    raw = text if text is not None else click.get_text_stream("stdin").read()
    typer.echo(TextNormalizer().normalize(raw))


@app.command("extract")
def extract_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
    start: StartOption = 1,
    end: EndOption = None,
    config_file: ConfigOption = None,
    chunk_size: ChunkSizeOption = None,
    show_markers: Annotated[
        bool,
        typer.Option("--show-markers", help="Print the full text with page markers."),
    ] = False,
) -> None:
    """Extract and normalize a page range, then print the speech text."""

    try:
        config = _resolve_config(config_file, chunk_size_words=chunk_size)
        source = _open_source_or_fail(input_pdf)
        result = _extract(source, config, start, end)
    except Exception as exc:
        exit_with_command_error("extract", exc)

    echo_extraction_summary(result)
    typer.echo("")
    typer.echo(result.full_text if show_markers else result.speech_text)


@app.command("chunks")
def chunks_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
    start: StartOption = 1,
    end: EndOption = None,
    config_file: ConfigOption = None,
    chunk_size: ChunkSizeOption = None,
) -> None:
    """List the chunks a page range would be read in."""

    try:
        config = _resolve_config(config_file, chunk_size_words=chunk_size)
        source = _open_source_or_fail(input_pdf)
        result = _extract(source, config, start, end)
    except Exception as exc:
        exit_with_command_error("chunks", exc)

    echo_extraction_summary(result)
    echo_chunk_rows(result.chunks)


@app.command("read")
def read_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
    start: StartOption = 1,
    end: EndOption = None,
    from_chunk: Annotated[
        int, typer.Option("--from-chunk", help="Chunk to start reading from (1-based).")
    ] = 1,
    engine: Annotated[
        str | None, typer.Option("--engine", help="Speech engine: `system` or `remote`.")
    ] = None,
    voice: Annotated[str | None, typer.Option("--voice", help="Engine voice identifier.")] = None,
    wpm: Annotated[
        int | None, typer.Option("--wpm", help="Speaking rate in words per minute.")
    ] = None,
    out: Annotated[
        Path | None, typer.Option("--out", help="Output directory for the remote engine.")
    ] = None,
    config_file: ConfigOption = None,
    chunk_size: ChunkSizeOption = None,
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="API key for the remote speech service.")
    ] = None,
    no_play: Annotated[
        bool,
        typer.Option("--no-play", help="Only write remote audio to `--out`, without playing it."),
    ] = False,
) -> None:
    """Read a page range aloud, printing progress until playback ends."""

    try:
        config = _resolve_config(
            config_file,
            engine=engine,
            voice=voice,
            words_per_minute=wpm,
            output_dir=out,
            chunk_size_words=chunk_size,
            play_audio=False if no_play else None,
        )
        source = _open_source_or_fail(input_pdf)
        resolved_key = None
        if config.engine == "remote":
            resolved_key = config.resolved_api_key(
                cli_value=normalize_optional_string(api_key),
                secure_value=create_credential_store().get_api_key(),
            )
        run_logger = RunLogger()
        speech_engine = create_speech_engine(config, api_key=resolved_key, run_logger=run_logger)
    except Exception as exc:
        exit_with_command_error("read", exc)

    done = threading.Event()
    outcome: list[str] = []
    errors: list[PlaybackError] = []

    def on_complete(result_outcome: str) -> None:
        outcome.append(result_outcome)
        done.set()

    def on_event(event: PlaybackEvent) -> None:
        if event.kind == "error" and event.error is not None:
            errors.append(event.error)

    with ReaderSession(source, speech_engine, config, run_logger=run_logger) as session:
        session.add_listener(on_event)
        last_page = end if end is not None else session.page_range.total_pages
        result = session.set_page_range(start, last_page)
        if not result.success:
            exit_with_command_error(
                "read",
                ReaderStageError(
                    stage="extract",
                    detail=result.error_message,
                    hint="Choose pages that contain selectable text.",
                ),
            )
        echo_extraction_summary(result)

        if not session.start_reading(from_chunk - 1, on_complete=on_complete):
            detail = errors[-1].detail if errors else f"Chunk {from_chunk} is not available."
            exit_with_command_error(
                "read",
                ReaderStageError(
                    stage="playback",
                    detail=detail,
                    hint=f"Choose a chunk between 1 and {len(result.chunks)}.",
                ),
            )

        try:
            while not done.wait(_PROGRESS_LINE_SECONDS):
                typer.echo(format_progress_line(session.snapshot()))
        except KeyboardInterrupt:
            session.stop()
            typer.echo("Stopped.")
            return

    final = outcome[0] if outcome else "stopped"
    if final == "finished":
        typer.echo("Finished reading.")
        return
    for error in errors:
        echo_playback_error(error)
    if final in {"failed", "stalled"}:
        raise typer.Exit(code=1)
    typer.echo(f"Playback ended: {final}.")


@app.command("voices")
def voices_command() -> None:
    """List voices installed for the system speech engine."""

    try:
        voices = list_system_voices()
    except Exception as exc:
        exit_with_command_error(
            "voices",
            ReaderStageError(
                stage="engine",
                detail=f"System speech engine is unavailable: {exc}",
                hint="Install a platform speech driver (for example `espeak-ng` on Linux).",
            ),
        )
    echo_voice_list(voices)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored remote speech API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            ReaderStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "Speech service API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                ReaderStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                ReaderStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        if credential_store.clear_api_key():
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    status = "present" if credential_store.get_api_key() is not None else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
