"""CLI error-handling tests for concise stage diagnostics."""

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from pdfvoice.cli import app


def test_info_reports_missing_pdf_with_open_stage(tmp_path: Path) -> None:
    """Missing inputs should fail at the `open` stage with a hint and exit code 1."""

    result = CliRunner().invoke(app, ["info", str(tmp_path / "missing.pdf")])

    assert result.exit_code == 1
    assert "info failed at stage `open`: Input PDF not found" in result.output
    assert "Hint: Pass a readable, text-based PDF file." in result.output


def test_extract_reports_pages_without_text(pdf_with_blank_page_path: Path) -> None:
    result = CliRunner().invoke(
        app, ["extract", str(pdf_with_blank_page_path), "--start", "2", "--end", "2"]
    )

    assert result.exit_code == 1
    assert (
        "extract failed at stage `extract`: "
        "No text could be extracted from the specified pages."
    ) in result.output
    assert "Hint: Choose pages that contain selectable text." in result.output


def test_chunks_reports_missing_config_file(three_page_pdf_path: Path) -> None:
    result = CliRunner().invoke(
        app, ["chunks", str(three_page_pdf_path), "--config", "missing-pdfvoice.yaml"]
    )

    assert result.exit_code == 1
    assert "chunks failed at stage `config`" in result.output
    assert "Config file not found: `missing-pdfvoice.yaml`." in result.output


def test_extract_reports_invalid_config_payload(
    tmp_path: Path, three_page_pdf_path: Path
) -> None:
    """Unknown YAML keys should be rejected before the PDF is opened."""

    config_path = tmp_path / "invalid.yaml"
    config_path.write_text("unknown_key: 1\n", encoding="utf-8")

    result = CliRunner().invoke(
        app, ["extract", str(three_page_pdf_path), "--config", str(config_path)]
    )

    assert result.exit_code == 1
    assert "extract failed at stage `config`: Invalid configuration:" in result.output
    assert "unsupported key(s): unknown_key." in result.output


def test_read_rejects_unsupported_engine(three_page_pdf_path: Path) -> None:
    result = CliRunner().invoke(app, ["read", str(three_page_pdf_path), "--engine", "robot"])

    assert result.exit_code == 1
    assert "read failed at stage `config`: Unsupported `engine` value `robot`" in result.output


def test_read_reports_non_stage_engine_construction_error(
    monkeypatch: MonkeyPatch, three_page_pdf_path: Path
) -> None:
    def _failing_factory(*_: object, **__: object) -> None:
        raise RuntimeError("speech driver exploded")

    monkeypatch.setattr("pdfvoice.cli.create_speech_engine", _failing_factory)

    result = CliRunner().invoke(app, ["read", str(three_page_pdf_path)])

    assert result.exit_code == 1
    assert "read failed: speech driver exploded" in result.output


def test_voices_reports_unavailable_engine(monkeypatch: MonkeyPatch) -> None:
    def _no_driver() -> list[object]:
        raise OSError("libespeak not found")

    monkeypatch.setattr("pdfvoice.cli.list_system_voices", _no_driver)

    result = CliRunner().invoke(app, ["voices"])

    assert result.exit_code == 1
    assert (
        "voices failed at stage `engine`: System speech engine is unavailable: "
        "libespeak not found"
    ) in result.output
