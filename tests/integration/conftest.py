"""Integration-test fixtures for deterministic speech service and keyring behavior."""

from __future__ import annotations

import io
import wave

import pytest

import pdfvoice.cli as cli_module
from pdfvoice.tts.speech_client import SpeechServiceClient
from tests.fakes import InMemoryCredentialStore


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Replace the OS keyring with an in-memory store for CLI commands."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr(cli_module, "create_credential_store", lambda: store)
    return store


@pytest.fixture(autouse=True)
def _isolate_cli_environment(
    monkeypatch: pytest.MonkeyPatch, credential_store: InMemoryCredentialStore
) -> None:
    """Keep host `PDFVOICE_*` variables and the real keyring out of CLI runs."""

    _ = credential_store
    for key in ("PDFVOICE_ENGINE", "PDFVOICE_API_KEY", "PDFVOICE_CHUNK_SIZE_WORDS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _mock_speech_service(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Mock remote synthesis with a short silent WAV payload."""

    requests_seen: list[dict[str, object]] = []

    def _mock_synthesize_speech(self: SpeechServiceClient, **kwargs: object) -> bytes:
        _ = self
        requests_seen.append(kwargs)
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav_file:
            wav_file.setnchannels(1)
            wav_file.setsampwidth(2)
            wav_file.setframerate(24000)
            wav_file.writeframes(b"\x00\x00" * 2400)
        return buffer.getvalue()

    monkeypatch.setattr(SpeechServiceClient, "synthesize_speech", _mock_synthesize_speech)
    return requests_seen
