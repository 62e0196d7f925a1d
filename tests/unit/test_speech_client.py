"""Unit tests for the OpenAI-compatible speech HTTP client."""

from __future__ import annotations

from typing import Any

import pytest
from pytest import MonkeyPatch
import requests

from pdfvoice.tts.speech_client import SpeechServiceClient, SpeechServiceError


def _response(status_code: int, content: bytes, reason: str = "OK") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.reason = reason
    response.url = "http://tts.local/v1/audio/speech"
    return response


def test_synthesize_speech_posts_payload_and_returns_audio(monkeypatch: MonkeyPatch) -> None:
    """Client should post JSON to `/audio/speech` with bearer auth and clamped speed."""

    captured: dict[str, Any] = {}

    def _fake_post(url: str, **kwargs: Any) -> requests.Response:
        captured["url"] = url
        captured.update(kwargs)
        return _response(200, b"RIFFdata")

    monkeypatch.setattr(requests, "post", _fake_post)
    client = SpeechServiceClient(base_url="http://tts.local/v1/", api_key=" sk-test ", timeout_seconds=5)

    audio = client.synthesize_speech(model="kokoro", voice="af_sky", text="Hello.", speed=9.0)

    assert audio == b"RIFFdata"
    assert captured["url"] == "http://tts.local/v1/audio/speech"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["json"] == {
        "model": "kokoro",
        "voice": "af_sky",
        "input": "Hello.",
        "response_format": "wav",
        "speed": 4.0,
    }
    assert captured["timeout"] == 5


def test_synthesize_speech_omits_auth_header_without_key(monkeypatch: MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def _fake_post(url: str, **kwargs: Any) -> requests.Response:
        captured.update(kwargs)
        return _response(200, b"audio")

    monkeypatch.setattr(requests, "post", _fake_post)

    SpeechServiceClient().synthesize_speech(model="m", voice="v", text="t", speed=0.1)

    assert "Authorization" not in captured["headers"]
    assert captured["json"]["speed"] == 0.25


@pytest.mark.parametrize(
    ("status_code", "body", "failure_kind", "message_part"),
    [
        (
            401,
            b'{"error": {"message": "Invalid key sk-abcdefghijklmnop"}}',
            "invalid_api_key",
            "Invalid key [redacted-key]",
        ),
        (504, b"", "timeout", "timed out (HTTP 504)."),
        (500, b'{"detail": "model not loaded"}', "http_error", "model not loaded"),
    ],
)
def test_synthesize_speech_maps_http_errors(
    monkeypatch: MonkeyPatch,
    status_code: int,
    body: bytes,
    failure_kind: str,
    message_part: str,
) -> None:
    """HTTP failures should map to failure kinds and redacted provider messages."""

    monkeypatch.setattr(
        requests, "post", lambda url, **kwargs: _response(status_code, body, "Error")
    )

    with pytest.raises(SpeechServiceError) as exc_info:
        SpeechServiceClient().synthesize_speech(model="m", voice="v", text="t")

    assert exc_info.value.failure_kind == failure_kind
    assert exc_info.value.status_code == status_code
    assert message_part in str(exc_info.value)
    assert "sk-abcdefghijklmnop" not in str(exc_info.value)


def test_synthesize_speech_maps_transport_failures(monkeypatch: MonkeyPatch) -> None:
    def _timeout(url: str, **kwargs: Any) -> requests.Response:
        raise requests.Timeout("slow")

    monkeypatch.setattr(requests, "post", _timeout)
    with pytest.raises(SpeechServiceError) as timeout_info:
        SpeechServiceClient().synthesize_speech(model="m", voice="v", text="t")
    assert timeout_info.value.failure_kind == "timeout"

    def _refused(url: str, **kwargs: Any) -> requests.Response:
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", _refused)
    with pytest.raises(SpeechServiceError, match="connection refused") as transport_info:
        SpeechServiceClient().synthesize_speech(model="m", voice="v", text="t")
    assert transport_info.value.failure_kind == "transport"


def test_synthesize_speech_rejects_empty_audio(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(requests, "post", lambda url, **kwargs: _response(200, b""))

    with pytest.raises(SpeechServiceError, match="empty audio payload"):
        SpeechServiceClient().synthesize_speech(model="m", voice="v", text="t")
