"""HTTP client for OpenAI-compatible speech endpoints.

Responsibilities:
- POST synthesis requests to `/audio/speech` and return raw audio bytes.
- Map HTTP and transport failures to `SpeechServiceError.failure_kind`.
- Keep API keys out of error messages.
"""

from __future__ import annotations

import json
import re
import socket

import requests


class SpeechServiceError(RuntimeError):
    """Raised when a speech service request fails or returns no audio."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code


class SpeechServiceClient:
    """Minimal requests-based client for a local or hosted speech service."""

    _MAX_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:8880/v1",
        api_key: str | None = None,
        timeout_seconds: float = 120.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.timeout_seconds = timeout_seconds

    def synthesize_speech(
        self,
        *,
        model: str,
        voice: str,
        text: str,
        response_format: str = "wav",
        speed: float = 1.0,
    ) -> bytes:
        """Return synthesized audio bytes for `text`."""

        payload = {
            "model": model,
            "voice": voice,
            "input": text,
            "response_format": response_format,
            "speed": max(0.25, min(4.0, speed)),
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                f"{self.base_url}/audio/speech",
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            audio = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._from_http_error(exc) from exc
        except requests.RequestException as exc:
            if isinstance(exc, requests.Timeout):
                raise SpeechServiceError(
                    "Speech service request timed out.", failure_kind="timeout"
                ) from exc
            raise SpeechServiceError(
                f"Speech service transport error: {self._short_message(str(exc))}",
                failure_kind="transport",
            ) from exc
        except (TimeoutError, socket.timeout) as exc:
            raise SpeechServiceError(
                "Speech service request timed out.", failure_kind="timeout"
            ) from exc

        if not audio:
            raise SpeechServiceError("Speech service returned an empty audio payload.")
        return audio

    @classmethod
    def _from_http_error(cls, exc: requests.HTTPError) -> SpeechServiceError:
        status_code = exc.response.status_code if exc.response is not None else 0
        message = cls._provider_message(exc)
        if status_code in {401, 403}:
            kind, headline = "invalid_api_key", "Speech service rejected the API key"
        elif status_code in {408, 504}:
            kind, headline = "timeout", "Speech service request timed out"
        else:
            kind, headline = "http_error", "Speech service request failed"
        detail = f"{headline} (HTTP {status_code})"
        detail = f"{detail}: {message}" if message else f"{detail}."
        return SpeechServiceError(detail, failure_kind=kind, status_code=status_code)

    @classmethod
    def _provider_message(cls, exc: requests.HTTPError) -> str:
        """Extract `error.message` (or the raw body) from an HTTP error response."""

        response = exc.response
        if response is None:
            return ""
        body = bytes(response.content).decode("utf-8", errors="replace").strip()
        if not body:
            return ""
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact(body))
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                body = error["message"]
            elif isinstance(payload.get("detail"), str):
                body = payload["detail"]
        return cls._short_message(cls._redact(body))

    @staticmethod
    def _redact(text: str) -> str:
        redacted = re.sub(r"\bsk-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
        return re.sub(r"(?i)bearer\s+[A-Za-z0-9._-]{12,}", "Bearer [redacted-token]", redacted)

    @classmethod
    def _short_message(cls, text: str) -> str:
        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_MESSAGE_CHARS - 1]}..."
