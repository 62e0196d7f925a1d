"""Configuration model and loaders for pdfvoice.

Responsibilities:
- Define reader settings as a typed dataclass with documented defaults.
- Clamp out-of-range numeric settings instead of rejecting them.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `ReaderConfig`: normalized settings shared by extraction and playback.
- `ConfigLoader`: static construction helpers for `ReaderConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    clamp,
    normalize_optional_string,
    parse_number,
    parse_permissive_boolean,
)


DEFAULT_CHUNK_SIZE_WORDS = 10_000
CHUNK_SIZE_RANGE = (1_000, 50_000)
WORDS_PER_MINUTE_RANGE = (80, 400)
STALL_TIMEOUT_RANGE = (5.0, 600.0)
STALL_PROGRESS_RANGE = (0.0, 1.0)
PROGRESS_INTERVAL_RANGE = (0.05, 5.0)
SUPPORTED_ENGINES = frozenset({"system", "remote"})


@dataclass(slots=True)
class ReaderConfig:
    """Settings for one reading session.

    Numeric fields are clamped into their supported windows by `normalized()`.

    Attributes:
        chunk_size_words: Word threshold above which text is split into chunks.
        words_per_minute: Speaking rate passed to engines and used for progress estimates.
        voice: Optional engine-native voice identifier.
        engine: Speech engine identifier (`system` or `remote`).
        stall_timeout_seconds: Unpaused engine silence tolerated before playback is stopped.
        stall_progress_threshold: Chunk progress below which silence counts as a stall.
        progress_interval_seconds: Progress polling period while speaking.
        speak_page_markers: Whether `--- Page N ---` markers are read aloud.
        remote_base_url: Base URL of an OpenAI-compatible speech endpoint.
        remote_model: Model identifier for the remote speech endpoint.
        remote_voice: Voice identifier for the remote speech endpoint.
        api_key: Optional API key for the remote speech endpoint.
        output_dir: Directory for audio rendered by the remote engine.
        play_audio: Whether the remote engine plays rendered audio or only writes it.
    """

    chunk_size_words: int = DEFAULT_CHUNK_SIZE_WORDS
    words_per_minute: int = 180
    voice: str | None = None
    engine: str = "system"
    stall_timeout_seconds: float = 30.0
    stall_progress_threshold: float = 0.10
    progress_interval_seconds: float = 0.1
    speak_page_markers: bool = False
    remote_base_url: str = "http://localhost:8880/v1"
    remote_model: str = "tts-1"
    remote_voice: str = "alloy"
    api_key: str | None = None
    output_dir: Path = Path("out")
    play_audio: bool = True

    def normalized(self) -> ReaderConfig:
        """Return a copy with numeric fields clamped and identifiers validated."""

        engine = (normalize_optional_string(self.engine) or "system").lower()
        if engine not in SUPPORTED_ENGINES:
            supported = ", ".join(sorted(SUPPORTED_ENGINES))
            raise ValueError(f"Unsupported `engine` value `{self.engine}`; supported: {supported}.")

        return replace(
            self,
            chunk_size_words=int(clamp(int(self.chunk_size_words), *CHUNK_SIZE_RANGE)),
            words_per_minute=int(clamp(int(self.words_per_minute), *WORDS_PER_MINUTE_RANGE)),
            voice=normalize_optional_string(self.voice),
            engine=engine,
            stall_timeout_seconds=float(clamp(self.stall_timeout_seconds, *STALL_TIMEOUT_RANGE)),
            stall_progress_threshold=float(
                clamp(self.stall_progress_threshold, *STALL_PROGRESS_RANGE)
            ),
            progress_interval_seconds=float(
                clamp(self.progress_interval_seconds, *PROGRESS_INTERVAL_RANGE)
            ),
            remote_base_url=(
                normalize_optional_string(self.remote_base_url) or "http://localhost:8880/v1"
            ).rstrip("/"),
            api_key=normalize_optional_string(self.api_key),
        )

    def with_chunk_size(self, words: int) -> ReaderConfig:
        """Return a copy using a clamped chunk-size threshold."""

        return replace(self, chunk_size_words=int(clamp(int(words), *CHUNK_SIZE_RANGE)))

    def resolved_api_key(
        self,
        cli_value: str | None = None,
        secure_value: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> str | None:
        """Resolve the remote API key with `cli` > `secure` > `env` > config precedence."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        for candidate in (cli_value, secure_value, env_map.get("PDFVOICE_API_KEY"), self.api_key):
            normalized = normalize_optional_string(candidate)
            if normalized is not None:
                return normalized
        return None


class ConfigLoader:
    """Factory methods for creating `ReaderConfig` from external sources."""

    _INT_KEYS = frozenset({"chunk_size_words", "words_per_minute"})
    _FLOAT_KEYS = frozenset(
        {"stall_timeout_seconds", "stall_progress_threshold", "progress_interval_seconds"}
    )
    _BOOL_KEYS = frozenset({"speak_page_markers", "play_audio"})
    _PATH_KEYS = frozenset({"output_dir"})
    _ENV_PREFIX = "PDFVOICE_"

    @staticmethod
    def supported_keys() -> frozenset[str]:
        """Return every configuration key accepted by the loaders."""

        return frozenset(item.name for item in fields(ReaderConfig))

    @staticmethod
    def from_yaml(path: Path) -> ReaderConfig:
        """Create a normalized config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ReaderConfig:
        """Create a normalized config from `PDFVOICE_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader.supported_keys():
            env_key = f"{ConfigLoader._ENV_PREFIX}{key.upper()}"
            if env_key in env_map and normalize_optional_string(env_map[env_key]) is not None:
                payload[key] = env_map[env_key]
        return ConfigLoader.from_mapping(payload, source_label="environment")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str = "config") -> ReaderConfig:
        """Build a normalized config from a flat mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader.supported_keys()))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        values: dict[str, Any] = {}
        for key, raw_value in payload.items():
            try:
                parsed = ConfigLoader._parse_value(key, raw_value)
            except ValueError as exc:
                raise ValueError(f"{source_label} field {exc}") from exc
            if parsed is not None:
                values[key] = parsed
        return ReaderConfig(**values).normalized()

    @staticmethod
    def _parse_value(key: str, raw_value: Any) -> Any:
        """Parse one payload value according to the field's declared kind."""

        if key in ConfigLoader._INT_KEYS:
            return parse_number(raw_value, key, integer=True)
        if key in ConfigLoader._FLOAT_KEYS:
            return parse_number(raw_value, key, integer=False)
        if key in ConfigLoader._BOOL_KEYS:
            if raw_value is None:
                return None
            parsed = parse_permissive_boolean(raw_value)
            if parsed is None:
                raise ValueError(
                    f"`{key}` must be a boolean value (`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            return parsed
        normalized = normalize_optional_string(raw_value)
        if normalized is None:
            return None
        if key in ConfigLoader._PATH_KEYS:
            return Path(normalized)
        return normalized
