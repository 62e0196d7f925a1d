"""Secure credential storage for the remote speech service.

Responsibilities:
- Persist the remote speech API key in the OS keyring.
- Never log or echo stored secret values.

Key types:
- `CredentialStore`: interface for API key persistence.
- `KeyringCredentialStore`: `keyring`-backed implementation.
"""

from __future__ import annotations

from dataclasses import dataclass

import keyring
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

_DEFAULT_SERVICE_NAME = "pdfvoice"
_DEFAULT_ACCOUNT_NAME = "remote_api_key"


class CredentialStore:
    """Interface for secure API key operations."""

    def is_available(self) -> bool:
        raise NotImplementedError

    def get_api_key(self) -> str | None:
        raise NotImplementedError

    def set_api_key(self, api_key: str) -> None:
        raise NotImplementedError

    def clear_api_key(self) -> bool:
        """Delete the stored API key and return whether one existed."""

        raise NotImplementedError


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Credential store backed by the active `keyring` backend."""

    service_name: str = _DEFAULT_SERVICE_NAME
    account_name: str = _DEFAULT_ACCOUNT_NAME

    def is_available(self) -> bool:
        """Return `False` when only the fail-safe null backend is configured."""

        backend = keyring.get_keyring()
        priority = getattr(backend, "priority", 0)
        return isinstance(priority, (int, float)) and priority > 0

    def get_api_key(self) -> str | None:
        """Return the stripped stored key, or `None` when missing or unreadable."""

        try:
            value = keyring.get_password(self.service_name, self.account_name)
        except (NoKeyringError, KeyringError):
            return None
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    def set_api_key(self, api_key: str) -> None:
        normalized = api_key.strip()
        if not normalized:
            raise ValueError("API key must be a non-empty string.")
        keyring.set_password(self.service_name, self.account_name, normalized)

    def clear_api_key(self) -> bool:
        if self.get_api_key() is None:
            return False
        try:
            keyring.delete_password(self.service_name, self.account_name)
        except PasswordDeleteError:
            return False
        return True


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store."""

    return KeyringCredentialStore()
