"""Shared pytest fixtures and configuration for the envkeep test suite.

Guidelines
----------
* The real OS keyring is never touched — :class:`MemoryKeyring` is
  injected instead.
* No test needs a terminal; prompting is mocked or forced
  non-interactive.
* Process tests spawn ``sys.executable`` only.
"""

from __future__ import annotations

import keyring.backend
import keyring.errors
import pytest

from envkeep.cli import app as app_module
from envkeep.core.manager import ProfileManager
from envkeep.core.models import AppConfig
from envkeep.core.profile_store import ProfileStore
from envkeep.infra.keyring_backend import KeyringSecretBackend

NAMESPACE = "alice@envkeep/test"


class MemoryKeyring(keyring.backend.KeyringBackend):
    """Dictionary-backed keyring backend for tests."""

    priority = 0.1

    def __init__(self) -> None:
        super().__init__()
        self.secrets: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.secrets.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.secrets[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self.secrets[(service, username)]
        except KeyError:
            raise keyring.errors.PasswordDeleteError(username) from None


@pytest.fixture(autouse=True)
def _plain_rich_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich from emitting ANSI codes into captured output."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("TERM", "dumb")


@pytest.fixture
def memory_keyring() -> MemoryKeyring:
    return MemoryKeyring()


@pytest.fixture
def backend(memory_keyring: MemoryKeyring) -> KeyringSecretBackend:
    return KeyringSecretBackend(memory_keyring)


@pytest.fixture
def store(backend: KeyringSecretBackend) -> ProfileStore:
    return ProfileStore(backend, NAMESPACE)


@pytest.fixture
def manager(store: ProfileStore) -> ProfileManager:
    return ProfileManager(store)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(username="alice", package_name="envkeep")


@pytest.fixture
def cli_backend(
    monkeypatch: pytest.MonkeyPatch,
    backend: KeyringSecretBackend,
    config: AppConfig,
) -> KeyringSecretBackend:
    """Route the CLI to the in-memory backend as user ``alice``."""
    monkeypatch.setattr(app_module, "_make_backend", lambda: backend)
    monkeypatch.setattr("envkeep.infra.identity.load_config", lambda: config)
    return backend
