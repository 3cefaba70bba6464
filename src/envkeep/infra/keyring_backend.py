"""keyring backed implementation of :class:`~envkeep.core.protocols.SecretBackend`.

This module is the **only** place in the codebase that imports
``keyring``.  All keyring exceptions are caught here and re-raised as
:class:`~envkeep.exceptions.BackendError` — nothing raw escapes the
infrastructure boundary.

Account index
-------------
keyring can read, write and delete a single ``(service, account)`` pair
but cannot enumerate the accounts of a service.  To support
:meth:`KeyringSecretBackend.list`, each service carries one extra
account, :data:`INDEX_ACCOUNT`, holding a JSON array of the account
names written through this adapter.  ``@`` is not a word character, so
the index can never collide with a valid variable name.

The index only says where to look.  :meth:`~KeyringSecretBackend.list`
reads every indexed account and skips the ones whose secret is gone, so
the secrets themselves remain the source of truth for what a profile
contains.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from envkeep.exceptions import BackendError, missing_dependency

logger = logging.getLogger(__name__)

INDEX_ACCOUNT: str = "@index"


def _import_keyring() -> Any:
    """Import keyring lazily so bootstrap paths work without it."""
    try:
        import keyring
        import keyring.errors
    except ModuleNotFoundError as exc:
        raise missing_dependency("keyring") from exc
    return keyring


class KeyringSecretBackend:
    """Concrete :class:`SecretBackend` backed by the ``keyring`` library.

    Usage::

        backend = KeyringSecretBackend()
        backend.set("alice@envkeep/work", "API_TOKEN", "s3cr3t")

    Parameters
    ----------
    keyring_backend:
        A ``keyring.backend.KeyringBackend`` instance.  When ``None``
        (default), the backend selected by ``keyring.get_keyring()`` is
        used, which honours keyring's own configuration.

    This class satisfies the :class:`~envkeep.core.protocols.SecretBackend`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(self, keyring_backend: Any | None = None) -> None:
        self._keyring: Any = _import_keyring()
        self._backend: Any = keyring_backend

    @property
    def backend(self) -> Any:
        if self._backend is None:
            self._backend = self._keyring.get_keyring()
        return self._backend

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def get(self, service: str, account: str) -> str | None:
        """Return the secret for *account*, or ``None`` when absent."""
        return self._read(service, account)

    def list(self, service: str) -> list[tuple[str, str]]:
        """Return the ``(account, secret)`` pairs of *service* in index order."""
        pairs: list[tuple[str, str]] = []
        for account in self._load_index(service):
            secret = self._read(service, account)
            if secret is None:
                logger.debug("Indexed account %s missing from %s; skipping", account, service)
                continue
            pairs.append((account, secret))
        return pairs

    def set(self, service: str, account: str, value: str) -> None:
        """Store *value* and record *account* in the service index."""
        try:
            self.backend.set_password(service, account, value)
        except self._keyring.errors.KeyringError as exc:
            raise BackendError(
                f"Failed to store {account} in {service}: {exc}",
                hint="Check that the system keyring is unlocked.",
                debug={"service": service, "account": account},
            ) from exc

        index = self._load_index(service)
        if account not in index:
            index.append(account)
            self._save_index(service, index)
        logger.debug("Wrote %s to %s", account, service)

    def delete(self, service: str, account: str) -> None:
        """Remove *account* and drop it from the service index."""
        try:
            self.backend.delete_password(service, account)
        except self._keyring.errors.PasswordDeleteError as exc:
            raise BackendError(
                f"{account} could not be deleted from {service}: {exc}",
                debug={"service": service, "account": account},
            ) from exc
        except self._keyring.errors.KeyringError as exc:
            raise BackendError(
                f"Failed to delete {account} from {service}: {exc}",
                hint="Check that the system keyring is unlocked.",
                debug={"service": service, "account": account},
            ) from exc

        index = [name for name in self._load_index(service) if name != account]
        self._save_index(service, index)
        logger.debug("Deleted %s from %s", account, service)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def describe(self) -> str:
        """Return a human-readable name of the active keyring backend."""
        backend = self.backend
        return f"{type(backend).__module__}.{type(backend).__name__}"

    def _read(self, service: str, account: str) -> str | None:
        try:
            return self.backend.get_password(service, account)
        except self._keyring.errors.KeyringError as exc:
            raise BackendError(
                f"Failed to read {account} from {service}: {exc}",
                hint="Check that the system keyring is unlocked.",
                debug={"service": service, "account": account},
            ) from exc

    def _load_index(self, service: str) -> list[str]:
        raw = self._read(service, INDEX_ACCOUNT)
        if not raw:
            return []
        try:
            accounts = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise BackendError(
                f"Account index of {service} is corrupt.",
                hint=f"Remove the '{INDEX_ACCOUNT}' entry of {service} with your keyring tool.",
                debug={"service": service},
            ) from exc
        if not isinstance(accounts, list) or not all(isinstance(a, str) for a in accounts):
            raise BackendError(
                f"Account index of {service} has an unexpected shape.",
                debug={"service": service},
            )
        return accounts

    def _save_index(self, service: str, accounts: list[str]) -> None:
        try:
            if accounts:
                self.backend.set_password(service, INDEX_ACCOUNT, json.dumps(accounts))
            elif self.backend.get_password(service, INDEX_ACCOUNT) is not None:
                self.backend.delete_password(service, INDEX_ACCOUNT)
        except self._keyring.errors.KeyringError as exc:
            raise BackendError(
                f"Failed to update the account index of {service}: {exc}",
                debug={"service": service},
            ) from exc
