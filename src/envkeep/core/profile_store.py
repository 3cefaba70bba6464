"""Profile store facade — the single point of contact with the backend.

A :class:`ProfileStore` is bound to one namespace and delegates to a
:class:`~envkeep.core.protocols.SecretBackend` injected at construction
time.  It is responsible for:

* Scoping every call to its namespace.
* Converting backend pairs into :class:`CredentialEntry` values.
* Ensuring only :class:`~envkeep.exceptions.EnvkeepError` subclasses
  escape.

Guarantees
----------
* No retries — each call completes or surfaces the backend's failure.
* No sorting — :meth:`list` keeps backend order.
* No keyring import.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from envkeep.core.models import CredentialEntry
from envkeep.core.protocols import SecretBackend
from envkeep.exceptions import BackendError, EnvkeepError

_T = TypeVar("_T")


class ProfileStore:
    """Namespace-scoped view of a secret backend.

    Parameters
    ----------
    backend:
        Any object satisfying the :class:`SecretBackend` protocol.
    namespace:
        The service string derived by :mod:`envkeep.core.naming`.
    """

    def __init__(self, backend: SecretBackend, namespace: str) -> None:
        self._backend: SecretBackend = backend
        self._namespace: str = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        """Return the stored value for *key*, or ``None``."""
        return self._call("read", key, lambda: self._backend.get(self._namespace, key))

    def list(self) -> list[CredentialEntry]:
        """Return every entry in the namespace, in backend order."""
        pairs = self._call("list", None, lambda: self._backend.list(self._namespace))
        return [CredentialEntry(key=account, value=secret) for account, secret in pairs]

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*."""
        self._call("write", key, lambda: self._backend.set(self._namespace, key, value))

    def delete(self, key: str) -> None:
        """Remove *key* from the namespace."""
        self._call("delete", key, lambda: self._backend.delete(self._namespace, key))

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    def _call(self, action: str, key: str | None, operation: Callable[[], _T]) -> _T:
        try:
            return operation()
        except EnvkeepError:
            # Already one of ours; propagate unchanged.
            raise
        except Exception as exc:
            target = f"'{key}' in {self._namespace}" if key else self._namespace
            raise BackendError(
                f"Unexpected backend error during {action} of {target}: {exc}",
                debug={"namespace": self._namespace, "key": key, "action": action},
            ) from exc
