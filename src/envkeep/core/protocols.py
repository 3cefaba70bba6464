"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure and CLI adapters must
satisfy.  Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from envkeep.core.resolver import Question


class SecretBackend(Protocol):
    """Contract for secure-storage backends.

    Secrets are addressed by a *service* (the profile namespace) and an
    *account* (the variable name).  Each call is atomic on its own; no
    guarantee spans several calls.

    Implementations must map all backend-specific exceptions to
    :class:`~envkeep.exceptions.BackendError`.
    """

    def get(self, service: str, account: str) -> str | None:
        """Return the secret, or ``None`` when the account is absent."""
        ...  # pragma: no cover

    def list(self, service: str) -> list[tuple[str, str]]:
        """Return every ``(account, secret)`` pair stored under *service*.

        Ordering is backend-defined; callers must not assume a sort.
        """
        ...  # pragma: no cover

    def set(self, service: str, account: str, value: str) -> None:
        """Store *value* for *account*, replacing any previous secret."""
        ...  # pragma: no cover

    def delete(self, service: str, account: str) -> None:
        """Remove *account* from *service*."""
        ...  # pragma: no cover


class Prompter(Protocol):
    """Contract for the interactive question/answer subsystem."""

    def ask(self, questions: Sequence[Question]) -> Mapping[str, str]:
        """Ask *questions* in order and return answers keyed by name.

        Raises
        ------
        ValidationError
            When input is non-interactive and a question has no default
            satisfying its validator, or when the user cancels.
        """
        ...  # pragma: no cover


class BulkParser(Protocol):
    """Contract for ``.env``-style text parsing."""

    def __call__(self, text: str) -> Mapping[str, str | None]:
        """Parse *text* into an insertion-ordered mapping.

        A line carrying a bare ``KEY`` (no ``=``) maps to ``None``.
        """
        ...  # pragma: no cover
