"""Custom exception hierarchy for envkeep.

All exceptions that cross layer boundaries must inherit from
:class:`EnvkeepError`.  Raw third-party exceptions (e.g. from keyring or
subprocess) must NEVER propagate beyond the infrastructure layer — they
must be caught and re-raised as a typed subclass defined here.

The hierarchy is deliberately flat: each subclass only sets its
:class:`ErrorKind` tag, which the CLI renders as the error's display
name.

Hierarchy
---------
EnvkeepError
├── ValidationError
├── ConflictError
├── NotFoundError
├── EmptyInputError
├── BackendError
├── SpawnError
└── EnvironmentError
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Tag identifying which failure an :class:`EnvkeepError` represents."""

    GENERAL = "Error"
    VALIDATION = "ValidationError"
    CONFLICT = "ConflictError"
    NOT_FOUND = "NotFoundError"
    EMPTY_INPUT = "EmptyInputError"
    BACKEND = "BackendError"
    SPAWN = "SpawnError"
    ENVIRONMENT = "EnvironmentError"


class EnvkeepError(Exception):
    """Base exception for all envkeep errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.GENERAL

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        debug: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""
        self.debug: Mapping[str, Any] | None = debug
        """Optional structured context, shown only in verbose mode.

        Must never contain secret values.
        """

    @property
    def name(self) -> str:
        """Display name rendered in front of the message."""
        return self.kind.value


# --- Input -----------------------------------------------------------------

class ValidationError(EnvkeepError):
    """Raised when a key, value, or profile name has an invalid shape."""

    kind = ErrorKind.VALIDATION


class EmptyInputError(EnvkeepError):
    """Raised when bulk input on stdin is missing or contains nothing."""

    kind = ErrorKind.EMPTY_INPUT


# --- Conflict policy -------------------------------------------------------

class ConflictError(EnvkeepError):
    """Raised when creating a key that already exists."""

    kind = ErrorKind.CONFLICT


class NotFoundError(EnvkeepError):
    """Raised when deleting a key that does not exist."""

    kind = ErrorKind.NOT_FOUND


# --- Collaborators ---------------------------------------------------------

class BackendError(EnvkeepError):
    """Raised when the secure-storage backend reports a failure."""

    kind = ErrorKind.BACKEND


class SpawnError(EnvkeepError):
    """Raised when the child process cannot be launched."""

    kind = ErrorKind.SPAWN


class EnvironmentError(EnvkeepError):
    """Raised when a required runtime dependency is not available."""

    kind = ErrorKind.ENVIRONMENT


def missing_dependency(package: str, *, import_name: str | None = None) -> EnvironmentError:
    """Build the error raised when a lazily imported library is missing."""
    shown = import_name or package
    return EnvironmentError(
        f"{shown} is not installed. Install with: pip install {package}",
    )
