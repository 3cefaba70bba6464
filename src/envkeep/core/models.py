"""Domain models for envkeep.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from envkeep.exceptions import BackendError


# ---------------------------------------------------------------------------
# Process-wide configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AppConfig:
    """Identity and package information, built once at process entry."""

    username: str
    """Login name of the user running envkeep."""

    package_name: str
    """Name of the tool, used as the middle part of every namespace."""


# ---------------------------------------------------------------------------
# Stored credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CredentialEntry:
    """One stored environment variable."""

    key: str
    value: str = field(repr=False)

    def as_line(self) -> str:
        """Render as a ``KEY=VALUE`` line (no trailing newline)."""
        return f"{self.key}={self.value}"


# ---------------------------------------------------------------------------
# Bulk import outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BatchReport:
    """Ordered outcome of a bulk write.

    Writes are not transactional: keys in :attr:`written` stay committed
    even when later keys end up in :attr:`failed`.
    """

    written: tuple[str, ...]
    failed: tuple[tuple[str, BackendError], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failed

    def __len__(self) -> int:
        return len(self.written) + len(self.failed)
