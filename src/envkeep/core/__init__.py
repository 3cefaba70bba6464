"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, keyring, or process I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from envkeep.core.environment import compose
from envkeep.core.guard import assert_absent, assert_present
from envkeep.core.manager import ProfileManager
from envkeep.core.models import AppConfig, BatchReport, CredentialEntry
from envkeep.core.naming import derive_namespace, namespace_for
from envkeep.core.profile_store import ProfileStore
from envkeep.core.protocols import BulkParser, Prompter, SecretBackend
from envkeep.core.resolver import (
    Question,
    Resolution,
    complete,
    resolve_bulk,
    resolve_set,
    resolve_unset,
    split_assignment,
)
from envkeep.core.validation import is_valid_key, is_valid_value

__all__: list[str] = [
    "AppConfig",
    "BatchReport",
    "BulkParser",
    "CredentialEntry",
    "ProfileManager",
    "ProfileStore",
    "Prompter",
    "Question",
    "Resolution",
    "SecretBackend",
    "assert_absent",
    "assert_present",
    "complete",
    "compose",
    "derive_namespace",
    "is_valid_key",
    "is_valid_value",
    "namespace_for",
    "resolve_bulk",
    "resolve_set",
    "resolve_unset",
    "split_assignment",
]
