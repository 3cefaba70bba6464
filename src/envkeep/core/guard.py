"""Conflict guard — existence preconditions for mutating commands.

Creates are inserts and deletes are remove-if-present, so a mutation
never silently overwrites a secret or silently does nothing.

The check and the subsequent write are separate backend calls; another
process can act in between.  The keyring offers no compare-and-swap, so
that window is accepted rather than closed.
"""

from __future__ import annotations

from collections.abc import Iterable

from envkeep.core.profile_store import ProfileStore
from envkeep.exceptions import ConflictError, NotFoundError


def assert_absent(store: ProfileStore, keys: Iterable[str]) -> None:
    """Raise :class:`ConflictError` for the first key already stored.

    Keys are checked in order and checking stops at the first hit.
    """
    for key in keys:
        if store.get(key) is not None:
            raise ConflictError(
                f"{key} exists",
                hint=f"Remove it first with: unset <profile> {key}",
                debug={"namespace": store.namespace, "key": key},
            )


def assert_present(store: ProfileStore, key: str) -> None:
    """Raise :class:`NotFoundError` when *key* is not stored."""
    if store.get(key) is None:
        raise NotFoundError(
            f"{key} does not exist",
            debug={"namespace": store.namespace, "key": key},
        )
