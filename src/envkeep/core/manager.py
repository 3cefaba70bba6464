"""Profile manager — orchestrates the per-command operations.

This service composes the conflict guard, the profile store, and the
environment composer.  It is responsible for:

* Enforcing insert-only creates and remove-if-present deletes.
* Running the bulk pre-flight check before any bulk write.
* Writing bulk entries one at a time and reporting each outcome.

Guarantees
----------
* Pure orchestration — no ``print()``, no prompting.
* Values are never logged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from envkeep.core.environment import compose
from envkeep.core.guard import assert_absent, assert_present
from envkeep.core.models import BatchReport, CredentialEntry
from envkeep.core.profile_store import ProfileStore
from envkeep.exceptions import BackendError

logger = logging.getLogger(__name__)

WriteCallback = Callable[[str, BackendError | None], None]


class ProfileManager:
    """Stateless service operating on one profile.

    Parameters
    ----------
    store:
        The :class:`ProfileStore` bound to the profile's namespace.
    """

    def __init__(self, store: ProfileStore) -> None:
        self._store: ProfileStore = store

    @property
    def namespace(self) -> str:
        return self._store.namespace

    # ------------------------------------------------------------------
    # Single-key mutations
    # ------------------------------------------------------------------

    def add(self, key: str, value: str) -> None:
        """Create *key*; raise :class:`ConflictError` if it exists."""
        assert_absent(self._store, [key])
        self._store.set(key, value)
        logger.debug("Stored %s in %s", key, self.namespace)

    def remove(self, key: str) -> None:
        """Delete *key*; raise :class:`NotFoundError` if it is absent."""
        assert_present(self._store, key)
        self._store.delete(key)
        logger.debug("Removed %s from %s", key, self.namespace)

    # ------------------------------------------------------------------
    # Read paths
    # ------------------------------------------------------------------

    def entries(self) -> list[CredentialEntry]:
        """Return every stored entry in backend order."""
        found = self._store.list()
        logger.debug("Read %d entries from %s", len(found), self.namespace)
        return found

    def environment(self, base_env: Mapping[str, str]) -> dict[str, str]:
        """Return *base_env* overlaid with the profile's entries."""
        return compose(base_env, self.entries())

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------

    def import_entries(
        self,
        entries: Sequence[CredentialEntry],
        *,
        on_result: WriteCallback | None = None,
    ) -> BatchReport:
        """Write *entries* after an all-or-nothing pre-flight check.

        Every key must be absent before the first write begins; a single
        conflict aborts the batch with nothing written.  Writes then run
        sequentially.  A failed write is reported through *on_result*
        and the loop continues; earlier writes are not rolled back.

        Parameters
        ----------
        entries:
            Entries in the order they should be written and reported.
        on_result:
            Optional callable invoked after each write with the key and
            ``None`` on success, or the :class:`BackendError` on failure.

        Raises
        ------
        ConflictError
            When any key already exists (nothing has been written).
        """
        assert_absent(self._store, [entry.key for entry in entries])

        written: list[str] = []
        failed: list[tuple[str, BackendError]] = []
        for entry in entries:
            try:
                self._store.set(entry.key, entry.value)
            except BackendError as exc:
                logger.debug("Write of %s to %s failed", entry.key, self.namespace)
                failed.append((entry.key, exc))
                if on_result is not None:
                    on_result(entry.key, exc)
                continue
            written.append(entry.key)
            if on_result is not None:
                on_result(entry.key, None)

        logger.debug(
            "Bulk import into %s: %d written, %d failed",
            self.namespace,
            len(written),
            len(failed),
        )
        return BatchReport(written=tuple(written), failed=tuple(failed))
