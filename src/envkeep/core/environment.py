"""Environment composition for ``exec``."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from envkeep.core.models import CredentialEntry


def compose(
    base_env: Mapping[str, str],
    entries: Iterable[CredentialEntry],
) -> dict[str, str]:
    """Overlay profile *entries* on a copy of *base_env*.

    Profile entries win on key collision.  Inherited variables are
    passed through untouched; nothing is filtered.

    >>> compose({"FOO": "old"}, [CredentialEntry("FOO", "new")])
    {'FOO': 'new'}
    """
    overlay = dict(base_env)
    for entry in entries:
        overlay[entry.key] = entry.value
    return overlay
