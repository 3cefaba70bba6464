"""Storage namespace derivation.

The namespace string is the only handle the keyring has for "which
profile", so its format is a compatibility contract: changing it orphans
every credential stored under the old scheme.
"""

from __future__ import annotations

from envkeep.core.models import AppConfig

NAMESPACE_FORMAT: str = "{username}@{package_name}/{profile}"


def derive_namespace(username: str, package_name: str, profile: str) -> str:
    """Return the keyring service name for *profile*.

    >>> derive_namespace("alice", "envkeep", "work")
    'alice@envkeep/work'
    """
    return NAMESPACE_FORMAT.format(
        username=username,
        package_name=package_name,
        profile=profile,
    )


def namespace_for(config: AppConfig, profile: str) -> str:
    """Convenience wrapper taking the process :class:`AppConfig`."""
    return derive_namespace(config.username, config.package_name, profile)
