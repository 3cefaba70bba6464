"""Process identity lookup.

Builds the :class:`~envkeep.core.models.AppConfig` once at process entry.
Nothing downstream looks the user up again.
"""

from __future__ import annotations

import getpass

from envkeep.core.models import AppConfig
from envkeep.exceptions import EnvironmentError

PACKAGE_NAME: str = "envkeep"
"""Middle component of every namespace.  Changing it orphans stored data."""


def current_username() -> str:
    """Return the login name of the current user."""
    try:
        return getpass.getuser()
    except (KeyError, OSError) as exc:
        raise EnvironmentError(
            "Could not determine the current user name.",
            hint="Set the USER (or USERNAME on Windows) environment variable.",
        ) from exc


def load_config() -> AppConfig:
    """Return the process-wide configuration."""
    return AppConfig(username=current_username(), package_name=PACKAGE_NAME)
