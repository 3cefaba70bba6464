"""Infrastructure layer — external system integration.

This layer wraps all interaction with keyring, python-dotenv, and the
operating system.  Every raw third-party exception must be caught here
and re-raised as a :class:`~envkeep.exceptions.EnvkeepError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Third-party libraries are imported lazily, inside the adapters.
"""

from envkeep.infra.dotenv_parser import parse_dotenv
from envkeep.infra.identity import PACKAGE_NAME, current_username, load_config
from envkeep.infra.keyring_backend import INDEX_ACCOUNT, KeyringSecretBackend
from envkeep.infra.process import run_with_env

__all__: list[str] = [
    "INDEX_ACCOUNT",
    "KeyringSecretBackend",
    "PACKAGE_NAME",
    "current_username",
    "load_config",
    "parse_dotenv",
    "run_with_env",
]
