"""``.env`` text parsing backed by python-dotenv.

This module is the **only** place in the codebase that imports
``dotenv``.  Parsing follows python-dotenv's rules for quoting, comments,
``export`` prefixes and multi-line quoted values.  Variable expansion is
disabled: ``${OTHER}`` is stored literally.
"""

from __future__ import annotations

import io
from typing import Any

from envkeep.exceptions import ValidationError, missing_dependency


def _import_dotenv() -> Any:
    """Import python-dotenv lazily for bulk input parsing."""
    try:
        import dotenv
    except ModuleNotFoundError as exc:
        raise missing_dependency("python-dotenv") from exc
    return dotenv


def parse_dotenv(text: str) -> dict[str, str | None]:
    """Parse *text* into an insertion-ordered mapping.

    A bare ``KEY`` line maps to ``None``.  When a key repeats, the last
    assignment wins and keeps the position of the first.

    Raises
    ------
    ValidationError
        When python-dotenv cannot parse the text at all.
    """
    dotenv = _import_dotenv()
    try:
        return dict(dotenv.dotenv_values(stream=io.StringIO(text), interpolate=False))
    except Exception as exc:
        raise ValidationError(
            f"Could not parse .env input: {exc}",
        ) from exc
