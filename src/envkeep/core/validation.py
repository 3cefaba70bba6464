"""Key and value validation predicates.

These predicates are shared by the argument path and the interactive
prompt path so the two can never disagree on what is acceptable.
"""

from __future__ import annotations

import re

from envkeep.exceptions import ValidationError

KEY_PATTERN: re.Pattern[str] = re.compile(r"\w+", re.ASCII)


def is_valid_key(candidate: object) -> bool:
    """Return ``True`` iff *candidate* fully matches ``^\\w+$``.

    ``\\w`` is ASCII-only: letters, digits and underscore.

    No length cap is imposed here; the backend may impose its own.
    Never raises.
    """
    if not isinstance(candidate, str):
        return False
    return KEY_PATTERN.fullmatch(candidate) is not None


def is_valid_value(candidate: object) -> bool:
    """Return ``True`` iff *candidate* is a non-empty string."""
    return isinstance(candidate, str) and len(candidate) > 0


def require_profile(profile: str) -> str:
    """Return *profile* unchanged, or raise for an empty name."""
    if not profile:
        raise ValidationError(
            "Profile name must not be empty.",
            hint="Pass a profile name such as 'default' or 'work'.",
        )
    return profile
