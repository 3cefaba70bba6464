"""Child-process spawning for ``exec``.

The child inherits stdin, stdout and stderr and receives the composed
environment wholesale.  envkeep waits for it and reports its status.

Rules
-----
* Spawn failures are re-raised as
  :class:`~envkeep.exceptions.SpawnError`.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence

from envkeep.exceptions import SpawnError

logger = logging.getLogger(__name__)

SIGNAL_EXIT_BASE: int = 128
"""Shell convention: a child killed by signal N exits with 128 + N."""


def run_with_env(command: Sequence[str], env: Mapping[str, str]) -> int:
    """Run *command* with *env* and return its exit status.

    Raises
    ------
    SpawnError
        When *command* is empty, not found, or cannot be executed.
    """
    if not command:
        raise SpawnError("No command given.", hint="Usage: exec <profile> -- <command> [args...]")

    program = command[0]
    logger.debug("Spawning %s with %d environment variables", program, len(env))
    try:
        completed = subprocess.run(list(command), env=dict(env), check=False)
    except FileNotFoundError as exc:
        raise SpawnError(
            f"{program}: command not found",
            debug={"command": list(command)},
        ) from exc
    except PermissionError as exc:
        raise SpawnError(
            f"{program}: permission denied",
            debug={"command": list(command)},
        ) from exc
    except OSError as exc:
        raise SpawnError(
            f"{program}: could not be started: {exc}",
            debug={"command": list(command)},
        ) from exc

    code = completed.returncode
    if code < 0:
        return SIGNAL_EXIT_BASE + (-code)
    return code
