"""Allow ``python -m envkeep`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m envkeep`` behaves identically to the ``envkeep``
console script.
"""

from __future__ import annotations

from envkeep.cli.app import cli

if __name__ == "__main__":
    cli()
