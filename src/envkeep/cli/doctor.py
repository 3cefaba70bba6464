"""``envkeep doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies envkeep's requirements:
the Python version, the third-party libraries, and a usable keyring
backend.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import platform
import sys

from envkeep.cli import exit_codes
from envkeep.cli.console import console
from envkeep.exceptions import EnvkeepError
from envkeep.version import __version__

OK = "[green]OK[/green]"
FAIL = "[red]FAIL[/red]"

# (distribution name, import name)
LIBRARIES: tuple[tuple[str, str], ...] = (
    ("keyring", "keyring"),
    ("python-dotenv", "dotenv"),
    ("questionary", "questionary"),
    ("rich", "rich"),
)

FAIL_BACKEND_MODULE = "keyring.backends.fail"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _library_check(distribution: str, import_name: str) -> tuple[str, str, str]:
    """Return (label, value, status) for one third-party library."""
    try:
        importlib.import_module(import_name)
    except ImportError:
        return distribution, "NOT INSTALLED", FAIL

    try:
        return distribution, importlib.metadata.version(distribution), OK
    except importlib.metadata.PackageNotFoundError:
        return distribution, "unknown", OK


def _keyring_backend_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the active keyring backend."""
    try:
        from envkeep.infra.keyring_backend import KeyringSecretBackend

        description = KeyringSecretBackend().describe()
    except EnvkeepError as exc:
        return "backend", str(exc), FAIL

    if description.startswith(FAIL_BACKEND_MODULE):
        return "backend", "no usable keyring backend", FAIL
    return "backend", description, OK


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    release = platform.release()
    machine = platform.machine()
    value = f"{system_display} {release} ({machine})"
    return "OS", value, OK


def _envkeep_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the envkeep version row."""
    return "envkeep", __version__, OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nenvkeep doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def collect_checks() -> list[tuple[str, str, str]]:
    """Run every diagnostic and return the rows in display order."""
    checks = [
        _envkeep_version_check(),
        _python_version_check(),
    ]
    checks.extend(_library_check(dist, name) for dist, name in LIBRARIES)
    checks.append(_keyring_backend_check())
    checks.append(_os_check())
    return checks


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all checks pass,
        :data:`exit_codes.GENERAL_ERROR` if any check fails.
    """
    checks = collect_checks()
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
    else:
        table = Table(
            title="envkeep doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
