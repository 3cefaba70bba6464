"""CLI application entry point and command routing for envkeep.

This module is the **sole error boundary** for the entire application.
It catches :class:`~envkeep.exceptions.EnvkeepError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* Command results go to stdout (:data:`~envkeep.cli.console.out`);
  errors, prompts and diagnostics go to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from envkeep.cli import exit_codes
from envkeep.cli.console import console, escape, out
from envkeep.core.manager import ProfileManager
from envkeep.core.models import AppConfig
from envkeep.core.protocols import Prompter, SecretBackend
from envkeep.exceptions import BackendError, EmptyInputError, EnvkeepError, ValidationError
from envkeep.version import __version__

logger = logging.getLogger(__name__)

PROG: str = "envkeep"

SET_ALIASES: tuple[str, ...] = ("add",)
UNSET_ALIASES: tuple[str, ...] = ("del", "delete", "remove", "erase")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``envkeep exec <profile> -- <command> [args...]``
    * ``envkeep set <profile> [key] [value]``
    * ``envkeep unset <profile> [key]``
    * ``envkeep dump <profile>``
    * ``envkeep slurp <profile>``
    * ``envkeep doctor``
    * ``envkeep --version``
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Keep environment-variable profiles in the OS keyring.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log backend activity (never secret values) to stderr.",
    )

    commands = parser.add_subparsers(dest="command", metavar="<command>")

    exec_parser = commands.add_parser(
        "exec",
        help="Run a command with the profile's variables in its environment.",
    )
    exec_parser.add_argument("profile", help="Profile name.")
    exec_parser.add_argument(
        "argv",
        nargs=argparse.REMAINDER,
        metavar="-- command [args ...]",
        help="Command to run, optionally after a '--' separator.",
    )
    exec_parser.set_defaults(handler=_handle_exec)

    set_parser = commands.add_parser(
        "set",
        aliases=list(SET_ALIASES),
        help="Add a variable to the profile (prompts for missing parts).",
    )
    set_parser.add_argument("profile", help="Profile name.")
    set_parser.add_argument("key", nargs="?", default=None, help="Variable name, or KEY=VALUE.")
    set_parser.add_argument("value", nargs="?", default=None, help="Variable value.")
    set_parser.set_defaults(handler=_handle_set)

    unset_parser = commands.add_parser(
        "unset",
        aliases=list(UNSET_ALIASES),
        help="Remove a variable from the profile.",
    )
    unset_parser.add_argument("profile", help="Profile name.")
    unset_parser.add_argument("key", nargs="?", default=None, help="Variable name.")
    unset_parser.set_defaults(handler=_handle_unset)

    dump_parser = commands.add_parser(
        "dump",
        help="Print the profile as KEY=VALUE lines.",
    )
    dump_parser.add_argument("profile", help="Profile name.")
    dump_parser.set_defaults(handler=_handle_dump)

    slurp_parser = commands.add_parser(
        "slurp",
        help="Add every KEY=VALUE line read from stdin to the profile.",
    )
    slurp_parser.add_argument("profile", help="Profile name.")
    slurp_parser.set_defaults(handler=_handle_slurp)

    commands.add_parser(
        "doctor",
        help="Check the keyring backend and installed dependencies.",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the ``envkeep`` logger tree."""
    root = logging.getLogger("envkeep")
    for handler in list(root.handlers):
        root.removeHandler(handler)

    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
        )

    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


# ---------------------------------------------------------------------------
# Collaborator factories
# ---------------------------------------------------------------------------

def _make_backend() -> SecretBackend:
    """Return the secret backend used by every command."""
    from envkeep.infra.keyring_backend import KeyringSecretBackend

    return KeyringSecretBackend()


def _make_prompter() -> Prompter:
    """Return the prompter used when arguments are missing or invalid."""
    from envkeep.cli.prompts import QuestionaryPrompter

    return QuestionaryPrompter()


def _manager_for(config: AppConfig, profile: str) -> ProfileManager:
    """Build the manager for *profile* on top of the real backend."""
    from envkeep.core.naming import namespace_for
    from envkeep.core.profile_store import ProfileStore
    from envkeep.core.validation import require_profile

    namespace = namespace_for(config, require_profile(profile))
    logger.debug("Profile %s resolves to namespace %s", profile, namespace)
    return ProfileManager(ProfileStore(_make_backend(), namespace))


def _read_stdin() -> str:
    """Read all of stdin; a terminal counts as empty input."""
    if sys.stdin is None or sys.stdin.isatty():
        raise EmptyInputError(
            "stdin was empty",
            hint=f"Pipe KEY=VALUE lines in, e.g.: {PROG} slurp <profile> < .env",
        )
    return sys.stdin.read()


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_exec(args: argparse.Namespace, config: AppConfig) -> int:
    """Run a child process with the profile overlaid on our environment."""
    from envkeep.infra.process import run_with_env

    command: list[str] = list(args.argv)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        raise ValidationError(
            "No command given.",
            hint=f"Usage: {PROG} exec <profile> -- <command> [args...]",
        )

    manager = _manager_for(config, args.profile)
    env = manager.environment(os.environ)
    return run_with_env(command, env)


def _handle_set(args: argparse.Namespace, config: AppConfig) -> int:
    """Add one variable, prompting for whatever is missing or invalid."""
    from envkeep.cli.prompts import print_header
    from envkeep.core.resolver import complete, resolve_set

    manager = _manager_for(config, args.profile)
    resolution = resolve_set(args.key, args.value)
    if resolution.needs_prompt:
        print_header(args.profile, "set")
    answers = complete(resolution, _make_prompter())

    manager.add(answers["key"], answers["value"])
    out.print(f"[bold]{answers['key']}[/bold] [green]set[/green]")
    return exit_codes.SUCCESS


def _handle_unset(args: argparse.Namespace, config: AppConfig) -> int:
    """Remove one variable, prompting for the key when needed."""
    from envkeep.cli.prompts import print_header
    from envkeep.core.resolver import complete, resolve_unset

    manager = _manager_for(config, args.profile)
    resolution = resolve_unset(args.key)
    if resolution.needs_prompt:
        print_header(args.profile, "unset")
    answers = complete(resolution, _make_prompter())

    manager.remove(answers["key"])
    out.print(f"[bold]{answers['key']}[/bold] [green]unset[/green]")
    return exit_codes.SUCCESS


def _handle_dump(args: argparse.Namespace, config: AppConfig) -> int:
    """Print every entry as a raw ``KEY=VALUE`` line."""
    manager = _manager_for(config, args.profile)
    for entry in manager.entries():
        out.write_raw(entry.as_line())
    return exit_codes.SUCCESS


def _report_write(key: str, error: BackendError | None) -> None:
    if error is None:
        out.print(f"[bold]{key}[/bold] [green]set[/green]")
    else:
        console.print(f"[bold red]{error.name}[/bold red] {escape(str(error))}")


def _handle_slurp(args: argparse.Namespace, config: AppConfig) -> int:
    """Import ``.env`` text from stdin after an all-keys-absent pre-flight."""
    from envkeep.core.resolver import resolve_bulk
    from envkeep.infra.dotenv_parser import parse_dotenv

    manager = _manager_for(config, args.profile)
    entries = resolve_bulk(_read_stdin(), parse_dotenv)
    report = manager.import_entries(entries, on_result=_report_write)

    if not report.ok:
        console.print(
            f"[yellow]{len(report.written)} of {len(report)} keys written; "
            "keys written before a failure were kept.[/yellow]"
        )
        return exit_codes.GENERAL_ERROR
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from envkeep.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the envkeep CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor()

    from envkeep.infra.identity import load_config

    config = load_config()
    return args.handler(args, config)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except EnvkeepError as exc:
        console.print(f"[bold red]{exc.name}[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        if exc.debug:
            logger.debug("Error context: %s", dict(exc.debug))
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
