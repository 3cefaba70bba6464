"""End-to-end tests for the envkeep commands (cli/app.py).

Every test runs ``main()`` against the in-memory keyring as user
``alice``.  Prompting is mocked or forced non-interactive; ``exec``
spawns ``sys.executable`` only.
"""

from __future__ import annotations

import io
import sys
from typing import Any
from unittest.mock import MagicMock

import pytest

from envkeep.cli import app as app_module
from envkeep.cli import exit_codes
from envkeep.cli.app import main
from envkeep.cli.prompts import QuestionaryPrompter
from envkeep.exceptions import (
    BackendError,
    ConflictError,
    EmptyInputError,
    NotFoundError,
    ValidationError,
)
from envkeep.infra.keyring_backend import KeyringSecretBackend

pytestmark = pytest.mark.usefixtures("cli_backend")


def _stdin(monkeypatch: pytest.MonkeyPatch, text: str) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


def _prompter(monkeypatch: pytest.MonkeyPatch, prompter: Any) -> None:
    monkeypatch.setattr(app_module, "_make_prompter", lambda: prompter)


def _dump(capsys: pytest.CaptureFixture[str], profile: str = "work") -> str:
    capsys.readouterr()
    assert main(["dump", profile]) == exit_codes.SUCCESS
    return capsys.readouterr().out


# ---------------------------------------------------------------------------
# set / unset / dump
# ---------------------------------------------------------------------------

class TestSetUnsetDump:
    def test_set_then_dump(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["set", "work", "FOO", "bar"]) == exit_codes.SUCCESS
        assert "FOO set" in capsys.readouterr().out
        assert _dump(capsys) == "FOO=bar\n"

    def test_entries_live_under_user_namespace(self, memory_keyring: Any) -> None:
        main(["set", "work", "FOO", "bar"])
        assert memory_keyring.secrets[("alice@envkeep/work", "FOO")] == "bar"

    def test_profiles_are_isolated(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["set", "work", "FOO", "bar"])
        assert _dump(capsys, "home") == ""

    def test_assignment_shorthand(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["add", "work", "TOKEN=a=b"]) == exit_codes.SUCCESS
        assert _dump(capsys) == "TOKEN=a=b\n"

    def test_dump_of_empty_profile_prints_nothing(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _dump(capsys) == ""

    def test_dump_prints_values_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["set", "work", "STYLE", "[bold]x[/bold] y"])
        assert _dump(capsys) == "STYLE=[bold]x[/bold] y\n"

    def test_second_set_of_same_key_conflicts(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["set", "work", "FOO", "bar"])
        with pytest.raises(ConflictError, match="FOO exists"):
            main(["set", "work", "FOO", "baz"])
        assert _dump(capsys) == "FOO=bar\n"

    def test_unset_removes_key(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["set", "work", "A", "1"])
        main(["set", "work", "B", "2"])
        assert main(["unset", "work", "A"]) == exit_codes.SUCCESS
        assert "A unset" in capsys.readouterr().out
        assert _dump(capsys) == "B=2\n"

    def test_unset_of_missing_key(self) -> None:
        with pytest.raises(NotFoundError, match="NOPE does not exist"):
            main(["del", "work", "NOPE"])

    def test_empty_profile_name_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Profile name"):
            main(["dump", ""])

    def test_verbose_flag_is_accepted(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-v", "set", "work", "A", "1"]) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "Wrote A" in err
        assert "=1" not in err


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class TestPrompting:
    def test_missing_value_is_prompted_with_header(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        prompter = MagicMock()
        prompter.ask.return_value = {"value": "typed"}
        _prompter(monkeypatch, prompter)

        assert main(["set", "work", "FOO"]) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "profile: work" in err
        assert "command: set" in err
        assert _dump(capsys) == "FOO=typed\n"

    def test_fully_specified_set_prints_no_header(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        prompter = MagicMock()
        _prompter(monkeypatch, prompter)

        main(["set", "work", "FOO", "bar"])
        assert "profile:" not in capsys.readouterr().err
        prompter.ask.assert_not_called()

    def test_invalid_key_without_terminal_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _prompter(monkeypatch, QuestionaryPrompter(interactive=False))
        with pytest.raises(ValidationError, match="Missing or invalid key"):
            main(["set", "work", "my-key", "1"])

    def test_unset_without_key_and_terminal_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _prompter(monkeypatch, QuestionaryPrompter(interactive=False))
        with pytest.raises(ValidationError):
            main(["unset", "work"])


# ---------------------------------------------------------------------------
# slurp
# ---------------------------------------------------------------------------

class TestSlurp:
    def test_imports_in_input_order(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _stdin(monkeypatch, "# exported\nB=2\nA=1\n")
        assert main(["slurp", "work"]) == exit_codes.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["B set", "A set"]
        assert _dump(capsys) == "B=2\nA=1\n"

    def test_dump_output_round_trips(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["set", "work", "A", "1"])
        main(["set", "work", "B", "two words"])
        dumped = _dump(capsys)

        _stdin(monkeypatch, dumped)
        assert main(["slurp", "copy"]) == exit_codes.SUCCESS
        assert _dump(capsys, "copy") == dumped

    def test_replay_conflicts_without_writing(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _stdin(monkeypatch, "A=1\nB=2\n")
        main(["slurp", "work"])
        capsys.readouterr()

        _stdin(monkeypatch, "C=3\nA=1\n")
        with pytest.raises(ConflictError, match="A exists"):
            main(["slurp", "work"])
        assert capsys.readouterr().out == ""
        assert _dump(capsys) == "A=1\nB=2\n"

    def test_empty_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _stdin(monkeypatch, "")
        with pytest.raises(EmptyInputError, match="stdin was empty"):
            main(["slurp", "work"])

    def test_terminal_stdin_counts_as_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake_stdin = MagicMock()
        fake_stdin.isatty.return_value = True
        monkeypatch.setattr("sys.stdin", fake_stdin)
        with pytest.raises(EmptyInputError):
            main(["slurp", "work"])
        fake_stdin.read.assert_not_called()

    def test_invalid_line_aborts_before_writing(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _stdin(monkeypatch, "A=1\nB=\n")
        with pytest.raises(ValidationError, match="Invalid value for B"):
            main(["slurp", "work"])
        assert _dump(capsys) == ""

    def test_write_failure_keeps_earlier_keys_and_exits_one(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        cli_backend: KeyringSecretBackend,
    ) -> None:
        real_set = cli_backend.set

        def flaky_set(service: str, account: str, value: str) -> None:
            if account == "B":
                raise BackendError("keyring locked")
            real_set(service, account, value)

        monkeypatch.setattr(cli_backend, "set", flaky_set)
        _stdin(monkeypatch, "A=1\nB=2\nC=3\n")

        assert main(["slurp", "work"]) == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["A set", "C set"]
        assert "BackendError" in captured.err
        assert "2 of 3 keys written" in captured.err
        assert _dump(capsys) == "A=1\nC=3\n"


# ---------------------------------------------------------------------------
# exec
# ---------------------------------------------------------------------------

class TestExec:
    def test_child_sees_profile_variables(self) -> None:
        main(["set", "work", "ENVKEEP_PROBE", "bar"])
        code = main([
            "exec", "work", "--", sys.executable, "-c",
            "import os, sys; sys.exit(0 if os.environ.get('ENVKEEP_PROBE') == 'bar' else 3)",
        ])
        assert code == exit_codes.SUCCESS

    def test_child_exit_code_is_forwarded(self) -> None:
        code = main(["exec", "work", "--", sys.executable, "-c", "import sys; sys.exit(7)"])
        assert code == 7

    def test_separator_is_optional(self) -> None:
        code = main(["exec", "work", sys.executable, "-c", "pass"])
        assert code == exit_codes.SUCCESS

    @pytest.mark.parametrize("argv", [["exec", "work"], ["exec", "work", "--"]])
    def test_missing_command_is_rejected(self, argv: list[str]) -> None:
        with pytest.raises(ValidationError, match="No command given"):
            main(argv)
