"""Interactive prompting for the CLI layer.

This module is responsible for:

* Asking the :class:`~envkeep.core.resolver.Question` objects produced by
  the resolver, via questionary.
* Answering from defaults when stdin is not a terminal.
* Printing the short ``profile`` / ``command`` header shown before a
  prompt.

No business logic lives here — answers are re-validated by
:func:`envkeep.core.resolver.complete`.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

from envkeep.cli.console import console, escape
from envkeep.core.resolver import Question
from envkeep.exceptions import ValidationError, missing_dependency


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompting."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise missing_dependency("questionary") from exc
    return questionary


def _validator(question: Question) -> Callable[[str], bool | str]:
    """Adapt a boolean predicate to questionary's ``True`` / message form."""

    def validate(text: str) -> bool | str:
        return True if question.validate(text) else question.error

    return validate


def print_header(profile: str, command: str) -> None:
    """Show which profile and command a prompt belongs to."""
    console.print(f"[bold]profile[/bold]: [blue]{escape(profile)}[/blue]")
    console.print(f"[bold]command[/bold]: [blue]{command}[/blue]")


class QuestionaryPrompter:
    """Concrete :class:`~envkeep.core.protocols.Prompter` using questionary.

    Parameters
    ----------
    interactive:
        Force interactive (``True``) or default-only (``False``) mode.
        When ``None`` (default), interactive mode is used iff stdin is
        a terminal.
    """

    def __init__(self, *, interactive: bool | None = None) -> None:
        self._interactive = interactive

    @property
    def interactive(self) -> bool:
        if self._interactive is not None:
            return self._interactive
        return sys.stdin.isatty()

    def ask(self, questions: Sequence[Question]) -> dict[str, str]:
        """Ask *questions* in order and return the answers by name.

        Raises
        ------
        ValidationError
            When a question cannot be answered: no usable default in
            non-interactive mode, or the user cancelled the prompt.
        """
        if not self.interactive:
            return self._answer_from_defaults(questions)

        questionary = _import_questionary()
        answers: dict[str, str] = {}
        for question in questions:
            prompt = questionary.password if question.name == "value" else questionary.text
            reply: str | None = prompt(
                question.message,
                default=question.default or "",
                validate=_validator(question),
            ).ask()  # Returns None on Ctrl+C

            if reply is None:
                raise ValidationError(
                    f"No {question.name} entered.",
                    hint="Type a value and press Enter, or pass it as an argument.",
                )
            answers[question.name] = reply
        return answers

    @staticmethod
    def _answer_from_defaults(questions: Sequence[Question]) -> dict[str, str]:
        answers: dict[str, str] = {}
        for question in questions:
            if question.default is None or not question.validate(question.default):
                raise ValidationError(
                    f"Missing or invalid {question.name}: {question.error}",
                    hint="stdin is not a terminal, so envkeep cannot prompt for it.",
                )
            answers[question.name] = question.default
        return answers
