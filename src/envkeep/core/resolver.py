"""Input resolution for mutating commands.

Each command resolves its arguments through one function that returns a
:class:`Resolution`: the answers already known plus the questions still
to ask.  Arguments that are missing or fail validation become questions
(with the rejected argument offered back as the default), so scripted
and interactive use share one validation path.

Rules
-----
* No prompting here — questions are answered by a
  :class:`~envkeep.core.protocols.Prompter` passed to :func:`complete`.
* Answers coming back from a prompter are re-validated; the UI layer is
  not trusted to enforce policy.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from envkeep.core.models import CredentialEntry
from envkeep.core.protocols import BulkParser, Prompter
from envkeep.core.validation import is_valid_key, is_valid_value
from envkeep.exceptions import EmptyInputError, ValidationError

_ASSIGNMENT = re.compile(r"(\w+)=(.*)", re.ASCII | re.DOTALL)

KEY_ERROR: str = "Keys may only contain letters, digits and underscores."
VALUE_ERROR: str = "Value must not be empty."


# ---------------------------------------------------------------------------
# Resolution types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Question:
    """One prompt to put to the user."""

    name: str
    message: str
    validate: Callable[[object], bool]
    error: str
    default: str | None = None


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving command arguments."""

    answers: Mapping[str, str] = field(default_factory=dict)
    questions: tuple[Question, ...] = ()

    @property
    def needs_prompt(self) -> bool:
        return bool(self.questions)


# ---------------------------------------------------------------------------
# Argument resolution
# ---------------------------------------------------------------------------

def split_assignment(key: str | None, value: str | None) -> tuple[str | None, str | None]:
    """Expand a ``KEY=VALUE`` first argument when no value was given.

    >>> split_assignment("TOKEN=abc=", None)
    ('TOKEN', 'abc=')
    """
    if value is None and key is not None:
        match = _ASSIGNMENT.fullmatch(key)
        if match is not None:
            return match.group(1), match.group(2)
    return key, value


def _key_question(default: str | None, message: str = "Key:") -> Question:
    return Question(
        name="key",
        message=message,
        validate=is_valid_key,
        error=KEY_ERROR,
        default=default,
    )


def resolve_set(key: str | None, value: str | None) -> Resolution:
    """Resolve the key and value for ``set``."""
    key, value = split_assignment(key, value)

    answers: dict[str, str] = {}
    questions: list[Question] = []

    if key is not None and is_valid_key(key):
        answers["key"] = key
    else:
        questions.append(_key_question(key))

    value_message = f"Value for {answers['key']}:" if "key" in answers else "Value:"
    if value is not None and is_valid_value(value):
        answers["value"] = value
    else:
        questions.append(
            Question(
                name="value",
                message=value_message,
                validate=is_valid_value,
                error=VALUE_ERROR,
                default=value,
            )
        )

    return Resolution(answers=answers, questions=tuple(questions))


def resolve_unset(key: str | None) -> Resolution:
    """Resolve the key for ``unset``."""
    if key is not None and is_valid_key(key):
        return Resolution(answers={"key": key})
    return Resolution(questions=(_key_question(key, "Key to remove:"),))


def complete(resolution: Resolution, prompter: Prompter) -> dict[str, str]:
    """Ask any outstanding questions and return the validated answers.

    Raises
    ------
    ValidationError
        When an answer from the prompter fails its question's validator.
    """
    answers = dict(resolution.answers)
    if not resolution.needs_prompt:
        return answers

    replies = prompter.ask(resolution.questions)
    for question in resolution.questions:
        reply = replies.get(question.name)
        if not question.validate(reply):
            raise ValidationError(
                f"Invalid {question.name}: {question.error}",
                debug={"question": question.name},
            )
        answers[question.name] = str(reply)
    return answers


# ---------------------------------------------------------------------------
# Bulk resolution
# ---------------------------------------------------------------------------

def resolve_bulk(text: str, parser: BulkParser) -> list[CredentialEntry]:
    """Parse ``.env`` *text* into entries, in input order.

    Raises
    ------
    EmptyInputError
        When *text* is blank or contains no assignments.
    ValidationError
        When a parsed key is invalid or its value is missing or empty.
    """
    if not text.strip():
        raise EmptyInputError(
            "stdin was empty",
            hint="Pipe KEY=VALUE lines in, e.g.: envkeep slurp <profile> < .env",
        )

    parsed = parser(text)
    if not parsed:
        raise EmptyInputError("stdin contained no KEY=VALUE assignments")

    entries: list[CredentialEntry] = []
    for line_no, (key, value) in enumerate(parsed.items(), start=1):
        if not is_valid_key(key):
            raise ValidationError(
                f"Invalid key {key!r}: {KEY_ERROR}",
                debug={"key": key, "position": line_no},
            )
        if value is None or not is_valid_value(value):
            raise ValidationError(
                f"Invalid value for {key}: {VALUE_ERROR}",
                debug={"key": key, "position": line_no},
            )
        entries.append(CredentialEntry(key=key, value=value))
    return entries
