"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two proxies are exposed: :data:`console` writes diagnostics to stderr,
:data:`out` writes command results to stdout.
"""

from __future__ import annotations

import re
import sys
from typing import Any, TextIO

from envkeep.exceptions import EnvironmentError, missing_dependency

_MARKUP = re.compile(r"\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise missing_dependency("rich") from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr or stdout."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr, soft_wrap=True)


def strip_markup(text: str) -> str:
	"""Remove Rich style tags such as ``[bold red]`` from *text*."""
	return _MARKUP.sub("", text)


def escape(text: str) -> str:
	"""Escape user-supplied *text* so Rich prints it literally."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	@property
	def stream(self) -> TextIO:
		return sys.stderr if self._stderr else sys.stdout

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			plain = [strip_markup(obj) if isinstance(obj, str) else obj for obj in objects]
			print(*plain, file=self.stream)
			return
		rich_console.print(*objects)

	def write_raw(self, line: str) -> None:
		"""Write *line* verbatim, bypassing markup and wrapping."""
		self.stream.write(f"{line}\n")


console = _ConsoleProxy(stderr=True)
out = _ConsoleProxy(stderr=False)
