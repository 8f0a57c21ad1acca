"""CLI console helpers built on Rich.

This module intentionally avoids module-level imports of Rich so
bootstrap paths (``--help``, ``--version``) remain functional even when
Rich is not installed.  All rendered output goes to stdout.
"""

from __future__ import annotations

import sys
from typing import Any

from revman_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, color: bool = True) -> Any:
	"""Create a Rich console instance targeting stdout.

	With ``color=False`` no ANSI sequences are emitted at all, including
	bold and other styles.
	"""
	console_class = _load_rich_console_class()
	return console_class(
		color_system="auto" if color else None,
		highlight=False,
		soft_wrap=True,
	)


class _ConsoleProxy:
	"""``print``-compatible proxy that honours the ``--no-color`` flag.

	A fresh Rich console is created per call so output always follows
	the current ``sys.stdout``.
	"""

	def __init__(self) -> None:
		self.color: bool = True

	def configure(self, *, color: bool) -> None:
		"""Set whether subsequent output may use color."""
		self.color = color

	def print(self, *objects: object, **kwargs: Any) -> None:
		"""Render *objects* through Rich."""
		get_rich_console(color=self.color).print(*objects, **kwargs)


console = _ConsoleProxy()


def get_text_class() -> type[Any]:
	"""Return ``rich.text.Text`` or raise ``EnvironmentError``."""
	try:
		from rich.text import Text
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Text


def write_plain(text: str) -> None:
	"""Write *text* to stdout exactly as given, without Rich rendering.

	Tabs and surrounding whitespace are preserved.  Raises
	``EnvironmentError`` when stdout cannot encode *text*.
	"""
	try:
		sys.stdout.write(text)
	except UnicodeEncodeError as exc:
		raise EnvironmentError(
			f"Standard output cannot encode the text ({exc.encoding})",
			hint="Set PYTHONIOENCODING=utf-8 or use a UTF-8 terminal.",
		) from exc
	sys.stdout.flush()
