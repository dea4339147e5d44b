"""Colored console output via rich."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


class RichConsole:
    """Print user-facing lines in one color per presentation class.

    Implements the ``ConsoleOutput`` protocol. Messages are printed as plain
    ``Text`` so bracketed labels such as ``[Passed]`` are not read as markup.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(highlight=False)

    def _print(self, msg: str, style: str) -> None:
        self._console.print(Text(msg, style=style))

    def info(self, msg: str) -> None:
        self._print(msg, "cyan")

    def success(self, msg: str) -> None:
        self._print(msg, "green")

    def err(self, msg: str) -> None:
        self._print(msg, "red")

    def warning(self, msg: str) -> None:
        self._print(msg, "bright_yellow")

    def canceled(self, msg: str) -> None:
        self._print(msg, "grey50")
