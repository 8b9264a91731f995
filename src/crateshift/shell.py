"""Status output for the terminal.

Prints cargo-style status lines ("   Renaming foo -> bar") to stderr through
a rich Console. This is advisory output; failures to write propagate.
"""

from __future__ import annotations

import sys
from typing import TextIO

from rich.console import Console
from rich.text import Text

_CATEGORY_WIDTH = 12


class Shell:
    """Write-only status sink taking (category, message) pairs."""

    def __init__(
        self,
        file: TextIO | None = None,
        *,
        color: bool = True,
        quiet: bool = False,
    ) -> None:
        self.quiet = quiet
        self.console = Console(
            file=file if file is not None else sys.stderr,
            color_system="auto" if color else None,
            highlight=False,
            soft_wrap=True,
        )

    def status(self, category: str, message: object) -> None:
        """Print one status line. Category is right-aligned, like cargo."""
        if self.quiet:
            return
        line = Text()
        line.append(category.rjust(_CATEGORY_WIDTH), style="bold green")
        line.append(" ")
        line.append(str(message))
        self.console.print(line)

    def error(self, message: object) -> None:
        """Print an error line. Never suppressed by quiet."""
        line = Text()
        line.append("error", style="bold red")
        line.append(f": {message}")
        self.console.print(line)
