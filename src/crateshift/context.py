"""RenameContext — bundles resolved settings with the status shell.

Passed explicitly to every operation that reports status, instead of a
module-level output handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import RenameSettings
    from .shell import Shell


@dataclass
class RenameContext:
    """Runtime context for a single crateshift run."""

    settings: RenameSettings
    shell: Shell


def create_context(settings: RenameSettings) -> RenameContext:
    """Build a RenameContext whose shell honours the settings' output flags."""
    from .shell import Shell

    return RenameContext(
        settings=settings,
        shell=Shell(color=settings.color, quiet=settings.quiet),
    )
