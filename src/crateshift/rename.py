"""Rename workspace packages and follow the rename through every manifest.

Two passes over the deep member set:
  1. Selection: each package accepted by ``predicate`` is offered to
     ``mapper``; a returned name is written to its own ``[package] name``.
  2. Propagation: every local (path) dependency entry, in every member's
     default and target-specific dependency tables, that is keyed by a
     renamed package's old name gets ``package = "<new name>"``.

Pass 2 only runs when pass 1 renamed something.

Key functions: check_for_update(), rename().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tomlkit import TOMLDocument

from .manifest.deps import DependencyAction, DependencyEntry, count_dependency_updates
from .manifest.edit import edit_each
from .workspace.members import Package, Workspace, members_deep

if TYPE_CHECKING:
    from .context import RenameContext

logger = logging.getLogger(__name__)

Predicate = Callable[[Package], bool]
Mapper = Callable[[Package], str | None]


def check_for_update(
    name: str, entry: DependencyEntry, updates: dict[str, str]
) -> DependencyAction:
    """Point ``entry`` at the new name if it is a local dep on a renamed package."""
    new_name = updates.get(name)
    if new_name is None:
        return DependencyAction.UNTOUCHED

    # a registry or git dependency sharing the name is a different package
    if not entry.has_local_path():
        return DependencyAction.UNTOUCHED

    logger.debug("Dependency %s: %s -> %s", entry.key, name, new_name)
    entry.set_package(new_name)
    return DependencyAction.MUTATED


def _summary(count: int) -> str:
    if count == 0:
        return "No dependency updates"
    if count == 1:
        return "One dependency updated"
    return f"{count} dependencies updated"


def rename(
    ctx: RenameContext,
    workspace: Workspace,
    predicate: Predicate,
    mapper: Mapper,
) -> dict[str, str]:
    """Rename every package picked by ``predicate`` to ``mapper``'s result.

    Args:
        ctx: Run context; status lines go to ``ctx.shell``.
        workspace: The workspace to edit.
        predicate: Selects rename candidates.
        mapper: Returns the new name for a candidate, or None to skip it.

    Returns:
        The applied old name -> new name mapping (empty if nothing changed).

    Raises:
        OSError, ValueError: On any manifest read, parse, or write failure.
            Manifests already written stay written.
    """
    shell = ctx.shell

    def _rename_package(package: Package, doc: TOMLDocument) -> tuple[str, str] | None:
        new_name = mapper(package)
        if new_name is None:
            return None
        shell.status("Renaming", f"{package.name} -> {new_name}")
        doc["package"]["name"] = new_name
        return package.name, new_name

    candidates = [p for p in members_deep(workspace) if predicate(p)]
    renamed = edit_each(candidates, _rename_package)
    updates = dict(pair for pair in renamed if pair is not None)

    if not updates:
        shell.status("Done", "No changed applied")
        return updates

    logger.info("Renamed %d package(s): %s", len(updates), updates)
    shell.status("Updating", "Dependency tree")

    def _update_dependencies(package: Package, doc: TOMLDocument) -> int:
        shell.status("Updating", package.name)
        count = count_dependency_updates(
            doc, lambda name, entry: check_for_update(name, entry, updates)
        )
        shell.status("Done", _summary(count))
        return count

    edit_each(members_deep(workspace), _update_dependencies)
    return updates
