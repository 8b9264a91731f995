"""Dependency entries of a manifest document, and walkers that visit them.

A dependency can be written two ways in Cargo.toml:

    foo = { path = "../foo", version = "0.1" }      # inline table

    [dependencies.foo]                             # table
    path = "../foo"
    version = "0.1"

Both are wrapped in a DependencyEntry exposing the same capabilities
(has_local_path, package, set_package). Plain version strings
(``foo = "0.1"``) are never local and are not wrapped.

Key classes: DependencyAction, DependencyEntry, InlineDependency, TableDependency.
Key functions: edit_each_dep(), count_dependency_updates().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from enum import Enum
from typing import Any, Callable

from tomlkit.items import InlineTable, Whitespace

logger = logging.getLogger(__name__)

# Top-level (and per-target) tables holding dependency declarations
DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")


class DependencyAction(Enum):
    """Outcome of visiting one dependency entry."""

    UNTOUCHED = "untouched"
    MUTATED = "mutated"


class DependencyEntry(ABC):
    """One dependency declaration, editable in place."""

    def __init__(self, key: str, table: MutableMapping[str, Any]) -> None:
        self.key = key
        self._table = table

    @staticmethod
    def wrap(key: str, value: Any) -> DependencyEntry | None:
        """Wrap an inline or table entry; return None for anything else."""
        if isinstance(value, InlineTable):
            return InlineDependency(key, value)
        if isinstance(value, MutableMapping):
            return TableDependency(key, value)
        return None

    def has_local_path(self) -> bool:
        return "path" in self._table

    @property
    def package(self) -> str | None:
        """The ``package`` alias, if the entry has one."""
        value = self._table.get("package")
        return str(value) if isinstance(value, str) else None

    @abstractmethod
    def set_package(self, name: str) -> None:
        """Point the entry at ``name``, overwriting any existing alias."""


class InlineDependency(DependencyEntry):
    """``foo = { path = "..", ... }``"""

    def set_package(self, name: str) -> None:
        if "package" in self._table:
            self._table["package"] = name
            return
        # padding before the closing brace is the last body element; it must
        # stay last or the new key lands after it
        body = self._table.value.body
        padding = None
        if body and body[-1][0] is None and isinstance(body[-1][1], Whitespace):
            padding = body.pop()
        self._table.append("package", name)
        if padding is not None:
            body.append(padding)


class TableDependency(DependencyEntry):
    """``[dependencies.foo]`` with its fields on separate lines."""

    def set_package(self, name: str) -> None:
        self._table["package"] = name


DependencyVisitor = Callable[[str, DependencyEntry], DependencyAction]


def edit_each_dep(root: MutableMapping[str, Any], fn: DependencyVisitor) -> int:
    """Visit every entry of the dependency tables directly under ``root``.

    ``fn`` receives the key the entry is declared under and the wrapped
    entry, and may mutate the entry in place.

    Returns:
        How many entries ``fn`` reported as mutated.
    """
    count = 0
    for table_name in DEPENDENCY_TABLES:
        table = root.get(table_name)
        if not isinstance(table, MutableMapping):
            continue
        for key in list(table.keys()):
            entry = DependencyEntry.wrap(key, table[key])
            if entry is None:
                continue
            if fn(entry.key, entry) is DependencyAction.MUTATED:
                count += 1
    return count


def count_dependency_updates(
    doc: MutableMapping[str, Any], fn: DependencyVisitor
) -> int:
    """Run ``fn`` over the default and all target-specific dependency tables.

    Only sub-tables of ``[target]`` are treated as platforms; any other
    value under it is skipped.

    Returns:
        Total number of mutated entries in the document.
    """
    count = edit_each_dep(doc, fn)

    target = doc.get("target")
    if isinstance(target, MutableMapping):
        for platform in list(target.keys()):
            platform_table = target[platform]
            if isinstance(platform_table, MutableMapping):
                count += edit_each_dep(platform_table, fn)
            else:
                logger.debug("Skipping non-table target entry: %s", platform)
    return count
