"""Load, mutate, and save package manifests one at a time.

Each manifest is parsed into a tomlkit document, handed to a callback, and
written back. tomlkit keeps comments, ordering, and whitespace, so values the
callback leaves alone serialize byte-identical.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import ParseError

if TYPE_CHECKING:
    from ..workspace.members import Package

logger = logging.getLogger(__name__)

R = TypeVar("R")


def load_document(manifest_path: Path) -> TOMLDocument:
    """Parse a manifest into an editable document.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If the manifest is not valid TOML.
    """
    # newline="" keeps CRLF line endings intact
    with open(manifest_path, encoding="utf-8", newline="") as f:
        text = f.read()
    try:
        return tomlkit.parse(text)
    except ParseError as e:
        raise ValueError(f"Failed to parse {manifest_path}: {e}") from e


def save_document(manifest_path: Path, doc: TOMLDocument) -> None:
    """Serialize ``doc`` back to ``manifest_path``."""
    with open(manifest_path, "w", encoding="utf-8", newline="") as f:
        f.write(tomlkit.dumps(doc))
    logger.info("Wrote %s", manifest_path)


def edit_each(
    packages: Iterable[Package],
    fn: Callable[[Package, TOMLDocument], R],
) -> list[R]:
    """Run ``fn`` on every package's manifest document and save it.

    Packages are processed strictly in order; each document is loaded,
    mutated, and saved before the next package is read. The document is
    written back whenever ``fn`` returns, changed or not.

    Returns:
        The value returned by ``fn`` for each package, in package order.

    Raises:
        Whatever loading, ``fn``, or saving raises. The remaining packages
        are not visited and earlier writes are kept.
    """
    results: list[R] = []
    for package in packages:
        doc = load_document(package.manifest_path)
        results.append(fn(package, doc))
        save_document(package.manifest_path, doc)
    return results
