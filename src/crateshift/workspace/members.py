"""Workspace member discovery.

Reads the root Cargo.toml (read-only, via tomllib) and resolves the member
packages it declares:
  - the root package itself, when the root manifest has a [package] table
  - every directory matched by [workspace] members, minus [workspace] exclude

members_deep() extends that list with the packages reachable through local
path dependencies, so packages living outside the member globs are renamed
and rewritten too.

Key classes: Package, Workspace.
Key function: members_deep().
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from ..manifest.deps import DEPENDENCY_TABLES

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


@dataclass(frozen=True)
class Package:
    """One package of the workspace, as found on disk before any edit.

    Attributes:
        name: The package name from ``[package] name``.
        version: The version string, empty when inherited from the workspace.
        manifest_path: Absolute path to the package's Cargo.toml.
        path_dependencies: Resolved manifest paths of every local
            dependency, across all dependency and target tables.
    """

    name: str
    manifest_path: Path
    version: str = ""
    path_dependencies: tuple[Path, ...] = field(default_factory=tuple)

    @property
    def root(self) -> Path:
        return self.manifest_path.parent


def read_manifest(manifest_path: Path) -> dict[str, Any]:
    """Parse a manifest into plain dicts.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ValueError: If the manifest is not valid TOML.
    """
    with open(manifest_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse {manifest_path}: {e}") from e


def _iter_dependency_tables(raw: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield the default dependency tables, then every target-specific one."""
    for key in DEPENDENCY_TABLES:
        table = raw.get(key)
        if isinstance(table, dict):
            yield table
    target = raw.get("target")
    if isinstance(target, dict):
        for platform in target.values():
            if not isinstance(platform, dict):
                continue
            for key in DEPENDENCY_TABLES:
                table = platform.get(key)
                if isinstance(table, dict):
                    yield table


class Workspace:
    """A Cargo workspace rooted at a directory holding the root manifest."""

    def __init__(self, root: Path, manifest_name: str = "Cargo.toml") -> None:
        self.root = root.resolve()
        self.manifest_name = manifest_name
        self.root_manifest = self.root / manifest_name
        # manifest path -> Package; descriptors reflect the on-disk state at
        # first load and are not refreshed after edits
        self._packages: dict[Path, Package] = {}

    def load_package(self, manifest_path: Path) -> Package:
        """Return the package described by ``manifest_path`` (cached).

        Raises:
            FileNotFoundError: If the manifest does not exist.
            ValueError: If the manifest is invalid or has no package name.
        """
        manifest_path = manifest_path.resolve()
        cached = self._packages.get(manifest_path)
        if cached is not None:
            return cached

        raw = read_manifest(manifest_path)
        package = raw.get("package")
        if not isinstance(package, dict) or not isinstance(package.get("name"), str):
            raise ValueError(f"{manifest_path}: missing [package] name")

        version = package.get("version", "")
        path_deps: list[Path] = []
        for table in _iter_dependency_tables(raw):
            for entry in table.values():
                if isinstance(entry, dict) and isinstance(entry.get("path"), str):
                    dep_manifest = manifest_path.parent / entry["path"] / self.manifest_name
                    path_deps.append(dep_manifest.resolve())

        pkg = Package(
            name=package["name"],
            manifest_path=manifest_path,
            version=version if isinstance(version, str) else "",
            path_dependencies=tuple(path_deps),
        )
        self._packages[manifest_path] = pkg
        return pkg

    def member_manifests(self) -> list[Path]:
        """Resolve the manifest paths of all declared members, in order."""
        raw = read_manifest(self.root_manifest)
        manifests: list[Path] = []
        if "package" in raw:
            manifests.append(self.root_manifest)

        section = raw.get("workspace", {})
        excluded = {(self.root / p).resolve() for p in section.get("exclude", [])}
        for pattern in section.get("members", []):
            if _GLOB_CHARS.isdisjoint(pattern):
                candidate = self.root / pattern / self.manifest_name
                if not candidate.is_file():
                    raise FileNotFoundError(
                        f"Workspace member '{pattern}' has no {self.manifest_name}"
                    )
                matches = [candidate.parent]
            else:
                matches = sorted(
                    p
                    for p in self.root.glob(pattern)
                    if (p / self.manifest_name).is_file()
                )
            for member_dir in matches:
                member_dir = member_dir.resolve()
                if member_dir in excluded:
                    logger.debug("Excluded workspace member: %s", member_dir)
                    continue
                manifest = member_dir / self.manifest_name
                if manifest not in manifests:
                    manifests.append(manifest)
        return manifests

    def members(self) -> list[Package]:
        """Return the declared workspace members, in declaration order."""
        return [self.load_package(m) for m in self.member_manifests()]


def members_deep(workspace: Workspace) -> list[Package]:
    """Return members plus every package reachable through path dependencies.

    Each member is followed by the non-member packages its path dependencies
    lead to (depth first). Every package appears once.
    """
    members = workspace.members()
    member_manifests = {m.manifest_path for m in members}
    seen: set[Path] = set()
    result: list[Package] = []

    def _visit(pkg: Package) -> None:
        if pkg.manifest_path in seen:
            return
        seen.add(pkg.manifest_path)
        result.append(pkg)
        for dep_manifest in pkg.path_dependencies:
            if dep_manifest in member_manifests or dep_manifest in seen:
                continue
            _visit(workspace.load_package(dep_manifest))

    for member in members:
        _visit(member)
    return result
