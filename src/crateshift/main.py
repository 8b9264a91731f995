"""Application entry point — typer CLI for renaming workspace packages.

Commands:
  1. `crateshift rename OLD NEW` — rename one package.
  2. `crateshift rename-matching PATTERN REPLACEMENT` — regex-rename every
     package whose name matches PATTERN.
  3. `crateshift members` — list the packages a rename would visit.

Every command resolves settings (crateshift.toml + .env) for the workspace
given by --manifest-path, configures logging, and builds a RenameContext.
Manifest and settings errors are reported and exit with status 1.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import replace
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .context import RenameContext, create_context
from .workspace.members import Package, Workspace

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Rename Cargo workspace packages and update every local dependency on them.",
)

_MANIFEST_PATH_HELP = "Workspace root directory (or its Cargo.toml). Defaults to cwd."


def _setup(manifest_path: Optional[Path], quiet: bool) -> tuple[RenameContext, Workspace]:
    """Resolve settings, configure logging, and open the workspace."""
    from .settings import load_settings

    root = manifest_path or Path.cwd()
    if root.is_file():
        root = root.parent

    settings = load_settings(root)
    if quiet and not settings.quiet:
        settings = replace(settings, quiet=True)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )
    logging.getLogger("crateshift").setLevel(settings.log_level)

    ctx = create_context(settings)
    return ctx, Workspace(settings.workspace_root, settings.manifest_name)


def _fail(ctx: RenameContext | None, error: Exception) -> NoReturn:
    if ctx is not None:
        ctx.shell.error(error)
    else:
        typer.echo(f"error: {error}", err=True)
    raise typer.Exit(code=1)


def _compile(pattern: str, option: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise typer.BadParameter(f"invalid regex: {e}", param_hint=option) from e


@app.command("rename")
def rename_command(
    old_name: str = typer.Argument(..., help="Current package name."),
    new_name: str = typer.Argument(..., help="New package name."),
    manifest_path: Optional[Path] = typer.Option(
        None, "--manifest-path", help=_MANIFEST_PATH_HELP
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No status output."),
) -> None:
    """Rename OLD_NAME to NEW_NAME and update every local dependency on it."""
    from .rename import rename

    ctx = None
    try:
        ctx, workspace = _setup(manifest_path, quiet)
        if ctx.settings.is_protected(old_name):
            raise ValueError(f"Package '{old_name}' is protected in crateshift.toml")
        rename(
            ctx,
            workspace,
            lambda p: p.name == old_name,
            lambda p: new_name if new_name != p.name else None,
        )
    except (OSError, ValueError) as e:
        _fail(ctx, e)


@app.command("rename-matching")
def rename_matching_command(
    pattern: str = typer.Argument(..., help="Regex searched for in package names."),
    replacement: str = typer.Argument(..., help="re.sub replacement template."),
    skip: Optional[str] = typer.Option(
        None, "--skip", help="Regex of package names to leave alone."
    ),
    manifest_path: Optional[Path] = typer.Option(
        None, "--manifest-path", help=_MANIFEST_PATH_HELP
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No status output."),
) -> None:
    """Rename every package whose name matches PATTERN."""
    from .rename import rename

    regex = _compile(pattern, "PATTERN")
    skip_regex = _compile(skip, "--skip") if skip else None

    ctx = None
    try:
        ctx, workspace = _setup(manifest_path, quiet)
        settings = ctx.settings

        def _selected(package: Package) -> bool:
            if settings.is_protected(package.name):
                return False
            if skip_regex is not None and skip_regex.search(package.name):
                return False
            return regex.search(package.name) is not None

        def _new_name(package: Package) -> str | None:
            new_name = regex.sub(replacement, package.name)
            # declining keeps a second run a no-op
            return new_name if new_name != package.name else None

        rename(ctx, workspace, _selected, _new_name)
    except (OSError, ValueError) as e:
        _fail(ctx, e)


@app.command("members")
def members_command(
    manifest_path: Optional[Path] = typer.Option(
        None, "--manifest-path", help=_MANIFEST_PATH_HELP
    ),
) -> None:
    """List every package a rename would visit, members first."""
    from .workspace.members import members_deep

    ctx = None
    try:
        ctx, workspace = _setup(manifest_path, quiet=False)
        for package in members_deep(workspace):
            rel = Path(os.path.relpath(package.root, workspace.root))
            typer.echo(f"{package.name}\t{rel.as_posix()}")
    except (OSError, ValueError) as e:
        _fail(ctx, e)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
