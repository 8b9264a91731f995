"""Root conftest — keeps env overrides out of tests and builds throwaway workspaces.

load_settings() reads CRATESHIFT_LOG_LEVEL / NO_COLOR from the environment
(and .env files may set them), so both are cleared around every test.
"""

import os
from pathlib import Path
from typing import Callable

import pytest

_ENV_VARS = ("CRATESHIFT_LOG_LEVEL", "NO_COLOR")

ROOT_MANIFEST = """\
[workspace]
members = ["crates/*"]
"""


def _crate_manifest(name: str, deps: str = "", extra: str = "") -> str:
    """Minimal member Cargo.toml with optional [dependencies] body and trailer."""
    text = f"""\
[package]
name = "{name}"
version = "0.1.0"
edition = "2021"
"""
    if deps:
        text += f"\n[dependencies]\n{deps}"
    if extra:
        text += f"\n{extra}"
    return text


@pytest.fixture(autouse=True)
def _clean_env():
    for var in _ENV_VARS:
        os.environ.pop(var, None)
    yield
    for var in _ENV_VARS:
        os.environ.pop(var, None)


@pytest.fixture
def write_workspace(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder writing ``crates/<name>/Cargo.toml`` for each entry.

    Usage: ``root = write_workspace({"a": crate_toml("a")})``
    """

    def _write(crates: dict[str, str], root_manifest: str = ROOT_MANIFEST) -> Path:
        (tmp_path / "Cargo.toml").write_text(root_manifest)
        for dirname, text in crates.items():
            crate_dir = tmp_path / "crates" / dirname
            crate_dir.mkdir(parents=True, exist_ok=True)
            (crate_dir / "Cargo.toml").write_text(text)
        return tmp_path

    return _write


@pytest.fixture
def crate_toml() -> Callable[..., str]:
    """Return the member manifest builder: ``crate_toml(name, deps="", extra="")``."""
    return _crate_manifest
