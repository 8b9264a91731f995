"""Tests for main.py — typer CLI commands."""

import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from crateshift.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


def _name(root: Path, crate: str) -> str:
    manifest = root / "crates" / crate / "Cargo.toml"
    return tomllib.loads(manifest.read_text())["package"]["name"]


class TestRenameCommand:
    def test_renames_and_updates_dependents(self, write_workspace, crate_toml):
        root = write_workspace(
            {
                "a": crate_toml("a"),
                "b": crate_toml("b", deps='a = { path = "../a" }\n'),
            }
        )
        result = runner.invoke(app, ["rename", "a", "alpha", "--manifest-path", str(root)])

        assert result.exit_code == 0, result.output
        assert "Renaming a -> alpha" in result.output
        assert "One dependency updated" in result.output
        assert _name(root, "a") == "alpha"

    def test_accepts_manifest_file(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        result = runner.invoke(
            app, ["rename", "a", "alpha", "--manifest-path", str(root / "Cargo.toml")]
        )
        assert result.exit_code == 0, result.output
        assert _name(root, "a") == "alpha"

    def test_unknown_package_is_noop(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        result = runner.invoke(app, ["rename", "zzz", "x", "--manifest-path", str(root)])

        assert result.exit_code == 0
        assert "No changed applied" in result.output

    def test_same_name_is_noop(self, write_workspace, crate_toml):
        root = write_workspace(
            {
                "a": crate_toml("a"),
                "b": crate_toml("b", deps='a = { path = "../a" }\n'),
            }
        )
        b_manifest = root / "crates" / "b" / "Cargo.toml"
        b_before = b_manifest.read_text()

        result = runner.invoke(app, ["rename", "a", "a", "--manifest-path", str(root)])

        assert result.exit_code == 0, result.output
        assert "No changed applied" in result.output
        assert "Renaming" not in result.output
        assert b_manifest.read_text() == b_before

    def test_quiet(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        result = runner.invoke(
            app, ["rename", "a", "alpha", "-q", "--manifest-path", str(root)]
        )
        assert result.exit_code == 0
        assert "Renaming" not in result.output

    def test_protected_package_refused(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        (root / "crateshift.toml").write_text('[settings]\nprotected = ["a"]\n')

        result = runner.invoke(app, ["rename", "a", "alpha", "--manifest-path", str(root)])

        assert result.exit_code == 1
        assert "protected" in result.output
        assert _name(root, "a") == "a"

    def test_missing_workspace(self, tmp_path: Path):
        result = runner.invoke(app, ["rename", "a", "b", "--manifest-path", str(tmp_path)])
        assert result.exit_code == 1
        assert "error:" in result.output

    def test_bad_settings(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        (root / "crateshift.toml").write_text('[settings]\nlog_level = "loud"\n')

        result = runner.invoke(app, ["rename", "a", "b", "--manifest-path", str(root)])

        assert result.exit_code == 1
        assert "Unknown log level" in result.output


class TestRenameMatchingCommand:
    def test_regex_rename(self, write_workspace, crate_toml):
        root = write_workspace(
            {
                "core": crate_toml("old-core"),
                "cli": crate_toml("old-cli", deps='old-core = { path = "../core" }\n'),
                "other": crate_toml("other"),
            }
        )
        result = runner.invoke(
            app, ["rename-matching", "^old-", "new-", "--manifest-path", str(root)]
        )

        assert result.exit_code == 0, result.output
        assert _name(root, "core") == "new-core"
        assert _name(root, "cli") == "new-cli"
        assert _name(root, "other") == "other"
        cli = tomllib.loads((root / "crates" / "cli" / "Cargo.toml").read_text())
        assert cli["dependencies"]["old-core"]["package"] == "new-core"

    def test_skip_and_protected(self, write_workspace, crate_toml):
        root = write_workspace(
            {
                "a": crate_toml("x-a"),
                "b": crate_toml("x-b"),
                "c": crate_toml("x-c"),
            }
        )
        (root / "crateshift.toml").write_text('[settings]\nprotected = ["x-c"]\n')

        result = runner.invoke(
            app,
            ["rename-matching", "^x-", "y-", "--skip", "b$", "--manifest-path", str(root)],
        )

        assert result.exit_code == 0, result.output
        assert [_name(root, c) for c in ("a", "b", "c")] == ["y-a", "x-b", "x-c"]

    def test_second_run_is_noop(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        args = ["rename-matching", "^a$", "alpha", "--manifest-path", str(root)]

        runner.invoke(app, args)
        result = runner.invoke(app, args)

        assert result.exit_code == 0
        assert "No changed applied" in result.output

    def test_invalid_regex(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a")})
        result = runner.invoke(
            app, ["rename-matching", "(", "x", "--manifest-path", str(root)]
        )
        assert result.exit_code == 2


class TestMembersCommand:
    def test_lists_members(self, write_workspace, crate_toml):
        root = write_workspace({"a": crate_toml("a"), "b": crate_toml("b")})
        result = runner.invoke(app, ["members", "--manifest-path", str(root)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["a\tcrates/a", "b\tcrates/b"]
