"""Tests for the root CLI group and global flags."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from lineageflow import __version__
from lineageflow.cli import cli


class TestRootGroup:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("node", "edge", "layout", "export", "import", "show"):
            assert name in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output


class TestGlobalFlags:
    def test_root_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        project = tmp_path / "proj"
        project.mkdir()
        cli_runner.invoke(cli, ["--root", str(project), "node", "add"])
        assert (project / ".lineageflow" / "lineageflow.db").is_file()
        result = cli_runner.invoke(cli, ["--root", str(project), "--json", "show"])
        assert json.loads(result.output)["data"]["node_count"] == 1

    def test_config_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text('[editor]\ndefault_edge_label = "derives"\n', encoding="utf-8")
        args = ["--root", str(tmp_path), "-c", str(config)]
        cli_runner.invoke(cli, [*args, "node", "add"])
        cli_runner.invoke(cli, [*args, "node", "add"])
        result = cli_runner.invoke(cli, [*args, "--json", "edge", "connect", "1", "2"])
        assert json.loads(result.output)["data"]["label"] == "derives"

    def test_storage_key_from_env(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cli_runner.invoke(cli, ["--root", str(tmp_path), "node", "add"])
        monkeypatch.setenv("LINEAGEFLOW_STORAGE__KEY", "other-graph")
        result = cli_runner.invoke(cli, ["--root", str(tmp_path), "--json", "show"])
        assert json.loads(result.output)["data"]["node_count"] == 0

    @pytest.mark.usefixtures("_isolated_project")
    def test_verbose_error_detail(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "node", "label", "5", "x"])
        assert result.exit_code == 1
        assert "id: 5" in result.output
