"""Integration tests for the axosync CLI."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from axosync.cli import main
from axosync.config import AxosyncConfig, save_config
from axosync.sourcemap import SourcemapStore


@pytest.fixture
def in_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test with tmp_path as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCLIEntry:
    """Tests for the CLI entry point."""

    def test_version_flag(self, cli_runner):
        """--version shows version info."""
        result = cli_runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "axosync" in result.output
        assert "0.1.0" in result.output

    def test_help_flag(self, cli_runner):
        """--help lists the commands."""
        result = cli_runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("init", "serve", "status", "paths"):
            assert command in result.output


class TestInit:
    """Tests for axosync init."""

    def test_creates_config(self, cli_runner, in_dir: Path):
        """init writes a default axosync.json."""
        result = cli_runner.invoke(main, ["init"])

        assert result.exit_code == 0
        data = json.loads((in_dir / "axosync.json").read_text())
        assert data["project_name"] == in_dir.resolve().name
        assert data["port"] == 33752

    def test_refuses_to_overwrite(self, cli_runner, in_dir: Path):
        """An existing config is kept unless --force is given."""
        (in_dir / "axosync.json").write_text('{"port": 4000}')

        result = cli_runner.invoke(main, ["init"])
        assert result.exit_code == 1
        assert json.loads((in_dir / "axosync.json").read_text()) == {"port": 4000}

        result = cli_runner.invoke(main, ["init", "--force"])
        assert result.exit_code == 0
        assert json.loads((in_dir / "axosync.json").read_text())["port"] == 33752


class TestServe:
    """Tests for axosync serve (server start is mocked)."""

    def test_first_run_creates_config_and_asks(self, cli_runner, in_dir: Path):
        """Declining the prompt exits without starting the server."""
        with patch("axosync.server.run_server") as run_server:
            result = cli_runner.invoke(main, ["serve"], input="n\n")

        assert result.exit_code == 0
        assert "Created" in result.output
        assert (in_dir / "axosync.json").exists()
        run_server.assert_not_called()

    def test_first_run_continue(self, cli_runner, in_dir: Path):
        """Accepting the prompt starts the server with the new config."""
        with patch("axosync.server.run_server") as run_server:
            result = cli_runner.invoke(main, ["serve"], input="\n")

        assert result.exit_code == 0
        config, project_root = run_server.call_args.args
        assert config.port == 33752
        assert project_root.resolve() == in_dir.resolve()

    def test_existing_config_port_override(self, cli_runner, in_dir: Path):
        """--port overrides the configured port without prompting."""
        (in_dir / "axosync.json").write_text(json.dumps({"port": 4000}))

        with patch("axosync.server.run_server") as run_server:
            result = cli_runner.invoke(main, ["serve", "--port", "4100"])

        assert result.exit_code == 0
        config, _ = run_server.call_args.args
        assert config.port == 4100

    def test_invalid_config_exits(self, cli_runner, in_dir: Path):
        """A broken config file is reported and the server isn't started."""
        (in_dir / "axosync.json").write_text("{")

        with patch("axosync.server.run_server") as run_server:
            result = cli_runner.invoke(main, ["serve"])

        assert result.exit_code == 1
        run_server.assert_not_called()


class TestStatus:
    """Tests for axosync status."""

    def test_without_sourcemap(self, cli_runner, project: Path, monkeypatch):
        """status works before any sourcemap exists."""
        monkeypatch.chdir(project)
        result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "game" in result.output
        assert "Not created yet" in result.output

    def test_with_sourcemap(self, cli_runner, project: Path, game_tree, monkeypatch):
        """status reports the number of instances."""
        SourcemapStore(project / "sourcemap.json").save(game_tree)
        monkeypatch.chdir(project)

        result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Ready" in result.output
        assert "Instances" in result.output
        assert "6" in result.output


class TestPaths:
    """Tests for axosync paths."""

    def test_relative_paths(self, cli_runner, project: Path, monkeypatch):
        """--relative prints paths relative to the working directory."""
        monkeypatch.chdir(project)
        (project / "src" / "main.lua").write_text("")

        result = cli_runner.invoke(main, ["paths", "--relative"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["src", "src/main.lua"]

    def test_missing_scrape_directory(self, cli_runner, in_dir: Path):
        """A missing scrape directory exits with an error."""
        save_config(AxosyncConfig(file_paths_scrape_directory=Path("missing")), in_dir)

        result = cli_runner.invoke(main, ["paths"])

        assert result.exit_code == 1
