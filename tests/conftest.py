"""Shared test fixtures for axosync."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from axosync.config import AxosyncConfig, save_config
from axosync.service import SyncService
from axosync.sourcemap import SourcemapInstance


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    """Keep the developer's environment out of config tests."""
    for name in ("AXOSYNC_PORT", "AXOSYNC_LOG_LEVEL", "AXOSYNC_PROJECT_NAME"):
        monkeypatch.delenv(name, raising=False)


def setup_axosync_project(project_root: Path, config: AxosyncConfig | None = None) -> AxosyncConfig:
    """Write an axosync.json into ``project_root``.

    Args:
        project_root: Path to the project root
        config: Optional config to use (defaults to a "game" project with a
            src/ scrape directory)

    Returns:
        The config that was saved
    """
    if config is None:
        config = AxosyncConfig(
            project_name="game",
            sourcemap_directory=Path("."),
            file_paths_scrape_directory=Path("src"),
        )

    (project_root / "src").mkdir(exist_ok=True)
    save_config(config, project_root)
    return config


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A temporary project with an axosync.json and an empty src/ directory."""
    setup_axosync_project(tmp_path)
    return tmp_path


@pytest.fixture
def service(project: Path) -> SyncService:
    """A service over the temporary project."""
    config = AxosyncConfig(
        project_name="game",
        file_paths_scrape_directory=Path("src"),
    )
    return SyncService.from_config(config, project)


@pytest.fixture
def game_tree() -> SourcemapInstance:
    """
    A small sourcemap.

    Structure:
        DataModel game
        ├── Workspace Workspace
        │   └── Model Map
        │       └── Part Floor
        └── ReplicatedStorage ReplicatedStorage
            └── ModuleScript Util  (plugin managed, with file path)
    """
    return SourcemapInstance.model_validate(
        {
            "name": "game",
            "className": "DataModel",
            "children": [
                {
                    "name": "Workspace",
                    "className": "Workspace",
                    "children": [
                        {
                            "name": "Map",
                            "className": "Model",
                            "children": [{"name": "Floor", "className": "Part"}],
                        }
                    ],
                },
                {
                    "name": "ReplicatedStorage",
                    "className": "ReplicatedStorage",
                    "children": [
                        {
                            "name": "Util",
                            "className": "ModuleScript",
                            "pluginManaged": True,
                            "filePaths": ["src/shared/Util.lua"],
                        }
                    ],
                },
            ],
        }
    )
