"""Shared pytest fixtures for test isolation helpers."""

from pathlib import Path

import pytest

import cmdlens.config as config_module
from cmdlens.cmdlens import inspect_command


@pytest.fixture()
def cmdlens_config_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Redirect cmdlens config and history paths to a temp directory."""
    config_dir = tmp_path / ".cmdlens"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setattr(config_module, "HISTORY_FILE", config_dir / "history.json")
    return config_dir, config_file


@pytest.fixture()
def config_dir(cmdlens_config_paths: tuple[Path, Path]) -> Path:
    return cmdlens_config_paths[0]


@pytest.fixture()
def config_file(cmdlens_config_paths: tuple[Path, Path]) -> Path:
    return cmdlens_config_paths[1]


@pytest.fixture()
def history_file(tmp_path: Path) -> Path:
    return tmp_path / "history" / "history.json"


@pytest.fixture(autouse=True)
def clear_inspect_cache():
    """Keep memoized reports from leaking between tests."""
    inspect_command.cache_clear()
    yield
    inspect_command.cache_clear()
