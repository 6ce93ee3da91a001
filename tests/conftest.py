"""Shared test fixtures."""

import os
from pathlib import Path

import pytest

from quicksaver.config.schema import QuicksaverConfig
from quicksaver.focus.base import FocusTrigger


class FakeFocus(FocusTrigger):
    """FocusTrigger double recording save commands."""

    def __init__(self, focused: bool = True) -> None:
        self.focused = focused
        self.save_commands = 0
        self.queried: list[str] = []

    def is_focused(self, process_name: str) -> bool:
        self.queried.append(process_name)
        return self.focused

    def send_save_command(self) -> None:
        self.save_commands += 1


@pytest.fixture
def save_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "Saves"
    directory.mkdir()
    return directory


@pytest.fixture
def make_save(save_dir: Path):
    """Create a file in the save directory with a given mtime."""

    def _make(name: str, mtime: float, content: bytes = b"save-data") -> Path:
        path = save_dir / name
        path.write_bytes(content)
        os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def make_config(save_dir: Path):
    def _make(**overrides) -> QuicksaverConfig:
        values = {
            "save_directory": str(save_dir),
            "quicksave_save": False,
            "require_focus": False,
        }
        values.update(overrides)
        return QuicksaverConfig(**values)

    return _make


@pytest.fixture
def focus() -> FakeFocus:
    return FakeFocus()


@pytest.fixture
def sample_config_yaml(tmp_path: Path, save_dir: Path) -> Path:
    """Create a minimal valid config YAML file."""
    config = tmp_path / "quicksave.yaml"
    config.write_text(
        f"""\
SaveDirectory: "{save_dir.as_posix()}"
ProcessName: "Starfield"
UpdateInterval: 5
QuicksaveCount: 3
QuicksaveSave: false
RequireFocus: false
"""
    )
    return config


@pytest.fixture
def empty_config_yaml(tmp_path: Path) -> Path:
    """Create an empty config YAML file."""
    config = tmp_path / "quicksave.yaml"
    config.write_text("{}\n")
    return config
