"""Configuration loader for quicksaver."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from quicksaver.config.schema import QuicksaverConfig

logger = logging.getLogger(__name__)


def load_config(path: Path | str | None = None) -> QuicksaverConfig:
    """Load configuration from a YAML (or JSON) file.

    If path is None or the file doesn't exist, returns defaults.
    Raises ValueError for malformed YAML.
    """
    if path is None:
        return QuicksaverConfig()

    path = Path(path).expanduser().resolve()
    if not path.is_file():
        return QuicksaverConfig()

    text = path.read_text()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in {path}: {e}") from e

    if data is None or not isinstance(data, dict):
        return QuicksaverConfig()

    return QuicksaverConfig(**data)


def write_default_config(path: Path | str, force: bool = False) -> bool:
    """Write the default settings to path.

    Returns False without touching the file if it already exists and force
    is not set.
    """
    path = Path(path).expanduser()
    if path.exists() and not force:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    data = QuicksaverConfig().model_dump(by_alias=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    logger.info("Wrote default settings to %s", path.resolve())
    return True
