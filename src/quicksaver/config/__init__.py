"""Configuration system for quicksaver."""

from quicksaver.config.loader import load_config, write_default_config
from quicksaver.config.schema import QuicksaverConfig

__all__ = ["load_config", "write_default_config", "QuicksaverConfig"]
