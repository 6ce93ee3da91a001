"""Pydantic v2 models for quicksaver configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_SAVE_DIRECTORY = "~/Documents/My Games/Starfield/Saves"


class QuicksaverConfig(BaseModel):
    """Root configuration model.

    Keys are read and written under their CamelCase aliases so existing
    quicksave.json files keep working; snake_case names are accepted too.
    """

    save_directory: str = Field(default=DEFAULT_SAVE_DIRECTORY, alias="SaveDirectory")
    process_name: str = Field(default="Starfield", alias="ProcessName")
    update_interval: float = Field(default=10.0, gt=0, alias="UpdateInterval")
    quicksave_save: bool = Field(default=True, alias="QuicksaveSave")
    quicksave_save_interval: float = Field(default=120.0, gt=0, alias="QuicksaveSaveInterval")
    quicksave_copy: bool = Field(default=True, alias="QuicksaveCopy")
    quicksave_count: int = Field(default=10, ge=0, alias="QuicksaveCount")
    verbose_level: int = Field(default=1, ge=0, alias="VerboseLevel")
    require_focus: bool = Field(default=True, alias="RequireFocus")
    quicksave_key: str = Field(default="f5", alias="QuicksaveKey")

    model_config = {"populate_by_name": True}

    @field_validator("quicksave_key")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("QuicksaveKey must not be empty")
        return value

    @property
    def save_path(self) -> Path:
        return Path(self.save_directory).expanduser()

    def settings_lines(self) -> list[str]:
        """Human-readable settings, one per line, in file key order."""
        data = self.model_dump(by_alias=True)
        return [f"{key}: {value}" for key, value in data.items()]
