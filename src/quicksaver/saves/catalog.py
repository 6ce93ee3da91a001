"""Directory scanning and filename classification for save files.

The directory is the only source of truth. Every tick re-derives its view from
a fresh listing, and because the game writes concurrently, a listing is a racy
snapshot: entries may be gone by the time they are stat'ed or acted on.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

QUICKSAVE_PATTERN = re.compile(r"^Quicksave0.*\.sfs$")
MANAGED_SAVE_PATTERN = re.compile(r"^Save1\d{3}_.*\.sfs$")

# Numbering band reserved for managed copies; first slot after renumbering.
BASE_IDENTIFIER = 1001
MAX_IDENTIFIER = 1999


class SaveKind(str, Enum):
    QUICKSAVE = "quicksave"
    MANAGED = "managed"
    OTHER = "other"


@dataclass(frozen=True)
class SaveEntry:
    path: Path
    kind: SaveKind
    modified_at: float
    identifier: int | None = None

    @property
    def name(self) -> str:
        return self.path.name


def classify(name: str) -> tuple[SaveKind, int | None]:
    """Classify a filename. Only managed saves carry an identifier."""
    if QUICKSAVE_PATTERN.match(name):
        return SaveKind.QUICKSAVE, None
    if MANAGED_SAVE_PATTERN.match(name):
        return SaveKind.MANAGED, int(name[4:8])
    return SaveKind.OTHER, None


def scan_directory(directory: Path | str) -> Iterator[SaveEntry]:
    """Yield a SaveEntry for every regular file directly inside directory."""
    with os.scandir(directory) as it:
        for item in it:
            try:
                if not item.is_file():
                    continue
                modified_at = item.stat().st_mtime
            except FileNotFoundError:
                logger.debug("%s vanished while scanning, skipping", item.name)
                continue
            kind, identifier = classify(item.name)
            yield SaveEntry(
                path=Path(item.path),
                kind=kind,
                modified_at=modified_at,
                identifier=identifier,
            )


def quicksaves(entries: Iterable[SaveEntry]) -> list[SaveEntry]:
    return [e for e in entries if e.kind is SaveKind.QUICKSAVE]


def managed_saves(entries: Iterable[SaveEntry]) -> list[SaveEntry]:
    """Managed saves ordered oldest first."""
    managed = [e for e in entries if e.kind is SaveKind.MANAGED]
    managed.sort(key=lambda e: (e.modified_at, e.name))
    return managed
