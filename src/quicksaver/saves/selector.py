"""Pick the authoritative quicksave among candidates."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from quicksaver.saves.catalog import SaveEntry, quicksaves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuicksaveSelection:
    entry: SaveEntry
    candidates: list[SaveEntry] = field(default_factory=list)

    @property
    def modified_at(self) -> float:
        return self.entry.modified_at


def select_quicksave(entries: Iterable[SaveEntry]) -> QuicksaveSelection | None:
    """Return the most recently modified quicksave, or None if there is none.

    Equal timestamps resolve to the greatest filename so repeated calls on the
    same listing always agree.
    """
    candidates = sorted(
        quicksaves(entries),
        key=lambda e: (e.modified_at, e.name),
        reverse=True,
    )
    if not candidates:
        return None

    selected = candidates[0]
    if len(candidates) > 1:
        logger.warning(
            "Found %d quicksave files, selected '%s' as it was most recently "
            "modified. Candidates were: %s",
            len(candidates),
            selected.name,
            ", ".join(f"'{c.name}'" for c in candidates),
        )
    return QuicksaveSelection(entry=selected, candidates=candidates)
