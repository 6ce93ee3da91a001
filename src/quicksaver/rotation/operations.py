"""Filesystem operations a tick wants to perform, planned without touching disk.

Planning is a pure function of a directory listing. The executor applies the
resulting operations one at a time, so tests can assert on the plan alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from quicksaver.saves.allocator import (
    managed_save_name,
    next_save_identifier,
    renumbered_name,
)
from quicksaver.saves.catalog import BASE_IDENTIFIER, MAX_IDENTIFIER, SaveEntry
from quicksaver.saves.selector import QuicksaveSelection


@dataclass(frozen=True)
class CopySave:
    source: Path
    destination: Path
    identifier: int

    def describe(self) -> str:
        return f"copy '{self.source.name}' to '{self.destination.name}'"


@dataclass(frozen=True)
class DeleteSave:
    path: Path

    def describe(self) -> str:
        return f"delete '{self.path.name}'"


@dataclass(frozen=True)
class RenameSave:
    source: Path
    destination: Path

    def describe(self) -> str:
        return f"rename '{self.source.name}' to '{self.destination.name}'"


FileOperation = CopySave | DeleteSave | RenameSave


def plan_copy(
    selection: QuicksaveSelection,
    names: Iterable[str],
    watermark: float | None,
) -> CopySave | None:
    """Plan a copy of the selected quicksave if it changed since watermark."""
    if watermark is None or selection.modified_at == watermark:
        return None
    identifier = next_save_identifier(names)
    source = selection.entry.path
    destination = source.with_name(managed_save_name(source.name, identifier))
    return CopySave(source=source, destination=destination, identifier=identifier)


def plan_trim(managed: Sequence[SaveEntry], limit: int) -> list[DeleteSave]:
    """Delete the oldest managed saves beyond limit, oldest first.

    managed must already be ordered oldest first.
    """
    excess = len(managed) - limit
    if excess <= 0:
        return []
    return [DeleteSave(path=entry.path) for entry in managed[:excess]]


def plan_renumber(managed: Sequence[SaveEntry]) -> list[RenameSave]:
    """Renumber managed saves 1001, 1002, ... in age order.

    managed must already be ordered oldest first. Saves that already carry
    their target number are left alone. Renames are ordered so none lands on
    a path another pending rename still holds; a cycle is broken by parking
    one save on the lowest free Save1NNN number above the new range, which
    keeps it managed even if the tick stops halfway.
    """
    pending = []
    for offset, entry in enumerate(managed):
        destination = entry.path.with_name(
            renumbered_name(entry.name, BASE_IDENTIFIER + offset)
        )
        if destination != entry.path:
            pending.append(RenameSave(source=entry.path, destination=destination))

    used = {entry.identifier for entry in managed}
    used.update(range(BASE_IDENTIFIER, BASE_IDENTIFIER + len(managed)))
    return _order_renames(pending, used, first_free=BASE_IDENTIFIER + len(managed))


def _free_identifier(used: set[int | None], first_free: int) -> int | None:
    # Lowest free number past the compacted band, so a half-finished
    # renumber never pushes the allocator's maximum out of the 1xxx range.
    for identifier in range(first_free, MAX_IDENTIFIER + 1):
        if identifier not in used:
            return identifier
    return None


def _order_renames(
    pending: list[RenameSave], used: set[int | None], first_free: int,
) -> list[RenameSave]:
    occupied = {op.source for op in pending}
    ordered: list[RenameSave] = []

    while pending:
        ready = next((op for op in pending if op.destination not in occupied), None)
        if ready is None:
            # Every remaining destination is held by another pending source.
            parking = _free_identifier(used, first_free)
            if parking is None:
                break
            used.add(parking)
            blocked = pending[0]
            parked = blocked.source.with_name(renumbered_name(blocked.source.name, parking))
            ordered.append(RenameSave(source=blocked.source, destination=parked))
            occupied.discard(blocked.source)
            occupied.add(parked)
            pending[0] = RenameSave(source=parked, destination=blocked.destination)
            continue

        ordered.append(ready)
        pending.remove(ready)
        occupied.discard(ready.source)
        occupied.add(ready.destination)

    return ordered
