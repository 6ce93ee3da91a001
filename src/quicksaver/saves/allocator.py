"""Identifier allocation for new managed saves.

The scan deliberately uses a looser pattern than the managed-save classifier,
so the game's own numbered saves raise the maximum too. Below 100 the next
identifier is built by textual concatenation onto "100", which yields a
six-digit identifier once the maximum reaches 99 (Save100100_...).
"""

from __future__ import annotations

import re
from collections.abc import Iterable

SAVE_NUMBER_PATTERN = re.compile(r"Save(\d+)_.*\.sfs")
QUICKSAVE_PREFIX = "Quicksave0"
MANAGED_PREFIX_PATTERN = re.compile(r"^Save1\d{3}")


def highest_save_number(names: Iterable[str]) -> int:
    """Largest number found in any Save<digits>_*.sfs name, 0 if none."""
    numbers = [
        int(match.group(1))
        for match in (SAVE_NUMBER_PATTERN.search(name) for name in names)
        if match
    ]
    return max(numbers, default=0)


def next_save_identifier(names: Iterable[str]) -> int:
    highest = highest_save_number(names)
    if highest < 100:
        return int(f"100{highest + 1}")
    return highest + 1


def managed_save_name(quicksave_name: str, identifier: int) -> str:
    """Filename for a copy of quicksave_name under the given identifier."""
    return quicksave_name.replace(QUICKSAVE_PREFIX, f"Save{identifier}")


def renumbered_name(managed_name: str, identifier: int) -> str:
    """Swap the Save1NNN prefix of a managed save for a new identifier."""
    return MANAGED_PREFIX_PATTERN.sub(f"Save{identifier}", managed_name, count=1)
