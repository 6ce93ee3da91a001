"""Save file catalog, quicksave selection and identifier allocation."""

from quicksaver.saves.allocator import next_save_identifier
from quicksaver.saves.catalog import (
    BASE_IDENTIFIER,
    SaveEntry,
    SaveKind,
    classify,
    managed_saves,
    scan_directory,
)
from quicksaver.saves.selector import QuicksaveSelection, select_quicksave

__all__ = [
    "BASE_IDENTIFIER",
    "QuicksaveSelection",
    "SaveEntry",
    "SaveKind",
    "classify",
    "managed_saves",
    "next_save_identifier",
    "scan_directory",
    "select_quicksave",
]
