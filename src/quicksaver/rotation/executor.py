"""Apply planned file operations, one attempt each.

A failed operation is logged and reported, never raised: the next tick
re-scans the directory and plans again.
"""

from __future__ import annotations

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from quicksaver.rotation.operations import CopySave, DeleteSave, FileOperation, RenameSave

logger = logging.getLogger(__name__)


@contextmanager
def open_exclusive(path: Path) -> Iterator[BinaryIO]:
    """Open path for reading while denying every other reader and writer.

    Fails immediately with OSError if the game currently holds the file.
    """
    if os.name == "nt":
        stream = _open_exclusive_windows(path)
    else:
        stream = _open_exclusive_posix(path)
    with stream:
        yield stream


def _open_exclusive_windows(path: Path) -> BinaryIO:
    import ctypes
    import msvcrt
    from ctypes import wintypes

    GENERIC_READ = 0x80000000
    NO_SHARING = 0
    OPEN_EXISTING = 3
    FILE_ATTRIBUTE_NORMAL = 0x80

    create_file = ctypes.windll.kernel32.CreateFileW
    create_file.restype = wintypes.HANDLE
    handle = create_file(
        wintypes.LPCWSTR(str(path)), GENERIC_READ, NO_SHARING,
        None, OPEN_EXISTING, FILE_ATTRIBUTE_NORMAL, None,
    )
    if handle == wintypes.HANDLE(-1).value:
        raise ctypes.WinError()
    fd = msvcrt.open_osfhandle(handle, os.O_RDONLY)
    return os.fdopen(fd, "rb")


def _open_exclusive_posix(path: Path) -> BinaryIO:
    import fcntl

    stream = open(path, "rb")
    try:
        fcntl.flock(stream.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        stream.close()
        raise
    return stream


class FileOperator:
    """Execute CopySave, DeleteSave and RenameSave against the filesystem."""

    def apply(self, op: FileOperation) -> bool:
        """Run a single operation. Returns True on success.

        Raises TypeError for anything that is not a FileOperation.
        """
        if not isinstance(op, (CopySave, DeleteSave, RenameSave)):
            raise TypeError(f"Unsupported operation: {op!r}")
        action = op.describe()
        try:
            if isinstance(op, CopySave):
                self._copy(op.source, op.destination)
            elif isinstance(op, DeleteSave):
                op.path.unlink()
            else:
                self._rename(op.source, op.destination)
        except OSError as e:
            logger.warning("Could not %s: %s", action, e)
            return False
        except Exception as e:
            logger.error(
                "Unexpected %s while trying to %s: %s",
                type(e).__name__, action, e,
            )
            return False

        logger.debug("Done: %s", action)
        return True

    def _copy(self, source: Path, destination: Path) -> None:
        with open_exclusive(source) as src:
            with open(destination, "xb") as dst:
                try:
                    shutil.copyfileobj(src, dst)
                except BaseException:
                    dst.close()
                    destination.unlink(missing_ok=True)
                    raise

    def _rename(self, source: Path, destination: Path) -> None:
        if destination.exists():
            raise FileExistsError(f"'{destination.name}' already exists")
        source.rename(destination)
