"""Focus detection and key injection on a real desktop session.

Foreground window lookup goes through user32 and only works on Windows; on
other platforms the game is never reported as focused. Key presses use
pynput, imported on first use so that headless machines can still load the
module.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import psutil

from quicksaver.focus.base import FocusTrigger

logger = logging.getLogger(__name__)

KEY_HOLD_SECONDS = 0.2


def _resolve_key(name: str) -> Any:
    from pynput.keyboard import Key, KeyCode

    if hasattr(Key, name):
        return getattr(Key, name)
    if len(name) == 1:
        return KeyCode.from_char(name)
    raise ValueError(f"Unknown key name: {name!r}")


def foreground_window() -> tuple[int, str] | None:
    """Return (pid, window title) of the foreground window, or None."""
    if os.name != "nt":
        return None

    import ctypes
    from ctypes import wintypes

    user32 = ctypes.windll.user32
    hwnd = user32.GetForegroundWindow()
    if not hwnd:
        return None

    pid = wintypes.DWORD()
    user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
    length = user32.GetWindowTextLengthW(hwnd)
    buffer = ctypes.create_unicode_buffer(length + 1)
    user32.GetWindowTextW(hwnd, buffer, length + 1)
    return pid.value, buffer.value


class DesktopFocusTrigger(FocusTrigger):
    """FocusTrigger backed by user32, psutil and pynput."""

    def __init__(
        self,
        key: str = "f5",
        hold_seconds: float = KEY_HOLD_SECONDS,
        keyboard: Any = None,
    ) -> None:
        self.key = key
        self.hold_seconds = hold_seconds
        self._keyboard = keyboard

    @property
    def keyboard(self) -> Any:
        if self._keyboard is None:
            from pynput.keyboard import Controller

            self._keyboard = Controller()
        return self._keyboard

    def is_focused(self, process_name: str) -> bool:
        window = foreground_window()
        if window is None:
            return False

        pid, title = window
        try:
            process = psutil.Process(pid)
            logger.debug("Foreground window '%s' belongs to %s", title, process.name())
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            logger.debug("Foreground window '%s' has no resolvable process", title)
            return False
        return title == process_name

    def send_save_command(self) -> None:
        key = _resolve_key(self.key)
        self.keyboard.press(key)
        time.sleep(self.hold_seconds)
        self.keyboard.release(key)
