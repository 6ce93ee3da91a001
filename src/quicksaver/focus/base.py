"""Focus trigger interface consumed by the rotation engine."""

from __future__ import annotations

from abc import ABC, abstractmethod


class FocusTrigger(ABC):
    """Answers whether the game has focus and can press its save key."""

    @abstractmethod
    def is_focused(self, process_name: str) -> bool:
        """True if the foreground window belongs to process_name."""

    @abstractmethod
    def send_save_command(self) -> None:
        """Press the quicksave key in the foreground application."""
