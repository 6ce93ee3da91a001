"""Foreground focus detection and save key injection."""

from quicksaver.focus.base import FocusTrigger
from quicksaver.focus.desktop import DesktopFocusTrigger

__all__ = ["FocusTrigger", "DesktopFocusTrigger"]
