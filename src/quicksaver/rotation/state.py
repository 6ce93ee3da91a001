"""Rotation state carried between ticks and per-tick results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from quicksaver.saves.selector import QuicksaveSelection


@dataclass(frozen=True)
class RotationState:
    """Everything the engine remembers between ticks.

    last_observed_quicksave_time is the mtime of the quicksave last acted on.
    It starts as None, so a quicksave older than the monitor is never copied.
    observe() follows the copied mtime even backwards; clamping it would make
    a backdated quicksave differ from the watermark on every tick.
    """

    last_observed_quicksave_time: float | None = None

    def observe(self, modified_at: float) -> RotationState:
        return replace(self, last_observed_quicksave_time=modified_at)


class TickOutcome(str, Enum):
    COMPLETED = "completed"
    NOT_FOCUSED = "not_focused"
    NO_QUICKSAVE = "no_quicksave"


@dataclass
class TickResult:
    """What one tick did, for logging and tests."""

    state: RotationState
    outcome: TickOutcome = TickOutcome.COMPLETED
    selection: QuicksaveSelection | None = None
    copied_to: Path | None = None
    save_command_sent: bool = False
    deleted: list[Path] = field(default_factory=list)
    renamed: list[tuple[Path, Path]] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def changed_files(self) -> bool:
        return bool(self.copied_to or self.deleted or self.renamed)

    def summary(self) -> str:
        if self.outcome is not TickOutcome.COMPLETED:
            return f"Tick skipped: {self.outcome.value}"
        lines = [f"Quicksave: {self.selection.entry.name}"]
        if self.copied_to:
            lines.append(f"  copied to {self.copied_to.name}")
        if self.save_command_sent:
            lines.append("  save command sent")
        for path in self.deleted:
            lines.append(f"  deleted {path.name}")
        for source, destination in self.renamed:
            lines.append(f"  renamed {source.name} -> {destination.name}")
        for failure in self.failures:
            lines.append(f"  FAILED {failure}")
        return "\n".join(lines)
