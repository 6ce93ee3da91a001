"""Per-tick rotation: copy new quicksaves, force saves, trim and renumber."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta

from quicksaver.config.schema import QuicksaverConfig
from quicksaver.focus.base import FocusTrigger
from quicksaver.rotation.executor import FileOperator
from quicksaver.rotation.operations import (
    FileOperation,
    plan_copy,
    plan_renumber,
    plan_trim,
)
from quicksaver.rotation.state import RotationState, TickOutcome, TickResult
from quicksaver.saves.catalog import managed_saves, scan_directory
from quicksaver.saves.selector import QuicksaveSelection, select_quicksave

logger = logging.getLogger(__name__)


def _describe_age(age: float, modified_at: float) -> str:
    return (
        f"modified {timedelta(seconds=round(age))} ago "
        f"(at {datetime.fromtimestamp(modified_at):%Y-%m-%d %H:%M:%S})"
    )


class RotationEngine:
    """Runs one synchronous pass over the save directory per tick.

    The engine keeps no state of its own; the caller passes the previous
    RotationState in and takes the new one from the returned TickResult.
    """

    def __init__(
        self,
        config: QuicksaverConfig,
        focus: FocusTrigger,
        operator: FileOperator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.focus = focus
        self.operator = operator or FileOperator()
        self.clock = clock
        self.directory = config.save_path

    def tick(self, state: RotationState) -> TickResult:
        result = TickResult(state=state)

        if self.config.require_focus and not self._target_focused():
            logger.info(
                "Skipping this update because %s was not in focus",
                self.config.process_name,
            )
            result.outcome = TickOutcome.NOT_FOCUSED
            return result

        entries = list(scan_directory(self.directory))
        selection = select_quicksave(entries)
        if selection is None:
            logger.info(
                "Skipping this update because no quicksaves were found in '%s'",
                self.directory,
            )
            result.outcome = TickOutcome.NO_QUICKSAVE
            return result
        result.selection = selection

        if state.last_observed_quicksave_time is None:
            state = state.observe(selection.modified_at)
        age = self.clock() - selection.modified_at

        if self.config.quicksave_copy:
            state = self._copy_on_change(state, selection, [e.name for e in entries], age, result)

        if self.config.quicksave_save and age >= self.config.quicksave_save_interval:
            self._force_save(selection, age, result)

        self._trim(result)
        self._renumber(result)

        result.state = state
        return result

    def _target_focused(self) -> bool:
        try:
            return self.focus.is_focused(self.config.process_name)
        except Exception as e:
            logger.debug("Focus lookup failed, treating as not focused: %s", e)
            return False

    def _apply(self, op: FileOperation, result: TickResult) -> bool:
        ok = self.operator.apply(op)
        if not ok:
            result.failures.append(op.describe())
        return ok

    def _copy_on_change(
        self,
        state: RotationState,
        selection: QuicksaveSelection,
        names: list[str],
        age: float,
        result: TickResult,
    ) -> RotationState:
        copy = plan_copy(selection, names, state.last_observed_quicksave_time)
        if copy is None:
            return state

        logger.info(
            "Copying '%s' to '%s' because quicksave was %s",
            copy.source.name,
            copy.destination.name,
            _describe_age(age, selection.modified_at),
        )
        if not self._apply(copy, result):
            return state
        result.copied_to = copy.destination
        return state.observe(selection.modified_at)

    def _force_save(self, selection: QuicksaveSelection, age: float, result: TickResult) -> None:
        if not self._target_focused():
            logger.debug(
                "Not sending %s because %s is not in focus",
                self.config.quicksave_key.upper(),
                self.config.process_name,
            )
            return

        logger.info(
            "Sending %s to %s because quicksave was %s",
            self.config.quicksave_key.upper(),
            self.config.process_name,
            _describe_age(age, selection.modified_at),
        )
        try:
            self.focus.send_save_command()
        except Exception as e:
            logger.warning("Could not send save command: %s", e)
            result.failures.append("send save command")
            return
        result.save_command_sent = True

    def _trim(self, result: TickResult) -> None:
        managed = managed_saves(scan_directory(self.directory))
        for entry in managed:
            logger.debug("Managed save: %s (modified %s)", entry.name,
                         datetime.fromtimestamp(entry.modified_at))

        deletions = plan_trim(managed, self.config.quicksave_count)
        if not deletions:
            logger.debug("No old save files to be deleted")
            return

        for op in deletions:
            logger.info("Deleting old file: %s", op.path.name)
            if self._apply(op, result):
                result.deleted.append(op.path)

    def _renumber(self, result: TickResult) -> None:
        survivors = managed_saves(scan_directory(self.directory))
        for op in plan_renumber(survivors):
            logger.debug("Renumbering: %s", op.describe())
            if not self._apply(op, result):
                # Later renames may depend on this one having freed its path.
                logger.warning("Stopping renumbering for this update")
                return
            result.renamed.append((op.source, op.destination))
