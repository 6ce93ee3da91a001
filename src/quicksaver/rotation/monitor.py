"""Timed polling loop driving the rotation engine."""

from __future__ import annotations

import logging
import threading

from quicksaver.rotation.engine import RotationEngine
from quicksaver.rotation.state import RotationState, TickResult

logger = logging.getLogger(__name__)


class QuicksaveMonitor:
    """Run a tick every interval seconds until stopped.

    The wait between ticks is the only place stop() takes effect; a tick in
    progress always runs to completion.
    """

    def __init__(
        self,
        engine: RotationEngine,
        interval: float,
        state: RotationState | None = None,
    ) -> None:
        self.engine = engine
        self.interval = interval
        self.state = state or RotationState()
        self.ticks = 0
        self._stop_event = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()

    def tick(self) -> TickResult | None:
        """Run one update. Returns None if the directory could not be read."""
        try:
            result = self.engine.tick(self.state)
        except OSError as e:
            logger.error("Update failed, retrying next interval: %s", e)
            return None
        self.state = result.state
        self.ticks += 1
        if result.changed_files:
            logger.debug("Update %d:\n%s", self.ticks, result.summary())
        if result.failures:
            logger.warning("%d operation(s) failed this update", len(result.failures))
        return result

    def run(self, max_ticks: int | None = None) -> int:
        """Loop until stop() or max_ticks attempts, failed ones included.

        Returns the number of ticks that completed.
        """
        logger.info("Monitoring %s every %.1fs", self.engine.directory, self.interval)
        attempts = 0
        while max_ticks is None or attempts < max_ticks:
            if self._stop_event.wait(timeout=self.interval):
                break
            attempts += 1
            self.tick()
        logger.info("Monitor stopped after %d update(s)", self.ticks)
        return self.ticks
