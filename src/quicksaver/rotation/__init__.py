"""Save rotation: planning, executing and scheduling per-tick work."""

from quicksaver.rotation.engine import RotationEngine
from quicksaver.rotation.executor import FileOperator
from quicksaver.rotation.monitor import QuicksaveMonitor
from quicksaver.rotation.state import RotationState, TickOutcome, TickResult

__all__ = [
    "FileOperator",
    "QuicksaveMonitor",
    "RotationEngine",
    "RotationState",
    "TickOutcome",
    "TickResult",
]
