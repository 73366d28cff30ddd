"""
Progress reporting for assembly runs.

The assembler emits one event per completed unit (a copied page or a
placed image). ProgressReporter turns those events into an integer
percentage and publishes it to subscribers immediately.
"""

import logging
import math
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class RunState(Enum):
    """States of one assembly run."""
    IDLE = "idle"
    PRELOADING = "preloading"
    ASSEMBLING = "assembling"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def percent_complete(completed_units: int, total_units: int) -> int:
    """Percentage rounded half up, 0 when there is nothing to do."""
    if total_units <= 0:
        return 0
    return int(math.floor(completed_units / total_units * 100 + 0.5))


class ProgressReporter:
    """Converts unit-completion events to percentages for subscribers."""

    def __init__(self):
        self._subscribers: List[ProgressCallback] = []
        self.percent = 0

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: ProgressCallback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def unit_completed(self, completed_units: int, total_units: int) -> int:
        """Publish the percentage after a unit finished."""
        percent = percent_complete(completed_units, total_units)
        if percent < self.percent:
            raise RuntimeError(f"Progress went backwards: {self.percent} -> {percent}")
        self.percent = percent
        logger.debug(f"Progress {completed_units}/{total_units} ({percent}%)")
        for callback in list(self._subscribers):
            callback(percent)
        return percent

    def reset(self):
        self.percent = 0
