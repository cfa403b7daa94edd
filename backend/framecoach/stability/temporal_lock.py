"""
Temporal lock ("hold still") state machine.

    IDLE --perfect--> ARMING(started_at) --elapsed >= duration--> LOCKED

Any non-perfect frame returns to IDLE with zero progress immediately. LOCKED
stays locked until reset_after_capture() or a non-perfect frame.
"""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class LockState(Enum):
    IDLE = "idle"
    ARMING = "arming"
    LOCKED = "locked"


class TemporalLock:
    """Confirms a perfect composition only after a minimum dwell time."""

    def __init__(self, lock_duration: float = 0.5):
        if lock_duration <= 0:
            raise ValueError(f"lock_duration must be positive, got {lock_duration}")
        self.lock_duration = lock_duration
        self.state = LockState.IDLE
        self.started_at: Optional[float] = None
        self.progress = 0.0

    @property
    def is_locked(self) -> bool:
        return self.state == LockState.LOCKED

    def update(self, is_perfect: bool, timestamp: float) -> float:
        """
        Advance the lock with one evaluation.

        Args:
            is_perfect: Whether the current frame is a perfect composition
            timestamp: Current time in seconds

        Returns:
            Stability progress in [0, 1]
        """
        if not is_perfect:
            if self.state != LockState.IDLE:
                logger.debug(f"Lock broken in state {self.state.value}")
            self._to_idle()
            return self.progress

        if self.state == LockState.IDLE:
            self.state = LockState.ARMING
            self.started_at = timestamp
            self.progress = 0.0
            logger.debug(f"Lock arming at {timestamp:.3f}s")

        if self.state == LockState.ARMING:
            elapsed = timestamp - self.started_at
            self.progress = min(max(elapsed / self.lock_duration, 0.0), 1.0)
            if elapsed >= self.lock_duration:
                self.state = LockState.LOCKED
                self.progress = 1.0
                logger.info(f"Composition locked after {elapsed:.2f}s")

        return self.progress

    def reset_after_capture(self):
        """Return to IDLE after a photo was taken."""
        self._to_idle()

    def reset(self):
        self._to_idle()

    def _to_idle(self):
        self.state = LockState.IDLE
        self.started_at = None
        self.progress = 0.0
