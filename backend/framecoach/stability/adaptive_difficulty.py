"""
Adaptive difficulty for frustrated users.

When the same failing gate keeps reporting the same feedback category for
several seconds the user is probably stuck, so the gate thresholds are relaxed:

- Score thresholds are divided by the multiplier (never below a floor)
- Angle tolerances are multiplied by it

The multiplier is bumped once per stuck episode and returns to 1.0 only when
every gate passes.
"""

import logging
from typing import Dict, Optional, Tuple

from framecoach.models.gate import GateEvaluation

logger = logging.getLogger(__name__)


class AdaptiveDifficulty:
    """Tracks how long each (failing gate, category) issue has been shown."""

    BASELINE_MULTIPLIER = 1.0

    def __init__(
        self,
        stuck_after: float = 5.0,
        relaxed_multiplier: float = 1.2,
        min_threshold: float = 0.5
    ):
        """
        Args:
            stuck_after: Seconds a feedback must persist before relaxing
            relaxed_multiplier: Multiplier applied once the user is stuck
            min_threshold: Floor for relaxed score thresholds
        """
        if relaxed_multiplier < 1.0:
            raise ValueError(f"relaxed_multiplier must be >= 1.0, got {relaxed_multiplier}")
        self.stuck_after = stuck_after
        self.relaxed_multiplier = relaxed_multiplier
        self.min_threshold = min_threshold

        self.multiplier = self.BASELINE_MULTIPLIER
        self.feedback_start_times: Dict[Tuple[int, str], float] = {}

    @property
    def is_relaxed(self) -> bool:
        return self.multiplier > self.BASELINE_MULTIPLIER

    def update(self, evaluation: Optional[GateEvaluation], timestamp: float) -> float:
        """
        Track the issue behind the current primary feedback.

        Args:
            evaluation: Gate evaluation of the current frame (None = no change)
            timestamp: Current time in seconds

        Returns:
            Difficulty multiplier to use for the next frame
        """
        if evaluation is None:
            return self.multiplier

        if evaluation.all_passed:
            if self.is_relaxed:
                logger.info("All gates passed, difficulty back to baseline")
            self.multiplier = self.BASELINE_MULTIPLIER
            self.feedback_start_times.clear()
            return self.multiplier

        gate_index = evaluation.current_failed_gate
        issue = (gate_index, evaluation.gate(gate_index).category)
        started = self.feedback_start_times.get(issue)
        if started is None:
            self.feedback_start_times[issue] = timestamp
        elif timestamp - started > self.stuck_after and not self.is_relaxed:
            self.multiplier = self.relaxed_multiplier
            logger.info(
                f"Stuck on {evaluation.primary_feedback!r} for {timestamp - started:.1f}s, "
                f"relaxing thresholds x{self.multiplier}"
            )

        return self.multiplier

    def relax_threshold(self, base: float) -> float:
        """Score threshold adjusted for the current multiplier."""
        return relax_threshold(base, self.multiplier, self.min_threshold)

    def scale_angle_tolerance(self, base: float) -> float:
        return base * self.multiplier

    def reset(self):
        self.multiplier = self.BASELINE_MULTIPLIER
        self.feedback_start_times.clear()


def relax_threshold(base: float, multiplier: float, floor: float = 0.5) -> float:
    """Divide a score threshold by `multiplier`, floored at `floor`."""
    if multiplier <= 1.0:
        return base
    return max(min(floor, base), base / multiplier)
