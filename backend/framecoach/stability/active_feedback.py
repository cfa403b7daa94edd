"""
Active feedback tracking for a stable on-screen message.

The dominant issue (first failing gate) is shown as one message with a
progress bar. Rules:
1. Same (gate, type) as the displayed issue: only the progress is updated,
   averaged over the last 5 frames
2. A different issue replaces it only after the minimum display time, or once
   the current one is resolved
3. A resolved issue stays visible for resolved_display seconds, then disappears
"""

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Optional

import numpy as np

from framecoach.models.gate import GateEvaluation

logger = logging.getLogger(__name__)

FEEDBACK_TYPES = {
    0: "aspect_ratio",
    1: "framing",
    2: "position",
    3: "lens_distance",
    4: "pose",
}

HISTORY_SIZE = 5
PROGRESS_THRESHOLD = 0.05  # Displayed progress moves in 5% steps
NEAR_COMPLETE = 0.95


@dataclass
class ActiveFeedback:
    """The message currently shown to the user."""
    gate_index: int
    feedback_type: str
    message: str
    start_time: float
    progress_history: Deque[float] = field(default_factory=lambda: deque(maxlen=HISTORY_SIZE))
    smoothed_progress: float = 0.0
    displayed_progress: float = 0.0
    is_resolved: bool = False
    resolved_time: Optional[float] = None

    @property
    def id(self) -> str:
        return f"{self.gate_index}_{self.feedback_type}"

    def update_progress(self, progress: float, timestamp: float):
        """Add a progress sample; resolves the feedback at 100%."""
        self.progress_history.append(progress)
        self.smoothed_progress = float(np.mean(self.progress_history))

        if (
            abs(self.smoothed_progress - self.displayed_progress) >= PROGRESS_THRESHOLD
            or self.smoothed_progress >= NEAR_COMPLETE
        ):
            self.displayed_progress = self.smoothed_progress

        if self.smoothed_progress >= 1.0 and not self.is_resolved:
            self.is_resolved = True
            self.resolved_time = timestamp

    def display_duration(self, timestamp: float) -> float:
        return timestamp - self.start_time

    def should_remove(self, timestamp: float, resolved_display: float) -> bool:
        if not self.is_resolved or self.resolved_time is None:
            return False
        return timestamp - self.resolved_time >= resolved_display

    def snapshot(self) -> "ActiveFeedback":
        """Copy that later progress updates do not touch."""
        return replace(self, progress_history=deque(self.progress_history, maxlen=HISTORY_SIZE))


class ActiveFeedbackTracker:
    """Chooses and smooths the active feedback from gate evaluations."""

    def __init__(self, min_display: float = 2.0, resolved_display: float = 1.5):
        self.min_display = min_display
        self.resolved_display = resolved_display
        self.active: Optional[ActiveFeedback] = None

    def _new_feedback(self, evaluation: GateEvaluation, gate_index: int, timestamp: float) -> ActiveFeedback:
        progress = evaluation.gate(gate_index).score
        feedback = ActiveFeedback(
            gate_index=gate_index,
            feedback_type=FEEDBACK_TYPES.get(gate_index, "unknown"),
            message=evaluation.primary_feedback,
            start_time=timestamp,
            smoothed_progress=progress,
            displayed_progress=progress,
        )
        feedback.progress_history.append(progress)
        return feedback

    def update(self, evaluation: Optional[GateEvaluation], timestamp: float) -> Optional[ActiveFeedback]:
        """
        Update the active feedback with one frame's evaluation.

        Args:
            evaluation: Gate evaluation, or None when nothing was evaluated
            timestamp: Current time in seconds

        Returns:
            Feedback to display, or None
        """
        active = self.active

        if evaluation is None:
            if active is not None and active.should_remove(timestamp, self.resolved_display):
                self.active = None
            return self.active

        if evaluation.all_passed:
            if active is not None:
                if not active.is_resolved:
                    active.update_progress(1.0, timestamp)
                if active.should_remove(timestamp, self.resolved_display):
                    self.active = None
            return self.active

        gate_index = evaluation.current_failed_gate
        if gate_index is None:
            return self.active

        if active is None:
            self.active = self._new_feedback(evaluation, gate_index, timestamp)
            return self.active

        if active.gate_index == gate_index and active.feedback_type == FEEDBACK_TYPES.get(gate_index):
            active.update_progress(evaluation.gate(gate_index).score, timestamp)
            return active

        if active.display_duration(timestamp) < self.min_display and not active.is_resolved:
            return active

        logger.debug(f"Active feedback {active.id} -> gate {gate_index}")
        self.active = self._new_feedback(evaluation, gate_index, timestamp)
        return self.active

    def reset(self):
        self.active = None
