"""Published per-frame evaluation result."""

from dataclasses import dataclass
from typing import Optional

from framecoach.models.gate import GateEvaluation
from framecoach.models.guide import SimpleGuideResult
from framecoach.stability.active_feedback import ActiveFeedback
from framecoach.stability.temporal_lock import LockState


@dataclass(frozen=True)
class EvaluationResult:
    """What the UI and the capture trigger consume for one frame."""
    guide: SimpleGuideResult  # Stabilized directive
    gate_evaluation: GateEvaluation
    is_perfect: bool  # Unstabilized guide is PERFECT and every gate passed
    stability_progress: float  # 0.0 - 1.0, 1.0 = ready to capture
    lock_state: LockState
    active_feedback: Optional[ActiveFeedback] = None  # Copy taken at publication
    difficulty_multiplier: float = 1.0

    @property
    def is_locked(self) -> bool:
        return self.lock_state == LockState.LOCKED

    @property
    def message(self) -> str:
        """Directive text to show right now."""
        return self.guide.display_message
