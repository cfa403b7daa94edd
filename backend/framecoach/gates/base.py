"""
Gate base types.

A gate scores one composition dimension for one frame. Gates come in two kinds:

- PureGate: the result depends only on the GateContext
- StatefulGate: owns an explicit state object (hysteresis, smoothing, debouncing)
  that persists across frames and is cleared by reset()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from framecoach.models.camera import BodyType
from framecoach.models.gate import GateCategory, GateResult
from framecoach.models.live import LiveMetrics
from framecoach.models.reference import ReferenceData, ReferenceState, reference_data
from framecoach.stability.adaptive_difficulty import relax_threshold


@dataclass(frozen=True)
class GateSettings:
    """Per-frame knobs shared by all gates."""
    difficulty_multiplier: float = 1.0
    current_zoom_factor: float = 1.0
    body_type: BodyType = BodyType.MEDIUM
    min_threshold: float = 0.5  # Floor for relaxed thresholds

    def threshold(self, base: float) -> float:
        return relax_threshold(base, self.difficulty_multiplier, self.min_threshold)

    def angle_tolerance(self, base: float) -> float:
        return base * max(1.0, self.difficulty_multiplier)


@dataclass(frozen=True)
class GateContext:
    """Immutable input handed to every gate for one frame."""
    live: LiveMetrics
    reference_state: ReferenceState
    settings: GateSettings
    timestamp: float = 0.0  # Seconds, used by time-gated gate state

    @property
    def reference(self) -> Optional[ReferenceData]:
        return reference_data(self.reference_state)


class Gate(ABC):
    """A single composition check."""
    name: str = "Gate"
    priority: int = -1
    base_threshold: float = 0.0

    @abstractmethod
    def evaluate(self, context: GateContext) -> GateResult:
        """Score the current frame."""

    def reset(self):
        """Clear cross-frame state (no-op for pure gates)."""

    def result(
        self,
        score: float,
        threshold: float,
        feedback: str,
        category: str,
        debug_info: Optional[str] = None,
        metadata=None
    ) -> GateResult:
        return GateResult(
            name=self.name,
            score=min(max(score, 0.0), 1.0),
            threshold=threshold,
            feedback=feedback,
            category=category,
            debug_info=debug_info,
            metadata=metadata,
        )

    def reference_missing(self) -> GateResult:
        """Automatic pass used while no reference is set."""
        return self.result(1.0, 0.0, "", GateCategory.REFERENCE_MISSING, debug_info="no reference")

    def no_subject(self) -> GateResult:
        return self.result(0.0, self.base_threshold, "Cannot recognize the subject", GateCategory.NO_SUBJECT)


class PureGate(Gate):
    """Gate without cross-frame state."""


StateT = TypeVar("StateT")


class StatefulGate(Gate, Generic[StateT]):
    """Gate owning an explicit, resettable state object."""

    def __init__(self, state: StateT):
        self.state = state

    def reset(self):
        self.state.reset()
