"""Gate results and the per-frame gate evaluation."""

from dataclasses import dataclass
from typing import List, Optional, Union

from framecoach.models.shot_type import ShotType


class GateCategory:
    """Result categories reported by the gates."""
    # Aspect ratio
    ASPECT_RATIO = "aspect_ratio"

    # Framing
    FRAMING = "framing"
    NO_SUBJECT = "no_subject"

    # Position
    POSITION_KEYPOINT = "position_keypoint"
    POSITION_PERFECT = "position_perfect"
    POSITION_FALLBACK = "position_fallback"

    # Lens / distance
    LENS_DISTANCE_BOTH = "lens_distance_both"
    LENS_ONLY = "lens_only"
    DISTANCE_ONLY = "distance_only"
    LENS_DISTANCE_PERFECT = "lens_distance_perfect"
    LENS_DISTANCE_SKIPPED = "lens_distance_skipped"
    LENS_DISTANCE_MISSING = "lens_distance_missing"

    # Pose
    POSE = "pose"
    POSE_MISSING = "pose_missing"
    POSE_ANALYZING = "pose_analyzing"

    # Shared
    REFERENCE_MISSING = "reference_missing"
    ERROR = "error"


# ============================================================================
# TYPED METADATA (one variant per gate that carries extra data)
# ============================================================================

@dataclass(frozen=True)
class FramingMetadata:
    shot_type: ShotType
    cropped_edges: int = 0


@dataclass(frozen=True)
class PositionMetadata:
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class LensDistanceMetadata:
    current_focal_mm: int
    target_focal_mm: Optional[int]
    current_distance_m: Optional[float]
    target_distance_m: Optional[float]


GateMetadata = Union[FramingMetadata, PositionMetadata, LensDistanceMetadata]


@dataclass(frozen=True)
class GateResult:
    """Output of one gate for one frame."""
    name: str
    score: float
    threshold: float
    feedback: str
    category: str
    debug_info: Optional[str] = None
    metadata: Optional[GateMetadata] = None

    @property
    def passed(self) -> bool:
        return self.score >= self.threshold

    @classmethod
    def fallback(cls, name: str = "Unknown") -> "GateResult":
        """Result used when a gate is missing or failed to run."""
        return cls(
            name=name,
            score=0.0,
            threshold=1.0,
            feedback="Error",
            category=GateCategory.ERROR,
        )


# aspect -> framing -> position -> pose -> lens/distance
FEEDBACK_PRIORITY = (0, 1, 2, 4, 3)

PERFECT_FEEDBACK = "Perfect composition!"


@dataclass(frozen=True)
class GateEvaluation:
    """All five gate results for one frame."""
    gate0: GateResult  # Aspect ratio
    gate1: GateResult  # Framing
    gate2: GateResult  # Position
    gate3: GateResult  # Lens / distance
    gate4: GateResult  # Pose
    current_shot_type: Optional[ShotType] = None
    reference_shot_type: Optional[ShotType] = None

    @property
    def gates(self) -> List[GateResult]:
        return [self.gate0, self.gate1, self.gate2, self.gate3, self.gate4]

    def gate(self, index: int) -> GateResult:
        return self.gates[index]

    @property
    def all_passed(self) -> bool:
        return all(g.passed for g in self.gates)

    @property
    def passed_count(self) -> int:
        return sum(1 for g in self.gates if g.passed)

    @property
    def overall_score(self) -> float:
        return sum(g.score for g in self.gates) / 5.0

    @property
    def current_failed_gate(self) -> Optional[int]:
        """Index of the first failing gate in feedback priority order."""
        for index in FEEDBACK_PRIORITY:
            if not self.gate(index).passed:
                return index
        return None

    @property
    def primary_feedback(self) -> str:
        failed = self.current_failed_gate
        if failed is None:
            return PERFECT_FEEDBACK
        return self.gate(failed).feedback

    @property
    def all_feedbacks(self) -> List[str]:
        return [
            self.gate(index).feedback
            for index in FEEDBACK_PRIORITY
            if not self.gate(index).passed and self.gate(index).feedback
        ]

    @property
    def debug_summary(self) -> str:
        parts = [
            f"G{i}:{'ok' if g.passed else 'x'}({g.score:.2f})"
            for i, g in enumerate(self.gates)
        ]
        return f"{' '.join(parts)} | {self.passed_count}/5 overall={self.overall_score:.2f}"
