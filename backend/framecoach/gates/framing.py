"""
Gate 1: framing (shot type and subject size).

1. No subject (fewer than 5 keypoints and a negligible bbox) short-circuits
2. The raw shot type is stabilized with 3-frame hysteresis
3. Different shot type: score drops 0.2 per level, directive names the target
4. Same shot type: the reference/current height ratio must stay within 1.3x
5. A bbox touching two or more frame edges adds a "too close" qualifier
"""

from typing import Optional

from framecoach.directives import HALF_STEP, ONE_STEP
from framecoach.gates.base import GateContext, StatefulGate
from framecoach.models.gate import FramingMetadata, GateCategory, GateResult
from framecoach.models.keypoints import BoundingBox
from framecoach.models.live import LiveMetrics
from framecoach.models.shot_type import ShotType, keypoint_bbox
from framecoach.stability.shot_type_hysteresis import ShotTypeHysteresis


class FramingGate(StatefulGate[ShotTypeHysteresis]):
    """Compares the stabilized shot type and subject size to the reference."""
    name = "Framing"
    priority = 1
    base_threshold = 0.75

    SIZE_RATIO_TOLERANCE = 1.3  # Height ratio band for "same size"
    FAR_SIZE_RATIO = 1.5  # Beyond this a full step is needed
    NEAR_SIZE_RATIO = 0.6
    MISMATCH_SCORE = 0.6
    LEVEL_PENALTY = 0.2
    EDGE_MARGIN = 0.02
    CROPPED_EDGE_COUNT = 2
    CROP_WARNING_BELOW = 0.9
    DEFAULT_REFERENCE_HEIGHT = 0.5
    MIN_HEIGHT = 0.01

    def __init__(self, stability_frames: int = 3, confidence_threshold: float = 0.3):
        super().__init__(ShotTypeHysteresis(required_frames=stability_frames))
        self.confidence_threshold = confidence_threshold

    @property
    def stable_shot_type(self) -> Optional[ShotType]:
        return self.state.stable

    def _current_bbox(self, live: LiveMetrics) -> Optional[BoundingBox]:
        if live.bbox is not None:
            return live.bbox
        return keypoint_bbox(live.keypoints, self.confidence_threshold)

    def evaluate(self, context: GateContext) -> GateResult:
        live = context.live
        threshold = context.settings.threshold(self.base_threshold)

        bbox = None
        raw = None
        if live.has_subject:
            bbox = self._current_bbox(live)
            raw = ShotType.classify(live.keypoints, bbox, self.confidence_threshold)
        if raw is None:
            if context.reference is None:
                return self.reference_missing()
            return self.no_subject()

        shot_type = self.state.update(raw)
        metadata = FramingMetadata(shot_type=shot_type)

        reference = context.reference
        if reference is None:
            return self.result(
                1.0, 0.0, "", GateCategory.REFERENCE_MISSING,
                debug_info=f"no reference, shot type: {shot_type.display_name}",
                metadata=metadata,
            )

        target = reference.shot_type
        edges = bbox.cropped_edges(self.EDGE_MARGIN) if bbox is not None else 0
        current_height = bbox.height if bbox is not None else 0.0
        ref_height = reference.bbox.height if reference.bbox is not None else self.DEFAULT_REFERENCE_HEIGHT
        size_ratio = ref_height / max(current_height, self.MIN_HEIGHT)

        if shot_type == target:
            if size_ratio > self.SIZE_RATIO_TOLERANCE:
                score = self.MISMATCH_SCORE
                step = ONE_STEP if size_ratio > self.FAR_SIZE_RATIO else HALF_STEP
                feedback = f"Move forward {step} for a {target.display_name}"
            elif size_ratio < 1.0 / self.SIZE_RATIO_TOLERANCE:
                score = self.MISMATCH_SCORE
                step = ONE_STEP if size_ratio < self.NEAR_SIZE_RATIO else HALF_STEP
                feedback = f"Move back {step} for a {target.display_name}"
            else:
                score = 1.0
                feedback = f"Perfect {target.display_name}!"
        else:
            diff = shot_type.distance_to(target)
            score = max(0.0, 1.0 - self.LEVEL_PENALTY * abs(diff))
            if diff < 0:
                feedback = f"Move back for a {target.display_name}"
            else:
                feedback = f"Move forward for a {target.display_name}"

        if score < self.CROP_WARNING_BELOW and edges >= self.CROPPED_EDGE_COUNT:
            feedback += " (too close, cropped)"

        return self.result(
            score,
            threshold,
            feedback,
            GateCategory.FRAMING,
            debug_info=(
                f"current: {shot_type.display_name} vs target: {target.display_name}, "
                f"size ratio {size_ratio:.2f}"
            ),
            metadata=FramingMetadata(shot_type=shot_type, cropped_edges=edges),
        )
