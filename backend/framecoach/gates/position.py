"""
Gate 2: subject position in the frame.

KEYPOINT ALIGNMENT (preferred):
- Horizontal: centroid X offset beyond 5% -> move the camera toward the subject's side
- Vertical: top-anchor Y offset beyond 5% -> tilt, but only when both bodies are
  visible down to the same tier (a full-body top anchor is not comparable to a
  bust shot's)

RULE-OF-THIRDS FALLBACK (no usable keypoints):
- Each axis is scored against the nearest of the 1/3, 1/2 and 2/3 gridlines
"""

from typing import List, Optional

from framecoach.cv.body_structure import BodyStructure
from framecoach.directives import (
    horizontal_direction,
    step_phrase_for_offset,
    tilt_angle,
    vertical_direction,
)
from framecoach.gates.base import GateContext, PureGate
from framecoach.models.gate import GateCategory, GateResult, PositionMetadata
from framecoach.models.keypoints import BoundingBox
from framecoach.models.shot_type import keypoint_bbox

GRIDLINES = (1.0 / 3.0, 0.5, 2.0 / 3.0)


class PositionGate(PureGate):
    """Compares where the subject sits in the frame."""
    name = "Position"
    priority = 2
    base_threshold = 0.75
    fallback_threshold = 0.70

    OFFSET_THRESHOLD = 0.05
    OFFSET_PENALTY = 2.0
    MIN_SCORE = 0.1
    FALLBACK_OFFSET_THRESHOLD = 0.1

    def evaluate(self, context: GateContext) -> GateResult:
        reference = context.reference
        if reference is None:
            return self.reference_missing()

        live = context.live
        current = BodyStructure.extract(live.keypoints)
        target = BodyStructure.extract(reference.keypoints) if reference.keypoints else None
        if current is not None and target is not None:
            return self._keypoint_alignment(context, current, target)

        bbox = live.bbox or keypoint_bbox(live.keypoints)
        return self._rule_of_thirds(context, bbox)

    def _keypoint_alignment(
        self,
        context: GateContext,
        current: BodyStructure,
        target: BodyStructure
    ) -> GateResult:
        threshold = context.settings.threshold(self.base_threshold)
        score = 1.0
        feedback_parts: List[str] = []

        diff_x = current.centroid[0] - target.centroid[0]
        if abs(diff_x) > self.OFFSET_THRESHOLD:
            side = horizontal_direction(diff_x, context.live.camera_is_front)
            percent = int(abs(diff_x) * 100)
            feedback_parts.append(
                f"Move camera {side} {step_phrase_for_offset(abs(diff_x))} ({percent}%)"
            )
            score -= abs(diff_x) * self.OFFSET_PENALTY

        diff_y = 0.0
        if current.lowest_tier == target.lowest_tier:
            diff_y = current.top_anchor_y - target.top_anchor_y
            if abs(diff_y) > self.OFFSET_THRESHOLD:
                angle = tilt_angle(abs(diff_y) * 100)
                feedback_parts.append(f"Tilt camera {vertical_direction(diff_y)} {angle}°")
                score -= abs(diff_y) * self.OFFSET_PENALTY

        metadata = PositionMetadata(offset_x=diff_x, offset_y=diff_y)
        if not feedback_parts:
            return self.result(
                1.0, threshold, "Position matches the reference",
                GateCategory.POSITION_PERFECT, metadata=metadata,
            )

        return self.result(
            max(self.MIN_SCORE, score),
            threshold,
            "\n".join(feedback_parts),
            GateCategory.POSITION_KEYPOINT,
            debug_info=f"dx={diff_x:+.3f} dy={diff_y:+.3f} tiers {current.lowest_tier}/{target.lowest_tier}",
            metadata=metadata,
        )

    def _rule_of_thirds(self, context: GateContext, bbox: Optional[BoundingBox]) -> GateResult:
        threshold = context.settings.threshold(self.fallback_threshold)
        if bbox is None:
            return self.result(
                0.0, threshold, "Waiting for the subject position",
                GateCategory.POSITION_FALLBACK, debug_info="no bbox",
            )

        score = 1.0
        feedback_parts: List[str] = []

        offset_x = bbox.mid_x - min(GRIDLINES, key=lambda g: abs(bbox.mid_x - g))
        offset_y = bbox.mid_y - min(GRIDLINES, key=lambda g: abs(bbox.mid_y - g))

        if abs(offset_x) > self.FALLBACK_OFFSET_THRESHOLD:
            side = horizontal_direction(offset_x, context.live.camera_is_front)
            feedback_parts.append(f"Move camera {side} ({int(abs(offset_x) * 100)}%)")
        if abs(offset_y) > self.FALLBACK_OFFSET_THRESHOLD:
            feedback_parts.append(f"Tilt camera {vertical_direction(offset_y)} ({int(abs(offset_y) * 100)}%)")
        score -= abs(offset_x) + abs(offset_y)

        feedback = ", ".join(feedback_parts) if feedback_parts else "Position looks good"
        return self.result(
            score,
            threshold,
            feedback,
            GateCategory.POSITION_FALLBACK,
            debug_info=f"gridline offset x={offset_x:+.3f} y={offset_y:+.3f}",
            metadata=PositionMetadata(offset_x=offset_x, offset_y=offset_y),
        )
