"""
Gate 4: body pose.

The angle comparison itself comes from an external comparator
(LiveMetrics.pose_comparison). This gate only turns it into a score and
a short directive naming at most two body parts.
"""

from typing import List

from framecoach.gates.base import GateContext, PureGate
from framecoach.models.gate import GateCategory, GateResult

# Checked in this order; earlier parts are reported first
PART_PRIORITY = (
    "shoulder_tilt",
    "face",
    "left_arm",
    "right_arm",
    "left_leg",
    "right_leg",
    "left_hand",
    "right_hand",
)

FALLBACK_HINTS = {
    "shoulder_tilt": "Straighten your body tilt",
    "face": "Adjust your head direction",
    "left_arm": "Adjust your left arm angle",
    "right_arm": "Adjust your right arm angle",
    "left_leg": "Adjust your left leg angle",
    "right_leg": "Adjust your right leg angle",
    "left_hand": "Adjust your left hand",
    "right_hand": "Adjust your right hand",
}


class PoseGate(PureGate):
    """Scores pose accuracy reported by the pose comparator."""
    name = "Pose"
    priority = 4
    base_threshold = 0.80

    ANGLE_TOLERANCE_DEGREES = 15.0
    MAX_REPORTED_PARTS = 2

    def evaluate(self, context: GateContext) -> GateResult:
        if context.reference is None:
            return self.reference_missing()

        live = context.live
        threshold = context.settings.threshold(self.base_threshold)

        has_person = bool(live.keypoints) or (live.bbox is not None and live.bbox.area > 0)
        if not has_person:
            return self.result(
                0.0, threshold, "Subject not detected. Step into the frame",
                GateCategory.POSE_MISSING,
            )

        comparison = live.pose_comparison
        if comparison is None:
            return self.result(0.0, threshold, "Analyzing pose...", GateCategory.POSE_ANALYZING)

        tolerance = context.settings.angle_tolerance(self.ANGLE_TOLERANCE_DEGREES)
        parts: List[str] = []
        for part in PART_PRIORITY:
            diff = comparison.angle_differences.get(part)
            if diff is None or abs(diff) <= tolerance:
                continue
            parts.append(comparison.direction_hints.get(part) or FALLBACK_HINTS[part])
            if len(parts) >= self.MAX_REPORTED_PARTS:
                break

        feedback = ", ".join(parts) if parts else "Pose matches"
        return self.result(
            comparison.overall_accuracy,
            threshold,
            feedback,
            GateCategory.POSE,
            debug_info=f"accuracy: {int(comparison.overall_accuracy * 100)}%, tolerance {tolerance:.0f}°",
        )
