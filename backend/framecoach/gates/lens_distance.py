"""
Gate 3: lens (focal length) and camera-to-subject distance.

PIPELINE:
1. Current focal length from the zoom factor via the device lens table
2. Shoulder keypoints (5/6) EMA-smoothed across frames
3. Pinhole model: shoulder width -> physical distance
4. Compare focal length (10mm tolerance) and distance (0.3m tolerance) with
   the reference and pick one of four branches: both off, zoom only,
   distance only, matched
5. Debounce the message so it does not flicker with estimation noise
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from framecoach.cv.distance_estimator import estimate_distance
from framecoach.cv.keypoint_smoother import KeypointSmoother
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.directives import format_zoom
from framecoach.gates.base import GateContext, StatefulGate
from framecoach.models.gate import GateCategory, GateResult, LensDistanceMetadata
from framecoach.models.live import LiveMetrics
from framecoach.stability.debouncer import GuidanceDebouncer

logger = logging.getLogger(__name__)


@dataclass
class LensDistanceState:
    """Cross-frame state of the lens/distance gate."""
    smoother: KeypointSmoother = field(default_factory=KeypointSmoother)
    debouncer: GuidanceDebouncer = field(default_factory=GuidanceDebouncer)

    def reset(self):
        self.smoother.reset()
        self.debouncer.reset()


def _steps(distance_diff: float) -> str:
    count = max(1, int(abs(distance_diff) * 2))
    return f"{count} step" if count == 1 else f"{count} steps"


class LensDistanceGate(StatefulGate[LensDistanceState]):
    """Compares focal length and estimated distance with the reference."""
    name = "Lens/distance"
    priority = 3
    base_threshold = 0.70

    DISTANCE_TOLERANCE_M = 0.3
    FOCAL_TOLERANCE_MM = 10
    ESTIMATED_FOCAL_TOLERANCE_MM = 30  # Reference focal length came from an estimate
    FOCAL_SCORE_RANGE_MM = 50.0  # 50mm off -> focal score 0
    DISTANCE_SCORE_RANGE_M = 2.0  # 2m off -> distance score 0
    DEFAULT_REFERENCE_DISTANCE_M = 2.0
    SHOULDER_CONFIDENCE = 0.3
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6

    def __init__(
        self,
        lens_config: Optional[DeviceLensConfig] = None,
        state: Optional[LensDistanceState] = None
    ):
        super().__init__(state or LensDistanceState())
        self.lens_config = lens_config or DeviceLensConfig()

    def _missing(self, threshold: float, message: str) -> GateResult:
        return self.result(0.0, threshold, message, GateCategory.LENS_DISTANCE_MISSING)

    def _smoothed_shoulder_width(self, live: LiveMetrics) -> Optional[float]:
        """Smoothed shoulder width in pixels, or None when shoulders are not confident."""
        keypoints = live.keypoints
        if len(keypoints) <= self.RIGHT_SHOULDER:
            return None

        left = keypoints[self.LEFT_SHOULDER]
        right = keypoints[self.RIGHT_SHOULDER]
        if left.confidence <= self.SHOULDER_CONFIDENCE or right.confidence <= self.SHOULDER_CONFIDENCE:
            return None

        smoothed = self.state.smoother.smooth_shoulders(
            (left.x, left.y), (right.x, right.y), left.confidence, right.confidence
        )
        # X width only; vertical jitter does not change the apparent width
        return smoothed.width * live.image_width

    def evaluate(self, context: GateContext) -> GateResult:
        reference = context.reference
        if reference is None:
            return self.reference_missing()

        live = context.live
        settings = context.settings
        threshold = settings.threshold(self.base_threshold)

        if live.image_width <= 0:
            return self._missing(threshold, "Waiting for image info...")

        current_mm = self.lens_config.focal_length(settings.current_zoom_factor)

        shoulder_px = self._smoothed_shoulder_width(live)
        if shoulder_px is None:
            return self._missing(threshold, "Waiting for shoulders...")

        current_distance = estimate_distance(
            shoulder_px, live.image_width, current_mm, settings.body_type.shoulder_width_m
        )
        if current_distance is None:
            return self._missing(threshold, "Calculating distance...")

        if reference.focal_length is None:
            return self.result(
                1.0,
                threshold,
                f"No reference lens info (current: {current_mm}mm, {current_distance:.1f}m)",
                GateCategory.LENS_DISTANCE_SKIPPED,
                metadata=LensDistanceMetadata(current_mm, None, current_distance, None),
            )

        focal = reference.focal_length
        target_mm = focal.focal_length_35mm
        target_distance = reference.estimated_distance or self.DEFAULT_REFERENCE_DISTANCE_M
        focal_tolerance = (
            self.ESTIMATED_FOCAL_TOLERANCE_MM if focal.is_estimated else self.FOCAL_TOLERANCE_MM
        )

        focal_diff = current_mm - target_mm
        distance_diff = current_distance - target_distance
        needs_zoom = abs(focal_diff) > focal_tolerance
        needs_distance = abs(distance_diff) > self.DISTANCE_TOLERANCE_M

        focal_score = max(0.0, 1.0 - abs(focal_diff) / self.FOCAL_SCORE_RANGE_MM)
        distance_score = max(0.0, 1.0 - abs(distance_diff) / self.DISTANCE_SCORE_RANGE_M)

        if needs_zoom and needs_distance:
            score = (focal_score + distance_score) / 2.0
            feedback = self._combined_guidance(focal_diff, distance_diff, target_mm)
            category = GateCategory.LENS_DISTANCE_BOTH
        elif needs_zoom:
            score = focal_score
            feedback = self._zoom_guidance(focal_diff, current_mm, target_mm)
            category = GateCategory.LENS_ONLY
        elif needs_distance:
            score = distance_score
            feedback = self._distance_guidance(distance_diff, current_distance, target_distance)
            category = GateCategory.DISTANCE_ONLY
        else:
            score = 1.0
            feedback = f"Lens and distance match ({current_mm}mm, {current_distance:.1f}m)"
            category = GateCategory.LENS_DISTANCE_PERFECT

        if focal.is_estimated and category != GateCategory.LENS_DISTANCE_PERFECT:
            feedback += " (estimated)"

        debounced = self.state.debouncer.process(
            feedback,
            context.timestamp,
            category=category,
            distance=current_distance,
            focal_length=current_mm,
        )
        shown = debounced.feedback if debounced.feedback is not None else self.state.debouncer.current_feedback
        logger.debug(f"Lens/distance {category}: score={score:.2f} ({debounced.reason})")

        return self.result(
            score,
            threshold,
            shown,
            category,
            debug_info=(
                f"focal {current_mm}mm -> {target_mm}mm, "
                f"distance {current_distance:.1f}m -> {target_distance:.1f}m ({debounced.reason})"
            ),
            metadata=LensDistanceMetadata(current_mm, target_mm, current_distance, target_distance),
        )

    # ========================================================================
    # GUIDANCE TEXT
    # ========================================================================

    def _target_zoom_text(self, target_mm: int) -> str:
        return format_zoom(self.lens_config.zoom_for_focal_length(target_mm))

    def _combined_guidance(self, focal_diff: int, distance_diff: float, target_mm: int) -> str:
        zoom_text = self._target_zoom_text(target_mm)
        steps = _steps(distance_diff)

        if focal_diff < 0 and distance_diff < 0:
            # Too wide and too close: back off, then zoom in
            return f"Step back {steps}, then zoom in to {zoom_text}"
        if focal_diff < 0:
            # Too wide and too far: zooming in also closes the distance
            return f"Zoom in to {zoom_text}"
        if distance_diff > 0:
            # Too tight and too far: move in, then zoom out
            return f"Step forward {steps}, then zoom out to {zoom_text}"
        return f"Zoom out to {zoom_text}"

    def _zoom_guidance(self, focal_diff: int, current_mm: int, target_mm: int) -> str:
        action = "Zoom in" if focal_diff < 0 else "Zoom out"
        return f"{action} to {self._target_zoom_text(target_mm)} ({current_mm}mm → {target_mm}mm)"

    def _distance_guidance(self, distance_diff: float, current: float, target: float) -> str:
        direction = "back" if distance_diff < 0 else "forward"
        return f"Step {direction} {_steps(distance_diff)} ({current:.1f}m → {target:.1f}m)"
