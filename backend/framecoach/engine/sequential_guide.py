"""
Sequential "one thing at a time" guide.

Stages, first match wins:
1. Idle: no reference
2. Frame entry: nobody detected, or the person is tiny
3. Shot type: step forward/back until the stable shot type matches
4. Horizontal position, then vertical position (tilt)
5. Size: person height within 20% of the reference
6. Zoom: focal length within 15% of the reference (resolved by the lens table)
7. Pose: keypoint similarity of at least 70%
8. Perfect

Each stage reports an overall progress so the UI can show how far along the
user is. Stabilization of the returned directive is done by GuideHysteresis.
"""

from typing import Optional

from framecoach.config import Settings
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.cv.pose_similarity import pose_similarity
from framecoach.directives import (
    horizontal_direction,
    step_phrase_for_level_distance,
    step_phrase_for_offset,
    step_phrase_for_size,
    tilt_angle,
    vertical_direction,
)
from framecoach.models.guide import FeedbackStage, GuideType, SimpleGuideResult
from framecoach.models.keypoints import NUM_BODY_KEYPOINTS, BoundingBox
from framecoach.models.live import LiveMetrics
from framecoach.models.reference import ReferenceData, ReferenceState, reference_data
from framecoach.models.shot_type import ShotType, keypoint_bbox
from framecoach.stability.shot_type_hysteresis import ShotTypeHysteresis

MAX_SHOT_LEVEL_DISTANCE = 7.0
MAX_POSITION_PERCENT = 50
POSITION_SCORE_RANGE = 0.5


class SequentialGuide:
    """Produces one raw directive per frame, checking stages in order."""

    def __init__(
        self,
        lens_config: Optional[DeviceLensConfig] = None,
        settings: Optional[Settings] = None
    ):
        settings = settings or Settings()
        self.lens_config = lens_config or DeviceLensConfig()
        self.confidence_threshold = settings.keypoint_confidence_threshold
        self.size_tolerance = settings.guide_size_tolerance
        self.position_tolerance_x = settings.guide_position_tolerance_x
        self.position_tolerance_y = settings.guide_position_tolerance_y
        self.zoom_tolerance = settings.guide_zoom_tolerance
        self.pose_threshold = settings.guide_pose_threshold
        self.min_person_height = settings.guide_min_person_height
        self.shot_type_hysteresis = ShotTypeHysteresis(settings.shot_type_stability_frames)

    def reset(self):
        self.shot_type_hysteresis.reset()

    def _reference_bbox(self, reference: ReferenceData) -> Optional[BoundingBox]:
        return keypoint_bbox(reference.keypoints, self.confidence_threshold) or reference.bbox

    def _current_bbox(self, live: LiveMetrics) -> Optional[BoundingBox]:
        return keypoint_bbox(live.keypoints, self.confidence_threshold) or live.bbox

    def _target_focal_length(self, reference: ReferenceData) -> Optional[int]:
        if reference.focal_length is not None:
            return reference.focal_length.focal_length_35mm
        if reference.zoom_factor is not None:
            return self.lens_config.focal_length(reference.zoom_factor)
        return None

    def evaluate(
        self,
        live: LiveMetrics,
        reference_state: ReferenceState,
        current_zoom: float = 1.0
    ) -> SimpleGuideResult:
        """
        Pick the first unmet stage for this frame.

        Args:
            live: Current frame metrics
            reference_state: Unset or the active baseline
            current_zoom: Camera zoom factor

        Returns:
            Raw (unstabilized) guide result
        """
        reference = reference_data(reference_state)
        if reference is None:
            return SimpleGuideResult(
                guide=GuideType.IDLE,
                magnitude="",
                progress=0.0,
                debug_info="no reference",
                shot_type_match=False,
                current_shot_type="none",
                target_shot_type="none",
                feedback_stage=FeedbackStage.IDLE,
            )

        target = reference.shot_type
        target_name = target.display_name

        def result(guide, progress, debug_info, stage, current_name="none", shot_match=False, magnitude="", **extra):
            return SimpleGuideResult(
                guide=guide,
                magnitude=magnitude,
                progress=min(max(progress, 0.0), 1.0),
                debug_info=debug_info,
                shot_type_match=shot_match,
                current_shot_type=current_name,
                target_shot_type=target_name,
                feedback_stage=stage,
                **extra,
            )

        # Frame entry
        bbox = self._current_bbox(live) if live.has_subject else None
        if bbox is None:
            return result(GuideType.ENTER_FRAME, 0.0, "no person detected", FeedbackStage.FRAME_ENTRY)
        if bbox.height < self.min_person_height:
            return result(
                GuideType.ENTER_FRAME, 0.1, f"person too small: {bbox.height:.2f}",
                FeedbackStage.FRAME_ENTRY, current_name="too far",
            )

        # Shot type
        raw_shot_type = ShotType.classify(live.keypoints, bbox, self.confidence_threshold)
        if raw_shot_type is None:
            return result(GuideType.ENTER_FRAME, 0.1, "shot type unknown", FeedbackStage.FRAME_ENTRY)
        shot_type = self.shot_type_hysteresis.update(raw_shot_type)
        current_name = shot_type.display_name

        level_diff = shot_type.distance_to(target)
        if level_diff != 0:
            shot_score = 1.0 - min(abs(level_diff) / MAX_SHOT_LEVEL_DISTANCE, 1.0)
            # Lower level = closer to the camera
            guide = GuideType.MOVE_BACKWARD if level_diff < 0 else GuideType.MOVE_FORWARD
            return result(
                guide, 0.3 + shot_score * 0.3,
                f"shot type {current_name} -> {target_name}",
                FeedbackStage.SHOT_TYPE, current_name,
                magnitude=step_phrase_for_level_distance(level_diff),
            )

        ref_bbox = self._reference_bbox(reference)
        if ref_bbox is not None:
            # Position
            diff_x = bbox.mid_x - ref_bbox.mid_x
            diff_y = bbox.mid_y - ref_bbox.mid_y
            score_x = 1.0 - min(abs(diff_x) / POSITION_SCORE_RANGE, 1.0)
            score_y = 1.0 - min(abs(diff_y) / POSITION_SCORE_RANGE, 1.0)
            position_score = (score_x + score_y) / 2.0

            if abs(diff_x) > self.position_tolerance_x:
                side = horizontal_direction(diff_x, live.camera_is_front)
                return result(
                    GuideType.MOVE_RIGHT if side == "right" else GuideType.MOVE_LEFT,
                    0.6 + position_score * 0.2,
                    f"horizontal offset {diff_x * 100:+.0f}%",
                    FeedbackStage.POSITION, current_name, True,
                    magnitude=step_phrase_for_offset(abs(diff_x)),
                    position_percent=min(MAX_POSITION_PERCENT, int(abs(diff_x) * 100)),
                )

            if abs(diff_y) > self.position_tolerance_y:
                side = vertical_direction(diff_y)
                return result(
                    GuideType.TILT_DOWN if side == "down" else GuideType.TILT_UP,
                    0.6 + position_score * 0.1,
                    f"vertical offset {diff_y * 100:+.0f}%",
                    FeedbackStage.POSITION, current_name, True,
                    tilt_angle=tilt_angle(abs(diff_y) * 100),
                )

            # Size
            size_ratio = bbox.height / max(ref_bbox.height, 0.01)
            size_score = 1.0 - min(abs(1.0 - size_ratio), 1.0)
            if size_ratio < 1.0 - self.size_tolerance or size_ratio > 1.0 + self.size_tolerance:
                guide = GuideType.MOVE_FORWARD if size_ratio < 1.0 else GuideType.MOVE_BACKWARD
                return result(
                    guide, 0.7 + size_score * 0.2,
                    f"size {size_ratio * 100:.0f}% (target 100%)",
                    FeedbackStage.ZOOM, current_name, True,
                    magnitude=step_phrase_for_size(abs(1.0 - size_ratio)),
                )

        # Zoom
        target_mm = self._target_focal_length(reference)
        if target_mm:
            current_mm = self.lens_config.focal_length(current_zoom)
            if abs(1.0 - current_mm / target_mm) > self.zoom_tolerance:
                target_zoom = self.lens_config.zoom_for_focal_length(target_mm)
                return result(
                    GuideType.ZOOM_IN if current_mm < target_mm else GuideType.ZOOM_OUT,
                    0.85,
                    f"focal {current_mm}mm -> {target_mm}mm",
                    FeedbackStage.ZOOM, current_name, True,
                    current_zoom=current_zoom,
                    target_zoom=target_zoom,
                )

        # Pose
        if len(reference.keypoints) >= NUM_BODY_KEYPOINTS and len(live.keypoints) >= NUM_BODY_KEYPOINTS:
            similarity = pose_similarity(live.keypoints, reference.keypoints, self.confidence_threshold)
            if similarity < self.pose_threshold:
                return result(
                    GuideType.ADJUST_POSE, 0.9,
                    f"pose similarity {similarity * 100:.0f}%",
                    FeedbackStage.POSE, current_name, True,
                )

        return result(
            GuideType.PERFECT, 1.0,
            "shot type, position, size, zoom and pose match",
            FeedbackStage.PERFECT, current_name, True,
        )
