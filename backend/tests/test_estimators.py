"""BodyStructure, keypoint smoother, pinhole distance estimator and lens resolver tests."""

import pytest

from framecoach.cv.body_structure import BodyStructure
from framecoach.cv.distance_estimator import (
    SENSOR_REFERENCE_WIDTH_MM,
    estimate_distance,
    shoulder_ratio_for_distance,
)
from framecoach.cv.keypoint_smoother import KeypointSmoother
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.cv.pose_similarity import NEUTRAL_SIMILARITY, pose_similarity
from framecoach.models.keypoints import Keypoint

from helpers import BUST_VISIBLE, body_keypoints


class TestBodyStructure:
    def test_full_body(self):
        structure = BodyStructure.extract(body_keypoints())
        assert structure.lowest_tier == 3
        assert structure.top_anchor_y == pytest.approx(0.13)
        assert structure.span_y == pytest.approx(0.75)
        assert structure.centroid[0] == pytest.approx(0.5)

    @pytest.mark.parametrize("visible, tier", [
        (range(0, 15), 2),
        (range(0, 13), 1),
        (BUST_VISIBLE, 0),
    ])
    def test_lowest_tier(self, visible, tier):
        assert BodyStructure.extract(body_keypoints(visible=visible)).lowest_tier == tier

    def test_shift_moves_centroid(self):
        base = BodyStructure.extract(body_keypoints())
        shifted = BodyStructure.extract(body_keypoints(dx=0.1, dy=0.05))
        assert shifted.centroid[0] - base.centroid[0] == pytest.approx(0.1)
        assert shifted.top_anchor_y - base.top_anchor_y == pytest.approx(0.05)

    def test_absent_without_body_anchors(self):
        assert BodyStructure.extract(body_keypoints(visible=range(0, 5))) is None
        assert BodyStructure.extract(body_keypoints(confidence=0.1)) is None
        assert BodyStructure.extract(()) is None

    def test_span_is_never_negative(self):
        # Shoulders above the head anchor
        keypoints = list(body_keypoints(visible=BUST_VISIBLE))
        keypoints[5] = Keypoint(0.42, 0.05, 0.9)
        keypoints[6] = Keypoint(0.58, 0.05, 0.9)
        assert BodyStructure.extract(keypoints).span_y == 0.0


class TestKeypointSmoother:
    def test_first_observation_is_unchanged(self):
        assert KeypointSmoother().smooth_single(5, (0.4, 0.2), 0.9) == pytest.approx((0.4, 0.2))

    def test_equal_confidence_uses_alpha(self):
        smoother = KeypointSmoother(alpha=0.3)
        smoother.smooth_single(5, (0.0, 0.0), 0.8)
        assert smoother.smooth_single(5, (1.0, 1.0), 0.8) == pytest.approx((0.3, 0.3))

    def test_confidence_boost_is_capped(self):
        smoother = KeypointSmoother(alpha=0.3)
        smoother.smooth_single(5, (0.0, 0.0), 0.4)
        # Ratio 2.25 is capped at 1.5: a = 0.45
        assert smoother.smooth_single(5, (1.0, 1.0), 0.9) == pytest.approx((0.45, 0.45))

    def test_low_confidence_barely_moves(self):
        smoother = KeypointSmoother(alpha=0.3)
        smoother.smooth_single(5, (0.0, 0.0), 0.9)
        assert smoother.smooth_single(5, (1.0, 1.0), 0.09) == pytest.approx((0.03, 0.03))

    @pytest.mark.parametrize("alpha, expected", [(0.01, 0.1), (0.5, 0.5), (2.0, 1.0)])
    def test_alpha_is_clamped(self, alpha, expected):
        assert KeypointSmoother(alpha=alpha).alpha == expected

    def test_shoulder_width_is_smoothed(self):
        smoother = KeypointSmoother(alpha=0.3)
        assert smoother.smooth_shoulders((0.42, 0.25), (0.58, 0.25)).width == pytest.approx(0.16)
        assert smoother.smooth_shoulders((0.40, 0.25), (0.60, 0.25)).width == pytest.approx(0.172)

    def test_reset(self):
        smoother = KeypointSmoother()
        smoother.smooth_single(5, (0.0, 0.0))
        smoother.reset()
        assert smoother.smooth_single(5, (1.0, 1.0)) == pytest.approx((1.0, 1.0))


class TestDistanceEstimator:
    def test_two_meter_round_trip(self):
        ratio = 0.40 * 24 / (2.0 * SENSOR_REFERENCE_WIDTH_MM)
        distance = estimate_distance(ratio * 1080, 1080, 24, 0.40)
        assert distance == pytest.approx(2.0, rel=0.01)

    def test_inverse(self):
        ratio = shoulder_ratio_for_distance(3.0, 48)
        assert estimate_distance(ratio, 1.0, 48) == pytest.approx(3.0)

    def test_wider_shoulders_are_farther(self):
        assert estimate_distance(0.2, 1.0, 24, 0.46) > estimate_distance(0.2, 1.0, 24, 0.34)

    @pytest.mark.parametrize("width, image_width, focal", [
        (0, 1080, 24),
        (100, 0, 24),
        (100, 1080, 0),
        (5, 1080, 24),  # shoulders under 1% of the frame
        (1070, 1080, 13),  # closer than 0.3m
    ])
    def test_degenerate_inputs_give_none(self, width, image_width, focal):
        assert estimate_distance(width, image_width, focal) is None


class TestDeviceLensConfig:
    def test_exact_anchors(self):
        lens = DeviceLensConfig()
        assert lens.focal_length(1.0) == 24
        assert lens.focal_length(0.5) == 13
        assert lens.focal_length(2.0) == 48

    @pytest.mark.parametrize("zoom, expected", [
        (1.5, 36),
        (3.0, 72),
        (0.7, 18),
        (0.3, 7),
    ])
    def test_digital_zoom_scales_lower_anchor(self, zoom, expected):
        assert DeviceLensConfig().focal_length(zoom) == expected

    def test_zoom_for_focal_length(self):
        lens = DeviceLensConfig()
        assert lens.zoom_for_focal_length(48) == pytest.approx(2.0)
        assert lens.zoom_for_focal_length(36) == pytest.approx(1.5)
        assert lens.zoom_for_focal_length(10) == pytest.approx(0.5 * 10 / 13)
        with pytest.raises(ValueError):
            lens.zoom_for_focal_length(0)

    def test_known_device_table(self):
        lens = DeviceLensConfig("iPhone16,1")
        assert lens.focal_length(3.0) == 77
        assert lens.available_physical_zooms == [0.5, 1.0, 2.0, 3.0]
        assert lens.is_physical_lens(2.0)
        assert not lens.is_physical_lens(1.5)

    def test_unknown_device_uses_default(self):
        assert DeviceLensConfig("Pixel 9").table == {0.5: 13, 1.0: 24, 2.0: 48}

    def test_empty_table_rejected(self):
        with pytest.raises(ValueError):
            DeviceLensConfig(table={})


class TestPoseSimilarity:
    def test_identical_poses(self):
        assert pose_similarity(body_keypoints(), body_keypoints()) == pytest.approx(1.0)

    def test_translation_does_not_matter(self):
        assert pose_similarity(body_keypoints(dx=0.1, dy=0.05), body_keypoints()) == pytest.approx(1.0)

    def test_different_pose_scores_lower(self):
        raised = list(body_keypoints())
        raised[9] = Keypoint(0.30, 0.05, 0.9)  # left wrist above the head
        raised[10] = Keypoint(0.70, 0.05, 0.9)
        assert pose_similarity(raised, body_keypoints()) < 0.9

    def test_nothing_comparable_is_neutral(self):
        assert pose_similarity(body_keypoints(confidence=0.1), body_keypoints()) == NEUTRAL_SIMILARITY
