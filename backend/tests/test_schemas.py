"""Inference payload schemas and reference building."""

import logging

import pytest
from pydantic import ValidationError

from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.engine.reference_builder import build_reference, resolve_focal_length, shoulder_ratio
from framecoach.models.camera import AspectRatio, BodyType
from framecoach.models.keypoints import BoundingBox, Keypoint
from framecoach.models.live import PoseComparison
from framecoach.models.reference import FocalLengthSource
from framecoach.models.shot_type import ShotType
from framecoach.schemas import InferenceResult, ReferenceAnalysis

from helpers import body_keypoints, keypoints_payload, reference_analysis


class TestInferenceResult:
    def test_to_live_metrics(self):
        points, confidences = keypoints_payload(body_keypoints())
        payload = InferenceResult(
            keypoints=points,
            confidences=confidences,
            rough_bbox=[0.3, 0.1, 0.4, 0.8],
            image_width=1080,
            image_height=1920,
            camera_is_front=True,
        )
        live = payload.to_live_metrics(PoseComparison(overall_accuracy=0.9))

        assert len(live.keypoints) == 17
        assert live.keypoints[5] == Keypoint(x=0.42, y=0.25, confidence=0.9)
        assert live.bbox == BoundingBox(x=0.3, y=0.1, width=0.4, height=0.8)
        assert live.camera_is_front
        assert live.aspect_ratio == AspectRatio.RATIO_16_9
        assert live.pose_comparison.overall_accuracy == 0.9

    def test_empty_frame(self):
        live = InferenceResult(image_width=1080, image_height=1920).to_live_metrics()
        assert live.keypoints == ()
        assert not live.has_subject

    def test_length_mismatch_rejected(self):
        with pytest.raises(ValidationError):
            InferenceResult(keypoints=[[0.5, 0.5]], confidences=[], image_width=1, image_height=1)

    def test_malformed_point_rejected(self):
        with pytest.raises(ValidationError):
            InferenceResult(keypoints=[[0.5, 0.5, 0.1]], confidences=[0.9], image_width=1, image_height=1)

    def test_malformed_bbox_rejected(self):
        with pytest.raises(ValidationError):
            InferenceResult(rough_bbox=[0.1, 0.2, 0.3], image_width=1, image_height=1)

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            InferenceResult(image_width=-1, image_height=1)


class TestReferenceAnalysis:
    def test_aspect_ratio_detected_from_size(self):
        assert reference_analysis().resolved_aspect_ratio == AspectRatio.RATIO_16_9

    def test_explicit_aspect_ratio(self):
        assert reference_analysis(aspect_ratio="4:3").resolved_aspect_ratio == AspectRatio.RATIO_4_3

    def test_unknown_aspect_ratio_rejected(self):
        with pytest.raises(ValidationError):
            reference_analysis(aspect_ratio="3:2")

    def test_focal_confidence_range(self):
        with pytest.raises(ValidationError):
            reference_analysis(depth_focal_confidence=1.5)

    def test_zero_image_size_rejected(self):
        with pytest.raises(ValidationError):
            reference_analysis(image_size=(0, 1920))


class TestResolveFocalLength:
    def test_exif_wins(self):
        analysis = reference_analysis(depth_estimated_focal_length=50, zoom_factor=2.0)
        focal = resolve_focal_length(analysis, DeviceLensConfig())
        assert focal.focal_length_35mm == 24
        assert focal.source == FocalLengthSource.EXIF
        assert not focal.is_estimated

    def test_depth_estimate(self):
        analysis = reference_analysis(
            exif_focal_length_35mm=None, depth_estimated_focal_length=35, depth_focal_confidence=0.9
        )
        focal = resolve_focal_length(analysis, DeviceLensConfig())
        assert focal.focal_length_35mm == 35
        assert focal.source == FocalLengthSource.DEPTH_ESTIMATE
        assert focal.confidence == 0.9
        assert focal.is_estimated

    def test_zoom_factor_fallback(self):
        analysis = reference_analysis(exif_focal_length_35mm=None, zoom_factor=3.0)
        focal = resolve_focal_length(analysis, DeviceLensConfig("iPhone16,1"))
        assert focal.focal_length_35mm == 77
        assert focal.source == FocalLengthSource.FALLBACK
        assert focal.confidence == 0.5

    def test_unknown(self):
        assert resolve_focal_length(reference_analysis(exif_focal_length_35mm=None), DeviceLensConfig()) is None


class TestBuildReference:
    def test_full_body_reference(self, full_body_reference):
        reference = full_body_reference
        assert reference.shot_type == ShotType.FULL_SHOT
        assert reference.aspect_ratio == AspectRatio.RATIO_16_9
        assert reference.bbox.height == pytest.approx(0.75)
        assert reference.shoulder_ratio == pytest.approx(0.16)
        assert reference.estimated_distance == pytest.approx(1.734, abs=0.001)

    def test_body_type_scales_distance(self):
        small = build_reference(reference_analysis(), body_type=BodyType.SMALL)
        large = build_reference(reference_analysis(), body_type=BodyType.LARGE)
        assert small.estimated_distance < large.estimated_distance

    def test_bbox_only_reference(self):
        analysis = ReferenceAnalysis(bbox=[0.3, 0.04, 0.4, 0.93], image_width=1080, image_height=1920)
        reference = build_reference(analysis)
        assert reference.shot_type == ShotType.FULL_SHOT
        assert reference.shoulder_ratio is None
        assert reference.estimated_distance is None
        assert reference.focal_length is None

    def test_empty_reference_defaults_to_medium_shot(self, caplog):
        analysis = ReferenceAnalysis(image_width=1080, image_height=1920)
        with caplog.at_level(logging.WARNING):
            reference = build_reference(analysis)
        assert reference.shot_type == ShotType.MEDIUM_SHOT
        assert "No subject found" in caplog.text

    def test_shoulder_ratio_needs_both_shoulders(self):
        keypoints = body_keypoints(visible=[i for i in range(17) if i != 6])
        assert shoulder_ratio(keypoints) is None
        assert shoulder_ratio(body_keypoints()) == pytest.approx(0.16)
