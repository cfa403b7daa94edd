"""Value types shared by the gates, stabilizers and the evaluation session."""

from framecoach.models.keypoints import BoundingBox, Keypoint, KeypointIndex, keypoints_from_arrays
from framecoach.models.camera import AspectRatio, BodyType
from framecoach.models.shot_type import ShotType, keypoint_bbox
from framecoach.models.gate import (
    FramingMetadata,
    GateCategory,
    GateEvaluation,
    GateResult,
    LensDistanceMetadata,
    PositionMetadata,
)
from framecoach.models.reference import (
    UNSET,
    Baseline,
    FocalLengthInfo,
    FocalLengthSource,
    ReferenceData,
    ReferenceState,
    Unset,
    reference_data,
)
from framecoach.models.live import LiveMetrics, PoseComparison
from framecoach.models.guide import FeedbackStage, GuideType, SimpleGuideResult

__all__ = [
    "BoundingBox",
    "Keypoint",
    "KeypointIndex",
    "keypoints_from_arrays",
    "AspectRatio",
    "BodyType",
    "ShotType",
    "keypoint_bbox",
    "FramingMetadata",
    "GateCategory",
    "GateEvaluation",
    "GateResult",
    "LensDistanceMetadata",
    "PositionMetadata",
    "UNSET",
    "Baseline",
    "FocalLengthInfo",
    "FocalLengthSource",
    "ReferenceData",
    "ReferenceState",
    "Unset",
    "reference_data",
    "LiveMetrics",
    "PoseComparison",
    "FeedbackStage",
    "GuideType",
    "SimpleGuideResult",
]
