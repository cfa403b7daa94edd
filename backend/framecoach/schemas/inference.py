"""Inference payload schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from framecoach.models.camera import AspectRatio
from framecoach.models.keypoints import BoundingBox, keypoints_from_arrays
from framecoach.models.live import LiveMetrics, PoseComparison


def _check_lengths(keypoints: List[List[float]], confidences: List[float]) -> None:
    if len(keypoints) != len(confidences):
        raise ValueError(
            f"keypoints and confidences must have the same length "
            f"({len(keypoints)} != {len(confidences)})"
        )
    for point in keypoints:
        if len(point) != 2:
            raise ValueError(f"keypoint must be [x, y], got {point}")


def _bbox(values: Optional[List[float]]) -> Optional[BoundingBox]:
    if values is None:
        return None
    x, y, width, height = values
    return BoundingBox(x=x, y=y, width=width, height=height)


class InferenceResult(BaseModel):
    """Per-frame output of the pose/depth models for the live camera."""
    keypoints: List[List[float]] = Field(default_factory=list, description="Normalized [x, y] pairs")
    confidences: List[float] = Field(default_factory=list)
    rough_bbox: Optional[List[float]] = Field(None, description="Normalized [x, y, width, height]")
    depth_index: Optional[float] = None
    image_width: float = Field(..., ge=0)
    image_height: float = Field(..., ge=0)
    camera_is_front: bool = False

    @field_validator("rough_bbox")
    @classmethod
    def validate_bbox(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        if v is not None and len(v) != 4:
            raise ValueError("rough_bbox must be [x, y, width, height]")
        return v

    @model_validator(mode="after")
    def validate_lengths(self) -> "InferenceResult":
        _check_lengths(self.keypoints, self.confidences)
        return self

    def to_live_metrics(self, pose_comparison: Optional[PoseComparison] = None) -> LiveMetrics:
        return LiveMetrics(
            keypoints=tuple(keypoints_from_arrays(self.keypoints, self.confidences)),
            image_size=(self.image_width, self.image_height),
            bbox=_bbox(self.rough_bbox),
            camera_is_front=self.camera_is_front,
            depth_index=self.depth_index,
            pose_comparison=pose_comparison,
        )


class ReferenceAnalysis(BaseModel):
    """
    One-time analysis of the reference photo.

    Focal length sources, in order of preference:
    - exif_focal_length_35mm: read from the photo metadata
    - depth_estimated_focal_length: estimated by the depth model
      (depth_focal_confidence says how much to trust it)
    - zoom_factor: resolved through the device lens table
    """
    keypoints: List[List[float]] = Field(default_factory=list)
    confidences: List[float] = Field(default_factory=list)
    bbox: Optional[List[float]] = Field(None, description="Normalized [x, y, width, height]")
    image_width: float = Field(..., gt=0)
    image_height: float = Field(..., gt=0)
    aspect_ratio: Optional[str] = None  # Detected from the image size when omitted
    exif_focal_length_35mm: Optional[int] = Field(None, gt=0)
    depth_estimated_focal_length: Optional[int] = Field(None, gt=0)
    depth_focal_confidence: float = Field(0.5, ge=0, le=1)
    compression_index: Optional[float] = None
    zoom_factor: Optional[float] = Field(None, gt=0)

    @field_validator("bbox")
    @classmethod
    def validate_bbox(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        if v is not None and len(v) != 4:
            raise ValueError("bbox must be [x, y, width, height]")
        return v

    @field_validator("aspect_ratio")
    @classmethod
    def validate_aspect_ratio(cls, v: Optional[str]) -> Optional[str]:
        valid = [ratio.value for ratio in AspectRatio.all()]
        if v is not None and v not in valid:
            raise ValueError(f"aspect_ratio must be one of: {valid}")
        return v

    @model_validator(mode="after")
    def validate_lengths(self) -> "ReferenceAnalysis":
        _check_lengths(self.keypoints, self.confidences)
        return self

    @property
    def resolved_aspect_ratio(self) -> AspectRatio:
        if self.aspect_ratio is not None:
            return AspectRatio(self.aspect_ratio)
        return AspectRatio.detect(self.image_width, self.image_height)

    @property
    def bounding_box(self) -> Optional[BoundingBox]:
        return _bbox(self.bbox)
