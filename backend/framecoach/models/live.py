"""Per-frame live metrics consumed by the gates."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from framecoach.models.camera import AspectRatio
from framecoach.models.keypoints import BoundingBox, Keypoint

# No-subject detection
MIN_SUBJECT_KEYPOINTS = 5
MIN_SUBJECT_BBOX_AREA = 0.01


@dataclass(frozen=True)
class PoseComparison:
    """Result of the external pose comparator for one frame."""
    overall_accuracy: float
    angle_differences: Dict[str, float] = field(default_factory=dict)  # part -> degrees
    direction_hints: Dict[str, str] = field(default_factory=dict)  # part -> text


@dataclass(frozen=True)
class LiveMetrics:
    """Immutable snapshot of one inference result."""
    keypoints: Tuple[Keypoint, ...]
    image_size: Tuple[float, float]
    bbox: Optional[BoundingBox] = None
    camera_is_front: bool = False
    depth_index: Optional[float] = None
    pose_comparison: Optional[PoseComparison] = None

    @property
    def image_width(self) -> float:
        return self.image_size[0]

    @property
    def image_height(self) -> float:
        return self.image_size[1]

    @property
    def aspect_ratio(self) -> AspectRatio:
        return AspectRatio.detect(self.image_width, self.image_height)

    @property
    def has_subject(self) -> bool:
        """False when there are too few keypoints and a negligible bbox."""
        bbox_area = self.bbox.area if self.bbox is not None else 0.0
        return not (
            len(self.keypoints) < MIN_SUBJECT_KEYPOINTS
            and bbox_area <= MIN_SUBJECT_BBOX_AREA
        )
