"""
Reference baseline.

A ReferenceData snapshot is created once per reference-photo analysis and
replaced wholesale when the user picks a new photo. The session holds it
inside a ReferenceState sum type:

- Unset: no reference chosen, evaluation is idle
- Baseline(ReferenceData): live frames are compared against this snapshot
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from framecoach.models.camera import AspectRatio
from framecoach.models.keypoints import BoundingBox, Keypoint
from framecoach.models.shot_type import ShotType

# Focal lengths from estimates below this confidence are treated as unreliable
RELIABLE_FOCAL_CONFIDENCE = 0.8


class FocalLengthSource(Enum):
    EXIF = "exif"
    DEPTH_ESTIMATE = "depth_estimate"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FocalLengthInfo:
    """35mm-equivalent focal length of the reference photo."""
    focal_length_35mm: int
    source: FocalLengthSource = FocalLengthSource.EXIF
    confidence: float = 1.0

    @property
    def is_estimated(self) -> bool:
        return (
            self.source != FocalLengthSource.EXIF
            or self.confidence < RELIABLE_FOCAL_CONFIDENCE
        )


@dataclass(frozen=True)
class ReferenceData:
    """Immutable metrics of the reference photo."""
    bbox: Optional[BoundingBox]
    image_size: Tuple[float, float]
    aspect_ratio: AspectRatio
    keypoints: Tuple[Keypoint, ...]
    shot_type: ShotType
    focal_length: Optional[FocalLengthInfo] = None
    shoulder_ratio: Optional[float] = None  # Shoulder width / image width
    estimated_distance: Optional[float] = None  # Meters
    compression_index: Optional[float] = None
    zoom_factor: Optional[float] = None


@dataclass(frozen=True)
class Unset:
    """No reference has been chosen."""


@dataclass(frozen=True)
class Baseline:
    """An active reference."""
    data: ReferenceData


ReferenceState = Union[Unset, Baseline]

UNSET = Unset()


def reference_data(state: ReferenceState) -> Optional[ReferenceData]:
    """ReferenceData of a Baseline, None for Unset."""
    if isinstance(state, Baseline):
        return state.data
    if isinstance(state, Unset):
        return None
    raise TypeError(f"Unknown reference state: {state!r}")
