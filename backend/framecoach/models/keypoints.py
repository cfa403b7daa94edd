"""Keypoint and bounding box value types.

Keypoints follow the COCO-WholeBody layout produced by the pose model:
- 0..16   body (nose, eyes, ears, shoulders, elbows, wrists, hips, knees, ankles)
- 17..22  feet
- 23..90  face (68 landmarks)
- 91..132 hands

Coordinates are normalized to [0, 1] with the origin at the top-left, so a
larger y means lower in the frame.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple


class KeypointIndex(IntEnum):
    """Fixed semantic indices of the body keypoints."""
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


# Index groups
BODY_INDICES = range(0, 17)
HEAD_INDICES = range(0, 5)
FEET_INDICES = range(17, 23)
FACE_INDICES = range(23, 91)
HAND_INDICES = range(91, 133)

NUM_BODY_KEYPOINTS = 17
NUM_WHOLEBODY_KEYPOINTS = 133


@dataclass(frozen=True)
class Keypoint:
    """A single normalized keypoint with its detection confidence."""
    x: float
    y: float
    confidence: float

    def is_confident(self, threshold: float) -> bool:
        return self.confidence > threshold


@dataclass(frozen=True)
class BoundingBox:
    """Normalized axis-aligned box (top-left origin)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float]]) -> "BoundingBox":
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(
            x=min(xs),
            y=min(ys),
            width=max(xs) - min(xs),
            height=max(ys) - min(ys),
        )

    def cropped_edges(self, margin: float = 0.02) -> int:
        """Number of frame edges the box touches within `margin`."""
        edges = 0
        if self.x <= margin:
            edges += 1
        if self.max_x >= 1.0 - margin:
            edges += 1
        if self.y <= margin:
            edges += 1
        if self.max_y >= 1.0 - margin:
            edges += 1
        return edges


def keypoints_from_arrays(
    points: Sequence[Sequence[float]],
    confidences: Sequence[float]
) -> List[Keypoint]:
    """Zip raw (x, y) pairs and confidences into Keypoints."""
    if len(points) != len(confidences):
        raise ValueError(
            f"keypoints/confidences length mismatch: {len(points)} != {len(confidences)}"
        )
    return [
        Keypoint(x=float(p[0]), y=float(p[1]), confidence=float(c))
        for p, c in zip(points, confidences)
    ]


def confident_point(
    keypoints: Sequence[Keypoint],
    index: int,
    threshold: float
) -> Optional[Keypoint]:
    """Keypoint at `index` if present and above `threshold`."""
    if index >= len(keypoints):
        return None
    kp = keypoints[index]
    return kp if kp.confidence > threshold else None
