"""
Shot-type classification.

Eight ordered levels, ordered by subject distance from the camera (lower =
closer). Classification looks at the lowest visible body landmark:

1. Collect the maximum Y of confident landmarks for each part, checked in
   the order face, shoulder, elbow, hip, knee, ankle
2. The part with the overall greatest Y decides the level
3. Hip level: a visible elbow means MEDIUM_SHOT, otherwise AMERICAN_SHOT
4. Shoulder level: more than 50 visible face landmarks means CLOSE_UP

When fewer than 17 keypoints are available, the normalized bounding-box
height is bucketed instead.
"""

from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

from framecoach.models.keypoints import (
    BoundingBox,
    FACE_INDICES,
    FEET_INDICES,
    Keypoint,
    NUM_BODY_KEYPOINTS,
)

DEFAULT_CONFIDENCE_THRESHOLD = 0.3
FEET_CONFIDENCE_THRESHOLD = 0.5
CLOSE_UP_FACE_LANDMARKS = 50
MAX_VISIBLE_Y = 1.05  # Allow landmarks slightly below the frame edge

# Ordered part groups; earlier parts win ties
PART_ORDER: List[Tuple[str, Tuple[int, ...]]] = [
    ("face", (0,)),
    ("shoulder", (5, 6)),
    ("elbow", (7, 8)),
    ("hip", (11, 12)),
    ("knee", (13, 14)),
    ("ankle", (15, 16)),
]

# Bounding-box height buckets (lower bound, shot type name)
BBOX_HEIGHT_BUCKETS = [
    (0.9, "FULL_SHOT"),
    (0.75, "MEDIUM_FULL_SHOT"),
    (0.6, "AMERICAN_SHOT"),
    (0.45, "MEDIUM_SHOT"),
    (0.3, "MEDIUM_CLOSE_UP"),
    (0.15, "CLOSE_UP"),
]

_DISPLAY_NAMES: Dict[int, str] = {
    0: "extreme close-up",
    1: "close-up",
    2: "bust shot",
    3: "waist shot",
    4: "thigh shot",
    5: "knee shot",
    6: "full body",
    7: "long shot",
}


def _is_visible(kp: Keypoint, threshold: float) -> bool:
    return kp.confidence > threshold and 0.0 <= kp.y <= MAX_VISIBLE_Y


class ShotType(IntEnum):
    """Framing level of the subject, ordered from closest to farthest."""
    EXTREME_CLOSE_UP = 0
    CLOSE_UP = 1
    MEDIUM_CLOSE_UP = 2
    MEDIUM_SHOT = 3
    AMERICAN_SHOT = 4
    MEDIUM_FULL_SHOT = 5
    FULL_SHOT = 6
    LONG_SHOT = 7

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[int(self)]

    def distance_to(self, other: "ShotType") -> int:
        """Signed level difference (self - other)."""
        return int(self) - int(other)

    @classmethod
    def from_keypoints(
        cls,
        keypoints: Sequence[Keypoint],
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    ) -> "ShotType":
        """
        Classify from the lowest visible body landmark.

        Args:
            keypoints: At least 17 body keypoints (more for face/feet)
            confidence_threshold: Minimum confidence for a landmark to count

        Returns:
            Shot type. Fewer than 17 keypoints falls back to MEDIUM_SHOT;
            callers that need "no subject" use classify().
        """
        if len(keypoints) < NUM_BODY_KEYPOINTS:
            return cls.MEDIUM_SHOT

        lowest_part: Optional[str] = None
        lowest_y = float("-inf")
        for part, indices in PART_ORDER:
            for idx in indices:
                kp = keypoints[idx]
                if _is_visible(kp, confidence_threshold) and kp.y > lowest_y:
                    lowest_y = kp.y
                    lowest_part = part

        has_feet = len(keypoints) > max(FEET_INDICES) and any(
            _is_visible(keypoints[i], FEET_CONFIDENCE_THRESHOLD) for i in FEET_INDICES
        )

        if lowest_part == "ankle" or has_feet:
            return cls.FULL_SHOT
        if lowest_part == "knee":
            return cls.MEDIUM_FULL_SHOT
        if lowest_part == "hip":
            has_elbow = any(_is_visible(keypoints[i], confidence_threshold) for i in (7, 8))
            return cls.MEDIUM_SHOT if has_elbow else cls.AMERICAN_SHOT
        if lowest_part == "elbow":
            return cls.MEDIUM_CLOSE_UP
        if lowest_part == "shoulder":
            face_count = 0
            if len(keypoints) > max(FACE_INDICES):
                face_count = sum(
                    1 for i in FACE_INDICES if _is_visible(keypoints[i], confidence_threshold)
                )
            if face_count > CLOSE_UP_FACE_LANDMARKS:
                return cls.CLOSE_UP
            return cls.MEDIUM_CLOSE_UP
        return cls.EXTREME_CLOSE_UP

    @classmethod
    def from_bbox_height(cls, height: float) -> "ShotType":
        """Bucket a normalized person height into a shot type."""
        for lower_bound, name in BBOX_HEIGHT_BUCKETS:
            if height > lower_bound:
                return cls[name]
        return cls.EXTREME_CLOSE_UP

    @classmethod
    def classify(
        cls,
        keypoints: Sequence[Keypoint],
        bbox: Optional[BoundingBox],
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    ) -> Optional["ShotType"]:
        """Keypoint classification with bbox fallback; None means no subject."""
        if len(keypoints) >= NUM_BODY_KEYPOINTS:
            return cls.from_keypoints(keypoints, confidence_threshold)
        if bbox is not None and bbox.height > 0:
            return cls.from_bbox_height(bbox.height)
        return None


def keypoint_bbox(
    keypoints: Sequence[Keypoint],
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    min_points: int = 5
) -> Optional[BoundingBox]:
    """Bounding box of the confident body and face keypoints."""
    points = [
        (kp.x, kp.y)
        for i, kp in enumerate(keypoints)
        if (i < NUM_BODY_KEYPOINTS or i in FACE_INDICES) and kp.confidence > confidence_threshold
    ]
    if len(points) < min_points:
        return None
    return BoundingBox.from_points(points)
