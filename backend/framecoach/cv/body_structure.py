"""
Body structure extraction.

Reduces a keypoint array to the few anchors the position logic compares:
- centroid: mean of the confident core points (head, shoulders, hips)
- top anchor: highest head point (face landmarks/shoulders as fallback)
- lowest tier: how far down the body is visible (0 shoulder .. 3 feet)
- span: vertical distance from the top anchor to the lowest visible tier
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from framecoach.models.keypoints import FACE_INDICES, FEET_INDICES, HEAD_INDICES, Keypoint

CONFIDENCE_THRESHOLD = 0.3
MIN_CORE_POINTS = 3

CORE_INDICES = (0, 1, 2, 3, 4, 5, 6, 11, 12)
SHOULDER_INDICES = (5, 6)
HIP_INDICES = (11, 12)
KNEE_INDICES = (13, 14)
ANKLE_INDICES = (15, 16)


@dataclass(frozen=True)
class BodyStructure:
    """Compact per-frame body anchors."""
    centroid: Tuple[float, float]
    top_anchor_y: float
    span_y: float
    lowest_tier: int  # 0 shoulder-only, 1 hip, 2 knee, 3 ankle/feet

    @classmethod
    def extract(
        cls,
        keypoints: Sequence[Keypoint],
        confidence_threshold: float = CONFIDENCE_THRESHOLD
    ) -> Optional["BodyStructure"]:
        """Derive the structure, or None when the anchors are not visible."""

        def visible_y(indices) -> List[float]:
            return [
                keypoints[i].y for i in indices
                if i < len(keypoints) and keypoints[i].confidence > confidence_threshold
            ]

        def visible_xy(indices) -> List[Tuple[float, float]]:
            return [
                (keypoints[i].x, keypoints[i].y) for i in indices
                if i < len(keypoints) and keypoints[i].confidence > confidence_threshold
            ]

        core = visible_xy(CORE_INDICES)
        if len(core) < MIN_CORE_POINTS:
            core.extend(visible_xy(FACE_INDICES))
        if not core:
            return None

        centroid = (
            sum(p[0] for p in core) / len(core),
            sum(p[1] for p in core) / len(core),
        )

        # Lowest visible tier, checked from the feet upwards
        feet = visible_y(ANKLE_INDICES + tuple(FEET_INDICES))
        knees = visible_y(KNEE_INDICES)
        hips = visible_y(HIP_INDICES)
        shoulders = visible_y(SHOULDER_INDICES)
        if feet:
            tier, bottom_y = 3, max(feet)
        elif knees:
            tier, bottom_y = 2, max(knees)
        elif hips:
            tier, bottom_y = 1, max(hips)
        elif shoulders:
            tier, bottom_y = 0, max(shoulders)
        else:
            return None

        head = visible_y(HEAD_INDICES)
        if head:
            top_y = min(head)
        else:
            fallback = visible_y(FACE_INDICES) + shoulders
            if not fallback:
                return None
            top_y = min(fallback)

        return cls(
            centroid=centroid,
            top_anchor_y=top_y,
            span_y=max(0.0, bottom_y - top_y),
            lowest_tier=tier,
        )
