"""Keypoint-layout similarity between the live subject and the reference."""

from typing import Sequence

import numpy as np

from framecoach.models.keypoints import Keypoint
from framecoach.models.shot_type import keypoint_bbox

# Nose, shoulders, elbows, wrists, hips, knees, ankles
POSE_INDICES = (0, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16)
CONFIDENCE_THRESHOLD = 0.3
NEUTRAL_SIMILARITY = 0.5  # Returned when nothing can be compared
MIN_BOX_SIDE = 0.01


def _relative_positions(keypoints: Sequence[Keypoint], indices: Sequence[int]) -> np.ndarray:
    bbox = keypoint_bbox(keypoints)
    origin = np.array([bbox.x, bbox.y])
    size = np.array([max(bbox.width, MIN_BOX_SIDE), max(bbox.height, MIN_BOX_SIDE)])
    points = np.array([[keypoints[i].x, keypoints[i].y] for i in indices], dtype=float)
    return (points - origin) / size


def pose_similarity(
    current: Sequence[Keypoint],
    reference: Sequence[Keypoint],
    confidence_threshold: float = CONFIDENCE_THRESHOLD
) -> float:
    """
    Compare body layouts after normalizing each to its own keypoint bbox.

    Each landmark confident in both poses scores max(0, 1 - 2 * distance)
    in bbox-relative units; the result is the mean score.

    Returns:
        Similarity in [0, 1], or 0.5 when no landmark can be compared
    """
    if keypoint_bbox(current) is None or keypoint_bbox(reference) is None:
        return NEUTRAL_SIMILARITY

    indices = [
        i for i in POSE_INDICES
        if i < len(current) and i < len(reference)
        and current[i].confidence >= confidence_threshold
        and reference[i].confidence >= confidence_threshold
    ]
    if not indices:
        return NEUTRAL_SIMILARITY

    distances = np.linalg.norm(
        _relative_positions(current, indices) - _relative_positions(reference, indices),
        axis=1,
    )
    scores = np.clip(1.0 - distances * 2.0, 0.0, None)
    return float(np.mean(scores))
