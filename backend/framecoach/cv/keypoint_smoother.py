"""
Temporal keypoint smoothing using a confidence-weighted Exponential Moving Average.

SMOOTHING STRATEGY:
1. EMA: smoothed = previous * (1 - a) + current * a
2. Confidence weighting: a is scaled by current/previous confidence, capped at 1.5x,
   so a low-confidence detection barely moves the estimate
3. First observation of a keypoint initializes it unchanged

Used for the shoulder keypoints feeding the distance estimate, where frame-to-frame
jitter would otherwise translate directly into distance jitter.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass
class SmoothedShoulders:
    """Smoothed shoulder pair (normalized coordinates)."""
    left: Tuple[float, float]
    right: Tuple[float, float]

    @property
    def width(self) -> float:
        """Horizontal shoulder width."""
        return abs(self.left[0] - self.right[0])


class KeypointSmoother:
    """
    EMA keypoint smoother.

    Features:
    - Per-index smoothing state, grown on demand
    - Confidence-weighted smoothing factor
    """

    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6

    MIN_ALPHA = 0.1
    MAX_ALPHA = 1.0
    MAX_CONFIDENCE_BOOST = 1.5  # New value can weigh at most 1.5x alpha
    MIN_PREVIOUS_CONFIDENCE = 0.1

    def __init__(self, alpha: float = 0.3):
        """
        Initialize smoother.

        Args:
            alpha: EMA smoothing factor, clamped to [0.1, 1.0]
                (small = smoother but laggier)
        """
        self.alpha = max(self.MIN_ALPHA, min(self.MAX_ALPHA, alpha))

        # keypoint_idx -> smoothed (x, y)
        self._locations: Dict[int, np.ndarray] = {}
        # keypoint_idx -> confidence of the last observation
        self._confidences: Dict[int, float] = {}

    def _effective_alpha(self, confidence: float, previous_confidence: float) -> float:
        ratio = confidence / max(previous_confidence, self.MIN_PREVIOUS_CONFIDENCE)
        return self.alpha * min(ratio, self.MAX_CONFIDENCE_BOOST)

    def smooth_single(
        self,
        index: int,
        location: Tuple[float, float],
        confidence: float = 1.0
    ) -> Tuple[float, float]:
        """Smooth one keypoint and return the new estimate."""
        current = np.asarray(location, dtype=float)

        if index not in self._locations:
            self._locations[index] = current
            self._confidences[index] = confidence
            return float(current[0]), float(current[1])

        a = self._effective_alpha(confidence, self._confidences[index])
        smoothed = self._locations[index] * (1.0 - a) + current * a

        self._locations[index] = smoothed
        self._confidences[index] = confidence
        return float(smoothed[0]), float(smoothed[1])

    def smooth_shoulders(
        self,
        left: Tuple[float, float],
        right: Tuple[float, float],
        left_confidence: float = 1.0,
        right_confidence: float = 1.0
    ) -> SmoothedShoulders:
        """Smooth the shoulder pair used for distance estimation."""
        return SmoothedShoulders(
            left=self.smooth_single(self.LEFT_SHOULDER, left, left_confidence),
            right=self.smooth_single(self.RIGHT_SHOULDER, right, right_confidence),
        )

    def reset(self):
        """Reset all smoothing history."""
        self._locations.clear()
        self._confidences.clear()
