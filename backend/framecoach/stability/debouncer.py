"""
Guidance debouncing for lens/distance feedback.

Distance and focal-length feedback is recomputed every frame from noisy
estimates. Showing every recomputed message makes the text flicker, so a new
message only replaces the displayed one when:

1. The minimum interval has passed, or the change is urgent (category change
   or a significant numeric change)
2. Something meaningful changed: category, distance (>25% relative), focal
   length (>5mm) or the message text
3. Otherwise the same message is periodically re-emitted (5 repeats, >2s)
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class DebounceReason:
    """Why the debouncer did or did not update."""
    TOO_SOON = "too_soon"
    CATEGORY_CHANGED = "category_changed"
    SIGNIFICANT_CHANGE = "significant_change"
    MESSAGE_CHANGED = "message_changed"
    PERIODIC_REFRESH = "periodic_refresh"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class DebounceResult:
    """Outcome of one debounce call."""
    feedback: Optional[str]  # None = keep showing the previous feedback
    should_update: bool
    reason: str


class GuidanceDebouncer:
    """Time- and magnitude-gated feedback debouncer."""

    MIN_DISTANCE_FOR_RATIO = 0.1  # Below this, any distance counts as changed

    def __init__(
        self,
        min_interval: float = 0.5,
        distance_change_threshold: float = 0.25,
        focal_change_threshold: float = 5.0,
        refresh_repeats: int = 5,
        refresh_after: float = 2.0
    ):
        """
        Args:
            min_interval: Minimum seconds between routine updates
            distance_change_threshold: Relative distance change counted as significant
            focal_change_threshold: Focal length change (mm) counted as significant
            refresh_repeats: Unchanged calls before a periodic refresh
            refresh_after: Seconds since the last update before a periodic refresh
        """
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self.distance_change_threshold = distance_change_threshold
        self.focal_change_threshold = focal_change_threshold
        self.refresh_repeats = refresh_repeats
        self.refresh_after = refresh_after
        self.reset()

    def reset(self):
        """Forget all history; the next call always updates."""
        self._last_time = float("-inf")
        self._last_distance = 0.0
        self._last_focal = 0.0
        self._last_feedback = ""
        self._last_category = ""
        self._same_count = 0

    @property
    def current_feedback(self) -> str:
        return self._last_feedback

    def _record(self, feedback: str, category: str, distance: float, focal: float, timestamp: float):
        self._last_time = timestamp
        self._last_distance = distance
        self._last_focal = focal
        self._last_feedback = feedback
        self._last_category = category
        self._same_count = 0

    def process(
        self,
        feedback: str,
        timestamp: float,
        category: str = "",
        distance: float = 0.0,
        focal_length: float = 0.0
    ) -> DebounceResult:
        """
        Decide whether `feedback` should replace the displayed message.

        Args:
            feedback: Newly computed message
            timestamp: Current time in seconds
            category: Feedback category; a change always updates
            distance: Current distance estimate (m)
            focal_length: Current focal length (mm)
        """
        elapsed = timestamp - self._last_time

        category_changed = bool(category) and category != self._last_category
        if category_changed:
            previous = self._last_category
            self._record(feedback, category, distance, focal_length, timestamp)
            logger.debug(f"Debouncer: category {previous!r} -> {category!r}")
            return DebounceResult(feedback, True, DebounceReason.CATEGORY_CHANGED)

        if self._last_distance > self.MIN_DISTANCE_FOR_RATIO:
            distance_change = abs(distance - self._last_distance) / self._last_distance
        else:
            distance_change = 1.0
        focal_change = abs(focal_length - self._last_focal)

        if distance_change > self.distance_change_threshold or focal_change > self.focal_change_threshold:
            self._record(feedback, category, distance, focal_length, timestamp)
            return DebounceResult(feedback, True, DebounceReason.SIGNIFICANT_CHANGE)

        if elapsed < self.min_interval:
            return DebounceResult(None, False, DebounceReason.TOO_SOON)

        if feedback != self._last_feedback:
            self._record(feedback, category, distance, focal_length, timestamp)
            return DebounceResult(feedback, True, DebounceReason.MESSAGE_CHANGED)

        self._same_count += 1
        if self._same_count >= self.refresh_repeats and elapsed > self.refresh_after:
            self._last_time = timestamp
            self._same_count = 0
            return DebounceResult(self._last_feedback, True, DebounceReason.PERIODIC_REFRESH)

        return DebounceResult(None, False, DebounceReason.NO_CHANGE)
