"""Guidance hysteresis for the sequential guide's directive type."""

import logging
from typing import Optional

from framecoach.models.guide import GuideType, SimpleGuideResult

logger = logging.getLogger(__name__)


class GuideHysteresis:
    """
    Holds the emitted directive until a new one is confirmed.

    The emitted guide type changes only after `required_repeats` consecutive
    identical raw decisions, or once `force_after` seconds have passed since
    the last change. While a change is unconfirmed the previously emitted
    result is returned unchanged. Results of the already-emitted type pass
    through so their magnitudes stay current.
    """

    def __init__(self, required_repeats: int = 2, force_after: float = 1.0):
        if required_repeats < 1:
            raise ValueError(f"required_repeats must be >= 1, got {required_repeats}")
        self.required_repeats = required_repeats
        self.force_after = force_after
        self.reset()

    def reset(self):
        self.emitted: Optional[SimpleGuideResult] = None
        self._last_raw: Optional[GuideType] = None
        self._raw_count = 0
        self._last_change_time = float("-inf")

    def update(self, result: SimpleGuideResult, timestamp: float) -> SimpleGuideResult:
        """Feed one raw guide decision and return the stabilized one."""
        if result.guide == self._last_raw:
            self._raw_count += 1
        else:
            self._last_raw = result.guide
            self._raw_count = 1

        if self.emitted is not None and result.guide == self.emitted.guide:
            self.emitted = result
            return result

        should_change = (
            self._raw_count >= self.required_repeats
            or timestamp - self._last_change_time > self.force_after
        )
        if not should_change:
            return self.emitted

        previous = self.emitted.guide.name if self.emitted is not None else None
        logger.debug(f"Guide changed: {previous} -> {result.guide.name} ({result.debug_info})")
        self.emitted = result
        self._last_change_time = timestamp
        return result
