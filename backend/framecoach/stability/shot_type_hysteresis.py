"""Shot-type hysteresis: a new classification must repeat before it is accepted."""

import logging
from typing import Optional

from framecoach.models.shot_type import ShotType

logger = logging.getLogger(__name__)


class ShotTypeHysteresis:
    """
    Stabilizes raw per-frame shot-type classifications.

    A raw value different from the stable one must be observed on
    `required_frames` consecutive frames before it replaces the stable value.
    The very first classification is accepted immediately.
    """

    def __init__(self, required_frames: int = 3):
        if required_frames < 1:
            raise ValueError(f"required_frames must be >= 1, got {required_frames}")
        self.required_frames = required_frames
        self.stable: Optional[ShotType] = None
        self._candidate: Optional[ShotType] = None
        self._candidate_count = 0

    def update(self, raw: ShotType) -> ShotType:
        """Feed one raw classification and return the stable shot type."""
        if self.stable is None:
            self.stable = raw
            return raw

        if raw == self.stable:
            self._candidate = None
            self._candidate_count = 0
            return self.stable

        if raw == self._candidate:
            self._candidate_count += 1
        else:
            self._candidate = raw
            self._candidate_count = 1

        if self._candidate_count >= self.required_frames:
            logger.debug(f"Shot type changed: {self.stable.name} -> {raw.name}")
            self.stable = raw
            self._candidate = None
            self._candidate_count = 0

        return self.stable

    @property
    def pending(self) -> Optional[ShotType]:
        return self._candidate

    def reset(self):
        self.stable = None
        self._candidate = None
        self._candidate_count = 0
