"""
Stabilization layer.

Raw per-frame decisions flicker; these components turn them into a steady
user experience:
1. ShotTypeHysteresis: a new shot type must repeat 3 frames before it is accepted
2. GuideHysteresis: the emitted directive changes after 2 identical decisions or 1s
3. GuidanceDebouncer: lens/distance messages change at most every 0.5s unless urgent
4. TemporalLock: "perfect" must hold for 0.5s before capture is signaled
5. AdaptiveDifficulty: relaxes thresholds when the user is stuck for 5s
6. ActiveFeedbackTracker: one smoothed on-screen message with minimum display time
"""

from framecoach.stability.shot_type_hysteresis import ShotTypeHysteresis
from framecoach.stability.guide_hysteresis import GuideHysteresis
from framecoach.stability.debouncer import GuidanceDebouncer, DebounceResult, DebounceReason
from framecoach.stability.temporal_lock import TemporalLock, LockState
from framecoach.stability.adaptive_difficulty import AdaptiveDifficulty, relax_threshold
from framecoach.stability.active_feedback import ActiveFeedback, ActiveFeedbackTracker

__all__ = [
    "ShotTypeHysteresis",
    "GuideHysteresis",
    "GuidanceDebouncer",
    "DebounceResult",
    "DebounceReason",
    "TemporalLock",
    "LockState",
    "AdaptiveDifficulty",
    "relax_threshold",
    "ActiveFeedback",
    "ActiveFeedbackTracker",
]
