"""
Evaluation session: the per-reference façade consumed by the UI.

One session serves one reference/live pairing. Every collaborator (gates,
guide, stabilizers, lens table) is owned by the session and injected at
construction, so two sessions never share state.

PER FRAME:
1. Run the five gates on a frozen GateContext
2. Run the sequential guide and stabilize its directive (GuideHysteresis)
3. is_perfect = raw guide is PERFECT and every gate passed (the stabilized
   directive is only displayed)
4. Advance the temporal lock, adaptive difficulty and active feedback
5. Publish the EvaluationResult (latest wins) and notify subscribers

Setting, switching or clearing the reference resets all of the above.
"""

import logging
import time
from typing import Callable, List, Optional, Union

from framecoach.config import Settings, get_settings
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.engine.reference_builder import build_reference
from framecoach.engine.result import EvaluationResult
from framecoach.engine.sequential_guide import SequentialGuide
from framecoach.gates.base import GateContext, GateSettings
from framecoach.gates.orchestrator import GateOrchestrator, create_default_gates
from framecoach.models.camera import BodyType
from framecoach.models.live import LiveMetrics
from framecoach.models.reference import UNSET, Baseline, ReferenceData, ReferenceState, reference_data
from framecoach.schemas.inference import ReferenceAnalysis
from framecoach.stability.active_feedback import ActiveFeedbackTracker
from framecoach.stability.adaptive_difficulty import AdaptiveDifficulty
from framecoach.stability.guide_hysteresis import GuideHysteresis
from framecoach.stability.temporal_lock import TemporalLock

logger = logging.getLogger(__name__)

ResultCallback = Callable[[EvaluationResult], None]


class EvaluationSession:
    """Combines gate scores, the sequential guide and the stabilizers."""

    def __init__(
        self,
        orchestrator: GateOrchestrator,
        guide: SequentialGuide,
        guide_hysteresis: GuideHysteresis,
        temporal_lock: TemporalLock,
        difficulty: AdaptiveDifficulty,
        feedback_tracker: ActiveFeedbackTracker,
        lens_config: DeviceLensConfig,
        body_type: BodyType = BodyType.MEDIUM,
        confidence_threshold: float = 0.3
    ):
        self.orchestrator = orchestrator
        self.guide = guide
        self.guide_hysteresis = guide_hysteresis
        self.temporal_lock = temporal_lock
        self.difficulty = difficulty
        self.feedback_tracker = feedback_tracker
        self.lens_config = lens_config
        self.body_type = body_type
        self.confidence_threshold = confidence_threshold

        self.reference_state: ReferenceState = UNSET
        self.zoom_factor = 1.0
        self.latest: Optional[EvaluationResult] = None
        self._subscribers: List[ResultCallback] = []

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EvaluationSession":
        """Build a session with every collaborator configured from settings."""
        settings = settings or get_settings()
        lens_config = DeviceLensConfig(settings.device_identifier)
        return cls(
            orchestrator=GateOrchestrator(create_default_gates(lens_config, settings)),
            guide=SequentialGuide(lens_config, settings),
            guide_hysteresis=GuideHysteresis(
                required_repeats=settings.guide_stability_repeats,
                force_after=settings.guide_force_change_seconds,
            ),
            temporal_lock=TemporalLock(settings.lock_duration_seconds),
            difficulty=AdaptiveDifficulty(
                stuck_after=settings.difficulty_stuck_seconds,
                relaxed_multiplier=settings.difficulty_relaxed_multiplier,
                min_threshold=settings.difficulty_min_threshold,
            ),
            feedback_tracker=ActiveFeedbackTracker(
                min_display=settings.feedback_min_display_seconds,
                resolved_display=settings.feedback_resolved_display_seconds,
            ),
            lens_config=lens_config,
            body_type=BodyType.from_name(settings.body_type),
            confidence_threshold=settings.keypoint_confidence_threshold,
        )

    # ========================================================================
    # REFERENCE
    # ========================================================================

    @property
    def reference(self) -> Optional[ReferenceData]:
        return reference_data(self.reference_state)

    def set_reference(self, reference: Union[ReferenceData, ReferenceAnalysis]) -> ReferenceData:
        """
        Replace the reference and start over.

        Args:
            reference: Ready ReferenceData, or a raw analysis to build it from

        Returns:
            The active ReferenceData
        """
        if isinstance(reference, ReferenceAnalysis):
            reference = build_reference(
                reference, self.lens_config, self.body_type, self.confidence_threshold
            )
        self.reference_state = Baseline(reference)
        self._reset_state()
        logger.info(
            f"Reference set: {reference.shot_type.display_name}, "
            f"{reference.aspect_ratio.display_name}"
        )
        return reference

    def clear_reference(self):
        """Return to idle."""
        self.reference_state = UNSET
        self._reset_state()
        logger.info("Reference cleared")

    def set_zoom_factor(self, zoom_factor: float):
        if zoom_factor <= 0:
            raise ValueError(f"zoom_factor must be positive, got {zoom_factor}")
        self.zoom_factor = zoom_factor

    def _reset_state(self):
        self.orchestrator.reset()
        self.guide.reset()
        self.guide_hysteresis.reset()
        self.temporal_lock.reset()
        self.difficulty.reset()
        self.feedback_tracker.reset()
        self.latest = None

    # ========================================================================
    # EVALUATION
    # ========================================================================

    def evaluate(self, live: LiveMetrics, timestamp: Optional[float] = None) -> EvaluationResult:
        """
        Evaluate one frame and publish the result.

        Args:
            live: Metrics of the current frame
            timestamp: Seconds; defaults to time.monotonic()

        Returns:
            The published EvaluationResult
        """
        if timestamp is None:
            timestamp = time.monotonic()

        gate_settings = GateSettings(
            difficulty_multiplier=self.difficulty.multiplier,
            current_zoom_factor=self.zoom_factor,
            body_type=self.body_type,
            min_threshold=self.difficulty.min_threshold,
        )
        context = GateContext(
            live=live,
            reference_state=self.reference_state,
            settings=gate_settings,
            timestamp=timestamp,
        )
        evaluation = self.orchestrator.evaluate(context)

        raw_guide = self.guide.evaluate(live, self.reference_state, self.zoom_factor)
        guide = self.guide_hysteresis.update(raw_guide, timestamp)

        if self.reference is None:
            # Idle
            self.temporal_lock.reset()
            result = EvaluationResult(
                guide=guide,
                gate_evaluation=evaluation,
                is_perfect=False,
                stability_progress=0.0,
                lock_state=self.temporal_lock.state,
                active_feedback=None,
                difficulty_multiplier=self.difficulty.multiplier,
            )
            return self._publish(result)

        is_perfect = raw_guide.is_perfect and evaluation.all_passed
        progress = self.temporal_lock.update(is_perfect, timestamp)
        multiplier = self.difficulty.update(evaluation, timestamp)
        active = self.feedback_tracker.update(evaluation, timestamp)

        logger.debug(
            f"{guide.guide.value} | {evaluation.debug_summary} | "
            f"lock={self.temporal_lock.state.value} {progress:.2f}"
        )
        result = EvaluationResult(
            guide=guide,
            gate_evaluation=evaluation,
            is_perfect=is_perfect,
            stability_progress=progress,
            lock_state=self.temporal_lock.state,
            active_feedback=active.snapshot() if active is not None else None,
            difficulty_multiplier=multiplier,
        )
        return self._publish(result)

    @property
    def stability_progress(self) -> float:
        return self.temporal_lock.progress

    def reset_after_capture(self):
        """Unlock after a photo was taken so the next one must be held again."""
        self.temporal_lock.reset_after_capture()

    # ========================================================================
    # PUBLICATION
    # ========================================================================

    def subscribe(self, callback: ResultCallback) -> Callable[[], None]:
        """
        Register a callback invoked after every published result.

        Returns:
            Function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, result: EvaluationResult) -> EvaluationResult:
        self.latest = result
        for callback in list(self._subscribers):
            callback(result)
        return result
