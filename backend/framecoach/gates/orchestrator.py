"""
Gate orchestrator.

Runs the five gates in priority order against one frozen GateContext and
assembles a GateEvaluation:

1. Gates never observe each other's results
2. A gate that raises is logged and replaced by GateResult.fallback()
3. A frame without a subject skips gates 2..4 (they report "no subject")
4. The stable shot type is read from the framing gate's metadata
"""

import logging
from typing import Dict, List, Optional, Sequence

from framecoach.config import Settings
from framecoach.cv.keypoint_smoother import KeypointSmoother
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.gates.aspect_ratio import AspectRatioGate
from framecoach.gates.base import Gate, GateContext
from framecoach.gates.framing import FramingGate
from framecoach.gates.lens_distance import LensDistanceGate, LensDistanceState
from framecoach.gates.pose import PoseGate
from framecoach.gates.position import PositionGate
from framecoach.models.gate import FramingMetadata, GateEvaluation, GateResult
from framecoach.stability.debouncer import GuidanceDebouncer

logger = logging.getLogger(__name__)

GATE_COUNT = 5
FRAMING_PRIORITY = 1
FIRST_SUBJECT_GATE = 2  # Gates from here on need a detected subject


class GateOrchestrator:
    """Evaluates registered gates in ascending priority order."""

    def __init__(self, gates: Sequence[Gate]):
        priorities = [gate.priority for gate in gates]
        if len(set(priorities)) != len(priorities):
            raise ValueError(f"Duplicate gate priorities: {sorted(priorities)}")
        for priority in priorities:
            if not 0 <= priority < GATE_COUNT:
                raise ValueError(f"Gate priority out of range 0..{GATE_COUNT - 1}: {priority}")

        self.gates: List[Gate] = sorted(gates, key=lambda gate: gate.priority)

    def _run(self, gate: Gate, context: GateContext) -> GateResult:
        try:
            return gate.evaluate(context)
        except Exception as e:
            logger.exception(f"Gate {gate.priority} ({gate.name}) failed: {e}")
            return GateResult.fallback(gate.name)

    def evaluate(self, context: GateContext) -> GateEvaluation:
        """
        Run every gate for one frame.

        Args:
            context: Frozen per-frame input shared by all gates

        Returns:
            GateEvaluation with one result per slot; unregistered slots hold
            the fallback result
        """
        skip_subject_gates = context.reference is not None and not context.live.has_subject
        results: Dict[int, GateResult] = {}

        for gate in self.gates:
            if skip_subject_gates and gate.priority >= FIRST_SUBJECT_GATE:
                results[gate.priority] = gate.no_subject()
                continue
            results[gate.priority] = self._run(gate, context)

        slots = [results.get(index) or GateResult.fallback() for index in range(GATE_COUNT)]

        current_shot_type = None
        framing = results.get(FRAMING_PRIORITY)
        if framing is not None and isinstance(framing.metadata, FramingMetadata):
            current_shot_type = framing.metadata.shot_type

        reference = context.reference
        evaluation = GateEvaluation(
            *slots,
            current_shot_type=current_shot_type,
            reference_shot_type=reference.shot_type if reference is not None else None,
        )
        logger.debug(evaluation.debug_summary)
        return evaluation

    def gate(self, priority: int) -> Optional[Gate]:
        for gate in self.gates:
            if gate.priority == priority:
                return gate
        return None

    def reset(self):
        """Clear the cross-frame state of every stateful gate."""
        for gate in self.gates:
            gate.reset()


def create_default_gates(
    lens_config: Optional[DeviceLensConfig] = None,
    settings: Optional[Settings] = None
) -> List[Gate]:
    """Build the standard five gates configured from settings."""
    settings = settings or Settings()
    lens_state = LensDistanceState(
        smoother=KeypointSmoother(alpha=settings.shoulder_smoothing_alpha),
        debouncer=GuidanceDebouncer(
            min_interval=settings.debounce_min_interval_seconds,
            distance_change_threshold=settings.debounce_distance_change_ratio,
            focal_change_threshold=settings.debounce_focal_change_mm,
            refresh_repeats=settings.debounce_refresh_repeats,
            refresh_after=settings.debounce_refresh_seconds,
        ),
    )
    return [
        AspectRatioGate(),
        FramingGate(
            stability_frames=settings.shot_type_stability_frames,
            confidence_threshold=settings.keypoint_confidence_threshold,
        ),
        PositionGate(),
        LensDistanceGate(lens_config=lens_config, state=lens_state),
        PoseGate(),
    ]
