"""Gate orchestrator tests."""

from dataclasses import replace

import pytest

from framecoach.gates import (
    Gate,
    GateContext,
    GateOrchestrator,
    PoseGate,
    PositionGate,
    create_default_gates,
)
from framecoach.models.gate import GateCategory, GateResult
from framecoach.models.reference import FocalLengthInfo
from framecoach.models.shot_type import ShotType

from helpers import LANDSCAPE_4_3, context_for, live_metrics


class ExplodingGate(Gate):
    name = "Exploding"
    priority = 2

    def evaluate(self, context: GateContext) -> GateResult:
        raise RuntimeError("boom")


@pytest.fixture
def orchestrator(settings):
    return GateOrchestrator(create_default_gates(settings=settings))


class TestGateOrchestrator:
    def test_all_gates_pass_for_matching_frame(self, orchestrator, full_body_reference):
        evaluation = orchestrator.evaluate(context_for(live_metrics(), full_body_reference))
        assert evaluation.all_passed
        assert evaluation.passed_count == 5
        assert evaluation.current_failed_gate is None
        assert evaluation.primary_feedback == "Perfect composition!"
        assert evaluation.current_shot_type == ShotType.FULL_SHOT
        assert evaluation.reference_shot_type == ShotType.FULL_SHOT

    def test_aspect_ratio_feedback_comes_first(self, orchestrator, full_body_reference):
        live = live_metrics(image_size=LANDSCAPE_4_3)
        evaluation = orchestrator.evaluate(context_for(live, full_body_reference))

        assert evaluation.gate0.score == 0.0
        assert evaluation.gate0.threshold == 1.0
        assert evaluation.current_failed_gate == 0
        assert evaluation.primary_feedback == "Change camera ratio to 16:9"

    def test_pose_feedback_precedes_lens_feedback(self, orchestrator, full_body_reference):
        reference = replace(full_body_reference, focal_length=FocalLengthInfo(48))
        evaluation = orchestrator.evaluate(context_for(live_metrics(accuracy=0.3), reference))

        assert not evaluation.gate3.passed
        assert evaluation.current_failed_gate == 4
        assert evaluation.all_feedbacks[0] == evaluation.gate4.feedback

    def test_failing_gate_is_replaced_by_fallback(self, full_body_reference):
        orchestrator = GateOrchestrator([ExplodingGate(), PoseGate()])
        evaluation = orchestrator.evaluate(context_for(live_metrics(), full_body_reference))

        assert evaluation.gate2.category == GateCategory.ERROR
        assert evaluation.gate2.name == "Exploding"
        assert not evaluation.gate2.passed
        assert not evaluation.all_passed
        assert evaluation.gate4.category == GateCategory.POSE

    def test_unregistered_slots_hold_fallback(self, full_body_reference):
        evaluation = GateOrchestrator([PoseGate()]).evaluate(
            context_for(live_metrics(), full_body_reference)
        )
        assert evaluation.gate0 == GateResult.fallback()
        assert evaluation.gate3 == GateResult.fallback()
        assert not evaluation.gate0.passed
        assert evaluation.primary_feedback == "Error"

    def test_duplicate_priorities_rejected(self):
        with pytest.raises(ValueError):
            GateOrchestrator([PositionGate(), ExplodingGate()])

    def test_out_of_range_priority_rejected(self):
        gate = PoseGate()
        gate.priority = 5
        with pytest.raises(ValueError):
            GateOrchestrator([gate])

    def test_gates_sorted_by_priority(self):
        orchestrator = GateOrchestrator([PoseGate(), PositionGate()])
        assert [gate.priority for gate in orchestrator.gates] == [2, 4]
        assert isinstance(orchestrator.gate(4), PoseGate)
        assert orchestrator.gate(0) is None

    def test_no_subject_skips_subject_gates(self, orchestrator, full_body_reference):
        evaluation = orchestrator.evaluate(context_for(live_metrics(keypoints=()), full_body_reference))

        assert evaluation.gate0.passed
        for result in (evaluation.gate1, evaluation.gate2, evaluation.gate3, evaluation.gate4):
            assert result.category == GateCategory.NO_SUBJECT
            assert not result.passed
        assert evaluation.primary_feedback == "Cannot recognize the subject"

    def test_without_reference_everything_passes(self, orchestrator):
        evaluation = orchestrator.evaluate(context_for(live_metrics()))
        assert evaluation.all_passed
        assert all(g.category == GateCategory.REFERENCE_MISSING for g in evaluation.gates)
        assert evaluation.current_shot_type == ShotType.FULL_SHOT
        assert evaluation.reference_shot_type is None

    def test_reset_clears_framing_state(self, orchestrator, full_body_reference):
        orchestrator.evaluate(context_for(live_metrics(), full_body_reference))
        orchestrator.reset()
        assert orchestrator.gate(1).stable_shot_type is None
