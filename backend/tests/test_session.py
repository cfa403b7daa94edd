"""End-to-end evaluation session tests."""

import pytest

from framecoach import EvaluationSession, Settings
from framecoach.models.gate import GateCategory
from framecoach.models.guide import GuideType
from framecoach.models.reference import FocalLengthSource
from framecoach.models.shot_type import ShotType
from framecoach.stability import LockState

from helpers import arms_up_keypoints, body_keypoints, live_metrics, reference_analysis


def lock(session, until: float = 0.5):
    """Feed perfect frames until the composition is locked."""
    result = None
    for t in (0.0, until / 2, until):
        result = session.evaluate(live_metrics(), t)
    assert result.is_locked
    return result


class TestIdle:
    def test_without_reference(self, session):
        result = session.evaluate(live_metrics(), 0.0)

        assert result.guide.guide == GuideType.IDLE
        assert result.message == "Set a reference photo"
        assert not result.is_perfect
        assert result.stability_progress == 0.0
        assert result.lock_state == LockState.IDLE
        assert result.active_feedback is None

    def test_default_timestamp(self, session):
        assert session.evaluate(live_metrics()) is session.latest


class TestPerfectComposition:
    def test_locks_after_hold_duration(self, session):
        session.set_reference(reference_analysis())

        first = session.evaluate(live_metrics(), 0.0)
        assert first.is_perfect
        assert first.gate_evaluation.all_passed
        assert first.guide.guide == GuideType.PERFECT
        assert first.lock_state == LockState.ARMING
        assert first.stability_progress == 0.0

        halfway = session.evaluate(live_metrics(), 0.25)
        assert halfway.stability_progress == pytest.approx(0.5)

        locked = session.evaluate(live_metrics(), 0.5)
        assert locked.is_locked
        assert locked.stability_progress == 1.0
        assert locked.message == "Perfect composition! Hold still"

        assert session.evaluate(live_metrics(), 0.8).stability_progress == 1.0

    def test_one_bad_frame_breaks_the_lock(self, session):
        session.set_reference(reference_analysis())
        session.evaluate(live_metrics(), 0.0)
        session.evaluate(live_metrics(), 0.3)

        shifted = session.evaluate(live_metrics(keypoints=body_keypoints(dx=0.15)), 0.35)
        # The held directive is still PERFECT, the failing position gate is not
        assert shifted.guide.is_perfect
        assert not shifted.gate_evaluation.gate2.passed
        assert not shifted.is_perfect
        assert shifted.stability_progress == 0.0
        assert shifted.lock_state == LockState.IDLE

        again = session.evaluate(live_metrics(), 0.4)
        assert again.lock_state == LockState.ARMING
        assert again.stability_progress == 0.0

    def test_unstabilized_guide_breaks_the_lock(self, session):
        session.set_reference(reference_analysis())
        session.evaluate(live_metrics(), 0.0)
        session.evaluate(live_metrics(), 0.3)

        # Every gate passes, only the guide's pose comparison fails
        arms_up = session.evaluate(live_metrics(keypoints=arms_up_keypoints()), 0.35)
        assert arms_up.gate_evaluation.all_passed
        assert arms_up.guide.guide == GuideType.PERFECT
        assert not arms_up.is_perfect
        assert arms_up.stability_progress == 0.0
        assert arms_up.lock_state == LockState.IDLE

        again = session.evaluate(live_metrics(), 0.5)
        assert again.lock_state == LockState.ARMING
        assert again.stability_progress == 0.0
        assert not again.is_locked

    def test_reset_after_capture_requires_a_new_hold(self, session):
        session.set_reference(reference_analysis())
        lock(session)

        session.reset_after_capture()
        assert session.stability_progress == 0.0

        result = session.evaluate(live_metrics(), 0.6)
        assert result.lock_state == LockState.ARMING
        assert result.stability_progress == 0.0


class TestGuidance:
    def test_bust_against_full_body_reference(self, session):
        session.set_reference(reference_analysis())
        result = session.evaluate(live_metrics(keypoints=body_keypoints(visible=range(0, 7))), 0.0)

        assert result.guide.guide == GuideType.MOVE_BACKWARD
        assert result.guide.magnitude == "one step"
        assert result.gate_evaluation.primary_feedback == "Move back for a full body"
        assert result.gate_evaluation.current_shot_type == ShotType.MEDIUM_CLOSE_UP

    def test_active_feedback_tracks_position(self, session):
        session.set_reference(reference_analysis())
        result = session.evaluate(live_metrics(keypoints=body_keypoints(dx=0.15)), 0.0)

        assert result.guide.guide == GuideType.MOVE_RIGHT
        assert result.active_feedback.gate_index == 2
        assert result.active_feedback.feedback_type == "position"

    def test_published_active_feedback_is_frozen_in_time(self, session):
        session.set_reference(reference_analysis())
        first = session.evaluate(live_metrics(keypoints=body_keypoints(dx=0.15)), 0.0)
        second = session.evaluate(live_metrics(keypoints=body_keypoints(dx=0.10)), 0.1)

        assert second.active_feedback.displayed_progress == pytest.approx(0.85)
        assert first.active_feedback is not second.active_feedback
        assert list(first.active_feedback.progress_history) == [pytest.approx(0.7)]
        assert first.active_feedback.displayed_progress == pytest.approx(0.7)
        assert session.feedback_tracker.active.displayed_progress == pytest.approx(0.85)

    def test_zoom_factor_feeds_lens_gate_and_guide(self, session):
        session.set_reference(reference_analysis())
        session.set_zoom_factor(2.0)
        result = session.evaluate(live_metrics(), 0.0)

        assert result.gate_evaluation.gate3.category == GateCategory.LENS_DISTANCE_BOTH
        assert result.guide.guide == GuideType.ZOOM_OUT
        assert result.message == "Zoom out (2.0x → 1.0x)"

    def test_invalid_zoom_factor(self, session):
        with pytest.raises(ValueError):
            session.set_zoom_factor(0)

    def test_stuck_user_gets_relaxed_thresholds(self, session):
        session.set_reference(reference_analysis())
        shifted = live_metrics(keypoints=body_keypoints(dx=0.15))

        assert session.evaluate(shifted, 0.0).difficulty_multiplier == 1.0
        assert session.evaluate(shifted, 3.0).difficulty_multiplier == 1.0
        assert session.evaluate(shifted, 6.0).difficulty_multiplier == pytest.approx(1.2)

        relaxed = session.evaluate(shifted, 6.1).gate_evaluation.gate2
        assert relaxed.threshold == pytest.approx(0.75 / 1.2)
        assert relaxed.passed


class TestReference:
    def test_set_reference_from_analysis(self, session):
        reference = session.set_reference(reference_analysis())

        assert session.reference is reference
        assert reference.shot_type == ShotType.FULL_SHOT
        assert reference.focal_length.source == FocalLengthSource.EXIF
        assert reference.estimated_distance == pytest.approx(0.4 * 24 / (0.16 * 34.6))

    def test_set_reference_from_data(self, session, full_body_reference):
        assert session.set_reference(full_body_reference) is full_body_reference

    def test_switching_reference_resets_state(self, session):
        session.set_reference(reference_analysis())
        lock(session)

        session.set_reference(reference_analysis(exif_focal_length_35mm=48))
        assert session.latest is None
        assert session.temporal_lock.state == LockState.IDLE
        assert session.orchestrator.gate(1).stable_shot_type is None
        assert session.guide.shot_type_hysteresis.stable is None
        assert session.guide_hysteresis.emitted is None

    def test_clear_reference_returns_to_idle(self, session):
        session.set_reference(reference_analysis())
        lock(session)

        session.clear_reference()
        assert session.reference is None
        assert session.evaluate(live_metrics(), 1.0).guide.guide == GuideType.IDLE


class TestSubscription:
    def test_subscribe_and_unsubscribe(self, session):
        received = []
        unsubscribe = session.subscribe(received.append)

        first = session.evaluate(live_metrics(), 0.0)
        unsubscribe()
        session.evaluate(live_metrics(), 0.1)

        assert received == [first]

    def test_latest_wins(self, session):
        session.evaluate(live_metrics(), 0.0)
        last = session.evaluate(live_metrics(), 0.1)
        assert session.latest is last


class TestFromSettings:
    def test_collaborators_follow_settings(self):
        settings = Settings(
            _env_file=None,
            lock_duration_seconds=1.0,
            shot_type_stability_frames=5,
            body_type="large",
            device_identifier="iPhone16,1",
        )
        session = EvaluationSession.from_settings(settings)

        assert session.temporal_lock.lock_duration == 1.0
        assert session.guide.shot_type_hysteresis.required_frames == 5
        assert session.orchestrator.gate(1).state.required_frames == 5
        assert session.body_type.shoulder_width_m == 0.46
        assert session.lens_config.focal_length(3.0) == 77

    def test_unknown_body_type(self):
        with pytest.raises(ValueError):
            EvaluationSession.from_settings(Settings(_env_file=None, body_type="giant"))
