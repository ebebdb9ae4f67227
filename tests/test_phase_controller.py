# Area: Core Tests
"""Tests for PhaseController — tick-derived phases and scoring triggers."""

from unittest.mock import Mock

from quiz_sync._core.capture import ScoreCapture
from quiz_sync._core.phase import PhaseController
from quiz_sync.questions import DEFAULT_QUESTIONS
from quiz_sync.types import Phase, PhaseState, Session, SessionState

T0 = 1_700_000_000_000
D = 20_000


def make_session(start=T0, round_count=3):
    return Session(
        session_id="0x01",
        host_id="0xHOST",
        players=("0xa", "0xb"),
        start_timestamp_ms=start,
        round_duration_ms=D,
        round_count=round_count,
        state=SessionState.ACTIVE if start else SessionState.WAITING,
        score_table_id="0x01:scores",
    )


def make_controller(session=None):
    capture = ScoreCapture("0xa", DEFAULT_QUESTIONS, feedback_window_ms=5_000)
    return PhaseController(capture, 5_000, session if session is not None else make_session())


class TestPhaseDerivation:
    """Phase as a function of elapsed time."""

    def test_unstarted_without_timestamp(self):
        controller = make_controller(make_session(start=None))
        assert controller.tick(T0).phase is Phase.UNSTARTED

    def test_unstarted_without_session(self):
        capture = ScoreCapture("0xa", DEFAULT_QUESTIONS, feedback_window_ms=5_000)
        controller = PhaseController(capture)
        assert controller.tick(T0) == PhaseState(Phase.UNSTARTED)

    def test_question_phase(self):
        state = make_controller().tick(T0 + 3_000)
        assert state == PhaseState(Phase.QUESTION, 0, 17_000)

    def test_feedback_phase_in_last_five_seconds(self):
        controller = make_controller()
        assert controller.tick(T0 + 14_999).phase is Phase.QUESTION
        state = controller.tick(T0 + 15_000)
        assert state.phase is Phase.FEEDBACK
        assert state.round_index == 0

    def test_scenario_mid_third_round(self):
        state = make_controller().tick(T0 + 45_000)
        assert state.round_index == 2
        assert state.remaining_ms == 15_000
        assert state.phase is Phase.QUESTION

    def test_leaderboard_when_rounds_exhausted(self):
        state = make_controller().tick(T0 + 60_000)
        assert state.phase is Phase.LEADERBOARD
        assert state.is_terminal

    def test_leaderboard_is_sticky(self):
        controller = make_controller()
        controller.tick(T0 + 60_000)
        # A clock stepping backwards does not leave the terminal phase
        assert controller.tick(T0 + 1_000).phase is Phase.LEADERBOARD

    def test_terminal_iff_round_index_past_count(self):
        for elapsed in range(0, 80_000, 1_000):
            controller = make_controller()
            state = controller.tick(T0 + elapsed)
            assert state.is_terminal == (elapsed // D >= 3)

    def test_two_clients_converge(self):
        a, b = make_controller(), make_controller()
        for elapsed in range(0, 70_000, 1_000):
            assert a.tick(T0 + elapsed) == b.tick(T0 + elapsed)


class TestScoringTriggers:
    """Accumulation and lock reset driven by ticks."""

    def test_feedback_accumulates_once_per_round(self):
        capture = Mock()
        controller = PhaseController(capture, 5_000, make_session())

        for elapsed in range(15_000, 20_000, 1_000):
            controller.tick(T0 + elapsed)

        capture.accumulate.assert_called_once_with(0)

    def test_new_round_opens_lock(self):
        capture = Mock()
        controller = PhaseController(capture, 5_000, make_session())
        controller.tick(T0 + 1_000)
        controller.tick(T0 + 2_000)
        controller.tick(T0 + D + 1_000)

        assert [c.args for c in capture.start_round.call_args_list] == [(0,), (1,)]

    def test_skipped_feedback_still_evaluated(self):
        capture = Mock()
        controller = PhaseController(capture, 5_000, make_session())
        controller.tick(T0 + 1_000)
        # Tick gap jumps straight into round 1
        controller.tick(T0 + D + 2_000)

        capture.accumulate.assert_called_once_with(0)
        assert controller.last_evaluated_round == 0

    def test_late_joiner_evaluates_earlier_rounds_as_empty(self):
        capture = ScoreCapture("0xa", DEFAULT_QUESTIONS, feedback_window_ms=5_000)
        controller = PhaseController(capture, 5_000, make_session())
        controller.tick(T0 + 2 * D + 1_000)

        assert controller.last_evaluated_round == 1
        assert capture.points_for(0) == 0
        assert capture.points_for(1) == 0
        assert capture.cumulative_score == 0

    def test_leaderboard_evaluates_remaining_rounds(self):
        capture = Mock()
        controller = PhaseController(capture, 5_000, make_session())
        controller.tick(T0 + 1_000)
        controller.tick(T0 + 90_000)

        assert [c.args for c in capture.accumulate.call_args_list] == [(0,), (1,), (2,)]

    def test_full_round_trip_scores(self):
        capture = ScoreCapture("0xa", DEFAULT_QUESTIONS, feedback_window_ms=5_000)
        session = make_session()
        controller = PhaseController(capture, 5_000, session)

        controller.tick(T0)
        capture.select(session, DEFAULT_QUESTIONS[0].correct, T0 + 2_000)
        controller.tick(T0 + 16_000)
        assert capture.cumulative_score == 690

        controller.tick(T0 + D)
        capture.select(session, DEFAULT_QUESTIONS[1].correct, T0 + D + 25)
        controller.tick(T0 + 90_000)
        assert capture.cumulative_score == 690 + 750


class TestSessionUpdates:
    """Snapshot refreshes never move the timing anchor."""

    def test_start_timestamp_is_fixed(self):
        controller = make_controller()
        controller.update_session(make_session(start=T0 + 50_000))
        assert controller.session.start_timestamp_ms == T0

    def test_start_timestamp_adopted_once_known(self):
        controller = make_controller(make_session(start=None))
        controller.update_session(make_session(start=T0))
        assert controller.tick(T0 + 1_000).phase is Phase.QUESTION
