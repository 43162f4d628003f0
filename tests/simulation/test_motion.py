"""Unit tests for the per-runner motion model."""

import pytest

from travel_sim.simulation.core.runner_state import RunnerId, RunnerState
from travel_sim.simulation.core.scenario import ScenarioType, get_policy
from travel_sim.simulation.engine.motion import advance

TRACK = 400.0


def runner(position=0.0, direction=1, **kwargs):
    return RunnerState(runner_id=RunnerId.RED, position=position, direction=direction, **kwargs)


class TestClamp:
    """Straight track: runners stop at the ends."""

    policy = get_policy(ScenarioType.LINEAR_MEET)

    def test_moves_along_direction(self):
        """Test displacement follows direction."""
        assert advance(runner(100.0, 1), 10.0, 0.1, TRACK, self.policy).position == pytest.approx(101.0)
        assert advance(runner(100.0, -1), 10.0, 0.1, TRACK, self.policy).position == pytest.approx(99.0)

    def test_clamped_at_far_end(self):
        """Test position never exceeds the track length."""
        state = advance(runner(399.5, 1), 10.0, 0.1, TRACK, self.policy)
        assert state.position == TRACK
        assert state.direction == 1

    def test_clamped_at_origin(self):
        """Test position never drops below zero."""
        state = advance(runner(0.5, -1), 10.0, 0.1, TRACK, self.policy)
        assert state.position == 0.0

    def test_distance_accumulates_while_clamped(self):
        """Test total distance grows by speed * dt every tick."""
        state = advance(runner(TRACK, 1, total_distance=400.0), 10.0, 0.1, TRACK, self.policy)
        assert state.position == TRACK
        assert state.total_distance == pytest.approx(401.0)


class TestReflect:
    """Round trip: runners bounce off both ends."""

    policy = get_policy(ScenarioType.ROUND_TRIP)

    def test_reflects_at_far_end(self):
        """Test overshoot is mirrored back and direction flips."""
        state = advance(runner(399.5, 1), 10.0, 0.1, TRACK, self.policy)
        assert state.position == pytest.approx(399.5)
        assert state.direction == -1

    def test_reflects_at_origin(self):
        """Test overshoot below zero is mirrored back."""
        state = advance(runner(0.4, -1), 6.0, 0.1, TRACK, self.policy)
        assert state.position == pytest.approx(0.2)
        assert state.direction == 1

    def test_stays_in_bounds(self):
        """Test position stays inside the track over many ticks."""
        state = runner(0.0, 1)
        for _ in range(2000):
            state = advance(state, 20.0, 0.1, TRACK, self.policy)
            assert 0.0 <= state.position <= TRACK
        assert state.total_distance == pytest.approx(4000.0)


class TestWrap:
    """Circular track: runners wrap and count laps."""

    policy = get_policy(ScenarioType.CIRCULAR)

    def test_wraps_and_counts_lap(self):
        """Test crossing the start line wraps position and adds a lap."""
        state = advance(runner(399.5, 1), 10.0, 0.1, TRACK, self.policy)
        assert state.position == pytest.approx(0.5)
        assert state.laps == 1

    def test_landing_on_track_length_wraps_to_zero(self):
        """Test position stays in [0, track_length)."""
        state = advance(runner(399.0, 1), 10.0, 0.1, TRACK, self.policy)
        assert state.position == pytest.approx(0.0)
        assert state.laps == 1

    def test_laps_match_distance(self):
        """Test laps equal floor(total distance / track length)."""
        state = runner(0.0, 1)
        for _ in range(1000):
            state = advance(state, 10.0, 0.1, TRACK, self.policy)
        assert state.total_distance == pytest.approx(1000.0)
        assert state.laps == 2
        assert state.position == pytest.approx(200.0)


class TestAdvanceGeneral:
    """Behavior shared by all boundary rules."""

    @pytest.mark.parametrize("scenario", list(ScenarioType))
    def test_zero_dt_is_identity(self, scenario):
        """Test dt=0 leaves position and distance unchanged."""
        start = runner(123.0, 1, total_distance=50.0)
        state = advance(start, 10.0, 0.0, TRACK, get_policy(scenario))
        assert state.position == 123.0
        assert state.total_distance == 50.0

    def test_records_speed_used(self):
        """Test the new state carries the speed of the tick."""
        state = advance(runner(), 7.0, 0.1, TRACK, get_policy(ScenarioType.LINEAR_CHASE))
        assert state.speed == 7.0

    def test_input_state_untouched(self):
        """Test advance returns a new state."""
        start = runner(10.0)
        advance(start, 10.0, 0.1, TRACK, get_policy(ScenarioType.LINEAR_MEET))
        assert start.position == 10.0
