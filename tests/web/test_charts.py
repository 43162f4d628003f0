"""Tests for the Plotly charts and meeting table."""

import pytest

from travel_sim.simulation.core.events import EventType, MeetingEvent
from travel_sim.simulation.core.history import HistoryPoint
from travel_sim.simulation.core.scenario import ScenarioType
from travel_sim.web.charts import (
    EVENT_COLUMNS,
    circular_coordinates,
    create_space_time_figure,
    create_track_figure,
    events_to_dataframe,
    visible_window,
)


def history_until(end, step=0.5):
    count = int(end / step) + 1
    return [HistoryPoint(t=i * step, red_pos=i * 5.0, blue_pos=400.0 - i * 3.0) for i in range(count)]


class TestCircularCoordinates:
    """Test mapping track positions onto the circle."""

    def test_start_is_top(self):
        """Test position 0 sits at the top of the loop."""
        x, y = circular_coordinates(0.0, 400.0)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(1.0)

    def test_quarter_lap_is_right(self):
        """Test runners move clockwise."""
        x, y = circular_coordinates(100.0, 400.0)
        assert x == pytest.approx(1.0)
        assert y == pytest.approx(0.0, abs=1e-9)


class TestVisibleWindow:
    """Test the sliding time window."""

    def test_window_starts_at_zero(self):
        """Test the window is anchored at 0 early in a run."""
        assert visible_window(5.0, 20.0) == (0.0, 20.0)

    def test_window_follows_latest_time(self):
        """Test the window scrolls once time exceeds its width."""
        assert visible_window(35.0, 20.0) == (15.0, 35.0)


class TestTrackFigure:
    """Test the track view."""

    def test_linear_track(self, make_driver):
        """Test runners are drawn at their track coordinates."""
        driver = make_driver(ScenarioType.LINEAR_MEET)
        driver.run_for(10.0, dt=0.1)
        fig = create_track_figure(driver.snapshot())

        red_trace = next(t for t in fig.data if t.name == "Red")
        blue_trace = next(t for t in fig.data if t.name == "Blue")
        assert red_trace.x[0] == pytest.approx(100.0)
        assert blue_trace.x[0] == pytest.approx(340.0)

    def test_circular_track(self, make_driver):
        """Test the loop view places runners on the unit circle."""
        driver = make_driver(ScenarioType.CIRCULAR)
        driver.run_for(10.0, dt=0.1)
        fig = create_track_figure(driver.snapshot())

        red_trace = next(t for t in fig.data if t.name == "Red")
        x, y = red_trace.x[0], red_trace.y[0]
        assert x ** 2 + y ** 2 == pytest.approx(1.0)
        assert x == pytest.approx(1.0)


class TestSpaceTimeFigure:
    """Test the position-vs-time chart."""

    def test_early_run_shows_everything(self):
        """Test all samples are visible before the window fills."""
        history = history_until(10.0)
        fig = create_space_time_figure(history, [], 400.0)
        assert len(fig.data[0].x) == len(history)
        assert tuple(fig.layout.xaxis.range) == (0.0, 20.0)
        assert tuple(fig.layout.yaxis.range) == (0, 400.0)

    def test_window_trims_old_samples(self):
        """Test samples before the window are dropped."""
        fig = create_space_time_figure(history_until(30.0), [], 400.0, time_window=20.0)
        assert min(fig.data[0].x) == pytest.approx(10.0)
        assert tuple(fig.layout.xaxis.range) == (10.0, 30.0)

    def test_event_markers(self):
        """Test only events inside the window are marked."""
        events = [
            MeetingEvent(5.0, 100.0, EventType.MEET, 50.0, 50.0),
            MeetingEvent(25.0, 250.0, EventType.MEET, 250.0, 150.0),
        ]
        fig = create_space_time_figure(history_until(30.0), events, 400.0)
        markers = fig.data[2]
        assert list(markers.x) == [25.0]
        assert list(markers.y) == [250.0]

    def test_empty_history(self):
        """Test an empty history renders an empty chart."""
        fig = create_space_time_figure([], [], 400.0)
        assert len(fig.data[0].x) == 0


class TestEventsDataframe:
    """Test the meeting log table."""

    def test_empty(self):
        """Test an empty log has the expected columns."""
        df = events_to_dataframe([])
        assert df.empty
        assert list(df.columns) == EVENT_COLUMNS

    def test_newest_first(self):
        """Test rows are numbered in order and shown newest first."""
        events = [
            MeetingEvent(25.04, 250.3, EventType.MEET, 250.4, 150.2),
            MeetingEvent(75.0, 50.0, EventType.CHASE, 750.0, 450.0),
        ]
        df = events_to_dataframe(events)
        assert list(df["#"]) == [2, 1]
        assert df.iloc[1]["time (s)"] == 25.0
        assert df.iloc[1]["position (m)"] == 250
        assert "catch up" in df.iloc[0]["type"]
