"""Plotly figures and tables for the simulation page.

All builders are read-only views over a committed ``SimulationSnapshot`` (or
the history and events it carries).
"""

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from travel_sim.simulation.core.events import EventType, MeetingEvent
from travel_sim.simulation.core.history import HistoryPoint
from travel_sim.simulation.core.scenario import get_policy
from travel_sim.simulation.engine.driver import SimulationSnapshot

RED_COLOR = "#ef4444"
BLUE_COLOR = "#3b82f6"
EVENT_COLOR = "#f59e0b"
TRACK_COLOR = "#cbd5e1"

LANE_OFFSET = 0.15
EVENT_LABELS = {EventType.MEET: "🤝 meet", EventType.CHASE: "⚡ catch up"}
EVENT_COLUMNS = ["#", "time (s)", "position (m)", "red distance (m)", "blue distance (m)", "type"]


def circular_coordinates(position: float, track_length: float) -> tuple[float, float]:
    """Map a track coordinate onto the unit circle, clockwise from the top."""
    angle = np.pi / 2 - (position / track_length) * 2 * np.pi
    return float(np.cos(angle)), float(np.sin(angle))


def create_track_figure(snapshot: SimulationSnapshot) -> go.Figure:
    """Draw the runners on a straight lane view or a circular track.

    Args:
        snapshot: Committed simulation state

    Returns:
        Plotly figure
    """
    track_length = snapshot.track_length
    fig = go.Figure()

    if get_policy(snapshot.scenario).is_closed_track:
        theta = np.linspace(0, 2 * np.pi, 181)
        fig.add_trace(go.Scatter(
            x=np.cos(theta),
            y=np.sin(theta),
            mode="lines",
            line=dict(color=TRACK_COLOR, width=14),
            hoverinfo="skip",
            showlegend=False,
        ))
        red_xy = circular_coordinates(snapshot.red.position, track_length)
        blue_xy = circular_coordinates(snapshot.blue.position, track_length)
        fig.add_annotation(x=0, y=1.18, text="start / finish", showarrow=False)
        axis_range = [-1.35, 1.35]
        fig.update_xaxes(range=axis_range, visible=False)
        fig.update_yaxes(range=axis_range, visible=False, scaleanchor="x")
    else:
        fig.add_trace(go.Scatter(
            x=[0, track_length],
            y=[0, 0],
            mode="lines",
            line=dict(color=TRACK_COLOR, width=14),
            hoverinfo="skip",
            showlegend=False,
        ))
        red_xy = (snapshot.red.position, LANE_OFFSET)
        blue_xy = (snapshot.blue.position, -LANE_OFFSET)
        fig.add_annotation(x=0, y=-0.45, text="start 0 m", showarrow=False)
        fig.add_annotation(x=track_length, y=-0.45, text=f"end {track_length:g} m", showarrow=False)
        fig.update_xaxes(range=[-0.05 * track_length, 1.05 * track_length], visible=False)
        fig.update_yaxes(range=[-0.6, 0.6], visible=False)

    for name, (x, y), color in (
        ("Red", red_xy, RED_COLOR),
        ("Blue", blue_xy, BLUE_COLOR),
    ):
        fig.add_trace(go.Scatter(
            x=[x],
            y=[y],
            mode="markers+text",
            name=name,
            text=[name[0]],
            textfont=dict(color="white"),
            marker=dict(size=24, color=color, line=dict(color="white", width=2)),
        ))

    fig.update_layout(
        height=300,
        margin=dict(l=20, r=20, t=20, b=20),
        template="plotly_white",
        showlegend=False,
    )
    return fig


def visible_window(latest_time: float, time_window: float) -> tuple[float, float]:
    """Time range shown by the scrolling chart."""
    start = max(0.0, latest_time - time_window)
    return start, start + time_window


def create_space_time_figure(
    history: Sequence[HistoryPoint],
    events: Sequence[MeetingEvent],
    track_length: float,
    time_window: float = 20.0,
) -> go.Figure:
    """Position-vs-time chart over a sliding window with event markers.

    Args:
        history: Position samples, oldest first
        events: Recorded events
        track_length: Track length for the position axis
        time_window: Seconds of history visible at once

    Returns:
        Plotly figure
    """
    latest_time = history[-1].t if history else 0.0
    start, end = visible_window(latest_time, time_window)

    visible = [p for p in history if p.t >= start]
    visible_events = [e for e in events if start <= e.t <= latest_time]

    times = [p.t for p in visible]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=times,
        y=[p.red_pos for p in visible],
        mode="lines",
        name="Red",
        line=dict(color=RED_COLOR, width=3),
    ))
    fig.add_trace(go.Scatter(
        x=times,
        y=[p.blue_pos for p in visible],
        mode="lines",
        name="Blue",
        line=dict(color=BLUE_COLOR, width=3),
    ))
    fig.add_trace(go.Scatter(
        x=[e.t for e in visible_events],
        y=[e.pos for e in visible_events],
        mode="markers",
        name="Meeting",
        marker=dict(size=10, color="white", line=dict(color=EVENT_COLOR, width=2)),
    ))

    fig.update_layout(
        title="Position-time graph (crossing lines are meetings)",
        xaxis=dict(title="Time (s)", range=[start, end]),
        yaxis=dict(title="Position (m)", range=[0, track_length]),
        hovermode="x unified",
        template="plotly_white",
        height=320,
        margin=dict(l=40, r=20, t=50, b=40),
    )
    return fig


def events_to_dataframe(events: Sequence[MeetingEvent]) -> pd.DataFrame:
    """Tabulate events newest first, numbered in recording order.

    Args:
        events: Recorded events, oldest first

    Returns:
        DataFrame with one row per event
    """
    rows = [
        {
            "#": index,
            "time (s)": round(event.t, 1),
            "position (m)": round(event.pos),
            "red distance (m)": round(event.red_total_distance),
            "blue distance (m)": round(event.blue_total_distance),
            "type": EVENT_LABELS[event.event_type],
        }
        for index, event in enumerate(events, 1)
    ]
    rows.reverse()
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)
