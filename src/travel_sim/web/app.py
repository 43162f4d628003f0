"""Travel Problem Simulator - Streamlit Web Application.

Interactive page with live track and position-time charts, a meeting log and
an AI math teacher chat. Run with::

    streamlit run src/travel_sim/web/app.py
"""

import asyncio
import time
from typing import Optional

import streamlit as st
import structlog

from travel_sim.config import get_config
from travel_sim.llm.chat_session import ChatSession
from travel_sim.llm.exceptions import ProviderUnavailableError
from travel_sim.llm.factory import create_provider
from travel_sim.llm.teacher import MathTeacher, SimulationContext
from travel_sim.logging_config import configure_from_settings
from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.events import DetectionSettings
from travel_sim.simulation.core.scenario import ScenarioType, get_policy
from travel_sim.simulation.engine.driver import SimulationDriver
from travel_sim.web.charts import (
    create_space_time_figure,
    create_track_figure,
    events_to_dataframe,
)

logger = structlog.get_logger(__name__)

SCENARIO_LABELS = {
    ScenarioType.LINEAR_MEET: "🤝 Meeting (face to face)",
    ScenarioType.LINEAR_CHASE: "🏃 Chase (same direction)",
    ScenarioType.ROUND_TRIP: "🔁 Round trips",
    ScenarioType.CIRCULAR: "⭕ Circular track",
}

FRAME_INTERVAL = 0.05


def _create_teacher() -> MathTeacher:
    """Teacher bound to the configured provider, or a provider-less one."""
    settings = get_config().llm
    try:
        provider = create_provider(settings)
    except ProviderUnavailableError as e:
        logger.warning("teacher_provider_unavailable", error=str(e))
        provider = None
    return MathTeacher(provider, timeout=settings.timeout)


def init_session_state() -> None:
    """Create the driver, chat session and teacher once per browser session."""
    if "driver" in st.session_state:
        return

    clock = get_config().clock
    st.session_state.driver = SimulationDriver(
        detection=DetectionSettings(
            proximity_fraction=clock.proximity_fraction,
            debounce_seconds=clock.debounce_seconds,
        ),
        max_frame_ms=clock.max_frame_ms,
        history_capacity=clock.history_capacity,
    )
    st.session_state.chat = ChatSession()
    st.session_state.teacher = _create_teacher()


def apply_controls(
    driver: SimulationDriver,
    scenario: ScenarioType,
    config: SimulationConfig,
) -> bool:
    """Push sidebar choices into the driver.

    Changing either the scenario or the parameters resets the run and
    clears the chat transcript.

    Returns:
        True if the driver was reset
    """
    changed = False
    if scenario != driver.scenario:
        driver.select_scenario(scenario)
        changed = True
    if config != driver.config:
        driver.configure(config)
        changed = True
    if changed:
        st.session_state.chat.clear_history()
    return changed


def render_sidebar(driver: SimulationDriver) -> None:
    """Scenario picker, parameter sliders and playback buttons."""
    with st.sidebar:
        st.markdown("### 🏁 Travel Problem Lab")
        st.markdown("---")

        scenario = st.selectbox(
            "Scenario",
            options=list(ScenarioType),
            format_func=lambda s: SCENARIO_LABELS[s],
            index=list(ScenarioType).index(driver.scenario),
        )
        st.caption(get_policy(scenario).description)

        track_length = st.slider("Track length (m)", 100, 1000, int(driver.config.track_length), 50)
        red_speed = st.slider("🐰 Red speed (m/s)", 1, 20, int(driver.config.red_speed))
        blue_speed = st.slider("🐢 Blue speed (m/s)", 1, 20, int(driver.config.blue_speed))

        initial_distance = driver.config.initial_distance
        if scenario == ScenarioType.LINEAR_CHASE:
            initial_distance = st.slider(
                "Head start (m)",
                0,
                max(track_length - 50, 0),
                int(min(initial_distance, track_length - 50)),
                10,
            )

        config = SimulationConfig.from_user_input(
            track_length=track_length,
            red_speed=red_speed,
            blue_speed=blue_speed,
            initial_distance=initial_distance,
        )
        apply_controls(driver, scenario, config)

        st.markdown("---")
        col1, col2 = st.columns(2)
        with col1:
            label = "⏸️ Pause" if driver.is_playing else "▶️ Play"
            if st.button(label, use_container_width=True):
                driver.toggle()
                st.rerun()
        with col2:
            if st.button("🔄 Reset", use_container_width=True):
                driver.reset()
                st.rerun()


def render_simulation(driver: SimulationDriver) -> None:
    """Track view, status metrics, space-time chart and meeting log."""
    snapshot = driver.snapshot()

    col1, col2, col3 = st.columns(3)
    col1.metric("⏱️ Time", f"{snapshot.elapsed:.1f} s")
    col2.metric("🐰 Red distance", f"{snapshot.red.total_distance:.0f} m")
    col3.metric("🐢 Blue distance", f"{snapshot.blue.total_distance:.0f} m")

    st.plotly_chart(create_track_figure(snapshot), use_container_width=True)
    st.plotly_chart(
        create_space_time_figure(
            snapshot.history,
            snapshot.events,
            snapshot.track_length,
            time_window=get_config().clock.time_window,
        ),
        use_container_width=True,
    )

    st.markdown("#### 📋 Meeting log")
    if snapshot.events:
        st.dataframe(events_to_dataframe(snapshot.events), hide_index=True, use_container_width=True)
    else:
        st.info("No meetings yet.")


def render_chat(driver: SimulationDriver) -> None:
    """Teacher chat bound to the current simulation context."""
    chat: ChatSession = st.session_state.chat
    teacher: MathTeacher = st.session_state.teacher

    st.markdown("### 🧑‍🏫 Ask the math teacher")
    if teacher.provider is None:
        st.caption("Set ANTHROPIC_API_KEY or OPENAI_API_KEY to enable the teacher.")

    for message in chat.messages:
        with st.chat_message(message.role):
            st.markdown(message.content)

    explain = st.button("💡 Explain what I'm watching")
    prompt: Optional[str] = st.chat_input("Why do they meet there?")

    if not (explain or prompt):
        return

    context = SimulationContext.from_snapshot(driver.snapshot())
    with st.spinner("The teacher is thinking..."):
        if explain:
            asyncio.run(teacher.explain_scenario(chat, context))
        else:
            asyncio.run(teacher.ask(prompt, chat, context))
    st.rerun()


def advance_frame(driver: SimulationDriver) -> None:
    """Feed one wall-clock frame to the driver and schedule the next run."""
    if not driver.is_playing:
        return
    driver.on_frame(time.perf_counter() * 1000.0)
    time.sleep(FRAME_INTERVAL)
    st.rerun()


def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="Travel Problem Simulator",
        page_icon="🏃",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    configure_from_settings(get_config().logging)

    init_session_state()
    driver: SimulationDriver = st.session_state.driver

    render_sidebar(driver)

    st.title("🏃 Travel Problem Simulator")
    sim_col, chat_col = st.columns([3, 2])
    with sim_col:
        render_simulation(driver)
    with chat_col:
        render_chat(driver)

    advance_frame(driver)


if __name__ == "__main__":
    main()
