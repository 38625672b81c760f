from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from daisyworld.analysis.regulation import luminosity_sweep, regulation_summary
from daisyworld.config import SimulationConfig
from daisyworld.engine.model import DaisyworldEngine
from daisyworld.logging_config import setup_logging
from daisyworld.presets import PRESETS, advance_with_ramp, get_preset
from daisyworld.twin.simulator import TimeSeriesRecorder, build_visual_frame

st.set_page_config(page_title="Daisyworld Console", layout="wide")

st.markdown(
    """
<style>
.stApp {
    background-color: #0b1220;
    color: #e5edf7;
    font-family: "JetBrains Mono", "SFMono-Regular", monospace;
}
[data-testid="stSidebar"] {
    background-color: #0e1627;
    border-right: 1px solid #1f2a3f;
}
[data-testid="stMetric"] {
    background-color: #111b2f;
    border: 1px solid #2a3b58;
    border-radius: 8px;
    padding: 10px 12px;
}
</style>
""",
    unsafe_allow_html=True,
)

PLOT_TEMPLATE = "plotly_dark"
ACCENT_ORANGE = "#f6a04d"
ACCENT_BLUE = "#4c8dff"
WHITE_DAISY = "#E0E0E0"
BLACK_DAISY = "#7d8597"
BARE_SOIL = "#8B4513"
CHART_WINDOW = 100


@st.cache_resource(show_spinner=False)
def _init_logging() -> bool:
    setup_logging()
    return True


@st.cache_data(show_spinner=False)
def _cached_sweep(config_payload: dict[str, object], settle_steps: int) -> pd.DataFrame:
    config = SimulationConfig.from_dict(config_payload)
    return luminosity_sweep(np.linspace(1.0, 1.8, 5), settle_steps=settle_steps, config=config)


def _new_session(config: SimulationConfig) -> None:
    engine = DaisyworldEngine(config)
    recorder = TimeSeriesRecorder()
    recorder.attach(engine, include_current=True)
    st.session_state["engine"] = engine
    st.session_state["recorder"] = recorder


def _reset_session(config: SimulationConfig) -> None:
    engine: DaisyworldEngine = st.session_state["engine"]
    recorder: TimeSeriesRecorder = st.session_state["recorder"]
    engine.reset(config)
    recorder.clear()
    recorder(engine.snapshot())


_init_logging()

with st.sidebar:
    st.header("Presets")
    preset_name = st.selectbox("Preset", options=list(PRESETS), index=0)
    st.caption(PRESETS[preset_name].description)
    load_preset = st.button("Load preset")

    st.header("Initial Conditions")
    solar_luminosity = st.slider("Solar luminosity", 0.6, 1.6, 1.0, 0.01)
    white_init = st.slider("White daisy coverage", 0.0, 1.0, 0.2, 0.01)
    black_init = st.slider("Black daisy coverage", 0.0, 1.0, 0.2, 0.01)
    death_rate = st.slider("Death rate", 0.1, 0.5, 0.3, 0.01)
    simulation_speed = st.slider("Simulation speed", 0.1, 10.0, 1.0, 0.1)
    apply_settings = st.button("Reset with settings", type="primary")

    st.header("Run")
    batch_steps = st.number_input("Steps per run", min_value=1, max_value=2000, value=50)
    step_once = st.button("Step")
    run_batch = st.button("Run")

sidebar_config = SimulationConfig(
    solar_luminosity=float(solar_luminosity),
    white_daisy_init=float(white_init),
    black_daisy_init=float(black_init),
    death_rate=float(death_rate),
    simulation_speed=float(simulation_speed),
)

if "engine" not in st.session_state:
    _new_session(sidebar_config)
if apply_settings:
    _reset_session(sidebar_config)
    st.session_state["active_ramp"] = None
if load_preset:
    _reset_session(get_preset(preset_name).config)
    st.session_state["active_ramp"] = get_preset(preset_name).luminosity_ramp

engine: DaisyworldEngine = st.session_state["engine"]
recorder: TimeSeriesRecorder = st.session_state["recorder"]
ramp = st.session_state.get("active_ramp")

if step_once or run_batch:
    # Streamlit reruns the script per interaction, so batches stand in for the live loop.
    total = 1 if step_once else int(batch_steps * engine.simulation_speed)
    advance_with_ramp(engine, ramp, max(1, total))

frames = recorder.to_frame()
latest = frames.iloc[-1]
visual = build_visual_frame(latest)

st.title("Daisyworld Console")
st.caption("Planetary self-regulation: two daisy populations coupled to radiative balance")

tab_overview, tab_regulation = st.tabs(["Planet Overview", "Regulation"])

with tab_overview:
    kpi_cols = st.columns(5)
    kpi_cols[0].metric("Time", f"{int(latest['time'])}")
    kpi_cols[1].metric("Temperature (K)", f"{latest['temperature_k']:.1f}")
    kpi_cols[2].metric("White coverage", f"{latest['white_coverage']:.3f}")
    kpi_cols[3].metric("Black coverage", f"{latest['black_coverage']:.3f}")
    kpi_cols[4].metric("Solar luminosity", f"{latest['solar_luminosity']:.2f}")

    planet_col, chart_col = st.columns([1, 2])
    with planet_col:
        segments = visual["segments"]
        planet_fig = go.Figure(
            go.Pie(
                labels=[segment["surface"] for segment in segments],
                values=[segment["portion"] for segment in segments],
                marker=dict(colors=[BARE_SOIL, WHITE_DAISY, BLACK_DAISY]),
                hole=0.15,
                sort=False,
            )
        )
        planet_fig.update_layout(
            template=PLOT_TEMPLATE,
            title=f"{visual['temperature_label']} | {visual['luminosity_label']}",
            showlegend=True,
        )
        st.plotly_chart(planet_fig, width="stretch")

    window = frames.tail(CHART_WINDOW)
    with chart_col:
        temp_fig = go.Figure()
        temp_fig.add_trace(
            go.Scatter(
                x=window["time"],
                y=window["temperature_k"],
                mode="lines",
                name="Planet",
                line=dict(color=ACCENT_ORANGE, width=2.2),
            )
        )
        temp_fig.add_trace(
            go.Scatter(
                x=window["time"],
                y=window["white_local_temp_k"],
                mode="lines",
                name="White local",
                line=dict(color=WHITE_DAISY, width=1.4, dash="dot"),
            )
        )
        temp_fig.add_trace(
            go.Scatter(
                x=window["time"],
                y=window["black_local_temp_k"],
                mode="lines",
                name="Black local",
                line=dict(color=BLACK_DAISY, width=1.4, dash="dot"),
            )
        )
        temp_fig.update_layout(
            template=PLOT_TEMPLATE,
            title="Temperature",
            xaxis_title="Time step",
            yaxis_title="Temperature (K)",
        )
        st.plotly_chart(temp_fig, width="stretch")

        population_fig = go.Figure()
        for column, label, color in (
            ("white_coverage", "White daisies", WHITE_DAISY),
            ("black_coverage", "Black daisies", BLACK_DAISY),
            ("bare_soil_coverage", "Bare soil", BARE_SOIL),
        ):
            population_fig.add_trace(
                go.Scatter(
                    x=window["time"],
                    y=window[column],
                    mode="lines",
                    name=label,
                    line=dict(color=color, width=2.0),
                )
            )
        population_fig.update_layout(
            template=PLOT_TEMPLATE,
            title="Surface Coverage",
            xaxis_title="Time step",
            yaxis=dict(title="Fraction", range=[0.0, 1.0]),
        )
        st.plotly_chart(population_fig, width="stretch")

    st.download_button(
        "Download time series (CSV)",
        data=frames.to_csv(index=False).encode("utf-8"),
        file_name="daisyworld_timeseries.csv",
        mime="text/csv",
    )

with tab_regulation:
    settle_steps = st.slider("Settle steps per luminosity level", 20, 300, 100, 10)
    sweep = _cached_sweep(engine.config.to_dict(), int(settle_steps))
    summary = regulation_summary(sweep)

    summary_cols = st.columns(3)
    summary_cols[0].metric("Regulated rise (K)", f"{summary['regulated_rise_k']:.2f}")
    summary_cols[1].metric("Bare-planet rise (K)", f"{summary['unregulated_rise_k']:.2f}")
    summary_cols[2].metric("Regulation ratio", f"{summary['regulation_ratio']:.3f}")

    sweep_fig = go.Figure()
    sweep_fig.add_trace(
        go.Scatter(
            x=sweep["solar_luminosity"],
            y=sweep["temperature_k"],
            mode="lines+markers",
            name="Daisyworld",
            line=dict(color=ACCENT_ORANGE, width=2.2),
        )
    )
    sweep_fig.add_trace(
        go.Scatter(
            x=sweep["solar_luminosity"],
            y=sweep["unregulated_temperature_k"],
            mode="lines+markers",
            name="Bare planet",
            line=dict(color=ACCENT_BLUE, width=2.2, dash="dash"),
        )
    )
    sweep_fig.update_layout(
        template=PLOT_TEMPLATE,
        title="Temperature Response to Luminosity",
        xaxis_title="Solar luminosity",
        yaxis_title="Temperature (K)",
    )
    st.plotly_chart(sweep_fig, width="stretch")
    st.dataframe(sweep, width="stretch")
