"""
Page Replacement Visualizer — FIFO, LRU & Optimal

Interactive front end for the page replacement engine:
    - Animated step-by-step playback of one policy
    - Side-by-side comparison of all policies
    - Belady's anomaly sweep for FIFO
    - Frame-by-time timeline of the last run

Built with Streamlit for the web interface and Plotly for visualizations.
All simulation work happens in engine.py / analysis.py; this file only
collects input, calls them, and draws what they return.
"""

# =============================================================================
# IMPORTS
# =============================================================================

import streamlit as st                       # Web application framework
import plotly.graph_objects as go            # Interactive plotting library

from engine import HIT, POLICY_ORDER, ReplacementPolicy, simulate
from analysis import STALE, compare_all, find_anomalies, project_timeline, sweep_faults
from utils import (
    EMPTY_COLOR,
    format_ratio,
    get_color,
    narrate,
    parse_frame_count,
    parse_reference_string,
    play_trace,
    random_workload,
)


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_REFERENCES = "7,0,1,2,0,3,0,4,2,3,0,3,2"
DEFAULT_FRAMES = 3
DEFAULT_SPEED = 2.0
LOG_LINES = 20


# =============================================================================
# SESSION STATE
# =============================================================================

def init_state():
    """Create the session keys the page relies on (persists across reruns)."""
    st.session_state.setdefault("references_text", DEFAULT_REFERENCES)
    st.session_state.setdefault("frames_text", str(DEFAULT_FRAMES))
    st.session_state.setdefault("event_log", ["Welcome! Enter data, then select a simulation or analysis option."])
    st.session_state.setdefault("last_run", None)
    st.session_state.setdefault("comparison", None)
    st.session_state.setdefault("sweep", None)


def log(message: str):
    st.session_state.event_log.append(message)


def reset_state():
    """Restore default inputs and clear every result and the event log."""
    st.session_state.references_text = DEFAULT_REFERENCES
    st.session_state.frames_text = str(DEFAULT_FRAMES)
    st.session_state.event_log = ["Simulation reset"]
    st.session_state.last_run = None
    st.session_state.comparison = None
    st.session_state.sweep = None


def fill_random():
    pages, frames = random_workload()
    st.session_state.references_text = ",".join(map(str, pages))
    st.session_state.frames_text = str(frames)


# =============================================================================
# FIGURES
# =============================================================================

def frames_figure(step):
    """Bar chart of the frame set after one step, the referenced page highlighted."""
    fig = go.Figure()
    x, y, text, colors = [], [], [], []
    for i, page in enumerate(step.frames):
        x.append(i)
        y.append(1)
        text.append(f"F{i}: P{page}")
        colors.append(get_color(step.event) if page == step.page else get_color(None))

    fig.add_trace(go.Bar(x=x, y=y, text=text, marker_color=colors, hovertext=text, hoverinfo="text"))
    fig.update_layout(height=150, showlegend=False, yaxis=dict(showticklabels=False),
                      xaxis=dict(title="Frame", dtick=1))
    return fig


def sweep_figure(series, anomalies):
    capacities = [p.capacity for p in series]
    faults = [p.faults for p in series]

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=capacities, y=faults, mode="lines+markers", name="Page Faults",
                             line=dict(color="rgb(239, 68, 68)")))

    # Mark every segment where more frames produced more faults
    for low, high in anomalies:
        fig.add_vrect(x0=low, x1=high, fillcolor="orange", opacity=0.2, line_width=0)

    fig.update_layout(title="FIFO: Page Faults vs. Number of Frames",
                      xaxis_title="Number of Frames", yaxis_title="Total Page Faults", height=350)
    return fig


def timeline_figure(grid):
    """Plotly table: one row per frame, one column per reference."""
    header = ["Frame #"] + [str(p) for p in grid.pages]
    columns = [[f"Frame {i}" for i in range(grid.capacity)]]
    fills = [["#e2e8f0"] * grid.capacity]

    for step in range(len(grid.pages)):
        cells = grid.column(step)
        columns.append(["-" if c is None else str(c.page) for c in cells])
        fills.append([EMPTY_COLOR if c is None else get_color(c.state) for c in cells])

    fig = go.Figure(data=[go.Table(
        header=dict(values=header, fill_color="#334155", font=dict(color="white")),
        cells=dict(values=columns, fill_color=fills, align="center"),
    )])
    fig.update_layout(height=80 + 30 * grid.capacity, margin=dict(l=0, r=0, t=10, b=0))
    return fig


# =============================================================================
# STREAMLIT UI
# =============================================================================

st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")
init_state()

st.title("Page Replacement Visualizer — FIFO, LRU & Optimal")

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

st.sidebar.text_area("Page reference string (comma separated page numbers)", key="references_text")
st.sidebar.text_input("Number of frames", key="frames_text")

policy = st.sidebar.selectbox("Replacement Policy", options=list(POLICY_ORDER))

run_speed = st.sidebar.slider(
    "Playback speed (steps/sec)",
    min_value=0.5,
    max_value=5.0,
    value=DEFAULT_SPEED,
)

st.sidebar.markdown("---")
st.sidebar.button("Random Workload", on_click=fill_random)
st.sidebar.button("Reset", on_click=reset_state)

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

with col1:
    st.subheader("Controls")
    run_clicked = st.button(f"Run {policy}")
    compare_clicked = st.button("Compare All")
    belady_clicked = st.button("Belady's Anomaly (FIFO)")

with col2:
    st.subheader("Physical Frames")
    m1, m2, m3 = st.columns(3)
    current_slot = m1.empty()
    hits_slot = m2.empty()
    faults_slot = m3.empty()
    chart_slot = st.empty()

    current_slot.metric("Current Page", "-")
    hits_slot.metric("Hits", 0)
    faults_slot.metric("Faults", 0)

# -----------------------------------------------------------------------------
# ACTIONS
# -----------------------------------------------------------------------------

if run_clicked:
    try:
        pages = parse_reference_string(st.session_state.references_text)
        frame_count = parse_frame_count(st.session_state.frames_text)
        result = simulate(policy, pages, frame_count)
    except ValueError as e:
        log(f"Error: {e}")
        st.error(str(e))
    else:
        # The trace is complete before playback; the loop only paces the display
        for frame in play_trace(result.steps, run_speed):
            current_slot.metric("Current Page", frame.step.page)
            hits_slot.metric("Hits", frame.hits)
            faults_slot.metric("Faults", frame.faults)
            chart_slot.plotly_chart(frames_figure(frame.step), use_container_width=True,
                                    key=f"frames-{frame.index}")
        current_slot.metric("Current Page", "Done")
        st.session_state.event_log.extend(narrate(result))
        st.session_state.last_run = (pages, result)

if compare_clicked:
    try:
        pages = parse_reference_string(st.session_state.references_text)
        frame_count = parse_frame_count(st.session_state.frames_text)
        st.session_state.comparison = compare_all(pages, frame_count)
    except ValueError as e:
        log(f"Error: {e}")
        st.error(str(e))
    else:
        log("--- Running Full Comparison ---")
        log(f"Best policy: {st.session_state.comparison.best}")

if belady_clicked:
    # The sweep chooses its own frame counts
    try:
        pages = parse_reference_string(st.session_state.references_text)
        series = sweep_faults(ReplacementPolicy.FIFO, pages)
    except ValueError as e:
        log(f"Error: {e}")
        st.error(str(e))
    else:
        anomalies = find_anomalies(series)
        st.session_state.sweep = (series, anomalies)
        log("--- Analyzing Belady's Anomaly for FIFO ---")
        if anomalies:
            for low, high in anomalies:
                log(f"Anomaly: {low} -> {high} frames increases faults")
        else:
            log("No anomaly: faults never increase with more frames")

# -----------------------------------------------------------------------------
# RESULTS
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Event Log")
    for line in st.session_state.event_log[-LOG_LINES:][::-1]:
        st.text(line)

with col2:
    comparison = st.session_state.comparison
    if comparison is not None:
        st.subheader("Comparison")
        rows = comparison.rows()
        table = []
        for row in rows:
            table.append({
                "Algorithm": row["policy"] + (" (best)" if row["best"] else ""),
                "Page Faults": row["faults"],
                "Hits": row["hits"],
                "Hit Ratio": format_ratio(row["hit_ratio"]),
            })
        st.table(table)

        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=[r["policy"] for r in rows],
            y=[r["faults"] for r in rows],
            marker_color=[get_color(HIT) if r["best"] else get_color(STALE) for r in rows],
        ))
        fig.update_layout(height=300, title="Page Faults by Policy")
        st.plotly_chart(fig, use_container_width=True)

    if st.session_state.sweep is not None:
        st.subheader("Belady's Anomaly")
        series, anomalies = st.session_state.sweep
        st.plotly_chart(sweep_figure(series, anomalies), use_container_width=True)

    if st.session_state.last_run is not None:
        pages, result = st.session_state.last_run
        st.subheader(f"Timeline ({result.policy}, {result.capacity} frames)")
        grid = project_timeline(pages, result.steps, result.capacity)
        st.plotly_chart(timeline_figure(grid), use_container_width=True)
    else:
        st.write("Select a simulation to generate its timeline view here.")

# =============================================================================
# FOOTER - Usage Tips
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Enter a comma separated page reference string and a frame count, then run a policy.\n"
    "- **Compare All** runs FIFO, LRU and Optimal on the same input; ties go to the earlier policy.\n"
    "- **Belady's Anomaly** sweeps FIFO over 1..max(10, distinct pages + 2) frames.\n"
    "- Try `1,2,3,4,1,2,5,1,2,3,4,5`: FIFO takes 9 faults with 3 frames but 10 with 4."
)
