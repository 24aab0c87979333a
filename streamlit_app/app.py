"""Adaptive Rest Explorer — Streamlit dashboard.

Run with:
    streamlit run streamlit_app/app.py

Shows how the rest engine arrives at a recommendation for one set and
how synthetic training history shifts it.
"""

from __future__ import annotations

import asyncio
import logging

import streamlit as st

from rest_engine.config import TIMER_ALERT_CHECKPOINTS, parse_checkpoints
from rest_engine.exceptions import RestEngineError
from rest_engine.models.decision_trace import RuleStatus
from rest_engine.models.enums import AdjustmentReason

from helpers import (
    ADJUSTMENT_COLORS,
    ADJUSTMENT_LABELS,
    DEMO_USER_ID,
    DIFFICULTY_LABELS,
    breakdown_rows,
    build_catalogue,
    build_engine,
    build_performance_input,
    checkpoint_schedule,
    confidence_label,
    format_clock,
    format_delta,
    generate_set_logs,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Adaptive Rest Explorer",
    page_icon="⏱️",
    layout="wide",
)


@st.cache_resource
def get_catalogue():
    return build_catalogue()


def _render_trace(trace) -> None:
    """Render a DecisionTrace with color-coded rule results."""
    status_icons = {
        RuleStatus.FIRED: "🟢",
        RuleStatus.SKIPPED: "🟠",
        RuleStatus.NOT_APPLICABLE: "⚪",
    }
    for rr in trace.rule_results:
        icon = status_icons.get(rr.status, "⚪")
        st.markdown(f"{icon} **{rr.rule_id}** — _{rr.status.name}_: {rr.explanation}")
    st.caption(f"History: {trace.history_status}")
    if trace.notes:
        st.markdown(f"**Notes:** {trace.notes}")


def _render_adjustment_bars(calculation) -> None:
    for adjustment in calculation.adjustments:
        color = ADJUSTMENT_COLORS.get(adjustment.reason, "#CCCCCC")
        label = ADJUSTMENT_LABELS.get(adjustment.reason, adjustment.reason.value)
        st.markdown(
            f'<div style="background:{color};padding:6px 12px;border-radius:4px;'
            f'margin:2px 0;width:100%;"><strong>{label}</strong> | '
            f"{format_delta(adjustment.delta_seconds)} | {adjustment.explanation}</div>",
            unsafe_allow_html=True,
        )


# ---------------------------------------------------------------------------
# Sidebar — Set & History
# ---------------------------------------------------------------------------

catalogue = get_catalogue()
exercise_ids = catalogue.exercise_ids

st.sidebar.title("Set")

with st.sidebar.expander("Exercise", expanded=True):
    exercise_id = st.selectbox(
        "Exercise",
        exercise_ids,
        index=exercise_ids.index("bench-press") if "bench-press" in exercise_ids else 0,
    )
    difficulty = catalogue.get_difficulty_class(exercise_id)
    st.caption(f"Difficulty: {DIFFICULTY_LABELS.get(difficulty, difficulty.name)}")

with st.sidebar.expander("Performance", expanded=True):
    set_number = st.number_input("Set number", 1, 20, 1)
    reps_completed = st.number_input("Reps completed", 0, 100, 8)
    weight_kg = st.number_input("Weight (kg, 0 = bodyweight)", 0.0, 500.0, 60.0, step=2.5)
    use_rpe = st.checkbox("Report RPE", value=True)
    rpe = st.slider("RPE", 1, 10, 8) if use_rpe else None

with st.sidebar.expander("History (synthetic)"):
    use_history = st.checkbox("Include training history", value=False)
    sessions = st.number_input("Sessions", 1, 50, 6)
    sets_per_session = st.number_input("Sets per session", 1, 10, 4)
    mean_rest = st.number_input("Typical rest (s)", 15, 300, 110)
    spread = st.number_input("Rest spread (s)", 0, 90, 10)
    drift = st.number_input("Rest drift per session (s)", -20, 20, 0)

with st.sidebar.expander("Timer alerts"):
    default_checkpoints = ",".join(
        str(c) for c in sorted(parse_checkpoints(TIMER_ALERT_CHECKPOINTS))
    ) or "30,60"
    raw_checkpoints = st.text_input("Alert at (seconds, comma-separated)", default_checkpoints)

# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------

st.title("Adaptive Rest Explorer")

set_logs = (
    generate_set_logs(
        sessions=int(sessions),
        sets_per_session=int(sets_per_session),
        mean_rest_seconds=float(mean_rest),
        spread_seconds=float(spread),
        drift_per_session=float(drift),
    )
    if use_history
    else None
)

try:
    performance = build_performance_input(set_number, reps_completed, weight_kg, rpe)
    engine = build_engine(exercise_id, set_logs, catalogue)
    calculation, trace = asyncio.run(
        engine.calculate_with_trace(DEMO_USER_ID, exercise_id, performance)
    )
except RestEngineError as exc:
    st.error(f"{exc.kind.value}: {exc}")
    st.stop()

tab_result, tab_trace, tab_history = st.tabs(["Recommendation", "Decision Trace", "History"])

with tab_result:
    col1, col2, col3 = st.columns(3)
    col1.metric("Recommended rest", format_clock(calculation.recommended_rest_seconds))
    col2.metric(
        "vs. base",
        format_delta(calculation.recommended_rest_seconds - calculation.base_rest_seconds),
    )
    col3.metric(
        "Confidence",
        f"{calculation.confidence:.0%}",
        confidence_label(calculation.confidence),
        delta_color="off",
    )
    st.progress(calculation.confidence)
    st.markdown(f"💡 {calculation.reasoning}")

    _render_adjustment_bars(calculation)
    st.table(breakdown_rows(calculation))

    try:
        checkpoints = sorted(parse_checkpoints(raw_checkpoints))
    except ValueError:
        st.warning("Checkpoints must be whole seconds, e.g. 30,60")
        checkpoints = []
    schedule = checkpoint_schedule(calculation.recommended_rest_seconds, checkpoints)
    if schedule:
        st.subheader("Alert schedule")
        st.table(schedule)

    if calculation.adjustment_for(AdjustmentReason.RPE) is None:
        st.info("No RPE reported — effort adjustment not applied.")

with tab_trace:
    _render_trace(trace)

with tab_history:
    if not set_logs:
        st.info("Enable synthetic history in the sidebar to personalize the recommendation.")
    else:
        st.dataframe(set_logs, use_container_width=True)
