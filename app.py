"""
🏃 Fitness Dashboard — Streamlit UI
Run: streamlit run app.py
"""
import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import requests

from src import config
from src.analytics import derive_dashboard, local_now
from src.config import BODY_PART_OPTIONS, DIFFICULTY_OPTIONS, BodyPartSourceKind, get_priority_icon
from src.snapshot import load_snapshot, submit_workout
from src.workout_form import WorkoutFormError, empty_form

# ── Page Config ──────────────────────────────────────────────────────
st.set_page_config(page_title="Fitness Dashboard", page_icon="🏃", layout="wide", initial_sidebar_state="expanded")


def _secret(name: str) -> str:
    try:
        return st.secrets.get(name, "")
    except FileNotFoundError:
        return ""


# Env vars win; Streamlit secrets fill the gaps
STORE = config.store_settings(_secret)
USER_ID = config.FITNESS_USER_ID or _secret("FITNESS_USER_ID")

st.markdown("""
<style>
    .stApp { font-family: 'Inter', sans-serif; }
    div[data-testid="stMetric"] {
        background: linear-gradient(135deg, #eff6ff 0%, #faf5ff 100%);
        border: 1px solid #e2e8f0; border-radius: 12px; padding: 16px;
    }
    .priority-badge { padding: 2px 8px; border-radius: 8px; color: white; font-size: 0.8rem; }
</style>
""", unsafe_allow_html=True)

PL = dict(
    template="plotly_white", paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=40, r=20, t=40, b=40),
)


# ── Data Loading ─────────────────────────────────────────────────────
@st.cache_data(ttl=300)
def load_data(user_id: str, today_iso: str, settings: config.StoreSettings):
    return load_snapshot(user_id, pd.Timestamp(today_iso).date(), settings)


if not USER_ID:
    st.error("No user configured. Set FITNESS_USER_ID (env or Streamlit secrets).")
    st.stop()

now = local_now()
snap = load_data(USER_ID, now.date().isoformat(), STORE)
dash = derive_dashboard(snap.today_stat, snap.workouts, snap.weekly_stats, snap.body_parts, now)

# ── Sidebar ──────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown("# 🏃 Fitness Dashboard")
    st.caption("Track your progress and optimize your workout routine")
    st.divider()
    if st.button("🔄 Refresh data", use_container_width=True):
        st.cache_data.clear()
        st.rerun()
    st.caption(f"📡 Loaded {now.strftime('%d %b %H:%M')} ({config.TIMEZONE})")
    if snap.errors:
        st.warning("⚠️ Could not load: " + ", ".join(sorted(snap.errors)))

# ── Quick Stats ──────────────────────────────────────────────────────
st.markdown("## 📊 Fitness Dashboard")

today = dash["today"]
c1, c2, c3, c4 = st.columns(4)
with c1:
    st.metric("🔥 Today's Calories", today["calories"])
    st.progress(today["pct"] / 100, text=f"{today['remaining']} calories to goal")
with c2:
    st.metric("🎯 Weekly Goal", f"{dash['weekly_goal_pct']:.0f}%")
    st.progress(dash["weekly_goal_pct"] / 100)
with c3:
    st.metric("🏆 Current Streak", dash["streak"])
    st.caption("days in a row")
with c4:
    st.metric("⏰ Focus Today", dash["focus_today"])
    st.caption("Based on your routine")


def render_calories_chart(series: pd.DataFrame, detailed: bool = False, key: str = "cal"):
    st.markdown("### Calories Burned (This Week)")
    st.caption("Track your daily calorie burn progress")
    chart_type = "Bar"
    if detailed:
        chart_type = st.radio("Chart", ["Bar", "Line"], horizontal=True, key=f"{key}_type")
        st.caption("Only the last 7 days are tracked; there is no monthly view.")

    fig = go.Figure()
    if chart_type == "Bar":
        fig.add_trace(go.Bar(x=series["day"], y=series["calories"], name="Calories Burned", marker_color="#3b82f6"))
        fig.add_trace(go.Bar(x=series["day"], y=series["goal"], name="Daily Goal", marker_color="#e2e8f0"))
    else:
        fig.add_trace(go.Scatter(x=series["day"], y=series["calories"], mode="lines+markers", name="Calories Burned",
                                 line=dict(color="#3b82f6", width=3), marker=dict(size=10)))
        fig.add_trace(go.Scatter(x=series["day"], y=series["goal"], mode="lines", name="Daily Goal",
                                 line=dict(color="#94a3b8", width=2, dash="dash")))
    fig.update_layout(**PL, height=350, yaxis_title="kcal")
    st.plotly_chart(fig, use_container_width=True, key=f"{key}_chart")


def render_body_parts(cards: pd.DataFrame, recommendation: dict, source_kind: BodyPartSourceKind,
                      detailed: bool = False):
    st.markdown("### 🎯 Body Part Focus Recommendations")
    st.caption("Optimize your workout routine based on your training history")
    if source_kind == BodyPartSourceKind.DEFAULT:
        st.caption("Using default focus areas until you configure your own.")

    for i, card in cards.iterrows():
        left, right = st.columns([3, 2])
        left.markdown(
            f"**{card['body_part']}** "
            f"<span class='priority-badge' style='background:{card['color']}'>"
            f"{get_priority_icon(card['priority'])} {card['priority']} priority</span>",
            unsafe_allow_html=True,
        )
        right.caption(f"Last: {card['last_worked']}")
        st.progress(card["progress"] / 100, text=f"Weekly Progress {card['progress']:.0f}%")
        if detailed:
            st.markdown("Recommended exercises: " + " · ".join(f"`{e}`" for e in card["exercises"]))
            st.caption(f"Next session: {card['next_session']}")
        if i < len(cards) - 1:
            st.divider()

    st.info(f"📈 **Today's Recommendation**\n\n{recommendation['headline']}. {recommendation['detail']}")


def render_workout_form():
    defaults = empty_form()
    if st.session_state.pop("reset_form", False):
        for field_name, value in defaults.items():
            if field_name != "body_parts":
                st.session_state[f"wf_{field_name}"] = value
        for bp in BODY_PART_OPTIONS:
            st.session_state[f"wf_bp_{bp}"] = False
    st.session_state.setdefault("wf_difficulty", defaults["difficulty"])
    if st.session_state.pop("workout_logged", False):
        st.toast("Workout logged successfully!", icon="✅")

    st.markdown("### ➕ Log New Workout")
    st.caption("Record your workout session details")
    with st.form("workout_form"):
        c1, c2 = st.columns(2)
        name = c1.text_input("Workout Name", placeholder="e.g., Morning Run", key="wf_name")
        difficulty = c2.selectbox("Difficulty", DIFFICULTY_OPTIONS, key="wf_difficulty")
        c3, c4 = st.columns(2)
        duration = c3.text_input("Duration (minutes)", placeholder="30", key="wf_duration_minutes")
        calories = c4.text_input("Calories Burned", placeholder="250", key="wf_calories_burned")

        st.markdown("Body Parts Worked")
        cols = st.columns(3)
        checked = []
        for idx, bp in enumerate(BODY_PART_OPTIONS):
            if cols[idx % 3].checkbox(bp, key=f"wf_bp_{bp}"):
                checked.append(bp)

        notes = st.text_area("Notes (optional)", placeholder="How did the workout feel? Any observations...",
                             key="wf_notes")
        submitted = st.form_submit_button("Log Workout", use_container_width=True)

    if not submitted:
        return
    form = {
        "name": name, "duration_minutes": duration, "calories_burned": calories,
        "difficulty": difficulty, "notes": notes, "body_parts": checked,
    }
    try:
        submit_workout(form, USER_ID, invalidate=st.cache_data.clear, settings=STORE)
    except WorkoutFormError as e:
        for err in e.errors:
            st.error(err)
    except requests.exceptions.RequestException as e:
        print(f"  ❌ Error logging workout: {e}")
        st.error("Failed to log workout")
    else:
        st.session_state["workout_logged"] = True
        st.session_state["reset_form"] = True
        st.rerun()


def render_recent_workouts(table: pd.DataFrame):
    st.markdown("### 🕐 Recent Workouts")
    st.caption("Your completed training sessions")
    if table.empty:
        st.info("No workouts logged yet.")
        return
    disp = table[["name", "when", "duration_minutes", "calories_burned", "difficulty", "body_parts"]].copy()
    disp["body_parts"] = disp["body_parts"].apply(lambda parts: ", ".join(parts or []))
    disp.columns = ["Workout", "When", "Duration (min)", "Calories", "Difficulty", "Body Parts"]
    st.dataframe(disp, hide_index=True, use_container_width=True)


# ══════════════════════════════════════════════════════════════════════
# TABS
# ══════════════════════════════════════════════════════════════════════
tab_overview, tab_calories, tab_focus, tab_workouts = st.tabs([
    "📊 Overview", "📈 Calories", "🎯 Focus Areas", "📅 Workouts"
])

with tab_overview:
    col_left, col_right = st.columns(2)
    with col_left:
        render_calories_chart(dash["calorie_series"], key="overview_cal")
    with col_right:
        render_body_parts(dash["body_parts"], dash["recommendation"], dash["body_part_source"])

with tab_calories:
    render_calories_chart(dash["calorie_series"], detailed=True, key="detail_cal")

with tab_focus:
    render_body_parts(dash["body_parts"], dash["recommendation"], dash["body_part_source"], detailed=True)

with tab_workouts:
    col_left, col_right = st.columns(2)
    with col_left:
        render_workout_form()
    with col_right:
        render_recent_workouts(dash["recent_workouts"])
