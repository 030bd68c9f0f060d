"""
Fitness Dashboard — Metrics Engine

Pure functions from already-fetched snapshots (pandas DataFrames) to the
values the dashboard shows. Nothing here talks to the store.

Every function takes an optional `now` (naive local timestamp) so results are
reproducible; by default it is the current time in the configured timezone.
"""
from dataclasses import dataclass
from datetime import timedelta

import pandas as pd

from src.config import (
    TIMEZONE,
    WINDOW_DAYS,
    WEEKLY_SESSION_TARGET,
    DEFAULT_CALORIE_GOAL,
    DEFAULT_BODY_PARTS,
    WEEKDAY_ABBR,
    BodyPart,
    BodyPartSourceKind,
    Priority,
    get_exercises,
    get_next_session,
    get_priority_color,
)

EPOCH = pd.Timestamp(0)


def local_now() -> pd.Timestamp:
    """Current time in the configured timezone, as a naive timestamp."""
    return pd.Timestamp.now(tz=TIMEZONE).tz_localize(None)


def _now(now=None) -> pd.Timestamp:
    return pd.Timestamp(now) if now is not None else local_now()


def _is_empty(df) -> bool:
    return df is None or df.empty


def _int_or(value, default: int) -> int:
    if value is None or pd.isna(value):
        return default
    return int(value)


def relative_day_label(ts: pd.Timestamp, now=None) -> str:
    """'Today', 'Yesterday' or '<N> days ago' for a completion timestamp."""
    now = _now(now)
    ts = pd.Timestamp(ts)
    calendar_diff = (now.normalize() - ts.normalize()).days
    if calendar_diff <= 0:  # future timestamps count as today
        return "Today"
    if calendar_diff == 1:
        return "Yesterday"
    return f"{(now - ts).days} days ago"


# ═══════════════════════════════════════════════════════════════════════
# 1. BODY-PART RECENCY & PROGRESS
# ═══════════════════════════════════════════════════════════════════════

def _tagged(workouts: pd.DataFrame, body_part: str) -> pd.DataFrame:
    """Workouts whose body_parts include body_part. Multi-tagged rows count for each tag."""
    mask = workouts["body_parts"].apply(
        lambda parts: isinstance(parts, (list, tuple, set)) and body_part in parts
    )
    return workouts[mask]


def last_worked_label(workouts: pd.DataFrame, body_part: str, now=None) -> str:
    if _is_empty(workouts):
        return "Never"
    tagged = _tagged(workouts, body_part)
    if tagged.empty:
        return "Never"
    latest = tagged["completed_at"].max()
    return relative_day_label(latest, now)


def weekly_progress(workouts: pd.DataFrame, body_part: str, now=None) -> float:
    """
    Share of the weekly target reached for a body part, 0-100.

    Counts tagged sessions completed since now - 7 days (inclusive);
    WEEKLY_SESSION_TARGET sessions = 100%.
    """
    if _is_empty(workouts):
        return 0.0
    now = _now(now)
    tagged = _tagged(workouts, body_part)
    count = int((tagged["completed_at"] >= now - timedelta(days=WINDOW_DAYS)).sum())
    return min(count / WEEKLY_SESSION_TARGET * 100, 100.0)


# ═══════════════════════════════════════════════════════════════════════
# 2. BODY-PART SOURCE + FOCUS RECOMMENDATION
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class BodyPartSource:
    """Body parts for one render pass: the user's rows, or the fixed defaults."""
    kind: BodyPartSourceKind
    rows: pd.DataFrame


def resolve_body_parts(config_rows: pd.DataFrame | None) -> BodyPartSource:
    if _is_empty(config_rows):
        rows = pd.DataFrame(DEFAULT_BODY_PARTS)
        rows["last_worked_date"] = pd.NaT
        return BodyPartSource(BodyPartSourceKind.DEFAULT, rows)
    rows = config_rows.copy()
    if "last_worked_date" not in rows.columns:
        rows["last_worked_date"] = pd.NaT
    return BodyPartSource(BodyPartSourceKind.CONFIGURED, rows.reset_index(drop=True))


def body_part_cards(source: BodyPartSource, workouts: pd.DataFrame, now=None) -> pd.DataFrame:
    """One row per body part with everything the focus card needs."""
    now = _now(now)
    cards = []
    for _, row in source.rows.iterrows():
        name = row["body_part"]
        priority = row.get("priority")
        cards.append({
            "body_part": name,
            "priority": priority,
            "progress": weekly_progress(workouts, name, now),
            "last_worked": last_worked_label(workouts, name, now),
            "exercises": get_exercises(name),
            "next_session": get_next_session(priority),
            "color": get_priority_color(priority),
        })
    return pd.DataFrame(cards, columns=[
        "body_part", "priority", "progress", "last_worked",
        "exercises", "next_session", "color",
    ])


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def focus_recommendation(cards: pd.DataFrame) -> dict:
    """Joint recommendation over all high-priority body parts."""
    high = [] if cards.empty else cards[cards["priority"] == Priority.HIGH.value]["body_part"].tolist()
    if not high:
        return {
            "focus_areas": [BodyPart.FULL_BODY.value],
            "headline": "Go for a balanced Full Body session today",
            "detail": "No area is flagged as high priority, so keep your routine balanced.",
        }
    return {
        "focus_areas": high,
        "headline": f"Focus on {_join_names(high)} today",
        "detail": "You haven't trained these areas recently and they're showing high priority status.",
    }


def today_focus(source: BodyPartSource) -> str:
    """
    The stalest high-priority body part.

    A missing last_worked_date counts as the epoch, so never-trained parts
    win. Ties keep input order.
    """
    rows = source.rows
    if rows.empty:
        return BodyPart.FULL_BODY.value
    high = rows[rows["priority"] == Priority.HIGH.value]
    if high.empty:
        return BodyPart.FULL_BODY.value
    last = pd.to_datetime(high["last_worked_date"]).fillna(EPOCH)
    return high.loc[last.sort_values(kind="stable").index[0], "body_part"]


# ═══════════════════════════════════════════════════════════════════════
# 3. WEEKLY CALORIE SERIES
# ═══════════════════════════════════════════════════════════════════════

def weekly_calorie_series(daily_stats: pd.DataFrame, now=None) -> pd.DataFrame:
    """
    Gap-filled calories for today - 6 .. today, oldest first.

    Days without a daily_stats row get calories 0 and the default goal.
    """
    today = _now(now).normalize()
    by_date = {}
    if not _is_empty(daily_stats):
        for rec in daily_stats.to_dict("records"):
            by_date.setdefault(pd.Timestamp(rec["date"]).normalize(), rec)

    rows = []
    for offset in range(WINDOW_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        rec = by_date.get(day, {})
        rows.append({
            "date": day,
            "day": WEEKDAY_ABBR[day.weekday()],
            "calories": _int_or(rec.get("calories_burned"), 0),
            "goal": _int_or(rec.get("calorie_goal"), DEFAULT_CALORIE_GOAL),
        })
    return pd.DataFrame(rows)


def weekly_goal_pct(series: pd.DataFrame) -> float:
    """Calories burned over calorie goal across the series, capped at 100."""
    total_goal = series["goal"].sum() if not series.empty else 0
    if total_goal <= 0:
        return 0.0
    return round(min(series["calories"].sum() / total_goal * 100, 100.0), 1)


# ═══════════════════════════════════════════════════════════════════════
# 4. STREAK + SUMMARY
# ═══════════════════════════════════════════════════════════════════════

def current_streak(workouts: pd.DataFrame, now=None) -> int:
    """
    Consecutive workout days ending today, looking back at most 7 days.

    A day without a workout stops the count, except today: an empty today
    just doesn't add to it.
    """
    if _is_empty(workouts):
        return 0
    now = _now(now)
    worked = set(pd.to_datetime(workouts["completed_at"]).dt.date)
    streak = 0
    for i in range(WINDOW_DAYS):
        day = (now - timedelta(days=i)).date()
        if day in worked:
            streak += 1
        elif i > 0:
            break
    return streak


def today_summary(stat: dict | None) -> dict:
    stat = stat or {}
    calories = _int_or(stat.get("calories_burned"), 0)
    goal = _int_or(stat.get("calorie_goal"), DEFAULT_CALORIE_GOAL)
    pct = min(calories / goal * 100, 100.0) if goal > 0 else 0.0
    return {
        "calories": calories,
        "goal": goal,
        "pct": round(pct, 1),
        "remaining": max(goal - calories, 0),
    }


def recent_workouts_table(workouts: pd.DataFrame, now=None) -> pd.DataFrame:
    cols = ["name", "when", "duration_minutes", "calories_burned", "difficulty", "body_parts", "notes"]
    if _is_empty(workouts):
        return pd.DataFrame(columns=cols)
    now = _now(now)
    table = workouts.sort_values("completed_at", ascending=False).copy()
    table["when"] = table["completed_at"].apply(lambda ts: relative_day_label(ts, now))
    for col in cols:
        if col not in table.columns:
            table[col] = None
    return table[cols].reset_index(drop=True)


def derive_dashboard(
    today_stat: dict | None,
    workouts: pd.DataFrame,
    weekly_stats: pd.DataFrame,
    body_part_rows: pd.DataFrame,
    now=None,
) -> dict:
    """Everything the dashboard renders, from one snapshot."""
    now = _now(now)
    source = resolve_body_parts(body_part_rows)
    cards = body_part_cards(source, workouts, now)
    series = weekly_calorie_series(weekly_stats, now)
    return {
        "today": today_summary(today_stat),
        "weekly_goal_pct": weekly_goal_pct(series),
        "streak": current_streak(workouts, now),
        "focus_today": today_focus(source),
        "body_part_source": source.kind,
        "body_parts": cards,
        "recommendation": focus_recommendation(cards),
        "calorie_series": series,
        "recent_workouts": recent_workouts_table(workouts, now),
    }
