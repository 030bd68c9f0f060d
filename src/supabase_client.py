"""
Fitness Dashboard — Supabase REST Client

Thin wrapper over the PostgREST endpoint Supabase exposes at /rest/v1.
Reads return pandas DataFrames; the only write is inserting a workout.

Every call takes optional StoreSettings; without them the environment
settings from src.config are used.
"""
import time
from datetime import date, timedelta

import pandas as pd
import requests

from src import config
from src.config import StoreSettings

MAX_RETRIES = 3
RETRY_BACKOFF = 2  # exponential backoff multiplier
TIMEOUT = 15

WORKOUT_COLUMNS = [
    "id", "user_id", "name", "duration_minutes", "calories_burned",
    "difficulty", "notes", "body_parts", "completed_at",
]
DAILY_STAT_COLUMNS = ["user_id", "date", "calories_burned", "calorie_goal"]
BODY_PART_COLUMNS = ["user_id", "body_part", "priority", "last_worked_date"]


class StoreNotConfigured(requests.exceptions.RequestException):
    """No Supabase URL: every call fails like an unreachable store."""


def _settings(settings: StoreSettings | None) -> StoreSettings:
    return settings if settings is not None else config.store_settings()


def _headers(settings: StoreSettings | None = None) -> dict:
    settings = _settings(settings)
    return {
        "apikey": settings.anon_key,
        "Authorization": f"Bearer {settings.bearer}",
        "Content-Type": "application/json",
    }


def _url(table: str, settings: StoreSettings | None = None) -> str:
    settings = _settings(settings)
    if not settings.url:
        raise StoreNotConfigured("SUPABASE_URL is not configured")
    return f"{settings.url}/rest/v1/{table}"


def _get(table: str, params: list[tuple], settings: StoreSettings | None = None) -> list[dict]:
    """
    GET rows from a table.

    Rate limits (429) are retried until attempts run out (RetryError).
    Timeouts and 5xx are retried too, but the last one is raised as is.
    Other 4xx fail immediately.
    """
    url, headers = _url(table, settings), _headers(settings)
    for attempt in range(1, MAX_RETRIES + 1):
        last = attempt == MAX_RETRIES
        try:
            r = requests.get(url, headers=headers, params=params, timeout=TIMEOUT)
        except requests.exceptions.Timeout:
            if last:
                raise
            reason = "timeout"
        else:
            if r.status_code == 429:
                reason = "rate limited"
            elif r.status_code >= 500 and not last:
                reason = f"HTTP {r.status_code}"
            else:
                r.raise_for_status()
                return r.json()
        if not last:
            wait = RETRY_BACKOFF ** attempt
            print(f"  ⏳ Supabase {table}: {reason}, retrying in {wait}s ({attempt}/{MAX_RETRIES})")
            time.sleep(wait)
    raise requests.exceptions.RetryError(f"Supabase {table} query failed after {MAX_RETRIES} attempts")


def _post(table: str, body: dict, settings: StoreSettings | None = None) -> list[dict]:
    # No retry: a failed insert is reported and resubmitted by the user.
    url = _url(table, settings)
    r = requests.post(
        url,
        headers={**_headers(settings), "Prefer": "return=representation"},
        json=body,
        timeout=TIMEOUT,
    )
    r.raise_for_status()
    return r.json()


# ═════════════════════════════════════════════════════════════════════
# READS
# ═════════════════════════════════════════════════════════════════════

def fetch_today_stat(user_id: str, today: date, settings: StoreSettings | None = None) -> dict | None:
    """The daily_stats row for (user, today), or None."""
    rows = _get(config.DAILY_STATS_TABLE, [
        ("select", "*"),
        ("user_id", f"eq.{user_id}"),
        ("date", f"eq.{today.isoformat()}"),
        ("limit", "1"),
    ], settings)
    return rows[0] if rows else None


def fetch_recent_workouts(
    user_id: str,
    limit: int = config.RECENT_WORKOUTS_LIMIT,
    settings: StoreSettings | None = None,
) -> pd.DataFrame:
    """Most recent workouts, newest first."""
    rows = _get(config.WORKOUTS_TABLE, [
        ("select", "*"),
        ("user_id", f"eq.{user_id}"),
        ("order", "completed_at.desc"),
        ("limit", str(limit)),
    ], settings)
    return workouts_to_dataframe(rows)


def fetch_weekly_stats(user_id: str, today: date, settings: StoreSettings | None = None) -> pd.DataFrame:
    """daily_stats rows with date in [today - 6, today], oldest first."""
    week_ago = today - timedelta(days=config.WINDOW_DAYS - 1)
    rows = _get(config.DAILY_STATS_TABLE, [
        ("select", "date,calories_burned,calorie_goal"),
        ("user_id", f"eq.{user_id}"),
        ("date", f"gte.{week_ago.isoformat()}"),
        ("date", f"lte.{today.isoformat()}"),
        ("order", "date"),
    ], settings)
    return daily_stats_to_dataframe(rows)


def fetch_body_part_progress(user_id: str, settings: StoreSettings | None = None) -> pd.DataFrame:
    rows = _get(config.BODY_PART_PROGRESS_TABLE, [
        ("select", "*"),
        ("user_id", f"eq.{user_id}"),
    ], settings)
    return body_parts_to_dataframe(rows)


# ═════════════════════════════════════════════════════════════════════
# WRITE
# ═════════════════════════════════════════════════════════════════════

def insert_workout(payload: dict, settings: StoreSettings | None = None) -> dict:
    """Insert one workout row. Raises requests.HTTPError on rejection."""
    created = _post(config.WORKOUTS_TABLE, payload, settings)
    return created[0] if created else payload


# ═════════════════════════════════════════════════════════════════════
# CONVERSION
# ═════════════════════════════════════════════════════════════════════

def _local_day(value) -> pd.Timestamp:
    """Midnight of a stored date. Zoned values are moved to local time first."""
    if value is None or pd.isna(value):
        return pd.NaT
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(config.TIMEZONE).tz_localize(None)
    return ts.normalize()


def _local_days(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values.apply(_local_day))


def workouts_to_dataframe(rows: list[dict]) -> pd.DataFrame:
    """
    Convert raw workout rows to a DataFrame.

    completed_at becomes a naive timestamp in the configured local timezone,
    so calendar-day comparisons in the analytics layer match what the user
    sees. body_parts is always a list.
    """
    if not rows:
        return pd.DataFrame(columns=WORKOUT_COLUMNS)
    df = pd.DataFrame(rows)
    for col in WORKOUT_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df["completed_at"] = (
        pd.to_datetime(df["completed_at"], utc=True, format="ISO8601")
        .dt.tz_convert(config.TIMEZONE)
        .dt.tz_localize(None)
    )
    df["body_parts"] = df["body_parts"].apply(lambda v: list(v) if isinstance(v, (list, tuple)) else [])
    df["duration_minutes"] = pd.to_numeric(df["duration_minutes"], errors="coerce").fillna(0).astype(int)
    df["calories_burned"] = pd.to_numeric(df["calories_burned"], errors="coerce").fillna(0).astype(int)
    return df.sort_values("completed_at", ascending=False).reset_index(drop=True)


def daily_stats_to_dataframe(rows: list[dict]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=DAILY_STAT_COLUMNS)
    df = pd.DataFrame(rows)
    df["date"] = _local_days(df["date"])
    return df.sort_values("date").reset_index(drop=True)


def body_parts_to_dataframe(rows: list[dict]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=BODY_PART_COLUMNS)
    df = pd.DataFrame(rows)
    if "last_worked_date" not in df.columns:
        df["last_worked_date"] = None
    df["last_worked_date"] = _local_days(df["last_worked_date"])
    return df.reset_index(drop=True)
