"""
Fitness Dashboard — Snapshot Loader

Runs the four independent reads concurrently. A failing read leaves its data
set empty and is recorded in Snapshot.errors; the other reads are unaffected.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

import pandas as pd
import requests

from src import supabase_client as store
from src.config import StoreSettings
from src.supabase_client import WORKOUT_COLUMNS, DAILY_STAT_COLUMNS, BODY_PART_COLUMNS
from src.workout_form import validate_workout_form


@dataclass
class Snapshot:
    today_stat: dict | None = None
    workouts: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=WORKOUT_COLUMNS))
    weekly_stats: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=DAILY_STAT_COLUMNS))
    body_parts: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=BODY_PART_COLUMNS))
    errors: dict = field(default_factory=dict)

    @property
    def all_failed(self) -> bool:
        return len(self.errors) == 4


def load_snapshot(user_id: str, today: date, settings: StoreSettings | None = None) -> Snapshot:
    snap = Snapshot()
    queries = {
        "today_stat": lambda: store.fetch_today_stat(user_id, today, settings=settings),
        "workouts": lambda: store.fetch_recent_workouts(user_id, settings=settings),
        "weekly_stats": lambda: store.fetch_weekly_stats(user_id, today, settings=settings),
        "body_parts": lambda: store.fetch_body_part_progress(user_id, settings=settings),
    }
    with ThreadPoolExecutor(max_workers=len(queries)) as pool:
        futures = {name: pool.submit(fn) for name, fn in queries.items()}
        for name, future in futures.items():
            try:
                setattr(snap, name, future.result())
            except (requests.exceptions.RequestException, ValueError) as e:
                snap.errors[name] = str(e)
                print(f"  ⚠️  {name} fetch failed: {e}")
    return snap


def submit_workout(
    form: dict,
    user_id: str,
    invalidate: Callable[[], None],
    settings: StoreSettings | None = None,
) -> dict:
    """
    Validate, insert, then invalidate cached reads.

    Nothing is sent if validation fails (WorkoutFormError). Any store failure
    raises a requests.RequestException and skips invalidation, so nothing
    changes.
    """
    payload = validate_workout_form(form, user_id)
    created = store.insert_workout(payload, settings=settings)
    invalidate()
    return created
