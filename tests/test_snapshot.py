"""
Tests for the snapshot loader and the write-then-invalidate flow.
"""
from datetime import date
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
import requests

TODAY = date(2024, 1, 10)


def _patch_reads(**overrides):
    """Patch the four store reads; pass an exception instance to make one fail."""
    results = {
        "fetch_today_stat": {"date": "2024-01-10", "calories_burned": 420, "calorie_goal": 600},
        "fetch_recent_workouts": pd.DataFrame([{"id": "a", "completed_at": pd.Timestamp("2024-01-10 08:00"),
                                                "body_parts": ["Core"]}]),
        "fetch_weekly_stats": pd.DataFrame([{"date": pd.Timestamp("2024-01-10"), "calories_burned": 420,
                                             "calorie_goal": 600}]),
        "fetch_body_part_progress": pd.DataFrame(),
    }
    results.update(overrides)
    patches = []
    for name, value in results.items():
        if isinstance(value, Exception):
            patches.append(patch(f"src.supabase_client.{name}", side_effect=value))
        else:
            patches.append(patch(f"src.supabase_client.{name}", return_value=value))
    return patches


class TestLoadSnapshot:

    def test_all_reads_succeed(self):
        from src.snapshot import load_snapshot
        patches = _patch_reads()
        for p in patches:
            p.start()
        try:
            snap = load_snapshot("user-1", TODAY)
        finally:
            for p in patches:
                p.stop()
        assert snap.errors == {}
        assert snap.today_stat["calories_burned"] == 420
        assert len(snap.workouts) == 1
        assert len(snap.weekly_stats) == 1

    def test_one_failure_is_isolated(self):
        from src.snapshot import load_snapshot
        patches = _patch_reads(fetch_recent_workouts=requests.exceptions.ConnectionError("down"))
        for p in patches:
            p.start()
        try:
            snap = load_snapshot("user-1", TODAY)
        finally:
            for p in patches:
                p.stop()
        assert list(snap.errors) == ["workouts"]
        assert snap.workouts.empty
        assert snap.today_stat is not None
        assert len(snap.weekly_stats) == 1
        assert not snap.all_failed

    def test_everything_failing_degrades_to_defaults(self):
        from src.analytics import derive_dashboard
        from src.snapshot import load_snapshot
        err = requests.exceptions.Timeout("slow")
        patches = _patch_reads(
            fetch_today_stat=err, fetch_recent_workouts=err,
            fetch_weekly_stats=err, fetch_body_part_progress=err,
        )
        for p in patches:
            p.start()
        try:
            snap = load_snapshot("user-1", TODAY)
        finally:
            for p in patches:
                p.stop()
        assert snap.all_failed
        dash = derive_dashboard(snap.today_stat, snap.workouts, snap.weekly_stats, snap.body_parts,
                                pd.Timestamp("2024-01-10 18:00"))
        assert dash["today"]["calories"] == 0
        assert dash["streak"] == 0
        assert len(dash["calorie_series"]) == 7


class TestSubmitWorkout:

    FORM = {
        "name": "Core Blast", "duration_minutes": "20", "calories_burned": "180",
        "difficulty": "Beginner", "notes": "", "body_parts": ["Core"],
    }

    def test_success_invalidates(self):
        from src.snapshot import submit_workout
        invalidate = MagicMock()
        with patch("src.supabase_client.insert_workout", return_value={"id": "new"}) as insert:
            result = submit_workout(self.FORM, "user-1", invalidate)
        assert result == {"id": "new"}
        assert insert.call_args.args[0]["duration_minutes"] == 20
        invalidate.assert_called_once()

    def test_invalid_form_sends_nothing(self):
        from src.snapshot import submit_workout
        from src.workout_form import WorkoutFormError
        invalidate = MagicMock()
        with patch("src.supabase_client.insert_workout") as insert:
            with pytest.raises(WorkoutFormError):
                submit_workout({**self.FORM, "duration_minutes": "0"}, "user-1", invalidate)
        insert.assert_not_called()
        invalidate.assert_not_called()

    def test_failed_insert_skips_invalidation(self):
        from src.snapshot import submit_workout
        invalidate = MagicMock()
        with patch("src.supabase_client.insert_workout",
                   side_effect=requests.exceptions.HTTPError("400 Bad Request")):
            with pytest.raises(requests.exceptions.HTTPError):
                submit_workout(self.FORM, "user-1", invalidate)
        invalidate.assert_not_called()

    def test_unconfigured_store_reported_as_request_error(self, monkeypatch):
        from src import config
        from src.snapshot import submit_workout
        monkeypatch.setattr(config, "SUPABASE_URL", "")
        invalidate = MagicMock()
        with patch("src.supabase_client.requests.post") as post:
            with pytest.raises(requests.exceptions.RequestException):
                submit_workout(self.FORM, "user-1", invalidate)
        post.assert_not_called()
        invalidate.assert_not_called()

    def test_settings_passed_to_insert(self):
        from src.config import StoreSettings
        from src.snapshot import submit_workout
        settings = StoreSettings(url="https://other.supabase.co", anon_key="k")
        with patch("src.supabase_client.insert_workout", return_value={"id": "new"}) as insert:
            submit_workout(self.FORM, "user-1", MagicMock(), settings=settings)
        assert insert.call_args.kwargs["settings"] is settings
