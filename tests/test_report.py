"""
Tests for the terminal digest.
"""
from unittest.mock import patch

import pandas as pd


class TestRunReport:

    def test_prints_digest(self, capsys):
        from src.report import run_report
        from src.snapshot import Snapshot
        snap = Snapshot(
            today_stat={"calories_burned": 420, "calorie_goal": 600},
            workouts=pd.DataFrame([
                {"id": "a", "name": "Push Day", "completed_at": pd.Timestamp("2024-01-10 08:00"),
                 "body_parts": ["Upper Body"]},
            ]),
        )
        with patch("src.report.load_snapshot", return_value=snap):
            result = run_report("user-1", now=pd.Timestamp("2024-01-10 18:00"))
        out = capsys.readouterr().out
        assert "420 / 600 kcal (180 to goal)" in out
        assert "Streak: 1 days" in out
        assert "Focus on Upper Body and Lower Body today" in out
        assert "(defaults)" in out
        assert result["all_failed"] is False
        assert result["dashboard"]["focus_today"] == "Upper Body"


class TestParseUser:

    def test_flag(self):
        from src.report import _parse_user
        assert _parse_user(["--user", "abc"]) == "abc"

    def test_falls_back_to_config(self, monkeypatch):
        from src import report
        monkeypatch.setattr(report, "FITNESS_USER_ID", "from-env")
        assert report._parse_user([]) == "from-env"
