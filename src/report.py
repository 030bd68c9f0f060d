"""
Fitness Dashboard — Terminal Digest
Run manually or from cron: python -m src.report [--user USER_ID]
"""
import sys

import pandas as pd

from src.analytics import derive_dashboard, local_now
from src.config import FITNESS_USER_ID, BodyPartSourceKind
from src.snapshot import load_snapshot


def run_report(user_id: str, now=None) -> dict:
    """Fetch one snapshot, derive the dashboard values and print them."""
    now = pd.Timestamp(now) if now is not None else local_now()
    print("📊 Fitness digest")
    print(f"   {now.strftime('%Y-%m-%d %H:%M')} | user {user_id}")

    print("\n📥 Fetching data...")
    snap = load_snapshot(user_id, now.date())
    print(f"   {len(snap.workouts)} recent workouts, {len(snap.weekly_stats)} daily stats, "
          f"{len(snap.body_parts)} body-part rows")

    dash = derive_dashboard(snap.today_stat, snap.workouts, snap.weekly_stats, snap.body_parts, now)
    today = dash["today"]

    print(f"\n{'='*50}")
    print(f"🔥 Today: {today['calories']} / {today['goal']} kcal ({today['remaining']} to goal)")
    print(f"🎯 Weekly goal: {dash['weekly_goal_pct']:.0f}%")
    print(f"🏆 Streak: {dash['streak']} days")
    print(f"⏰ Focus today: {dash['focus_today']}")

    print("\n📅 Last 7 days:")
    for _, row in dash["calorie_series"].iterrows():
        print(f"   {row['day']} {row['date'].strftime('%d %b')}: {row['calories']:>5} / {row['goal']} kcal")

    label = "configured" if dash["body_part_source"] == BodyPartSourceKind.CONFIGURED else "defaults"
    print(f"\n💪 Body parts ({label}):")
    for _, card in dash["body_parts"].iterrows():
        print(f"   {card['body_part']:<11} {card['priority'] or '?':<6} "
              f"{card['progress']:>5.1f}% | last: {card['last_worked']} | next: {card['next_session']}")

    print(f"\n💡 {dash['recommendation']['headline']}")

    return {"dashboard": dash, "errors": snap.errors, "all_failed": snap.all_failed}


def _parse_user(argv: list[str]) -> str:
    if "--user" in argv:
        idx = argv.index("--user")
        if idx + 1 < len(argv):
            return argv[idx + 1]
    return FITNESS_USER_ID


if __name__ == "__main__":
    user = _parse_user(sys.argv[1:])
    if not user:
        print("❌ No user id. Set FITNESS_USER_ID or pass --user USER_ID")
        sys.exit(2)

    result = run_report(user)
    if result["errors"]:
        print("\n⚠️  Some data could not be loaded:")
        for name, err in result["errors"].items():
            print(f"  {name}: {err}")
    if result["all_failed"]:
        sys.exit(1)
