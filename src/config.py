"""
Fitness Dashboard — Configuration

Environment-driven settings plus the fixed lookup tables the metrics layer
relies on. Lookup tables are keyed by enums and always go through a getter
with an explicit default, so every body part / priority resolves to something.
"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable

# ── Supabase ─────────────────────────────────────────────────────────
SUPABASE_URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
# User JWT for row-level security. Falls back to the anon key.
SUPABASE_ACCESS_TOKEN = os.environ.get("SUPABASE_ACCESS_TOKEN", "")

FITNESS_USER_ID = os.environ.get("FITNESS_USER_ID", "")
TIMEZONE = os.environ.get("FITNESS_TIMEZONE", "UTC")


@dataclass(frozen=True)
class StoreSettings:
    url: str
    anon_key: str
    access_token: str = ""

    @property
    def bearer(self) -> str:
        return self.access_token or self.anon_key


def store_settings(lookup: Callable[[str], str] | None = None) -> StoreSettings:
    """
    Supabase connection settings.

    Environment variables win; `lookup` (e.g. a Streamlit secrets reader)
    fills whatever they leave empty.
    """
    def pick(name: str, value: str) -> str:
        if value or lookup is None:
            return value
        return lookup(name) or ""

    return StoreSettings(
        url=pick("SUPABASE_URL", SUPABASE_URL).rstrip("/"),
        anon_key=pick("SUPABASE_ANON_KEY", SUPABASE_ANON_KEY),
        access_token=pick("SUPABASE_ACCESS_TOKEN", SUPABASE_ACCESS_TOKEN),
    )


# ── Table names ──────────────────────────────────────────────────────
WORKOUTS_TABLE = "workouts"
DAILY_STATS_TABLE = "daily_stats"
BODY_PART_PROGRESS_TABLE = "body_part_progress"

# ── Business rules ───────────────────────────────────────────────────
DEFAULT_CALORIE_GOAL = 600
WEEKLY_SESSION_TARGET = 3  # sessions per body part per week = 100%
WINDOW_DAYS = 7
RECENT_WORKOUTS_LIMIT = 10

# Fixed English abbreviations, indexed by date.weekday()
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class BodyPart(str, Enum):
    UPPER_BODY = "Upper Body"
    LOWER_BODY = "Lower Body"
    CORE = "Core"
    CARDIO = "Cardio"
    FULL_BODY = "Full Body"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BodyPartSourceKind(str, Enum):
    CONFIGURED = "configured"  # the user's body_part_progress rows
    DEFAULT = "default"  # DEFAULT_BODY_PARTS


BODY_PART_OPTIONS = [bp.value for bp in BodyPart]
DIFFICULTY_OPTIONS = [d.value for d in Difficulty]
DEFAULT_DIFFICULTY = Difficulty.INTERMEDIATE.value

# ═════════════════════════════════════════════════════════════════════
# LOOKUP TABLES
# ═════════════════════════════════════════════════════════════════════

EXERCISE_SUGGESTIONS = {
    BodyPart.UPPER_BODY: ["Push-ups", "Pull-ups", "Shoulder Press"],
    BodyPart.CORE: ["Planks", "Russian Twists", "Mountain Climbers"],
    BodyPart.LOWER_BODY: ["Squats", "Lunges", "Calf Raises"],
    BodyPart.CARDIO: ["Running", "Cycling", "Jump Rope"],
}
DEFAULT_EXERCISES = ["General Exercise"]

NEXT_SESSION = {
    Priority.HIGH: "Today",
    Priority.MEDIUM: "Tomorrow",
    Priority.LOW: "Day after tomorrow",
}
DEFAULT_NEXT_SESSION = "This week"

PRIORITY_COLORS = {
    Priority.HIGH: "#ef4444",
    Priority.MEDIUM: "#eab308",
    Priority.LOW: "#22c55e",
}
DEFAULT_PRIORITY_COLOR = "#94a3b8"

PRIORITY_ICONS = {
    Priority.HIGH: "🔴",
    Priority.MEDIUM: "🎯",
    Priority.LOW: "✅",
}

# Used when the user has no body_part_progress rows yet
DEFAULT_BODY_PARTS = [
    {"body_part": BodyPart.UPPER_BODY.value, "priority": Priority.HIGH.value},
    {"body_part": BodyPart.CORE.value, "priority": Priority.MEDIUM.value},
    {"body_part": BodyPart.LOWER_BODY.value, "priority": Priority.HIGH.value},
    {"body_part": BodyPart.CARDIO.value, "priority": Priority.LOW.value},
]


def _enum_or_none(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def get_exercises(body_part: str) -> list[str]:
    """Suggested exercises for a body part, ["General Exercise"] if unknown."""
    key = _enum_or_none(BodyPart, body_part)
    return list(EXERCISE_SUGGESTIONS.get(key, DEFAULT_EXERCISES))


def get_next_session(priority: str) -> str:
    """Next-session hint for a priority, "This week" if unknown."""
    key = _enum_or_none(Priority, priority)
    return NEXT_SESSION.get(key, DEFAULT_NEXT_SESSION)


def get_priority_color(priority: str) -> str:
    key = _enum_or_none(Priority, priority)
    return PRIORITY_COLORS.get(key, DEFAULT_PRIORITY_COLOR)


def get_priority_icon(priority: str) -> str:
    key = _enum_or_none(Priority, priority)
    return PRIORITY_ICONS.get(key, "")
