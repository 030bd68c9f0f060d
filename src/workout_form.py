"""
Fitness Dashboard — Workout Form

Validates raw form input before anything is sent to the store.
"""
from src.config import BODY_PART_OPTIONS, DIFFICULTY_OPTIONS, DEFAULT_DIFFICULTY


class WorkoutFormError(ValueError):
    """Raised with every problem found in a submitted form."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def empty_form() -> dict:
    return {
        "name": "",
        "duration_minutes": "",
        "calories_burned": "",
        "difficulty": DEFAULT_DIFFICULTY,
        "notes": "",
        "body_parts": [],
    }


def _positive_int(raw, label: str, errors: list[str]) -> int | None:
    text = str(raw).strip() if raw is not None else ""
    if not text:
        errors.append(f"{label} is required")
        return None
    try:
        value = int(text)
    except ValueError:
        try:
            as_float = float(text)
        except ValueError:
            errors.append(f"{label} must be a number")
            return None
        if not as_float.is_integer():
            errors.append(f"{label} must be a whole number")
            return None
        value = int(as_float)
    if value < 1:
        errors.append(f"{label} must be at least 1")
        return None
    return value


def validate_workout_form(form: dict, user_id: str) -> dict:
    """
    Turn raw form values into an insert payload for the workouts table.

    Raises WorkoutFormError when required fields are missing or not numeric,
    or when duration / calories are below 1. No field is partially accepted.
    """
    errors = []
    if not user_id:
        errors.append("You must be signed in to log a workout")

    name = (form.get("name") or "").strip()
    if not name:
        errors.append("Workout name is required")

    duration = _positive_int(form.get("duration_minutes"), "Duration", errors)
    calories = _positive_int(form.get("calories_burned"), "Calories burned", errors)

    difficulty = form.get("difficulty") or DEFAULT_DIFFICULTY
    if difficulty not in DIFFICULTY_OPTIONS:
        errors.append(f"Difficulty must be one of {', '.join(DIFFICULTY_OPTIONS)}")

    body_parts = list(dict.fromkeys(form.get("body_parts") or []))
    if not body_parts:
        errors.append("Select at least one body part")
    unknown = [bp for bp in body_parts if bp not in BODY_PART_OPTIONS]
    if unknown:
        errors.append(f"Unknown body part(s): {', '.join(unknown)}")

    if errors:
        raise WorkoutFormError(errors)

    notes = (form.get("notes") or "").strip()
    return {
        "user_id": user_id,
        "name": name,
        "duration_minutes": duration,
        "calories_burned": calories,
        "difficulty": difficulty,
        "notes": notes or None,
        "body_parts": body_parts,
    }
