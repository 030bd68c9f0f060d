"""
Tests for workout form validation — nothing invalid may reach the store.
"""
import pytest


def _form(**overrides) -> dict:
    form = {
        "name": "Morning Run",
        "duration_minutes": "30",
        "calories_burned": "250",
        "difficulty": "Intermediate",
        "notes": "",
        "body_parts": ["Cardio"],
    }
    form.update(overrides)
    return form


class TestValidateWorkoutForm:

    def test_valid_payload(self):
        from src.workout_form import validate_workout_form
        payload = validate_workout_form(_form(), "user-1")
        assert payload == {
            "user_id": "user-1",
            "name": "Morning Run",
            "duration_minutes": 30,
            "calories_burned": 250,
            "difficulty": "Intermediate",
            "notes": None,
            "body_parts": ["Cardio"],
        }

    def test_zero_duration_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError) as exc:
            validate_workout_form(_form(duration_minutes="0"), "user-1")
        assert "Duration must be at least 1" in exc.value.errors

    def test_non_numeric_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError) as exc:
            validate_workout_form(_form(calories_burned="lots"), "user-1")
        assert "Calories burned must be a number" in exc.value.errors

    def test_fractional_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError):
            validate_workout_form(_form(duration_minutes="12.5"), "user-1")

    def test_whole_float_accepted(self):
        from src.workout_form import validate_workout_form
        payload = validate_workout_form(_form(duration_minutes="45.0"), "user-1")
        assert payload["duration_minutes"] == 45

    def test_missing_fields_all_reported(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError) as exc:
            validate_workout_form(_form(name="  ", duration_minutes="", body_parts=[]), "user-1")
        assert len(exc.value.errors) == 3

    def test_unknown_body_part_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError):
            validate_workout_form(_form(body_parts=["Neck"]), "user-1")

    def test_unknown_difficulty_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError):
            validate_workout_form(_form(difficulty="Insane"), "user-1")

    def test_no_user_rejected(self):
        from src.workout_form import validate_workout_form, WorkoutFormError
        with pytest.raises(WorkoutFormError):
            validate_workout_form(_form(), "")

    def test_notes_kept_and_body_parts_deduplicated(self):
        from src.workout_form import validate_workout_form
        payload = validate_workout_form(
            _form(notes=" felt strong ", body_parts=["Core", "Cardio", "Core"]), "user-1"
        )
        assert payload["notes"] == "felt strong"
        assert payload["body_parts"] == ["Core", "Cardio"]

    def test_empty_form_defaults(self):
        from src.workout_form import empty_form
        form = empty_form()
        assert form["difficulty"] == "Intermediate"
        assert form["body_parts"] == []
