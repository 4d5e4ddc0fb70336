"""
FitForge Muscle Mapping Module
Static per-muscle exercise tables used when the upstream generators are
unavailable, and the muscle -> ExerciseDB body part lookup.
Pure logic - no network access.
"""
from typing import TypedDict

from models import Exercise


class FallbackRecord(TypedDict):
    target: str
    equipment: str
    secondary_muscles: list[str]


DEFAULT_BODY_PART = "chest"

MUSCLE_TO_BODY_PART: dict[str, str] = {
    "chest": "chest",
    "pecs": "chest",
    "back": "back",
    "lats": "back",
    "traps": "back",
    "lower back": "back",
    "shoulders": "shoulders",
    "delts": "shoulders",
    "biceps": "upper arms",
    "triceps": "upper arms",
    "arms": "upper arms",
    "forearms": "lower arms",
    "legs": "upper legs",
    "quads": "upper legs",
    "quadriceps": "upper legs",
    "hamstrings": "upper legs",
    "glutes": "upper legs",
    "calves": "lower legs",
    "abs": "waist",
    "core": "waist",
    "obliques": "waist",
    "cardio": "cardio",
    "full body": "cardio",
    "neck": "neck",
}

# ============================================================
# Workout fallback table
# (name, sets, reps, rest_seconds, muscle_group)
# ============================================================

FALLBACK_WORKOUT_EXERCISES: dict[str, list[tuple]] = {
    "chest": [
        ("Bench Press", 4, "8-10", 90, "Chest"),
        ("Incline Dumbbell Press", 3, "10-12", 60, "Chest"),
        ("Cable Flyes", 3, "12-15", 60, "Chest"),
    ],
    "back": [
        ("Barbell Rows", 4, "8-10", 90, "Back"),
        ("Lat Pulldown", 3, "10-12", 60, "Back"),
        ("Seated Cable Row", 3, "10-12", 60, "Back"),
    ],
    "shoulders": [
        ("Overhead Press", 4, "8-10", 90, "Shoulders"),
        ("Lateral Raises", 3, "12-15", 45, "Shoulders"),
        ("Face Pulls", 3, "15-20", 45, "Shoulders"),
    ],
    "biceps": [
        ("Barbell Curls", 3, "10-12", 60, "Biceps"),
        ("Hammer Curls", 3, "10-12", 60, "Biceps"),
    ],
    "triceps": [
        ("Tricep Pushdowns", 3, "12-15", 60, "Triceps"),
        ("Skull Crushers", 3, "10-12", 60, "Triceps"),
    ],
    "arms": [
        ("Barbell Curls", 3, "10-12", 60, "Biceps"),
        ("Tricep Pushdowns", 3, "12-15", 60, "Triceps"),
        ("Hammer Curls", 3, "10-12", 60, "Biceps"),
        ("Skull Crushers", 3, "10-12", 60, "Triceps"),
    ],
    "legs": [
        ("Squats", 4, "8-10", 120, "Quads"),
        ("Romanian Deadlifts", 4, "8-10", 90, "Hamstrings"),
        ("Leg Press", 3, "10-12", 90, "Quads"),
        ("Standing Calf Raises", 4, "15-20", 45, "Calves"),
    ],
    "quads": [
        ("Squats", 4, "8-10", 120, "Quads"),
        ("Leg Press", 3, "10-12", 90, "Quads"),
        ("Leg Extensions", 3, "12-15", 60, "Quads"),
    ],
    "hamstrings": [
        ("Romanian Deadlifts", 4, "8-10", 90, "Hamstrings"),
        ("Leg Curls", 3, "10-12", 60, "Hamstrings"),
    ],
    "glutes": [
        ("Hip Thrusts", 4, "10-12", 90, "Glutes"),
        ("Bulgarian Split Squats", 3, "10-12", 60, "Glutes"),
    ],
    "calves": [
        ("Standing Calf Raises", 4, "15-20", 45, "Calves"),
        ("Seated Calf Raises", 3, "15-20", 45, "Calves"),
    ],
    "core": [
        ("Plank", 3, "60s", 30, "Core"),
        ("Cable Crunches", 3, "15-20", 45, "Core"),
        ("Hanging Leg Raises", 3, "12-15", 45, "Core"),
    ],
    "abs": [
        ("Cable Crunches", 3, "15-20", 45, "Abs"),
        ("Hanging Leg Raises", 3, "12-15", 45, "Abs"),
    ],
    "cardio": [
        ("Jump Rope", 3, "60s", 30, "Cardio"),
        ("Burpees", 3, "12-15", 45, "Cardio"),
        ("Mountain Climbers", 3, "30s", 30, "Cardio"),
    ],
    "forearms": [
        ("Wrist Curls", 3, "15-20", 45, "Forearms"),
        ("Reverse Wrist Curls", 3, "15-20", 45, "Forearms"),
    ],
    "obliques": [
        ("Russian Twists", 3, "20", 45, "Obliques"),
        ("Side Planks", 3, "30s", 30, "Obliques"),
    ],
}

GENERIC_FULL_BODY = [
    ("Push-ups", 3, "15-20", 60, "Chest"),
    ("Squats", 3, "15-20", 60, "Legs"),
    ("Plank", 3, "60s", 30, "Core"),
]

# ============================================================
# Substitution whitelist fallback (used when ExerciseDB is down)
# ============================================================

SUBSTITUTION_FALLBACKS: dict[str, list[str]] = {
    "chest": ["Bench Press", "Incline Bench Press", "Dumbbell Bench Press", "Cable Fly", "Push-up"],
    "back": ["Barbell Bent Over Row", "Lat Pulldown", "Seated Cable Row", "Pull-up", "Deadlift"],
    "shoulders": ["Shoulder Press", "Lateral Raise", "Face Pull", "Upright Row", "Pike Push-up"],
    "biceps": ["Barbell Curl", "Dumbbell Curl", "Cable Curl", "Hammer Curl", "Preacher Curl"],
    "triceps": ["Tricep Pushdown", "Skull Crusher", "Close Grip Bench Press", "Dip", "Overhead Extension"],
    "legs": ["Squat", "Leg Press", "Leg Curl", "Leg Extension", "Walking Lunge"],
    "quads": ["Squat", "Leg Press", "Leg Extension", "Walking Lunge", "Bulgarian Split Squat"],
    "hamstrings": ["Romanian Deadlift", "Leg Curl", "Good Morning", "Nordic Curl", "Glute-Ham Raise"],
    "glutes": ["Hip Thrust", "Squat", "Leg Press", "Bulgarian Split Squat", "Leg Curl"],
    "abs": ["Crunch", "Plank", "Ab Wheel", "Hanging Leg Raise", "Cable Woodchop"],
}

# ============================================================
# Synthetic ExerciseDB records, keyed by body part
# ============================================================

FALLBACK_EXERCISES: dict[str, FallbackRecord] = {
    "chest": {"target": "pectorals", "equipment": "body weight",
              "secondary_muscles": ["triceps", "shoulders"]},
    "back": {"target": "upper back", "equipment": "body weight",
             "secondary_muscles": ["biceps", "forearms"]},
    "shoulders": {"target": "delts", "equipment": "body weight",
                  "secondary_muscles": ["triceps", "upper back"]},
    "upper arms": {"target": "triceps", "equipment": "body weight",
                   "secondary_muscles": ["shoulders", "chest"]},
    "lower arms": {"target": "forearms", "equipment": "dumbbell",
                   "secondary_muscles": ["hands"]},
    "upper legs": {"target": "quads", "equipment": "body weight",
                   "secondary_muscles": ["glutes", "hamstrings"]},
    "lower legs": {"target": "calves", "equipment": "body weight",
                   "secondary_muscles": ["ankle stabilizers"]},
    "waist": {"target": "abs", "equipment": "body weight",
              "secondary_muscles": ["obliques", "hip flexors"]},
    "cardio": {"target": "cardiovascular system", "equipment": "body weight",
               "secondary_muscles": ["calves", "shoulders"]},
    "neck": {"target": "levator scapulae", "equipment": "body weight",
             "secondary_muscles": ["traps"]},
}


def body_part_for(muscle_group: str) -> str:
    """Map a muscle group name to an ExerciseDB body part."""
    return MUSCLE_TO_BODY_PART.get(muscle_group.strip().lower(), DEFAULT_BODY_PART)


def _to_exercises(rows: list[tuple]) -> list[Exercise]:
    return [
        Exercise(name=name, sets=sets, reps=reps, rest_seconds=rest, muscle_group=muscle)
        for name, sets, reps, rest, muscle in rows
    ]


def generate_fallback_exercises(muscle_groups: list[str]) -> list[Exercise]:
    """
    Build a workout from the static table.
    Unknown muscle groups are skipped; if nothing matched, a generic
    full-body list is returned so the result is never empty.
    """
    rows = []
    for muscle in muscle_groups:
        rows.extend(FALLBACK_WORKOUT_EXERCISES.get(muscle.strip().lower(), []))

    return _to_exercises(rows or GENERIC_FULL_BODY)


def substitution_fallback(target_muscle: str) -> list[str]:
    """Static exercise whitelist for a target muscle."""
    return list(SUBSTITUTION_FALLBACKS.get(target_muscle.strip().lower(), []))
