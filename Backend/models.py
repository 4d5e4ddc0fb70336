"""
FitForge Data Models
Pydantic models for workouts, exercises and API payloads.
Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================================
# Workouts
# ============================================================

class Exercise(CamelModel):
    """A prescribed exercise inside a workout."""
    name: str
    sets: int = 3
    reps: str = "10-12"
    rest_seconds: int = 60
    muscle_group: str = ""

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_as_text(cls, value):
        # Upstream generators sometimes send a bare number
        return str(value) if isinstance(value, (int, float)) else value


class MetabolicSignature(CamelModel):
    """Load distribution and energy estimate derived from a workout."""
    muscle_load: dict[str, float] = Field(default_factory=dict)
    volume_score: int = 0
    intensity_score: int = 50
    estimated_energy_burn: int = 0
    recovery_priority: list[str] = Field(default_factory=list)


class Workout(CamelModel):
    """A generated or saved workout."""
    id: str
    name: str
    description: str = ""
    muscle_groups: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=lambda: ["any"])
    exercises: list[Exercise] = Field(default_factory=list)
    difficulty: str = "Intermediate"
    metabolic_signature: Optional[MetabolicSignature] = None
    saved_at: Optional[datetime] = None


class WorkoutRequest(CamelModel):
    """Body of POST /api/generate-workout."""
    muscle_groups: Optional[list[str]] = None
    equipment: Optional[list[str]] = None
    description: Optional[str] = None


# ============================================================
# ExerciseDB
# ============================================================

class ExerciseDBExercise(CamelModel):
    """Exercise record in the shape ExerciseDB returns it."""
    id: str
    name: str
    body_part: str = ""
    target: str = ""
    equipment: str = ""
    gif_url: str = ""
    instructions: list[str] = Field(default_factory=list)
    secondary_muscles: list[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "allow"  # keep any extra upstream fields (description, difficulty, ...)


class ResolveExercisesRequest(CamelModel):
    exercises: list[Exercise]


# ============================================================
# AI Coaching
# ============================================================

class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)


class TrainingProgramRequest(CamelModel):
    weeks: int = Field(..., gt=0)
    experience: str = Field(..., min_length=1)
    equipment: list[str]
    target_muscles: list[str]
    sessions_per_week: int = 4
    session_length: int = 45


class ProgramExercise(CamelModel):
    name: str
    sets: int
    reps: str
    rest: str


class SessionDay(CamelModel):
    day: str
    exercises: list[ProgramExercise] = Field(default_factory=list)


class ProgramWeek(CamelModel):
    week: int
    focus: str
    sessions: list[SessionDay] = Field(default_factory=list)


class TrainingProgram(CamelModel):
    weeks: list[ProgramWeek] = Field(default_factory=list)


class CompletedExercise(CamelModel):
    name: str
    completed_sets: int
    target_sets: int
    reps: str
    rpe: Optional[float] = None

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_as_text(cls, value):
        return str(value) if isinstance(value, (int, float)) else value


class WorkoutFeedbackRequest(CamelModel):
    exercises_completed: list[CompletedExercise] = Field(..., min_length=1)
    total_duration: float = Field(..., gt=0)
    muscles_focused: list[str] = Field(default_factory=list)
    difficulty: str = "Moderate"


class SubstitutionRequest(CamelModel):
    original_exercise: str = Field(..., min_length=1)
    target_muscle: str = Field(..., min_length=1)
    equipment: list[str]
    constraints: Optional[list[str]] = None


class RecoveryRequest(CamelModel):
    streak: int
    minutes_trained: float = Field(..., gt=0)
    muscles_hit_last_week: list[str]
    planned_muscle_today: str = Field(..., min_length=1)
    average_session_duration: float = 45


# ============================================================
# Food / Nutrition
# ============================================================

class AnalyzeFoodRequest(CamelModel):
    image: str = Field(..., min_length=1)  # base64-encoded JPEG
    workout_id: Optional[str] = None


class RecoveryDetail(CamelModel):
    """One line of the post-workout recovery breakdown."""
    muscle: str
    nutrient: str
    needed: float
    consumed: float
    percentage: int
    met: bool
    message: str


class FoodAnalysis(CamelModel):
    """Food plate analysis, optionally linked to a saved workout."""
    health_score: int = 0
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    foods: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    # Recovery linkage (omitted when no reference workout exists)
    recovery_match: Optional[int] = None
    recovery_details: Optional[list[RecoveryDetail]] = None
    workout_context: Optional[str] = None
    ai_tip: Optional[str] = None

    @field_validator("health_score", mode="before")
    @classmethod
    def _round_score(cls, value):
        # Vision replies sometimes score with decimals
        return round(value) if isinstance(value, float) else value


class NutritionAnalyzeRequest(CamelModel):
    meal_name: Optional[str] = None
    quantity: Optional[float] = None
    unit: str = "grams"


class NutritionEstimate(CamelModel):
    calories: int
    protein: int
    carbs: int
    fats: int


# ============================================================
# Strava
# ============================================================

class StravaTokenRequest(CamelModel):
    code: str = Field(..., min_length=1)
    redirect_uri: Optional[str] = None


class StravaRefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class StravaDisconnectRequest(CamelModel):
    access_token: str = Field(..., min_length=1)


# ============================================================
# Video
# ============================================================

class WorkoutVideoRequest(CamelModel):
    """Props for the WorkoutSummary composition."""
    workout_name: str
    duration: float
    exercise_count: int
    total_volume: float = 0
    calories_burned: float = 0
    muscle_groups: list[str] = Field(default_factory=list)
    personal_records: int = 0
    user_name: str = "Athlete"
    completed_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
