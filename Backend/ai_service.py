"""
FitForge AI Service
Program generation, workout feedback, substitutions, recovery advice and
food analysis using Google Gemini.
"""
import base64
import json
import re
from typing import Optional
from google import genai
from google.genai import types

from config import settings
from models import (
    TrainingProgramRequest, WorkoutFeedbackRequest, SubstitutionRequest,
    RecoveryRequest, FoodAnalysis, TrainingProgram, ProgramWeek, SessionDay,
    ProgramExercise,
)
from muscle_map import generate_fallback_exercises, substitution_fallback
import exercisedb_service

# ============================================================
# Client Initialization
# ============================================================

_client: Optional[genai.Client] = None


class AIResponseError(ValueError):
    """The model answered without usable JSON."""


def get_client() -> genai.Client:
    """Get Gemini client (singleton)."""
    global _client
    if _client is None:
        _client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    return _client


# ============================================================
# Response Parsing
# ============================================================

def _balanced_object(text: str) -> Optional[str]:
    """First balanced {...} span, or None if the braces never close."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    for i in range(start, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_json(text: Optional[str]) -> dict:
    """
    Pull a JSON object out of a model reply that may be wrapped in prose
    or markdown fences. Tries the first balanced object, then the widest
    {...} match. Raises AIResponseError when neither parses.
    """
    if not text:
        raise AIResponseError("No content in response")

    candidates = []
    balanced = _balanced_object(text)
    if balanced:
        candidates.append(balanced)
    greedy = re.search(r"\{[\s\S]*\}", text)
    if greedy and greedy.group(0) not in candidates:
        candidates.append(greedy.group(0))

    if not candidates:
        raise AIResponseError("No JSON found in response")

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise AIResponseError("Could not parse JSON from response")


def _generate(contents, temperature: float, max_tokens: int, json_output: bool = True,
              model: Optional[str] = None) -> Optional[str]:
    config = types.GenerateContentConfig(
        temperature=temperature,
        max_output_tokens=max_tokens,
        response_mime_type="application/json" if json_output else None,
    )
    response = get_client().models.generate_content(
        model=model or settings.GEMINI_MODEL,
        contents=contents,
        config=config,
    )
    return response.text


# ============================================================
# Prompts
# ============================================================

TRAINING_PROGRAM_PROMPT = """
You are a certified strength and conditioning coach.

Create a {weeks}-week progressive workout program.

User profile:
- Experience: {experience}
- Equipment: {equipment}
- Target muscles: {target_muscles}
- Sessions per week: {sessions_per_week}
- Session length: {session_length} minutes

Rules:
- Progressive overload weekly (increase weight/volume each week)
- Balance volume and recovery
- Include a deload week if volume exceeds recovery capacity
- No medical advice

Return ONLY valid JSON in this exact schema:
{{
  "weeks": [
    {{
      "week": number,
      "focus": string (e.g. "Strength Phase"),
      "sessions": [
        {{
          "day": string (e.g. "Day 1: Upper Power"),
          "exercises": [
            {{"name": string, "sets": number, "reps": string, "rest": string}}
          ]
        }}
      ]
    }}
  ]
}}
"""

FEEDBACK_PROMPT = """
You are an experienced strength and conditioning coach giving feedback on a completed workout.

Workout Summary:
- Duration: {duration} minutes
- Difficulty: {difficulty}
- Muscles Focused: {muscles}
- Exercises Completed:
{exercise_summary}

Provide concise coaching feedback focusing on:
1. What the user did well (be specific)
2. Where they might be undertraining or overtraining
3. One specific, actionable recommendation for their next session

Keep it to 2-3 points each. No medical advice.

Return ONLY valid JSON:
{{
  "strengths": ["..."],
  "areas_to_improve": ["..."],
  "next_session_recommendation": "..."
}}
"""

SUBSTITUTION_PROMPT = """
You are a strength and conditioning coach helping find exercise alternatives.

Original Exercise: {original}
Target Muscle: {target}
Available Equipment: {equipment}
{constraints}

IMPORTANT: You MUST choose alternatives ONLY from this list of real exercises:
{exercise_list}

Select 3 different exercises from the list that:
1. Are suitable alternatives for the original exercise
2. Can be done with the available equipment
3. Account for any constraints

Return ONLY valid JSON:
{{
  "exercises": [
    {{"name": "exact name from the list", "difficulty": "easy/moderate/hard", "why": "..."}}
  ]
}}
"""

RECOVERY_PROMPT = """
You are a sports physiologist and strength coach advising on recovery and training readiness.

User Training Profile:
- Current Streak: {streak} workouts
- Total Minutes Trained This Week: {minutes}
- Muscles Hit Last Week: {muscles}
- Planned Muscle Today: {planned}
- Average Session Duration: {average} minutes

Should they train today, modify the session, or rest? Explain why and, if
modifying, what to do instead.

Return ONLY valid JSON:
{{
  "recommendation": "train/modify/rest",
  "reasoning": "...",
  "alternatives": ["..."]
}}
"""

FOOD_ANALYSIS_PROMPT = """
You are a sports nutritionist. Identify the foods on this plate and estimate
its nutrition for the whole portion shown.

Return ONLY valid JSON:
{
  "healthScore": number from 0 to 100,
  "calories": number,
  "protein": grams,
  "carbs": grams,
  "fat": grams,
  "foods": ["..."],
  "suggestions": ["short tip", "short tip"]
}
"""

RECOVERY_TIP_PROMPT = """
A user just ate a meal with {protein:.0f}g protein and {carbs:.0f}g carbs after
the workout "{workout_name}", which mostly loaded: {muscles}.
Write ONE short, encouraging sentence of recovery nutrition advice. No lists.
"""


# ============================================================
# Generation Functions
# ============================================================

def generate_training_program(request: TrainingProgramRequest) -> dict:
    """Multi-week progressive program. Raises on unusable output."""
    prompt = TRAINING_PROGRAM_PROMPT.format(
        weeks=request.weeks,
        experience=request.experience,
        equipment=", ".join(request.equipment),
        target_muscles=", ".join(request.target_muscles),
        sessions_per_week=request.sessions_per_week,
        session_length=request.session_length,
    )
    return extract_json(_generate(prompt, temperature=0.4, max_tokens=4000))


def build_fallback_program(request: TrainingProgramRequest) -> dict:
    """
    Static progressive program built from the fallback exercise table.
    Sets grow by one every two weeks; a final week of four or more is a deload.
    """
    muscles = request.target_muscles or ["chest", "back", "legs"]
    sessions_per_week = max(1, request.sessions_per_week)

    weeks = []
    for week in range(1, request.weeks + 1):
        deload = request.weeks >= 4 and week == request.weeks
        if deload:
            focus, extra_sets = "Deload Week", -1
        elif week <= request.weeks / 2:
            focus, extra_sets = "Hypertrophy Phase", (week - 1) // 2
        else:
            focus, extra_sets = "Strength Phase", (week - 1) // 2

        sessions = []
        for day in range(sessions_per_week):
            day_muscles = muscles[day::sessions_per_week] or [muscles[day % len(muscles)]]
            exercises = [
                ProgramExercise(
                    name=ex.name,
                    sets=max(2, min(ex.sets + extra_sets, 6)),
                    reps=ex.reps,
                    rest=f"{ex.rest_seconds} seconds",
                )
                for ex in generate_fallback_exercises(day_muscles)
            ]
            sessions.append(SessionDay(
                day=f"Day {day + 1}: {' & '.join(m.title() for m in day_muscles)}",
                exercises=exercises,
            ))
        weeks.append(ProgramWeek(week=week, focus=focus, sessions=sessions))

    return TrainingProgram(weeks=weeks).model_dump(by_alias=True)


def generate_workout_feedback(request: WorkoutFeedbackRequest) -> dict:
    exercise_summary = "\n".join([
        f"- {e.name}: {e.completed_sets}/{e.target_sets} sets x {e.reps} reps "
        f"(RPE: {e.rpe if e.rpe is not None else 'N/A'})"
        for e in request.exercises_completed
    ])
    prompt = FEEDBACK_PROMPT.format(
        duration=request.total_duration,
        difficulty=request.difficulty,
        muscles=", ".join(request.muscles_focused) or "Not specified",
        exercise_summary=exercise_summary,
    )
    return extract_json(_generate(prompt, temperature=0.7, max_tokens=400))


def substitution_whitelist(target_muscle: str) -> list[str]:
    """Real exercise names the model may choose from (max 15)."""
    names = exercisedb_service.target_exercise_names(target_muscle, limit=50)
    if not names:
        names = substitution_fallback(target_muscle)
    return names[:15]


def generate_exercise_substitutions(request: SubstitutionRequest) -> dict:
    """Three alternatives chosen from the whitelist (model compliance is not re-checked)."""
    exercise_list = substitution_whitelist(request.target_muscle)
    prompt = SUBSTITUTION_PROMPT.format(
        original=request.original_exercise,
        target=request.target_muscle,
        equipment=", ".join(request.equipment),
        constraints=f"Constraints: {', '.join(request.constraints)}" if request.constraints else "",
        exercise_list=", ".join(exercise_list),
    )
    return extract_json(_generate(prompt, temperature=0.5, max_tokens=300))


def generate_recovery_advice(request: RecoveryRequest) -> dict:
    prompt = RECOVERY_PROMPT.format(
        streak=request.streak,
        minutes=request.minutes_trained,
        muscles=", ".join(request.muscles_hit_last_week) or "None",
        planned=request.planned_muscle_today,
        average=request.average_session_duration,
    )
    return extract_json(_generate(prompt, temperature=0.5, max_tokens=300))


def analyze_food_image(image_base64: str) -> FoodAnalysis:
    """Estimate macros for a photographed plate."""
    # Strip a data-URL prefix if the client sent one
    if "," in image_base64[:64]:
        image_base64 = image_base64.split(",", 1)[1]
    image_bytes = base64.b64decode(image_base64)

    contents = [
        types.Part.from_bytes(data=image_bytes, mime_type="image/jpeg"),
        FOOD_ANALYSIS_PROMPT,
    ]
    data = extract_json(_generate(
        contents, temperature=0.3, max_tokens=600, model=settings.GEMINI_VISION_MODEL,
    ))
    return FoodAnalysis(**data)


def generate_recovery_tip(workout_name: str, muscles: list[str], protein: float, carbs: float) -> str:
    """One sentence of recovery advice tying a meal to a workout."""
    prompt = RECOVERY_TIP_PROMPT.format(
        workout_name=workout_name,
        muscles=", ".join(muscles) or "full body",
        protein=protein,
        carbs=carbs,
    )
    text = _generate(prompt, temperature=0.7, max_tokens=80, json_output=False)
    if not text or not text.strip():
        raise AIResponseError("Empty recovery tip")
    return text.strip().split("\n")[0]
