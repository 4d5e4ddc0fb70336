"""
FitForge Exercise Resolver
Stitches free-text exercise names (from the generators or the AI) back to
real ExerciseDB records, falling back to a body-part substitute and finally
to a synthetic record.
"""
import random
import concurrent.futures
from typing import Callable, Optional

import exercisedb_service
from exercise_names import name_variants
from models import Exercise, ExerciseDBExercise
from muscle_map import FALLBACK_EXERCISES, DEFAULT_BODY_PART, body_part_for

SearchFn = Callable[[str], list[dict]]

# Random substitutes are drawn from the first N body-part results
SUBSTITUTE_POOL = 10
MAX_WORKERS = 4


def _default_name_search(name: str) -> list[dict]:
    return exercisedb_service.by_name(name, limit=5)


def _default_body_part_search(body_part: str) -> list[dict]:
    return exercisedb_service.by_body_part(body_part, limit=SUBSTITUTE_POOL)


def match_by_name(exercise: Exercise, name_search: SearchFn) -> Optional[ExerciseDBExercise]:
    """First hit across the name variants, in variant order."""
    for variant in name_variants(exercise.name):
        try:
            results = name_search(variant)
        except Exception as e:
            print(f"[Resolver] Name search failed for '{variant}': {e}")
            continue
        if results:
            print(f"[Resolver] '{exercise.name}' matched via '{variant}'")
            return ExerciseDBExercise(**results[0])
    return None


def substitute_by_body_part(exercise: Exercise, body_part_search: SearchFn) -> Optional[ExerciseDBExercise]:
    """
    Random exercise from the same body part, relabeled with the requested
    name so the display name matches what the workout asked for.
    """
    body_part = body_part_for(exercise.muscle_group)
    try:
        results = body_part_search(body_part)
    except Exception as e:
        print(f"[Resolver] Body part search failed for '{body_part}': {e}")
        return None
    if not results:
        return None

    pick = dict(random.choice(results[:min(SUBSTITUTE_POOL, len(results))]))
    pick["name"] = exercise.name
    return ExerciseDBExercise(**pick)


def synthetic_exercise(exercise: Exercise) -> ExerciseDBExercise:
    """Static stand-in built from the fallback table."""
    body_part = body_part_for(exercise.muscle_group)
    record = FALLBACK_EXERCISES.get(body_part, FALLBACK_EXERCISES[DEFAULT_BODY_PART])
    return ExerciseDBExercise(
        id=f"fallback-{body_part.replace(' ', '-')}",
        name=exercise.name,
        body_part=body_part,
        target=record["target"],
        equipment=record["equipment"],
        gif_url="",
        instructions=[f"Perform {exercise.sets} sets of {exercise.reps} reps"],
        secondary_muscles=list(record["secondary_muscles"]),
    )


def resolve_exercise(
        exercise: Exercise,
        name_search: Optional[SearchFn] = None,
        body_part_search: Optional[SearchFn] = None,
) -> ExerciseDBExercise:
    """Resolve one requested exercise. Never returns None."""
    name_search = name_search or _default_name_search
    body_part_search = body_part_search or _default_body_part_search

    try:
        match = match_by_name(exercise, name_search)
        if match:
            return match

        substitute = substitute_by_body_part(exercise, body_part_search)
        if substitute:
            print(f"[Resolver] '{exercise.name}' substituted from body part")
            return substitute
    except Exception as e:
        print(f"[Resolver] Error resolving '{exercise.name}': {e}")

    print(f"[Resolver] '{exercise.name}' using synthetic fallback")
    return synthetic_exercise(exercise)


def resolve_exercises(
        exercises: list[Exercise],
        name_search: Optional[SearchFn] = None,
        body_part_search: Optional[SearchFn] = None,
) -> list[ExerciseDBExercise]:
    """
    Resolve a workout's exercises in parallel across exercises.
    Variants of a single exercise are still tried in order, so the first
    match wins. Output order follows input order.
    """
    if not exercises:
        return []

    def _resolve(ex: Exercise) -> ExerciseDBExercise:
        return resolve_exercise(ex, name_search, body_part_search)

    with concurrent.futures.ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(exercises))) as pool:
        return list(pool.map(_resolve, exercises))
