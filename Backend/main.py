"""
FitForge FastAPI Backend
Workout generation, exercise lookup, AI coaching and nutrition API for the
FitForge mobile app.
"""
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional
from fastapi import FastAPI, HTTPException, Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from models import (
    Exercise, Workout, WorkoutRequest, ResolveExercisesRequest,
    TrainingProgramRequest, WorkoutFeedbackRequest, SubstitutionRequest,
    RecoveryRequest, ChatRequest, AnalyzeFoodRequest, NutritionAnalyzeRequest,
    StravaTokenRequest, StravaRefreshRequest, StravaDisconnectRequest,
    WorkoutVideoRequest,
)
from database import WorkoutStore, get_workout_store, close_store
from http_client import close_client
from muscle_map import generate_fallback_exercises
from exercise_resolver import resolve_exercises, synthetic_exercise
from recovery_link import link_recovery
from coach_service import generate_chat_response, lookup_mentioned_exercises
import ai_service
import exercisedb_service
import muscle_image_service
import nutrition_service
import strava_service
import video_service

IMAGE_CACHE_HEADERS = {"Cache-Control": "public, max-age=86400"}


# ============================================================
# App Lifecycle
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    print("Starting FitForge API...")
    get_workout_store()
    video_service.cleanup_old_videos()
    yield
    print("Shutting down...")
    close_client()
    close_store()


app = FastAPI(
    title="FitForge API",
    description="Workout generation, exercise lookup and AI coaching",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.mount(
    "/videos",
    StaticFiles(directory=settings.VIDEO_OUTPUT_DIR, check_dir=False),
    name="videos",
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log one line per /api request."""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        print(f"[API] {request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms")
    return response


# ============================================================
# Error Responses
# ============================================================

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required fields", "fields": [f for f in fields if f]},
    )


def _upstream(call: Callable, error_message: str):
    """Run an upstream call; any failure becomes a 500 with error_message."""
    try:
        return call()
    except HTTPException:
        raise
    except Exception as e:
        print(f"[API] {error_message}: {e}")
        raise HTTPException(500, error_message)


# ============================================================
# Workout Generation
# ============================================================

def _upstream_exercises(data: dict) -> list[Exercise]:
    """Exercises from a generator payload; empty if missing or malformed."""
    raw = data.get("exercises") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        return []
    try:
        return [Exercise(**ex) for ex in raw]
    except Exception as e:
        print(f"[API] Ignoring malformed generator exercises: {e}")
        return []


def _upstream_text(data: dict, key: str) -> str:
    """A string field from a generator payload; empty if missing or not text."""
    value = data.get(key)
    return value if isinstance(value, str) else ""


@app.post("/api/generate-workout")
def api_generate_workout(request: WorkoutRequest):
    """Generate a workout. Upstream problems never reach the client."""
    if not request.muscle_groups:
        raise HTTPException(400, "At least one muscle group is required")

    equipment = request.equipment or ["any"]
    data: dict = {}

    if not settings.RAPIDAPI_KEY:
        print("[API] RAPIDAPI_KEY not set, using fallback workout")
    else:
        try:
            data = muscle_image_service.request_workout(
                request.muscle_groups, equipment, request.description
            )
        except Exception as e:
            print(f"[API] Workout generator unavailable, using fallback: {e}")

    if not isinstance(data, dict):
        data = {}

    workout = Workout(
        id=str(int(time.time() * 1000)),
        name=_upstream_text(data, "name") or f"{request.muscle_groups[0].title()} Workout",
        description=_upstream_text(data, "description") or request.description or "",
        muscle_groups=request.muscle_groups,
        equipment=equipment,
        exercises=_upstream_exercises(data) or generate_fallback_exercises(request.muscle_groups),
        difficulty=_upstream_text(data, "difficulty") or "Intermediate",
    )
    return workout.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================
# Muscle Images
# ============================================================

@app.get("/api/muscle-groups")
def api_muscle_groups():
    return _upstream(muscle_image_service.get_muscle_groups, "Failed to fetch muscle groups")


@app.get("/api/muscle-image")
def api_muscle_image(muscles: str = "", color: Optional[str] = None, base: Optional[str] = None):
    """Highlighted muscle image (or the blank base body when base=true)."""
    if base == "true":
        content = _upstream(muscle_image_service.get_base_image, "Failed to fetch base image")
    else:
        muscle_list = [m.strip().lower() for m in muscles.split(",") if m.strip()]
        content = _upstream(
            lambda: muscle_image_service.get_muscle_image(muscle_list, color),
            "Failed to fetch muscle image",
        )
    return Response(content=content, media_type="image/png", headers=IMAGE_CACHE_HEADERS)


@app.get("/api/dual-muscle-image")
def api_dual_muscle_image(primary: str = "", secondary: str = ""):
    content = _upstream(
        lambda: muscle_image_service.get_dual_muscle_image(primary, secondary),
        "Failed to fetch dual muscle image",
    )
    return Response(content=content, media_type="image/png", headers=IMAGE_CACHE_HEADERS)


# ============================================================
# Saved Workouts
# ============================================================

@app.get("/api/workouts")
def api_list_workouts(store: WorkoutStore = Depends(get_workout_store)):
    return [w.model_dump(mode="json", by_alias=True, exclude_none=True) for w in store.list()]


@app.post("/api/workouts/save")
def api_save_workout(workout: Workout, store: WorkoutStore = Depends(get_workout_store)):
    """Save a workout; its metabolic signature is recomputed on every save."""
    saved = store.save(workout)
    print(f"[API] Saved workout {saved.id} ({len(saved.exercises)} exercises)")
    return {"success": True, "workout": saved.model_dump(mode="json", by_alias=True, exclude_none=True)}


@app.get("/api/workouts/{workout_id}")
def api_get_workout(workout_id: str, store: WorkoutStore = Depends(get_workout_store)):
    workout = store.get(workout_id)
    if not workout:
        raise HTTPException(404, "Workout not found")
    return workout.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================
# AI Coaching
# ============================================================

@app.post("/api/ai/program")
def api_training_program(request: TrainingProgramRequest):
    """AI training program; a static progressive program if the AI fails."""
    try:
        return ai_service.generate_training_program(request)
    except Exception as e:
        print(f"[API] AI program failed, using fallback program: {e}")
        return ai_service.build_fallback_program(request)


@app.post("/api/ai/feedback")
def api_workout_feedback(request: WorkoutFeedbackRequest):
    return _upstream(lambda: ai_service.generate_workout_feedback(request), "Failed to generate feedback")


@app.post("/api/ai/substitutions")
def api_substitutions(request: SubstitutionRequest):
    return _upstream(
        lambda: ai_service.generate_exercise_substitutions(request),
        "Failed to generate substitutions",
    )


@app.post("/api/ai/recovery")
def api_recovery_advice(request: RecoveryRequest):
    return _upstream(lambda: ai_service.generate_recovery_advice(request), "Failed to generate recovery advice")


@app.post("/api/ai/chat")
def api_chat(request: ChatRequest):
    """Coach reply plus ExerciseDB records for exercises it mentioned."""
    reply = _upstream(
        lambda: generate_chat_response(request.message, request.history),
        "Failed to generate response",
    )
    exercises = lookup_mentioned_exercises(reply) if settings.RAPIDAPI_KEY else []
    return {"response": reply, "exercises": exercises}


@app.post("/api/ai/analyze-food")
def api_analyze_food(request: AnalyzeFoodRequest, store: WorkoutStore = Depends(get_workout_store)):
    """Analyze a food photo and relate it to the reference workout, if any."""
    analysis = _upstream(lambda: ai_service.analyze_food_image(request.image), "Failed to analyze food")

    workout = store.get(request.workout_id) if request.workout_id else None
    if workout is None:
        workout = store.latest()

    link_recovery(analysis, workout, ai_service.generate_recovery_tip)
    return analysis.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================
# ExerciseDB Proxy
# ============================================================

def _exercisedb(call: Callable, error_message: str):
    try:
        exercisedb_service.require_key()
    except exercisedb_service.ExerciseDBKeyMissing as e:
        raise HTTPException(500, str(e))
    return _upstream(call, error_message)


@app.get("/api/exercises")
def api_exercises(limit: int = 50, offset: int = 0):
    return _exercisedb(lambda: exercisedb_service.list_exercises(limit, offset), "Failed to fetch exercises")


@app.get("/api/exercises/bodyPartList")
def api_body_parts():
    return _exercisedb(exercisedb_service.list_body_parts, "Failed to fetch body parts")


@app.get("/api/exercises/targetList")
def api_targets():
    return _exercisedb(exercisedb_service.list_targets, "Failed to fetch target muscles")


@app.get("/api/exercises/equipmentList")
def api_equipment():
    return _exercisedb(exercisedb_service.list_equipment, "Failed to fetch equipment list")


@app.get("/api/exercises/bodyPart/{body_part}")
def api_exercises_by_body_part(body_part: str, limit: int = 50, offset: int = 0):
    return _exercisedb(
        lambda: exercisedb_service.by_body_part(body_part, limit, offset),
        "Failed to fetch exercises",
    )


@app.get("/api/exercises/target/{target}")
def api_exercises_by_target(target: str, limit: int = 50, offset: int = 0):
    return _exercisedb(lambda: exercisedb_service.by_target(target, limit, offset), "Failed to fetch exercises")


@app.get("/api/exercises/equipment/{equipment}")
def api_exercises_by_equipment(equipment: str, limit: int = 50, offset: int = 0):
    return _exercisedb(
        lambda: exercisedb_service.by_equipment(equipment, limit, offset),
        "Failed to fetch exercises",
    )


@app.get("/api/exercises/name/{name}")
def api_exercises_by_name(name: str, limit: int = 50, offset: int = 0):
    return _exercisedb(lambda: exercisedb_service.by_name(name, limit, offset), "Failed to search exercises")


@app.get("/api/exercises/exercise/{exercise_id}")
def api_exercise(exercise_id: str):
    return _exercisedb(lambda: exercisedb_service.by_id(exercise_id), "Failed to fetch exercise")


@app.get("/api/exercises/image/{exercise_id}")
def api_exercise_image(exercise_id: str, resolution: str = "360"):
    """Stream an exercise GIF; unsupported resolutions fall back to 360."""
    response = _exercisedb(
        lambda: exercisedb_service.fetch_exercise_image(exercise_id, resolution),
        "Failed to fetch exercise image",
    )
    if response.status_code >= 400:
        print(f"[API] ExerciseDB image error: {response.status_code}")
        raise HTTPException(response.status_code, "Failed to fetch exercise image")
    return Response(content=response.content, media_type="image/gif", headers=IMAGE_CACHE_HEADERS)


@app.post("/api/exercises/resolve")
def api_resolve_exercises(request: ResolveExercisesRequest):
    """Match a workout's exercises to ExerciseDB records (never fails per item)."""
    if settings.RAPIDAPI_KEY:
        resolved = resolve_exercises(request.exercises)
    else:
        resolved = [synthetic_exercise(ex) for ex in request.exercises]
    return [r.model_dump(by_alias=True) for r in resolved]


# ============================================================
# Nutrition
# ============================================================

@app.post("/api/nutrition/analyze")
def api_nutrition_analyze(request: NutritionAnalyzeRequest):
    if not request.meal_name or not request.quantity:
        return JSONResponse(status_code=400, content={
            "error": "Meal name and quantity are required",
            "fallback": nutrition_service.estimate_macros(request.quantity or 0).model_dump(),
        })
    return nutrition_service.analyze_meal(request.meal_name, request.quantity, request.unit)


@app.get("/api/nutrition/suggestions")
def api_nutrition_suggestions():
    return nutrition_service.meal_suggestions()


# ============================================================
# Strava
# ============================================================

def _strava(call: Callable, error_message: str):
    try:
        return call()
    except strava_service.StravaNotConfigured as e:
        raise HTTPException(500, str(e))
    except Exception as e:
        print(f"[Strava] {error_message}: {e}")
        raise HTTPException(500, error_message)


@app.get("/api/strava/config")
def api_strava_config():
    return _strava(strava_service.client_config, "Failed to load Strava config")


@app.post("/api/strava/token")
def api_strava_token(request: StravaTokenRequest):
    return _strava(
        lambda: strava_service.exchange_code(request.code, request.redirect_uri),
        "Failed to exchange code for token",
    )


@app.post("/api/strava/refresh")
def api_strava_refresh(request: StravaRefreshRequest):
    return _strava(lambda: strava_service.refresh_token(request.refresh_token), "Failed to refresh token")


@app.get("/api/strava/activities")
def api_strava_activities(authorization: Optional[str] = Header(None)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(401, "Missing access token")
    access_token = authorization.split(" ", 1)[1].strip()
    return _strava(lambda: strava_service.get_activities(access_token), "Failed to fetch activities")


@app.post("/api/strava/disconnect")
def api_strava_disconnect(request: StravaDisconnectRequest):
    _strava(lambda: strava_service.deauthorize(request.access_token), "Failed to disconnect Strava")
    return {"success": True}


# ============================================================
# Video
# ============================================================

@app.post("/api/video/workout-summary")
def api_workout_summary_video(request: WorkoutVideoRequest):
    video_url = _upstream(
        lambda: video_service.generate_workout_summary_video(request),
        "Failed to generate video",
    )
    return {"success": True, "videoUrl": video_url}


# ============================================================
# Health Check
# ============================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": "1.0.0"
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "FitForge API",
        "version": "1.0.0",
        "docs": "/docs"
    }


# ============================================================
# Run Server
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
