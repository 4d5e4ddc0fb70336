import httpx

import ai_service
import main
from config import settings
from models import FoodAnalysis


def chest_back_workout(workout_id="w-1"):
    return {
        "id": workout_id,
        "name": "Push Pull",
        "muscleGroups": ["chest", "back"],
        "exercises": [
            {"name": "Bench Press", "sets": 4, "reps": "8-10", "restSeconds": 90, "muscleGroup": "Chest"},
            {"name": "Barbell Rows", "sets": 3, "reps": "10-12", "restSeconds": 60, "muscleGroup": "Back"},
        ],
    }


# ============================================================
# Workout generation
# ============================================================

def test_generate_workout_fallback_without_key(client):
    response = client.post("/api/generate-workout", json={
        "muscleGroups": ["chest"], "equipment": ["any"], "description": "",
    })

    assert response.status_code == 200
    data = response.json()
    assert [e["name"] for e in data["exercises"]] == ["Bench Press", "Incline Dumbbell Press", "Cable Flyes"]
    assert data["difficulty"] == "Intermediate"
    assert data["muscleGroups"] == ["chest"]
    assert data["id"].isdigit()
    assert data["exercises"][0]["restSeconds"] == 90


def test_generate_workout_requires_muscle_groups(client):
    response = client.post("/api/generate-workout", json={"muscleGroups": [], "equipment": ["dumbbell"]})
    assert response.status_code == 400
    assert "error" in response.json()

    assert client.post("/api/generate-workout", json={}).status_code == 400


def test_generate_workout_unknown_muscle_gets_generic_list(client):
    response = client.post("/api/generate-workout", json={"muscleGroups": ["eyebrows"]})
    assert response.status_code == 200
    assert [e["name"] for e in response.json()["exercises"]] == ["Push-ups", "Squats", "Plank"]


def test_generate_workout_upstream_error_falls_back(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    mock_http(lambda request: httpx.Response(503, text="unavailable"))

    response = client.post("/api/generate-workout", json={"muscleGroups": ["legs"]})

    assert response.status_code == 200
    assert len(response.json()["exercises"]) == 4


def test_generate_workout_uses_upstream_exercises(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")

    def handler(request):
        assert request.url.path == "/workout"
        assert request.headers["x-rapidapi-key"] == "test-key"
        return httpx.Response(200, json={
            "name": "Chest Blast",
            "exercises": [{"name": "Dips", "sets": 3, "reps": 12, "restSeconds": 60, "muscleGroup": "Chest"}],
        })

    mock_http(handler)
    data = client.post("/api/generate-workout", json={"muscleGroups": ["chest"]}).json()

    assert data["name"] == "Chest Blast"
    assert data["exercises"] == [
        {"name": "Dips", "sets": 3, "reps": "12", "restSeconds": 60, "muscleGroup": "Chest"},
    ]


def test_generate_workout_accepts_null_optional_fields(client):
    response = client.post("/api/generate-workout", json={
        "muscleGroups": ["chest"], "equipment": None, "description": None,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["equipment"] == ["any"]
    assert data["description"] == ""
    assert data["exercises"][0]["name"] == "Bench Press"


def test_generate_workout_transport_error_falls_back(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_http(handler)
    response = client.post("/api/generate-workout", json={"muscleGroups": ["chest"]})

    assert response.status_code == 200
    assert [e["name"] for e in response.json()["exercises"]] == ["Bench Press", "Incline Dumbbell Press", "Cable Flyes"]


def test_generate_workout_non_json_body_falls_back(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    mock_http(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    response = client.post("/api/generate-workout", json={"muscleGroups": ["back"]})

    assert response.status_code == 200
    assert [e["name"] for e in response.json()["exercises"]] == ["Barbell Rows", "Lat Pulldown", "Seated Cable Row"]


def test_generate_workout_ignores_mistyped_upstream_fields(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    mock_http(lambda request: httpx.Response(200, json={
        "name": {"en": "Chest"}, "difficulty": 3, "description": ["x"], "exercises": [],
    }))

    response = client.post("/api/generate-workout", json={"muscleGroups": ["chest"]})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Chest Workout"
    assert data["difficulty"] == "Intermediate"
    assert data["description"] == ""
    assert len(data["exercises"]) == 3


def test_generate_workout_malformed_exercises_fall_back(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    mock_http(lambda request: httpx.Response(200, json={"exercises": ["Bench Press", 7]}))

    response = client.post("/api/generate-workout", json={"muscleGroups": ["chest"]})

    assert response.status_code == 200
    assert response.json()["exercises"][0]["name"] == "Bench Press"
    assert response.json()["exercises"][0]["sets"] == 4


# ============================================================
# Saved workouts
# ============================================================

def test_save_then_fetch_workout(client):
    saved = client.post("/api/workouts/save", json=chest_back_workout())
    assert saved.status_code == 200
    assert saved.json()["success"] is True

    fetched = client.get("/api/workouts/w-1").json()
    signature = fetched["metabolicSignature"]
    assert signature["muscleLoad"] == {"chest": 0.57, "back": 0.43}
    assert signature["volumeScore"] == 14
    assert signature["estimatedEnergyBurn"] == 105
    assert signature["recoveryPriority"] == ["chest", "back"]

    listed = client.get("/api/workouts").json()
    assert [w["id"] for w in listed] == ["w-1"]


def test_fetch_unknown_workout(client):
    response = client.get("/api/workouts/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Workout not found"}


# ============================================================
# AI endpoints
# ============================================================

def fake_analysis(_image):
    return FoodAnalysis(health_score=82, calories=650, protein=45, carbs=70, fat=18,
                        foods=["chicken", "rice"], suggestions=["Add greens"])


def test_analyze_food_without_saved_workout(client, monkeypatch):
    monkeypatch.setattr(ai_service, "analyze_food_image", fake_analysis)

    data = client.post("/api/ai/analyze-food", json={"image": "aGVsbG8="}).json()

    assert data["healthScore"] == 82
    assert "recoveryMatch" not in data
    assert "workoutContext" not in data


def test_analyze_food_links_latest_workout(client, monkeypatch):
    monkeypatch.setattr(ai_service, "analyze_food_image", fake_analysis)
    monkeypatch.setattr(ai_service, "generate_recovery_tip", lambda *args: "Nice refuel.")
    client.post("/api/workouts/save", json=chest_back_workout())

    data = client.post("/api/ai/analyze-food", json={"image": "aGVsbG8="}).json()

    assert data["workoutContext"] == "Push Pull"
    assert data["recoveryMatch"] == 80
    assert data["aiTip"] == "Nice refuel."
    assert [d["muscle"] for d in data["recoveryDetails"]] == ["chest", "back", "glycogen"]


def test_analyze_food_by_workout_id(client, monkeypatch):
    monkeypatch.setattr(ai_service, "analyze_food_image", fake_analysis)
    monkeypatch.setattr(ai_service, "generate_recovery_tip", lambda *args: "Tip.")
    client.post("/api/workouts/save", json=chest_back_workout("first"))
    second = chest_back_workout("second")
    second["name"] = "Later Session"
    client.post("/api/workouts/save", json=second)

    data = client.post("/api/ai/analyze-food", json={"image": "aGVsbG8=", "workoutId": "first"}).json()
    assert data["workoutContext"] == "Push Pull"


def test_analyze_food_rounds_fractional_health_score(client, monkeypatch):
    reply = '{"healthScore": 82.6, "calories": 610, "protein": 38.5, "carbs": 64, "fat": 17, ' \
            '"foods": ["salmon", "quinoa"], "suggestions": []}'
    monkeypatch.setattr(ai_service, "_generate", lambda *args, **kwargs: reply)

    response = client.post("/api/ai/analyze-food", json={"image": "data:image/jpeg;base64,aGVsbG8="})

    assert response.status_code == 200
    assert response.json()["healthScore"] == 83
    assert response.json()["protein"] == 38.5


def test_analyze_food_failure(client, monkeypatch):
    def broken(_image):
        raise ai_service.AIResponseError("No JSON found in response")

    monkeypatch.setattr(ai_service, "analyze_food_image", broken)
    response = client.post("/api/ai/analyze-food", json={"image": "aGVsbG8="})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to analyze food"}


def test_program_falls_back_when_ai_fails(client, monkeypatch):
    def broken(_request):
        raise ai_service.AIResponseError("bad output")

    monkeypatch.setattr(ai_service, "generate_training_program", broken)
    response = client.post("/api/ai/program", json={
        "weeks": 2, "experience": "beginner", "equipment": ["dumbbell"], "targetMuscles": ["legs"],
    })

    assert response.status_code == 200
    assert len(response.json()["weeks"]) == 2


def test_chat_returns_reply_and_exercises(client, monkeypatch):
    monkeypatch.setattr(main, "generate_chat_response", lambda message, history: "Try squats today.")

    response = client.post("/api/ai/chat", json={
        "message": "What should I do?",
        "history": [{"role": "assistant", "content": "Hi!"}],
    })

    assert response.status_code == 200
    assert response.json() == {"response": "Try squats today.", "exercises": []}


def test_chat_validation_error_is_400(client):
    response = client.post("/api/ai/chat", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"
    assert "message" in response.json()["fields"]


def test_feedback_requires_exercises(client):
    response = client.post("/api/ai/feedback", json={"exercisesCompleted": [], "totalDuration": 30})
    assert response.status_code == 400


# ============================================================
# ExerciseDB proxy
# ============================================================

def test_exercises_require_key(client):
    response = client.get("/api/exercises/bodyPartList")
    assert response.status_code == 500
    assert response.json() == {"error": "ExerciseDB API key not configured"}


def test_exercise_image_invalid_resolution_defaults(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, content=b"GIF89a", headers={"content-type": "image/gif"})

    mock_http(handler)
    response = client.get("/api/exercises/image/0001?resolution=999")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/gif"
    assert response.content == b"GIF89a"
    assert seen == {"exerciseId": "0001", "resolution": "360"}


def test_exercise_image_propagates_upstream_status(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")
    mock_http(lambda request: httpx.Response(404, text="not found"))

    response = client.get("/api/exercises/image/9999")
    assert response.status_code == 404
    assert "error" in response.json()


def test_search_by_name_proxies(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "test-key")

    def handler(request):
        assert request.url.path == "/exercises/name/bench press"
        return httpx.Response(200, json=[{"id": "0025", "name": "barbell bench press"}])

    mock_http(handler)
    response = client.get("/api/exercises/name/bench press?limit=5")
    assert response.json() == [{"id": "0025", "name": "barbell bench press"}]


def test_resolve_without_key_uses_fallback_records(client):
    response = client.post("/api/exercises/resolve", json={"exercises": [
        {"name": "Bench Press", "sets": 4, "reps": "8-10", "muscleGroup": "Chest"},
    ]})

    assert response.status_code == 200
    [record] = response.json()
    assert record["id"] == "fallback-chest"
    assert record["name"] == "Bench Press"
    assert record["instructions"] == ["Perform 4 sets of 8-10 reps"]


# ============================================================
# Nutrition
# ============================================================

def test_nutrition_analyze_missing_fields(client):
    response = client.post("/api/nutrition/analyze", json={"quantity": 2})

    assert response.status_code == 400
    assert response.json()["fallback"] == {"calories": 100, "protein": 4, "carbs": 10, "fats": 2}


def test_nutrition_suggestions_fallback(client, mock_http):
    mock_http(lambda request: httpx.Response(502, text="bad gateway"))

    response = client.get("/api/nutrition/suggestions")
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Grilled Chicken Breast"


# ============================================================
# Strava
# ============================================================

def test_strava_config(client, monkeypatch):
    assert client.get("/api/strava/config").status_code == 500

    monkeypatch.setattr(settings, "STRAVA_CLIENT_ID", "12345")
    assert client.get("/api/strava/config").json() == {"clientId": "12345"}


def test_strava_activities_need_bearer_token(client):
    assert client.get("/api/strava/activities").status_code == 401


def test_strava_activities_forward_token(client, mock_http):
    def handler(request):
        assert request.headers["authorization"] == "Bearer abc123"
        return httpx.Response(200, json=[{"id": 1, "name": "Morning Run"}])

    mock_http(handler)
    response = client.get("/api/strava/activities", headers={"Authorization": "Bearer abc123"})
    assert response.json() == [{"id": 1, "name": "Morning Run"}]


def test_strava_token_exchange(client, monkeypatch, mock_http):
    monkeypatch.setattr(settings, "STRAVA_CLIENT_ID", "12345")
    monkeypatch.setattr(settings, "STRAVA_CLIENT_SECRET", "secret")

    def handler(request):
        body = request.content.decode()
        assert "grant_type=authorization_code" in body
        assert "code=xyz" in body
        return httpx.Response(200, json={"access_token": "a", "refresh_token": "r", "expires_at": 1})

    mock_http(handler)
    response = client.post("/api/strava/token", json={"code": "xyz"})
    assert response.json()["access_token"] == "a"


# ============================================================
# Misc
# ============================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
