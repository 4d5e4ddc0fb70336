"""
FitForge ExerciseDB Service
Thin client for the ExerciseDB RapidAPI (exercise search, lists and GIFs).
"""
from typing import Optional
from urllib.parse import quote

from config import settings
from http_client import get_client, rapidapi_headers

VALID_RESOLUTIONS = {"180", "360", "720", "1080"}
DEFAULT_RESOLUTION = "360"


class ExerciseDBKeyMissing(RuntimeError):
    """Raised when RAPIDAPI_KEY is not configured."""

    def __init__(self):
        super().__init__("ExerciseDB API key not configured")


def _base_url() -> str:
    return f"https://{settings.EXERCISEDB_HOST}"


def require_key():
    if not settings.RAPIDAPI_KEY:
        raise ExerciseDBKeyMissing()


def _get(path: str, params: Optional[dict] = None):
    response = get_client().get(
        f"{_base_url()}{path}",
        params=params,
        headers=rapidapi_headers(settings.EXERCISEDB_HOST),
    )
    if response.status_code >= 400:
        print(f"[ExerciseDB] {path} failed: {response.status_code} {response.text[:200]}")
    response.raise_for_status()
    return response.json()


# ============================================================
# Listing & Search
# ============================================================

def list_exercises(limit: int = 50, offset: int = 0) -> list[dict]:
    return _get("/exercises", {"limit": limit, "offset": offset})


def list_body_parts() -> list[str]:
    return _get("/exercises/bodyPartList")


def list_targets() -> list[str]:
    return _get("/exercises/targetList")


def list_equipment() -> list[str]:
    return _get("/exercises/equipmentList")


def by_body_part(body_part: str, limit: int = 50, offset: int = 0) -> list[dict]:
    return _get(f"/exercises/bodyPart/{quote(body_part.lower())}", {"limit": limit, "offset": offset})


def by_target(target: str, limit: int = 50, offset: int = 0) -> list[dict]:
    return _get(f"/exercises/target/{quote(target)}", {"limit": limit, "offset": offset})


def by_equipment(equipment: str, limit: int = 50, offset: int = 0) -> list[dict]:
    return _get(f"/exercises/equipment/{quote(equipment)}", {"limit": limit, "offset": offset})


def by_name(name: str, limit: int = 50, offset: int = 0) -> list[dict]:
    return _get(f"/exercises/name/{quote(name)}", {"limit": limit, "offset": offset})


def by_id(exercise_id: str) -> dict:
    return _get(f"/exercises/exercise/{quote(exercise_id)}")


def target_exercise_names(target: str, limit: int = 50) -> list[str]:
    """Names of exercises for a target muscle (empty list on any failure)."""
    try:
        data = by_target(target, limit=limit)
    except Exception as e:
        print(f"[ExerciseDB] Failed to fetch exercises for target '{target}': {e}")
        return []
    if not isinstance(data, list):
        return []
    return [ex["name"] for ex in data if isinstance(ex, dict) and ex.get("name")]


# ============================================================
# Images
# ============================================================

def safe_resolution(resolution: Optional[str]) -> str:
    """Clamp a requested GIF resolution to the supported set."""
    return resolution if resolution in VALID_RESOLUTIONS else DEFAULT_RESOLUTION


def fetch_exercise_image(exercise_id: str, resolution: Optional[str] = None):
    """Fetch an exercise GIF. Returns the raw httpx response (status not raised)."""
    return get_client().get(
        f"{_base_url()}/image",
        params={"exerciseId": exercise_id, "resolution": safe_resolution(resolution)},
        headers=rapidapi_headers(settings.EXERCISEDB_HOST),
    )
