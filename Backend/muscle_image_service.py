"""
FitForge Muscle Image Service
Client for the muscle-group image generator RapidAPI, which also exposes
a workout generator endpoint.
"""
from typing import Optional

from config import settings
from http_client import get_client, rapidapi_headers

DEFAULT_COLOR = "255,107,107"
PRIMARY_COLOR = "240,100,80"
SECONDARY_COLOR = "200,100,80"


def _url(path: str) -> str:
    return f"https://{settings.MUSCLE_IMAGE_HOST}{path}"


def _get_bytes(path: str, params: dict) -> bytes:
    response = get_client().get(
        _url(path),
        params=params,
        headers=rapidapi_headers(settings.MUSCLE_IMAGE_HOST),
    )
    if response.status_code >= 400:
        print(f"[MuscleAPI] {path} failed: {response.status_code} {response.text[:200]}")
    response.raise_for_status()
    return response.content


def request_workout(muscle_groups: list[str], equipment: list[str], description: str) -> dict:
    """Ask the upstream generator for a workout. Raises on non-OK responses."""
    response = get_client().post(
        _url("/workout"),
        json={
            "muscleGroups": muscle_groups,
            "equipment": equipment or ["any"],
            "description": description or f"A workout targeting {', '.join(muscle_groups)}",
        },
        headers=rapidapi_headers(settings.MUSCLE_IMAGE_HOST),
    )
    if response.status_code >= 400:
        print(f"[MuscleAPI] Workout generator error: {response.status_code} {response.text[:200]}")
    response.raise_for_status()
    return response.json()


def get_muscle_groups():
    response = get_client().get(
        _url("/getMuscleGroups"),
        headers=rapidapi_headers(settings.MUSCLE_IMAGE_HOST),
    )
    response.raise_for_status()
    return response.json()


def get_base_image() -> bytes:
    return _get_bytes("/getBaseImage", {"transparentBackground": "0"})


def get_muscle_image(muscles: list[str], color: Optional[str] = None) -> bytes:
    """Body image with the given muscles highlighted."""
    print(f"[MuscleAPI] Requesting muscles: {','.join(muscles)}")
    return _get_bytes("/getImage", {
        "muscleGroups": ",".join(muscles),
        "color": color or DEFAULT_COLOR,
        "transparentBackground": "0",
    })


def get_dual_muscle_image(primary: str, secondary: str = "") -> bytes:
    """Body image with primary and secondary muscles in two shades."""
    return _get_bytes("/getDualColorImage", {
        "primaryMuscleGroups": primary,
        "secondaryMuscleGroups": secondary or "",
        "primaryColor": PRIMARY_COLOR,
        "secondaryColor": SECONDARY_COLOR,
        "transparentBackground": "0",
    })
