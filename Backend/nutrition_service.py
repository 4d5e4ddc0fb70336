"""
FitForge Nutrition Service
Meal analysis and suggestions via the nutrition RapidAPI, with static
estimates when the upstream is unavailable.
"""
from config import settings
from http_client import get_client, rapidapi_headers
from models import NutritionEstimate

FALLBACK_SUGGESTIONS = [
    {"name": "Grilled Chicken Breast", "quantity": 200, "unit": "g",
     "calories": 280, "protein": 42, "carbs": 0, "fats": 12},
    {"name": "Brown Rice", "quantity": 150, "unit": "g",
     "calories": 420, "protein": 15, "carbs": 72, "fats": 10},
    {"name": "Broccoli", "quantity": 150, "unit": "g",
     "calories": 50, "protein": 5, "carbs": 9, "fats": 1},
]


def _url(path: str) -> str:
    return f"https://{settings.NUTRITION_HOST}{path}"


def estimate_macros(quantity: float) -> NutritionEstimate:
    """Rough per-unit estimate used when the upstream cannot answer."""
    return NutritionEstimate(
        calories=round(quantity * 50),
        protein=round(quantity * 2),
        carbs=round(quantity * 5),
        fats=round(quantity * 1),
    )


def analyze_meal(meal_name: str, quantity: float, unit: str = "grams") -> dict:
    """Analyze a meal; falls back to a static estimate on any upstream failure."""
    try:
        response = get_client().post(
            _url("/api/nutrition/analyze"),
            json={"meal": meal_name, "quantity": quantity, "unit": unit or "grams"},
            headers=rapidapi_headers(settings.NUTRITION_HOST),
        )
        if response.status_code >= 400:
            print(f"[Nutrition] Analyze error: {response.status_code} {response.text[:200]}")
            return estimate_macros(quantity).model_dump()
        return response.json()
    except Exception as e:
        print(f"[Nutrition] Error analyzing meal: {e}")
        return estimate_macros(quantity).model_dump()


def meal_suggestions() -> list[dict]:
    """Suggested meals; static list on any upstream failure."""
    try:
        response = get_client().get(
            _url("/api/nutrition/suggestions"),
            headers=rapidapi_headers(settings.NUTRITION_HOST),
        )
        if response.status_code >= 400:
            print(f"[Nutrition] Suggestions error: {response.status_code} {response.text[:200]}")
            return [dict(s) for s in FALLBACK_SUGGESTIONS]
        return response.json()
    except Exception as e:
        print(f"[Nutrition] Error fetching suggestions: {e}")
        return [dict(s) for s in FALLBACK_SUGGESTIONS]
