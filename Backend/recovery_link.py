"""
FitForge Recovery Linker
Connects a food-plate analysis to the metabolic signature of a saved
workout: how well the meal covers the protein and carbohydrate needs the
session created.
"""
from typing import Callable, Optional

from models import FoodAnalysis, RecoveryDetail, Workout

BASE_RECOVERY_MATCH = 70
MAX_PROTEIN_BONUS = 10

PROTEIN_MET_PCT = 80
CARBS_MET_PCT = 70

DEFAULT_TIP = "Pair this meal with plenty of water and aim for quality sleep to lock in today's gains."

TipGenerator = Callable[[str, list[str], float, float], str]


def protein_need(volume_score: float) -> float:
    """Grams of protein the session calls for."""
    return 20 + volume_score / 5


def carb_need(volume_score: float) -> float:
    """Grams of carbohydrate needed to refill glycogen."""
    return 30 + volume_score / 3


def _percentage(consumed: float, needed: float) -> float:
    return consumed / needed * 100 if needed > 0 else 100.0


def link_recovery(
        analysis: FoodAnalysis,
        workout: Optional[Workout],
        tip_generator: Optional[TipGenerator] = None,
) -> FoodAnalysis:
    """
    Augment the analysis in place with recoveryMatch, recoveryDetails,
    workoutContext and aiTip. Without a reference workout (or one that
    was never scored) the analysis is returned untouched.
    """
    if workout is None or workout.metabolic_signature is None:
        return analysis

    signature = workout.metabolic_signature
    protein_needed = protein_need(signature.volume_score)
    carbs_needed = carb_need(signature.volume_score)
    protein_pct = _percentage(analysis.protein, protein_needed)
    carbs_pct = _percentage(analysis.carbs, carbs_needed)

    protein_met = protein_pct > PROTEIN_MET_PCT
    carbs_met = carbs_pct > CARBS_MET_PCT

    details = []
    for muscle in signature.recovery_priority:
        load_pct = round(signature.muscle_load.get(muscle, 0) * 100)
        if protein_met:
            message = f"Enough protein to repair your {muscle} ({load_pct}% of today's sets)."
        else:
            message = f"Add {protein_needed - analysis.protein:.0f}g more protein to repair your {muscle}."
        details.append(RecoveryDetail(
            muscle=muscle,
            nutrient="protein",
            needed=round(protein_needed, 1),
            consumed=analysis.protein,
            percentage=round(protein_pct),
            met=protein_met,
            message=message,
        ))

    if carbs_met:
        glycogen_message = "Carbs cover glycogen replenishment for this session."
    else:
        glycogen_message = f"Add {carbs_needed - analysis.carbs:.0f}g more carbs to refill glycogen."
    details.append(RecoveryDetail(
        muscle="glycogen",
        nutrient="carbs",
        needed=round(carbs_needed, 1),
        consumed=analysis.carbs,
        percentage=round(carbs_pct),
        met=carbs_met,
        message=glycogen_message,
    ))

    analysis.recovery_match = round(min(100, BASE_RECOVERY_MATCH + min(MAX_PROTEIN_BONUS, protein_pct / 10)))
    analysis.recovery_details = details
    analysis.workout_context = workout.name

    tip = DEFAULT_TIP
    if tip_generator:
        try:
            tip = tip_generator(workout.name, signature.recovery_priority, analysis.protein, analysis.carbs)
        except Exception as e:
            print(f"[Recovery] Tip generation failed, using default: {e}")
    analysis.ai_tip = tip

    return analysis
