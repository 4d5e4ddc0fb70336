"""
FitForge Metabolic Signature
Derives load distribution, volume/intensity scores and an energy estimate
from a finished workout's exercise list.
"""
from models import MetabolicSignature, Workout

INTENSITY_BY_DIFFICULTY = {
    "advanced": 85,
    "intermediate": 70,
}
DEFAULT_INTENSITY = 50

KCAL_PER_SET = 15


def _rounded_shares(counts: dict[str, int], total: int) -> dict[str, float]:
    """count/total to two decimals, largest remainders rounded up."""
    exact = {k: v * 100 / total for k, v in counts.items()}
    hundredths = {k: int(v) for k, v in exact.items()}
    leftover = 100 - sum(hundredths.values())
    by_remainder = sorted(exact, key=lambda k: exact[k] - hundredths[k], reverse=True)
    for k in by_remainder[:leftover]:
        hundredths[k] += 1
    return {k: h / 100 for k, h in hundredths.items()}


def calculate_metabolic_signature(workout: Workout) -> MetabolicSignature:
    """
    Compute the metabolic signature of a workout.

    Muscle load is each muscle's share of the total set count, rounded to
    hundredths so the fractions still sum to 1.0. A workout without sets
    gets an empty load map rather than NaN fractions.
    """
    load: dict[str, int] = {}
    total_sets = 0

    for ex in workout.exercises:
        muscle = ex.muscle_group.lower()
        load[muscle] = load.get(muscle, 0) + ex.sets
        total_sets += ex.sets

    muscle_load = _rounded_shares(load, total_sets) if total_sets > 0 else {}

    recovery_priority = [
        m for m, _ in sorted(muscle_load.items(), key=lambda x: -x[1])[:2]
    ]

    return MetabolicSignature(
        muscle_load=muscle_load,
        volume_score=min(100, total_sets * 2),
        intensity_score=INTENSITY_BY_DIFFICULTY.get(workout.difficulty.lower(), DEFAULT_INTENSITY),
        estimated_energy_burn=total_sets * KCAL_PER_SET,
        recovery_priority=recovery_priority,
    )
