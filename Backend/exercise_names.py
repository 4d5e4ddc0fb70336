"""
FitForge Exercise Name Utilities
Variant generation for matching free-text exercise names against ExerciseDB,
and extraction of exercise mentions from coach replies.
Pure logic - no external dependencies.
"""
import re

# (pattern, replacement) applied in order; the first that matches wins
SINGULAR_RULES = [
    (r"presses\b", "press"),
    (r"raises\b", "raise"),
    (r"curls\b", "curl"),
    (r"rows\b", "row"),
    (r"(?:flyes|flies)\b", "fly"),
    (r"extensions\b", "extension"),
    (r"pull-?downs\b", "pulldown"),
    (r"push-?ups\b", "push up"),
    (r"sit-?ups\b", "sit up"),
]

EQUIPMENT_PREFIXES = ("dumbbell ", "barbell ", "cable ", "machine ")

STOP_WORDS = {"with", "and", "the"}

# Phrases a coach uses when naming an exercise
MENTION_PATTERNS = [
    re.compile(
        r"(?:try|do|perform|recommend|suggest)(?:ing)?\s+(?:the\s+)?([a-zA-Z\s]+?)(?:\s+for|\s+to|\s*[,.\n])",
        re.IGNORECASE,
    ),
    re.compile(r"exercises?\s+(?:like|such as)\s+([^.]+)", re.IGNORECASE),
    re.compile(
        r"([a-zA-Z]+\s+(?:press|curl|row|squat|lunge|deadlift|raise|extension|fly|pulldown|pull-up|push-up|crunch|plank)s?)",
        re.IGNORECASE,
    ),
]

COMMON_EXERCISES = [
    "bench press", "squat", "deadlift", "shoulder press", "bicep curl",
    "tricep extension", "lat pulldown", "seated row", "leg press", "leg curl",
    "leg extension", "calf raise", "plank", "crunch", "russian twist",
    "push-up", "pull-up", "dip", "lunge", "romanian deadlift", "hip thrust",
    "face pull", "lateral raise", "front raise", "hammer curl", "preacher curl",
    "skull crusher", "overhead press", "incline press", "decline press",
    "cable fly", "dumbbell fly", "barbell row", "t-bar row", "chest press",
]


def singularize(name: str) -> str:
    """Singularize the exercise word of a lower-cased name."""
    for pattern, replacement in SINGULAR_RULES:
        if re.search(pattern, name):
            return re.sub(pattern, replacement, name)
    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name


def significant_words(name: str) -> list[str]:
    """Words longer than three letters that are not filler."""
    return [
        word for word in re.split(r"[^a-z0-9]+", name)
        if len(word) > 3 and word not in STOP_WORDS
    ]


def name_variants(name: str) -> list[str]:
    """
    Candidate search strings for an exercise name, most specific first.

    "Incline Dumbbell Presses (Barbell)" yields the raw lower-cased name,
    its singular form, the equipment-stripped form, the name without the
    parenthetical, then the first two and the last significant words.
    """
    lowered = name.strip().lower()
    candidates = [lowered, singularize(lowered)]

    stripped = lowered.replace("-", " ")
    for prefix in EQUIPMENT_PREFIXES:
        if stripped.startswith(prefix):
            stripped = stripped[len(prefix):]
            break
    candidates.append(stripped.strip())

    candidates.append(re.sub(r"\s*\([^)]*\)", "", lowered).strip())

    words = significant_words(lowered)
    if words:
        candidates.append(" ".join(words[:2]))
        candidates.append(words[-1])

    variants = []
    for candidate in candidates:
        if candidate and candidate not in variants:
            variants.append(candidate)

    # Always hand back at least the original
    return variants or [lowered]


def find_exercise_mentions(text: str, limit: int = 3) -> list[str]:
    """Exercise names mentioned in free text, in order of discovery."""
    found = []

    for pattern in MENTION_PATTERNS:
        for match in pattern.finditer(text):
            mention = (match.group(1) or "").strip().lower()
            if 3 < len(mention) < 50 and mention not in found:
                found.append(mention)

    lowered = text.lower()
    for exercise in COMMON_EXERCISES:
        if exercise in lowered and exercise not in found:
            found.append(exercise)

    return found[:limit]
