from models import Exercise
from exercise_resolver import resolve_exercise, resolve_exercises, synthetic_exercise


def record(name, **extra):
    return {"id": f"id-{name}", "name": name, "bodyPart": "chest", "target": "pectorals",
            "equipment": "barbell", "gifUrl": "", "instructions": ["go"], "secondaryMuscles": [],
            **extra}


def no_results(_query):
    return []


def failing(_query):
    raise ConnectionError("upstream down")


def test_first_matching_variant_wins():
    queries = []

    def name_search(query):
        queries.append(query)
        return [record("incline dumbbell press")] if query == "incline dumbbell press" else []

    ex = Exercise(name="Incline Dumbbell Presses", sets=3, reps="10-12", muscle_group="Chest")
    result = resolve_exercise(ex, name_search, no_results)

    assert result.id == "id-incline dumbbell press"
    # stops at the first hit
    assert queries == ["incline dumbbell presses", "incline dumbbell press"]


def test_variant_errors_do_not_stop_later_variants():
    calls = []

    def name_search(query):
        calls.append(query)
        if len(calls) == 1:
            raise TimeoutError("slow")
        return [record(query)]

    result = resolve_exercise(Exercise(name="Bench Presses", muscle_group="Chest"), name_search, no_results)
    assert result.name == "bench press"


def test_body_part_substitute_is_relabeled():
    seen = []

    def body_part_search(body_part):
        seen.append(body_part)
        return [record("barbell curl", bodyPart="upper arms")]

    ex = Exercise(name="Zottman Curl", muscle_group="Biceps")
    result = resolve_exercise(ex, no_results, body_part_search)

    assert seen == ["upper arms"]
    assert result.id == "id-barbell curl"
    assert result.name == "Zottman Curl"


def test_substitute_drawn_from_first_ten():
    pool = [record(f"ex{i}") for i in range(25)]
    ex = Exercise(name="Mystery Move", muscle_group="Chest")
    for _ in range(20):
        result = resolve_exercise(ex, no_results, lambda _bp: pool)
        assert int(result.id.replace("id-ex", "")) < 10


def test_synthetic_fallback_when_nothing_found():
    ex = Exercise(name="Mystery Move", sets=4, reps="6-8", muscle_group="Quads")
    result = resolve_exercise(ex, no_results, no_results)

    assert result.id == "fallback-upper-legs"
    assert result.name == "Mystery Move"
    assert result.body_part == "upper legs"
    assert result.instructions == ["Perform 4 sets of 6-8 reps"]


def test_synthetic_fallback_when_upstream_errors():
    ex = Exercise(name="Mystery Move", sets=3, reps="12", muscle_group="Unknown")
    result = resolve_exercise(ex, failing, failing)

    assert result.body_part == "chest"
    assert result.instructions == ["Perform 3 sets of 12 reps"]


def test_synthetic_record_uses_body_part_table():
    result = synthetic_exercise(Exercise(name="Crunch", muscle_group="abs"))
    assert result.body_part == "waist"
    assert result.target == "abs"
    assert result.secondary_muscles == ["obliques", "hip flexors"]


def test_resolve_many_keeps_order_and_isolates_failures():
    def name_search(query):
        if query not in ("squat", "plank"):
            raise RuntimeError("boom")
        return [record(query)]

    exercises = [
        Exercise(name="Squat", muscle_group="Legs"),
        Exercise(name="Broken Thing", sets=2, reps="5", muscle_group="Back"),
        Exercise(name="Plank", muscle_group="Core"),
    ]
    results = resolve_exercises(exercises, name_search, failing)

    assert [r.name for r in results] == ["squat", "Broken Thing", "plank"]
    assert results[1].id == "fallback-back"


def test_resolve_many_empty():
    assert resolve_exercises([], no_results, no_results) == []
