import pytest

import ai_service
from ai_service import extract_json, build_fallback_program, substitution_whitelist, AIResponseError
from models import TrainingProgramRequest


# ============================================================
# JSON extraction
# ============================================================

def test_extract_plain_json():
    assert extract_json('{"strengths": ["consistency"]}') == {"strengths": ["consistency"]}


def test_extract_from_markdown_fence():
    text = 'Here you go:\n```json\n{"recommendation": "rest", "alternatives": []}\n```\nStay safe!'
    assert extract_json(text) == {"recommendation": "rest", "alternatives": []}


def test_extract_first_object_when_prose_has_braces_later():
    text = '{"a": 1} and then a stray } brace'
    assert extract_json(text) == {"a": 1}


def test_extract_nested_object():
    text = 'Plan: {"weeks": [{"week": 1, "sessions": [{"day": "Day 1"}]}]}'
    assert extract_json(text)["weeks"][0]["sessions"][0]["day"] == "Day 1"


@pytest.mark.parametrize("text", [None, "", "no json here", "{not: valid}"])
def test_extract_rejects_unusable_output(text):
    with pytest.raises(AIResponseError):
        extract_json(text)


# ============================================================
# Fallback program
# ============================================================

def program_request(**overrides):
    body = {
        "weeks": 4,
        "experience": "intermediate",
        "equipment": ["barbell"],
        "targetMuscles": ["chest", "back"],
        "sessionsPerWeek": 2,
    }
    body.update(overrides)
    return TrainingProgramRequest(**body)


def test_fallback_program_shape():
    program = build_fallback_program(program_request())

    assert [w["week"] for w in program["weeks"]] == [1, 2, 3, 4]
    assert [w["focus"] for w in program["weeks"]] == [
        "Hypertrophy Phase", "Hypertrophy Phase", "Strength Phase", "Deload Week",
    ]
    first_week = program["weeks"][0]
    assert [s["day"] for s in first_week["sessions"]] == ["Day 1: Chest", "Day 2: Back"]
    assert first_week["sessions"][0]["exercises"][0] == {
        "name": "Bench Press", "sets": 4, "reps": "8-10", "rest": "90 seconds",
    }


def test_fallback_program_deload_reduces_sets():
    program = build_fallback_program(program_request())
    week1 = program["weeks"][0]["sessions"][0]["exercises"][0]["sets"]
    deload = program["weeks"][3]["sessions"][0]["exercises"][0]["sets"]
    assert deload == week1 - 1


def test_fallback_program_short_block_has_no_deload():
    program = build_fallback_program(program_request(weeks=2))
    assert "Deload Week" not in [w["focus"] for w in program["weeks"]]


def test_fallback_program_without_targets():
    program = build_fallback_program(program_request(targetMuscles=[], sessionsPerWeek=3))
    assert len(program["weeks"][0]["sessions"]) == 3
    assert all(s["exercises"] for s in program["weeks"][0]["sessions"])


# ============================================================
# Substitution whitelist
# ============================================================

def test_whitelist_prefers_exercisedb(monkeypatch):
    names = [f"exercise {i}" for i in range(30)]
    monkeypatch.setattr(ai_service.exercisedb_service, "target_exercise_names", lambda target, limit: names)
    assert substitution_whitelist("pectorals") == names[:15]


def test_whitelist_falls_back_to_static_table(monkeypatch):
    monkeypatch.setattr(ai_service.exercisedb_service, "target_exercise_names", lambda target, limit: [])
    assert "Bench Press" in substitution_whitelist("Chest")
