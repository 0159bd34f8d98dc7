from __future__ import annotations

from cvmate.services.cv_ingestion.merge import (
    MERGE_FIELDS,
    empty_skills,
    is_empty,
    merge_profiles,
)
from cvmate.services.cv_ingestion.section_segmenter import empty_sections


def _heuristic(**overrides) -> dict:
    heuristic = dict(empty_sections())
    heuristic["contactInfo"] = {}
    heuristic.update(overrides)
    return heuristic


def test_ai_value_wins_when_both_present() -> None:
    merged = merge_profiles(
        {"summary": "From the model"},
        _heuristic(summary="From the heuristics"),
    )

    assert merged["summary"] == "From the model"


def test_heuristic_fills_empty_ai_fields() -> None:
    merged = merge_profiles(
        {"summary": "  ", "personalInfo": {"fullName": "", "email": ""}},
        _heuristic(
            summary="From the heuristics",
            contactInfo={"fullName": "Jane Public", "email": "jane@example.com"},
        ),
    )

    assert merged["summary"] == "From the heuristics"
    assert merged["personalInfo"] == {"fullName": "Jane Public", "email": "jane@example.com"}


def test_heuristic_skill_list_is_filed_under_technical() -> None:
    merged = merge_profiles({"skills": empty_skills()}, _heuristic(skills=["Python", "SQL"]))

    assert merged["skills"]["technical"] == ["Python", "SQL"]
    assert merged["skills"]["soft"] == []


def test_defaults_when_neither_source_has_a_value() -> None:
    merged = merge_profiles(None, _heuristic())

    assert merged["summary"] == ""
    assert merged["experience"] == []
    assert merged["skills"] == empty_skills()
    assert merged["projects"] == []
    assert merged["personalInfo"] == {}


def test_every_table_field_and_the_heuristic_extras_are_present() -> None:
    merged = merge_profiles(
        {},
        _heuristic(),
        keywords={"english": ["python"], "turkish": []},
        metadata={"wordCount": 10},
    )

    assert set(merged) == {field.name for field in MERGE_FIELDS} | {"keywords", "metadata"}
    assert merged["keywords"] == {"english": ["python"], "turkish": []}
    assert merged["metadata"] == {"wordCount": 10}


def test_is_empty() -> None:
    assert is_empty(None)
    assert is_empty("   ")
    assert is_empty([])
    assert is_empty({"a": "", "b": []})
    assert not is_empty({"a": "x"})
    assert not is_empty(0)
    assert not is_empty(False)
