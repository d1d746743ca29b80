# tests/test_annotations.py

from __future__ import annotations

from taskearn.tasks.annotations import build_annotation, build_result
from taskearn.tasks.task_models import ProjectType


def test_image_classification_single_choice() -> None:
    assert build_result(ProjectType.IMAGE_CLASSIFICATION, "Dog") == [
        {
            "from_name": "animal_type",
            "to_name": "image",
            "type": "choices",
            "value": {"choices": ["Dog"]},
        }
    ]


def test_field_names_follow_project_table() -> None:
    pairs = {
        ProjectType.TEXT_SENTIMENT: ("sentiment", "text"),
        ProjectType.AUDIO_CLASSIFICATION: ("audio_class", "audio"),
        ProjectType.GEOSPATIAL_LABELING: ("geo_feature", "geo_image"),
    }
    for pt, (from_name, to_name) in pairs.items():
        (entry,) = build_result(pt, "x")
        assert (entry["from_name"], entry["to_name"]) == (from_name, to_name)


def test_list_value_passes_through_and_falsy_value_is_empty() -> None:
    (multi,) = build_result("image", ["cat", "", "dog"])
    assert multi["value"]["choices"] == ["cat", "dog"]

    (empty,) = build_result("image", "")
    assert empty["value"]["choices"] == []


def test_survey_uses_caller_result() -> None:
    result = [
        {"from_name": "q1", "to_name": "survey_text", "type": "choices", "value": {"choices": ["daily"]}},
        {"from_name": "q2", "to_name": "survey_text", "type": "choices", "value": {"choices": ["weekly"]}},
    ]
    assert build_result(ProjectType.SURVEY, {"result": result}) == result
    assert build_result(ProjectType.SURVEY, {"result": "nope"}) == []


def test_survey_without_result_falls_back_to_marker() -> None:
    (entry,) = build_result(ProjectType.SURVEY, {"answer": 3})
    assert entry["from_name"] == "survey_choice"
    assert entry["to_name"] == "survey_text"
    assert entry["value"]["choices"] == ["completed"]

    (entry2,) = build_result("survey", "daily")
    assert entry2["value"]["choices"] == ["daily"]


def test_build_annotation_payload() -> None:
    ann = build_annotation(12, "text", "positive")
    assert ann.to_payload() == {
        "task": 12,
        "result": [
            {"from_name": "sentiment", "to_name": "text", "type": "choices", "value": {"choices": ["positive"]}}
        ],
    }
    assert ann.selected_choices() == ["positive"]
