# tests/test_normalizer.py

from __future__ import annotations

import pytest

from taskearn.core.errors import MalformedTaskError, UnknownProjectTypeError
from taskearn.tasks.normalizer import normalize_task, normalize_tasks
from taskearn.tasks.task_models import ProjectType, Task


def test_geospatial_image_fills_map_image() -> None:
    raw = {"id": 28, "data": {"image": "https://x/map.png", "location_name": "Desert Region"}}
    task = normalize_task(raw, ProjectType.GEOSPATIAL_LABELING)
    assert task.data["map_image"] == "https://x/map.png"
    assert task.data["image"] == "https://x/map.png"
    assert task.data["location_name"] == "Desert Region"


def test_geospatial_existing_map_image_is_kept() -> None:
    raw = {"id": 1, "data": {"image": "https://x/a.png", "map_image": "https://x/b.png"}}
    task = normalize_task(raw, "geo")
    assert task.data["map_image"] == "https://x/b.png"


def test_text_sentiment_does_not_synthesize_map_image() -> None:
    task = normalize_task({"id": 1, "data": {"image": "https://x/a.png", "text": "hello"}}, "TEXT_SENTIMENT")
    assert "map_image" not in task.data


def test_unknown_fields_dropped_and_known_fields_kept() -> None:
    raw = {
        "id": 5,
        "data": {"text": "ok", "question": "Q?", "meta_info": {"x": 1}, "options": [{"id": "a", "text": "A", "value": "a"}]},
        "created_at": "2025-01-01T00:00:00Z",
        "annotations": [],
        "is_labeled": True,
    }
    task = normalize_task(raw, ProjectType.TEXT_SENTIMENT)
    assert task.data == {"text": "ok", "question": "Q?", "options": [{"id": "a", "text": "A", "value": "a"}]}
    assert task.created_at == "2025-01-01T00:00:00Z"
    assert task.is_labeled is True
    # is_labeled stays in memory only; the cache record is slim
    assert task.to_record() == {"id": 5, "created_at": "2025-01-01T00:00:00Z", "data": task.data}


def test_normalize_is_idempotent() -> None:
    raw = {"id": "7", "data": {"image": "https://x/a.png", "junk": 1}}
    once = normalize_task(raw, ProjectType.GEOSPATIAL_LABELING)
    twice = normalize_task(once, ProjectType.GEOSPATIAL_LABELING)
    assert once == twice
    assert normalize_task(once.to_record(), ProjectType.GEOSPATIAL_LABELING).data == once.data
    assert once.id == 7


def test_missing_created_at_becomes_none() -> None:
    task = normalize_task({"id": 1, "data": {"text": "ok"}}, ProjectType.TEXT_SENTIMENT)
    assert task == Task(id=1, data={"text": "ok"}, created_at=None)


@pytest.mark.parametrize("bad_id", [None, "abc", 1.5, True])
def test_non_integer_id_is_malformed(bad_id) -> None:
    with pytest.raises(MalformedTaskError):
        normalize_task({"id": bad_id, "data": {}}, ProjectType.IMAGE_CLASSIFICATION)


def test_batch_skips_malformed_entries() -> None:
    tasks = normalize_tasks(
        [{"id": 1, "data": {}}, "nonsense", {"id": "x"}, {"id": 2, "data": {"audio": "https://a"}}],
        ProjectType.AUDIO_CLASSIFICATION,
    )
    assert [t.id for t in tasks] == [1, 2]


def test_unknown_project_type_is_rejected() -> None:
    with pytest.raises(UnknownProjectTypeError):
        normalize_task({"id": 1, "data": {}}, "VIDEO")
