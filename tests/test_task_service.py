# tests/test_task_service.py

from __future__ import annotations

import json

import pytest

from taskearn.core.errors import SubmissionError, UnknownProjectTypeError
from taskearn.storage.cache_store import LocalCacheStore
from taskearn.tasks.fallback import FallbackResolver, FetchState
from taskearn.tasks.fixtures import SURVEY_ID_RANGE, static_fixtures
from taskearn.tasks.task_models import ProjectType, Task
from taskearn.tasks.task_service import TaskService

from .fakes import FakeTaskSource, InMemoryKeyValueStore


@pytest.mark.asyncio
async def test_successful_fetch_is_cached_slim(service: TaskService, source: FakeTaskSource, kv) -> None:
    source.tasks[ProjectType.TEXT_SENTIMENT] = [{"id": 1, "data": {"text": "ok"}}]

    tasks = await service.list_tasks(ProjectType.TEXT_SENTIMENT)

    assert tasks == [Task(id=1, data={"text": "ok"})]
    assert json.loads(kv.data["label_studio_text_tasks"]) == [{"id": 1, "created_at": None, "data": {"text": "ok"}}]
    assert service.resolver.last_trail == [FetchState.FETCHING, FetchState.DONE]


@pytest.mark.asyncio
async def test_audio_timeouts_without_cache_serve_bundled_audio(service: TaskService, source: FakeTaskSource) -> None:
    source.fail_fetch = True

    tasks = await service.list_tasks(ProjectType.AUDIO_CLASSIFICATION)

    assert tasks
    assert all("audio" in t.data for t in tasks)
    assert [t.id for t in tasks] == [t.id for t in static_fixtures(ProjectType.AUDIO_CLASSIFICATION)]
    assert service.resolver.last_trail == [
        FetchState.FETCHING,
        FetchState.FALLING_BACK,
        FetchState.STATIC_FALLBACK,
        FetchState.DONE,
    ]


@pytest.mark.asyncio
async def test_failed_fetch_serves_cache_first(service: TaskService, source: FakeTaskSource) -> None:
    source.tasks[ProjectType.IMAGE_CLASSIFICATION] = [{"id": 10, "data": {"image": "https://x/10.png"}}]
    await service.list_tasks("image")

    source.fail_fetch = True
    tasks = await service.list_tasks("image")

    assert [t.id for t in tasks] == [10]
    assert FetchState.STATIC_FALLBACK not in service.resolver.last_trail


@pytest.mark.asyncio
@pytest.mark.parametrize("pt", list(ProjectType))
async def test_list_tasks_never_raises_for_transient_failure(service: TaskService, source: FakeTaskSource, pt) -> None:
    source.fail_fetch = True
    tasks = await service.list_tasks(pt)
    assert isinstance(tasks, list)
    assert tasks


def test_image_and_default_fixture_sets_differ() -> None:
    image_ids = {t.id for t in static_fixtures(ProjectType.IMAGE_CLASSIFICATION)}
    default_ids = {t.id for t in static_fixtures(ProjectType.SURVEY)}
    assert image_ids and default_ids
    assert image_ids.isdisjoint(default_ids)


@pytest.mark.asyncio
async def test_survey_never_hits_network(service: TaskService, source: FakeTaskSource) -> None:
    tasks = await service.list_tasks("survey")
    assert tasks
    assert all(t.id in SURVEY_ID_RANGE for t in tasks)
    assert source.list_calls == []


@pytest.mark.asyncio
async def test_empty_upstream_does_not_overwrite_cache(service: TaskService, source: FakeTaskSource) -> None:
    source.tasks[ProjectType.GEOSPATIAL_LABELING] = [{"id": 28, "data": {"image": "https://x"}}]
    await service.list_tasks("geo")

    source.tasks[ProjectType.GEOSPATIAL_LABELING] = []
    assert await service.list_tasks("geo") == []
    assert [t.id for t in await service.cache.load("geo")] == [28]


@pytest.mark.asyncio
async def test_cache_write_failure_still_returns_fresh_tasks(source: FakeTaskSource) -> None:
    kv = InMemoryKeyValueStore(max_value_bytes=5)
    svc = TaskService(source, LocalCacheStore(kv))
    source.tasks[ProjectType.TEXT_SENTIMENT] = [{"id": 1, "data": {"text": "fresh task text"}}]

    tasks = await svc.list_tasks("text")
    assert [t.id for t in tasks] == [1]


@pytest.mark.asyncio
async def test_unknown_project_type_raises(service: TaskService) -> None:
    with pytest.raises(UnknownProjectTypeError):
        await service.list_tasks("VIDEO")


@pytest.mark.asyncio
async def test_resolver_treats_cache_read_failure_as_miss() -> None:
    class BrokenCache:
        async def load(self, project_type):
            raise OSError("disk gone")

        async def save(self, project_type, tasks):
            raise AssertionError("not used")

        async def clear(self, project_type):
            raise AssertionError("not used")

    resolver = FallbackResolver(BrokenCache())
    tasks = await resolver.resolve(ProjectType.TEXT_SENTIMENT, TimeoutError())
    assert [t.id for t in tasks] == [t.id for t in static_fixtures(ProjectType.TEXT_SENTIMENT)]


# ---- submit ----

OPTIONS = [{"id": "cat", "text": "Cat", "value": "cat"}, {"id": "dog", "text": "Dog", "value": "dog"}]


@pytest.mark.asyncio
async def test_submit_valid_annotation(service: TaskService, source: FakeTaskSource) -> None:
    task = Task(id=4, data={"image": "https://x/4.png", "options": OPTIONS})

    outcome = await service.submit("image", task, "dog", started_at=100.0)

    assert outcome.submitted
    assert outcome.response == {"id": 1, "task": 4}
    (sent,) = source.submitted
    assert sent.annotation.selected_choices() == ["dog"]
    assert await service.completed_tasks() == {"4": True}
    metrics = service.quality.get(4)
    assert metrics is not None
    assert metrics.accuracy == 1.0


@pytest.mark.asyncio
async def test_submit_blocked_by_validation_makes_no_call(service: TaskService, source: FakeTaskSource) -> None:
    task = Task(id=4, data={"image": "https://x/4.png", "options": OPTIONS})

    empty = await service.submit("image", task, "")
    assert not empty.submitted
    assert "No option selected" in empty.report.errors

    wrong = await service.submit("image", task, "horse")
    assert not wrong.submitted
    assert "Invalid choice selected" in wrong.report.errors

    assert source.submitted == []
    assert await service.completed_tasks() == {}


@pytest.mark.asyncio
async def test_submit_error_propagates(service: TaskService, source: FakeTaskSource) -> None:
    source.submit_error = SubmissionError(4, 500, "server error")
    task = Task(id=4, data={"text": "A long enough review text"})

    with pytest.raises(SubmissionError):
        await service.submit("text", task, "positive")
    assert await service.completed_tasks() == {}


@pytest.mark.asyncio
async def test_submit_survey_result(service: TaskService, source: FakeTaskSource) -> None:
    result = [{"from_name": "q1", "to_name": "survey_text", "type": "choices", "value": {"choices": ["daily"]}}]
    task = {"id": 101, "data": {"question": "How often?"}}

    outcome = await service.submit(ProjectType.SURVEY, task, {"result": result})

    assert outcome.submitted
    assert source.submitted[0].annotation.result == result


@pytest.mark.asyncio
async def test_submit_multi_question_survey(service: TaskService, source: FakeTaskSource) -> None:
    task = await service.find_task("survey", 101)
    assert task is not None and task.option_values()
    result = [
        {"from_name": "usage", "to_name": "survey", "type": "choices", "value": {"choices": ["daily"]}},
        {"from_name": "satisfaction", "to_name": "survey", "type": "rating", "value": {"rating": 4}},
    ]

    outcome = await service.submit(ProjectType.SURVEY, task, {"result": result})

    assert outcome.submitted, outcome.report.errors
    assert source.submitted[0].annotation.result == result


@pytest.mark.asyncio
async def test_find_task_uses_cache_then_bundled(service: TaskService, source: FakeTaskSource) -> None:
    source.tasks[ProjectType.TEXT_SENTIMENT] = [{"id": 1, "data": {"text": "ok"}}]
    await service.list_tasks("text")

    assert (await service.find_task("text", 1)).data == {"text": "ok"}
    assert (await service.find_task("text", 3001)) is not None
    assert (await service.find_task("survey", 101)) is not None
    assert (await service.find_task("text", 424242)) is None
