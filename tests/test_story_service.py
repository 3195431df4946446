from __future__ import annotations

import pytest

from career_story_builder.domain.errors import StoryNotFound, ValidationFailed
from career_story_builder.domain.ids import StoryId
from career_story_builder.dto.story import CreateStoryDto, StoryDto, UpdateStoryDto
from career_story_builder.services.stories import StoryService, parse_story_id
from career_story_builder.storage.memory import StoryStore, get_store_service, init_store_service, shutdown_store_service


def _service() -> StoryService:
    return StoryService(StoryStore())


def _create(service: StoryService, title: str, **fields):
    payload = {"title": title, "situation": "S", "action": "A", "result": "R"}
    payload.update(fields)
    return service.create(CreateStoryDto.model_validate(payload))


def test_create_and_get_by_id() -> None:
    service = _service()

    row = _create(service, "  Led migration  ")

    fetched = service.get_by_id(row.id)
    assert fetched is not None
    assert fetched.story.title.value == "Led migration"
    assert fetched.created_at == fetched.updated_at


def test_get_by_id_missing_returns_none() -> None:
    assert _service().get_by_id(StoryId.create()) is None


def test_create_rejects_blank_title() -> None:
    service = _service()

    with pytest.raises(ValidationFailed):
        _create(service, "   ")
    assert service.get_all() == []


def test_get_all_keeps_creation_order() -> None:
    service = _service()
    first = _create(service, "First")
    second = _create(service, "Second")

    assert [row.id for row in service.get_all()] == [first.id, second.id]


def test_search_by_query_and_tag() -> None:
    service = _service()
    _create(service, "Cloud migration", tags=["Cloud", "leadership"])
    _create(service, "Hiring pipeline", situation="Team of 5 needed growth", tags=["hiring"])

    assert [row.story.title.value for row in service.get_all(query="CLOUD")] == ["Cloud migration"]
    assert [row.story.title.value for row in service.get_all(query="team of 5")] == ["Hiring pipeline"]
    assert [row.story.title.value for row in service.get_all(tag=" Leadership ")] == ["Cloud migration"]
    assert service.get_all(tag="cloud", query="hiring") == []


def test_update_replaces_fields() -> None:
    service = _service()
    row = _create(service, "Title")

    updated = service.update(row.id, UpdateStoryDto(title="New title", tags=["ops"]))

    assert updated.story.title.value == "New title"
    assert updated.story.situation.value == "S"
    assert updated.story.tags == ("ops",)
    assert updated.updated_at >= row.updated_at


def test_update_missing_raises_not_found() -> None:
    with pytest.raises(StoryNotFound):
        _service().update(StoryId.create(), UpdateStoryDto(title="x"))


def test_delete_then_missing() -> None:
    service = _service()
    row = _create(service, "Title")

    service.delete(row.id)

    assert service.get_by_id(row.id) is None
    with pytest.raises(StoryNotFound):
        service.delete(row.id)


def test_tags_counts_sorted_by_frequency() -> None:
    service = _service()
    _create(service, "One", tags=["cloud", "ops"])
    _create(service, "Two", tags=["cloud"])

    assert [(item.tag, item.count) for item in service.tags()] == [("cloud", 2), ("ops", 1)]


def test_parse_story_id_maps_garbage_to_not_found() -> None:
    with pytest.raises(StoryNotFound):
        parse_story_id("nope")


def test_story_dto_from_stored() -> None:
    service = _service()
    row = _create(service, "Title", task="Own the rollout")

    dto = StoryDto.from_stored(row)

    assert dto.id == str(row.id)
    assert dto.task == "Own the rollout"
    assert dto.to_wire()["createdAt"]


def test_store_service_lifecycle() -> None:
    shutdown_store_service()
    with pytest.raises(RuntimeError):
        get_store_service()

    store = init_store_service()
    assert init_store_service() is store
    assert get_store_service() is store

    shutdown_store_service()
    with pytest.raises(RuntimeError):
        get_store_service()
