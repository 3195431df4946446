from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from loguru import logger

from career_story_builder.domain.ids import StoryId
from career_story_builder.domain.story import Story

_store_service: "StoryStore | None" = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StoredStory:
    id: StoryId
    story: Story
    created_at: datetime
    updated_at: datetime


class StoryStore:
    """Process-local story store keyed by ``StoryId``, kept in creation order."""

    def __init__(self) -> None:
        self._rows: dict[StoryId, StoredStory] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def insert(self, story: Story, story_id: StoryId | None = None) -> StoredStory:
        now = _utcnow()
        row = StoredStory(id=story_id or StoryId.create(), story=story, created_at=now, updated_at=now)
        self._rows[row.id] = row
        return row

    def get(self, story_id: StoryId) -> StoredStory | None:
        return self._rows.get(story_id)

    def replace(self, story_id: StoryId, story: Story) -> StoredStory | None:
        current = self._rows.get(story_id)
        if current is None:
            return None
        row = replace(current, story=story, updated_at=_utcnow())
        self._rows[story_id] = row
        return row

    def remove(self, story_id: StoryId) -> bool:
        return self._rows.pop(story_id, None) is not None

    def list_all(self) -> list[StoredStory]:
        return list(self._rows.values())

    def clear(self) -> None:
        self._rows.clear()


def init_store_service() -> StoryStore:
    global _store_service
    if _store_service is None:
        _store_service = StoryStore()
        logger.debug("Story store initialized")
    return _store_service


def get_store_service() -> StoryStore:
    if _store_service is None:
        raise RuntimeError("Story store not initialized. Call init_store_service() first.")
    return _store_service


def shutdown_store_service() -> None:
    global _store_service
    if _store_service is None:
        return
    logger.debug("Story store shut down with {} stories", len(_store_service))
    _store_service.clear()
    _store_service = None
