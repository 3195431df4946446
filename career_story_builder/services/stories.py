from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from loguru import logger

from career_story_builder.config.schema import ValidationConfig
from career_story_builder.domain.errors import StoryNotFound
from career_story_builder.domain.ids import StoryId
from career_story_builder.domain.validation import DEFAULT_LIMITS, normalize_tag
from career_story_builder.dto.story import CreateStoryDto, UpdateStoryDto
from career_story_builder.storage.memory import StoredStory, StoryStore


@dataclass
class TagCount:
    tag: str
    count: int


def parse_story_id(raw: str) -> StoryId:
    try:
        return StoryId.parse(raw)
    except ValueError as exc:
        raise StoryNotFound(raw) from exc


class StoryService:
    def __init__(self, store: StoryStore, limits: ValidationConfig = DEFAULT_LIMITS):
        self.store = store
        self.limits = limits

    def get_all(self, tag: str | None = None, query: str | None = None) -> list[StoredStory]:
        rows = self.store.list_all()
        if tag:
            wanted = normalize_tag(tag)
            rows = [row for row in rows if wanted in row.story.tags]
        if query and query.strip():
            needle = query.strip().lower()
            rows = [row for row in rows if needle in row.story.searchable_text()]
        return rows

    def get_by_id(self, story_id: StoryId) -> StoredStory | None:
        return self.store.get(story_id)

    def create(self, dto: CreateStoryDto) -> StoredStory:
        story = dto.to_story(self.limits)
        row = self.store.insert(story)
        logger.bind(story_id=str(row.id)).info("Created story '{}'", story.title.value)
        return row

    def update(self, story_id: StoryId, dto: UpdateStoryDto) -> StoredStory:
        current = self.store.get(story_id)
        if current is None:
            raise StoryNotFound(story_id)
        story = dto.apply_to(current.story, self.limits)
        row = self.store.replace(story_id, story)
        if row is None:
            raise StoryNotFound(story_id)
        logger.bind(story_id=str(story_id)).info("Updated story")
        return row

    def delete(self, story_id: StoryId) -> None:
        if not self.store.remove(story_id):
            raise StoryNotFound(story_id)
        logger.bind(story_id=str(story_id)).info("Deleted story")

    def tags(self) -> list[TagCount]:
        counts: Counter[str] = Counter()
        for row in self.store.list_all():
            counts.update(row.story.tags)
        return [TagCount(tag=tag, count=count) for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))]
