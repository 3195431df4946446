from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field

from career_story_builder.config.schema import ValidationConfig
from career_story_builder.domain.story import Story
from career_story_builder.domain.validation import DEFAULT_LIMITS
from career_story_builder.dto.base import CamelModel

if TYPE_CHECKING:
    from career_story_builder.storage.memory import StoredStory


class CreateStoryDto(CamelModel):
    title: str
    situation: str = ""
    task: str | None = None
    action: str = ""
    result: str = ""
    tags: list[str] = Field(default_factory=list)

    def to_story(self, limits: ValidationConfig = DEFAULT_LIMITS) -> Story:
        return Story.try_create(
            self.title,
            self.situation,
            self.action,
            self.result,
            task=self.task,
            tags=self.tags,
            limits=limits,
        )


class UpdateStoryDto(CamelModel):
    title: str | None = None
    situation: str | None = None
    task: str | None = None
    action: str | None = None
    result: str | None = None
    tags: list[str] | None = None

    def apply_to(self, story: Story, limits: ValidationConfig = DEFAULT_LIMITS) -> Story:
        return story.with_fields(
            title=self.title,
            situation=self.situation,
            task=self.task,
            action=self.action,
            result=self.result,
            tags=self.tags,
            limits=limits,
        )


class StoryDto(CamelModel):
    id: str
    title: str
    situation: str
    task: str | None = None
    action: str
    result: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_stored(cls, stored: StoredStory) -> "StoryDto":
        story = stored.story
        return cls(
            id=str(stored.id),
            title=story.title.value,
            situation=story.situation.value,
            task=story.task.value or None,
            action=story.action.value,
            result=story.result.value,
            tags=list(story.tags),
            created_at=stored.created_at,
            updated_at=stored.updated_at,
        )


class TagCountDto(CamelModel):
    tag: str
    count: int
