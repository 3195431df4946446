"""Wire-level shapes of stories and conversations."""

from career_story_builder.dto.conversation import (
    ClarifyRequest,
    ClarifyResponse,
    ConversationSnapshot,
    GenerateRequest,
    GenerateResponse,
    MessageDto,
    StoryOutput,
)
from career_story_builder.dto.story import CreateStoryDto, StoryDto, TagCountDto, UpdateStoryDto

__all__ = [
    "ClarifyRequest",
    "ClarifyResponse",
    "ConversationSnapshot",
    "CreateStoryDto",
    "GenerateRequest",
    "GenerateResponse",
    "MessageDto",
    "StoryDto",
    "StoryOutput",
    "TagCountDto",
    "UpdateStoryDto",
]
