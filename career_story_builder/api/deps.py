from __future__ import annotations

from fastapi import Request

from career_story_builder.services.conversation import ConversationService
from career_story_builder.services.stories import StoryService


def get_story_service(request: Request) -> StoryService:
    service = getattr(request.app.state, "story_service", None)
    if service is None:
        raise RuntimeError("Story service not available; application lifespan has not started")
    return service


def get_conversation_service(request: Request) -> ConversationService:
    return request.app.state.conversation_service
