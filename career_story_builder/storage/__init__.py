"""In-process story storage."""

from career_story_builder.storage.memory import (
    StoredStory,
    StoryStore,
    get_store_service,
    init_store_service,
    shutdown_store_service,
)

__all__ = ["StoredStory", "StoryStore", "get_store_service", "init_store_service", "shutdown_store_service"]
