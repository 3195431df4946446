from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from career_story_builder.domain.conversation import ConversationState


class Page(str, Enum):
    HOME = "home"
    STORY_WIZARD = "storyWizard"

    @property
    def path(self) -> str:
        return _PAGE_PATHS[self]

    @classmethod
    def from_path(cls, path: str) -> "Page":
        normalized = "/" + path.strip().strip("/")
        for page, page_path in _PAGE_PATHS.items():
            if page_path == normalized:
                return page
        raise ValueError(f"Unknown page path: {path}")


_PAGE_PATHS = {
    Page.HOME: "/",
    Page.STORY_WIZARD: "/story/new",
}


@dataclass(frozen=True)
class Model:
    page: Page = Page.HOME
    conversation: ConversationState | None = None
    initial_capture_content: str = ""
    suggestions: tuple[str, ...] = ()
    notice: str | None = None

    @classmethod
    def initial(cls) -> "Model":
        return cls()
