"""Messages the wizard reacts to and commands it asks the host to run."""

from __future__ import annotations

from dataclasses import dataclass

from career_story_builder.domain.conversation import WorkflowStep
from career_story_builder.domain.errors import ConversationError
from career_story_builder.domain.story import Story
from career_story_builder.wizard.model import Page


@dataclass(frozen=True)
class SetPage:
    page: Page


@dataclass(frozen=True)
class StartNewStory:
    pass


@dataclass(frozen=True)
class SetInitialCaptureContent:
    content: str


@dataclass(frozen=True)
class SubmitInitialCapture:
    pass


@dataclass(frozen=True)
class GenerateDraft:
    pass


@dataclass(frozen=True)
class AssistantReplied:
    content: str
    # Step the server settled on for this turn; the client only moves forward to it.
    step: WorkflowStep | None = None


@dataclass(frozen=True)
class AssistantFailed:
    error: ConversationError


@dataclass(frozen=True)
class CommandRejected:
    """The service refused a request (bad input or a finished conversation)."""

    reason: str
    user_message: str | None = None


@dataclass(frozen=True)
class DraftGenerated:
    story: Story
    suggestions: tuple[str, ...] = ()


Message = (
    SetPage
    | StartNewStory
    | SetInitialCaptureContent
    | SubmitInitialCapture
    | GenerateDraft
    | AssistantReplied
    | AssistantFailed
    | CommandRejected
    | DraftGenerated
)


@dataclass(frozen=True)
class RequestClarification:
    user_message: str


@dataclass(frozen=True)
class RequestGeneration:
    pass


Command = RequestClarification | RequestGeneration
