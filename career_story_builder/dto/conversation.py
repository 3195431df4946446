from __future__ import annotations

from datetime import datetime

from pydantic import Field

from career_story_builder.domain.conversation import ChatMessage, ConversationState, MessageRole, WorkflowStep
from career_story_builder.domain.star import Action, Result, Situation, Task
from career_story_builder.domain.story import Story, StoryTitle
from career_story_builder.dto.base import CamelModel


class MessageDto(CamelModel):
    role: MessageRole
    content: str
    timestamp: datetime
    error: str | None = None

    @classmethod
    def from_domain(cls, message: ChatMessage) -> "MessageDto":
        return cls(
            role=message.role,
            content=message.content,
            timestamp=message.timestamp,
            error=message.error.describe() if message.error is not None else None,
        )

    def to_domain(self) -> ChatMessage:
        # The rendered error text cannot be mapped back to an error kind.
        return ChatMessage(role=self.role, content=self.content, timestamp=self.timestamp)


class ConversationSnapshot(CamelModel):
    """Conversation state passed between client and server."""

    messages: list[MessageDto] = Field(default_factory=list)
    current_step: WorkflowStep = WorkflowStep.INITIAL_CAPTURE
    draft_title: str | None = None

    @classmethod
    def from_domain(cls, state: ConversationState) -> "ConversationSnapshot":
        return cls(
            messages=[MessageDto.from_domain(message) for message in state.messages_ordered()],
            current_step=state.current_step,
            draft_title=state.draft_story.title.value if state.draft_story is not None else None,
        )

    def to_domain(self) -> ConversationState:
        return ConversationState(
            messages=tuple(message.to_domain() for message in self.messages),
            current_step=self.current_step,
        )


class StoryOutput(CamelModel):
    title: str
    situation: str
    task: str | None = None
    action: str
    result: str

    @classmethod
    def from_domain(cls, story: Story) -> "StoryOutput":
        return cls(
            title=story.title.value,
            situation=story.situation.value,
            task=story.task.value or None,
            action=story.action.value,
            result=story.result.value,
        )

    def to_domain(self) -> Story:
        # Output of a validated draft; no re-validation.
        return Story(
            title=StoryTitle(self.title),
            situation=Situation(self.situation),
            task=Task(self.task or ""),
            action=Action(self.action),
            result=Result(self.result),
        )


class ClarifyRequest(CamelModel):
    conversation: ConversationSnapshot = Field(default_factory=ConversationSnapshot)
    user_message: str


class ClarifyResponse(CamelModel):
    assistant_message: str
    conversation: ConversationSnapshot


class GenerateRequest(CamelModel):
    conversation: ConversationSnapshot


class GenerateResponse(CamelModel):
    story: StoryOutput
    suggestions: list[str] | None = None
    conversation: ConversationSnapshot | None = None
