from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from career_story_builder.domain.errors import ConversationError, WorkflowError
from career_story_builder.domain.story import Story


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class WorkflowStep(str, Enum):
    INITIAL_CAPTURE = "initialCapture"
    CLARIFICATION = "clarification"
    REFINEMENT = "refinement"
    GENERATION = "generation"

    @property
    def position(self) -> int:
        return _STEP_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return _STEP_NAMES[self]

    @property
    def is_terminal(self) -> bool:
        return self is WorkflowStep.GENERATION

    def next(self) -> "WorkflowStep":
        if self.is_terminal:
            return self
        return _STEP_ORDER[self.position + 1]


_STEP_ORDER: list[WorkflowStep] = [
    WorkflowStep.INITIAL_CAPTURE,
    WorkflowStep.CLARIFICATION,
    WorkflowStep.REFINEMENT,
    WorkflowStep.GENERATION,
]

_STEP_NAMES = {
    WorkflowStep.INITIAL_CAPTURE: "Capture",
    WorkflowStep.CLARIFICATION: "Clarify",
    WorkflowStep.REFINEMENT: "Refine",
    WorkflowStep.GENERATION: "Generate",
}


def all_workflow_steps() -> list[WorkflowStep]:
    return list(_STEP_ORDER)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatMessage:
    role: MessageRole
    content: str
    timestamp: datetime
    error: ConversationError | None = None

    @classmethod
    def create(cls, role: MessageRole, content: str) -> "ChatMessage":
        return cls(role=role, content=content, timestamp=_utcnow())

    def with_error(self, error: ConversationError) -> "ChatMessage":
        return replace(self, error=error)


@dataclass(frozen=True)
class ConversationState:
    """State of one story-building conversation.

    ``messages`` is kept in chronological order. Every operation returns a new
    state; ``current_step`` never moves to an earlier step.
    """

    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)
    current_step: WorkflowStep = WorkflowStep.INITIAL_CAPTURE
    draft_story: Story | None = None
    last_error: ConversationError | None = None
    is_processing: bool = False

    @classmethod
    def initial(cls) -> "ConversationState":
        return cls()

    def add_message(self, message: ChatMessage) -> "ConversationState":
        return replace(self, messages=self.messages + (message,))

    def messages_ordered(self) -> list[ChatMessage]:
        return list(self.messages)

    def user_messages(self) -> list[ChatMessage]:
        return [message for message in self.messages if message.role is MessageRole.USER]

    def set_step(self, step: WorkflowStep) -> "ConversationState":
        if step.position < self.current_step.position:
            raise WorkflowError(
                f"cannot move from {self.current_step.value} back to {step.value}"
            )
        return replace(self, current_step=step)

    def advance(self) -> "ConversationState":
        return replace(self, current_step=self.current_step.next())

    def advance_to(self, step: WorkflowStep) -> "ConversationState":
        if step.position <= self.current_step.position:
            return self
        return replace(self, current_step=step)

    def set_draft(self, story: Story) -> "ConversationState":
        return replace(self, draft_story=story)

    def set_processing(self, processing: bool) -> "ConversationState":
        return replace(self, is_processing=processing)

    def set_error(self, error: ConversationError) -> "ConversationState":
        return replace(self, last_error=error)

    def clear_error(self) -> "ConversationState":
        return replace(self, last_error=None)
