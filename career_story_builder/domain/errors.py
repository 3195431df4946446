from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from career_story_builder.domain.ids import StoryId


class ValidationErrorCode(str, Enum):
    TITLE_REQUIRED = "titleRequired"
    TITLE_TOO_LONG = "titleTooLong"
    FIELD_REQUIRED = "fieldRequired"
    FIELD_TOO_LONG = "fieldTooLong"
    TAG_INVALID = "tagInvalid"
    TOO_MANY_TAGS = "tooManyTags"


@dataclass(frozen=True)
class ValidationError:
    code: ValidationErrorCode
    field: str
    message: str


class StoryError(Exception):
    """Base class for story service failures."""

    status_code = 500
    tag = "storyError"


class ValidationFailed(StoryError):
    status_code = 400
    tag = "validationFailed"

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        summary = "; ".join(error.message for error in self.errors) or "validation failed"
        super().__init__(summary)


class StoryNotFound(StoryError):
    status_code = 404
    tag = "notFound"

    def __init__(self, story_id: "StoryId | str"):
        self.story_id = story_id
        super().__init__(f"Story not found: {story_id}")


class Unauthorized(StoryError):
    status_code = 401
    tag = "unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class DatabaseError(StoryError):
    status_code = 500
    tag = "databaseError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Database error: {message}")


class ConversationErrorKind(str, Enum):
    AI_SERVICE_UNAVAILABLE = "aiServiceUnavailable"
    RATE_LIMITED = "rateLimited"
    INVALID_RESPONSE = "invalidResponse"
    NETWORK_ERROR = "networkError"


_CONVERSATION_STATUS = {
    ConversationErrorKind.AI_SERVICE_UNAVAILABLE: 503,
    ConversationErrorKind.RATE_LIMITED: 429,
    ConversationErrorKind.INVALID_RESPONSE: 502,
    ConversationErrorKind.NETWORK_ERROR: 502,
}


class ConversationError(Exception):
    """Failure talking to the story assistant."""

    def __init__(self, kind: ConversationErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        super().__init__(self.describe())

    @classmethod
    def ai_service_unavailable(cls) -> "ConversationError":
        return cls(ConversationErrorKind.AI_SERVICE_UNAVAILABLE)

    @classmethod
    def rate_limited(cls) -> "ConversationError":
        return cls(ConversationErrorKind.RATE_LIMITED)

    @classmethod
    def invalid_response(cls, reason: str) -> "ConversationError":
        return cls(ConversationErrorKind.INVALID_RESPONSE, reason)

    @classmethod
    def network_error(cls, message: str) -> "ConversationError":
        return cls(ConversationErrorKind.NETWORK_ERROR, message)

    @property
    def status_code(self) -> int:
        return _CONVERSATION_STATUS[self.kind]

    @property
    def tag(self) -> str:
        return self.kind.value

    def describe(self) -> str:
        if self.kind is ConversationErrorKind.AI_SERVICE_UNAVAILABLE:
            return "AI service unavailable"
        if self.kind is ConversationErrorKind.RATE_LIMITED:
            return "Rate limited"
        if self.kind is ConversationErrorKind.INVALID_RESPONSE:
            return f"Invalid response: {self.detail}"
        return f"Network error: {self.detail}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversationError):
            return NotImplemented
        return self.kind is other.kind and self.detail == other.detail

    def __hash__(self) -> int:
        return hash((self.kind, self.detail))


class WorkflowError(ValueError):
    """Raised when a conversation would move to an earlier workflow step."""

    status_code = 409
    tag = "workflowConflict"
