from __future__ import annotations

from typing import Any

from loguru import logger

from career_story_builder.config.schema import AppConfigRoot
from career_story_builder.domain.conversation import ChatMessage, ConversationState, MessageRole, WorkflowStep
from career_story_builder.domain.errors import (
    ConversationError,
    ValidationError,
    ValidationErrorCode,
    ValidationFailed,
    WorkflowError,
)
from career_story_builder.domain.story import Story
from career_story_builder.domain.validation import max_length, non_empty, trimmed, validate_field
from career_story_builder.dto.codec import safe_load_json_dict
from career_story_builder.dto.conversation import (
    ClarifyRequest,
    ClarifyResponse,
    ConversationSnapshot,
    GenerateRequest,
    GenerateResponse,
    StoryOutput,
)
from career_story_builder.services.assistant import Assistant, build_assistant


def _coerce_text(value: Any) -> str:
    return str(value or "").strip()


def _coerce_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def clarify_target(state: ConversationState, clarify_rounds: int) -> WorkflowStep:
    """Step a conversation should reach once its latest user message is in."""

    answers = max(len(state.user_messages()) - 1, 0)
    if answers >= clarify_rounds:
        return WorkflowStep.REFINEMENT
    return WorkflowStep.CLARIFICATION


class ConversationService:
    def __init__(self, config: AppConfigRoot, assistant: Assistant | None = None):
        self.config = config
        self.assistant = assistant or build_assistant(config)

    async def clarify(self, request: ClarifyRequest) -> ClarifyResponse:
        user_text = validate_field(
            "userMessage",
            request.user_message,
            trimmed(),
            non_empty(),
            max_length(self.config.validation.field_max_length),
        )
        if isinstance(user_text, ValidationError):
            raise ValidationFailed([user_text])

        state = request.conversation.to_domain()
        if state.current_step.is_terminal:
            raise WorkflowError("story already generated; start a new conversation")

        state = state.add_message(ChatMessage.create(MessageRole.USER, request.user_message))
        state = state.advance_to(clarify_target(state, self.config.wizard.clarify_rounds))
        log = logger.bind(route="clarify", step=state.current_step.value)

        try:
            reply = await self.assistant.clarifying_reply(state, user_text)
        except ConversationError as exc:
            log.warning("Assistant failed during clarification: {}", exc.describe())
            raise

        state = state.add_message(ChatMessage.create(MessageRole.ASSISTANT, reply))
        log.info("Clarification turn complete, {} messages", len(state.messages))
        return ClarifyResponse(assistant_message=reply, conversation=ConversationSnapshot.from_domain(state))

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        state = request.conversation.to_domain()
        if not any(message.content.strip() for message in state.user_messages()):
            raise ValidationFailed(
                [
                    ValidationError(
                        ValidationErrorCode.FIELD_REQUIRED,
                        "conversation",
                        "conversation needs at least one user message",
                    )
                ]
            )
        limit = self.config.validation.field_max_length
        if any(len(message.content.strip()) > limit for message in state.user_messages()):
            raise ValidationFailed(
                [
                    ValidationError(
                        ValidationErrorCode.FIELD_TOO_LONG,
                        "conversation",
                        f"user messages must be at most {limit} characters",
                    )
                ]
            )
        log = logger.bind(route="generate", step=state.current_step.value)

        try:
            raw = await self.assistant.draft(state)
        except ConversationError as exc:
            log.warning("Assistant failed during generation: {}", exc.describe())
            raise

        try:
            payload = safe_load_json_dict(raw)
        except ValueError as exc:
            log.warning("Assistant returned unparseable draft: {}", exc)
            raise ConversationError.invalid_response("draft is not a JSON object") from exc

        try:
            story = Story.try_create(
                _coerce_text(payload.get("title")),
                _coerce_text(payload.get("situation")),
                _coerce_text(payload.get("action")),
                _coerce_text(payload.get("result")),
                task=_coerce_text(payload.get("task")),
                limits=self.config.validation,
            )
        except ValidationFailed as exc:
            log.warning("Assistant draft failed validation: {}", exc)
            raise ConversationError.invalid_response(str(exc)) from exc

        state = state.set_draft(story).advance_to(WorkflowStep.GENERATION)
        suggestions = _coerce_list(payload.get("suggestions"))
        log.info("Generated draft '{}'", story.title.value)
        return GenerateResponse(
            story=StoryOutput.from_domain(story),
            suggestions=suggestions or None,
            conversation=ConversationSnapshot.from_domain(state),
        )
