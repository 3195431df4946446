from __future__ import annotations

from dataclasses import replace

from career_story_builder.domain.conversation import ChatMessage, ConversationState, MessageRole, WorkflowStep
from career_story_builder.wizard.messages import (
    AssistantFailed,
    AssistantReplied,
    Command,
    CommandRejected,
    DraftGenerated,
    GenerateDraft,
    Message,
    RequestClarification,
    RequestGeneration,
    SetInitialCaptureContent,
    SetPage,
    StartNewStory,
    SubmitInitialCapture,
)
from career_story_builder.wizard.model import Model, Page
from career_story_builder.wizard.views import is_valid_content


def _conversation(model: Model) -> ConversationState:
    return model.conversation or ConversationState.initial()


def _retract_user_turn(conversation: ConversationState, content: str) -> ConversationState | None:
    """Drop the trailing user message if it is ``content``; None when it is not there."""

    messages = conversation.messages
    if not messages or messages[-1].role is not MessageRole.USER or messages[-1].content != content:
        return None
    return replace(conversation, messages=messages[:-1])


def update(message: Message, model: Model) -> tuple[Model, list[Command]]:
    """Apply one message to the model, returning the new model and commands to run."""

    if isinstance(message, SetPage):
        if message.page is Page.HOME:
            return Model.initial(), []
        return replace(model, page=Page.STORY_WIZARD, conversation=_conversation(model)), []

    if isinstance(message, StartNewStory):
        return replace(Model.initial(), page=Page.STORY_WIZARD, conversation=ConversationState.initial()), []

    if isinstance(message, SetInitialCaptureContent):
        return replace(model, initial_capture_content=message.content), []

    if isinstance(message, SubmitInitialCapture):
        content = model.initial_capture_content
        current = _conversation(model)
        if not is_valid_content(content) or current.current_step.is_terminal or current.is_processing:
            return model, []
        conversation = (
            current.add_message(ChatMessage.create(MessageRole.USER, content))
            .advance_to(WorkflowStep.CLARIFICATION)
            .clear_error()
            .set_processing(True)
        )
        return (
            replace(model, conversation=conversation, initial_capture_content="", notice=None),
            [RequestClarification(content)],
        )

    if isinstance(message, GenerateDraft):
        current = model.conversation
        if current is None or not current.user_messages() or current.is_processing:
            return model, []
        conversation = current.clear_error().set_processing(True)
        return replace(model, conversation=conversation, notice=None), [RequestGeneration()]

    if isinstance(message, AssistantReplied):
        conversation = (
            _conversation(model)
            .add_message(ChatMessage.create(MessageRole.ASSISTANT, message.content))
            .set_processing(False)
            .clear_error()
        )
        if message.step is not None:
            conversation = conversation.advance_to(message.step)
        return replace(model, conversation=conversation), []

    if isinstance(message, AssistantFailed):
        conversation = _conversation(model).set_error(message.error).set_processing(False)
        return replace(model, conversation=conversation), []

    if isinstance(message, CommandRejected):
        conversation = _conversation(model).set_processing(False)
        capture = model.initial_capture_content
        if message.user_message is not None:
            retracted = _retract_user_turn(conversation, message.user_message)
            if retracted is not None:
                # Hand the rejected text back so it can be edited and resubmitted.
                conversation, capture = retracted, message.user_message
        return replace(model, conversation=conversation, initial_capture_content=capture, notice=message.reason), []

    if isinstance(message, DraftGenerated):
        conversation = (
            _conversation(model)
            .set_draft(message.story)
            .advance_to(WorkflowStep.GENERATION)
            .set_processing(False)
        )
        return replace(model, conversation=conversation, suggestions=message.suggestions), []

    raise TypeError(f"Unsupported wizard message: {message!r}")
