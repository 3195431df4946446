from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Awaitable, Callable

from loguru import logger

from career_story_builder.domain.conversation import ConversationState
from career_story_builder.domain.errors import ConversationError, StoryError, WorkflowError
from career_story_builder.dto.conversation import ClarifyRequest, ConversationSnapshot, GenerateRequest
from career_story_builder.services.conversation import ConversationService
from career_story_builder.wizard.messages import (
    AssistantFailed,
    AssistantReplied,
    Command,
    CommandRejected,
    DraftGenerated,
    Message,
    RequestClarification,
    RequestGeneration,
)
from career_story_builder.wizard.model import Model
from career_story_builder.wizard.update import update

CommandHandler = Callable[[Command, Model], Awaitable[list[Message]]]


class Program:
    """Single-threaded dispatch loop: update, then run commands, then feed results back."""

    def __init__(self, handler: CommandHandler | None = None, model: Model | None = None):
        self.model = model or Model.initial()
        self.handler = handler
        self.history: list[Message] = []

    async def dispatch(self, message: Message) -> Model:
        queue: deque[Message] = deque([message])
        while queue:
            current = queue.popleft()
            self.history.append(current)
            self.model, commands = update(current, self.model)
            if self.handler is None:
                continue
            for command in commands:
                queue.extend(await self.handler(command, self.model))
        return self.model


class ServiceCommandHandler:
    """Runs wizard commands against an in-process ``ConversationService``.

    Service failures come back as messages, so the model always leaves the
    processing state.
    """

    def __init__(self, service: ConversationService):
        self.service = service

    async def __call__(self, command: Command, model: Model) -> list[Message]:
        conversation = model.conversation or ConversationState.initial()
        user_message = command.user_message if isinstance(command, RequestClarification) else None
        try:
            if isinstance(command, RequestClarification):
                return await self._clarify(command, conversation)
            if isinstance(command, RequestGeneration):
                return await self._generate(conversation)
        except ConversationError as exc:
            logger.bind(step=conversation.current_step.value).warning("Assistant unavailable: {}", exc.describe())
            return [AssistantFailed(exc)]
        except (StoryError, WorkflowError) as exc:
            logger.bind(step=conversation.current_step.value).warning("Wizard command rejected: {}", exc)
            return [CommandRejected(str(exc), user_message)]
        raise TypeError(f"Unsupported wizard command: {command!r}")

    async def _clarify(self, command: RequestClarification, conversation: ConversationState) -> list[Message]:
        # The service appends the user turn itself.
        before_turn = replace(conversation, messages=conversation.messages[:-1])
        request = ClarifyRequest(
            conversation=ConversationSnapshot.from_domain(before_turn),
            user_message=command.user_message,
        )
        response = await self.service.clarify(request)
        return [AssistantReplied(response.assistant_message, response.conversation.current_step)]

    async def _generate(self, conversation: ConversationState) -> list[Message]:
        request = GenerateRequest(conversation=ConversationSnapshot.from_domain(conversation))
        response = await self.service.generate(request)
        return [DraftGenerated(response.story.to_domain(), tuple(response.suggestions or ()))]
