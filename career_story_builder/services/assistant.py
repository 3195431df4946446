from __future__ import annotations

from typing import Protocol
import re

import orjson

from career_story_builder.config.schema import AppConfigRoot, ValidationConfig, WizardConfig
from career_story_builder.domain.conversation import ConversationState, WorkflowStep
from career_story_builder.domain.validation import DEFAULT_LIMITS

UNTITLED_STORY = "Untitled story"


class Assistant(Protocol):
    """Produces assistant turns for the story wizard.

    Implementations may raise ``ConversationError``. ``draft`` returns a JSON
    object with ``title``, ``situation``, ``task``, ``action``, ``result`` and
    ``suggestions`` keys.
    """

    model_identifier: str

    async def clarifying_reply(self, state: ConversationState, user_message: str) -> str: ...

    async def draft(self, state: ConversationState) -> str: ...


def _first_sentence(text: str) -> str:
    head = re.split(r"(?<=[.!?])\s+|\n", text.strip(), maxsplit=1)[0]
    return head.strip().rstrip(".!?").strip()


def draft_title(text: str, max_length: int) -> str:
    title = _first_sentence(text)
    if len(title) > max_length:
        cut = title[:max_length]
        if " " in cut:
            cut = cut.rsplit(" ", 1)[0]
        title = cut.rstrip(" ,;:-")
    return title or UNTITLED_STORY


class ScriptedAssistant:
    """Deterministic assistant built from the wizard configuration."""

    model_identifier = "scripted"

    def __init__(self, wizard: WizardConfig, limits: ValidationConfig = DEFAULT_LIMITS):
        self.wizard = wizard
        self.limits = limits

    def _clarify_text(self) -> str:
        questions = "\n".join(f"{idx}. {question}" for idx, question in enumerate(self.wizard.clarify_questions, start=1))
        return f"{self.wizard.clarify_intro}\n\n{questions}"

    async def clarifying_reply(self, state: ConversationState, user_message: str) -> str:
        _ = user_message
        if state.current_step is WorkflowStep.REFINEMENT:
            return self.wizard.refine_prompt
        return self._clarify_text()

    async def draft(self, state: ConversationState) -> str:
        answers = [message.content.strip() for message in state.user_messages() if message.content.strip()]
        capture = answers[0] if answers else ""
        followups = answers[1:]

        def _answer(idx: int) -> str:
            return followups[idx] if idx < len(followups) else ""

        if self.wizard.story_format == "star":
            task, action, result = _answer(0), _answer(1), _answer(2)
        else:
            task, action, result = "", _answer(0), _answer(1)

        payload = {
            "title": draft_title(capture, self.limits.title_max_length),
            "situation": capture,
            "task": task,
            "action": action,
            "result": result,
            "suggestions": list(self.wizard.suggestions),
        }
        return orjson.dumps(payload).decode("utf-8")


def build_assistant(config: AppConfigRoot) -> Assistant:
    return ScriptedAssistant(config.wizard, config.validation)
