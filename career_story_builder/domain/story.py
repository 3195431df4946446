from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from career_story_builder.config.schema import ValidationConfig
from career_story_builder.domain.errors import ValidationError, ValidationFailed
from career_story_builder.domain.star import Action, Result, Situation, Task
from career_story_builder.domain.validation import (
    DEFAULT_LIMITS,
    collect,
    validate_narrative,
    validate_tags,
    validate_title,
)


@dataclass(frozen=True)
class StoryTitle:
    """Trimmed, non-empty story title. Build it with :meth:`try_create`."""

    value: str

    @classmethod
    def try_create(cls, text: str | None, limits: ValidationConfig = DEFAULT_LIMITS) -> "StoryTitle":
        outcome = validate_title(text, limits)
        if isinstance(outcome, ValidationError):
            raise ValidationFailed([outcome])
        return cls(outcome)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Story:
    """A SAR story; ``task`` is filled in for the STAR variant."""

    title: StoryTitle
    situation: Situation
    action: Action
    result: Result
    task: Task = Task()
    tags: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def try_create(
        cls,
        title: str | None,
        situation: str | None,
        action: str | None,
        result: str | None,
        *,
        task: str | None = None,
        tags: Iterable[str] | None = None,
        limits: ValidationConfig = DEFAULT_LIMITS,
    ) -> "Story":
        values = collect(
            {
                "title": validate_title(title, limits),
                "situation": validate_narrative("situation", situation, limits),
                "task": validate_narrative("task", task, limits),
                "action": validate_narrative("action", action, limits),
                "result": validate_narrative("result", result, limits),
                "tags": validate_tags(tags, limits),
            }
        )
        return cls(
            title=StoryTitle(str(values["title"])),
            situation=Situation(str(values["situation"])),
            task=Task(str(values["task"])),
            action=Action(str(values["action"])),
            result=Result(str(values["result"])),
            tags=tuple(values["tags"]),  # type: ignore[arg-type]
        )

    @classmethod
    def empty(cls) -> "Story":
        # Form initialization only; validation happens on save.
        return cls(
            title=StoryTitle(""),
            situation=Situation(""),
            action=Action(""),
            result=Result(""),
        )

    def with_fields(
        self,
        *,
        title: str | None = None,
        situation: str | None = None,
        task: str | None = None,
        action: str | None = None,
        result: str | None = None,
        tags: Iterable[str] | None = None,
        limits: ValidationConfig = DEFAULT_LIMITS,
    ) -> "Story":
        """Copy-and-update: fields left as ``None`` keep their current value."""

        results: dict[str, object] = {}
        if title is not None:
            results["title"] = validate_title(title, limits)
        for name, text in (("situation", situation), ("task", task), ("action", action), ("result", result)):
            if text is not None:
                results[name] = validate_narrative(name, text, limits)
        if tags is not None:
            results["tags"] = validate_tags(tags, limits)
        values = collect(results)  # type: ignore[arg-type]

        changes: dict[str, object] = {}
        if "title" in values:
            changes["title"] = StoryTitle(str(values["title"]))
        if "situation" in values:
            changes["situation"] = Situation(str(values["situation"]))
        if "task" in values:
            changes["task"] = Task(str(values["task"]))
        if "action" in values:
            changes["action"] = Action(str(values["action"]))
        if "result" in values:
            changes["result"] = Result(str(values["result"]))
        if "tags" in values:
            changes["tags"] = tuple(values["tags"])  # type: ignore[arg-type]
        return replace(self, **changes)

    def searchable_text(self) -> str:
        return "\n".join(
            [self.title.value, self.situation.value, self.task.value, self.action.value, self.result.value]
        ).lower()
