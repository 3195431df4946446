"""View-model helpers for the wizard pages (no rendering)."""

from __future__ import annotations

from dataclasses import dataclass

from career_story_builder.domain.conversation import WorkflowStep, all_workflow_steps

RECOMMENDED_MIN_LENGTH = 100


@dataclass(frozen=True)
class StepIndicator:
    step: WorkflowStep
    name: str
    active: bool


@dataclass(frozen=True)
class CaptureStats:
    chars: int
    words: int
    is_valid: bool
    has_min_content: bool
    hint: str


def word_count(text: str) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


def char_count(text: str) -> int:
    return len(text)


def is_valid_content(content: str) -> bool:
    return bool(content and content.strip())


def capture_stats(text: str, recommended_min_length: int = RECOMMENDED_MIN_LENGTH) -> CaptureStats:
    chars = char_count(text)
    has_min = chars >= recommended_min_length
    hint = "Good length!" if has_min else f"Aim for at least {recommended_min_length} characters"
    return CaptureStats(
        chars=chars,
        words=word_count(text),
        is_valid=is_valid_content(text),
        has_min_content=has_min,
        hint=hint,
    )


def workflow_steps(current: WorkflowStep | None) -> list[StepIndicator]:
    return [
        StepIndicator(step=step, name=step.display_name, active=step is current)
        for step in all_workflow_steps()
    ]
