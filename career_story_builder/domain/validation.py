"""Single-field checks chained fail-fast, and multi-field collection.

A check takes ``(field, value)`` and returns either the value to hand to the
next check or a :class:`ValidationError`, which stops the chain.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping
import re

from career_story_builder.config.schema import ValidationConfig
from career_story_builder.domain.errors import ValidationError, ValidationErrorCode, ValidationFailed

CheckResult = str | ValidationError
Check = Callable[[str, str], CheckResult]

DEFAULT_LIMITS = ValidationConfig()

_TAG_PATTERN = r"[a-z0-9][a-z0-9 _-]*"


def trimmed() -> Check:
    def _check(field: str, value: str) -> CheckResult:
        return value.strip()

    return _check


def non_empty(code: ValidationErrorCode = ValidationErrorCode.FIELD_REQUIRED) -> Check:
    def _check(field: str, value: str) -> CheckResult:
        if not value or not value.strip():
            return ValidationError(code, field, f"{field} is required")
        return value

    return _check


def max_length(limit: int, code: ValidationErrorCode = ValidationErrorCode.FIELD_TOO_LONG) -> Check:
    def _check(field: str, value: str) -> CheckResult:
        if len(value) > limit:
            return ValidationError(code, field, f"{field} must be at most {limit} characters")
        return value

    return _check


def matches(pattern: str, code: ValidationErrorCode = ValidationErrorCode.TAG_INVALID) -> Check:
    compiled = re.compile(pattern)

    def _check(field: str, value: str) -> CheckResult:
        if not compiled.fullmatch(value):
            return ValidationError(code, field, f"{field} has invalid format: {value!r}")
        return value

    return _check


def validate_field(field: str, value: str, *checks: Check) -> CheckResult:
    current: str = value
    for check in checks:
        outcome = check(field, current)
        if isinstance(outcome, ValidationError):
            return outcome
        current = outcome
    return current


def collect(results: Mapping[str, CheckResult | tuple[str, ...]]) -> dict[str, object]:
    """Raise ``ValidationFailed`` with every field error, else return the values."""

    errors = [result for result in results.values() if isinstance(result, ValidationError)]
    if errors:
        raise ValidationFailed(errors)
    return dict(results)


def validate_title(text: str | None, limits: ValidationConfig = DEFAULT_LIMITS) -> CheckResult:
    return validate_field(
        "title",
        text or "",
        trimmed(),
        non_empty(ValidationErrorCode.TITLE_REQUIRED),
        max_length(limits.title_max_length, ValidationErrorCode.TITLE_TOO_LONG),
    )


def validate_narrative(field: str, text: str | None, limits: ValidationConfig = DEFAULT_LIMITS) -> CheckResult:
    return validate_field(field, text or "", max_length(limits.field_max_length))


def normalize_tag(tag: str) -> str:
    return re.sub(r"\s+", " ", tag.strip().lower())


def validate_tags(
    tags: Iterable[str] | None,
    limits: ValidationConfig = DEFAULT_LIMITS,
) -> tuple[str, ...] | ValidationError:
    normalized: list[str] = []
    for raw in tags or ():
        outcome = validate_field(
            "tags",
            normalize_tag(raw),
            non_empty(ValidationErrorCode.TAG_INVALID),
            max_length(limits.tag_max_length, ValidationErrorCode.TAG_INVALID),
            matches(_TAG_PATTERN),
        )
        if isinstance(outcome, ValidationError):
            return outcome
        if outcome not in normalized:
            normalized.append(outcome)

    if len(normalized) > limits.max_tags:
        return ValidationError(
            ValidationErrorCode.TOO_MANY_TAGS,
            "tags",
            f"tags must contain at most {limits.max_tags} entries",
        )
    return tuple(normalized)
