from __future__ import annotations

from typing import Any, TypeVar
import re

import orjson

from career_story_builder.dto.base import CamelModel

M = TypeVar("M", bound=CamelModel)


def dumps(model: CamelModel) -> str:
    return orjson.dumps(model.to_wire()).decode("utf-8")


def loads(model_cls: type[M], text: str | bytes) -> M:
    return model_cls.model_validate(orjson.loads(text))


_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*)\n\s*```$", re.DOTALL)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def _unwrap_fence(text: str) -> str:
    match = _FENCE.match(text.strip())
    return match.group("body").strip() if match else text.strip()


def _clean_draft_text(text: str) -> str:
    text = _CONTROL_CHARS.sub("", text.replace("\r\n", "\n").replace("\r", "\n"))
    return _TRAILING_COMMA.sub(r"\1", text)


def _outermost_object(text: str) -> str | None:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def safe_load_json_dict(text: str) -> dict[str, Any]:
    """Read an assistant draft as a JSON object.

    Assistants tend to wrap drafts in markdown fences, leave trailing commas or
    add chatter around the object; all of that is tolerated. Raises
    ``ValueError`` when no object can be recovered.
    """

    if not text or not text.strip():
        raise ValueError("assistant draft is empty")

    candidate = _clean_draft_text(_unwrap_fence(text))
    try:
        payload = orjson.loads(candidate)
    except orjson.JSONDecodeError:
        embedded = _outermost_object(candidate)
        if embedded is None:
            raise ValueError("assistant draft contains no JSON object") from None
        try:
            payload = orjson.loads(embedded)
        except orjson.JSONDecodeError as exc:
            raise ValueError(f"assistant draft is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"assistant draft must be a JSON object, got {type(payload).__name__}")
    return payload
