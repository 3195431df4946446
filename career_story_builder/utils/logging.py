from __future__ import annotations

import sys
from loguru import logger

# extra key -> label shown in the log line
_CONTEXT_LABELS = {
    "request_id": "req",
    "route": "route",
    "story_id": "story",
    "step": "step",
}


def _inject_default_context(record: dict) -> None:
    extra = record["extra"]
    for key in _CONTEXT_LABELS:
        extra.setdefault(key, "-")


def _line_format() -> str:
    context = " ".join(f"{label}={{extra[{key}]}}" for key, label in _CONTEXT_LABELS.items())
    return f"<green>{{time:YYYY-MM-DD HH:mm:ss.SSS}}</green> | <level>{{level:<8}}</level> | {context} | {{message}}"


def setup_logging(level: str) -> None:
    """Route loguru output to stderr with request/story context on every line.

    Safe to call more than once; each call replaces the previous sinks.
    """
    logger.remove()
    logger.configure(patcher=_inject_default_context)
    logger.add(sys.stderr, level=level.upper(), backtrace=True, diagnose=False, format=_line_format())
