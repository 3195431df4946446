from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from career_story_builder.domain.errors import ConversationError, StoryError, ValidationFailed, WorkflowError


def error_body(tag: str, message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": tag, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


async def _story_error_handler(request: Request, exc: StoryError) -> JSONResponse:
    errors = None
    if isinstance(exc, ValidationFailed):
        errors = [{"code": error.code.value, "field": error.field, "message": error.message} for error in exc.errors]
    if exc.status_code >= 500:
        logger.bind(route=request.url.path).error("Story operation failed: {}", exc)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.tag, str(exc), errors))


async def _conversation_error_handler(request: Request, exc: ConversationError) -> JSONResponse:
    logger.bind(route=request.url.path).warning("Conversation request failed: {}", exc.describe())
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.tag, exc.describe()))


async def _workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.tag, str(exc)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoryError, _story_error_handler)
    app.add_exception_handler(ConversationError, _conversation_error_handler)
    app.add_exception_handler(WorkflowError, _workflow_error_handler)
