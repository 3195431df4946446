"""HTTP surface of the story builder.

Usage:
    uvicorn career_story_builder.api.app:create_app --factory
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from career_story_builder.api.errors import register_error_handlers
from career_story_builder.api.middleware import RequestLoggingMiddleware
from career_story_builder.api.routes import conversation, health, stories
from career_story_builder.config.schema import AppConfigRoot
from career_story_builder.services.assistant import Assistant
from career_story_builder.services.conversation import ConversationService
from career_story_builder.services.stories import StoryService
from career_story_builder.storage.memory import init_store_service, shutdown_store_service


def create_app(config: AppConfigRoot | None = None, assistant: Assistant | None = None) -> FastAPI:
    config = config or AppConfigRoot()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = init_store_service()
        app.state.story_service = StoryService(store, config.validation)
        logger.info("{} API ready", config.app.name)
        try:
            yield
        finally:
            app.state.story_service = None
            shutdown_store_service()
            logger.info("{} API stopped", config.app.name)

    app = FastAPI(title=f"{config.app.name} API", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.story_service = None
    app.state.conversation_service = ConversationService(config, assistant)

    if config.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.server.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )
    app.add_middleware(
        RequestLoggingMiddleware,
        enabled=config.observability.log_requests,
        slow_request_ms=config.observability.slow_request_ms,
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(stories.router)
    app.include_router(conversation.router)
    return app
