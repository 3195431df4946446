"""HTTP API."""

from career_story_builder.api.app import create_app

__all__ = ["create_app"]
