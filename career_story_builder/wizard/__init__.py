"""Model-View-Update shell of the story wizard."""

from career_story_builder.wizard.model import Model, Page
from career_story_builder.wizard.program import Program, ServiceCommandHandler
from career_story_builder.wizard.update import update

__all__ = ["Model", "Page", "Program", "ServiceCommandHandler", "update"]
