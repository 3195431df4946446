"""Configuration loading and schema."""

from career_story_builder.config.loader import load_config
from career_story_builder.config.schema import AppConfigRoot, ValidationConfig, WizardConfig

__all__ = ["AppConfigRoot", "ValidationConfig", "WizardConfig", "load_config"]
