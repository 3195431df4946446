from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


DEFAULT_CLARIFY_QUESTIONS: list[str] = [
    "What was the specific challenge or problem you faced?",
    "What actions did you personally take?",
    "What measurable results did you achieve?",
]


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "Career Story Builder"
    log_level: str = Field(default="INFO")


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=list)

    @field_validator("port")
    @classmethod
    def _port_range(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("port must be between 1 and 65535")
        return value


class ValidationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title_max_length: int = 200
    field_max_length: int = 10_000
    tag_max_length: int = 40
    max_tags: int = 20

    @field_validator("title_max_length", "field_max_length", "tag_max_length", "max_tags")
    @classmethod
    def _positive_int(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("validation limits must be positive")
        return value


class WizardConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    clarify_intro: str = "Thanks for sharing! To help craft your SAR story:"
    clarify_questions: list[str] = Field(default_factory=lambda: list(DEFAULT_CLARIFY_QUESTIONS))
    refine_prompt: str = (
        "Here is what I have so far. Is there anything you would like to adjust "
        "before I generate your story?"
    )
    clarify_rounds: int = 1
    suggestions: list[str] = Field(default_factory=lambda: ["Add specific metrics", "Include team size"])
    recommended_min_length: int = 100
    story_format: Literal["sar", "star"] = "sar"

    @field_validator("clarify_rounds", "recommended_min_length")
    @classmethod
    def _non_negative_int(cls, value: int) -> int:
        if value < 0:
            raise ValueError("wizard integer settings must be non-negative")
        return value

    @model_validator(mode="after")
    def _validate_questions(self) -> "WizardConfig":
        if not self.clarify_questions:
            raise ValueError("wizard.clarify_questions cannot be empty")
        return self


class ObservabilityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_requests: bool = True
    slow_request_ms: int = 1000

    @field_validator("slow_request_ms")
    @classmethod
    def _non_negative_ms(cls, value: int) -> int:
        if value < 0:
            raise ValueError("slow_request_ms must be non-negative")
        return value


class AppConfigRoot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app: AppConfig = AppConfig()
    server: ServerConfig = ServerConfig()
    validation: ValidationConfig = ValidationConfig()
    wizard: WizardConfig = WizardConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
