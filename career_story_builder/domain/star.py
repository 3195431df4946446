"""STAR framework components for behavioral interview stories."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class _Component:
    value: str = ""

    @classmethod
    def create(cls, text: str):
        return cls(text)

    def __str__(self) -> str:
        return self.value


class Situation(_Component):
    """The context and background of the story."""


class Task(_Component):
    """The challenge or responsibility faced."""


class Action(_Component):
    """The specific steps taken to address the task."""


class Result(_Component):
    """The outcome and impact of the actions."""
