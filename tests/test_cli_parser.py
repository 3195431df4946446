from __future__ import annotations

import asyncio

import pytest

from career_story_builder.cli import _build_overrides, _build_parser, _check_title, _run_demo
from career_story_builder.config.schema import AppConfigRoot


def test_serve_builds_server_overrides() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--log-level", "DEBUG", "serve", "--port", "9001"])

    overrides = _build_overrides(args)

    assert overrides == {"app": {"log_level": "DEBUG"}, "server": {"port": 9001}}


def test_config_command_has_no_overrides() -> None:
    args = _build_parser().parse_args(["config"])

    assert _build_overrides(args) == {}


def test_demo_answer_is_repeatable() -> None:
    args = _build_parser().parse_args(["demo", "--capture", "Story", "--answer", "one", "--answer", "two"])

    assert args.capture == "Story"
    assert args.answer == ["one", "two"]


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_check_title_exit_codes() -> None:
    config = AppConfigRoot()

    assert _check_title(config, "  Led the migration ") == 0
    assert _check_title(config, "   ") == 1
    assert _check_title(config, "x" * 201) == 1


def test_demo_prints_draft(capsys: pytest.CaptureFixture[str]) -> None:
    asyncio.run(_run_demo(AppConfigRoot(), "Cut build times in half.", ["Rewrote the cache layer.", "Builds take 6 minutes."]))

    out = capsys.readouterr().out
    assert "Draft Story" in out
    assert "Cut build times in half" in out


def test_demo_rejects_blank_capture() -> None:
    with pytest.raises(ValueError):
        asyncio.run(_run_demo(AppConfigRoot(), "   ", []))


def test_demo_exit_code_reflects_outcome(capsys: pytest.CaptureFixture[str]) -> None:
    config = AppConfigRoot()

    assert asyncio.run(_run_demo(config, "Cut build times in half.", ["Rewrote the cache layer."])) == 0
    assert asyncio.run(_run_demo(config, "Cut build times in half.", ["x" * 10_001])) == 1
    assert "userMessage must be at most 10000 characters" in capsys.readouterr().out
