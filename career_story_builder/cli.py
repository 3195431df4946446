from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from loguru import logger
import uvicorn

from career_story_builder.api.app import create_app
from career_story_builder.config import load_config
from career_story_builder.config.loader import masked_env_snapshot
from career_story_builder.config.schema import AppConfigRoot
from career_story_builder.domain.errors import ValidationFailed
from career_story_builder.domain.story import StoryTitle
from career_story_builder.services.conversation import ConversationService
from career_story_builder.utils.logging import setup_logging
from career_story_builder.wizard.messages import GenerateDraft, SetInitialCaptureContent, StartNewStory, SubmitInitialCapture
from career_story_builder.wizard.model import Model
from career_story_builder.wizard.program import Program, ServiceCommandHandler
from career_story_builder.wizard.views import capture_stats, is_valid_content, workflow_steps

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="career-story-builder")
    parser.add_argument("--config", type=Path, default=None, help="Path to custom config YAML")
    parser.add_argument("--profile", type=str, default=None, help="Config profile name")
    parser.add_argument("--log-level", type=str, default=None, help="Override log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("config", help="Validate and print effective config")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve_parser.add_argument("--host", type=str, default=None, help="Override bind host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override bind port")

    title_parser = subparsers.add_parser("check-title", help="Validate a story title")
    title_parser.add_argument("title", type=str, help="Title text to validate")

    demo_parser = subparsers.add_parser("demo", help="Walk the wizard with scripted input and print the draft")
    demo_parser.add_argument("--capture", type=str, required=True, help="Initial free-form story text")
    demo_parser.add_argument("--answer", action="append", default=[], help="Answer to a clarifying round (repeatable)")

    return parser


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.log_level:
        overrides["app"] = {"log_level": args.log_level}
    server_overrides: dict[str, Any] = {}
    if getattr(args, "host", None):
        server_overrides["host"] = args.host
    if getattr(args, "port", None):
        server_overrides["port"] = args.port
    if server_overrides:
        overrides["server"] = server_overrides
    return overrides


def _print_config(config: AppConfigRoot) -> None:
    console.print(Panel(Pretty(config.model_dump(mode="json")), title="Effective Config"))
    console.print(Panel(Pretty(masked_env_snapshot()), title="Env Snapshot"))


def _check_title(config: AppConfigRoot, title: str) -> int:
    table = Table(title="Title Check", show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    try:
        story_title = StoryTitle.try_create(title, config.validation)
    except ValidationFailed as exc:
        for error in exc.errors:
            table.add_row("error", f"{error.code.value}: {error.message}")
        console.print(table)
        return 1
    table.add_row("title", story_title.value)
    table.add_row("length", str(len(story_title.value)))
    console.print(table)
    return 0


def _wizard_failure(model: Model) -> str | None:
    if model.notice:
        return model.notice
    if model.conversation is not None and model.conversation.last_error is not None:
        return model.conversation.last_error.describe()
    return None


async def _run_demo(config: AppConfigRoot, capture: str, answers: list[str]) -> int:
    if not is_valid_content(capture):
        raise ValueError("demo requires non-empty --capture text")

    program = Program(handler=ServiceCommandHandler(ConversationService(config)))

    stats = capture_stats(capture, config.wizard.recommended_min_length)
    console.print(Panel(f"{stats.chars} characters, {stats.words} words. {stats.hint}", title="Capture"))

    await program.dispatch(StartNewStory())
    for text in [capture, *answers]:
        await program.dispatch(SetInitialCaptureContent(text))
        await program.dispatch(SubmitInitialCapture())
        failure = _wizard_failure(program.model)
        if failure:
            console.print(Panel(failure, title="Wizard stopped", style="red"))
            return 1

    model = await program.dispatch(GenerateDraft())
    failure = _wizard_failure(model)
    conversation = model.conversation
    if failure or conversation is None or conversation.draft_story is None:
        console.print(Panel(failure or "no draft was generated", title="Wizard stopped", style="red"))
        return 1

    steps = workflow_steps(conversation.current_step)
    console.print(" > ".join(f"[bold]{step.name}[/bold]" if step.active else step.name for step in steps))

    story = conversation.draft_story
    table = Table(title="Draft Story", show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Title", story.title.value)
    table.add_row("Situation", story.situation.value)
    if story.task.value:
        table.add_row("Task", story.task.value)
    table.add_row("Action", story.action.value)
    table.add_row("Result", story.result.value)
    for suggestion in model.suggestions:
        table.add_row("Suggestion", suggestion)
    console.print(table)
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    config = load_config(
        config_path=args.config,
        profile=args.profile,
        overrides=_build_overrides(args),
    )

    setup_logging(config.app.log_level)
    logger.info("Loaded configuration")

    if args.command == "config":
        _print_config(config)
        return

    if args.command == "check-title":
        raise SystemExit(_check_title(config, args.title))

    if args.command == "serve":
        uvicorn.run(
            create_app(config),
            host=config.server.host,
            port=config.server.port,
            log_level=config.app.log_level.lower(),
        )
        return

    if args.command == "demo":
        raise SystemExit(asyncio.run(_run_demo(config, args.capture, args.answer)))


if __name__ == "__main__":
    main()
