from __future__ import annotations

from datetime import datetime, timezone

import orjson
import pytest

from career_story_builder.domain.conversation import ChatMessage, ConversationState, MessageRole, WorkflowStep
from career_story_builder.domain.errors import ConversationError, ValidationFailed
from career_story_builder.domain.story import Story
from career_story_builder.dto import codec
from career_story_builder.dto.conversation import ClarifyRequest, ConversationSnapshot, GenerateResponse, MessageDto, StoryOutput
from career_story_builder.dto.story import CreateStoryDto, UpdateStoryDto

TS = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_message_round_trip() -> None:
    original = MessageDto(role=MessageRole.USER, content="Test message", timestamp=TS)

    result = codec.loads(MessageDto, codec.dumps(original))

    assert result == original


def test_roles_serialize_as_camel_case_tags() -> None:
    user = codec.dumps(MessageDto(role=MessageRole.USER, content="Test", timestamp=TS))
    assistant = codec.dumps(MessageDto(role=MessageRole.ASSISTANT, content="Response", timestamp=TS))

    assert '"role":"user"' in user
    assert '"role":"assistant"' in assistant


def test_none_fields_are_omitted() -> None:
    payload = orjson.loads(codec.dumps(MessageDto(role=MessageRole.USER, content="Test", timestamp=TS)))

    assert "error" not in payload


def test_snapshot_uses_camel_case_names() -> None:
    snapshot = ConversationSnapshot(current_step=WorkflowStep.CLARIFICATION, draft_title="Draft")

    payload = orjson.loads(codec.dumps(snapshot))

    assert payload == {"messages": [], "currentStep": "clarification", "draftTitle": "Draft"}


def test_request_accepts_camel_case_input() -> None:
    request = codec.loads(
        ClarifyRequest,
        '{"conversation": {"messages": [], "currentStep": "initialCapture"}, "userMessage": "I led a team"}',
    )

    assert request.user_message == "I led a team"
    assert request.conversation.current_step is WorkflowStep.INITIAL_CAPTURE


def test_message_from_domain_renders_error() -> None:
    message = ChatMessage(MessageRole.ASSISTANT, "oops", TS).with_error(ConversationError.invalid_response("empty"))

    dto = MessageDto.from_domain(message)

    assert dto.error == "Invalid response: empty"
    assert dto.to_domain().error is None


def test_snapshot_from_domain_keeps_chronological_order_and_draft_title() -> None:
    state = (
        ConversationState.initial()
        .add_message(ChatMessage(MessageRole.USER, "first", TS))
        .add_message(ChatMessage(MessageRole.ASSISTANT, "second", TS))
        .set_draft(Story.try_create("Draft title", "S", "A", "R"))
        .set_processing(True)
    )

    snapshot = ConversationSnapshot.from_domain(state)
    restored = snapshot.to_domain()

    assert [message.content for message in snapshot.messages] == ["first", "second"]
    assert snapshot.draft_title == "Draft title"
    assert [message.content for message in restored.messages] == ["first", "second"]
    assert restored.draft_story is None
    assert restored.is_processing is False


def test_generate_response_omits_missing_suggestions() -> None:
    story = Story.try_create("Title", "S", "A", "R")
    response = GenerateResponse(story=StoryOutput.from_domain(story))

    payload = orjson.loads(codec.dumps(response))

    assert "suggestions" not in payload
    assert "task" not in payload["story"]


def test_create_dto_to_story_validates_title() -> None:
    with pytest.raises(ValidationFailed):
        CreateStoryDto(title="   ", situation="S", action="A", result="R").to_story()


def test_update_dto_applies_supplied_fields_only() -> None:
    story = Story.try_create("Title", "S", "A", "R")

    updated = UpdateStoryDto.model_validate({"result": "Cut costs 40%"}).apply_to(story)

    assert updated.title.value == "Title"
    assert updated.result.value == "Cut costs 40%"


def test_safe_load_json_dict_handles_fences_and_trailing_commas() -> None:
    text = '```json\n{"title": "T", "suggestions": ["a",],}\n```'

    assert codec.safe_load_json_dict(text) == {"title": "T", "suggestions": ["a"]}


def test_safe_load_json_dict_extracts_embedded_object() -> None:
    assert codec.safe_load_json_dict('Sure! {"title": "T"} Done.') == {"title": "T"}


def test_safe_load_json_dict_rejects_non_object() -> None:
    with pytest.raises(ValueError):
        codec.safe_load_json_dict("[1, 2]")


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("  \n", "empty"),
        ("no draft today", "contains no JSON object"),
        ('{"title": "T" "situation"}', "not valid JSON"),
        ("[1, 2]", "got list"),
    ],
)
def test_safe_load_json_dict_explains_rejection(text: str, reason: str) -> None:
    with pytest.raises(ValueError, match=reason):
        codec.safe_load_json_dict(text)
