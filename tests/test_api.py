from __future__ import annotations

from fastapi.testclient import TestClient
from loguru import logger

from career_story_builder.api.app import create_app
from career_story_builder.config.schema import AppConfigRoot
from career_story_builder.domain.errors import ConversationError, DatabaseError, Unauthorized


class _FailingAssistant:
    model_identifier = "failing"

    def __init__(self, error: ConversationError) -> None:
        self.error = error

    async def clarifying_reply(self, state, user_message):
        raise self.error

    async def draft(self, state):
        raise self.error


STORY = {
    "title": "Led cloud migration",
    "situation": "Legacy datacenter was end of life",
    "action": "Planned and ran the migration",
    "result": "Cut hosting costs by 40%",
    "tags": ["Cloud", "leadership"],
}


def test_health_returns_plain_ok() -> None:
    with TestClient(create_app()) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.text == "OK"
    assert response.headers["X-Request-ID"]


def test_request_id_is_echoed() -> None:
    with TestClient(create_app()) as client:
        response = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"


def test_story_crud_round_trip() -> None:
    with TestClient(create_app()) as client:
        created = client.post("/api/stories", json=STORY)
        assert created.status_code == 201
        body = created.json()
        assert body["title"] == "Led cloud migration"
        assert body["tags"] == ["cloud", "leadership"]
        assert "task" not in body
        assert body["createdAt"] == body["updatedAt"]
        story_id = body["id"]

        fetched = client.get(f"/api/stories/{story_id}")
        assert fetched.status_code == 200
        assert fetched.json()["situation"] == STORY["situation"]

        updated = client.put(f"/api/stories/{story_id}", json={"task": "Own the cutover"})
        assert updated.status_code == 200
        assert updated.json()["task"] == "Own the cutover"
        assert updated.json()["title"] == "Led cloud migration"

        listed = client.get("/api/stories")
        assert [item["id"] for item in listed.json()] == [story_id]

        deleted = client.delete(f"/api/stories/{story_id}")
        assert deleted.status_code == 204
        assert deleted.content == b""

        missing = client.get(f"/api/stories/{story_id}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "notFound"


def test_list_filters_and_tag_counts() -> None:
    with TestClient(create_app()) as client:
        client.post("/api/stories", json=STORY)
        client.post(
            "/api/stories",
            json={"title": "Grew the team", "situation": "Hiring freeze lifted", "tags": ["hiring", "leadership"]},
        )

        by_query = client.get("/api/stories", params={"q": "HIRING"}).json()
        by_tag = client.get("/api/stories", params={"tag": "cloud"}).json()
        tags = client.get("/api/stories/tags").json()

    assert [item["title"] for item in by_query] == ["Grew the team"]
    assert [item["title"] for item in by_tag] == ["Led cloud migration"]
    assert tags == [
        {"tag": "leadership", "count": 2},
        {"tag": "cloud", "count": 1},
        {"tag": "hiring", "count": 1},
    ]


def test_validation_failure_lists_each_field() -> None:
    with TestClient(create_app()) as client:
        response = client.post("/api/stories", json={"title": "  ", "situation": "x" * 10001})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validationFailed"
    assert [error["field"] for error in body["errors"]] == ["title", "situation"]
    assert [error["code"] for error in body["errors"]] == ["titleRequired", "fieldTooLong"]


def test_malformed_and_unknown_ids_are_not_found() -> None:
    with TestClient(create_app()) as client:
        assert client.get("/api/stories/not-a-uuid").status_code == 404
        assert client.put("/api/stories/not-a-uuid", json={"title": "x"}).status_code == 404
        assert client.delete("/api/stories/0190f0e8-0000-7000-8000-000000000000").status_code == 404


def test_stories_do_not_survive_restart() -> None:
    app = create_app()
    with TestClient(app) as client:
        client.post("/api/stories", json=STORY)
    with TestClient(app) as client:
        assert client.get("/api/stories").json() == []


def test_clarify_then_generate() -> None:
    with TestClient(create_app()) as client:
        clarify = client.post(
            "/api/conversation/clarify",
            json={"userMessage": "I led our cloud migration. It was urgent."},
        )
        assert clarify.status_code == 200
        conversation = clarify.json()["conversation"]
        assert conversation["currentStep"] == "clarification"
        assert [message["role"] for message in conversation["messages"]] == ["user", "assistant"]

        answer = client.post(
            "/api/conversation/clarify",
            json={"conversation": conversation, "userMessage": "I wrote the runbook and cut over in one night."},
        )
        conversation = answer.json()["conversation"]
        assert conversation["currentStep"] == "refinement"

        generated = client.post("/api/conversation/generate", json={"conversation": conversation})

    assert generated.status_code == 200
    body = generated.json()
    assert body["story"]["title"] == "I led our cloud migration"
    assert body["story"]["action"] == "I wrote the runbook and cut over in one night."
    assert "task" not in body["story"]
    assert body["suggestions"] == ["Add specific metrics", "Include team size"]
    assert body["conversation"]["currentStep"] == "generation"


def test_clarify_blank_message_is_bad_request() -> None:
    with TestClient(create_app()) as client:
        response = client.post("/api/conversation/clarify", json={"userMessage": " "})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "userMessage"


def test_clarify_overlong_message_is_bad_request() -> None:
    with TestClient(create_app()) as client:
        response = client.post("/api/conversation/clarify", json={"userMessage": "x" * 10001})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validationFailed"
    assert [(error["code"], error["field"]) for error in body["errors"]] == [("fieldTooLong", "userMessage")]


def test_clarify_after_generation_is_conflict() -> None:
    snapshot = {"messages": [], "currentStep": "generation"}
    with TestClient(create_app()) as client:
        response = client.post("/api/conversation/clarify", json={"conversation": snapshot, "userMessage": "more"})

    assert response.status_code == 409
    assert response.json()["error"] == "workflowConflict"


def test_assistant_errors_map_to_status_codes() -> None:
    cases = [
        (ConversationError.ai_service_unavailable(), 503, "AI service unavailable"),
        (ConversationError.rate_limited(), 429, "Rate limited"),
        (ConversationError.network_error("reset"), 502, "Network error: reset"),
    ]
    for error, status, message in cases:
        with TestClient(create_app(assistant=_FailingAssistant(error))) as client:
            response = client.post("/api/conversation/clarify", json={"userMessage": "Hello"})

        assert response.status_code == status
        assert response.json()["message"] == message


def test_requests_are_logged_with_request_id() -> None:
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        with TestClient(create_app(AppConfigRoot())) as client:
            client.get("/health", headers={"X-Request-ID": "req-42"})
    finally:
        logger.remove(sink_id)

    request_logs = [record for record in records if "GET /health" in record["message"]]
    assert request_logs
    assert request_logs[0]["extra"]["request_id"] == "req-42"
    assert request_logs[0]["extra"]["route"] == "/health"


def test_story_errors_map_to_status_codes() -> None:
    app = create_app()

    @app.get("/boom/{kind}")
    async def boom(kind: str):
        if kind == "db":
            raise DatabaseError("disk full")
        raise Unauthorized()

    with TestClient(app) as client:
        db = client.get("/boom/db")
        auth = client.get("/boom/auth")

    assert db.status_code == 500
    assert db.json() == {"error": "databaseError", "message": "Database error: disk full"}
    assert auth.status_code == 401
    assert auth.json()["error"] == "unauthorized"
