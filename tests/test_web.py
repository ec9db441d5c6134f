"""
Test Web API Module
===================

Tests for the FastAPI routes using the Starlette test client.
"""

import json
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from assistant.engine import build_matcher
from assistant.faq import DEFAULT_FALLBACKS, default_rule_table
from core.config import Config
from core.exceptions import LLMError
from llm.base import BaseLLMProvider, LLMConfig, LLMResponse
from services.interview_prep import InterviewPrepService
from ui.web.app import create_app


class CannedProvider(BaseLLMProvider):
    """Provider with a fixed reply, or a fixed failure."""

    PROVIDER_NAME = "canned"

    def __init__(self, content: str = "", fail: bool = False):
        super().__init__(LLMConfig(api_key="test"))
        self.content = content
        self.fail = fail

    def chat(self, messages, temperature=None, max_tokens=None, **kwargs):
        if self.fail:
            raise LLMError("upstream unavailable")
        return LLMResponse(content=self.content, model="canned-model", provider=self.PROVIDER_NAME)

    def is_available(self):
        return not self.fail

    def get_models(self):
        return ["canned-model"]


def make_config() -> Config:
    config = Config()
    config.assistant.typing_delay_min = 0.0
    config.assistant.typing_delay_max = 0.0
    return config


def make_client(provider=None) -> TestClient:
    service = InterviewPrepService(provider) if provider else None
    app = create_app(
        config=make_config(),
        matcher=build_matcher(seed=1),
        interview_service=service,
    )
    return TestClient(app)


@pytest.fixture
def client():
    return make_client()


class TestChatPage:
    """Tests for the HTML page."""

    def test_index(self, client):
        """Test the chat page renders."""
        response = client.get("/")
        assert response.status_code == 200
        assert "Student Job Assistant" in response.text


class TestRespond:
    """Tests for stateless replies."""

    def test_matched_rule(self, client):
        """Test a matched message reports its rule."""
        response = client.post("/api/respond", json={"message": "How do I apply for this job?"})

        assert response.status_code == 200
        data = response.json()
        assert data["matched_rule"] == "application_process"
        assert data["response"] == default_rule_table().get_rule("application_process").response

    def test_fallback(self, client):
        """Test an unmatched message gets a fallback."""
        data = client.post("/api/respond", json={"message": "asdkjasdlk"}).json()

        assert data["matched_rule"] is None
        assert data["response"] in DEFAULT_FALLBACKS

    def test_missing_message(self, client):
        """Test the message field is required."""
        assert client.post("/api/respond", json={}).status_code == 422


class TestChatSessions:
    """Tests for chat session endpoints."""

    def test_conversation(self, client):
        """Test creating a session and exchanging a message."""
        created = client.post("/api/chat/sessions")
        assert created.status_code == 201
        session_id = created.json()["session_id"]
        assert len(created.json()["turns"]) == 1

        sent = client.post(
            f"/api/chat/sessions/{session_id}/messages",
            json={"message": "what's the salary for interns"}
        )
        assert sent.status_code == 200
        assert sent.json()["reply"]["speaker"] == "assistant"
        assert sent.json()["reply"]["text"] == default_rule_table().get_rule("salary").response

        transcript = client.get(f"/api/chat/sessions/{session_id}").json()
        assert [t["speaker"] for t in transcript["turns"]] == ["assistant", "user", "assistant"]
        assert transcript["pending"] is False

    def test_blank_message(self, client):
        """Test blank messages are rejected."""
        session_id = client.post("/api/chat/sessions").json()["session_id"]

        response = client.post(f"/api/chat/sessions/{session_id}/messages", json={"message": "  "})
        assert response.status_code == 400

    def test_message_while_reply_pending(self, client):
        """Test a message sent before the previous reply arrives returns 409."""
        session_id = client.post("/api/chat/sessions").json()["session_id"]
        session = client.app.state.sessions.get(session_id)
        session._pending = True

        response = client.post(
            f"/api/chat/sessions/{session_id}/messages",
            json={"message": "resume"}
        )
        assert response.status_code == 409
        assert len(session.turns) == 1

    def test_unknown_session(self, client):
        """Test unknown sessions return 404."""
        assert client.get("/api/chat/sessions/nope").status_code == 404
        response = client.post("/api/chat/sessions/nope/messages", json={"message": "hi"})
        assert response.status_code == 404

    def test_delete_session(self, client):
        """Test ending a session."""
        session_id = client.post("/api/chat/sessions").json()["session_id"]

        assert client.delete(f"/api/chat/sessions/{session_id}").status_code == 200
        assert client.delete(f"/api/chat/sessions/{session_id}").status_code == 404


class TestRules:
    """Tests for the rule listing."""

    def test_list_rules(self, client):
        """Test rules are listed in evaluation order."""
        data = client.get("/api/rules").json()

        assert data["rules"][0]["name"] == "application_process"
        assert len(data["rules"]) == 17
        assert data["fallbacks"] == list(DEFAULT_FALLBACKS)


class TestInterviewPrep:
    """Tests for the interview prep endpoint."""

    def test_not_configured(self, client):
        """Test the endpoint is unavailable without an LLM."""
        response = client.post("/api/interview-prep", json={"action": "body_language_tips"})
        assert response.status_code == 503

    def test_generate_questions(self):
        """Test camelCase fields and parsed questions."""
        client = make_client(CannedProvider(json.dumps({"questions": ["Why Acme?", "Why you?"]})))

        response = client.post("/api/interview-prep", json={
            "action": "generate_questions",
            "jobTitle": "Marketing Intern",
            "company": "Acme",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "generate_questions"
        assert [q["question"] for q in data["data"]] == ["Why Acme?", "Why you?"]
        assert data["model"] == "canned-model"

    def test_invalid_request(self):
        """Test missing fields return 400."""
        client = make_client(CannedProvider("unused"))

        response = client.post("/api/interview-prep", json={"action": "generate_questions"})
        assert response.status_code == 400

        response = client.post("/api/interview-prep", json={"action": "dance"})
        assert response.status_code == 400

    def test_provider_failure(self):
        """Test provider failures return 502."""
        client = make_client(CannedProvider(fail=True))

        response = client.post("/api/interview-prep", json={"action": "body_language_tips"})
        assert response.status_code == 502


class TestStatus:
    """Tests for the status endpoint."""

    def test_status(self, client):
        """Test system status."""
        data = client.get("/api/status").json()

        assert data["app_name"] == "Student Job Assistant"
        assert data["rules"] == 17
        assert data["fallbacks"] == 3
        assert data["interview_prep"]["enabled"] is False

    def test_status_counts_sessions(self, client):
        """Test open sessions are counted."""
        client.post("/api/chat/sessions")
        client.post("/api/chat/sessions")

        assert client.get("/api/status").json()["sessions"] == 2
