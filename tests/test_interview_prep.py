"""
Test Interview Prep Module
==========================

Unit tests for prompt building, reply parsing, the interview prep
service and the OpenAI-compatible providers.
"""

import asyncio
import json
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

from core.config import Config
from core.exceptions import InterviewPrepError, LLMError, ConfigError
from llm.base import BaseLLMProvider, LLMConfig, LLMResponse, Message
from llm.factory import LLMFactory, create_llm_provider
from llm.groq import GroqProvider
from llm.openai import OpenAIProvider
from llm.openrouter import OpenRouterProvider
from services.interview_prep import (
    InterviewPrepRequest,
    InterviewPrepService,
    build_prompts,
    parse_questions,
    parse_analysis,
    ACTIONS,
)


class FakeProvider(BaseLLMProvider):
    """Provider returning a canned reply and recording the messages."""

    PROVIDER_NAME = "fake"

    def __init__(self, content: str = "", finish_reason: str = "stop"):
        super().__init__(LLMConfig(api_key="test"))
        self.content = content
        self.finish_reason = finish_reason
        self.calls = []

    def chat(self, messages, temperature=None, max_tokens=None, **kwargs):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        return LLMResponse(
            content=self.content,
            model="fake-model",
            provider=self.PROVIDER_NAME,
            finish_reason=self.finish_reason,
        )

    def is_available(self):
        return True

    def get_models(self):
        return ["fake-model"]


def completion(content: str, finish_reason: str = "stop") -> dict:
    return {
        "model": "gpt-4o-mini",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


class TestBuildPrompts:
    """Tests for prompt building."""

    def test_generate_questions(self):
        """Test question prompts carry the job details."""
        system, user = build_prompts(InterviewPrepRequest(
            action="generate_questions",
            job_title="Data Analyst Intern",
            company="Acme",
            question_type="behavioral",
        ))

        assert "interview coach" in system
        assert "Data Analyst Intern" in user
        assert "Acme" in user
        assert "behavioral" in user

    def test_missing_job_title(self):
        """Test questions need a job title."""
        with pytest.raises(InterviewPrepError) as exc_info:
            build_prompts(InterviewPrepRequest(action="generate_questions"))
        assert "job_title" in exc_info.value.message

    def test_analyze_requires_question_and_response(self):
        """Test analysis needs both the question and the answer."""
        with pytest.raises(InterviewPrepError) as exc_info:
            build_prompts(InterviewPrepRequest(action="analyze_response", question="Why us?"))
        assert "response" in exc_info.value.message

    def test_company_insights_requires_company(self):
        """Test company insights need a company."""
        with pytest.raises(InterviewPrepError):
            build_prompts(InterviewPrepRequest(action="company_insights", job_title="Intern"))

    def test_body_language_needs_nothing(self):
        """Test body language tips work without any details."""
        system, user = build_prompts(InterviewPrepRequest(action="body_language_tips"))
        assert "body language" in system
        assert "general" in user

    def test_website_doubt(self):
        """Test website questions are passed through."""
        _, user = build_prompts(InterviewPrepRequest(
            action="website_doubt", user_question="How do I save a job?"
        ))
        assert "How do I save a job?" in user

    def test_unknown_action(self):
        """Test unknown actions are rejected."""
        with pytest.raises(InterviewPrepError):
            build_prompts(InterviewPrepRequest(action="write_cover_letter"))

    def test_every_action_known(self):
        """Test every listed action builds prompts with full details."""
        request = dict(
            job_title="Intern", company="Acme", question="Q?",
            response="A.", user_question="Where?"
        )
        for action in ACTIONS:
            system, user = build_prompts(InterviewPrepRequest(action=action, **request))
            assert system and user


class TestParsing:
    """Tests for parsing model replies."""

    def test_questions_json_object(self):
        """Test the documented JSON object shape."""
        text = json.dumps({"questions": [
            {"question": "Tell me about yourself.", "category": "behavioral", "difficulty": "easy"},
            {"question": "What is SQL?", "category": "technical", "estimatedTime": 5},
        ]})

        questions = parse_questions(text)

        assert [q.question for q in questions] == ["Tell me about yourself.", "What is SQL?"]
        assert questions[0].category == "behavioral"
        assert questions[0].difficulty == "easy"
        assert questions[1].estimated_time == 5
        assert questions[1].difficulty == "medium"

    def test_question_string_hint(self):
        """Test a single hint string stays one hint."""
        text = json.dumps([{"question": "Why us?", "hints": "Mention the mission"}])

        questions = parse_questions(text)

        assert questions[0].hints == ["Mention the mission"]

    def test_questions_fenced_list(self):
        """Test a JSON list inside a markdown fence."""
        text = "Here you go:\n```json\n[\"Why this role?\", \"Biggest weakness?\"]\n```"
        questions = parse_questions(text)
        assert [q.question for q in questions] == ["Why this role?", "Biggest weakness?"]

    def test_questions_plain_lines(self):
        """Test numbered plain-text questions."""
        text = "1. Why this role?\n\n2) What motivates you?\n3 Describe a challenge."
        questions = parse_questions(text)
        assert [q.question for q in questions] == [
            "Why this role?",
            "What motivates you?",
            "Describe a challenge.",
        ]
        assert all(q.category == "general" for q in questions)

    def test_analysis_json(self):
        """Test a JSON analysis."""
        text = json.dumps({
            "contentQuality": 8,
            "confidenceLevel": "6",
            "sentiment": "neutral",
            "strengths": ["Clear structure"],
            "improvements": "Add numbers",
            "suggestedResponse": "Use STAR.",
            "score": 9,
        })

        analysis = parse_analysis(text)

        assert analysis.content_quality == 8
        assert analysis.confidence_level == 6
        assert analysis.sentiment == "neutral"
        assert analysis.strengths == ["Clear structure"]
        assert analysis.improvements == ["Add numbers"]
        assert analysis.suggested_response == "Use STAR."
        assert analysis.score == 9

    def test_analysis_score_defaults_to_content_quality(self):
        """Test the overall score falls back to content quality."""
        analysis = parse_analysis('{"contentQuality": 4}')
        assert analysis.score == 4
        assert analysis.confidence_level == 7

    def test_analysis_plain_text(self):
        """Test free text becomes the only improvement."""
        analysis = parse_analysis("Be more specific about your results.")

        assert analysis.content_quality == 7
        assert analysis.score == 7
        assert analysis.improvements == ["Be more specific about your results."]


class TestInterviewPrepService:
    """Tests for InterviewPrepService."""

    def test_generate_questions(self):
        """Test questions are generated and parsed."""
        provider = FakeProvider('{"questions": ["Why Acme?"]}')
        service = InterviewPrepService(provider)

        result = service.run(InterviewPrepRequest(
            action="generate_questions", job_title="Intern", company="Acme"
        ))

        assert result.action == "generate_questions"
        assert result.data[0].question == "Why Acme?"
        assert result.model == "fake-model"

        call = provider.calls[0]
        assert [m.role for m in call["messages"]] == ["system", "user"]
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 1500

    def test_text_actions_have_no_data(self):
        """Test text-only actions return the raw reply."""
        service = InterviewPrepService(FakeProvider("Stand tall."))
        result = service.run(InterviewPrepRequest(action="body_language_tips"))

        assert result.response == "Stand tall."
        assert result.data is None
        assert result.to_dict()["data"] is None

    def test_invalid_request_skips_provider(self):
        """Test invalid requests never reach the provider."""
        provider = FakeProvider("unused")
        service = InterviewPrepService(provider)

        with pytest.raises(InterviewPrepError):
            service.run(InterviewPrepRequest(action="company_insights"))
        assert provider.calls == []

    def test_run_async(self):
        """Test the async variant."""
        service = InterviewPrepService(FakeProvider('{"contentQuality": 9}'))

        result = asyncio.run(service.run_async(InterviewPrepRequest(
            action="analyze_response", question="Why us?", response="Because."
        )))

        assert result.data.content_quality == 9
        assert result.to_dict()["data"]["score"] == 9


class TestOpenAIProvider:
    """Tests for the OpenAI-compatible HTTP providers."""

    def make_provider(self, handler, cls=OpenAIProvider):
        return cls(
            LLMConfig(api_key="sk-test", model="gpt-4o-mini"),
            transport=httpx.MockTransport(handler),
        )

    def test_requires_api_key(self):
        """Test a missing API key raises LLMError."""
        with pytest.raises(LLMError):
            OpenAIProvider(LLMConfig())

    def test_chat(self):
        """Test a successful completion."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("Hello!", "length"))

        provider = self.make_provider(handler)
        response = provider.chat([Message("user", "Hi")], temperature=0.2)

        assert seen["url"] == "https://api.openai.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["messages"] == [{"role": "user", "content": "Hi"}]
        assert seen["body"]["temperature"] == 0.2
        assert seen["body"]["max_tokens"] == 1500
        assert response.content == "Hello!"
        assert response.tokens_used == 15
        assert response.was_truncated

    def test_http_error(self):
        """Test API errors become LLMError with the status code."""
        def handler(request):
            return httpx.Response(401, json={"error": {"message": "bad key"}})

        provider = self.make_provider(handler)
        with pytest.raises(LLMError) as exc_info:
            provider.generate("Hi")

        assert "bad key" in exc_info.value.message
        assert exc_info.value.details["status"] == 401

    def test_http_error_string_body(self):
        """Test gateways that send the error as a plain string."""
        def handler(request):
            return httpx.Response(429, json={"error": "rate limited"})

        provider = self.make_provider(handler)
        with pytest.raises(LLMError) as exc_info:
            provider.chat([Message("user", "Hi")])

        assert "rate limited" in exc_info.value.message
        assert exc_info.value.details["status"] == 429

    def test_non_object_body(self):
        """Test a JSON body that is not an object raises LLMError."""
        provider = self.make_provider(lambda request: httpx.Response(200, json=["unexpected"]))
        with pytest.raises(LLMError):
            provider.generate("Hi")

    def test_connection_error(self):
        """Test transport failures become LLMError."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = self.make_provider(handler)
        with pytest.raises(LLMError):
            provider.generate("Hi")
        assert provider.is_available() is False

    def test_no_choices(self):
        """Test an empty completion raises LLMError."""
        provider = self.make_provider(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(LLMError):
            provider.generate("Hi")

    def test_get_models_fallback(self):
        """Test the default model list is used when listing fails."""
        provider = self.make_provider(lambda request: httpx.Response(500, text="oops"))
        assert provider.get_models() == OpenAIProvider.DEFAULT_MODELS

    def test_groq_base_url(self):
        """Test Groq uses its own endpoint."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json=completion("ok"))

        self.make_provider(handler, GroqProvider).generate("Hi")
        assert seen["url"].startswith("https://api.groq.com/")

    def test_provider_default_model(self):
        """Test each provider falls back to its own model when none is set."""
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("ok"))

        provider = GroqProvider(LLMConfig(api_key="gsk-test"), transport=httpx.MockTransport(handler))
        provider.generate("Hi")

        assert provider.config.model == GroqProvider.DEFAULT_MODELS[0]
        assert seen["body"]["model"] == "llama-3.3-70b-versatile"

        openrouter = OpenRouterProvider(LLMConfig(api_key="or-test"))
        assert openrouter.config.model == OpenRouterProvider.DEFAULT_MODELS[0]

    def test_openrouter_headers(self):
        """Test OpenRouter identification headers."""
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            return httpx.Response(200, json=completion("ok"))

        self.make_provider(handler, OpenRouterProvider).generate("Hi")
        assert seen["headers"]["X-Title"] == "Student Job Assistant"
        assert "HTTP-Referer" in seen["headers"]


class TestLLMFactory:
    """Tests for LLMFactory."""

    def test_unknown_provider(self):
        """Test unknown providers raise ConfigError."""
        with pytest.raises(ConfigError):
            LLMFactory.create("mistral", LLMConfig(api_key="x"))

    def test_invalid_settings(self):
        """Test invalid generation settings raise LLMError."""
        with pytest.raises(LLMError):
            LLMFactory.create("openai", LLMConfig(api_key="x", temperature=5))

    def test_create_from_config(self):
        """Test providers are built from the application config."""
        config = Config()
        config.llm.provider = "groq"
        config.llm.api_key = "gsk-test"
        config.llm.model = "llama-3.3-70b-versatile"

        provider = create_llm_provider(config=config)

        assert isinstance(provider, GroqProvider)
        assert provider.config.model == "llama-3.3-70b-versatile"

    def test_list_providers(self):
        """Test the provider listing."""
        assert set(LLMFactory.list_providers()) == {"openai", "groq", "openrouter"}
