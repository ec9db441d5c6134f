"""
OpenRouter Provider - LLM provider for OpenRouter API
=====================================================

OpenRouter is a gateway to models from many vendors behind a single
OpenAI-compatible endpoint. It asks callers to identify themselves
with the HTTP-Referer and X-Title headers.

Reference: https://openrouter.ai/docs
"""

from typing import Dict

from .openai import OpenAIProvider


class OpenRouterProvider(OpenAIProvider):
    """LLM provider for the OpenRouter API."""

    PROVIDER_NAME = "openrouter"
    API_BASE = "https://openrouter.ai/api/v1"
    DEFAULT_MODELS = ["openai/gpt-4o-mini", "meta-llama/llama-3.3-70b-instruct:free"]

    def _build_headers(self) -> Dict[str, str]:
        headers = super()._build_headers()
        headers["HTTP-Referer"] = "https://github.com/student-job-assistant"
        headers["X-Title"] = "Student Job Assistant"
        return headers
