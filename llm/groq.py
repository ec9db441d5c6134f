"""
Groq Provider - LLM provider for Groq API
=========================================

Groq serves open models behind an OpenAI-compatible endpoint, so the
provider only changes the base URL and the model list.

Reference: https://console.groq.com/docs
"""

from .openai import OpenAIProvider


class GroqProvider(OpenAIProvider):
    """LLM provider for Groq's OpenAI-compatible API."""

    PROVIDER_NAME = "groq"
    API_BASE = "https://api.groq.com/openai/v1"
    DEFAULT_MODELS = ["llama-3.3-70b-versatile", "llama-3.1-8b-instant"]
