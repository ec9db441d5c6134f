"""
LLM Module - Abstraction layer for LLM providers
=================================================

This module provides a unified interface to hosted chat-completion
APIs used for interview preparation:
- OpenAI
- Groq
- OpenRouter
"""

from .base import BaseLLMProvider, LLMResponse, LLMConfig, Message
from .openai import OpenAIProvider
from .groq import GroqProvider
from .openrouter import OpenRouterProvider
from .factory import LLMFactory, create_llm_provider

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "LLMConfig",
    "Message",
    "OpenAIProvider",
    "GroqProvider",
    "OpenRouterProvider",
    "LLMFactory",
    "create_llm_provider",
]
