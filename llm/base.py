"""
Base LLM Provider - Abstract base class for LLM providers
=========================================================

This module defines the interface every chat-completion provider
implements, so interview preparation does not depend on one vendor.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any


@dataclass
class LLMConfig:
    """
    Configuration for an LLM provider instance.

    Attributes:
        model (str): Model identifier to use (empty = provider default)
        api_key (str): API key for authentication
        api_base (str): Base URL for API requests (empty = provider default)
        temperature (float): Sampling temperature (0-2)
        max_tokens (int): Maximum tokens in response
        top_p (float): Top-p sampling parameter
        timeout (int): Request timeout in seconds
    """
    model: str = ""
    api_key: str = ""
    api_base: str = ""
    temperature: float = 0.7
    max_tokens: int = 1500
    top_p: float = 1.0
    timeout: int = 30

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid
        """
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be between 0 and 2, got {self.temperature}")

        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

        if not 0 < self.top_p <= 1:
            raise ValueError(f"top_p must be between 0 and 1, got {self.top_p}")

        if self.timeout < 1:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass
class LLMResponse:
    """
    Response from an LLM provider.

    Attributes:
        content (str): Generated text content
        model (str): Model that generated the response
        provider (str): Provider name
        tokens_used (int): Total tokens used (prompt + completion)
        latency_ms (int): Response latency in milliseconds
        finish_reason (str): Reason for completion
        timestamp (datetime): When the response was generated
    """
    content: str
    model: str
    provider: str
    tokens_used: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: int = 0
    finish_reason: str = "stop"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def was_truncated(self) -> bool:
        """Check if response was truncated due to length."""
        return self.finish_reason == "length"


@dataclass
class Message:
    """
    Chat message in the OpenAI chat format.

    Attributes:
        role (str): system, user, or assistant
        content (str): Message content
    """
    role: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses must implement:
    - chat(): Generate a reply to a conversation
    - is_available(): Check if provider is reachable
    - get_models(): List available models
    """

    PROVIDER_NAME = "base"

    def __init__(self, config: LLMConfig):
        self.config = config
        self.config.validate()

    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate response from a conversation.

        Args:
            messages: List of conversation messages
            temperature: Override config temperature
            max_tokens: Override config max_tokens

        Returns:
            LLMResponse with generated text and metadata

        Raises:
            LLMError: If the request fails
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""

    @abstractmethod
    def get_models(self) -> List[str]:
        """Get list of available models."""

    def generate(self, prompt: str, **kwargs) -> LLMResponse:
        """Generate text from a single user prompt."""
        return self.chat([Message(role="user", content=prompt)], **kwargs)

    async def chat_async(self, messages: List[Message], **kwargs) -> LLMResponse:
        """Run chat() in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.chat(messages, **kwargs))

    def _get_generation_params(
        self,
        temperature: Optional[float],
        max_tokens: Optional[int]
    ) -> Dict[str, Any]:
        """Combine config defaults with per-call overrides."""
        return {
            "temperature": temperature if temperature is not None else self.config.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
            "top_p": self.config.top_p,
        }

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
