"""
OpenAI Provider - Chat completions over the OpenAI wire format
==============================================================

This module implements the provider interface for the OpenAI
chat-completions API. Groq and OpenRouter expose the same endpoint
shape and reuse this class with a different base URL.

Reference: https://platform.openai.com/docs/api-reference/chat
"""

import time
from typing import Optional, List, Dict, Any

import httpx

from .base import BaseLLMProvider, LLMConfig, LLMResponse, Message
from core.exceptions import LLMError
from core.logging import get_logger

logger = get_logger("llm.openai")


class OpenAIProvider(BaseLLMProvider):
    """
    LLM provider for OpenAI-compatible chat-completion APIs.

    Example:
        config = LLMConfig(model="gpt-4o-mini", api_key="sk-...")
        provider = OpenAIProvider(config)

        response = provider.generate("Give me one interview question.")
        print(response.content)
    """

    PROVIDER_NAME = "openai"
    API_BASE = "https://api.openai.com/v1"
    DEFAULT_MODELS = ["gpt-4o-mini", "gpt-4o"]

    def __init__(self, config: LLMConfig, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the provider.

        Args:
            config: Provider configuration
            transport: Optional httpx transport (used by tests)

        Raises:
            LLMError: If API key is not provided
        """
        super().__init__(config)

        self.api_base = (config.api_base or self.API_BASE).rstrip("/")

        if not config.model:
            config.model = self.DEFAULT_MODELS[0]

        if not config.api_key:
            raise LLMError(
                f"{self.PROVIDER_NAME} API key not configured",
                details={"hint": f"Set JOB_ASSISTANT_LLM_API_KEY or {self.PROVIDER_NAME.upper()}_API_KEY"}
            )

        self.api_key = config.api_key
        self._transport = transport
        self._client: Optional[httpx.Client] = None

        logger.info(
            f"Initialized {self.PROVIDER_NAME} provider",
            extra={"model": config.model, "api_base": self.api_base}
        )

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.api_base,
                headers=self._build_headers(),
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """
        Make an HTTP request and decode the JSON body.

        Raises:
            LLMError: If the request fails or the body is not JSON
        """
        url = f"{self.api_base}{endpoint}"

        try:
            response = self._get_client().request(method, endpoint, **kwargs)
        except httpx.TimeoutException as e:
            raise LLMError(f"{self.PROVIDER_NAME} request timed out: {e}", {"url": url})
        except httpx.HTTPError as e:
            raise LLMError(f"Failed to connect to {self.PROVIDER_NAME}: {e}", {"url": url})

        if response.is_error:
            raise LLMError(
                f"{self.PROVIDER_NAME} API error: {self._error_message(response)}",
                details={"status": response.status_code, "url": url}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(f"Failed to parse {self.PROVIDER_NAME} response: {e}", {"url": url})

        if not isinstance(data, dict):
            raise LLMError(f"Unexpected {self.PROVIDER_NAME} response body", {"url": url})
        return data

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the error text; gateways send either an object or a string."""
        try:
            body = response.json()
        except ValueError:
            return response.text

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        return response.text

    def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        start_time = time.time()
        params = self._get_generation_params(temperature, max_tokens)

        request_data = {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
            **params,
        }
        if "response_format" in kwargs:
            request_data["response_format"] = kwargs["response_format"]

        response_data = self._request("POST", "/chat/completions", json=request_data)

        choices = response_data.get("choices") or []
        if not choices:
            raise LLMError(f"No choices in {self.PROVIDER_NAME} response")

        choice = choices[0]
        content = (choice.get("message") or {}).get("content") or ""

        usage = response_data.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens", 0)
        completion_tokens = usage.get("completion_tokens", 0)

        result = LLMResponse(
            content=content,
            model=response_data.get("model", self.config.model),
            provider=self.PROVIDER_NAME,
            tokens_used=usage.get("total_tokens", prompt_tokens + completion_tokens),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=self._measure_latency(start_time),
            finish_reason=choice.get("finish_reason") or "stop",
        )

        logger.debug(
            f"Completion finished in {result.latency_ms}ms",
            extra={"tokens": result.tokens_used}
        )
        return result

    def is_available(self) -> bool:
        try:
            self._request("GET", "/models")
            return True
        except LLMError:
            return False

    def get_models(self) -> List[str]:
        try:
            data = self._request("GET", "/models")
        except LLMError as e:
            logger.warning(f"Could not list models: {e}")
            return list(self.DEFAULT_MODELS)
        return [m["id"] for m in data.get("data", []) if "id" in m]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
