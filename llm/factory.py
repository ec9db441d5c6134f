"""
LLM Factory - Factory for creating LLM provider instances
=========================================================

This module provides a factory pattern for creating LLM provider
instances from the application configuration.
"""

from typing import Optional, Type, Dict, Any

from .base import BaseLLMProvider, LLMConfig
from .openai import OpenAIProvider
from .groq import GroqProvider
from .openrouter import OpenRouterProvider
from core.exceptions import LLMError, ConfigError
from core.logging import get_logger

logger = get_logger("llm.factory")


# Registry of available providers
PROVIDERS: Dict[str, Type[BaseLLMProvider]] = {
    "openai": OpenAIProvider,
    "groq": GroqProvider,
    "openrouter": OpenRouterProvider,
}


class LLMFactory:
    """
    Factory for creating LLM provider instances.

    Example:
        provider = LLMFactory.create_from_config(config)
        provider = LLMFactory.create("groq", llm_config)
    """

    @staticmethod
    def create(provider_name: str, config: LLMConfig, **kwargs) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_name: Name of the provider (e.g., "openai", "groq")
            config: Provider configuration
            **kwargs: Additional provider-specific arguments

        Returns:
            Configured provider instance

        Raises:
            ConfigError: If provider is not registered
            LLMError: If provider initialization fails
        """
        provider_name = provider_name.lower()

        if provider_name not in PROVIDERS:
            raise ConfigError(
                f"Unknown LLM provider: {provider_name}",
                details={"available_providers": ", ".join(PROVIDERS)}
            )

        provider_class = PROVIDERS[provider_name]

        try:
            logger.info(f"Creating {provider_name} provider")
            return provider_class(config, **kwargs)
        except LLMError:
            raise
        except ValueError as e:
            raise LLMError(
                f"Failed to create {provider_name} provider: {e}",
                details={"provider": provider_name}
            )

    @staticmethod
    def create_from_config(config, **kwargs) -> BaseLLMProvider:
        """
        Create provider from the application Config object.
        """
        llm_config = LLMConfig(
            model=config.llm.model,
            api_key=config.llm.api_key,
            api_base=config.llm.api_base,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
            top_p=config.llm.top_p,
            timeout=config.llm.timeout,
        )

        return LLMFactory.create(config.llm.provider, llm_config, **kwargs)

    @staticmethod
    def list_providers() -> Dict[str, str]:
        return {
            "openai": "OpenAI - Hosted GPT models",
            "groq": "Groq - High-performance LLM inference",
            "openrouter": "OpenRouter - Multi-provider LLM gateway",
        }


def create_llm_provider(
    provider: Optional[str] = None,
    config: Optional[Any] = None,
    **kwargs
) -> BaseLLMProvider:
    """
    Convenience function to create an LLM provider.

    Args:
        provider: Provider name (ignored if config is provided)
        config: Application config (optional)
        **kwargs: LLMConfig fields when no config is given, otherwise
            provider arguments such as transport

    Example:
        provider = create_llm_provider(config=app_config)
        provider = create_llm_provider("groq", api_key="gsk-...", model="llama-3.3-70b-versatile")
    """
    if config is not None:
        return LLMFactory.create_from_config(config, **kwargs)

    llm_config = LLMConfig(**{
        key: value for key, value in kwargs.items()
        if key in LLMConfig.__dataclass_fields__
    })
    return LLMFactory.create(provider or "openai", llm_config)
