"""
Core Module - Foundation components for the Student Job Assistant
=================================================================

This module provides the foundational components including:
- Configuration management
- Logging setup
- Exception handling
"""

from .config import Config, load_config, save_config
from .exceptions import (
    AssistantError,
    ConfigError,
    RuleError,
    LLMError,
    ChatError,
    SessionBusyError,
    InterviewPrepError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "AssistantError",
    "ConfigError",
    "RuleError",
    "LLMError",
    "ChatError",
    "SessionBusyError",
    "InterviewPrepError",
    "setup_logging",
    "get_logger",
]
