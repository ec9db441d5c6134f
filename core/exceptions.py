"""
Exception Definitions - Custom exceptions for the Student Job Assistant
======================================================================

This module defines the custom exceptions used around the assistant.
The intent matcher itself never raises; these cover configuration,
rule tables, chat sessions and the hosted language model.
"""


class AssistantError(Exception):
    """
    Base exception for all assistant errors.

    All custom exceptions in this application inherit from this base class,
    allowing for easy catching of all application-specific errors.

    Attributes:
        message (str): Human-readable error description
        details (dict): Additional error details for debugging
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message with details if present."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(AssistantError):
    """
    Configuration-related errors.

    Raised when there are issues with:
    - Invalid configuration values
    - Configuration parsing errors
    - Unknown LLM providers
    """
    pass


class RuleError(AssistantError):
    """
    Rule table errors.

    Raised when a custom rules file cannot be read or does not
    describe a valid rule table (missing fallbacks, empty triggers,
    duplicate rule names).
    """
    pass


class LLMError(AssistantError):
    """
    LLM provider errors.

    Raised when there are issues with:
    - API connection failures
    - Authentication errors
    - Invalid responses
    - Timeout errors
    """
    pass


class ChatError(AssistantError):
    """Chat session errors, such as submitting a blank message."""
    pass


class SessionBusyError(ChatError):
    """Raised when a message is submitted while a reply is still pending."""
    pass


class InterviewPrepError(AssistantError):
    """
    Interview preparation request errors.

    Raised for unknown actions or when a required field
    (job title, company, question, response) is missing.
    """
    pass
