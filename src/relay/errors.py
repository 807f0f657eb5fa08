"""Error taxonomy for the chat relay.

Every failure the endpoint reports is a RelayError carrying the HTTP
status and the user-facing message. Upstream SDK exceptions are mapped
by type in classify_upstream_error.
"""

import anthropic
from fastapi import status

MISSING_API_KEY_MESSAGE = (
    "Missing API key: Please set ANTHROPIC_API_KEY in your environment "
    "variables or .env file."
)


class RelayError(Exception):
    """Base error rendered as a JSON error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Failed to get AI response"

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ConfigurationError(RelayError):
    default_message = MISSING_API_KEY_MESSAGE

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        super().__init__(message, details or "ConfigurationError")


class EmptyConversationError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No valid messages to send"


class InvalidRequestError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class UpstreamAuthError(RelayError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed. Please check your Anthropic API key."


class UpstreamConnectionError(RelayError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = (
        "Connection to Anthropic API failed. Please check your internet "
        "connection and API key."
    )


class UpstreamRateLimitError(RelayError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again in a moment."


class UnclassifiedUpstreamError(RelayError):
    pass


def classify_upstream_error(error: Exception) -> RelayError:
    """Map an exception raised by the upstream SDK to a RelayError.

    Args:
        error: Exception raised while opening the upstream stream.

    Returns:
        The matching RelayError with the upstream class name as details.
    """
    if isinstance(error, RelayError):
        return error

    name = type(error).__name__

    if isinstance(error, anthropic.RateLimitError):
        return UpstreamRateLimitError(details=name)
    if isinstance(error, anthropic.AuthenticationError):
        return UpstreamAuthError(details=name)
    # APITimeoutError is a subclass of APIConnectionError
    if isinstance(error, anthropic.APIConnectionError):
        return UpstreamConnectionError(details=name)

    return UnclassifiedUpstreamError(str(error) or None, details=name)
