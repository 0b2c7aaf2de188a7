"""Error taxonomy and user-facing messages for provider calls.

Every failure an adapter can hit is mapped to an ``ErrorCategory``. The
category decides the message shown to site visitors (summary requests)
or to the site admin (API key tests).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx


class ErrorCategory(str, Enum):
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    TRANSPORT = "transport"
    INVALID_KEY = "invalid_key"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    HTTP = "http_error"
    DECODE = "decode_error"
    EMPTY_RESPONSE = "empty_response"
    PARSE = "parse_error"


INVALID_KEY_STATUSES = frozenset({401})
RATE_LIMIT_STATUSES = frozenset({429})
UNAVAILABLE_STATUSES = frozenset({500, 502, 503, 504})


class ProviderError(Exception):
    """A vendor call that did not produce a usable response.

    Attributes:
        category: Error category
        status_code: HTTP status, None for transport and decode failures
        detail: Vendor-supplied error message or transport description
    """

    def __init__(
        self,
        category: ErrorCategory,
        detail: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(detail or category.value)
        self.category = category
        self.detail = detail
        self.status_code = status_code


def classify_status(status_code: int) -> ErrorCategory:
    """Map a non-2xx HTTP status to an error category."""
    if status_code in INVALID_KEY_STATUSES:
        return ErrorCategory.INVALID_KEY
    if status_code in RATE_LIMIT_STATUSES:
        return ErrorCategory.RATE_LIMITED
    if status_code in UNAVAILABLE_STATUSES:
        return ErrorCategory.UNAVAILABLE
    return ErrorCategory.HTTP


def classify_transport_error(exc: httpx.HTTPError) -> ErrorCategory:
    """Map an httpx transport exception to an error category."""
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorCategory.CONNECTION
    return ErrorCategory.TRANSPORT


def extract_error_message(response: httpx.Response) -> str | None:
    """Pull the vendor error message out of an error response body.

    OpenAI, Anthropic and Google all nest it under ``error.message``.
    """
    try:
        data: Any = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None


def summary_error_message(error: ProviderError, provider_name: str) -> str:
    """User-facing message for a failed summary request."""
    category = error.category
    if category == ErrorCategory.CONFIGURATION and error.detail:
        return error.detail
    if category == ErrorCategory.TIMEOUT:
        return "Request timed out. The AI service may be slow right now. Please try again."
    if category == ErrorCategory.CONNECTION:
        return "Could not connect to AI service. Please check your internet connection."
    if category == ErrorCategory.INVALID_KEY:
        return "Invalid API key. Please check your plugin settings."
    if category == ErrorCategory.RATE_LIMITED:
        return f"{provider_name} rate limit exceeded. Please try again in a few moments."
    if category == ErrorCategory.UNAVAILABLE:
        return f"{provider_name} service temporarily unavailable. Please try again later."
    if category == ErrorCategory.HTTP:
        if error.detail:
            return error.detail
        return f"AI service error: HTTP {error.status_code}"
    if category == ErrorCategory.DECODE:
        return "AI service error: could not decode the API response."
    if error.detail:
        return f"AI service error: {error.detail}"
    return "AI service error: unknown failure."


def key_test_message(error: ProviderError, provider_name: str) -> str:
    """Admin-facing message for a failed API key probe."""
    category = error.category
    if category == ErrorCategory.INVALID_KEY:
        return "Invalid API key. Please check your key and try again."
    if category == ErrorCategory.RATE_LIMITED:
        return "Rate limit exceeded. Your API key works but has hit rate limits."
    if category == ErrorCategory.UNAVAILABLE:
        return (
            f"{provider_name} service temporarily unavailable "
            f"(HTTP {error.status_code}). Please try again later."
        )
    if category == ErrorCategory.TIMEOUT:
        return "Connection error: the request timed out."
    if category == ErrorCategory.CONNECTION:
        return f"Connection error: could not reach the {provider_name} API."
    if category == ErrorCategory.TRANSPORT:
        return f"Connection error: {error.detail}"
    if category == ErrorCategory.DECODE:
        return "Could not parse API response."
    if error.detail:
        return error.detail
    return f"API error (HTTP {error.status_code}). Please try again later."
