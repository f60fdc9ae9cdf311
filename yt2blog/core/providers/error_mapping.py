"""Shared helpers for provider exception mapping."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import httpx

from yt2blog.core.providers.errors import (
    ProviderApiError,
    ProviderAuthenticationError,
    ProviderBadRequestError,
    ProviderConnectionError,
    ProviderContentPolicyViolationError,
    ProviderContextLengthExceededError,
    ProviderInsufficientBalanceError,
    ProviderMappedError,
    ProviderModelNotFoundError,
    ProviderPermissionDeniedError,
    ProviderRateLimitError,
    ProviderServiceUnavailableError,
    ProviderTimeoutError,
)

_TIMEOUT_HINTS = ("timed out", "timeout")
_CONTEXT_HINTS = (
    "context length",
    "context_length",
    "maximum context",
    "too many tokens",
    "prompt is too long",
    "input is too long",
)
_POLICY_HINTS = ("content policy", "content_policy", "content_filter", "safety")
_OVERLOADED_STATUSES = (503, 529)


def _label(text: str, status: Optional[int]) -> str:
    """``"API error (500)"``, or just ``"API error"`` when the status is unknown."""
    return f"{text} ({status})" if status is not None else text


def is_timeout_message(message: str) -> bool:
    """Return True when an error message describes timeout-like behavior."""
    lowered = message.lower()
    return any(hint in lowered for hint in _TIMEOUT_HINTS)


def map_connection_error(message: str) -> ProviderMappedError:
    """Map a provider connection error message to a normalized error."""
    if is_timeout_message(message):
        return ProviderTimeoutError(f"Network request timed out: {message}")
    return ProviderConnectionError(f"Connection error: {message}")


def map_permission_denied_error(message: str, status: Optional[int] = 403) -> ProviderMappedError:
    """Map permission-denied messages with balance-aware specialization."""
    lowered = message.lower()
    if "balance" in lowered or "insufficient" in lowered:
        return ProviderInsufficientBalanceError(
            f"{_label('Insufficient balance', status)}: {message}", status_code=status
        )
    return ProviderPermissionDeniedError(
        f"{_label('Permission denied', status)}: {message}", status_code=status
    )


def map_bad_request_error(message: str, status: Optional[int] = 400) -> ProviderMappedError:
    """Map invalid request messages including context/content policy variants."""
    lowered = message.lower()
    if any(hint in lowered for hint in _CONTEXT_HINTS):
        return ProviderContextLengthExceededError(
            f"{_label('Context length exceeded', status)}: {message}", status_code=status
        )
    if any(hint in lowered for hint in _POLICY_HINTS):
        return ProviderContentPolicyViolationError(
            f"Content blocked by policy: {message}", status_code=status
        )
    return ProviderBadRequestError(
        f"{_label('Invalid request', status)}: {message}", status_code=status
    )


def map_status_error(status: Optional[int], message: str) -> ProviderMappedError:
    """Map an HTTP status plus vendor text to a normalized error.

    The status is kept in the message so downstream classification still sees it.
    """
    lowered = message.lower()
    if status == 401:
        return ProviderAuthenticationError(f"Authentication failed (401): {message}")
    if status == 403:
        return map_permission_denied_error(message, status)
    if status == 404:
        return ProviderModelNotFoundError(f"Model not found (404): {message}")
    if status == 429:
        return ProviderRateLimitError(f"Rate limit exceeded (429): {message}")
    if status in _OVERLOADED_STATUSES or "overloaded" in lowered:
        return ProviderServiceUnavailableError(
            f"{_label('Service overloaded', status)}: {message}", status_code=status
        )
    if status in (400, 422):
        return map_bad_request_error(message, status)
    return ProviderApiError(f"{_label('API error', status)}: {message}", status_code=status)


def _response_text(response: httpx.Response) -> str:
    try:
        return response.text
    except httpx.ResponseNotRead:
        return response.reason_phrase or ""


def map_http_error(exc: Exception) -> Exception:
    """Map ``httpx`` transport and status errors for raw HTTP adapters."""
    if isinstance(exc, (ProviderMappedError, asyncio.CancelledError)):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return map_status_error(exc.response.status_code, _response_text(exc.response))
    if isinstance(exc, httpx.TimeoutException):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    if isinstance(exc, httpx.TransportError):
        return map_connection_error(str(exc) or type(exc).__name__)
    if isinstance(exc, asyncio.TimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    return map_unexpected_error(exc)


def map_unexpected_error(exc: Exception) -> ProviderMappedError:
    """Fallback for exceptions no vendor-specific mapper recognizes."""
    return ProviderApiError(f"Unexpected error ({type(exc).__name__}): {exc}")


async def run_with_exception_mapper(
    request_fn: Callable[[], Awaitable[Any]],
    mapper: Callable[[Exception], Exception],
) -> Any:
    """Execute request and transform provider exceptions via mapper."""
    try:
        return await request_fn()
    except Exception as exc:
        mapped_exc = mapper(exc)
        if mapped_exc is exc:
            raise
        raise mapped_exc from exc
