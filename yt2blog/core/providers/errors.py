"""Shared provider error types for cross-vendor normalization.

Messages keep the HTTP status and the vendor's own text so the error
translator can still classify them after normalization.
"""

from __future__ import annotations

from typing import Optional


class ProviderMappedError(Exception):
    """Normalized provider exception with a stable error code."""

    def __init__(
        self,
        error_code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code
        self.provider = provider


class UnsupportedProviderError(ProviderMappedError):
    """Provider id is not registered."""

    def __init__(self, provider_id: str) -> None:
        super().__init__("unsupported_provider", f"Unsupported provider: {provider_id}")
        self.provider_id = provider_id


class ProviderConfigurationError(ProviderMappedError):
    """Adapter cannot be built (e.g. missing API key)."""

    def __init__(self, message: str) -> None:
        super().__init__("configuration_error", message)


class ProviderTimeoutError(ProviderMappedError):
    """Timeout error normalized across providers."""

    def __init__(self, message: str) -> None:
        super().__init__("timeout", message)


class ProviderConnectionError(ProviderMappedError):
    """Connection-level transport error."""

    def __init__(self, message: str) -> None:
        super().__init__("connection_error", message)


class ProviderRateLimitError(ProviderMappedError):
    """Rate limit or quota exceeded."""

    def __init__(self, message: str, *, status_code: Optional[int] = 429) -> None:
        super().__init__("rate_limit", message, status_code=status_code)


class ProviderAuthenticationError(ProviderMappedError):
    """Authentication failure."""

    def __init__(self, message: str, *, status_code: Optional[int] = 401) -> None:
        super().__init__("authentication_error", message, status_code=status_code)


class ProviderPermissionDeniedError(ProviderMappedError):
    """Permission denied."""

    def __init__(self, message: str, *, status_code: Optional[int] = 403) -> None:
        super().__init__("permission_denied", message, status_code=status_code)


class ProviderInsufficientBalanceError(ProviderMappedError):
    """Insufficient account balance/credits."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__("insufficient_balance", message, status_code=status_code)


class ProviderModelNotFoundError(ProviderMappedError):
    """Requested model not found."""

    def __init__(self, message: str, *, status_code: Optional[int] = 404) -> None:
        super().__init__("model_not_found", message, status_code=status_code)


class ProviderBadRequestError(ProviderMappedError):
    """Malformed/invalid request."""

    def __init__(self, message: str, *, status_code: Optional[int] = 400) -> None:
        super().__init__("bad_request", message, status_code=status_code)


class ProviderContextLengthExceededError(ProviderMappedError):
    """Context length/token limit exceeded."""

    def __init__(self, message: str, *, status_code: Optional[int] = 400) -> None:
        super().__init__("context_length_exceeded", message, status_code=status_code)


class ProviderContentPolicyViolationError(ProviderMappedError):
    """Content blocked by the vendor's safety or policy filters."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__("content_policy_violation", message, status_code=status_code)


class ProviderServiceUnavailableError(ProviderMappedError):
    """Vendor overloaded or temporarily unavailable."""

    def __init__(self, message: str, *, status_code: Optional[int] = 503) -> None:
        super().__init__("service_unavailable", message, status_code=status_code)


class ProviderEmptyResponseError(ProviderMappedError):
    """Vendor answered without choices or text."""

    def __init__(self, message: str) -> None:
        super().__init__("empty_response", message)


class ProviderApiError(ProviderMappedError):
    """Generic upstream API error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__("api_error", message, status_code=status_code)
