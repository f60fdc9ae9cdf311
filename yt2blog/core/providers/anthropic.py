"""Anthropic Claude provider client."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List

import anthropic
from anthropic import AsyncAnthropic

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.base import EmitFn, ProviderClient
from yt2blog.core.providers.error_mapping import (
    map_connection_error,
    map_status_error,
    map_unexpected_error,
)
from yt2blog.core.providers.errors import (
    ProviderEmptyResponseError,
    ProviderMappedError,
    ProviderServiceUnavailableError,
    ProviderTimeoutError,
)
from yt2blog.utils.log import get_logger

logger = get_logger()

MAX_OUTPUT_TOKENS = 4096

ANTHROPIC_DESCRIPTOR = ProviderDescriptor(
    id="anthropic",
    display_name="Anthropic Claude",
    supports_free_tier=False,
    credential_portal_url="https://console.anthropic.com",
    models=(
        ModelDescriptor(
            id="claude-sonnet-4-5",
            display_name="Claude Sonnet 4.5",
            badge="⚡ Recommended",
            quality_tier="high",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="claude-opus-4-5",
            display_name="Claude Opus 4.5",
            badge="🌟 Most capable",
            quality_tier="highest",
        ),
        ModelDescriptor(
            id="claude-haiku-4-5",
            display_name="Claude Haiku 4.5",
            badge="💨 Fastest",
            speed_tier="fastest",
        ),
        ModelDescriptor(
            id="claude-3-5-haiku-latest",
            display_name="Claude 3.5 Haiku",
            speed_tier="fastest",
        ),
    ),
    capability_tags=frozenset({"long-context", "precise", "streaming"}),
    pricing_note="Haiku: $0.25/1M tokens, Sonnet: $3/1M tokens",
)


def map_anthropic_error(exc: Exception) -> Exception:
    """Map an Anthropic SDK exception to a normalized provider error."""
    if isinstance(exc, ProviderMappedError):
        return exc
    if isinstance(exc, anthropic.APITimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    if isinstance(exc, anthropic.APIConnectionError):
        return map_connection_error(str(exc))
    if isinstance(exc, anthropic.APIStatusError):
        status = getattr(exc, "status_code", None)
        return map_status_error(status, str(exc))
    if isinstance(exc, anthropic.APIError) and "overloaded" in str(exc).lower():
        # Mid-stream overload arrives as an SSE error event without a status.
        return ProviderServiceUnavailableError(f"Service overloaded (529): {exc}", status_code=529)
    if isinstance(exc, asyncio.TimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    return map_unexpected_error(exc)


def _text_from_content(content: Any) -> str:
    parts: List[str] = []
    for block in content or []:
        if getattr(block, "type", None) == "text":
            parts.append(getattr(block, "text", "") or "")
    return "".join(parts)


class AnthropicClient(ProviderClient):
    """Messages API through ``AsyncAnthropic``."""

    provider_id = "anthropic"
    DESCRIPTOR = ANTHROPIC_DESCRIPTOR

    def _sdk_client(self) -> Any:
        if self._client_factory is not None:
            return self._client_factory()
        return AsyncAnthropic(api_key=self._api_key, max_retries=0)

    def _request_kwargs(self, prompt: str, max_tokens: int = MAX_OUTPUT_TOKENS) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def _complete(self, prompt: str) -> str:
        async with self._sdk_client() as client:
            message = await client.messages.create(**self._request_kwargs(prompt))
        content = getattr(message, "content", None)
        if not content:
            raise ProviderEmptyResponseError(
                f"{self.DESCRIPTOR.display_name} returned no content"
            )
        return _text_from_content(content)

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        async with self._sdk_client() as client:
            logger.debug(f"{self.log_tag} Initiating stream request", extra={"model": self.model})
            async with client.messages.stream(**self._request_kwargs(prompt)) as stream:
                async for text in stream.text_stream:
                    await emit(text)

    async def _check_key(self) -> None:
        async with self._sdk_client() as client:
            await client.messages.create(**self._request_kwargs("test", max_tokens=1))

    def _map_exception(self, exc: Exception) -> Exception:
        return map_anthropic_error(exc)
