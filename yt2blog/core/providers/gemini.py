"""Gemini provider client built on the ``google-genai`` SDK."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.base import EmitFn, ProviderClient
from yt2blog.core.providers.error_mapping import map_http_error, map_status_error
from yt2blog.core.providers.errors import (
    ProviderContentPolicyViolationError,
    ProviderMappedError,
    ProviderTimeoutError,
)
from yt2blog.utils.log import get_logger

logger = get_logger()

GEMINI_DESCRIPTOR = ProviderDescriptor(
    id="gemini",
    display_name="Google Gemini",
    supports_free_tier=True,
    credential_portal_url="https://aistudio.google.com/app/apikey",
    models=(
        ModelDescriptor(
            id="gemini-2.5-flash",
            display_name="Gemini 2.5 Flash",
            badge="⚡ Recommended",
            quality_tier="high",
            speed_tier="fast",
            description="Best price-performance for large-scale processing",
        ),
        ModelDescriptor(
            id="gemini-3-pro-preview",
            display_name="Gemini 3 Pro Preview",
            badge="🌟 Latest",
            quality_tier="highest",
            speed_tier="medium",
            description="State-of-the-art multimodal understanding and coding",
        ),
        ModelDescriptor(
            id="gemini-2.5-pro",
            display_name="Gemini 2.5 Pro",
            badge="🧠 Deep thinking",
            quality_tier="high",
            speed_tier="medium",
            description="Complex reasoning, code and long-document analysis",
        ),
        ModelDescriptor(
            id="gemini-2.0-flash",
            display_name="Gemini 2.0 Flash",
            speed_tier="fast",
            description="Fast and reliable",
        ),
        ModelDescriptor(
            id="gemini-2.0-flash-exp",
            display_name="Gemini 2.0 Flash Experimental",
            badge="🧪 Experimental",
            speed_tier="fast",
        ),
        ModelDescriptor(id="gemini-1.5-flash", display_name="Gemini 1.5 Flash", speed_tier="fast"),
        ModelDescriptor(
            id="gemini-1.5-pro",
            display_name="Gemini 1.5 Pro",
            quality_tier="high",
            speed_tier="medium",
        ),
    ),
    capability_tags=frozenset({"streaming", "long-context", "free-tier", "multimodal", "code"}),
    pricing_note="Free tier: 15 requests per minute",
)

_SAFETY_FINISH_REASONS = ("SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII")


def map_gemini_error(exc: Exception) -> Exception:
    """Map a ``google-genai`` exception to a normalized provider error."""
    if isinstance(exc, ProviderMappedError):
        return exc
    if isinstance(exc, genai_errors.APIError):
        return map_status_error(getattr(exc, "code", None), str(exc))
    if isinstance(exc, asyncio.TimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    # The SDK transports over httpx and lets transport errors through.
    return map_http_error(exc)


def _block_reason(response: Any) -> Optional[str]:
    """Return why Gemini withheld output, if it did."""
    feedback = getattr(response, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None)
    if reason:
        return str(getattr(reason, "value", reason))
    for candidate in getattr(response, "candidates", None) or []:
        finish = getattr(candidate, "finish_reason", None)
        finish_name = str(getattr(finish, "value", finish) or "")
        if finish_name in _SAFETY_FINISH_REASONS:
            return finish_name
    return None


def _chunk_text(response: Any) -> str:
    text = getattr(response, "text", None)
    return text if isinstance(text, str) else ""


class GeminiClient(ProviderClient):
    """Content generation through ``client.aio.models``."""

    provider_id = "gemini"
    DESCRIPTOR = GEMINI_DESCRIPTOR

    def _sdk_client(self) -> Any:
        if self._client_factory is not None:
            return self._client_factory()
        return genai.Client(api_key=self._api_key)

    def _raise_if_blocked(self, response: Any) -> None:
        reason = _block_reason(response)
        if reason:
            raise ProviderContentPolicyViolationError(
                f"Response blocked by safety filter: {reason}"
            )

    async def _complete(self, prompt: str) -> str:
        client = self._sdk_client()
        response = await client.aio.models.generate_content(model=self.model, contents=prompt)
        text = _chunk_text(response)
        if not text:
            self._raise_if_blocked(response)
        return text

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        client = self._sdk_client()
        logger.debug(f"{self.log_tag} Initiating stream request", extra={"model": self.model})
        stream = await client.aio.models.generate_content_stream(model=self.model, contents=prompt)
        received_text = False
        async for chunk in stream:
            text = _chunk_text(chunk)
            if text:
                received_text = True
                await emit(text)
            elif not received_text:
                self._raise_if_blocked(chunk)

    async def _check_key(self) -> None:
        client = self._sdk_client()
        await client.aio.models.generate_content(model=self.model, contents="test")

    def _map_exception(self, exc: Exception) -> Exception:
        return map_gemini_error(exc)
