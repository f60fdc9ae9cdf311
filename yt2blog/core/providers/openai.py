"""OpenAI provider client (also the base for OpenAI-SDK compatible vendors)."""

from __future__ import annotations

import asyncio
from typing import Any, ClassVar, Dict, List, Optional

import openai
from openai import AsyncOpenAI

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
    ProviderTimeoutError,
)
from yt2blog.utils.log import get_logger

logger = get_logger()

OPENAI_DESCRIPTOR = ProviderDescriptor(
    id="openai",
    display_name="OpenAI",
    supports_free_tier=False,
    credential_portal_url="https://platform.openai.com/api-keys",
    models=(
        ModelDescriptor(
            id="gpt-4o-mini",
            display_name="GPT-4o Mini",
            badge="💰 Best value",
            speed_tier="fastest",
        ),
        ModelDescriptor(
            id="gpt-4o",
            display_name="GPT-4o",
            badge="🏆 Recommended",
            quality_tier="highest",
            speed_tier="fast",
        ),
        ModelDescriptor(id="o1", display_name="O1", badge="🧠 Reasoning", quality_tier="highest"),
        ModelDescriptor(id="o1-mini", display_name="O1 Mini", badge="🧠 Fast reasoning", speed_tier="fast"),
        ModelDescriptor(id="gpt-4-turbo", display_name="GPT-4 Turbo", quality_tier="high"),
    ),
    capability_tags=frozenset({"streaming", "high-quality", "multilingual"}),
    pricing_note="GPT-4o-mini: $0.15/1M tokens",
)


def map_openai_error(exc: Exception) -> Exception:
    """Map an OpenAI SDK exception to a normalized provider error."""
    if isinstance(exc, ProviderMappedError):
        return exc
    # APITimeoutError subclasses APIConnectionError.
    if isinstance(exc, openai.APITimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    if isinstance(exc, openai.APIConnectionError):
        return map_connection_error(str(exc))
    if isinstance(exc, openai.APIStatusError):
        return map_status_error(exc.status_code, str(exc))
    if isinstance(exc, asyncio.TimeoutError):
        return ProviderTimeoutError(f"Network request timed out: {exc}")
    return map_unexpected_error(exc)


class OpenAIClient(ProviderClient):
    """Chat completions through ``AsyncOpenAI``."""

    provider_id = "openai"
    DESCRIPTOR = OPENAI_DESCRIPTOR
    base_url: ClassVar[Optional[str]] = None

    def _sdk_client(self) -> Any:
        if self._client_factory is not None:
            return self._client_factory()
        return AsyncOpenAI(api_key=self._api_key, base_url=self.base_url, max_retries=0)

    def _messages(self, prompt: str) -> List[Dict[str, str]]:
        return [{"role": "user", "content": prompt}]

    async def _complete(self, prompt: str) -> str:
        async with self._sdk_client() as client:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt),
            )
        choices = getattr(completion, "choices", None) or []
        if not choices:
            raise ProviderEmptyResponseError(
                f"{self.DESCRIPTOR.display_name} returned no choices"
            )
        return getattr(choices[0].message, "content", None) or ""

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        async with self._sdk_client() as client:
            logger.debug(f"{self.log_tag} Initiating stream request", extra={"model": self.model})
            stream = await client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt),
                stream=True,
            )
            async for chunk in stream:
                choices = getattr(chunk, "choices", None) or []
                if not choices:
                    continue
                delta = getattr(choices[0], "delta", None)
                await emit(getattr(delta, "content", None) or "")

    async def _check_key(self) -> None:
        async with self._sdk_client() as client:
            await client.models.list()

    def _map_exception(self, exc: Exception) -> Exception:
        return map_openai_error(exc)
