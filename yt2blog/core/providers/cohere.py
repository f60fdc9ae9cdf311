"""Cohere provider client (v1 chat API over raw ``httpx``)."""

from __future__ import annotations

from typing import Any, Dict

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.base import EmitFn, HttpProviderClient
from yt2blog.core.providers.streaming import iter_ndjson

COHERE_DESCRIPTOR = ProviderDescriptor(
    id="cohere",
    display_name="Cohere",
    supports_free_tier=False,
    credential_portal_url="https://dashboard.cohere.com",
    models=(
        ModelDescriptor(
            id="command-r",
            display_name="Command R",
            badge="⚡ Recommended",
            quality_tier="high",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="command-r-plus",
            display_name="Command R+",
            badge="🏆 Flagship",
            quality_tier="highest",
            speed_tier="medium",
        ),
        ModelDescriptor(id="command", display_name="Command", quality_tier="high", speed_tier="fast"),
        ModelDescriptor(
            id="command-light",
            display_name="Command Light",
            badge="💰 Budget",
            quality_tier="medium",
            speed_tier="fastest",
        ),
    ),
    capability_tags=frozenset({"enterprise", "rag", "multilingual", "high-accuracy"}),
    pricing_note="Command R: $0.50/1M tokens | R+: $3/1M tokens",
)

TEXT_GENERATION_EVENT = "text-generation"


class CohereClient(HttpProviderClient):
    """Cohere takes a single ``message`` and streams newline-delimited JSON events."""

    provider_id = "cohere"
    DESCRIPTOR = COHERE_DESCRIPTOR
    base_url = "https://api.cohere.ai/v1"

    def _request_body(self, prompt: str, *, stream: bool) -> Dict[str, Any]:
        return {
            "model": self.model,
            "message": prompt,
            "temperature": 0.7,
            "stream": stream,
        }

    async def _complete(self, prompt: str) -> str:
        async with self._http_client() as client:
            response = await client.post(
                self._url("chat"),
                json=self._request_body(prompt, stream=False),
                headers=self._headers(),
            )
            await self._raise_for_status(response)
            data = response.json()
        text = data.get("text") if isinstance(data, dict) else None
        return text if isinstance(text, str) else ""

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        async with self._http_client() as client:
            async with client.stream(
                "POST",
                self._url("chat"),
                json=self._request_body(prompt, stream=True),
                headers=self._headers(),
            ) as response:
                await self._raise_for_status(response)
                async for event in iter_ndjson(response.aiter_text()):
                    if event.get("event_type") != TEXT_GENERATION_EVENT:
                        continue
                    text = event.get("text")
                    if isinstance(text, str):
                        await emit(text)

    async def _check_key(self) -> None:
        async with self._http_client() as client:
            response = await client.post(
                self._url("check-api-key"),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            await self._raise_for_status(response)
