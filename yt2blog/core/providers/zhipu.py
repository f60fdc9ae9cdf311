"""Zhipu AI (GLM) provider client."""

from __future__ import annotations

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.openai_compatible import OpenAICompatibleClient

ZHIPU_DESCRIPTOR = ProviderDescriptor(
    id="zhipu",
    display_name="Zhipu AI (智譜)",
    supports_free_tier=False,
    credential_portal_url="https://open.bigmodel.cn",
    models=(
        ModelDescriptor(
            id="glm-4-flash",
            display_name="GLM-4 Flash",
            badge="⚡ Recommended",
            quality_tier="high",
            speed_tier="fastest",
        ),
        ModelDescriptor(
            id="glm-4-plus",
            display_name="GLM-4 Plus",
            badge="🏆 Flagship",
            quality_tier="highest",
            speed_tier="medium",
        ),
        ModelDescriptor(id="glm-4", display_name="GLM-4", quality_tier="high", speed_tier="fast"),
        ModelDescriptor(
            id="glm-3-turbo",
            display_name="GLM-3 Turbo",
            badge="💰 Budget",
            quality_tier="medium",
            speed_tier="fastest",
        ),
    ),
    capability_tags=frozenset({"strong-chinese", "low-cost", "fast-response"}),
    pricing_note="GLM-4-Flash: $0.07/1M tokens",
)


class ZhipuClient(OpenAICompatibleClient):
    """Zhipu has no model listing endpoint; a tiny completion proves the key."""

    provider_id = "zhipu"
    DESCRIPTOR = ZHIPU_DESCRIPTOR
    base_url = "https://open.bigmodel.cn/api/paas/v4"

    async def _check_key(self) -> None:
        async with self._http_client() as client:
            response = await client.post(
                self._url("chat/completions"),
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": "test"}],
                    "max_tokens": 1,
                },
                headers=self._headers(),
            )
            await self._raise_for_status(response)
