"""Moonshot AI (Kimi) provider client."""

from __future__ import annotations

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.openai_compatible import OpenAICompatibleClient

MOONSHOT_DESCRIPTOR = ProviderDescriptor(
    id="moonshot",
    display_name="Moonshot AI (月之暗面)",
    supports_free_tier=False,
    credential_portal_url="https://platform.moonshot.cn",
    models=(
        ModelDescriptor(
            id="moonshot-v1-8k",
            display_name="Moonshot V1 8K",
            badge="⚡ Recommended",
            quality_tier="high",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="moonshot-v1-32k",
            display_name="Moonshot V1 32K",
            badge="📚 Long text",
            quality_tier="high",
            speed_tier="medium",
        ),
        ModelDescriptor(
            id="moonshot-v1-128k",
            display_name="Moonshot V1 128K",
            badge="📖 Extra-long context",
            quality_tier="high",
            speed_tier="medium",
        ),
    ),
    capability_tags=frozenset({"long-context", "strong-chinese", "stable"}),
    pricing_note="8K: $1.00/1M tokens | 128K: $5.06/1M tokens",
)


class MoonshotClient(OpenAICompatibleClient):
    provider_id = "moonshot"
    DESCRIPTOR = MOONSHOT_DESCRIPTOR
    base_url = "https://api.moonshot.cn/v1"
    temperature = 0.7
