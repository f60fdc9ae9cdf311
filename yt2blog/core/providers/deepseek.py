"""DeepSeek provider client."""

from __future__ import annotations

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.openai_compatible import OpenAICompatibleClient

DEEPSEEK_DESCRIPTOR = ProviderDescriptor(
    id="deepseek",
    display_name="DeepSeek",
    supports_free_tier=False,
    credential_portal_url="https://platform.deepseek.com",
    models=(
        ModelDescriptor(
            id="deepseek-chat",
            display_name="DeepSeek Chat",
            badge="💰 Lowest price",
            quality_tier="high",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="deepseek-coder",
            display_name="DeepSeek Coder",
            badge="💻 Code specialist",
            quality_tier="high",
        ),
    ),
    capability_tags=frozenset({"low-cost", "strong-chinese", "fast-response"}),
    pricing_note="$0.14/1M tokens",
)


class DeepSeekClient(OpenAICompatibleClient):
    provider_id = "deepseek"
    DESCRIPTOR = DEEPSEEK_DESCRIPTOR
    base_url = "https://api.deepseek.com/v1"
