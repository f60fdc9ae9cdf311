"""Mistral AI provider client."""

from __future__ import annotations

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.openai_compatible import OpenAICompatibleClient

MISTRAL_DESCRIPTOR = ProviderDescriptor(
    id="mistral",
    display_name="Mistral AI",
    supports_free_tier=False,
    credential_portal_url="https://console.mistral.ai",
    models=(
        ModelDescriptor(
            id="mistral-small-latest",
            display_name="Mistral Small",
            badge="💰 Best value",
            quality_tier="good",
            speed_tier="fastest",
        ),
        ModelDescriptor(
            id="mistral-large-latest",
            display_name="Mistral Large",
            badge="🏆 Flagship",
            quality_tier="highest",
            speed_tier="medium",
        ),
        ModelDescriptor(
            id="mistral-medium-latest",
            display_name="Mistral Medium",
            badge="⚖️ Balanced",
            quality_tier="high",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="open-mistral-7b",
            display_name="Open Mistral 7B",
            badge="🆓 Open source",
            quality_tier="medium",
            speed_tier="fastest",
        ),
        ModelDescriptor(
            id="open-mixtral-8x7b",
            display_name="Open Mixtral 8x7B",
            badge="🔥 Open MoE",
            quality_tier="high",
            speed_tier="fast",
        ),
    ),
    capability_tags=frozenset({"eu-compliant", "open-models", "enterprise", "multilingual"}),
    pricing_note="Small: $2/1M tokens | Large: $8/1M tokens",
)


class MistralClient(OpenAICompatibleClient):
    provider_id = "mistral"
    DESCRIPTOR = MISTRAL_DESCRIPTOR
    base_url = "https://api.mistral.ai/v1"
    temperature = 0.7
