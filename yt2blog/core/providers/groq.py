"""Groq provider client (OpenAI-compatible endpoint via the OpenAI SDK)."""

from __future__ import annotations

from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers.openai import OpenAIClient

GROQ_DESCRIPTOR = ProviderDescriptor(
    id="groq",
    display_name="Groq",
    supports_free_tier=True,
    credential_portal_url="https://console.groq.com/keys",
    models=(
        ModelDescriptor(
            id="llama-3.3-70b-versatile",
            display_name="Llama 3.3 70B Versatile",
            badge="🚀 Recommended",
            speed_tier="ultra-fast",
        ),
        ModelDescriptor(
            id="llama-4-maverick-17b-128e-instruct",
            display_name="Llama 4 Maverick 17B",
            badge="🆕 Latest",
            speed_tier="ultra-fast",
        ),
        ModelDescriptor(
            id="llama-4-scout-17b-16e-instruct",
            display_name="Llama 4 Scout 17B",
            badge="🆕 Latest",
            speed_tier="ultra-fast",
        ),
        ModelDescriptor(
            id="llama-3.1-70b-versatile",
            display_name="Llama 3.1 70B Versatile",
            badge="⭐ High quality",
            speed_tier="fast",
        ),
        ModelDescriptor(
            id="llama-3.1-8b-instant",
            display_name="Llama 3.1 8B Instant",
            badge="⚡ Instant",
            speed_tier="instant",
        ),
        ModelDescriptor(
            id="gpt-oss-120b", display_name="GPT-OSS 120B", badge="🔓 Open GPT", speed_tier="fast"
        ),
        ModelDescriptor(
            id="mixtral-8x7b-32768", display_name="Mixtral 8x7B", badge="🔀 MoE", speed_tier="fast"
        ),
        ModelDescriptor(id="gemma2-9b-it", display_name="Gemma 2 9B", badge="🔷 Google", speed_tier="fast"),
    ),
    capability_tags=frozenset({"ultra-fast", "free-tier", "open-models"}),
    pricing_note="Free tier: 30 requests per minute",
)


class GroqClient(OpenAIClient):
    provider_id = "groq"
    DESCRIPTOR = GROQ_DESCRIPTOR
    base_url = "https://api.groq.com/openai/v1"
