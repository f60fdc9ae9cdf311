"""Provider client registry.

Adapters are imported lazily so that resolving one vendor never pulls in
another vendor's SDK.
"""

from __future__ import annotations

import importlib
from typing import Any, Callable, Dict, List, Optional, Type, cast

from yt2blog.core.provider_metadata import ProviderDescriptor
from yt2blog.core.providers.base import PLACEHOLDER_API_KEY, ProviderClient
from yt2blog.core.providers.errors import UnsupportedProviderError
from yt2blog.utils.log import get_logger

logger = get_logger()

ProviderLoader = Callable[[], Type[ProviderClient]]


def _load_client(module: str, cls: str) -> Type[ProviderClient]:
    """Dynamically import a provider client class."""
    mod = importlib.import_module(f"yt2blog.core.providers.{module}")
    client_cls = cast(Optional[Type[ProviderClient]], getattr(mod, cls, None))
    if client_cls is None:
        raise ImportError(f"{cls} not found in {module}")
    return client_cls


def _lazy(module: str, cls: str) -> ProviderLoader:
    return lambda: _load_client(module, cls)


# Insertion order is the catalog order.
_REGISTRY: Dict[str, ProviderLoader] = {}


def register_provider(provider_id: str, loader: ProviderLoader) -> None:
    """Register an adapter loader under a unique, lower-case provider id."""
    key = provider_id.strip().lower()
    if not key:
        raise ValueError("Provider id must not be empty")
    if key in _REGISTRY:
        raise ValueError(f"Provider already registered: {key}")
    _REGISTRY[key] = loader


for _provider_id, _module, _cls in (
    ("gemini", "gemini", "GeminiClient"),
    ("openai", "openai", "OpenAIClient"),
    ("anthropic", "anthropic", "AnthropicClient"),
    ("groq", "groq", "GroqClient"),
    ("deepseek", "deepseek", "DeepSeekClient"),
    ("zhipu", "zhipu", "ZhipuClient"),
    ("moonshot", "moonshot", "MoonshotClient"),
    ("mistral", "mistral", "MistralClient"),
    ("cohere", "cohere", "CohereClient"),
):
    register_provider(_provider_id, _lazy(_module, _cls))


def is_valid_provider(provider_id: Optional[str]) -> bool:
    return bool(provider_id) and provider_id.strip().lower() in _REGISTRY  # type: ignore[union-attr]


def available_providers() -> List[str]:
    return list(_REGISTRY)


def resolve_provider(provider_id: str) -> Type[ProviderClient]:
    """Return the adapter class for ``provider_id`` (case-insensitive)."""
    key = (provider_id or "").strip().lower()
    loader = _REGISTRY.get(key)
    if loader is None:
        logger.warning("[providers] Unsupported provider", extra={"provider": provider_id})
        raise UnsupportedProviderError(provider_id)
    return loader()


def create_provider(
    provider_id: str,
    api_key: str,
    model: Optional[str] = None,
    **kwargs: Any,
) -> ProviderClient:
    """Build a ready-to-use adapter instance."""
    client_cls = resolve_provider(provider_id)
    return client_cls(api_key, model, **kwargs)


def list_descriptors() -> List[ProviderDescriptor]:
    """Static metadata for every registered provider, in registration order."""
    return [
        create_provider(provider_id, PLACEHOLDER_API_KEY).describe() for provider_id in _REGISTRY
    ]


def provider_display_name(provider_id: Optional[str]) -> str:
    """Catalog name for ``provider_id``; unknown ids are returned unchanged."""
    if not is_valid_provider(provider_id):
        return provider_id or ""
    return resolve_provider(cast(str, provider_id)).DESCRIPTOR.display_name


__all__ = [
    "PLACEHOLDER_API_KEY",
    "ProviderClient",
    "ProviderLoader",
    "UnsupportedProviderError",
    "available_providers",
    "create_provider",
    "is_valid_provider",
    "list_descriptors",
    "provider_display_name",
    "register_provider",
    "resolve_provider",
]
