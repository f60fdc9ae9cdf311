"""Provider catalog models shared across the server, CLI and adapters."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class ModelDescriptor(BaseModel):
    """One selectable model of a provider."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    display_name: str
    badge: Optional[str] = None
    quality_tier: Optional[str] = None
    speed_tier: Optional[str] = None
    description: Optional[str] = None

    def to_catalog_entry(self) -> Dict[str, Any]:
        return {
            "modelId": self.id,
            "displayName": self.display_name,
            "badge": self.badge or "",
            "quality": self.quality_tier,
            "speed": self.speed_tier,
            "description": self.description,
        }


class ProviderDescriptor(BaseModel):
    """Static provider metadata, readable without a working credential."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    display_name: str
    supports_free_tier: bool
    credential_portal_url: str
    models: Tuple[ModelDescriptor, ...]
    capability_tags: FrozenSet[str] = frozenset()
    pricing_note: Optional[str] = None

    @property
    def default_model(self) -> str:
        """The first listed model is the default selection."""
        return self.models[0].id

    def to_catalog_entry(self) -> Dict[str, Any]:
        """Serialize to the shape consumed by UI selectors."""
        return {
            "providerId": self.id,
            "displayName": self.display_name,
            "freeTier": self.supports_free_tier,
            "models": [model.to_catalog_entry() for model in self.models],
            "credentialPortalUrl": self.credential_portal_url,
            "pricingNote": self.pricing_note,
            "features": sorted(self.capability_tags),
        }
