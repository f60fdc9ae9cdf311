"""Pytest configuration and fixtures for all tests."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Type

import pytest

from yt2blog.core.generation import ArticleGenerator
from yt2blog.core.provider_metadata import ModelDescriptor, ProviderDescriptor
from yt2blog.core.providers import resolve_provider
from yt2blog.core.providers.base import EmitFn, ProviderClient

SCRIPTED_DESCRIPTOR = ProviderDescriptor(
    id="scripted",
    display_name="Scripted AI",
    supports_free_tier=True,
    credential_portal_url="https://example.com/keys",
    models=(
        ModelDescriptor(id="scripted-large", display_name="Scripted Large"),
        ModelDescriptor(id="scripted-small", display_name="Scripted Small"),
    ),
)


class ScriptedClient(ProviderClient):
    """Adapter double that replays ``chunks`` or raises ``error``."""

    provider_id = "scripted"
    DESCRIPTOR = SCRIPTED_DESCRIPTOR

    chunks: ClassVar[List[str]] = []
    error: ClassVar[Optional[Exception]] = None
    key_is_valid: ClassVar[bool] = True
    calls: ClassVar[List[Dict[str, Any]]] = []

    async def _complete(self, prompt: str) -> str:
        self.calls.append({"prompt": prompt, "stream": False, "model": self.model})
        if self.error is not None:
            raise self.error
        return "".join(self.chunks)

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        self.calls.append({"prompt": prompt, "stream": True, "model": self.model})
        for chunk in self.chunks:
            await emit(chunk)
        if self.error is not None:
            raise self.error

    async def _check_key(self) -> None:
        if not self.key_is_valid:
            raise RuntimeError("401 Unauthorized")


@pytest.fixture
def scripted_client_cls() -> Type[ScriptedClient]:
    """A fresh ScriptedClient subclass so class-level script state never leaks."""

    class _Client(ScriptedClient):
        chunks = ["# Title\n\n", "Intro paragraph. ", "Summary."]
        error = None
        key_is_valid = True
        calls = []

    return _Client


@pytest.fixture
def scripted_generator(scripted_client_cls: Type[ScriptedClient]) -> ArticleGenerator:
    """Generator resolving ``scripted`` to the double and everything else normally."""

    def _resolve(provider_id: str) -> Type[ProviderClient]:
        if (provider_id or "").strip().lower() == "scripted":
            return scripted_client_cls
        return resolve_provider(provider_id)

    return ArticleGenerator(resolver=_resolve)
