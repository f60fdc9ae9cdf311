"""Shared abstractions for provider clients."""

from __future__ import annotations

import inspect
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Union

import httpx

from yt2blog.core.constants import DEFAULT_OUTPUT_LANGUAGE, DEFAULT_STYLE
from yt2blog.core.prompt import build_prompt
from yt2blog.core.provider_metadata import ProviderDescriptor
from yt2blog.core.providers.error_mapping import map_http_error, run_with_exception_mapper
from yt2blog.core.providers.errors import (
    ProviderConfigurationError,
    ProviderEmptyResponseError,
    ProviderMappedError,
)
from yt2blog.utils.log import get_logger

logger = get_logger()

ChunkCallback = Callable[[str], Union[None, Awaitable[None]]]
EmitFn = Callable[[str], Awaitable[None]]
ClientFactory = Callable[[], Any]

# Placeholder credential for reading static metadata without a real key.
PLACEHOLDER_API_KEY = "placeholder-api-key"

# Raw HTTP adapters: generous read timeout for long article generations.
DEFAULT_HTTP_TIMEOUT = httpx.Timeout(600.0, connect=60.0)


class ProviderClient(ABC):
    """Abstract base for model provider clients.

    Subclasses implement ``_complete`` (one buffered call), ``_stream`` (one
    streamed call feeding ``emit``) and ``_check_key`` (a minimal credential
    check). Everything else, including prompt building, chunk bookkeeping
    and error normalization, lives here.
    """

    provider_id: ClassVar[str] = ""
    DESCRIPTOR: ClassVar[ProviderDescriptor]

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        *,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ProviderConfigurationError(
                f"{self.DESCRIPTOR.display_name} API key is required"
            )
        self._api_key = str(api_key).strip()
        self.model = model or self.DESCRIPTOR.default_model
        self._client_factory = client_factory

    @property
    def log_tag(self) -> str:
        return f"[{self.provider_id}_client]"

    def describe(self) -> ProviderDescriptor:
        """Static provider metadata; never touches the network."""
        return self.DESCRIPTOR

    async def generate(
        self,
        transcript: str,
        *,
        language: str = DEFAULT_OUTPUT_LANGUAGE,
        style: Optional[str] = DEFAULT_STYLE.value,
        on_chunk: Optional[ChunkCallback] = None,
    ) -> str:
        """Generate an article for ``transcript``.

        With ``on_chunk`` the vendor call is streamed and every non-empty
        fragment is forwarded in arrival order; the returned text is the
        concatenation of those fragments. Without it a single buffered call
        is made.
        """
        prompt = build_prompt(transcript, language=language, style=style)
        stream = on_chunk is not None
        logger.debug(
            f"{self.log_tag} Preparing request",
            extra={
                "model": self.model,
                "stream": stream,
                "prompt_length": len(prompt),
            },
        )
        start_time = time.time()

        if on_chunk is not None:
            fragments: List[str] = []
            callback = on_chunk

            async def _emit(fragment: str) -> None:
                if not fragment:
                    return
                fragments.append(fragment)
                try:
                    outcome = callback(fragment)
                    if inspect.isawaitable(outcome):
                        await outcome
                except (RuntimeError, ValueError, TypeError, OSError) as cb_exc:
                    logger.warning(
                        f"{self.log_tag} Stream callback failed: %s: %s",
                        type(cb_exc).__name__,
                        cb_exc,
                    )

            async def _streamed() -> str:
                await self._stream(prompt, _emit)
                return "".join(fragments)

            text = await run_with_exception_mapper(_streamed, self._normalize_exception)
        else:
            text = await run_with_exception_mapper(
                lambda: self._complete(prompt), self._normalize_exception
            )

        if not text or not text.strip():
            raise self._tag(
                ProviderEmptyResponseError(
                    f"{self.DESCRIPTOR.display_name} returned an empty response"
                )
            )

        logger.info(
            f"{self.log_tag} Generation completed",
            extra={
                "model": self.model,
                "stream": stream,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
                "article_length": len(text),
            },
        )
        return text

    async def validate_api_key(self) -> bool:
        """Return whether the vendor accepts the credential. Never raises."""
        try:
            await self._check_key()
        except Exception as exc:
            logger.debug(
                f"{self.log_tag} API key validation failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)[:200]},
            )
            return False
        return True

    def _tag(self, exc: ProviderMappedError) -> ProviderMappedError:
        if exc.provider is None:
            exc.provider = self.provider_id
        return exc

    def _normalize_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, ProviderMappedError):
            return self._tag(exc)
        mapped = self._map_exception(exc)
        if isinstance(mapped, ProviderMappedError):
            self._tag(mapped)
        logger.warning(
            f"{self.log_tag} API call failed",
            extra={
                "model": self.model,
                "exception_type": type(exc).__name__,
                "error_code": getattr(mapped, "error_code", None),
            },
        )
        return mapped

    def _map_exception(self, exc: Exception) -> Exception:
        """Translate a vendor exception into a ``ProviderMappedError``."""
        return map_http_error(exc)

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """Run one buffered vendor call and return its text."""

    @abstractmethod
    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        """Run one streamed vendor call, passing each text delta to ``emit``."""

    @abstractmethod
    async def _check_key(self) -> None:
        """Make the cheapest vendor call that proves the key works."""


class HttpProviderClient(ProviderClient):
    """Base for adapters that speak to the vendor over plain ``httpx``."""

    base_url: ClassVar[str] = ""

    def _http_client(self) -> httpx.AsyncClient:
        if self._client_factory is not None:
            return self._client_factory()
        return httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    async def _raise_for_status(response: httpx.Response) -> None:
        """Read the error body before raising so the vendor text is kept."""
        if response.is_success:
            return
        await response.aread()
        response.raise_for_status()
