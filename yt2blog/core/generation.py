"""Request validation and execution of one article generation.

A request moves through ``GenerationState``: it is validated without any
network I/O, resolved to an adapter, then generated either buffered or as a
stream of events. Every adapter failure is classified and rendered by the
``ErrorTranslator`` before it reaches the caller.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, Optional, Type, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from yt2blog.core.constants import DEFAULT_OUTPUT_LANGUAGE, DEFAULT_STYLE
from yt2blog.core.error_translation import ClassifiedError, ErrorCategory, ErrorTranslator
from yt2blog.core.locales import get_message
from yt2blog.core.providers import resolve_provider
from yt2blog.core.providers.base import ChunkCallback, ProviderClient
from yt2blog.core.providers.errors import UnsupportedProviderError
from yt2blog.utils.log import get_logger

logger = get_logger()

DEFAULT_PROVIDER = "gemini"

ProviderResolver = Callable[[str], Type[ProviderClient]]


class GenerationState(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PROVIDER_RESOLVED = "provider-resolved"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR_REPORTED = "error-reported"


class GenerationRequest(BaseModel):
    """One generation request. Accepts the ``apiKey``/``modelName`` wire names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    transcript: str = ""
    provider: str = DEFAULT_PROVIDER
    api_key: SecretStr = Field(default=SecretStr(""), alias="apiKey")
    model: Optional[str] = Field(default=None, alias="modelName")
    language: str = DEFAULT_OUTPUT_LANGUAGE
    style: str = DEFAULT_STYLE.value
    stream: bool = False
    locale: Optional[str] = None

    @field_validator("transcript", "provider", "language", "style", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info: Any) -> Any:
        if value is not None:
            return value
        return {
            "transcript": "",
            "provider": DEFAULT_PROVIDER,
            "language": DEFAULT_OUTPUT_LANGUAGE,
            "style": DEFAULT_STYLE.value,
        }[info.field_name]

    @field_validator("api_key", mode="before")
    @classmethod
    def _none_to_empty_key(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("model", mode="before")
    @classmethod
    def _blank_model_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    article: str
    provider: str
    model: str


class GenerationRejectedError(Exception):
    """Request failed validation; no vendor call was made."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class GenerationFailedError(Exception):
    """The vendor call failed; ``message`` is the rendered, localized text."""

    def __init__(self, classified: ClassifiedError, message: str) -> None:
        super().__init__(message)
        self.classified = classified
        self.message = message

    @property
    def category(self) -> ErrorCategory:
        return self.classified.category


@dataclass(frozen=True)
class ChunkEvent:
    text: str

    def to_sse_payload(self) -> Dict[str, Any]:
        return {"chunk": self.text}


@dataclass(frozen=True)
class CompletedEvent:
    result: GenerationResult

    def to_sse_payload(self) -> Dict[str, Any]:
        return {"done": True, "result": self.result.article}


@dataclass(frozen=True)
class FailedEvent:
    category: ErrorCategory
    message: str

    def to_sse_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "category": self.category.value}


GenerationEvent = Union[ChunkEvent, CompletedEvent, FailedEvent]


class ArticleGenerator:
    """Validate, resolve and run generation requests.

    Args:
        translator: renders adapter failures; defaults to an English translator.
        resolver: maps a provider id to an adapter class.
        client_kwargs: extra keyword arguments for every adapter constructor.
    """

    def __init__(
        self,
        translator: Optional[ErrorTranslator] = None,
        resolver: ProviderResolver = resolve_provider,
        client_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.translator = translator or ErrorTranslator()
        self._resolver = resolver
        self._client_kwargs = dict(client_kwargs or {})

    def _locale(self, request: GenerationRequest) -> str:
        return request.locale or self.translator.default_locale

    def _transition(self, request_id: str, state: GenerationState, **extra: Any) -> None:
        logger.debug(
            f"[generation] {state.value}",
            extra={"request_id": request_id, "state": state.value, **extra},
        )

    def _reject(self, request_id: str, reason: str, message: str) -> GenerationRejectedError:
        self._transition(request_id, GenerationState.REJECTED, reason=reason)
        return GenerationRejectedError(reason, message)

    def validate(self, request: GenerationRequest) -> Type[ProviderClient]:
        """Check the request without touching the network.

        Returns the adapter class for the request's provider.
        """
        return self._validate(request, uuid4().hex[:12])

    def _validate(self, request: GenerationRequest, request_id: str) -> Type[ProviderClient]:
        self._transition(request_id, GenerationState.VALIDATING, provider=request.provider)
        locale = self._locale(request)
        if not request.transcript.strip():
            raise self._reject(
                request_id, "missing_transcript", get_message("missing_transcript", locale)
            )
        if not request.api_key.get_secret_value().strip():
            raise self._reject(request_id, "missing_api_key", get_message("missing_api_key", locale))
        try:
            client_cls = self._resolver(request.provider)
        except UnsupportedProviderError:
            raise self._reject(
                request_id,
                "unsupported_provider",
                get_message("unsupported_provider", locale, provider=request.provider),
            ) from None
        self._transition(request_id, GenerationState.PROVIDER_RESOLVED, provider=request.provider)
        return client_cls

    def _build_client(self, client_cls: Type[ProviderClient], request: GenerationRequest) -> ProviderClient:
        return client_cls(
            request.api_key.get_secret_value(),
            request.model,
            **self._client_kwargs,
        )

    async def _run(
        self,
        client: ProviderClient,
        request: GenerationRequest,
        request_id: str,
        on_chunk: Optional[ChunkCallback],
    ) -> GenerationResult:
        self._transition(
            request_id,
            GenerationState.GENERATING,
            provider=client.provider_id,
            model=client.model,
            stream=on_chunk is not None,
        )
        start_time = time.time()
        try:
            article = await client.generate(
                request.transcript,
                language=request.language,
                style=request.style,
                on_chunk=on_chunk,
            )
        except Exception as exc:
            classified = self.translator.classify(str(exc), client.DESCRIPTOR.display_name)
            message = self.translator.render(classified, self._locale(request))
            logger.warning(
                "[generation] Generation failed",
                extra={
                    "request_id": request_id,
                    "provider": client.provider_id,
                    "model": client.model,
                    "category": classified.category.value,
                    "error_type": type(exc).__name__,
                },
            )
            self._transition(
                request_id, GenerationState.ERROR_REPORTED, category=classified.category.value
            )
            raise GenerationFailedError(classified, message) from exc

        self._transition(
            request_id,
            GenerationState.COMPLETED,
            duration_ms=round((time.time() - start_time) * 1000, 2),
            article_length=len(article),
        )
        return GenerationResult(article=article, provider=client.provider_id, model=client.model)

    async def generate(
        self,
        request: GenerationRequest,
        on_chunk: Optional[ChunkCallback] = None,
    ) -> GenerationResult:
        """Run one request to completion.

        Raises:
            GenerationRejectedError: the request is invalid.
            GenerationFailedError: the vendor call failed.
        """
        request_id = uuid4().hex[:12]
        self._transition(request_id, GenerationState.RECEIVED)
        client_cls = self._validate(request, request_id)
        client = self._build_client(client_cls, request)
        return await self._run(client, request, request_id, on_chunk)

    async def validate_api_key(
        self, provider: str, api_key: str, model: Optional[str] = None
    ) -> bool:
        """Ask the provider whether ``api_key`` is accepted.

        Raises ``UnsupportedProviderError`` for unknown providers; vendor
        failures simply yield False.
        """
        client_cls = self._resolver(provider)
        client = client_cls(api_key, model or None, **self._client_kwargs)
        valid = await client.validate_api_key()
        logger.info(
            "[generation] API key validation finished",
            extra={"provider": client.provider_id, "valid": valid},
        )
        return valid

    async def stream(self, request: GenerationRequest) -> AsyncIterator[GenerationEvent]:
        """Yield ``ChunkEvent``s followed by exactly one terminal event.

        Validation errors are raised before the first event. Closing the
        iterator early cancels the vendor call.
        """
        request_id = uuid4().hex[:12]
        self._transition(request_id, GenerationState.RECEIVED)
        client_cls = self._validate(request, request_id)
        client = self._build_client(client_cls, request)

        queue: "asyncio.Queue[GenerationEvent]" = asyncio.Queue()

        def _on_chunk(text: str) -> None:
            queue.put_nowait(ChunkEvent(text))

        async def _produce() -> None:
            try:
                result = await self._run(client, request, request_id, _on_chunk)
            except GenerationFailedError as exc:
                queue.put_nowait(FailedEvent(exc.category, exc.message))
            else:
                queue.put_nowait(CompletedEvent(result))

        task = asyncio.create_task(_produce())
        try:
            while True:
                event = await queue.get()
                yield event
                if not isinstance(event, ChunkEvent):
                    return
        finally:
            if not task.done():
                logger.info(
                    "[generation] Stream closed by consumer; cancelling vendor call",
                    extra={"request_id": request_id, "provider": client.provider_id},
                )
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
