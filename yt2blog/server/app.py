"""FastAPI relay exposing provider catalog, generation and key validation."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from yt2blog import __version__
from yt2blog.core.config import ServerSettings, load_settings
from yt2blog.core.constants import (
    DEFAULT_OUTPUT_LANGUAGE,
    DEFAULT_STYLE,
    OUTPUT_LANGUAGES,
    ArticleStyle,
)
from yt2blog.core.error_translation import ErrorTranslator
from yt2blog.core.generation import (
    ArticleGenerator,
    GenerationEvent,
    GenerationFailedError,
    GenerationRejectedError,
    GenerationRequest,
)
from yt2blog.core.locales import get_message
from yt2blog.core.providers import list_descriptors
from yt2blog.core.providers.errors import UnsupportedProviderError
from yt2blog.utils.log import get_logger

logger = get_logger()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class ValidateKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    provider: str = "gemini"
    api_key: str = Field(default="", alias="apiKey")
    model: Optional[str] = Field(default=None, alias="modelName")
    locale: Optional[str] = None


def _request_locale(request: Request, explicit: Optional[str]) -> Optional[str]:
    """Body locale wins; otherwise the first Accept-Language tag."""
    if explicit:
        return explicit
    header = request.headers.get("accept-language", "")
    first = header.split(",", 1)[0].split(";", 1)[0].strip()
    return first or None


def format_sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def _sse_stream(events: AsyncIterator[GenerationEvent]) -> AsyncIterator[str]:
    async for event in events:
        yield format_sse(event.to_sse_payload())


def create_app(
    settings: Optional[ServerSettings] = None,
    generator: Optional[ArticleGenerator] = None,
) -> FastAPI:
    """Build the relay application."""
    settings = settings or load_settings()
    generator = generator or ArticleGenerator(
        translator=ErrorTranslator(default_locale=settings.default_locale)
    )

    app = FastAPI(
        title="yt2blog",
        version=__version__,
        description="Turn YouTube transcripts into SEO-ready blog articles",
    )
    app.state.settings = settings
    app.state.generator = generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next: Any) -> Any:
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Hide internals from clients in production."""
        logger.exception(
            "[server] Unhandled exception",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        locale = _request_locale(request, None)
        message = (
            get_message("internal_error", locale) if settings.is_production else str(exc)
        )
        return JSONResponse(
            status_code=500,
            content={"error": get_message("internal_error", locale), "message": message},
        )

    @app.get("/api/providers")
    async def providers() -> Dict[str, Any]:
        return {"providers": [descriptor.to_catalog_entry() for descriptor in list_descriptors()]}

    @app.get("/api/options")
    async def options() -> Dict[str, Any]:
        return {
            "styles": [style.value for style in ArticleStyle],
            "defaultStyle": DEFAULT_STYLE.value,
            "languages": [{"code": code, "label": label} for code, label in OUTPUT_LANGUAGES.items()],
            "defaultLanguage": DEFAULT_OUTPUT_LANGUAGE,
        }

    @app.post("/api/generate")
    async def generate(body: GenerationRequest, request: Request) -> Any:
        locale = _request_locale(request, body.locale)
        if locale != body.locale:
            body = body.model_copy(update={"locale": locale})
        logger.info(
            "[server] Generate request",
            extra={"provider": body.provider, "model": body.model, "stream": body.stream},
        )

        try:
            generator.validate(body)
        except GenerationRejectedError as exc:
            return JSONResponse(
                status_code=400, content={"error": exc.reason, "message": exc.message}
            )

        if body.stream:
            return StreamingResponse(
                _sse_stream(generator.stream(body)),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
            )

        try:
            result = await generator.generate(body)
        except GenerationFailedError as exc:
            return JSONResponse(
                status_code=502,
                content={"error": exc.category.value, "message": exc.message},
            )
        return {
            "success": True,
            "article": result.article,
            "provider": result.provider,
            "model": result.model,
        }

    @app.post("/api/validate-key")
    async def validate_key(body: ValidateKeyRequest, request: Request) -> Any:
        locale = _request_locale(request, body.locale)
        if not body.api_key.strip():
            return JSONResponse(
                status_code=400,
                content={
                    "error": "missing_api_key",
                    "message": get_message("missing_api_key", locale),
                },
            )
        try:
            valid = await generator.validate_api_key(body.provider, body.api_key, body.model)
        except UnsupportedProviderError:
            return JSONResponse(
                status_code=400,
                content={
                    "error": "unsupported_provider",
                    "message": get_message("unsupported_provider", locale, provider=body.provider),
                },
            )
        return {"provider": body.provider.strip().lower(), "valid": valid}

    @app.get("/api/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "env": settings.environment,
            "version": __version__,
        }

    return app
