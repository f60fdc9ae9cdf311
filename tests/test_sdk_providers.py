"""Tests for the SDK-backed adapters (OpenAI, Groq, Anthropic, Gemini) using fake clients."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import anthropic
import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from yt2blog.core.providers.anthropic import AnthropicClient
from yt2blog.core.providers.errors import (
    ProviderAuthenticationError,
    ProviderContentPolicyViolationError,
    ProviderEmptyResponseError,
    ProviderRateLimitError,
    ProviderServiceUnavailableError,
    ProviderTimeoutError,
)
from yt2blog.core.providers.gemini import GeminiClient
from yt2blog.core.providers.groq import GroqClient
from yt2blog.core.providers.openai import OpenAIClient


def _response(status_code: int) -> httpx.Response:
    request = httpx.Request("POST", "https://example.com/v1/chat")
    return httpx.Response(status_code=status_code, request=request)


async def _aiter(items):
    for item in items:
        yield item


class _AsyncContext:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


# OpenAI-style fakes


class FakeCompletions:
    def __init__(self, *, text: str = "", deltas=(), error: Optional[Exception] = None, choices=None):
        self.text = text
        self.deltas = list(deltas)
        self.error = error
        self.choices = choices
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            chunks = [
                SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=delta))])
                for delta in self.deltas
            ]
            # Usage-only chunk with no choices, as sent at the end of some streams.
            chunks.append(SimpleNamespace(choices=[]))
            return _aiter(chunks)
        if self.choices is not None:
            return SimpleNamespace(choices=self.choices)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.text))]
        )


class FakeOpenAI(_AsyncContext):
    def __init__(self, completions: FakeCompletions, models_error: Optional[Exception] = None):
        self.chat = SimpleNamespace(completions=completions)
        self.models_error = models_error
        self.models = SimpleNamespace(list=self._list_models)

    async def _list_models(self) -> Any:
        if self.models_error is not None:
            raise self.models_error
        return SimpleNamespace(data=[])


@pytest.mark.asyncio
async def test_openai_buffered_generation():
    completions = FakeCompletions(text="# GPT article")
    client = OpenAIClient("sk", client_factory=lambda: FakeOpenAI(completions))

    assert await client.generate("transcript body", language="English") == "# GPT article"
    call = completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert "stream" not in call
    assert "transcript body" in call["messages"][0]["content"]


@pytest.mark.asyncio
async def test_openai_stream_forwards_non_empty_deltas():
    completions = FakeCompletions(deltas=["Hel", None, "", "lo"])
    client = OpenAIClient("sk", "gpt-4o", client_factory=lambda: FakeOpenAI(completions))
    chunks: List[str] = []

    article = await client.generate("t", on_chunk=chunks.append)

    assert chunks == ["Hel", "lo"]
    assert article == "Hello"
    assert completions.calls[0]["stream"] is True
    assert completions.calls[0]["model"] == "gpt-4o"


@pytest.mark.asyncio
async def test_openai_without_choices_is_empty_response():
    completions = FakeCompletions(choices=[])
    client = OpenAIClient("sk", client_factory=lambda: FakeOpenAI(completions))

    with pytest.raises(ProviderEmptyResponseError, match="no choices"):
        await client.generate("t")


@pytest.mark.asyncio
async def test_openai_rate_limit_is_mapped():
    error = openai.RateLimitError("Too many requests", response=_response(429), body={})
    client = OpenAIClient(
        "sk", client_factory=lambda: FakeOpenAI(FakeCompletions(error=error))
    )

    with pytest.raises(ProviderRateLimitError) as exc_info:
        await client.generate("t")

    assert str(exc_info.value) == "Rate limit exceeded (429): Too many requests"
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_openai_timeout_is_mapped():
    error = openai.APITimeoutError(request=httpx.Request("POST", "https://example.com"))
    client = OpenAIClient(
        "sk", client_factory=lambda: FakeOpenAI(FakeCompletions(error=error))
    )

    with pytest.raises(ProviderTimeoutError, match="Network request timed out"):
        await client.generate("t", on_chunk=lambda _: None)


@pytest.mark.asyncio
async def test_openai_validate_key():
    good = OpenAIClient("sk", client_factory=lambda: FakeOpenAI(FakeCompletions()))
    bad_error = openai.AuthenticationError("Incorrect API key", response=_response(401), body={})
    bad = OpenAIClient(
        "sk", client_factory=lambda: FakeOpenAI(FakeCompletions(), models_error=bad_error)
    )

    assert await good.validate_api_key() is True
    assert await bad.validate_api_key() is False


def test_groq_uses_openai_sdk_against_groq_endpoint():
    client = GroqClient("gsk")

    sdk_client = client._sdk_client()

    assert isinstance(sdk_client, openai.AsyncOpenAI)
    assert str(sdk_client.base_url).rstrip("/") == "https://api.groq.com/openai/v1"
    assert sdk_client.max_retries == 0
    assert client.model == "llama-3.3-70b-versatile"


@pytest.mark.asyncio
async def test_groq_auth_failure_is_mapped():
    error = openai.AuthenticationError("Invalid API Key", response=_response(401), body={})
    client = GroqClient("gsk", client_factory=lambda: FakeOpenAI(FakeCompletions(error=error)))

    with pytest.raises(ProviderAuthenticationError, match=r"Authentication failed \(401\)"):
        await client.generate("t")


# Anthropic fakes


class FakeMessageStream(_AsyncContext):
    def __init__(self, texts: List[str]) -> None:
        self.text_stream = _aiter(texts)


class FakeMessages:
    def __init__(self, *, content=None, texts=(), error: Optional[Exception] = None):
        self.content = content if content is not None else []
        self.texts = list(texts)
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)

    def stream(self, **kwargs: Any) -> FakeMessageStream:
        self.calls.append({**kwargs, "stream": True})
        if self.error is not None:
            raise self.error
        return FakeMessageStream(self.texts)


class FakeAnthropic(_AsyncContext):
    def __init__(self, messages: FakeMessages) -> None:
        self.messages = messages


@pytest.mark.asyncio
async def test_anthropic_buffered_generation_joins_text_blocks():
    messages = FakeMessages(
        content=[
            SimpleNamespace(type="text", text="# Claude "),
            SimpleNamespace(type="text", text="article"),
        ]
    )
    client = AnthropicClient("sk-ant", client_factory=lambda: FakeAnthropic(messages))

    assert await client.generate("t") == "# Claude article"
    assert messages.calls[0]["max_tokens"] == 4096
    assert messages.calls[0]["model"] == "claude-sonnet-4-5"


@pytest.mark.asyncio
async def test_anthropic_stream_uses_text_stream():
    messages = FakeMessages(texts=["A", "B", "C"])
    client = AnthropicClient("sk-ant", client_factory=lambda: FakeAnthropic(messages))
    chunks: List[str] = []

    async def on_chunk(text: str) -> None:
        chunks.append(text)

    assert await client.generate("t", on_chunk=on_chunk) == "ABC"
    assert chunks == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_anthropic_empty_content_is_empty_response():
    client = AnthropicClient("sk-ant", client_factory=lambda: FakeAnthropic(FakeMessages()))

    with pytest.raises(ProviderEmptyResponseError):
        await client.generate("t")


@pytest.mark.asyncio
async def test_anthropic_overloaded_is_mapped():
    error = anthropic.InternalServerError("Overloaded", response=_response(529), body=None)
    client = AnthropicClient(
        "sk-ant", client_factory=lambda: FakeAnthropic(FakeMessages(error=error))
    )

    with pytest.raises(ProviderServiceUnavailableError, match=r"\(529\)"):
        await client.generate("t")


@pytest.mark.asyncio
async def test_anthropic_validate_key_sends_one_token_request():
    messages = FakeMessages(content=[SimpleNamespace(type="text", text="o")])
    client = AnthropicClient("sk-ant", client_factory=lambda: FakeAnthropic(messages))

    assert await client.validate_api_key() is True
    assert messages.calls[0]["max_tokens"] == 1


# Gemini fakes


class FakeGeminiModels:
    def __init__(self, *, response=None, chunks=(), error: Optional[Exception] = None):
        self.response = response
        self.chunks = list(chunks)
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response

    async def generate_content_stream(self, **kwargs: Any) -> Any:
        self.calls.append({**kwargs, "stream": True})
        if self.error is not None:
            raise self.error
        return _aiter(self.chunks)


def _gemini_factory(models: FakeGeminiModels):
    return lambda: SimpleNamespace(aio=SimpleNamespace(models=models))


def _gemini_response(text: Optional[str], block_reason: Optional[str] = None, finish: Optional[str] = None):
    return SimpleNamespace(
        text=text,
        prompt_feedback=SimpleNamespace(block_reason=block_reason) if block_reason else None,
        candidates=[SimpleNamespace(finish_reason=finish)] if finish else [],
    )


@pytest.mark.asyncio
async def test_gemini_buffered_generation():
    models = FakeGeminiModels(response=_gemini_response("# Gemini article"))
    client = GeminiClient("AIza", client_factory=_gemini_factory(models))

    assert await client.generate("t") == "# Gemini article"
    assert models.calls[0]["model"] == "gemini-2.5-flash"
    assert "原始文字稿" in models.calls[0]["contents"]


@pytest.mark.asyncio
async def test_gemini_stream():
    models = FakeGeminiModels(
        chunks=[_gemini_response("One "), _gemini_response(None), _gemini_response("Two")]
    )
    client = GeminiClient("AIza", "gemini-2.5-pro", client_factory=_gemini_factory(models))
    chunks: List[str] = []

    assert await client.generate("t", on_chunk=chunks.append) == "One Two"
    assert chunks == ["One ", "Two"]
    assert models.calls[0]["model"] == "gemini-2.5-pro"


@pytest.mark.asyncio
async def test_gemini_blocked_prompt_is_safety_error():
    models = FakeGeminiModels(response=_gemini_response(None, block_reason="SAFETY"))
    client = GeminiClient("AIza", client_factory=_gemini_factory(models))

    with pytest.raises(ProviderContentPolicyViolationError, match="blocked by safety filter"):
        await client.generate("t")


@pytest.mark.asyncio
async def test_gemini_safety_finish_in_stream_is_safety_error():
    models = FakeGeminiModels(chunks=[_gemini_response(None, finish="SAFETY")])
    client = GeminiClient("AIza", client_factory=_gemini_factory(models))

    with pytest.raises(ProviderContentPolicyViolationError):
        await client.generate("t", on_chunk=lambda _: None)


@pytest.mark.asyncio
async def test_gemini_quota_error_is_mapped():
    error = genai_errors.APIError(
        429,
        {"error": {"code": 429, "status": "RESOURCE_EXHAUSTED", "message": "Quota exceeded"}},
    )
    models = FakeGeminiModels(error=error)
    client = GeminiClient("AIza", client_factory=_gemini_factory(models))

    with pytest.raises(ProviderRateLimitError, match=r"\(429\)"):
        await client.generate("t")


@pytest.mark.asyncio
async def test_gemini_validate_key_never_raises():
    error = genai_errors.APIError(
        400, {"error": {"code": 400, "status": "INVALID_ARGUMENT", "message": "API key not valid"}}
    )
    client = GeminiClient("AIza", client_factory=_gemini_factory(FakeGeminiModels(error=error)))

    assert await client.validate_api_key() is False
