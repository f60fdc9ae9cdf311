"""Raw ``httpx`` client for vendors exposing an OpenAI-style chat endpoint."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

from yt2blog.core.providers.base import EmitFn, HttpProviderClient
from yt2blog.core.providers.errors import ProviderEmptyResponseError
from yt2blog.core.providers.streaming import iter_sse_json
from yt2blog.utils.log import get_logger

logger = get_logger()


def _delta_text(payload: Dict[str, Any]) -> str:
    choices = payload.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else ""


class OpenAICompatibleClient(HttpProviderClient):
    """POST ``{base_url}/chat/completions`` with Bearer auth.

    Streaming responses are SSE ``data:`` lines terminated by ``[DONE]``.
    """

    temperature: ClassVar[Optional[float]] = None

    def _request_body(self, prompt: str, *, stream: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": stream,
        }
        if self.temperature is not None:
            body["temperature"] = self.temperature
        return body

    async def _complete(self, prompt: str) -> str:
        async with self._http_client() as client:
            response = await client.post(
                self._url("chat/completions"),
                json=self._request_body(prompt, stream=False),
                headers=self._headers(),
            )
            await self._raise_for_status(response)
            data = response.json()

        choices = data.get("choices") or []
        if not choices:
            raise ProviderEmptyResponseError(
                f"{self.DESCRIPTOR.display_name} returned no choices"
            )
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    async def _stream(self, prompt: str, emit: EmitFn) -> None:
        async with self._http_client() as client:
            async with client.stream(
                "POST",
                self._url("chat/completions"),
                json=self._request_body(prompt, stream=True),
                headers=self._headers(),
            ) as response:
                await self._raise_for_status(response)
                async for payload in iter_sse_json(response.aiter_text()):
                    await emit(_delta_text(payload))

    async def _check_key(self) -> None:
        async with self._http_client() as client:
            response = await client.get(self._url("models"), headers=self._headers())
            await self._raise_for_status(response)
