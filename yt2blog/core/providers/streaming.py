"""Line framing for raw HTTP streaming responses (SSE and NDJSON)."""

from __future__ import annotations

import json
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Optional

from yt2blog.utils.log import get_logger

logger = get_logger()

SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"


class LineBuffer:
    """Accumulate network reads and hand back complete lines.

    A read may end in the middle of a line; the trailing fragment is kept
    until a later read (or ``flush``) completes it.
    """

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> List[str]:
        if not text:
            return []
        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        remainder, self._pending = self._pending.rstrip("\r"), ""
        return [remainder] if remainder.strip() else []


def parse_json_line(line: str) -> Optional[Dict[str, Any]]:
    """Decode one JSON object line; malformed or non-object lines return None."""
    stripped = line.strip()
    if not stripped:
        return None
    try:
        payload = json.loads(stripped)
    except json.JSONDecodeError:
        logger.debug(
            "[streaming] Skipping malformed JSON line",
            extra={"line_preview": stripped[:80]},
        )
        return None
    return payload if isinstance(payload, dict) else None


def parse_sse_data_line(line: str) -> Optional[Dict[str, Any]]:
    """Return the JSON payload of an SSE ``data:`` line.

    Comments, other fields, the ``[DONE]`` sentinel and malformed payloads
    all yield None.
    """
    stripped = line.strip()
    if not stripped.startswith(SSE_DATA_PREFIX):
        return None
    data = stripped[len(SSE_DATA_PREFIX) :].strip()
    if not data or data == SSE_DONE_SENTINEL:
        return None
    return parse_json_line(data)


async def iter_lines(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """Re-frame arbitrarily split text reads into complete lines."""
    buffer = LineBuffer()
    async for chunk in chunks:
        for line in buffer.feed(chunk):
            yield line
    for line in buffer.flush():
        yield line


async def iter_sse_json(chunks: AsyncIterable[str]) -> AsyncIterator[Dict[str, Any]]:
    """Yield decoded JSON payloads from an SSE text stream."""
    async for line in iter_lines(chunks):
        payload = parse_sse_data_line(line)
        if payload is not None:
            yield payload


async def iter_ndjson(chunks: AsyncIterable[str]) -> AsyncIterator[Dict[str, Any]]:
    """Yield decoded objects from a newline-delimited JSON text stream."""
    async for line in iter_lines(chunks):
        payload = parse_json_line(line)
        if payload is not None:
            yield payload
