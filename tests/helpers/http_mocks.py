"""Helpers for faking vendor HTTP APIs with httpx.MockTransport."""

import asyncio
import json
from collections import deque
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterable, List, Optional, Union

import httpx

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def json_response(data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    """Create a JSON response."""
    return httpx.Response(status_code, json=data, headers=headers)


async def _aiter(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


def sse_lines(payloads: Iterable[Any], done: bool = True) -> bytes:
    """Sentinel-style body: one ``data:`` line per payload, then ``[DONE]``."""
    lines = [f"data: {json.dumps(p) if not isinstance(p, str) else p}\n\n" for p in payloads]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


def sse_events(events: Iterable[Dict[str, Any]]) -> bytes:
    """Block-style body: ``event:`` + ``data:`` records separated by blank lines."""
    records = [f"event: {event['type']}\ndata: {json.dumps(event)}\n\n" for event in events]
    return "".join(records).encode()


def split_bytes(body: bytes, size: int) -> List[bytes]:
    """Cut a body into fixed-size chunks, ignoring record boundaries."""
    return [body[i:i + size] for i in range(0, len(body), size)]


def stream_response(body_or_chunks: Union[bytes, List[bytes]], status_code: int = 200) -> httpx.Response:
    """Create an event-stream response delivered in the given chunks."""
    chunks = [body_or_chunks] if isinstance(body_or_chunks, bytes) else body_or_chunks
    return httpx.Response(
        status_code,
        content=_aiter(chunks),
        headers={"content-type": "text/event-stream"},
    )


def failing_stream_response(chunks: List[bytes], error: Exception) -> httpx.Response:
    """Stream that delivers ``chunks`` and then fails with ``error``."""

    async def body():
        for chunk in chunks:
            yield chunk
        raise error

    return httpx.Response(200, content=body(), headers={"content-type": "text/event-stream"})


def trickling_response(chunks: List[bytes], interval: float, content_type: str = "application/json") -> httpx.Response:
    """Response whose body arrives piece by piece, ``interval`` seconds apart."""

    async def body():
        for chunk in chunks:
            await asyncio.sleep(interval)
            yield chunk

    return httpx.Response(200, content=body(), headers={"content-type": content_type})


def delayed(response: httpx.Response, delay: float) -> Callable[[httpx.Request], Awaitable[httpx.Response]]:
    """Responder that holds back the response head for ``delay`` seconds."""

    async def responder(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(delay)
        return response

    return responder


class MockServer:
    """Serves queued responses in order and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: deque = deque()

    def enqueue(self, *responses: Responder) -> "MockServer":
        self._responses.extend(responses)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        responder = self._responses.popleft()
        if callable(responder) and not isinstance(responder, httpx.Response):
            return responder(request)
        return responder

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def raise_error(error_factory: Callable[[httpx.Request], Exception]) -> Callable[[httpx.Request], httpx.Response]:
    """Responder raising a transport error for the request."""

    def responder(request: httpx.Request) -> httpx.Response:
        raise error_factory(request)

    return responder


class FakeSleep:
    """Async sleep replacement recording requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
