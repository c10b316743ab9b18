"""
HTTP executor shared by all provider adapters.

Wraps an ``httpx.AsyncClient``: enforces the per-attempt deadline, maps
non-2xx responses and transport failures through the provider's
``ErrorMapper`` and retries through ``RetryManager``. Streaming requests are
only retried until a successful response head has been received; once bytes
are flowing a failure is surfaced to the consumer.

Besides httpx's per-phase timeouts, each attempt runs under an overall
deadline of ``timeout`` seconds; for streams it covers the response head only.
"""

import asyncio
import json
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import ErrorKind, MappedError, ProviderError
from ..providers.errors import ErrorMapper
from ..reliability.retry import RetryConfig, RetryManager


class HttpExecutor:
    """Sends JSON requests for one provider and normalizes failures."""

    def __init__(
        self,
        error_mapper: ErrorMapper,
        timeout: float,
        retry_config: RetryConfig,
        client: Optional[httpx.AsyncClient] = None,
        retry_manager: Optional[RetryManager] = None,
    ):
        self.error_mapper = error_mapper
        self.timeout = timeout
        self.retry_config = retry_config
        self.retry_manager = retry_manager or RetryManager(error_mapper)
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazily created client (unless one was supplied)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post_json(self, url: str, payload: Dict[str, Any], headers: Mapping[str, str]) -> Dict[str, Any]:
        """POST with retries and return the decoded JSON body."""
        return await self.retry_manager.execute(
            lambda: self.post_json_once(url, payload, headers), self.retry_config
        )

    async def post_json_once(self, url: str, payload: Dict[str, Any], headers: Mapping[str, str]) -> Dict[str, Any]:
        """Single POST attempt without retries."""
        return await self._request_json_once("POST", url, headers, json=payload)

    async def get_json(
        self, url: str, headers: Mapping[str, str], params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """GET with retries and return the decoded JSON body."""
        return await self.retry_manager.execute(
            lambda: self._request_json_once("GET", url, headers, params=params), self.retry_config
        )

    async def _request_json_once(self, method: str, url: str, headers: Mapping[str, str], **kwargs: Any) -> Dict[str, Any]:
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, headers=dict(headers), timeout=self.timeout, **kwargs),
                self.timeout,
            )
        except (httpx.TransportError, asyncio.TimeoutError) as e:
            raise self.transport_error(e) from e

        if response.status_code >= 400:
            raise self.response_error(response, response.content)

        try:
            return response.json()
        except ValueError as e:
            raise self.error_mapper.to_exception(
                MappedError(
                    kind=ErrorKind.UNKNOWN,
                    message=f"Invalid JSON in response body: {e}",
                    status_code=response.status_code,
                ),
                original_error=e,
            ) from e

    async def open_stream(self, url: str, payload: Dict[str, Any], headers: Mapping[str, str]) -> httpx.Response:
        """
        Open a streaming POST, retrying until the response head is 2xx.

        The caller owns the returned response and must ``aclose()`` it.
        """
        return await self.retry_manager.execute(
            lambda: self._open_stream_once(url, payload, headers), self.retry_config
        )

    async def _open_stream_once(self, url: str, payload: Dict[str, Any], headers: Mapping[str, str]) -> httpx.Response:
        request = self.client.build_request(
            "POST", url, json=payload, headers=dict(headers), timeout=self.timeout
        )
        try:
            response = await asyncio.wait_for(self.client.send(request, stream=True), self.timeout)
        except (httpx.TransportError, asyncio.TimeoutError) as e:
            raise self.transport_error(e) from e

        if response.status_code >= 400:
            try:
                body = await response.aread()
            finally:
                await response.aclose()
            raise self.response_error(response, body)
        return response

    def response_error(self, response: httpx.Response, body: bytes) -> ProviderError:
        try:
            data: Any = json.loads(body) if body else ""
        except ValueError:
            data = body.decode("utf-8", errors="replace")
        mapped = self.error_mapper.map(data, status_code=response.status_code, headers=response.headers)
        return self.error_mapper.to_exception(mapped, original_error=data)

    def transport_error(self, error: Exception) -> ProviderError:
        if isinstance(error, asyncio.TimeoutError):
            mapped = self.error_mapper.map_timeout(f"no response within {self.timeout:g}s")
        else:
            mapped = self.error_mapper.map(error)
        return self.error_mapper.to_exception(mapped, original_error=error)
