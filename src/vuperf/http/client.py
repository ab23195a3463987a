# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""HTTP client used by workloads.

Connection pooling and the wire protocol belong to httpx. This wrapper times
each call, converts transport failures into values instead of exceptions, and
records a request sample into the run's MetricsAggregator.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
import orjson

from vuperf.common.environment import Environment
from vuperf.common.exceptions import TransportError
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.metrics.metrics_aggregator import MetricsAggregator

__all__ = [
    "HttpClient",
    "HttpResponse",
]

Body = bytes | str | Mapping[str, Any] | list | None


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Outcome of one request. ``status`` is 0 when ``error`` is set."""

    status: int
    latency: float
    """Seconds from sending the request to receiving the full body."""
    error: TransportError | None = None
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 400

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return orjson.loads(self.body)


class HttpClient(VUPerfLoggerMixin):
    """Shared, pooled HTTP client for all VUs of a run.

    Synchronous workloads call request(); coroutine workloads await arequest().
    Both record exactly one sample per call when a MetricsAggregator is bound.

    Args:
        base_url: Prefix for relative request URLs
        metrics: Aggregator that receives one sample per request
        timeout: Per-request timeout in seconds
        headers: Headers sent with every request
        max_connections: Connection pool size
        transport: Optional httpx transport, used by both the sync and async clients
    """

    def __init__(
        self,
        base_url: str | None = None,
        metrics: MetricsAggregator | None = None,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
        max_connections: int | None = None,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or ""
        self.metrics = metrics
        self.timeout = timeout if timeout is not None else Environment.ENGINE.REQUEST_TIMEOUT
        self.headers = dict(headers or {})
        self.max_connections = max_connections or Environment.ENGINE.MAX_CONNECTIONS
        self._transport = transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None
        self._client_lock = threading.Lock()

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "headers": self.headers,
            "limits": httpx.Limits(
                max_connections=self.max_connections,
                max_keepalive_connections=self.max_connections,
            ),
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    @property
    def sync_client(self) -> httpx.Client:
        """Pooled sync client, created once even when worker threads race on first use."""
        client = self._client
        if client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(**self._client_kwargs())
                client = self._client
        return client

    @property
    def async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(**self._client_kwargs())
        return self._async_client

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: Body = None,
        name: str | None = None,
    ) -> HttpResponse:
        """Send a request and block until the full response arrives."""
        content, headers = _encode_body(body, headers)
        start = time.perf_counter()
        try:
            resp = self.sync_client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as e:
            return self._failed(method, url, name, time.perf_counter() - start, e)
        return self._completed(method, url, name, time.perf_counter() - start, resp)

    async def arequest(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: Body = None,
        name: str | None = None,
    ) -> HttpResponse:
        """Async variant of request() for coroutine workloads."""
        content, headers = _encode_body(body, headers)
        start = time.perf_counter()
        try:
            resp = await self.async_client.request(
                method, url, headers=headers, content=content
            )
        except httpx.RequestError as e:
            return self._failed(method, url, name, time.perf_counter() - start, e)
        return self._completed(method, url, name, time.perf_counter() - start, resp)

    def get(self, url: str, **kwargs) -> HttpResponse:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, body: Body = None, **kwargs) -> HttpResponse:
        return self.request("POST", url, body=body, **kwargs)

    async def aget(self, url: str, **kwargs) -> HttpResponse:
        return await self.arequest("GET", url, **kwargs)

    async def apost(self, url: str, body: Body = None, **kwargs) -> HttpResponse:
        return await self.arequest("POST", url, body=body, **kwargs)

    def close(self) -> None:
        with self._client_lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()

    async def aclose(self) -> None:
        self.close()
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None

    def _completed(
        self, method: str, url: str, name: str | None, latency: float, resp: httpx.Response
    ) -> HttpResponse:
        if self.is_trace_enabled:
            self.trace(f"{method} {url} -> {resp.status_code} in {latency * 1000:.2f}ms")
        if self.metrics is not None:
            self.metrics.record(_label(method, url, name), resp.status_code, latency)
        return HttpResponse(
            status=resp.status_code,
            latency=latency,
            body=resp.content,
            headers=dict(resp.headers),
            url=str(resp.url),
        )

    def _failed(
        self, method: str, url: str, name: str | None, latency: float, exc: httpx.RequestError
    ) -> HttpResponse:
        kind = "timeout" if isinstance(exc, httpx.TimeoutException) else "transport"
        error = TransportError(f"{method} {url} failed: {exc!r}", kind=kind)
        error.__cause__ = exc
        if self.is_debug_enabled:
            self.debug(str(error))
        if self.metrics is not None:
            self.metrics.record(_label(method, url, name), 0, latency, error)
        return HttpResponse(status=0, latency=latency, error=error, url=url)


def _label(method: str, url: str, name: str | None) -> str:
    if name:
        return name
    path = httpx.URL(url).path or "/"
    return f"{method.upper()} {path}"


def _encode_body(
    body: Body, headers: Mapping[str, str] | None
) -> tuple[bytes | None, dict[str, str]]:
    headers = dict(headers or {})
    if body is None:
        return None, headers
    if isinstance(body, bytes):
        return body, headers
    if isinstance(body, str):
        return body.encode("utf-8"), headers
    if not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = "application/json"
    return orjson.dumps(body), headers
