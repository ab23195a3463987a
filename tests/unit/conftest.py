# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for vuperf unit tests."""

import contextlib
import time
from collections.abc import Iterator

import httpx
import pytest

from vuperf.engine.context import VUContext, current_vu
from vuperf.metrics.check_recorder import CheckRecorder
from vuperf.metrics.metrics_aggregator import MetricsAggregator


@pytest.fixture
def check_recorder() -> CheckRecorder:
    return CheckRecorder()


@pytest.fixture
def metrics() -> MetricsAggregator:
    return MetricsAggregator()


@contextlib.contextmanager
def as_vu(vu_id: int, iteration: int = 0, **kwargs) -> Iterator[VUContext]:
    """Run the block as if it were iteration ``iteration`` of VU ``vu_id``."""
    ctx = VUContext(vu_id=vu_id, iteration=iteration, started_at=time.time(), **kwargs)
    token = current_vu.set(ctx)
    try:
        yield ctx
    finally:
        current_vu.reset(token)


def status_transport(status: int = 200, body: bytes = b"{}") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=body, request=request)

    return httpx.MockTransport(handler)


def failing_transport(
    exc_type: type[httpx.RequestError] = httpx.ConnectError,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("connection refused", request=request)

    return httpx.MockTransport(handler)
