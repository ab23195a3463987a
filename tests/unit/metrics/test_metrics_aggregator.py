# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tests.unit.conftest import as_vu
from vuperf.common.constants import STATUS_CLASS_KEYS
from vuperf.common.exceptions import TransportError
from vuperf.metrics.metrics_aggregator import (
    MetricsAggregator,
    RequestSample,
    percentile_label,
    status_class,
)


class TestStatusClass:
    @pytest.mark.parametrize(
        "status,expected",
        [(100, "1xx"), (200, "2xx"), (201, "2xx"), (302, "3xx"), (404, "4xx"), (503, "5xx"),
         (599, "5xx"), (0, "transport_error"), (99, "transport_error"), (600, "transport_error")],
    )  # fmt: skip
    def test_buckets(self, status: int, expected: str) -> None:
        assert status_class(status) == expected

    def test_error_wins_over_status(self) -> None:
        assert status_class(200, TransportError("reset")) == "transport_error"

    @pytest.mark.parametrize(
        "status,error,failed",
        [(200, None, False), (201, None, False), (302, None, False), (404, None, True),
         (500, None, True), (0, TransportError("x"), True), (200, TransportError("x"), True)],
    )  # fmt: skip
    def test_sample_failed(self, status: int, error, failed: bool) -> None:
        assert RequestSample("GET /", status, 0.01, error).failed is failed


class TestPercentileLabel:
    @pytest.mark.parametrize("p,label", [(50, "p50"), (95.0, "p95"), (99.9, "p99.9"), (100, "p100")])  # fmt: skip
    def test_labels(self, p: float, label: str) -> None:
        assert percentile_label(p) == label


class TestMetricsAggregator:
    def test_empty(self, metrics: MetricsAggregator) -> None:
        assert dict(metrics.snapshot()) == {}
        assert metrics.total_requests == 0

    def test_single_post_created(self, metrics: MetricsAggregator) -> None:
        metrics.record("POST /pullRequest/create", 201, 0.050)
        snap = metrics.snapshot()
        assert list(snap) == ["POST /pullRequest/create"]

        endpoint = snap["POST /pullRequest/create"]
        assert endpoint.count == 1
        assert endpoint.error_count == 0 and endpoint.error_rate == 0.0
        assert endpoint.status_classes["2xx"] == 1
        assert endpoint.latency.min_ms == pytest.approx(50.0)
        assert endpoint.latency.max_ms == pytest.approx(50.0)
        assert endpoint.latency.mean_ms == pytest.approx(50.0)
        assert endpoint.latency.percentiles_ms["p95"] == pytest.approx(50.0)

    def test_every_status_class_key_present(self, metrics: MetricsAggregator) -> None:
        metrics.record("GET /", 200, 0.01)
        assert tuple(metrics.snapshot()["GET /"].status_classes) == STATUS_CLASS_KEYS

    def test_mixed_outcomes(self, metrics: MetricsAggregator) -> None:
        metrics.record("GET /users/stats", 200, 0.010)
        metrics.record("GET /users/stats", 500, 0.020)
        metrics.record("GET /users/stats", 0, 0.030, TransportError("refused"))
        endpoint = metrics.snapshot()["GET /users/stats"]
        assert endpoint.count == 3
        assert endpoint.error_count == 2
        assert endpoint.status_classes["2xx"] == 1
        assert endpoint.status_classes["5xx"] == 1
        assert endpoint.status_classes["transport_error"] == 1

    def test_configured_percentiles(self) -> None:
        metrics = MetricsAggregator(percentiles=(99, 50, 50))
        metrics.record("GET /", 200, 0.01)
        assert list(metrics.snapshot()["GET /"].latency.percentiles_ms) == ["p50", "p99"]

    def test_labels_ordered_by_first_seen(self, metrics: MetricsAggregator) -> None:
        with as_vu(5):
            metrics.record("GET /b", 200, 0.01)
        with as_vu(1):
            metrics.record("GET /a", 200, 0.01)
            metrics.record("GET /b", 200, 0.01)
        assert list(metrics.snapshot()) == ["GET /b", "GET /a"]

    def test_attributed_to_current_vu(self, metrics: MetricsAggregator) -> None:
        with as_vu(7, iteration=3):
            metrics.record("GET /", 200, 0.01)
        assert list(metrics._shards) == [7]

    def test_percentiles_track_distribution(self, metrics: MetricsAggregator) -> None:
        for ms in range(1, 1001):
            metrics.record("GET /", 200, ms / 1000)
        latency = metrics.snapshot()["GET /"].latency
        assert latency.percentiles_ms["p50"] == pytest.approx(500, rel=0.01)
        assert latency.percentiles_ms["p99"] == pytest.approx(990, rel=0.01)
        assert latency.min_ms == pytest.approx(1.0)
        assert latency.max_ms == pytest.approx(1000.0)


class TestMetricsAggregatorOrderIndependence:
    @settings(max_examples=30, deadline=None)
    @given(
        samples=st.lists(
            st.tuples(
                st.sampled_from([200, 201, 404, 500, 0]),
                st.floats(min_value=0.0, max_value=5.0, allow_nan=False),
                st.integers(min_value=1, max_value=4),
            ),
            min_size=1,
            max_size=100,
        ),
        seed=st.integers(min_value=0, max_value=2**16),
    )
    def test_permutation_and_sharding_invariant(self, samples, seed) -> None:
        def aggregate(items) -> dict:
            metrics = MetricsAggregator()
            for status, latency, vu_id in items:
                metrics.record_sample(RequestSample("GET /", status, latency, vu_id=vu_id))
            return {k: v.to_dict() for k, v in metrics.snapshot().items()}

        shuffled = list(samples)
        random.Random(seed).shuffle(shuffled)
        # Same samples, different VU assignment
        reassigned = [(s, lat, 1 + (vu % 3)) for s, lat, vu in shuffled]
        assert aggregate(samples) == aggregate(shuffled) == aggregate(reassigned)
