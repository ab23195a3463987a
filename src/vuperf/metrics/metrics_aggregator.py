# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Per-endpoint request timing and status aggregation."""

import itertools
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from vuperf.common.config.config_defaults import RunDefaults
from vuperf.common.constants import MILLIS_PER_SECOND, STATUS_CLASS_KEYS
from vuperf.common.models import EndpointSummary, LatencySummary
from vuperf.engine.context import current_vu
from vuperf.metrics.check_recorder import UNATTRIBUTED_VU_ID
from vuperf.metrics.sketch import LatencySketch

__all__ = [
    "MetricsAggregator",
    "RequestSample",
    "percentile_label",
    "status_class",
]

TRANSPORT_ERROR_CLASS = "transport_error"


@dataclass(frozen=True, slots=True)
class RequestSample:
    endpoint_label: str
    status_code: int
    latency: float
    """Seconds."""
    error: BaseException | None = None
    vu_id: int = UNATTRIBUTED_VU_ID
    iteration: int = 0

    @property
    def status_class(self) -> str:
        return status_class(self.status_code, self.error)

    @property
    def failed(self) -> bool:
        return self.error is not None or not 100 <= self.status_code < 400


def status_class(status_code: int, error: BaseException | None = None) -> str:
    """Bucket a response into 1xx..5xx, or transport_error when no valid status arrived."""
    if error is not None or not 100 <= status_code < 600:
        return TRANSPORT_ERROR_CLASS
    return f"{status_code // 100}xx"


def percentile_label(p: float) -> str:
    """50 -> 'p50', 99.9 -> 'p99.9'."""
    return f"p{p:g}"


class _EndpointStats:
    __slots__ = ("count", "error_count", "status_classes", "sketch")

    def __init__(self, relative_accuracy: float) -> None:
        self.count = 0
        self.error_count = 0
        self.status_classes = dict.fromkeys(STATUS_CLASS_KEYS, 0)
        self.sketch = LatencySketch(relative_accuracy)

    def add(self, sample: RequestSample) -> None:
        self.count += 1
        self.status_classes[sample.status_class] += 1
        if sample.failed:
            self.error_count += 1
        self.sketch.add(sample.latency)

    def merge_into(self, target: "_EndpointStats") -> None:
        target.count += self.count
        target.error_count += self.error_count
        for key, value in self.status_classes.items():
            target.status_classes[key] += value
        target.sketch.merge(self.sketch)


class _MetricsShard:
    __slots__ = ("lock", "endpoints", "first_seen")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.endpoints: dict[str, _EndpointStats] = {}
        self.first_seen: dict[str, int] = {}


class MetricsAggregator:
    """Accumulates request samples from many concurrent VUs.

    Like CheckRecorder, each VU writes into its own shard and snapshot() merges
    them. Latencies go into a LatencySketch per shard and label, so memory stays
    bounded for long runs and merged percentiles do not depend on arrival order.

    Args:
        percentiles: Percentiles to report, within (0, 100]
        relative_accuracy: Relative error bound of the latency sketch
    """

    def __init__(
        self,
        percentiles: Sequence[float] = RunDefaults.PERCENTILES,
        relative_accuracy: float = RunDefaults.SKETCH_RELATIVE_ACCURACY,
    ) -> None:
        self.percentiles = tuple(sorted(set(percentiles)))
        self.relative_accuracy = relative_accuracy
        self._shards: dict[int, _MetricsShard] = {}
        self._sequence = itertools.count()

    def record(
        self,
        endpoint_label: str,
        status_code: int,
        latency: float,
        error: BaseException | None = None,
    ) -> None:
        """Record one request, attributed to the calling VU iteration."""
        ctx = current_vu.get()
        if ctx is None:
            sample = RequestSample(endpoint_label, status_code, latency, error)
        else:
            sample = RequestSample(
                endpoint_label, status_code, latency, error, ctx.vu_id, ctx.iteration
            )
        self.record_sample(sample)

    def record_sample(self, sample: RequestSample) -> None:
        shard = self._shard(sample.vu_id)
        with shard.lock:
            stats = shard.endpoints.get(sample.endpoint_label)
            if stats is None:
                stats = shard.endpoints[sample.endpoint_label] = _EndpointStats(
                    self.relative_accuracy
                )
                shard.first_seen[sample.endpoint_label] = next(self._sequence)
            stats.add(sample)

    def snapshot(self) -> Mapping[str, EndpointSummary]:
        """Immutable ``label -> EndpointSummary`` mapping, ordered by first-seen label."""
        merged: dict[str, _EndpointStats] = {}
        first_seen: dict[str, int] = {}
        for shard in list(self._shards.values()):
            with shard.lock:
                for label, stats in shard.endpoints.items():
                    target = merged.get(label)
                    if target is None:
                        target = merged[label] = _EndpointStats(self.relative_accuracy)
                    stats.merge_into(target)
                    seq = shard.first_seen[label]
                    if label not in first_seen or seq < first_seen[label]:
                        first_seen[label] = seq

        return MappingProxyType(
            {
                label: self._summarize(merged[label])
                for label in sorted(merged, key=first_seen.__getitem__)
            }
        )

    @property
    def total_requests(self) -> int:
        return sum(e.count for e in self.snapshot().values())

    def _summarize(self, stats: _EndpointStats) -> EndpointSummary:
        sketch = stats.sketch
        if sketch.count == 0:
            latency = LatencySummary()
        else:
            values = sketch.quantiles([p / 100 for p in self.percentiles])
            latency = LatencySummary(
                min_ms=sketch.min * MILLIS_PER_SECOND,
                max_ms=sketch.max * MILLIS_PER_SECOND,
                mean_ms=sketch.mean * MILLIS_PER_SECOND,
                percentiles_ms={
                    percentile_label(p): v * MILLIS_PER_SECOND
                    for p, v in zip(self.percentiles, values, strict=True)
                },
            )
        return EndpointSummary(
            count=stats.count,
            status_classes=dict(stats.status_classes),
            error_count=stats.error_count,
            latency=latency,
        )

    def _shard(self, vu_id: int) -> _MetricsShard:
        shard = self._shards.get(vu_id)
        if shard is None:
            shard = self._shards.setdefault(vu_id, _MetricsShard())
        return shard
