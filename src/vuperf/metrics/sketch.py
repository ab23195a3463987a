# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Bounded-memory latency quantile sketch.

LatencySketch is a log-bucketed sketch in the style of DDSketch. A value ``x``
lands in bucket ``ceil(log_gamma(x))`` where ``gamma = (1 + a) / (1 - a)``, so
every reported quantile is within relative error ``a`` of the true sample
quantile. Buckets only hold counts, which makes the sketch insensitive to
insertion order and trivially mergeable.

Memory grows with the logarithm of the value range, not the sample count: at
the default 1% accuracy, one microsecond to one hour spans about 1,100 buckets.
"""

import math
from collections import Counter

import numpy as np

from vuperf.common.constants import NANOS_PER_SECOND

DEFAULT_RELATIVE_ACCURACY = 0.01
MIN_INDEXABLE_SECONDS = 1e-6


class LatencySketch:
    """Mergeable quantile sketch over non-negative latencies in seconds.

    Count, sum, min and max are tracked exactly. The sum is kept in integer
    nanoseconds so the mean does not depend on the order samples arrived in.
    """

    __slots__ = (
        "relative_accuracy",
        "_gamma",
        "_log_gamma",
        "_bins",
        "_zero_count",
        "count",
        "_sum_ns",
        "min",
        "max",
    )

    def __init__(self, relative_accuracy: float = DEFAULT_RELATIVE_ACCURACY) -> None:
        if not 0 < relative_accuracy < 1:
            raise ValueError(
                f"Invalid relative accuracy: {relative_accuracy}. "
                "Must be between 0 and 1 (exclusive), e.g. 0.01 for 1%."
            )
        self.relative_accuracy = relative_accuracy
        self._gamma = (1 + relative_accuracy) / (1 - relative_accuracy)
        self._log_gamma = math.log(self._gamma)
        self._bins: Counter[int] = Counter()
        self._zero_count = 0
        self.count = 0
        self._sum_ns = 0
        self.min = math.inf
        self.max = -math.inf

    def __len__(self) -> int:
        return self.count

    @property
    def num_buckets(self) -> int:
        return len(self._bins) + (1 if self._zero_count else 0)

    @property
    def sum(self) -> float:
        return self._sum_ns / NANOS_PER_SECOND

    @property
    def mean(self) -> float | None:
        if self.count == 0:
            return None
        return self._sum_ns / self.count / NANOS_PER_SECOND

    def add(self, value: float) -> None:
        """Add one latency sample, in seconds. Negative values are clamped to 0."""
        value = max(float(value), 0.0)
        if value < MIN_INDEXABLE_SECONDS:
            self._zero_count += 1
        else:
            self._bins[self._index(value)] += 1
        self.count += 1
        self._sum_ns += round(value * NANOS_PER_SECOND)
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value

    def merge(self, other: "LatencySketch") -> None:
        """Fold another sketch into this one. Both must share the same accuracy."""
        if other.relative_accuracy != self.relative_accuracy:
            raise ValueError(
                "Cannot merge sketches with different relative accuracy: "
                f"{self.relative_accuracy} vs {other.relative_accuracy}"
            )
        if other.count == 0:
            return
        self._bins.update(other._bins)
        self._zero_count += other._zero_count
        self.count += other.count
        self._sum_ns += other._sum_ns
        self.min = min(self.min, other.min)
        self.max = max(self.max, other.max)

    def copy(self) -> "LatencySketch":
        clone = LatencySketch(self.relative_accuracy)
        clone.merge(self)
        return clone

    def quantile(self, q: float) -> float | None:
        """Return the approximate ``q`` quantile (0 <= q <= 1), or None when empty."""
        if not 0 <= q <= 1:
            raise ValueError(f"Quantile must be within [0, 1], got {q}")
        if self.count == 0:
            return None
        return float(self.quantiles([q])[0])

    def quantiles(self, qs: list[float]) -> list[float]:
        """Vectorized form of quantile() for several ranks at once."""
        if self.count == 0:
            return [math.nan] * len(qs)

        keys = np.array(sorted(self._bins), dtype=np.int64)
        counts = np.array([self._bins[k] for k in keys], dtype=np.int64)
        cumulative = np.cumsum(counts) + self._zero_count

        ranks = np.asarray(qs, dtype=np.float64) * (self.count - 1)
        results: list[float] = []
        for rank in ranks:
            if rank < self._zero_count:
                results.append(self.min)
                continue
            pos = int(np.searchsorted(cumulative, rank, side="right"))
            pos = min(pos, len(keys) - 1)
            estimate = self._value(int(keys[pos]))
            # Bucket midpoints can overshoot the observed extremes
            results.append(min(max(estimate, self.min), self.max))
        return results

    def _index(self, value: float) -> int:
        return math.ceil(math.log(value) / self._log_gamma)

    def _value(self, index: int) -> float:
        return 2 * self._gamma**index / (self._gamma + 1)
