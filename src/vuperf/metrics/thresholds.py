# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Pass/fail thresholds evaluated against the final aggregates."""

from collections.abc import Mapping

from vuperf.common.config import ThresholdConfig
from vuperf.common.models import CheckSummary, EndpointSummary, ThresholdResult

__all__ = [
    "evaluate_thresholds",
]


def evaluate_thresholds(
    thresholds: ThresholdConfig,
    checks: Mapping[str, CheckSummary],
    endpoints: Mapping[str, EndpointSummary],
) -> list[ThresholdResult]:
    """Evaluate every configured threshold.

    A threshold with no data to evaluate (no checks recorded, no requests made)
    fails, so a run that never reached the target cannot pass its gates.
    """
    results: list[ThresholdResult] = []

    if thresholds.check_pass_rate_min is not None:
        passes = sum(c.pass_count for c in checks.values())
        total = sum(c.total for c in checks.values())
        actual = passes / total if total else None
        results.append(
            ThresholdResult(
                name="check_pass_rate_min",
                limit=thresholds.check_pass_rate_min,
                actual=actual,
                passed=actual is not None and actual >= thresholds.check_pass_rate_min,
            )
        )

    if thresholds.error_rate_max is not None:
        errors = sum(e.error_count for e in endpoints.values())
        total = sum(e.count for e in endpoints.values())
        actual = errors / total if total else None
        results.append(
            ThresholdResult(
                name="error_rate_max",
                limit=thresholds.error_rate_max,
                actual=actual,
                passed=actual is not None and actual <= thresholds.error_rate_max,
            )
        )

    if thresholds.latency_p95_max_ms is not None:
        limit = thresholds.latency_p95_max_ms
        if not endpoints:
            results.append(
                ThresholdResult(
                    name="latency_p95_max_ms", limit=limit, actual=None, passed=False
                )
            )
        for label, endpoint in endpoints.items():
            actual = endpoint.latency.percentiles_ms.get("p95")
            results.append(
                ThresholdResult(
                    name=f"latency_p95_max_ms[{label}]",
                    limit=limit,
                    actual=actual,
                    passed=actual is not None and actual <= limit,
                )
            )

    return results
