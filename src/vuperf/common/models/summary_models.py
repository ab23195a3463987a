# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Immutable aggregates produced by the recorders and the run controller."""

from pydantic import Field

from vuperf.common.enums import RunOutcome, StopReason
from vuperf.common.models.base_models import VUPerfBaseModel


class CheckSummary(VUPerfBaseModel):
    """Pass/fail tally for one check name."""

    pass_count: int = Field(ge=0)
    fail_count: int = Field(ge=0)

    @property
    def total(self) -> int:
        return self.pass_count + self.fail_count

    @property
    def pass_rate(self) -> float | None:
        if self.total == 0:
            return None
        return self.pass_count / self.total

    def to_dict(self) -> dict:
        return {
            "pass_count": self.pass_count,
            "fail_count": self.fail_count,
            "pass_rate": self.pass_rate,
        }


class LatencySummary(VUPerfBaseModel):
    """Latency statistics in milliseconds. All None when no samples were recorded."""

    min_ms: float | None = None
    max_ms: float | None = None
    mean_ms: float | None = None
    percentiles_ms: dict[str, float] = Field(
        default_factory=dict,
        description="Keyed by label such as 'p50' or 'p99.9'.",
    )


class EndpointSummary(VUPerfBaseModel):
    """Request statistics for one endpoint label."""

    count: int = Field(ge=0)
    status_classes: dict[str, int]
    error_count: int = Field(ge=0)
    latency: LatencySummary

    @property
    def error_rate(self) -> float | None:
        if self.count == 0:
            return None
        return self.error_count / self.count

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["error_rate"] = self.error_rate
        return data


class ThresholdResult(VUPerfBaseModel):
    name: str
    limit: float
    actual: float | None
    passed: bool


class RunSummary(VUPerfBaseModel):
    """Final, read-only snapshot of a run, computed after every VU stopped."""

    vus: int
    elapsed_seconds: float
    stop_reason: StopReason | None
    total_iterations: int
    failed_iterations: int
    timed_out_iterations: int
    shutdown_timeouts: int = 0
    checks: dict[str, CheckSummary]
    endpoints: dict[str, EndpointSummary]
    thresholds: list[ThresholdResult] = Field(default_factory=list)

    @property
    def total_requests(self) -> int:
        return sum(e.count for e in self.endpoints.values())

    @property
    def failed_requests(self) -> int:
        return sum(e.error_count for e in self.endpoints.values())

    @property
    def outcome(self) -> RunOutcome:
        if self.total_requests == 0:
            return RunOutcome.NO_REQUESTS
        if self.failed_requests == self.total_requests:
            return RunOutcome.ALL_FAILED
        if (
            self.failed_requests
            or self.failed_iterations
            or any(c.fail_count for c in self.checks.values())
        ):
            return RunOutcome.DEGRADED
        return RunOutcome.PASSED

    @property
    def passed(self) -> bool:
        """False when any configured threshold was breached."""
        return all(t.passed for t in self.thresholds)

    @property
    def iterations_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.total_iterations / self.elapsed_seconds

    def to_dict(self) -> dict:
        return {
            "vus": self.vus,
            "elapsed_seconds": self.elapsed_seconds,
            "stop_reason": str(self.stop_reason) if self.stop_reason else None,
            "outcome": str(self.outcome),
            "passed": self.passed,
            "total_iterations": self.total_iterations,
            "failed_iterations": self.failed_iterations,
            "timed_out_iterations": self.timed_out_iterations,
            "shutdown_timeouts": self.shutdown_timeouts,
            "iterations_per_second": self.iterations_per_second,
            "total_requests": self.total_requests,
            "failed_requests": self.failed_requests,
            "checks": {name: c.to_dict() for name, c in self.checks.items()},
            "endpoints": {
                label: e.to_dict() for label, e in self.endpoints.items()
            },
            "thresholds": [t.to_dict() for t in self.thresholds],
        }
