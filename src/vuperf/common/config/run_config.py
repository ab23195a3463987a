# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from vuperf.common.config.config_defaults import RunDefaults
from vuperf.common.environment import Environment
from vuperf.common.exceptions import ConfigurationError


class ThresholdConfig(BaseModel):
    """Pass/fail limits evaluated against the run summary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    check_pass_rate_min: Annotated[
        float | None,
        Field(
            ge=0,
            le=1,
            description="Minimum fraction of passing checks across all check names (0.0 to 1.0).",
        ),
    ] = None

    error_rate_max: Annotated[
        float | None,
        Field(
            ge=0,
            le=1,
            description="Maximum fraction of failed requests across all endpoints (0.0 to 1.0). "
            "A request fails on a transport error or a status code >= 400.",
        ),
    ] = None

    latency_p95_max_ms: Annotated[
        float | None,
        Field(
            gt=0,
            description="Maximum p95 latency in milliseconds, applied to every endpoint label.",
        ),
    ] = None

    @property
    def enabled(self) -> bool:
        return any(
            value is not None
            for value in (
                self.check_pass_rate_min,
                self.error_rate_max,
                self.latency_p95_max_ms,
            )
        )


class RunConfig(BaseModel):
    """Configuration for a single load run. Immutable once constructed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    concurrency: Annotated[
        int,
        Field(
            ge=1,
            description="Number of virtual users, all started at once and kept for the whole run.",
        ),
    ] = RunDefaults.CONCURRENCY

    duration: Annotated[
        float | None,
        Field(
            ge=0,
            description="Run length in seconds. VUs stop starting new iterations once it elapses.",
        ),
    ] = None

    max_iterations: Annotated[
        int | None,
        Field(
            ge=0,
            description="Total iterations to run, summed across all VUs.",
        ),
    ] = None

    think_time: Annotated[
        float,
        Field(
            ge=0,
            description="Pause in seconds between a VU's iterations.",
        ),
    ] = RunDefaults.THINK_TIME

    think_time_jitter: Annotated[
        float,
        Field(
            ge=0,
            le=1,
            description="Uniform jitter applied to think_time, as a fraction of it. "
            "0.2 means each pause is drawn from [0.8, 1.2] * think_time.",
        ),
    ] = RunDefaults.THINK_TIME_JITTER

    iteration_timeout: Annotated[
        float | None,
        Field(
            gt=0,
            description="Hard ceiling in seconds for a single iteration. An iteration that exceeds it "
            "is abandoned and its VU stops. Defaults to think_time plus a multiple of request_timeout.",
        ),
    ] = None

    request_timeout: Annotated[
        float,
        Field(
            gt=0,
            default_factory=lambda: Environment.ENGINE.REQUEST_TIMEOUT,
            description="Timeout in seconds for each HTTP request made through the built-in client.",
        ),
    ]

    base_url: Annotated[
        str | None,
        Field(description="Base URL that relative request paths are resolved against."),
    ] = None

    percentiles: Annotated[
        tuple[float, ...],
        Field(description="Latency percentiles to report, each within (0, 100]."),
    ] = RunDefaults.PERCENTILES

    sketch_relative_accuracy: Annotated[
        float,
        Field(
            gt=0,
            lt=1,
            description="Relative error bound of the latency quantile sketch.",
        ),
    ] = RunDefaults.SKETCH_RELATIVE_ACCURACY

    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)

    @field_validator("percentiles", mode="after")
    @classmethod
    def _normalize_percentiles(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if not v:
            raise ValueError("At least one percentile must be configured")
        for p in v:
            if not 0 < p <= 100:
                raise ValueError(
                    f"Invalid percentile: {p}. Percentiles must be within (0, 100], e.g. 50, 95, 99.9"
                )
        return tuple(sorted(set(v)))

    @model_validator(mode="after")
    def _validate_stop_condition(self) -> "RunConfig":
        if self.duration is None and self.max_iterations is None:
            raise ValueError(
                "A run needs a stop condition: set duration, max_iterations, or both. "
                "When both are set, whichever is reached first ends the run."
            )
        if (
            self.thresholds.latency_p95_max_ms is not None
            and 95.0 not in self.percentiles
        ):
            raise ValueError(
                "latency_p95_max_ms requires 95 to be one of the reported percentiles"
            )
        return self

    @property
    def resolved_iteration_timeout(self) -> float:
        """Effective per-iteration ceiling in seconds."""
        if self.iteration_timeout is not None:
            return self.iteration_timeout
        return (
            self.think_time * (1 + self.think_time_jitter)
            + Environment.ENGINE.HARD_TIMEOUT_MULTIPLIER * self.request_timeout
        )

    @classmethod
    def from_options(cls, **options: Any) -> "RunConfig":
        """Build a config, reporting every validation problem as a ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e


def validate_run_config(config: Any) -> RunConfig:
    """Coerce ``config`` into a valid RunConfig or raise ConfigurationError.

    Instances are re-checked so configs built with ``model_construct`` or
    ``model_copy(update=...)`` cannot bypass the run constraints.
    """
    if isinstance(config, RunConfig):
        try:
            return RunConfig.model_validate(config.model_dump())
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e
    if isinstance(config, dict):
        return RunConfig.from_options(**config)
    raise ConfigurationError(
        f"Expected a RunConfig or a mapping of options, got {type(config).__name__}"
    )


def _format_validation_error(error: ValidationError) -> str:
    lines = ["Invalid run configuration:"]
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "config"
        lines.append(f"  {location}: {err.get('msg')}")
    return "\n".join(lines)
