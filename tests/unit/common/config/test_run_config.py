# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import pytest
from pydantic import ValidationError

from vuperf.common.config import RunConfig, ThresholdConfig, validate_run_config
from vuperf.common.environment import Environment
from vuperf.common.exceptions import ConfigurationError


class TestRunConfigValidation:
    def test_defaults(self) -> None:
        config = RunConfig(duration=10)
        assert config.concurrency == 1
        assert config.max_iterations is None
        assert config.think_time == 0.0
        assert config.percentiles == (50.0, 90.0, 95.0, 99.0)
        assert config.request_timeout == Environment.ENGINE.REQUEST_TIMEOUT
        assert not config.thresholds.enabled

    @pytest.mark.parametrize(
        "options",
        [{"concurrency": 0, "duration": 1}, {"concurrency": -3, "duration": 1}, {"duration": -1},
         {"max_iterations": -1}, {"duration": 1, "think_time": -0.1},
         {"duration": 1, "think_time_jitter": 1.5}, {"duration": 1, "iteration_timeout": 0},
         {"duration": 1, "request_timeout": 0}, {"duration": 1, "unknown_option": True}],
    )  # fmt: skip
    def test_invalid_options(self, options: dict) -> None:
        with pytest.raises(ConfigurationError, match="Invalid run configuration"):
            RunConfig.from_options(**options)

    def test_direct_construction_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            RunConfig(concurrency=0, duration=1)

    def test_requires_a_stop_condition(self) -> None:
        with pytest.raises(ConfigurationError, match="stop condition"):
            RunConfig.from_options(concurrency=5)

    @pytest.mark.parametrize("options", [{"duration": 0}, {"max_iterations": 0}, {"duration": 5, "max_iterations": 10}])  # fmt: skip
    def test_zero_and_combined_stop_conditions_are_valid(self, options: dict) -> None:
        RunConfig.from_options(**options)

    def test_frozen(self) -> None:
        config = RunConfig(duration=1)
        with pytest.raises(ValidationError):
            config.concurrency = 10  # type: ignore[misc]


class TestPercentiles:
    def test_sorted_and_deduplicated(self) -> None:
        config = RunConfig(duration=1, percentiles=(99, 50, 99.9, 50))
        assert config.percentiles == (50.0, 99.0, 99.9)

    @pytest.mark.parametrize("percentiles", [(), (0,), (-5,), (100.1,), (50, 101)])  # fmt: skip
    def test_invalid(self, percentiles: tuple) -> None:
        with pytest.raises(ConfigurationError):
            RunConfig.from_options(duration=1, percentiles=percentiles)

    def test_p95_threshold_requires_p95(self) -> None:
        with pytest.raises(ConfigurationError, match="95"):
            RunConfig.from_options(
                duration=1, percentiles=(50, 99), thresholds={"latency_p95_max_ms": 100}
            )


class TestIterationTimeout:
    def test_explicit(self) -> None:
        assert RunConfig(duration=1, iteration_timeout=3).resolved_iteration_timeout == 3

    def test_derived_from_think_time_and_request_timeout(self) -> None:
        config = RunConfig(duration=1, think_time=1.0, think_time_jitter=0.5, request_timeout=5)
        expected = 1.5 + Environment.ENGINE.HARD_TIMEOUT_MULTIPLIER * 5
        assert config.resolved_iteration_timeout == pytest.approx(expected)


class TestThresholdConfig:
    @pytest.mark.parametrize(
        "options",
        [{"check_pass_rate_min": 1.1}, {"check_pass_rate_min": -0.1}, {"error_rate_max": 2},
         {"latency_p95_max_ms": 0}],
    )  # fmt: skip
    def test_invalid(self, options: dict) -> None:
        with pytest.raises(ConfigurationError):
            RunConfig.from_options(duration=1, thresholds=options)

    def test_enabled(self) -> None:
        assert ThresholdConfig(error_rate_max=0.1).enabled
        assert not ThresholdConfig().enabled


class TestValidateRunConfig:
    def test_accepts_mapping(self) -> None:
        config = validate_run_config({"concurrency": 3, "max_iterations": 9})
        assert config.concurrency == 3 and config.max_iterations == 9

    def test_revalidates_instances(self) -> None:
        bypassed = RunConfig.model_construct(concurrency=0, duration=1)
        with pytest.raises(ConfigurationError, match="concurrency"):
            validate_run_config(bypassed)

    def test_valid_instance_round_trips(self) -> None:
        config = RunConfig(concurrency=4, duration=2, thresholds={"error_rate_max": 0.1})
        assert validate_run_config(config) == config

    @pytest.mark.parametrize("value", [None, 42, "duration=1", [("duration", 1)]])  # fmt: skip
    def test_rejects_other_types(self, value) -> None:
        with pytest.raises(ConfigurationError, match="Expected a RunConfig"):
            validate_run_config(value)
