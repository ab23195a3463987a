# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import functools

import orjson
import pytest

from tests.unit.conftest import failing_transport, status_transport
from vuperf import cli
from vuperf.common.config import ExitCodes
from vuperf.engine.controller import RunController
from vuperf.scenarios import get_scenario


@pytest.fixture
def mock_target(monkeypatch):
    """Point the CLI's RunController at an in-memory transport."""

    def install(transport) -> None:
        monkeypatch.setattr(
            cli,
            "RunController",
            functools.partial(RunController, transport=transport, handle_signals=False),
        )

    return install


class TestBuildRunOptions:
    def test_scenario_defaults(self) -> None:
        options = cli.build_run_options(get_scenario("read-stats"))
        assert options == {
            "concurrency": 20,
            "duration": 30.0,
            "think_time": 0.1,
            "base_url": "http://localhost:8080",
        }

    def test_overrides(self) -> None:
        options = cli.build_run_options(
            get_scenario("create-pull-request"),
            base_url="http://api:9000",
            vus=3,
            duration=5,
            think_time=0,
            jitter=0.2,
            iteration_timeout=2,
        )
        assert options == {
            "concurrency": 3,
            "duration": 5,
            "think_time": 0,
            "think_time_jitter": 0.2,
            "iteration_timeout": 2,
            "base_url": "http://api:9000",
        }

    def test_iterations_replace_default_duration(self) -> None:
        options = cli.build_run_options(get_scenario("read-stats"), iterations=10)
        assert options["max_iterations"] == 10 and options["duration"] is None

    def test_iterations_with_explicit_duration(self) -> None:
        options = cli.build_run_options(get_scenario("read-stats"), iterations=10, duration=2)
        assert options["max_iterations"] == 10 and options["duration"] == 2

    def test_thresholds(self) -> None:
        options = cli.build_run_options(
            get_scenario("read-stats"), error_rate_max=0.01, latency_p95_max_ms=250
        )
        assert options["thresholds"] == {"error_rate_max": 0.01, "latency_p95_max_ms": 250}


class TestRunCommand:
    def test_unknown_scenario(self) -> None:
        assert cli.run("nope") == ExitCodes.CONFIGURATION_ERROR

    @pytest.mark.parametrize("options", [{"vus": 0}, {"jitter": 2.0}, {"duration": -1}])  # fmt: skip
    def test_invalid_options(self, options: dict) -> None:
        assert cli.run("read-stats", **options) == ExitCodes.CONFIGURATION_ERROR

    def test_success(self, mock_target, tmp_path, capsys) -> None:
        mock_target(status_transport(200))
        export = tmp_path / "summary.json"
        code = cli.run(
            "read-stats", vus=2, iterations=4, think_time=0, summary_export=export
        )
        assert code == ExitCodes.SUCCESS
        data = orjson.loads(export.read_bytes())
        assert data["total_iterations"] == 4
        assert data["outcome"] == "passed"
        assert "Run Summary" in capsys.readouterr().out

    def test_failed_threshold(self, mock_target) -> None:
        mock_target(failing_transport())
        code = cli.run(
            "create-pull-request", vus=1, iterations=2, think_time=0, error_rate_max=0.0
        )
        assert code == ExitCodes.THRESHOLDS_FAILED

    def test_failures_without_thresholds_still_succeed(self, mock_target) -> None:
        mock_target(failing_transport())
        assert cli.run("read-stats", vus=1, iterations=1, think_time=0) == ExitCodes.SUCCESS


class TestScenariosCommand:
    def test_lists_scenarios(self, capsys) -> None:
        assert cli.scenarios() == ExitCodes.SUCCESS
        output = capsys.readouterr().out
        assert "read-stats" in output and "create-pull-request" in output
