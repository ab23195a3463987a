# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line entry point: ``vuperf run <scenario>`` and ``vuperf scenarios``."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from vuperf.common.config import CLIDefaults, ExitCodes, RunConfig
from vuperf.common.exceptions import ConfigurationError
from vuperf.common.logging import setup_rich_logging
from vuperf.common.models import RunSummary
from vuperf.engine.controller import RunController
from vuperf.exporters import ExporterConfig, SummaryConsoleExporter, SummaryJsonExporter
from vuperf.scenarios import Scenario, get_scenario, list_scenarios

_logger = logging.getLogger(__name__)

app = App(name="vuperf", help="Closed-model HTTP load generator.")


def build_run_options(
    scenario: Scenario,
    *,
    base_url: str | None = None,
    vus: int | None = None,
    duration: float | None = None,
    iterations: int | None = None,
    think_time: float | None = None,
    jitter: float | None = None,
    iteration_timeout: float | None = None,
    check_pass_rate_min: float | None = None,
    latency_p95_max_ms: float | None = None,
    error_rate_max: float | None = None,
) -> dict[str, Any]:
    """Merge the scenario defaults with the options given on the command line.

    Passing ``iterations`` without ``duration`` replaces the scenario's duration,
    so the run ends on the iteration budget alone.
    """
    options = scenario.options.to_run_options()
    if iterations is not None:
        options["max_iterations"] = iterations
        if duration is None:
            options["duration"] = None

    overrides = {
        "base_url": base_url,
        "concurrency": vus,
        "duration": duration,
        "think_time": think_time,
        "think_time_jitter": jitter,
        "iteration_timeout": iteration_timeout,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})

    thresholds = {
        "check_pass_rate_min": check_pass_rate_min,
        "latency_p95_max_ms": latency_p95_max_ms,
        "error_rate_max": error_rate_max,
    }
    thresholds = {k: v for k, v in thresholds.items() if v is not None}
    if thresholds:
        options["thresholds"] = thresholds
    return options


async def export_summary(
    summary: RunSummary, console: Console, summary_export: Path | None = None
) -> Path | None:
    config = ExporterConfig(summary=summary, output_path=summary_export)
    await SummaryConsoleExporter(config).export(console)
    if summary_export is None:
        return None
    return await SummaryJsonExporter(config).export()


def exit_code_for(summary: RunSummary) -> int:
    return ExitCodes.SUCCESS if summary.passed else ExitCodes.THRESHOLDS_FAILED


@app.command
def run(
    scenario: Annotated[str, Parameter(help="Name of a built-in scenario.")],
    *,
    base_url: Annotated[
        str | None, Parameter(name="--base-url", help="Target base URL.")
    ] = None,
    vus: Annotated[
        int | None, Parameter(name="--vus", help="Number of concurrent virtual users.")
    ] = None,
    duration: Annotated[
        float | None, Parameter(name="--duration", help="Run duration in seconds.")
    ] = None,
    iterations: Annotated[
        int | None,
        Parameter(name="--iterations", help="Total iterations shared by all VUs."),
    ] = None,
    think_time: Annotated[
        float | None,
        Parameter(name="--think-time", help="Pause between iterations in seconds."),
    ] = None,
    jitter: Annotated[
        float | None,
        Parameter(name="--jitter", help="Uniform think time jitter as a fraction (0-1)."),
    ] = None,
    iteration_timeout: Annotated[
        float | None,
        Parameter(
            name="--iteration-timeout",
            help="Hard ceiling for a single iteration in seconds.",
        ),
    ] = None,
    summary_export: Annotated[
        Path | None,
        Parameter(name="--summary-export", help="Write the summary as JSON to this path."),
    ] = CLIDefaults.SUMMARY_EXPORT,
    log_level: Annotated[
        str, Parameter(name="--log-level", help="TRACE, DEBUG, INFO, WARNING or ERROR.")
    ] = CLIDefaults.LOG_LEVEL,
    check_pass_rate_min: Annotated[
        float | None,
        Parameter(
            name="--check-pass-rate-min",
            help="Fail the run when the overall check pass rate is lower.",
        ),
    ] = None,
    latency_p95_max_ms: Annotated[
        float | None,
        Parameter(
            name="--latency-p95-max-ms",
            help="Fail the run when any endpoint's p95 latency is higher.",
        ),
    ] = None,
    error_rate_max: Annotated[
        float | None,
        Parameter(
            name="--error-rate-max",
            help="Fail the run when the overall request error rate is higher.",
        ),
    ] = None,
) -> int:
    """Run a scenario and print its summary."""
    setup_rich_logging(log_level)
    try:
        selected = get_scenario(scenario)
        config = RunConfig.from_options(
            **build_run_options(
                selected,
                base_url=base_url,
                vus=vus,
                duration=duration,
                iterations=iterations,
                think_time=think_time,
                jitter=jitter,
                iteration_timeout=iteration_timeout,
                check_pass_rate_min=check_pass_rate_min,
                latency_p95_max_ms=latency_p95_max_ms,
                error_rate_max=error_rate_max,
            )
        )
        summary = RunController(config).run(selected.workload)
    except ConfigurationError as e:
        _logger.error(str(e))
        return ExitCodes.CONFIGURATION_ERROR

    asyncio.run(export_summary(summary, Console(), summary_export))
    return exit_code_for(summary)


@app.command
def scenarios() -> int:
    """List the built-in scenarios."""
    table = Table(title="Scenarios", title_justify="left")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("VUs", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Description")
    for scenario in list_scenarios():
        table.add_row(
            scenario.name,
            str(scenario.options.vus),
            f"{scenario.options.duration:g}s",
            scenario.description,
        )
    Console().print(table)
    return ExitCodes.SUCCESS


def main(tokens: list[str] | None = None) -> None:
    sys.exit(app(tokens))


if __name__ == "__main__":
    main()
