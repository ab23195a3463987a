# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rich console rendering of the run summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from vuperf.common.constants import STATUS_CLASS_KEYS
from vuperf.common.enums import RunOutcome
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.exporters.exporter_config import ExporterConfig

if TYPE_CHECKING:
    from rich.console import Console

_OUTCOME_STYLES = {
    RunOutcome.PASSED: "bold green",
    RunOutcome.DEGRADED: "bold yellow",
    RunOutcome.ALL_FAILED: "bold red",
    RunOutcome.NO_REQUESTS: "bold red",
}


def _fmt_ms(value: float | None) -> str:
    return "-" if value is None else f"{value:,.2f}"


def _fmt_rate(value: float | None) -> str:
    return "-" if value is None else f"{value:.2%}"


class SummaryConsoleExporter(VUPerfLoggerMixin):
    """Prints the run, checks, endpoints and thresholds tables."""

    def __init__(self, exporter_config: ExporterConfig, **kwargs) -> None:
        super().__init__(**kwargs)
        self.exporter_config = exporter_config

    async def export(self, console: Console) -> None:
        summary = self.exporter_config.summary
        console.print()
        console.print(self._get_run_table())
        if summary.checks:
            console.print(self._get_checks_table())
        if summary.endpoints:
            console.print(self._get_endpoints_table())
        if summary.thresholds:
            console.print(self._get_thresholds_table())
        console.file.flush()

    def _get_run_table(self) -> Table:
        summary = self.exporter_config.summary
        table = Table(title="Run Summary", show_header=False, title_justify="left")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", justify="right")
        table.add_row(
            "outcome", Text(str(summary.outcome), style=_OUTCOME_STYLES[summary.outcome])
        )
        table.add_row("stop reason", str(summary.stop_reason or "-"))
        table.add_row("vus", str(summary.vus))
        table.add_row("elapsed", f"{summary.elapsed_seconds:.2f}s")
        table.add_row("iterations", f"{summary.total_iterations:,}")
        table.add_row("iterations/s", f"{summary.iterations_per_second:,.2f}")
        table.add_row("failed iterations", f"{summary.failed_iterations:,}")
        table.add_row("timed out iterations", f"{summary.timed_out_iterations:,}")
        if summary.shutdown_timeouts:
            table.add_row("shutdown timeouts", f"{summary.shutdown_timeouts:,}")
        table.add_row("requests", f"{summary.total_requests:,}")
        table.add_row("failed requests", f"{summary.failed_requests:,}")
        return table

    def _get_checks_table(self) -> Table:
        table = Table(title="Checks", title_justify="left")
        table.add_column("Check", style="cyan")
        table.add_column("Pass", justify="right", style="green")
        table.add_column("Fail", justify="right", style="red")
        table.add_column("Pass Rate", justify="right")
        for name, check in self.exporter_config.summary.checks.items():
            table.add_row(
                name,
                f"{check.pass_count:,}",
                f"{check.fail_count:,}",
                _fmt_rate(check.pass_rate),
            )
        return table

    def _get_endpoints_table(self) -> Table:
        endpoints = self.exporter_config.summary.endpoints
        percentile_labels: list[str] = []
        for endpoint in endpoints.values():
            for label in endpoint.latency.percentiles_ms:
                if label not in percentile_labels:
                    percentile_labels.append(label)

        table = Table(title="Endpoints (latency in ms)", title_justify="left")
        table.add_column("Endpoint", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Errors", justify="right")
        for key in STATUS_CLASS_KEYS:
            table.add_column(key, justify="right")
        table.add_column("min", justify="right")
        table.add_column("avg", justify="right")
        for label in percentile_labels:
            table.add_column(label, justify="right")
        table.add_column("max", justify="right")

        for name, endpoint in endpoints.items():
            latency = endpoint.latency
            table.add_row(
                name,
                f"{endpoint.count:,}",
                _fmt_rate(endpoint.error_rate),
                *(f"{endpoint.status_classes.get(k, 0):,}" for k in STATUS_CLASS_KEYS),
                _fmt_ms(latency.min_ms),
                _fmt_ms(latency.mean_ms),
                *(_fmt_ms(latency.percentiles_ms.get(p)) for p in percentile_labels),
                _fmt_ms(latency.max_ms),
            )
        return table

    def _get_thresholds_table(self) -> Table:
        table = Table(title="Thresholds", title_justify="left")
        table.add_column("Threshold", style="cyan")
        table.add_column("Limit", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Result", justify="center")
        for result in self.exporter_config.summary.thresholds:
            table.add_row(
                result.name,
                f"{result.limit:g}",
                "-" if result.actual is None else f"{result.actual:.4g}",
                Text("PASS", style="bold green")
                if result.passed
                else Text("FAIL", style="bold red"),
            )
        return table
