# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Top-level run orchestration: config in, RunSummary out."""

from __future__ import annotations

import asyncio
import signal
import threading
from typing import Any

import httpx

from vuperf.common.config import RunConfig, validate_run_config
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.common.models import RunSummary
from vuperf.engine.scheduler import Scheduler, SchedulerResult
from vuperf.engine.workload import resolve_workload
from vuperf.http.client import HttpClient
from vuperf.metrics.check_recorder import CheckRecorder
from vuperf.metrics.metrics_aggregator import MetricsAggregator
from vuperf.metrics.thresholds import evaluate_thresholds

__all__ = [
    "RunController",
    "run",
]

_CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class RunController(VUPerfLoggerMixin):
    """Wires a RunConfig into a Scheduler, runs it, and builds the summary.

    Configuration problems raise ConfigurationError from the constructor or
    from run(), before any VU starts. Once VUs are running, run() always
    returns a RunSummary: workload errors, transport errors and timeouts are
    counted, never raised.

    Cancellation can come from cancel() (any thread), from the optional
    ``cancel_token`` event, or from SIGINT/SIGTERM when the run happens on the
    main thread. It stops VUs at their next iteration boundary and the summary
    covers whatever ran until then.

    Args:
        config: RunConfig or a mapping of its options
        http_client: Client to expose to workloads. One is created from the
            config when omitted and closed when the run ends.
        transport: httpx transport for the created client, mainly for tests
        cancel_token: threading.Event that cancels the run when set
        handle_signals: Install SIGINT/SIGTERM handlers while running
    """

    def __init__(
        self,
        config: RunConfig | dict[str, Any],
        *,
        http_client: HttpClient | None = None,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
        cancel_token: threading.Event | None = None,
        handle_signals: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = validate_run_config(config)
        self.checks = CheckRecorder()
        self.metrics = MetricsAggregator(
            percentiles=self.config.percentiles,
            relative_accuracy=self.config.sketch_relative_accuracy,
        )
        self._owns_http = http_client is None
        if http_client is None:
            http_client = HttpClient(
                base_url=self.config.base_url,
                metrics=self.metrics,
                timeout=self.config.request_timeout,
                transport=transport,
            )
        elif http_client.metrics is None:
            http_client.metrics = self.metrics
        self.http = http_client
        self.cancel_token = cancel_token
        self.handle_signals = handle_signals
        self._scheduler: Scheduler | None = None
        self._cancel_requested = False
        self._summary: RunSummary | None = None

    @property
    def summary(self) -> RunSummary | None:
        return self._summary

    def cancel(self) -> None:
        """Request cancellation. Safe to call from any thread, before or during the run."""
        self._cancel_requested = True
        if self._scheduler is not None:
            self._scheduler.cancel()

    def run(self, workload: Any) -> RunSummary:
        """Run to completion on a fresh event loop."""
        return asyncio.run(self.arun(workload))

    async def arun(self, workload: Any) -> RunSummary:
        """Run to completion on the current event loop."""
        if self._summary is not None or self._scheduler is not None:
            raise RuntimeError("A RunController can only run once")
        resolved = resolve_workload(workload)

        self._scheduler = Scheduler(
            self.config,
            resolved,
            http=self.http,
            checks=self.checks,
            cancel_token=self.cancel_token,
        )
        if self._cancel_requested:
            self._scheduler.cancel()

        installed = self._install_signal_handlers()
        try:
            result = await self._scheduler.run()
        finally:
            self._remove_signal_handlers(installed)
            if self._owns_http:
                await self.http.aclose()

        self._summary = self.build_summary(result)
        self.info(
            f"Run finished: outcome={self._summary.outcome}, "
            f"iterations={self._summary.total_iterations}, "
            f"requests={self._summary.total_requests}"
        )
        for threshold in self._summary.thresholds:
            if not threshold.passed:
                self.warning(
                    f"Threshold {threshold.name} failed: actual={threshold.actual}, "
                    f"limit={threshold.limit}"
                )
        return self._summary

    def build_summary(self, result: SchedulerResult) -> RunSummary:
        """Finalize the recorders. Only valid once every VU has stopped."""
        checks = dict(self.checks.snapshot())
        endpoints = dict(self.metrics.snapshot())
        return RunSummary(
            vus=self.config.concurrency,
            elapsed_seconds=result.elapsed_seconds,
            stop_reason=result.stop_reason,
            total_iterations=result.total_iterations,
            failed_iterations=result.failed_iterations,
            timed_out_iterations=result.timed_out_iterations,
            shutdown_timeouts=result.shutdown_timeouts,
            checks=checks,
            endpoints=endpoints,
            thresholds=evaluate_thresholds(self.config.thresholds, checks, endpoints),
        )

    def _install_signal_handlers(self) -> list[signal.Signals]:
        if not self.handle_signals or threading.current_thread() is not threading.main_thread():
            return []
        loop = asyncio.get_running_loop()
        installed = []
        for sig in _CANCEL_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Not supported by this event loop (e.g. Windows Proactor)
                self.debug(f"Cannot install handler for {sig.name}")
                continue
            installed.append(sig)
        return installed

    def _remove_signal_handlers(self, installed: list[signal.Signals]) -> None:
        if not installed:
            return
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)

    def _on_signal(self, sig: signal.Signals) -> None:
        self.warning(f"Received {sig.name}, stopping the run")
        self.cancel()


def run(config: RunConfig | dict[str, Any], workload: Any, **kwargs) -> RunSummary:
    """Validate ``config``, run ``workload`` with it and return the summary.

    Raises:
        ConfigurationError: If the config or workload is invalid. Nothing runs.
    """
    return RunController(config, **kwargs).run(workload)
