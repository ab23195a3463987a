# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Owns the VU pool for one run: launch, stop, and join."""

from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vuperf.common.config import RunConfig
from vuperf.common.enums import StopReason
from vuperf.common.environment import Environment
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.engine.stop_condition import StopCondition
from vuperf.engine.virtual_user import VirtualUser, VUResult
from vuperf.engine.workload import Workload, is_async_workload

if TYPE_CHECKING:
    from vuperf.http.client import HttpClient
    from vuperf.metrics.check_recorder import CheckRecorder

__all__ = [
    "Scheduler",
    "SchedulerResult",
]

SHUTDOWN_GRACE_SECONDS = 1.0
"""Slack added on top of the iteration ceiling when joining VUs."""


@dataclass(frozen=True, slots=True)
class SchedulerResult:
    vu_results: list[VUResult]
    elapsed_seconds: float
    stop_reason: StopReason | None
    shutdown_timeouts: int

    @property
    def total_iterations(self) -> int:
        return sum(r.iterations for r in self.vu_results)

    @property
    def failed_iterations(self) -> int:
        return sum(r.failed_iterations for r in self.vu_results)

    @property
    def timed_out_iterations(self) -> int:
        return sum(r.timed_out_iterations for r in self.vu_results)


class Scheduler(VUPerfLoggerMixin):
    """Constant-VU scheduler.

    Launches exactly ``config.concurrency`` VUs at once and keeps that pool for
    the whole run. Ramping the pool size over time is not supported; a ramping
    scheduler would replace run() while reusing VirtualUser and StopCondition.

    Shutdown is bounded: once the stop condition fires, every VU gets the
    iteration ceiling plus a short grace period to finish its in-flight
    iteration. VUs still running after that are cancelled and counted as
    shutdown timeouts.

    Args:
        config: Validated run configuration
        workload: Callable run once per iteration by each VU
        http: HTTP client handed to the workload through its context
        checks: Check recorder handed to the workload through its context
        cancel_token: Optional threading.Event; setting it cancels the run
    """

    def __init__(
        self,
        config: RunConfig,
        workload: Workload,
        *,
        http: HttpClient | None = None,
        checks: CheckRecorder | None = None,
        cancel_token: threading.Event | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config
        self.workload = workload
        self.http = http
        self.checks = checks
        self.cancel_token = cancel_token
        self.stop_condition = StopCondition(
            duration=config.duration, max_iterations=config.max_iterations
        )
        self._vus: list[VirtualUser] = []
        self._started = False

    @property
    def vus(self) -> list[VirtualUser]:
        return list(self._vus)

    def cancel(self) -> None:
        """Stop the run as soon as every VU reaches an iteration boundary. Thread-safe."""
        if self.stop_condition.stop(StopReason.CANCELLED):
            self.info("Cancellation requested, waiting for VUs to finish their iterations")

    async def run(self) -> SchedulerResult:
        if self._started:
            raise RuntimeError("A Scheduler can only run once")
        self._started = True

        loop = asyncio.get_running_loop()
        executor = None
        if not is_async_workload(self.workload):
            executor = ThreadPoolExecutor(
                max_workers=self.config.concurrency, thread_name_prefix="vuperf-vu"
            )

        iteration_timeout = self.config.resolved_iteration_timeout
        self._vus = [
            VirtualUser(
                vu_id,
                self.workload,
                self.stop_condition,
                think_time=self.config.think_time,
                think_time_jitter=self.config.think_time_jitter,
                iteration_timeout=iteration_timeout,
                executor=executor,
                http=self.http,
                checks=self.checks,
            )
            for vu_id in range(1, self.config.concurrency + 1)
        ]

        run_start = time.perf_counter()
        self.stop_condition.start()
        deadline_timer = None
        if self.config.duration is not None and not self.stop_condition.is_stopped:
            deadline_timer = loop.call_later(
                self.config.duration, self.stop_condition.stop, StopReason.DURATION
            )
        cancel_watcher = None
        if self.cancel_token is not None:
            cancel_watcher = asyncio.create_task(self._watch_cancel_token())

        self.info(
            f"Starting {len(self._vus)} VUs "
            f"(duration={self.config.duration}, max_iterations={self.config.max_iterations}, "
            f"think_time={self.config.think_time}s, iteration_timeout={iteration_timeout:.1f}s)"
        )
        tasks = {
            asyncio.create_task(vu.run(), name=f"vuperf-vu-{vu.vu_id}"): vu
            for vu in self._vus
        }

        try:
            await self._wait_for_stop(set(tasks))
            shutdown_timeouts = await self._join(tasks, iteration_timeout)
        finally:
            if deadline_timer is not None:
                deadline_timer.cancel()
            if cancel_watcher is not None:
                cancel_watcher.cancel()
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)

        elapsed = time.perf_counter() - run_start
        result = SchedulerResult(
            vu_results=[vu.result for vu in self._vus],
            elapsed_seconds=elapsed,
            stop_reason=self.stop_condition.reason,
            shutdown_timeouts=shutdown_timeouts,
        )
        self.info(
            f"All VUs stopped after {elapsed:.2f}s "
            f"(reason={result.stop_reason}, iterations={result.total_iterations}, "
            f"failed={result.failed_iterations})"
        )
        return result

    async def _wait_for_stop(self, pending: set[asyncio.Task]) -> None:
        """Block until the stop condition fires or every VU exited on its own."""
        stop_waiter = asyncio.create_task(self.stop_condition.wait())
        try:
            while pending and not self.stop_condition.is_stopped:
                done, _ = await asyncio.wait(
                    pending | {stop_waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                pending -= done
        finally:
            stop_waiter.cancel()

    async def _join(
        self, tasks: dict[asyncio.Task, VirtualUser], iteration_timeout: float
    ) -> int:
        """Wait for all VUs to stop, cancelling stragglers. Returns the straggler count."""
        _, pending = await asyncio.wait(
            set(tasks), timeout=iteration_timeout + SHUTDOWN_GRACE_SECONDS
        )
        for task in pending:
            vu = tasks[task]
            self.warning(
                f"VU {vu.vu_id} did not stop within {iteration_timeout:.1f}s "
                f"(state={vu.state}); cancelling it"
            )
            task.cancel()
        if pending:
            await asyncio.wait(pending)

        for task, vu in tasks.items():
            if task.cancelled():
                continue
            exc = task.exception()
            if exc is not None:
                self.error(f"VU {vu.vu_id} crashed: {exc!r}")
        return len(pending)

    async def _watch_cancel_token(self) -> None:
        interval = Environment.ENGINE.CANCEL_POLL_INTERVAL
        while not self.stop_condition.is_stopped:
            if self.cancel_token.is_set():
                self.cancel()
                return
            await self.stop_condition.wait(interval)
