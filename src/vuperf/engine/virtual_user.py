# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""A single virtual user: repeatedly runs the workload until told to stop."""

from __future__ import annotations

import asyncio
import contextvars
import random
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from vuperf.common.enums import VUState
from vuperf.common.exceptions import IterationError, ShutdownTimeout
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.engine.context import VUContext, current_vu
from vuperf.engine.stop_condition import StopCondition
from vuperf.engine.workload import Workload, is_async_workload

if TYPE_CHECKING:
    from vuperf.http.client import HttpClient
    from vuperf.metrics.check_recorder import CheckRecorder


class _IterationOutcome(Enum):
    OK = "ok"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class VUResult:
    """Final counters a VU reports to the scheduler."""

    vu_id: int
    iterations: int
    failed_iterations: int
    timed_out_iterations: int
    state: VUState
    last_error: str | None = None


class VirtualUser(VUPerfLoggerMixin):
    """Runs the workload in a loop: acquire, run, count, pace.

    State moves IDLE -> RUNNING -> STOPPING -> STOPPED. The stop condition is
    only consulted between iterations. An iteration that raises is counted as
    failed and the loop continues; an iteration that exceeds
    ``iteration_timeout`` is abandoned, counted as failed and timed out, and
    the VU stops.

    Args:
        vu_id: 1-based id, unique within the run
        workload: Callable invoked once per iteration with a VUContext
        stop_condition: Shared stop decision
        think_time: Pause in seconds between iterations
        think_time_jitter: Fractional uniform jitter applied to think_time
        iteration_timeout: Hard ceiling in seconds for one iteration
        executor: Thread pool for plain-function workloads
        http: HTTP client exposed to the workload through the context
        checks: Check recorder exposed to the workload through the context
        rng: Random source for jitter
    """

    def __init__(
        self,
        vu_id: int,
        workload: Workload,
        stop_condition: StopCondition,
        *,
        think_time: float = 0.0,
        think_time_jitter: float = 0.0,
        iteration_timeout: float | None = None,
        executor: Executor | None = None,
        http: HttpClient | None = None,
        checks: CheckRecorder | None = None,
        rng: random.Random | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.vu_id = vu_id
        self._workload = workload
        self._is_async = is_async_workload(workload)
        if not self._is_async and executor is None:
            raise ValueError(
                f"VU {vu_id}: a thread executor is required for synchronous workloads"
            )
        self._stop = stop_condition
        self._think_time = think_time
        self._think_time_jitter = think_time_jitter
        self._iteration_timeout = iteration_timeout
        self._executor = executor
        self._http = http
        self._checks = checks
        self._rng = rng or random.Random()

        self._state = VUState.IDLE
        self._iteration = 0
        self._failed = 0
        self._timed_out = 0
        self._started_at: float | None = None
        self._last_error: str | None = None

    @property
    def state(self) -> VUState:
        return self._state

    @property
    def iteration(self) -> int:
        """Number of iterations that have returned. Never decreases."""
        return self._iteration

    @property
    def result(self) -> VUResult:
        return VUResult(
            vu_id=self.vu_id,
            iterations=self._iteration,
            failed_iterations=self._failed,
            timed_out_iterations=self._timed_out,
            state=self._state,
            last_error=self._last_error,
        )

    async def run(self) -> VUResult:
        if self._state != VUState.IDLE:
            raise RuntimeError(f"VU {self.vu_id} has already been started")
        self._state = VUState.RUNNING
        self._started_at = time.time()
        if self.is_trace_enabled:
            self.trace(f"VU {self.vu_id} started")
        try:
            while self._stop.try_acquire():
                outcome = await self._run_iteration()
                self._stop.complete()
                if outcome is _IterationOutcome.TIMED_OUT:
                    break
                await self._pace()
            self._state = VUState.STOPPING
        finally:
            self._state = VUState.STOPPED
            if self.is_trace_enabled:
                self.trace(
                    f"VU {self.vu_id} stopped after {self._iteration} iterations "
                    f"({self._failed} failed)"
                )
        return self.result

    async def _run_iteration(self) -> _IterationOutcome:
        ctx = VUContext(
            vu_id=self.vu_id,
            iteration=self._iteration,
            started_at=self._started_at,
            http=self._http,
            checks=self._checks,
        )
        token = current_vu.set(ctx)
        try:
            if self._is_async:
                fut = asyncio.ensure_future(self._workload(ctx))
            else:
                context = contextvars.copy_context()
                fut = asyncio.get_running_loop().run_in_executor(
                    self._executor, context.run, self._workload, ctx
                )
        except Exception as e:
            # The workload raised before handing back an awaitable
            return self._iteration_failed(ctx, e)
        finally:
            current_vu.reset(token)

        try:
            done, _ = await asyncio.wait({fut}, timeout=self._iteration_timeout)
        except asyncio.CancelledError:
            # Cancelled by the scheduler's shutdown bound while in flight
            fut.cancel()
            self._failed += 1
            self._timed_out += 1
            raise

        if not done:
            fut.cancel()
            self._failed += 1
            self._timed_out += 1
            err = ShutdownTimeout(self.vu_id, ctx.iteration, self._iteration_timeout)
            self._last_error = str(err)
            self.warning(str(err))
            return _IterationOutcome.TIMED_OUT

        if fut.cancelled():
            return self._iteration_failed(ctx, asyncio.CancelledError())
        exc = fut.exception()
        if exc is not None:
            return self._iteration_failed(ctx, exc)

        self._iteration += 1
        return _IterationOutcome.OK

    def _iteration_failed(
        self, ctx: VUContext, exc: BaseException
    ) -> _IterationOutcome:
        self._failed += 1
        err = IterationError(self.vu_id, ctx.iteration, exc)
        self._last_error = str(err)
        if self._failed == 1:
            self.warning(f"{err} (further failures of VU {self.vu_id} logged at debug)")
        else:
            self.debug(str(err))
        self._iteration += 1
        return _IterationOutcome.FAILED

    async def _pace(self) -> None:
        pause = self._think_time
        if pause > 0 and self._think_time_jitter > 0:
            spread = pause * self._think_time_jitter
            pause = self._rng.uniform(pause - spread, pause + spread)
        if pause > 0:
            await self._stop.wait(pause)
        else:
            # Yield so a workload that never awaits cannot starve the other VUs
            await asyncio.sleep(0)
