# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Set-once global stop decision shared by all virtual users."""

import asyncio
import contextlib
import threading
import time
from collections.abc import Callable

from vuperf.common.enums import StopReason
from vuperf.common.mixins import VUPerfLoggerMixin


class StopCondition(VUPerfLoggerMixin):
    """Decides when a run stops issuing iterations.

    Three triggers exist: the duration elapsing, the iteration budget being
    used up, and external cancellation. All of them go through stop(), which
    records the first reason under a single lock; later calls are no-ops. VUs
    never get interrupted by it, they poll try_acquire() between iterations.

    The iteration budget is enforced by reservation: try_acquire() hands out at
    most ``max_iterations`` slots, and the stop fires once the last reserved
    iteration calls complete(). This keeps concurrent VUs from overshooting the
    budget.

    Args:
        duration: Seconds after start() at which the run stops, or None
        max_iterations: Total iteration budget across all VUs, or None
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        duration: float | None = None,
        max_iterations: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.duration = duration
        self.max_iterations = max_iterations
        self._clock = clock
        self._lock = threading.Lock()
        self._reason: StopReason | None = None
        self._issued = 0
        self._completed = 0
        self._started_at: float | None = None
        self._stopped_at: float | None = None
        self._event = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def reason(self) -> StopReason | None:
        return self._reason

    @property
    def is_stopped(self) -> bool:
        return self._reason is not None

    @property
    def issued(self) -> int:
        return self._issued

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def start(self) -> None:
        """Mark the run start. Must be called from the event loop that runs the VUs."""
        self._loop = asyncio.get_running_loop()
        self._started_at = self._clock()
        if self.duration is not None and self.duration <= 0:
            self.stop(StopReason.DURATION)
        elif self.max_iterations == 0:
            self.stop(StopReason.ITERATIONS)

    def try_acquire(self) -> bool:
        """Reserve one iteration. False means the VU must stop."""
        with self._lock:
            if self._reason is not None:
                return False
            if (
                self.duration is not None
                and self._started_at is not None
                and self._clock() - self._started_at >= self.duration
            ):
                self._stop_locked(StopReason.DURATION)
                return False
            if self.max_iterations is not None and self._issued >= self.max_iterations:
                return False
            self._issued += 1
            return True

    def complete(self) -> None:
        """Report that a reserved iteration finished, successfully or not."""
        with self._lock:
            self._completed += 1
            if (
                self.max_iterations is not None
                and self._completed >= self.max_iterations
            ):
                self._stop_locked(StopReason.ITERATIONS)

    def stop(self, reason: StopReason) -> bool:
        """Request a stop. Thread-safe. Returns True if this call decided the stop."""
        with self._lock:
            return self._stop_locked(reason)

    async def wait(self, timeout: float | None = None) -> bool:
        """Sleep until stopped or ``timeout`` elapses. Returns whether the run is stopped."""
        if self._reason is not None:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            pass
        return self._reason is not None

    def _stop_locked(self, reason: StopReason) -> bool:
        if self._reason is not None:
            return False
        self._reason = reason
        self._stopped_at = self._clock()
        self.debug(f"Stop condition reached: {reason} after {self.elapsed:.3f}s")
        self._wake()
        return True

    def _wake(self) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if self._loop is None or running is self._loop:
            self._event.set()
            return
        # Loop already closed means the run finished and nobody is waiting
        with contextlib.suppress(RuntimeError):
            self._loop.call_soon_threadsafe(self._event.set)
