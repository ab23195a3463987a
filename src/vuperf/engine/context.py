# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Per-iteration view of a virtual user, visible to workload code."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vuperf.http.client import HttpClient
    from vuperf.metrics.check_recorder import CheckRecorder

current_vu: ContextVar[VUContext | None] = ContextVar("vuperf_current_vu", default=None)
"""Context of the VU iteration currently executing, or None outside a VU.

Set by the virtual user around each workload call. Asyncio tasks and the
worker threads used for plain-function workloads both inherit it, which is how
the recorders attribute samples without the workload passing ids around.
"""


@dataclass(frozen=True, slots=True)
class VUContext:
    """Read-only identity of one VU iteration.

    Attributes:
        vu_id: 1-based id, unique and stable for the VU's lifetime
        iteration: 0-based iteration index within this VU
        started_at: Wall-clock time (epoch seconds) at which the VU started
        http: HTTP client bound to the run's metrics aggregator, if any
        checks: The run's check recorder
    """

    vu_id: int
    iteration: int
    started_at: float
    http: HttpClient | None = field(default=None, repr=False, compare=False)
    checks: CheckRecorder | None = field(default=None, repr=False, compare=False)

    def check(self, name: str, passed: bool) -> bool:
        """Record a named check outcome and return ``passed``."""
        if self.checks is not None:
            self.checks.record(name, passed)
        return passed


def get_current_vu() -> VUContext | None:
    return current_vu.get()
