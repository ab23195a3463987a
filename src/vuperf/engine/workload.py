# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""The workload capability interface: one callable, VU context in, nothing out."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from vuperf.common.exceptions import ConfigurationError
from vuperf.engine.context import VUContext

__all__ = [
    "Workload",
    "WorkloadFn",
    "is_async_workload",
    "resolve_workload",
]

WorkloadFn = Callable[[VUContext], None] | Callable[[VUContext], Awaitable[None]]


@runtime_checkable
class Workload(Protocol):
    """Anything callable with a VUContext. Coroutine functions run on the event
    loop; plain functions run on worker threads, one per VU."""

    def __call__(self, ctx: VUContext) -> Any: ...


def is_async_workload(workload: Any) -> bool:
    """True if calling ``workload`` produces an awaitable that must run on the loop."""
    if inspect.iscoroutinefunction(workload):
        return True
    call = getattr(workload, "__call__", None)  # noqa: B004
    return call is not None and inspect.iscoroutinefunction(call)


def resolve_workload(workload: Any) -> Workload:
    """Accept a callable or the name of a built-in scenario."""
    if isinstance(workload, str):
        from vuperf.scenarios import get_scenario

        return get_scenario(workload).workload
    if not callable(workload):
        raise ConfigurationError(
            f"Workload must be callable with a VUContext or a scenario name, "
            f"got {type(workload).__name__}"
        )
    return workload
