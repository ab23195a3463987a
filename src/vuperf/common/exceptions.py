# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exception taxonomy for VUPerf.

Only ConfigurationError escapes a run. The remaining types describe failures
that are absorbed into counters and summaries while the load test continues.
"""


class VUPerfError(Exception):
    """Base class for all VUPerf errors."""


class ConfigurationError(VUPerfError):
    """Invalid run configuration, raised before any virtual user starts."""


class ScenarioNotFoundError(ConfigurationError):
    """The requested built-in scenario does not exist."""


class IterationError(VUPerfError):
    """A workload raised during an iteration.

    Attributes:
        vu_id: Virtual user that ran the iteration
        iteration: Iteration index within that virtual user
    """

    def __init__(self, vu_id: int, iteration: int, cause: BaseException) -> None:
        super().__init__(
            f"VU {vu_id} iteration {iteration} failed: {cause!r}"
        )
        self.vu_id = vu_id
        self.iteration = iteration
        self.__cause__ = cause


class TransportError(VUPerfError):
    """An HTTP call failed before a response status was received."""

    def __init__(self, message: str, *, kind: str = "transport") -> None:
        super().__init__(message)
        self.kind = kind


class ShutdownTimeout(VUPerfError):
    """An in-flight iteration exceeded the hard iteration ceiling."""

    def __init__(self, vu_id: int, iteration: int, timeout: float) -> None:
        super().__init__(
            f"VU {vu_id} iteration {iteration} exceeded the {timeout:.3f}s "
            "iteration ceiling and was abandoned"
        )
        self.vu_id = vu_id
        self.iteration = iteration
        self.timeout = timeout
