# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from enum import Enum


class CaseInsensitiveStrEnum(str, Enum):
    """String enum that matches values regardless of case."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class VUState(CaseInsensitiveStrEnum):
    """Lifecycle of a single virtual user."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class StopReason(CaseInsensitiveStrEnum):
    """Why the run stopped issuing new iterations."""

    DURATION = "duration"
    ITERATIONS = "iterations"
    CANCELLED = "cancelled"


class RunOutcome(CaseInsensitiveStrEnum):
    """Operational classification of a finished run.

    NO_REQUESTS means no request was recorded at all. ALL_FAILED means requests
    were sent and every one of them failed.
    """

    NO_REQUESTS = "no_requests"
    ALL_FAILED = "all_failed"
    DEGRADED = "degraded"
    PASSED = "passed"
