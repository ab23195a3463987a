# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from typing import Any

from vuperf.engine.workload import Workload


@dataclass(frozen=True, slots=True)
class ScenarioOptions:
    """Default run options a scenario ships with. CLI flags override them."""

    vus: int
    duration: float
    think_time: float = 0.0
    base_url: str = "http://localhost:8080"

    def to_run_options(self) -> dict[str, Any]:
        return {
            "concurrency": self.vus,
            "duration": self.duration,
            "think_time": self.think_time,
            "base_url": self.base_url,
        }


@dataclass(frozen=True, slots=True)
class Scenario:
    name: str
    description: str
    workload: Workload
    options: ScenarioOptions
    tags: tuple[str, ...] = field(default_factory=tuple)
