# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Built-in scenarios, looked up by name."""

from vuperf.common.exceptions import ScenarioNotFoundError
from vuperf.scenarios.base import Scenario, ScenarioOptions
from vuperf.scenarios.create_pull_request import CREATE_PULL_REQUEST
from vuperf.scenarios.read_stats import READ_STATS

_SCENARIOS: dict[str, Scenario] = {
    s.name: s for s in (READ_STATS, CREATE_PULL_REQUEST)
}


def get_scenario(name: str) -> Scenario:
    try:
        return _SCENARIOS[name.lower()]
    except KeyError:
        raise ScenarioNotFoundError(
            f"Unknown scenario: '{name}'. Available: {', '.join(sorted(_SCENARIOS))}"
        ) from None


def list_scenarios() -> list[Scenario]:
    return sorted(_SCENARIOS.values(), key=lambda s: s.name)


__all__ = [
    "Scenario",
    "ScenarioOptions",
    "get_scenario",
    "list_scenarios",
]
