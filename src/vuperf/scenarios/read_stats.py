# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Read-heavy scenario: poll the two statistics endpoints."""

from vuperf.engine.context import VUContext
from vuperf.metrics.check_recorder import check
from vuperf.scenarios.base import Scenario, ScenarioOptions


async def read_stats(ctx: VUContext) -> None:
    res = await ctx.http.aget("/users/stats", name="GET /users/stats")
    check(res, {"/users/stats status is 200": lambda r: r.status == 200})

    res = await ctx.http.aget("/pullRequests/stats", name="GET /pullRequests/stats")
    check(res, {"/stats/pullRequests status is 200": lambda r: r.status == 200})


READ_STATS = Scenario(
    name="read-stats",
    description="GET /users/stats and /pullRequests/stats, expecting 200 from both",
    workload=read_stats,
    options=ScenarioOptions(vus=20, duration=30.0, think_time=0.1),
    tags=("read",),
)
