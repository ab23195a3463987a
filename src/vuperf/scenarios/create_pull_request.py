# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Write-heavy scenario: create a pull request per iteration."""

import time

from vuperf.engine.context import VUContext
from vuperf.metrics.check_recorder import check
from vuperf.scenarios.base import Scenario, ScenarioOptions


def pull_request_payload(ctx: VUContext, now_ms: int | None = None) -> dict[str, str]:
    """Request body with ids that cannot collide across VUs or iterations."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = f"{ctx.vu_id}-{ctx.iteration}-{now_ms}"
    return {
        "pull_request_id": f"vuperf-pr-{suffix}",
        "pull_request_name": f"vuperf-load-{suffix}",
        "author_id": "u1",
    }


async def create_pull_request(ctx: VUContext) -> None:
    res = await ctx.http.apost(
        "/pullRequest/create",
        body=pull_request_payload(ctx),
        headers={"Content-Type": "application/json"},
        name="POST /pullRequest/create",
    )
    check(res, {"create PR status is 201 or 200": lambda r: r.status in (200, 201)})


CREATE_PULL_REQUEST = Scenario(
    name="create-pull-request",
    description="POST /pullRequest/create with unique ids, expecting 201 or 200",
    workload=create_pull_request,
    options=ScenarioOptions(vus=10, duration=30.0, think_time=0.1),
    tags=("write",),
)
