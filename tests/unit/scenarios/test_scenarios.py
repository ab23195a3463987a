# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import httpx
import orjson
import pytest

from tests.unit.conftest import as_vu, status_transport
from vuperf.common.exceptions import ScenarioNotFoundError
from vuperf.engine.context import VUContext
from vuperf.http import HttpClient
from vuperf.metrics import CheckRecorder, MetricsAggregator
from vuperf.scenarios import get_scenario, list_scenarios
from vuperf.scenarios.create_pull_request import create_pull_request, pull_request_payload
from vuperf.scenarios.read_stats import read_stats

BASE_URL = "http://target.test"


class TestRegistry:
    def test_list(self) -> None:
        assert [s.name for s in list_scenarios()] == ["create-pull-request", "read-stats"]

    @pytest.mark.parametrize("name", ["read-stats", "READ-STATS", "Create-Pull-Request"])  # fmt: skip
    def test_lookup_is_case_insensitive(self, name: str) -> None:
        assert get_scenario(name).name == name.lower()

    def test_unknown_lists_available(self) -> None:
        with pytest.raises(ScenarioNotFoundError, match="create-pull-request, read-stats"):
            get_scenario("write-everything")

    @pytest.mark.parametrize("name,vus,duration", [("read-stats", 20, 30.0), ("create-pull-request", 10, 30.0)])  # fmt: skip
    def test_default_options(self, name: str, vus: int, duration: float) -> None:
        options = get_scenario(name).options
        assert (options.vus, options.duration, options.think_time) == (vus, duration, 0.1)
        assert options.to_run_options() == {
            "concurrency": vus,
            "duration": duration,
            "think_time": 0.1,
            "base_url": "http://localhost:8080",
        }


class TestReadStats:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,passes", [(200, 1), (404, 0)])  # fmt: skip
    async def test_requests_and_checks(self, status: int, passes: int) -> None:
        metrics, checks = MetricsAggregator(), CheckRecorder()
        client = HttpClient(base_url=BASE_URL, metrics=metrics, transport=status_transport(status))
        try:
            with as_vu(1, http=client, checks=checks) as ctx:
                await read_stats(ctx)
        finally:
            await client.aclose()

        assert list(metrics.snapshot()) == ["GET /users/stats", "GET /pullRequests/stats"]
        snap = checks.snapshot()
        assert list(snap) == ["/users/stats status is 200", "/stats/pullRequests status is 200"]
        assert all(c.pass_count == passes and c.total == 1 for c in snap.values())


class TestCreatePullRequest:
    def test_payload_ids_are_unique_per_vu_and_iteration(self) -> None:
        ids = {
            pull_request_payload(VUContext(vu_id=vu, iteration=it, started_at=0.0), now_ms=1000)["pull_request_id"]
            for vu in range(1, 4)
            for it in range(5)
        }  # fmt: skip
        assert len(ids) == 15

    def test_payload_shape(self) -> None:
        ctx = VUContext(vu_id=7, iteration=2, started_at=0.0)
        assert pull_request_payload(ctx, now_ms=1_700_000_000_000) == {
            "pull_request_id": "vuperf-pr-7-2-1700000000000",
            "pull_request_name": "vuperf-load-7-2-1700000000000",
            "author_id": "u1",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,passed", [(201, True), (200, True), (409, False), (500, False)])  # fmt: skip
    async def test_posts_and_checks(self, status: int, passed: bool) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(orjson.loads(request.content))
            return httpx.Response(status, request=request)

        metrics, checks = MetricsAggregator(), CheckRecorder()
        client = HttpClient(base_url=BASE_URL, metrics=metrics, transport=httpx.MockTransport(handler))
        try:
            with as_vu(4, iteration=1, http=client, checks=checks) as ctx:
                await create_pull_request(ctx)
        finally:
            await client.aclose()

        assert bodies[0]["author_id"] == "u1"
        assert bodies[0]["pull_request_id"].startswith("vuperf-pr-4-1-")
        assert metrics.snapshot()["POST /pullRequest/create"].count == 1
        result = checks.snapshot()["create PR status is 201 or 200"]
        assert result.pass_count == (1 if passed else 0)
