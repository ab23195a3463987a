# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Named pass/fail check outcomes, recorded per VU and merged on read."""

import itertools
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from vuperf.common.models import CheckSummary
from vuperf.engine.context import current_vu

logger = logging.getLogger(__name__)

__all__ = [
    "CheckOutcome",
    "CheckRecorder",
    "check",
]

UNATTRIBUTED_VU_ID = 0
"""Shard used for records made outside of any VU iteration."""


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    name: str
    passed: bool
    vu_id: int
    iteration: int


class _CheckShard:
    """Counts written by a single VU. The lock is only contended by snapshot()."""

    __slots__ = ("lock", "counts", "first_seen")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.counts: dict[str, list[int]] = {}
        self.first_seen: dict[str, int] = {}


class CheckRecorder:
    """Aggregates check outcomes from many concurrent VUs.

    Every VU writes into its own shard, so recording never takes a lock shared
    with another VU. snapshot() merges shards by summing counts, which is
    commutative, and orders names by the global sequence number assigned the
    first time each shard saw them.
    """

    def __init__(self) -> None:
        self._shards: dict[int, _CheckShard] = {}
        self._sequence = itertools.count()

    def record(self, name: str, passed: bool) -> None:
        """Record one outcome, attributed to the calling VU iteration."""
        ctx = current_vu.get()
        if ctx is None:
            outcome = CheckOutcome(name, bool(passed), UNATTRIBUTED_VU_ID, 0)
        else:
            outcome = CheckOutcome(name, bool(passed), ctx.vu_id, ctx.iteration)
        self.record_outcome(outcome)

    def record_outcome(self, outcome: CheckOutcome) -> None:
        shard = self._shard(outcome.vu_id)
        with shard.lock:
            counts = shard.counts.get(outcome.name)
            if counts is None:
                counts = shard.counts[outcome.name] = [0, 0]
                shard.first_seen[outcome.name] = next(self._sequence)
            counts[0 if outcome.passed else 1] += 1

    def snapshot(self) -> Mapping[str, CheckSummary]:
        """Immutable ``name -> CheckSummary`` mapping, ordered by first-seen name."""
        totals: dict[str, list[int]] = {}
        first_seen: dict[str, int] = {}
        for shard in list(self._shards.values()):
            with shard.lock:
                for name, (passes, fails) in shard.counts.items():
                    merged = totals.setdefault(name, [0, 0])
                    merged[0] += passes
                    merged[1] += fails
                    seq = shard.first_seen[name]
                    if name not in first_seen or seq < first_seen[name]:
                        first_seen[name] = seq

        ordered = sorted(totals, key=first_seen.__getitem__)
        return MappingProxyType(
            {
                name: CheckSummary(pass_count=totals[name][0], fail_count=totals[name][1])
                for name in ordered
            }
        )

    @property
    def total_outcomes(self) -> int:
        return sum(c.total for c in self.snapshot().values())

    def _shard(self, vu_id: int) -> _CheckShard:
        shard = self._shards.get(vu_id)
        if shard is None:
            shard = self._shards.setdefault(vu_id, _CheckShard())
        return shard


def check(
    value: Any,
    predicates: Mapping[str, Callable[[Any], bool]],
    recorder: CheckRecorder | None = None,
) -> bool:
    """Evaluate named predicates against ``value`` and record each result.

    Mirrors the scripting style ``check(res, {"status is 200": lambda r: r.status == 200})``.
    A predicate that raises is recorded as a failure. Returns True only if every
    predicate passed.

    Args:
        value: Object handed to every predicate, usually an HttpResponse
        predicates: Check name to predicate mapping, evaluated in order
        recorder: Recorder to write into. Defaults to the current VU's recorder.
    """
    if recorder is None:
        ctx = current_vu.get()
        recorder = ctx.checks if ctx is not None else None

    all_passed = True
    for name, predicate in predicates.items():
        try:
            passed = bool(predicate(value))
        except Exception as e:
            logger.debug(f"Check {name!r} raised {e!r}; recording as failed")
            passed = False
        if recorder is not None:
            recorder.record(name, passed)
        all_passed = all_passed and passed
    return all_passed
