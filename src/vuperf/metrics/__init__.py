# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from vuperf.metrics.check_recorder import CheckOutcome, CheckRecorder, check
from vuperf.metrics.metrics_aggregator import (
    MetricsAggregator,
    RequestSample,
    percentile_label,
    status_class,
)
from vuperf.metrics.sketch import LatencySketch
from vuperf.metrics.thresholds import evaluate_thresholds

__all__ = [
    "CheckOutcome",
    "CheckRecorder",
    "LatencySketch",
    "MetricsAggregator",
    "RequestSample",
    "check",
    "evaluate_thresholds",
    "percentile_label",
    "status_class",
]
