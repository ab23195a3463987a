# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from vuperf.common.models.base_models import VUPerfBaseModel
from vuperf.common.models.summary_models import (
    CheckSummary,
    EndpointSummary,
    LatencySummary,
    RunSummary,
    ThresholdResult,
)

__all__ = [
    "CheckSummary",
    "EndpointSummary",
    "LatencySummary",
    "RunSummary",
    "ThresholdResult",
    "VUPerfBaseModel",
]
