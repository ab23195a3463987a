# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Configuration for summary exporters."""

from dataclasses import dataclass
from pathlib import Path

from vuperf.common.models import RunSummary


@dataclass(slots=True)
class ExporterConfig:
    """What to export and where.

    Attributes:
        summary: Final RunSummary of the run
        output_path: Destination file for file exporters. Console exporters ignore it.
    """

    summary: RunSummary
    output_path: Path | None = None
