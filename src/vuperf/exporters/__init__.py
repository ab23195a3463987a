# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Run summary exporters."""

from vuperf.exporters.exporter_config import ExporterConfig
from vuperf.exporters.summary_console_exporter import SummaryConsoleExporter
from vuperf.exporters.summary_json_exporter import SummaryJsonExporter

__all__ = [
    "ExporterConfig",
    "SummaryConsoleExporter",
    "SummaryJsonExporter",
]
