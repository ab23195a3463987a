# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass


@dataclass(frozen=True)
class RunDefaults:
    CONCURRENCY = 1
    THINK_TIME = 0.0
    THINK_TIME_JITTER = 0.0
    PERCENTILES = (50.0, 90.0, 95.0, 99.0)
    SKETCH_RELATIVE_ACCURACY = 0.01


@dataclass(frozen=True)
class CLIDefaults:
    LOG_LEVEL = "INFO"
    SUMMARY_EXPORT = None


@dataclass(frozen=True)
class ExitCodes:
    SUCCESS = 0
    CONFIGURATION_ERROR = 2
    THRESHOLDS_FAILED = 99
