# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from vuperf.common.config.config_defaults import CLIDefaults, ExitCodes, RunDefaults
from vuperf.common.config.run_config import (
    RunConfig,
    ThresholdConfig,
    validate_run_config,
)

__all__ = [
    "CLIDefaults",
    "ExitCodes",
    "RunConfig",
    "RunDefaults",
    "ThresholdConfig",
    "validate_run_config",
]
