# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from vuperf.common.mixins.vuperf_logger_mixin import VUPerfLoggerMixin

__all__ = [
    "VUPerfLoggerMixin",
]
