# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLIS = 1_000_000
MILLIS_PER_SECOND = 1000

STATUS_CLASS_KEYS = ("1xx", "2xx", "3xx", "4xx", "5xx", "transport_error")
"""Buckets reported for every endpoint label, in display order."""

TRACE_LEVEL = 5
