# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from vuperf.http.client import HttpClient, HttpResponse

__all__ = [
    "HttpClient",
    "HttpResponse",
]
