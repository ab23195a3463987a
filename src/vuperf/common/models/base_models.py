# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pydantic import BaseModel, ConfigDict


class VUPerfBaseModel(BaseModel):
    """Base for all result models: immutable and strict about unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_dict(self) -> dict:
        """Plain JSON-compatible mapping for reporting."""
        return self.model_dump(mode="json")
