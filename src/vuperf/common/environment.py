# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Environment-driven settings.

Every value can be overridden with a ``VUPERF_<GROUP>_<NAME>`` environment
variable, for example ``VUPERF_ENGINE_REQUEST_TIMEOUT=10``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _EngineSettings(BaseSettings):
    """Engine tuning knobs that are not part of a single run's configuration."""

    model_config = SettingsConfigDict(env_prefix="VUPERF_ENGINE_")

    REQUEST_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Assumed per-request timeout in seconds, also passed to the HTTP client.",
    )
    HARD_TIMEOUT_MULTIPLIER: float = Field(
        default=2.0,
        gt=0,
        description="Default iteration ceiling is think_time + this multiple of REQUEST_TIMEOUT.",
    )
    CANCEL_POLL_INTERVAL: float = Field(
        default=0.05,
        gt=0,
        description="How often an external cancellation token is polled, in seconds.",
    )
    MAX_CONNECTIONS: int = Field(
        default=1000,
        ge=1,
        description="Connection pool limit for the built-in HTTP client.",
    )


class _LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VUPERF_LOGGING_")

    LEVEL: str = Field(default="INFO", description="Default log level.")
    RICH_TRACEBACKS: bool = Field(default=True)


class _Environment:
    """Namespace of settings groups, loaded once at import time."""

    ENGINE = _EngineSettings()
    LOGGING = _LoggingSettings()


Environment = _Environment
