# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rich console logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from vuperf.common.constants import TRACE_LEVEL
from vuperf.common.environment import Environment

logging.addLevelName(TRACE_LEVEL, "TRACE")

_LOG_FORMAT = "%(message)s"
_DATE_FORMAT = "[%X]"


def setup_rich_logging(level: str | int | None = None, console: Console | None = None) -> None:
    """Route the root logger through a RichHandler.

    Calling this more than once replaces the previously installed handler, so
    the CLI can reconfigure the level after parsing its arguments.
    """
    if level is None:
        level = Environment.LOGGING.LEVEL
    if isinstance(level, str):
        level = TRACE_LEVEL if level.upper() == "TRACE" else level.upper()

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=Environment.LOGGING.RICH_TRACEBACKS,
        show_path=False,
        log_time_format=_DATE_FORMAT,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request at INFO, which drowns the run output
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
