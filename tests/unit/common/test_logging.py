# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from vuperf.common.constants import TRACE_LEVEL
from vuperf.common.logging import setup_rich_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupRichLogging:
    def test_installs_single_handler(self, restore_root_logger) -> None:
        setup_rich_logging("INFO")
        setup_rich_logging("DEBUG")
        rich_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert restore_root_logger.level == logging.DEBUG

    @pytest.mark.parametrize("level,expected", [("trace", TRACE_LEVEL), ("warning", logging.WARNING), (logging.ERROR, logging.ERROR)])  # fmt: skip
    def test_levels(self, restore_root_logger, level, expected: int) -> None:
        setup_rich_logging(level)
        assert restore_root_logger.level == expected

    def test_quiets_http_libraries(self, restore_root_logger) -> None:
        setup_rich_logging("TRACE")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_writes_to_given_console(self, restore_root_logger) -> None:
        buffer = io.StringIO()
        setup_rich_logging("INFO", console=Console(file=buffer, width=200))
        logging.getLogger("vuperf.test").info("hello from the run")
        assert "hello from the run" in buffer.getvalue()
