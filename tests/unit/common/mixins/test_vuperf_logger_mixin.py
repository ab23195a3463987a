# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import logging

import pytest

from vuperf.common.constants import TRACE_LEVEL
from vuperf.common.mixins import VUPerfLoggerMixin


class Component(VUPerfLoggerMixin):
    pass


class TestVUPerfLoggerMixin:
    def test_logger_named_after_module(self) -> None:
        assert Component().logger.name == __name__
        assert Component(logger_name="custom").logger.name == "custom"

    def test_level_checks(self) -> None:
        component = Component(logger_name="vuperf.mixin.levels")
        component.logger.setLevel(logging.DEBUG)
        assert component.is_debug_enabled and not component.is_trace_enabled
        component.logger.setLevel(TRACE_LEVEL)
        assert component.is_trace_enabled

    @pytest.mark.parametrize("method,level", [("trace", TRACE_LEVEL), ("debug", logging.DEBUG), ("info", logging.INFO),
                                               ("warning", logging.WARNING), ("error", logging.ERROR)])  # fmt: skip
    def test_shortcuts(self, caplog, method: str, level: int) -> None:
        component = Component(logger_name="vuperf.mixin.shortcuts")
        with caplog.at_level(TRACE_LEVEL, logger="vuperf.mixin.shortcuts"):
            getattr(component, method)(f"{method} message")
        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [(level, f"{method} message")]
