# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporter for the run summary."""

import asyncio
from pathlib import Path

import orjson

from vuperf.common.exceptions import ConfigurationError
from vuperf.common.mixins import VUPerfLoggerMixin
from vuperf.exporters.exporter_config import ExporterConfig

DEFAULT_FILE_NAME = "vuperf_summary.json"


class SummaryJsonExporter(VUPerfLoggerMixin):
    """Writes RunSummary.to_dict() as indented JSON.

    When output_path is a directory (or has no suffix), the summary is written
    to get_file_name() inside it. Parent directories are created as needed.
    """

    def __init__(self, exporter_config: ExporterConfig, **kwargs) -> None:
        if exporter_config.output_path is None:
            raise ConfigurationError("JSON summary export requires an output path")
        super().__init__(**kwargs)
        self.exporter_config = exporter_config

    def get_file_name(self) -> str:
        return DEFAULT_FILE_NAME

    @property
    def file_path(self) -> Path:
        path = Path(self.exporter_config.output_path)
        if path.is_dir() or not path.suffix:
            return path / self.get_file_name()
        return path

    def _generate_content(self) -> bytes:
        return orjson.dumps(
            self.exporter_config.summary.to_dict(), option=orjson.OPT_INDENT_2
        )

    async def export(self) -> Path:
        path = self.file_path
        content = self._generate_content()
        await asyncio.to_thread(self._write, path, content)
        self.info(f"Summary written to {path}")
        return path

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
