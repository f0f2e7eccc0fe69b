"""
The orchestrator that transcodes a directory of PNG files.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable

from rich.markup import escape

from figma_assets.exceptions import EncoderMissingError
from figma_assets.media import ImageEncoder
from figma_assets.media.encoder import (
    ENCODER_TOOLS,
    installation_guide,
    is_encoder_installed,
)
from figma_assets.models.assets import SOURCE_EXTENSION, ConversionTask, TargetFormat
from figma_assets.models.stats import BatchOutcome
from figma_assets.utils.path import create_dir, scan_directory

from .batch import run_batch

log = logging.getLogger(__name__)

# Encoders are CPU-bound processes, so only this many run at once
CONVERT_CONCURRENCY = 4

# Formats whose encoder is verified before any work starts
PRECHECKED_FORMATS = frozenset({TargetFormat.WEBP})


class ConvertManager:
    """Orchestrates a conversion run under a fixed concurrency ceiling."""

    def __init__(
        self,
        encoder: ImageEncoder,
        max_concurrent: int = CONVERT_CONCURRENCY,
        encoder_check: Callable[[TargetFormat], bool] = is_encoder_installed,
    ):
        self.encoder = encoder
        self.encoder_check = encoder_check
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self.active = 0
        self.peak_concurrent = 0

    def check_preconditions(self, target_format: "str | TargetFormat") -> TargetFormat:
        """
        Validates the format and, where required, the encoder installation.

        Raises:
            UnsupportedFormatError: If the format is not webp or avif.
            EncoderMissingError: If the encoder for a prechecked format is absent.
        """
        fmt = TargetFormat.parse(target_format)
        if fmt in PRECHECKED_FORMATS and not self.encoder_check(fmt):
            raise EncoderMissingError(ENCODER_TOOLS[fmt], installation_guide(fmt))
        return fmt

    @staticmethod
    def plan(
        input_dir: Path, output_dir: Path, target_format: TargetFormat
    ) -> list[ConversionTask]:
        """Builds one ConversionTask per PNG file directly inside `input_dir`."""
        return [
            ConversionTask.for_file(path, output_dir, target_format)
            for path in scan_directory(input_dir, SOURCE_EXTENSION)
        ]

    async def _convert(self, task: ConversionTask) -> None:
        async with self.semaphore:
            self.active += 1
            self.peak_concurrent = max(self.peak_concurrent, self.active)
            try:
                await self.encoder.encode(
                    task.target_format, task.input_path, task.output_path
                )
            finally:
                self.active -= 1
        log.info(
            f"[green]  ✓ Converted:[/green] {escape(str(task.input_path))} -> "
            f"{escape(str(task.output_path))}"
        )

    async def execute(
        self, input_dir: Path, output_dir: Path, target_format: "str | TargetFormat"
    ) -> BatchOutcome:
        """
        Runs the whole convert pipeline.

        Raises:
            UnsupportedFormatError: Before any I/O, for an unknown format.
            EncoderMissingError: Before any I/O, if the webp encoder is absent.
            DirectoryError: If the output directory cannot be created or the
                input directory cannot be read.
        """
        fmt = self.check_preconditions(target_format)
        create_dir(output_dir)

        tasks = self.plan(input_dir, output_dir, fmt)
        if not tasks:
            log.debug(f"No .{SOURCE_EXTENSION} files in '{escape(str(input_dir))}'.")
            return BatchOutcome()

        log.info(
            f"Converting {len(tasks)} images to {fmt.value} "
            f"({self.max_concurrent} at a time)"
        )
        return await run_batch(
            (task.input_path.name, task.output_path, self._convert(task))
            for task in tasks
        )
