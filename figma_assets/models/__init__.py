"""
Data Models Layer.

This package contains the records and task descriptions that flow between
the API client, the orchestrators and the CLI, plus the Pydantic
configuration model.
"""

from .assets import AssetRecord, ConversionTask, DownloadTask, TargetFormat
from .config import FigmaConfig
from .stats import BatchOutcome, TaskResult

__all__ = [
    "AssetRecord",
    "BatchOutcome",
    "ConversionTask",
    "DownloadTask",
    "FigmaConfig",
    "TargetFormat",
    "TaskResult",
]
