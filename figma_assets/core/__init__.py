"""
Core application engine for orchestrating batch work.

`DownloadManager` turns a Figma asset listing into concurrent downloads and
`ConvertManager` transcodes a directory of PNG files under a fixed
concurrency ceiling. Both hand their units of work to `run_batch`, which
waits for every unit and aggregates the results without failing fast.
"""

from .batch import run_batch
from .convert_manager import CONVERT_CONCURRENCY, ConvertManager
from .download_manager import DownloadManager

__all__ = ["CONVERT_CONCURRENCY", "ConvertManager", "DownloadManager", "run_batch"]
