"""
Utilities for handling file names, directories, and directory scans.
"""

import re
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Tuple

from figma_assets.exceptions import DirectoryError

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(name: str) -> str:
    """
    Replaces every character that is unsafe in a file name with '_'.

    Only `/ \\ : * ? " < > |` are replaced; everything else, including
    whitespace and non-ASCII characters, is kept as-is.
    """
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    try:
        directory_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(
            f"Failed to create directory '{directory_path}': {e}"
        ) from e


def scan_directory(directory_path: Path, extension: str) -> list[Path]:
    """
    Lists the regular files directly inside `directory_path` whose extension
    is exactly `extension` (case-sensitive, without the leading dot).
    """
    suffix = f".{extension}"
    try:
        entries = list(directory_path.iterdir())
    except OSError as e:
        raise DirectoryError(
            f"Failed to read input directory '{directory_path}': {e}"
        ) from e
    return sorted(p for p in entries if p.suffix == suffix and p.is_file())


def find_collisions(pairs: Iterable[Tuple[Path, str]]) -> dict[Path, list[str]]:
    """
    Groups (target_path, source_label) pairs by target and returns only the
    targets claimed by more than one source.
    """
    claimed: dict[Path, list[str]] = defaultdict(list)
    for target, label in pairs:
        claimed[target].append(label)
    return {target: labels for target, labels in claimed.items() if len(labels) > 1}
