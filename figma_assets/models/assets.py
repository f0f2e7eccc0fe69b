"""
Immutable work items for the download and convert pipelines.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from figma_assets.exceptions import UnsupportedFormatError

SOURCE_EXTENSION = "png"


class TargetFormat(str, Enum):
    """Output formats the convert pipeline can produce."""

    WEBP = "webp"
    AVIF = "avif"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | TargetFormat") -> "TargetFormat":
        """
        Resolves a user-supplied format name.

        Raises:
            UnsupportedFormatError: If the value is not a supported format.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            supported = ", ".join(f.value for f in cls)
            raise UnsupportedFormatError(
                f"Unsupported format '{value}'. Supported formats: {supported}."
            ) from None


@dataclass(frozen=True)
class AssetRecord:
    """A node exported by the design API. `url` is None when nothing renders."""

    id: str
    name: str
    url: Optional[str] = None


@dataclass(frozen=True)
class DownloadTask:
    target_path: Path
    source_url: str
    label: str


@dataclass(frozen=True)
class ConversionTask:
    input_path: Path
    output_path: Path
    target_format: TargetFormat

    @classmethod
    def for_file(
        cls, input_path: Path, output_dir: Path, target_format: TargetFormat
    ) -> "ConversionTask":
        """Builds a task writing `<stem>.<ext>` inside `output_dir`."""
        output_path = output_dir / f"{input_path.stem}.{target_format.extension}"
        return cls(input_path, output_path, target_format)
