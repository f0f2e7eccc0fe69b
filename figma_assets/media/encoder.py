"""
Wraps the external image encoders used to transcode PNG files.

`cwebp` (libwebp) produces WebP output and `avifenc` (libavif) produces AVIF
output. Both are invoked as subprocesses so the event loop is never blocked.
"""

import asyncio
import logging
import shutil
import sys
from pathlib import Path

from figma_assets.exceptions import EncodeError
from figma_assets.models.assets import TargetFormat

log = logging.getLogger(__name__)

ENCODER_TOOLS = {
    TargetFormat.WEBP: "cwebp",
    TargetFormat.AVIF: "avifenc",
}

_INSTALL_HINTS = {
    TargetFormat.WEBP: {
        "darwin": "brew install webp",
        "linux": "sudo apt install webp   (Fedora: sudo dnf install libwebp-tools)",
        "win32": (
            "Download libwebp from "
            "https://developers.google.com/speed/webp/download and add its "
            "'bin' folder to PATH"
        ),
    },
    TargetFormat.AVIF: {
        "darwin": "brew install libavif",
        "linux": "sudo apt install libavif-bin   (Fedora: sudo dnf install libavif-tools)",
        "win32": (
            "Download libavif from https://github.com/AOMediaCodec/libavif/releases"
            " and add 'avifenc.exe' to PATH"
        ),
    },
}


def is_encoder_installed(target_format: TargetFormat) -> bool:
    """Checks whether the encoder binary for a format is on PATH."""
    return shutil.which(ENCODER_TOOLS[target_format]) is not None


def installation_guide(target_format: TargetFormat, platform: str | None = None) -> str:
    """Returns human-readable installation instructions for a format's encoder."""
    tool = ENCODER_TOOLS[target_format]
    hints = _INSTALL_HINTS[target_format]
    platform = platform or sys.platform
    key = next((k for k in hints if platform.startswith(k)), None)

    lines = [f"'{tool}' is required to convert images to {target_format.value}."]
    if key:
        lines.append(f"Install it with: {hints[key]}")
    else:
        lines.append("Install it with one of:")
        lines.extend(f"  {name}: {hint}" for name, hint in hints.items())
    lines.append(f"Then verify with: {tool} -version")
    return "\n".join(lines)


class ImageEncoder:
    """Dispatches a conversion to the encoder matching the target format."""

    def __init__(self, quality: int = 80):
        if not 0 <= quality <= 100:
            raise ValueError("Quality must be between 0 and 100.")
        self.quality = quality

    def build_command(
        self, target_format: TargetFormat, input_path: Path, output_path: Path
    ) -> list[str]:
        q = str(self.quality)
        if target_format is TargetFormat.WEBP:
            return ["cwebp", "-quiet", "-q", q, str(input_path), "-o", str(output_path)]
        return ["avifenc", "-q", q, str(input_path), str(output_path)]

    async def encode(
        self, target_format: TargetFormat, input_path: Path, output_path: Path
    ) -> None:
        """
        Runs the encoder for `target_format` on one file.

        Raises:
            EncodeError: If the encoder cannot be launched or exits non-zero.
        """
        cmd = self.build_command(target_format, input_path, output_path)
        tool = cmd[0]
        log.debug(f"Running {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EncodeError(f"Could not launch '{tool}': {e}") from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip().splitlines()
            reason = detail[-1] if detail else "no output"
            raise EncodeError(
                f"'{tool}' exited with code {process.returncode} for "
                f"'{input_path.name}': {reason}"
            )
