import asyncio
from pathlib import Path
from typing import Optional

import pytest

from figma_assets.exceptions import EncodeError, TransportError
from figma_assets.models.assets import TargetFormat


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's Figma credentials out of every test."""
    for var in ("FIGMA_TOKEN", "FIGMA_FILE_KEY", "FIGMA_NODE_IDS"):
        monkeypatch.delenv(var, raising=False)
    yield


class RecordingDownloader:
    """Writes a placeholder file per URL; URLs listed in `fail_urls` fail."""

    def __init__(self, fail_urls=(), delay: float = 0.0):
        self.fail_urls = set(fail_urls)
        self.delay = delay
        self.active = 0
        self.peak = 0
        self.calls: list[tuple[str, str]] = []

    async def download_file(self, url: str, destination_path: str) -> int:
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            self.calls.append((url, destination_path))
            await asyncio.sleep(self.delay)
            if url in self.fail_urls:
                raise TransportError(f"HTTP 500 while fetching '{url}'")
            Path(destination_path).write_bytes(b"\x89PNG")
            return 4
        finally:
            self.active -= 1


class RecordingEncoder:
    """Tracks how many encodes overlap; inputs named in `fail_on` fail."""

    def __init__(self, fail_on=(), delay: float = 0.01, error: Optional[Exception] = None):
        self.fail_on = set(fail_on)
        self.delay = delay
        self.error = error
        self.active = 0
        self.peak = 0
        self.calls: list[tuple[TargetFormat, Path, Path]] = []

    async def encode(self, target_format, input_path, output_path):
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            self.calls.append((target_format, input_path, output_path))
            if self.error is not None:
                raise self.error
            await asyncio.sleep(self.delay)
            if input_path.name in self.fail_on:
                raise EncodeError(f"'encoder' exited with code 1 for '{input_path.name}'")
            output_path.write_bytes(b"encoded:" + input_path.read_bytes())
        finally:
            self.active -= 1


@pytest.fixture
def downloader():
    return RecordingDownloader()


@pytest.fixture
def encoder():
    return RecordingEncoder()


@pytest.fixture
def png_dir(tmp_path):
    source = tmp_path / "src"
    source.mkdir()
    return source
