"""
The orchestrator that lists a file's image assets and downloads them.
"""

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

from rich.markup import escape

from figma_assets.media import Downloader
from figma_assets.models.assets import SOURCE_EXTENSION, AssetRecord, DownloadTask
from figma_assets.models.stats import BatchOutcome
from figma_assets.utils.path import create_dir, find_collisions, sanitize_filename

from .batch import run_batch

log = logging.getLogger(__name__)

AssetLister = Callable[[], Awaitable[Optional[List[AssetRecord]]]]


class DownloadManager:
    """
    Orchestrates a download run: list assets, plan one task per renderable
    asset, then fetch everything at once.
    """

    def __init__(self, fetch_assets: AssetLister, downloader: Downloader):
        self.fetch_assets = fetch_assets
        self.downloader = downloader

    @staticmethod
    def plan(output_dir: Path, records: Sequence[AssetRecord]) -> list[DownloadTask]:
        """
        Builds one DownloadTask per record that has a URL.

        Records without a URL have nothing to render and are dropped. Targets
        are not de-duplicated; colliding names are reported as a warning.
        """
        tasks = []
        for record in records:
            if not record.url:
                log.debug(f"Skipping node '{record.id}': no rendered image.")
                continue
            filename = f"{sanitize_filename(record.name)}.{SOURCE_EXTENSION}"
            tasks.append(
                DownloadTask(
                    target_path=output_dir / filename,
                    source_url=record.url,
                    label=record.name,
                )
            )

        collisions = find_collisions((t.target_path, t.label) for t in tasks)
        for target, labels in collisions.items():
            log.warning(
                f"[yellow]⚠ {len(labels)} assets share the file name "
                f"'{escape(target.name)}' ({escape(', '.join(labels))}); "
                "only the last one written will be kept.[/yellow]"
            )
        return tasks

    async def _download(self, task: DownloadTask) -> None:
        await self.downloader.download_file(task.source_url, str(task.target_path))
        log.info(f"[green]  ✓ Downloaded:[/green] {escape(str(task.target_path))}")

    async def execute(self, output_dir: Path) -> BatchOutcome:
        """
        Runs the whole download pipeline.

        Returns:
            The outcome of every download. An empty outcome means the listing
            contained nothing to download.

        Raises:
            DirectoryError: If the output directory cannot be created.
            ListingError: If the assets cannot be listed; nothing is downloaded.
        """
        create_dir(output_dir)

        records = await self.fetch_assets()
        if not records:
            log.debug("Asset listing returned no records.")
            return BatchOutcome()

        tasks = self.plan(output_dir, records)
        if not tasks:
            return BatchOutcome()

        log.info(f"Downloading {len(tasks)} images to [dim]{escape(str(output_dir))}[/dim]")
        return await run_batch(
            (task.label, task.target_path, self._download(task)) for task in tasks
        )
