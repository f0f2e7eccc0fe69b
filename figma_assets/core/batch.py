"""
Runs a set of independent units of work and aggregates their results.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Awaitable, Iterable, Optional, Tuple

from rich.markup import escape

from figma_assets.exceptions import FigmaAssetsError
from figma_assets.models.stats import BatchOutcome, TaskResult

log = logging.getLogger(__name__)

# (label, target path, work) - the work raises on failure
BatchUnit = Tuple[str, Optional[Path], Awaitable[object]]


async def _settle(label: str, target: Optional[Path], work: Awaitable[object]) -> TaskResult:
    """Awaits one unit and turns its outcome into a TaskResult."""
    try:
        await work
    except FigmaAssetsError as e:
        log.error(f"[red]  ✗ {escape(label)}: {escape(str(e))}[/red]")
        return TaskResult(label, target, str(e))
    except Exception as e:
        log.error(
            f"[red]  ✗ Unexpected error for {escape(label)}: {escape(str(e))}[/red]",
            exc_info=log.getEffectiveLevel() == logging.DEBUG,
        )
        return TaskResult(label, target, f"Unexpected error: {e}")
    return TaskResult(label, target)


async def run_batch(units: Iterable[BatchUnit]) -> BatchOutcome:
    """
    Starts every unit at once and waits for all of them.

    A failing unit never cancels or blocks its siblings; its error is captured
    in its own result. Results keep the order in which units were given.
    """
    start_time = time.monotonic()
    results = await asyncio.gather(
        *(_settle(label, target, work) for label, target, work in units)
    )
    return BatchOutcome(
        results=list(results), duration_s=time.monotonic() - start_time
    )
