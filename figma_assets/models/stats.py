"""
Per-task results and the aggregate outcome of a batch run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class TaskResult:
    """The terminal state of one unit of work: succeeded or failed."""

    label: str
    target: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchOutcome:
    """Tracks the results of a batch, in submission order."""

    results: list[TaskResult] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failures(self) -> list[TaskResult]:
        return [r for r in self.results if not r.ok]

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
