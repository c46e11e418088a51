"""Reporter interface definitions."""
from __future__ import annotations

from typing import Sequence

from tstit.core.results import PlanResult, RunSummary


class Reporter:
    """Interface for output renderers."""

    def on_start(self, total: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_plan_result(self, result: PlanResult, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, summary: RunSummary) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_start(total)

    def handle_result(self, result: PlanResult, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_plan_result(result, index, total)

    def complete(self, summary: RunSummary) -> None:
        for reporter in self._reporters:
            reporter.on_complete(summary)
