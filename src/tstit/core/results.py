"""Result data structures produced by the engine."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .errors import EngineError


class PlanState(enum.Enum):
    LOADED = "loaded"
    SUBSTITUTING = "substituting"
    DISPATCHING = "dispatching"
    VALIDATING = "validating"
    ASSIGNING = "assigning"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PlanResult:
    """Outcome of executing a single plan.

    ``state`` is ``SUCCEEDED`` or ``FAILED``; for failures ``failed_stage``
    names the stage that was running when the error was raised.
    """

    identifier: str
    status: str
    state: PlanState
    duration_s: float = 0.0
    error: Optional[EngineError] = None
    failed_stage: Optional[PlanState] = None
    assigned: Mapping[str, str] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status == "passed"

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None


@dataclass
class RunSummary:
    """Aggregated outcome of a batch of plans."""

    results: List[PlanResult] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed
