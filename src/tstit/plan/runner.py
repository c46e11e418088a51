"""Sequential execution of a batch of plan files."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from tstit.core.engine import PlanEngine
from tstit.core.errors import EngineError
from tstit.core.results import PlanResult, PlanState, RunSummary
from tstit.core.settings import EngineSettings
from tstit.reporting.base import ReportManager, Reporter

from .loader import load_plan

logger = logging.getLogger(__name__)


def run_plans(
    plan_files: Sequence[Path],
    settings: EngineSettings,
    *,
    reporters: Sequence[Reporter] = (),
    engine: Optional[PlanEngine] = None,
) -> RunSummary:
    """Load and execute every plan file in order with one shared engine.

    A failing plan never stops the batch; load errors count as failures.
    """

    engine = engine or PlanEngine(settings)
    manager = ReportManager(reporters)
    summary = RunSummary()
    total = len(plan_files)
    logger.info("found %d testplans", total)
    manager.start(total)
    start = time.perf_counter()
    for index, path in enumerate(plan_files, start=1):
        logger.info("processing %s...", path)
        result = _run_one(engine, path)
        summary.results.append(result)
        manager.handle_result(result, index, total)
    summary.duration_s = time.perf_counter() - start
    logger.info(
        "test execution completed, success: %d, failed: %d",
        summary.passed,
        summary.failed,
    )
    manager.complete(summary)
    return summary


def _run_one(engine: PlanEngine, path: Path) -> PlanResult:
    try:
        plan = load_plan(path)
    except EngineError as exc:
        logger.error("testplan failed to load: %s", exc)
        return PlanResult(
            identifier=str(path),
            status="failed",
            state=PlanState.FAILED,
            error=exc,
            failed_stage=PlanState.LOADED,
        )
    return engine.run(plan, identifier=str(path))
