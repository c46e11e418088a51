"""Engine sequencing substitution, dispatch, validation and assignment."""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Dict, Optional

from .assignment import apply_assignments
from .errors import EngineError
from .executors import ExecutorManager, PreparedRequest, RequestExecutor, executor_manager
from .results import PlanResult, PlanState
from .settings import EngineSettings
from .validator import validate_response
from .variables import VariableStore, substitute

if TYPE_CHECKING:
    from tstit.plan.models import TestPlan

logger = logging.getLogger(__name__)


class PlanEngine:
    """Executes plans one at a time against a shared variable store.

    One engine is meant to live for a whole batch so that variables assigned
    by a plan are visible to the plans that follow it.
    """

    def __init__(
        self,
        settings: EngineSettings,
        *,
        store: Optional[VariableStore] = None,
        executors: Optional[ExecutorManager] = None,
    ) -> None:
        self._settings = settings
        self._store = store if store is not None else VariableStore(export=settings.export_variables)
        self._executors = executors or executor_manager
        self._instances: Dict[str, RequestExecutor] = {}
        self.state = PlanState.LOADED

    @property
    def store(self) -> VariableStore:
        return self._store

    def execute(self, plan: TestPlan) -> Dict[str, str]:
        """Run ``plan``; return the variables it assigned or raise ``EngineError``."""

        self.state = PlanState.LOADED
        executor_name = plan.plan.executor
        logger.debug("using %s executor", executor_name)
        executor = self._executor(executor_name)

        self.state = PlanState.SUBSTITUTING
        request = PreparedRequest(
            method=plan.input.method,
            url=substitute(plan.input.url, self._store),
            body=substitute(plan.input.body, self._store) if plan.input.body is not None else None,
        )

        self.state = PlanState.DISPATCHING
        raw = executor.dispatch(request)

        self.state = PlanState.VALIDATING
        envelope = validate_response(raw, plan.output.expect, self._store)

        self.state = PlanState.ASSIGNING
        assigned = apply_assignments(envelope, plan.output.assign, self._store)

        self.state = PlanState.SUCCEEDED
        return assigned

    def run(self, plan: TestPlan, identifier: Optional[str] = None) -> PlanResult:
        identifier = identifier or plan.identifier()
        start = time.perf_counter()
        try:
            assigned = self.execute(plan)
        except EngineError as exc:
            stage = self.state
            self.state = PlanState.FAILED
            logger.error("testplan failed during %s: %s", stage.value, exc)
            return PlanResult(
                identifier=identifier,
                status="failed",
                state=PlanState.FAILED,
                duration_s=time.perf_counter() - start,
                error=exc,
                failed_stage=stage,
            )
        logger.info("testplan succeeded")
        return PlanResult(
            identifier=identifier,
            status="passed",
            state=PlanState.SUCCEEDED,
            duration_s=time.perf_counter() - start,
            assigned=assigned,
        )

    def _executor(self, name: str) -> RequestExecutor:
        executor = self._instances.get(name)
        if executor is None:
            executor = self._executors.create(name, self._settings)
            self._instances[name] = executor
        return executor
