"""Core engine pieces exposed at the package level."""
from .engine import PlanEngine
from .executors import CurlExecutor, ExecutorManager, PreparedRequest, RequestExecutor, executor_manager
from .results import PlanResult, PlanState, RunSummary
from .settings import EngineSettings
from .variables import VariableStore, substitute

__all__ = [
    "CurlExecutor",
    "EngineSettings",
    "ExecutorManager",
    "PlanEngine",
    "PlanResult",
    "PlanState",
    "PreparedRequest",
    "RequestExecutor",
    "RunSummary",
    "VariableStore",
    "executor_manager",
    "substitute",
]
