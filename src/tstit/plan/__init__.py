"""Plan model, loader and batch runner."""

from .loader import discover_plan_files, load_plan, parse_plan
from .models import ExecutionConfig, ExpectationSpec, RequestSpec, TestPlan
from .runner import run_plans

__all__ = [
    "ExecutionConfig",
    "ExpectationSpec",
    "RequestSpec",
    "TestPlan",
    "discover_plan_files",
    "load_plan",
    "parse_plan",
    "run_plans",
]
