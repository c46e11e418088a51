"""Data models for test plan files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_METHOD = "GET"
DEFAULT_EXECUTOR = "curl"


@dataclass(frozen=True)
class RequestSpec:
    url: str
    method: str = DEFAULT_METHOD
    body: Optional[str] = None


@dataclass(frozen=True)
class ExecutionConfig:
    executor: str = DEFAULT_EXECUTOR


@dataclass(frozen=True)
class ExpectationSpec:
    expect: Mapping[str, str]
    assign: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TestPlan:
    input: RequestSpec
    output: ExpectationSpec
    plan: ExecutionConfig = field(default_factory=ExecutionConfig)
    source: Optional[Path] = None

    __test__ = False  # not a pytest class

    def identifier(self) -> str:
        if self.source is not None:
            return str(self.source)
        return f"{self.input.method} {self.input.url}"
