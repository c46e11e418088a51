"""Terminal reporter rendering per-plan outcomes and a summary."""
from __future__ import annotations

import click
from colorama import Fore, Style, just_fix_windows_console

from tstit.core.results import PlanResult, RunSummary

from .base import Reporter


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._failures: list[tuple[int, PlanResult]] = []
        if use_color:
            just_fix_windows_console()

    def on_start(self, total: int) -> None:
        self._failures.clear()
        click.echo(self._styled(f"Running {total} testplan(s)", Fore.CYAN))

    def on_plan_result(self, result: PlanResult, index: int, total: int) -> None:
        label, color = _format_status(result.status)
        ms = result.duration_s * 1000
        click.echo(f"[{index}/{total}] {self._styled(f'{label:<5}', color)} {result.identifier} ({ms:.2f} ms)")
        if result.passed:
            for name, value in result.assigned.items():
                click.echo(f"    assigned: {name}={value}")
            return
        self._failures.append((index, result))
        self._print_failure_details(result)

    def on_complete(self, summary: RunSummary) -> None:
        color = Fore.GREEN if summary.failed == 0 else Fore.RED
        click.echo(
            self._styled("Summary", color)
            + f": total={summary.total} success={summary.passed} failed={summary.failed}"
            f" duration={summary.duration_s:.2f}s"
        )
        if self._failures:
            click.echo(self._styled("Failure details:", Fore.RED))
            for index, result in self._failures:
                click.echo(f"  [{index}] {result.identifier} -> {result.error_kind}")

    def _styled(self, text: str, color: str) -> str:
        if not self._use_color or not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def _print_failure_details(self, result: PlanResult, *, indent: str = "    ") -> None:
        if result.failed_stage is not None:
            click.echo(f"{indent}stage: {result.failed_stage.value}")
        if result.error is not None:
            click.echo(f"{indent}{result.error.kind}: {result.error.message}")


def _format_status(status: str) -> tuple[str, str]:
    if status == "passed":
        return "PASS", Fore.GREEN
    if status == "failed":
        return "FAIL", Fore.RED
    return status.upper(), ""
