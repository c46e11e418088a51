"""CLI entry point for tstit."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from tstit import DESCRIPTION, __version__
from tstit.core.errors import ConfigurationError, PlanDiscoveryError
from tstit.core.settings import EngineSettings
from tstit.logging_config import setup_logging
from tstit.plan import discover_plan_files, run_plans
from tstit.reporting import JsonReporter, Reporter, TerminalReporter

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"tstit {__version__}")
    raise click.exceptions.Exit()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the tstit version and exit.",
)
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.option(
    "--export-vars",
    is_flag=True,
    help="Also export assigned variables into the process environment.",
)
def cli(
    paths: Tuple[Path, ...],
    verbose: bool,
    report_format: str,
    report_path: Optional[str],
    no_color: bool,
    export_vars: bool,
) -> None:
    """Run the testplan files found under PATHS (files or directories)."""

    setup_logging(verbose)
    if not paths:
        logger.error("no testplan paths provided")
        click.echo("try:  tstit --help")
        raise click.exceptions.Exit(1)

    click.echo(f"tstit v{__version__} - {DESCRIPTION}")
    try:
        settings = EngineSettings.from_env(export_variables=export_vars)
        plan_files = discover_plan_files(paths)
    except (ConfigurationError, PlanDiscoveryError) as exc:
        logger.error("%s", exc)
        raise click.ClickException(str(exc)) from exc

    reporters: List[Reporter]
    if report_format == "json":
        reporters = [JsonReporter(report_path)]
    else:
        reporters = [TerminalReporter(use_color=not no_color)]
    run_plans(plan_files, settings, reporters=reporters)
    raise click.exceptions.Exit(0)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="tstit", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
