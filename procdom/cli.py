"""
Command line entry point for the process instance-domain verifier.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from procdom.logic.check_log import CheckLog
from procdom.logic.config import MetricFamilyError, VerifierConfig, detect_family
from procdom.logic.errors import VerificationError
from procdom.logic.utils.logging_config import setup_basic_logging
from procdom.logic.verifier import ConformanceVerifier
from procdom.schemas.results import CheckOutcome
from procdom_sdk import MetricsServiceClient, MetricsServiceError

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1

_OUTCOME_STYLE = {
    CheckOutcome.PASS: "[green]pass[/green]",
    CheckOutcome.WARN: "[yellow]warn[/yellow]",
    CheckOutcome.FAIL: "[red]fail[/red]",
    CheckOutcome.SKIP: "[dim]skip[/dim]",
}


def print_summary(console: Console, check_log: CheckLog) -> None:
    table = Table(title="Check Results", border_style="red" if check_log.has_failures else "green")
    table.add_column("Check", style="cyan")
    table.add_column("Outcome")
    table.add_column("Details")
    for record in check_log.records:
        detail = ", ".join(f"{k}={v}" for k, v in record.details.items())
        if record.message:
            detail = f"{detail} {record.message}".strip()
        table.add_row(record.check, _OUTCOME_STYLE[record.outcome], escape(detail))
    console.print(table)


@click.command(context_settings={"help_option_names": ["--help"]})
@click.argument("metrics", nargs=-1, required=True)
@click.option("--url", "base_url", default=None, help="Base URL of the metrics service (default: $PROCDOM_URL)")
@click.option("-h", "--host", default=None, help="Host whose collector the session connects to (default: localhost)")
@click.option("-i", "--iterations", type=int, default=None, help="Restricted fetch iterations (default: 1)")
@click.option("-t", "--refresh", type=int, default=None, help="Service refresh interval in seconds (default: 1)")
@click.option("--procfs-root", type=click.Path(path_type=Path), default=None, help="Process filesystem to scan")
@click.option("--timeout", "request_timeout", type=float, default=None, help="Per-request timeout (default: none)")
@click.option("--json-report", type=click.Path(path_type=Path), default=None, help="Write a JSON report here")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Print instance maps and lookups")
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
def main(
    metrics: tuple[str, ...],
    base_url: Optional[str],
    host: Optional[str],
    iterations: Optional[int],
    refresh: Optional[int],
    procfs_root: Optional[Path],
    request_timeout: Optional[float],
    json_report: Optional[Path],
    verbose: bool,
    debug: bool,
) -> None:
    """Verify instance-domain conformance of proc / hotproc METRICS."""
    setup_basic_logging(level=logging.DEBUG if debug else logging.INFO)
    console = Console()

    try:
        family = detect_family(metrics)
    except MetricFamilyError as e:
        raise click.UsageError(str(e))

    try:
        config = VerifierConfig.from_env(
            metrics=list(metrics),
            base_url=base_url,
            host=host,
            iterations=iterations,
            refresh=refresh,
            procfs_root=procfs_root,
            request_timeout=request_timeout,
            json_report=json_report,
            verbose=verbose or None,
        )
    except ValueError as e:
        raise click.UsageError(str(e))
    config.apply_family(family)

    for i, metric in enumerate(config.metrics):
        logger.info(f"metrics[{i}] = <{metric}>")

    console.print(
        Panel.fit(
            f"[bold cyan]Process instance-domain verifier[/bold cyan]\n"
            f"Service: {config.base_url} (host {config.host})\n"
            f"Family: {family.value}  Metrics: {len(config.metrics)}",
            title="Starting",
        )
    )

    check_log = CheckLog()
    exit_code = EXIT_PASS
    try:
        with MetricsServiceClient(config.base_url, host=config.host, timeout=config.request_timeout) as client:
            report = ConformanceVerifier(client, config, check_log=check_log).run()
    except VerificationError as e:
        console.print(f"[red]❌ {e.check}: {escape(e.message)}[/red]")
        exit_code = EXIT_FAIL
    except MetricsServiceError as e:
        console.print(f"[red]❌ Cannot talk to metrics service at {config.base_url}: {escape(str(e))}[/red]")
        exit_code = EXIT_FAIL

    print_summary(console, check_log)
    if exit_code == EXIT_PASS:
        console.print(f"[green]✅ All checks passed[/green] ({report.warnings} warnings)")
    sys.exit(exit_code)
