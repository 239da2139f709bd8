"""
perfbudget CLI - Inspect performance budgets and gate CI on measurements.

Commands:
    perfbudget list     List budgets, optionally by priority
    perfbudget show     Show one budget
    perfbudget check    Evaluate a single measurement
    perfbudget gate     Evaluate a YAML file of measurements
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from perfbudget.catalog import BudgetCatalog
from perfbudget.config import get_config
from perfbudget.durations import format_duration, parse_duration
from perfbudget.evaluator import BudgetEvaluator
from perfbudget.loader import BudgetLoader, load_measurements
from perfbudget.logger import configure_logging


def _build_catalog(budgets_file: Optional[str]) -> BudgetCatalog:
    """Standard catalog plus the budgets of ``budgets_file`` (or the configured one)."""
    catalog = BudgetCatalog()
    path = Path(budgets_file) if budgets_file else get_config().get_budgets_path()
    if path is not None:
        try:
            BudgetLoader().register_file(path, catalog)
        except FileNotFoundError as e:
            raise click.ClickException(str(e))
        except (yaml.YAMLError, ValidationError) as e:
            raise click.ClickException(f"Invalid budget file {path}: {e}")
    return catalog


def _budget_row(b) -> str:
    return (
        f"{b.name:<24} {format_duration(b.max_duration_ns):>8}  "
        f"{b.max_allocations or '-':>6}  {b.max_bytes or '-':>8}  {b.priority:<3}  {b.description}"
    )


budgets_option = click.option(
    "--budgets", "-b", "budgets_file",
    type=click.Path(),
    help="YAML budget file registered on top of the standard budgets",
)


@click.group()
@click.version_option(package_name="perfbudget")
@click.option("--log-level", type=click.Choice(["debug", "info", "warning", "error"]), help="Override PERFBUDGET_LOG_LEVEL")
def main(log_level: Optional[str]):
    """perfbudget - Performance budgets for CI regression detection."""
    config = get_config()
    configure_logging(level=log_level or config.log_level, fmt=config.log_format)


@main.command("list")
@click.option("--priority", "-p", help="Only budgets with this priority (e.g. P0)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text")
@budgets_option
def list_cmd(priority: Optional[str], output_format: str, budgets_file: Optional[str]):
    """List registered budgets."""
    catalog = _build_catalog(budgets_file)
    budgets = catalog.list_by_priority(priority) if priority else catalog.list_budgets()

    if output_format == "json":
        click.echo(json.dumps([b.model_dump(mode="json") for b in budgets], indent=2))
        return

    if not budgets:
        click.echo("No budgets found")
        return
    click.echo(f"{'NAME':<24} {'DURATION':>8}  {'ALLOCS':>6}  {'BYTES':>8}  PRI  DESCRIPTION")
    for b in budgets:
        click.echo(_budget_row(b))


@main.command("show")
@click.argument("name")
@budgets_option
def show_cmd(name: str, budgets_file: Optional[str]):
    """Show the budget for NAME."""
    catalog = _build_catalog(budgets_file)
    budget, ok = catalog.get_budget(name)
    if not ok:
        click.echo(f"Error: no budget registered for '{name}'", err=True)
        sys.exit(1)

    click.echo(f"Name:            {budget.name}")
    click.echo(f"Priority:        {budget.priority}")
    click.echo(f"Max duration:    {format_duration(budget.max_duration_ns)}")
    click.echo(f"Max allocations: {budget.max_allocations or 'unlimited'}")
    click.echo(f"Max bytes:       {budget.max_bytes or 'unlimited'}")
    click.echo(f"Description:     {budget.description}")


def _parse_duration_option(ctx, param, value):
    try:
        return parse_duration(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@main.command("check")
@click.argument("name")
@click.option("--duration", "-d", required=True, callback=_parse_duration_option, help="Observed duration (e.g. 50ms)")
@click.option("--allocations", "-a", type=int, default=0, help="Observed heap allocations")
@click.option("--bytes", "allocated_bytes", type=int, default=0, help="Observed bytes allocated")
@budgets_option
def check_cmd(name: str, duration: int, allocations: int, allocated_bytes: int, budgets_file: Optional[str]):
    """Evaluate one measurement of NAME against its budget.

    Exits 1 when the measurement is over budget.

    Example:
        perfbudget check context_detection --duration 50ms --allocations 100 --bytes 25600
    """
    config = get_config()
    evaluator = BudgetEvaluator(_build_catalog(budgets_file), emit_events=config.emit_span_events)
    result = evaluator.measure(name, duration, allocations, allocated_bytes)

    status = "PASS" if result.passes else "FAIL"
    click.echo(f"{status} {result.message}")
    if not result.passes:
        sys.exit(1)


@main.command("gate")
@click.argument("measurements_file", type=click.Path())
@click.option("--fail-on-unregistered", is_flag=True, help="Fail on measurements with no budget")
@budgets_option
def gate_cmd(measurements_file: str, fail_on_unregistered: bool, budgets_file: Optional[str]):
    """Evaluate every measurement in MEASUREMENTS_FILE.

    Exits 1 if any measurement is over budget.
    """
    config = get_config()
    fail_on_unregistered = fail_on_unregistered or config.fail_on_unregistered

    try:
        samples = load_measurements(Path(measurements_file))
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except (yaml.YAMLError, ValidationError) as e:
        raise click.ClickException(f"Invalid measurement file {measurements_file}: {e}")

    evaluator = BudgetEvaluator(_build_catalog(budgets_file), emit_events=config.emit_span_events)
    summary = evaluator.measure_many(samples.measurements)

    for result in summary.results:
        if not result.registered:
            status = "SKIP"
        else:
            status = "PASS" if result.passes else "FAIL"
        click.echo(f"{status} {result.message}")

    click.echo(
        f"\n{summary.total} measurements: {summary.failed_count} failed, "
        f"{summary.unregistered_count} without budget"
    )

    if not summary.passed:
        sys.exit(1)
    if fail_on_unregistered and summary.unregistered_count:
        click.echo("Error: measurements without a registered budget", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
