#!/usr/bin/env python3
"""
shouldmatch CLI - run declarative matcher suites

Usage:
    shouldmatch run <suite.yaml> [OPTIONS]
    shouldmatch validate <suite.yaml>
    shouldmatch --version
"""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .reporting import ExpectationRecord, ExpectationStatus, RunStatus
from .suites import Expectation, load_suite, run_suite

app = typer.Typer(
    name="shouldmatch",
    help="✅ shouldmatch - declarative matchers for models and controllers",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"✅ shouldmatch v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    ✅ shouldmatch - declarative matchers for models and controllers

    Check validations, responses and routes with YAML expectation suites.
    """
    pass


def setup_logging(level: str) -> None:
    """Send library logs through rich at the requested level."""
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        console.print(f"[red]❌ Unknown log level:[/red] {level}")
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def print_record(expectation: Expectation, record: ExpectationRecord) -> None:
    text = record.description or expectation.matcher.value
    if expectation.negate:
        text = f"not {text}"
    console.print(f"▶ [bold]{escape(expectation.id)}[/bold] ({escape(expectation.subject)}): {escape(text)}")

    if record.status == ExpectationStatus.PASSED:
        console.print("  [green]✅ Passed[/green]")
    elif record.status == ExpectationStatus.FAILED:
        console.print(f"  [red]❌ Failed:[/red] {escape(record.failure_message or '')}")
    elif record.status == ExpectationStatus.ERROR:
        console.print(f"  [red]⚠️  Error:[/red] {escape(record.error_message or '')}")
    elif record.status == ExpectationStatus.SKIPPED:
        console.print(f"  [yellow]⏭️  {record.failure_message or 'Skipped'}[/yellow]")


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l",
        help="Log level: DEBUG, INFO, WARNING or ERROR"
    ),
):
    """
    Run an expectation suite.

    Build each subject, evaluate every matcher against it,
    and generate a run report.
    """
    setup_logging(log_level)

    if output not in ("text", "json"):
        console.print(f"[red]❌ Unknown output format:[/red] {output}")
        raise typer.Exit(code=1)

    # The suite's own directory is importable so local factories resolve
    suite_dir = str(suite_file.resolve().parent)
    if suite_dir not in sys.path:
        sys.path.insert(0, suite_dir)

    verbose = output == "text" and not quiet
    if verbose:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=1)

    if verbose:
        console.print(f"   [green]✅ Valid suite:[/green] {suite.name}")
        console.print(f"\n{'='*60}")
        console.print(f"  [bold]Running:[/bold] {suite.name}")
        console.print(f"  [bold]Subjects:[/bold] {len(suite.subjects)}")
        console.print(f"  [bold]Expectations:[/bold] {len(suite.expectations)}")
        console.print(f"{'='*60}\n")

    reporter = run_suite(suite, on_result=print_record if verbose else None)
    report = reporter.report

    # Output results
    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + report.summary(), markup=False)
    else:
        console.print(f"{report.status.value.upper()}: {report.passed}/{report.total} passed")

    # Save report
    if not no_report:
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if verbose:
            console.print(f"\n📁 Report saved: {report_path}")

    # Exit with appropriate code
    if report.status == RunStatus.PASSED:
        raise typer.Exit(code=0)
    else:
        raise typer.Exit(code=1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and report any errors without running the suite.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if validation.is_valid:
        console.print(f"\n[green]✅ Valid suite:[/green] {suite.name}")
        console.print(f"   Subjects: {len(suite.subjects)}")
        console.print(f"   Expectations: {len(suite.expectations)}")

        # Show expectations summary
        table = Table(title="Expectations")
        table.add_column("ID", style="cyan")
        table.add_column("Subject", style="magenta")
        table.add_column("Matcher")
        table.add_column("Qualifiers")

        for expectation in suite.expectations:
            matcher = expectation.matcher.value
            if expectation.args:
                matcher += f"({', '.join(repr(a) for a in expectation.args)})"
            if expectation.negate:
                matcher = f"not {matcher}"
            qualifiers = ", ".join(q.name for q in expectation.qualifiers)
            if expectation.skip:
                qualifiers = f"{qualifiers} (skipped)".strip()
            table.add_row(expectation.id, expectation.subject, matcher, qualifiers)

        console.print()
        console.print(table)
        raise typer.Exit(code=0)
    else:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=1)


@app.command()
def info():
    """
    Show information about shouldmatch.
    """
    console.print(f"""
✅ [bold]shouldmatch[/bold] v{__version__}

Declarative matchers for models and controllers

[bold]Features:[/bold]
  • Inclusion and allow-value matchers for model validations
  • Response, redirect, template, session and flash matchers
  • Route, rescue_from and filter_param declarations
  • Declarative YAML expectation suites
  • Detailed JSON run reports

[bold]Quick Start:[/bold]
  shouldmatch validate suites/issue.yaml
  shouldmatch run suites/issue.yaml

[bold]Configuration:[/bold]
  Set SHOULDMATCH_CONFIG to a YAML settings file to change default
  messages and probe values.
""")


if __name__ == "__main__":
    app()
