"""
typegraph CLI

Builds the type cross-reference graph of a Python workspace or project.

Examples:
    typegraph ./repo                      # full scan
    typegraph ./repo -r                   # reference links only
    typegraph ./repo --mode inheritance -o out/
"""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from typegraph.application.build_graph import BuildReport, build_type_graph
from typegraph.domain.models import ScanMode
from typegraph.infrastructure.config import TypeGraphSettings, get_settings
from typegraph.infrastructure.exceptions import InputError, TypeGraphError
from typegraph.infrastructure.logging import configure_logging

app = typer.Typer(name="typegraph", help="Type cross-reference graph builder", add_completion=False)
console = Console()


def resolve_mode(
    mode: Optional[ScanMode],
    full: bool,
    references: bool,
    inheritance: bool,
    default: ScanMode,
) -> ScanMode:
    """Pick the scan mode from the switches; at most one may be given."""
    switches = (
        (ScanMode.FULL, full),
        (ScanMode.REFERENCE, references),
        (ScanMode.INHERITANCE, inheritance),
    )
    chosen = [m for m, flag in switches if flag]
    if mode is not None:
        chosen.append(mode)
    if len(set(chosen)) > 1:
        raise typer.BadParameter("Choose one scan mode: -f, -r, -i or --mode")
    return chosen[0] if chosen else default


def _print_report(report: BuildReport) -> None:
    table = Table(title=f"Type graph: {report.workspace} ({report.mode.value})", show_header=False)
    table.add_column("metric", style="cyan")
    table.add_column("value", justify="right")
    table.add_row("Modules", f"{report.modules:,}")
    table.add_row("Source units", f"{report.units:,}")
    table.add_row("Nodes", f"{report.nodes:,}")
    table.add_row("Reference links", f"{report.reference_links:,}")
    table.add_row("Inheritance links", f"{report.inheritance_links:,}")
    if report.skipped_modules:
        table.add_row("Skipped modules", ", ".join(report.skipped_modules))
    if report.skipped_units:
        table.add_row("Skipped units", f"{report.skipped_units:,}")
    table.add_row("Duration", f"{report.duration_seconds:.2f}s")
    console.print(table)


@app.command()
def build(
    path: Path = typer.Argument(..., exists=True, help="Workspace directory, project directory or .py file"),
    mode: Optional[ScanMode] = typer.Option(None, "--mode", "-m", case_sensitive=False, help="Scan mode"),
    full: bool = typer.Option(False, "-f", help="Scan both reference and inheritance links"),
    references: bool = typer.Option(False, "-r", help="Scan reference links only"),
    inheritance: bool = typer.Option(False, "-i", help="Scan inheritance links only"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Artifact directory"),
    eager_registration: Optional[bool] = typer.Option(
        None,
        "--eager-registration/--per-module-registration",
        help="Register every module's types before linking",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
):
    """
    Build the type graph of PATH and write <name>.<mode>.dependency-graph.json.
    """
    settings = get_settings()
    overrides = {}
    if eager_registration is not None:
        overrides["eager_registration"] = eager_registration
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if json_logs:
        overrides["log_json"] = True
    if overrides:
        try:
            settings = TypeGraphSettings(**{**settings.model_dump(), **overrides})
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise typer.BadParameter(f"Invalid setting override: {fields}") from e

    configure_logging(settings.log_level, json_format=settings.log_json)
    scan_mode = resolve_mode(mode, full, references, inheritance, settings.default_mode)

    console.print(f"\n[cyan]Scanning {escape(str(path))} ({scan_mode.value})[/cyan]\n")
    try:
        report = build_type_graph(path, scan_mode, settings=settings, output_dir=output_dir)
    except InputError as e:
        console.print(f"[red]Input error: {escape(str(e))}[/red]")
        raise typer.Exit(2)
    except TypeGraphError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_report(report)
    console.print(f"[green]Wrote {escape(str(report.artifact_path))}[/green]\n")


if __name__ == "__main__":
    app()
