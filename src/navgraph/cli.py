"""navgraph CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from navgraph.config import AnalysisConfig, ConfigError, load_analysis_config
from navgraph.manifest import ManifestError, load_journey_registry, load_manifest
from navgraph.observability import (
    bind_context,
    clear_context,
    close_file_logging,
    configure_logging,
    get_logger,
)

if TYPE_CHECKING:
    from navgraph.graph.analysis import AnalysisResult
    from navgraph.graph.graph import Graph
    from navgraph.graph.models import Journey
    from navgraph.graph.checks import CheckReport
    from navgraph.models.manifest import NavigationManifest

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="navgraph",
    help="navgraph: Navigation graph analysis for web applications.",
    no_args_is_help=True,
)
console = Console()

# Exit code for configuration, manifest, timeout and engine errors
EXIT_ERROR = 2

_SEVERITY_STYLE = {
    "pass": "[green]✓ pass[/green]",
    "warn": "[yellow]! warn[/yellow]",
    "fail": "[red]✗ fail[/red]",
}


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also append every log event to this file as JSONL.",
            envvar="NAVGRAPH_LOG_FILE",
        ),
    ] = None,
) -> None:
    """navgraph: Navigation graph analysis for web applications."""
    configure_logging(verbosity=verbose, log_file=log_file)
    clear_context()
    if log_file is not None:
        atexit.register(close_file_logging)


@app.command()
def version() -> None:
    """Show version information."""
    from navgraph import __version__

    console.print(f"navgraph v{__version__}")


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(EXIT_ERROR)


def _load_config(config_path: Path | None) -> AnalysisConfig:
    try:
        return load_analysis_config(config_path)
    except ConfigError as e:
        raise _fail(str(e)) from None


def _load_inputs(
    manifest_path: Path, journeys_path: Path | None
) -> tuple[NavigationManifest, list[Journey] | None]:
    """Load the manifest and the journeys to validate.

    A journey registry file replaces any journeys declared in the manifest.
    """
    try:
        manifest = load_manifest(manifest_path)
        if journeys_path is not None:
            return manifest, load_journey_registry(journeys_path)
        return manifest, manifest.journey_list()
    except ManifestError as e:
        raise _fail(str(e)) from None


def _run_analysis(
    manifest: NavigationManifest,
    journeys: list[Journey] | None,
    config: AnalysisConfig,
) -> tuple[Graph, AnalysisResult]:
    """Build and analyze the graph. Engine errors exit with EXIT_ERROR."""
    from navgraph.graph import Deadline, NavGraphError, analyze_graph, build_graph

    nodes, edges = manifest.to_engine_inputs()
    entry_points = config.entry_points or manifest.entry_points
    terminals = config.terminals if config.terminals is not None else manifest.terminals
    deadline = Deadline.after(config.timeout_seconds) if config.timeout_seconds else None

    try:
        graph = build_graph(nodes, edges)
        result = analyze_graph(
            graph,
            entry_points=entry_points,
            terminals=terminals,
            journeys=journeys,
            deadline=deadline,
            max_workers=config.max_workers,
        )
    except NavGraphError as e:
        console.print(Markdown(e.to_feedback()))
        raise typer.Exit(EXIT_ERROR) from None
    return graph, result


def _print_summary(result: AnalysisResult) -> None:
    table = Table(title="Navigation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Routes", str(result.node_count))
    table.add_row("Links", str(result.edge_count))
    table.add_row("Entry points", escape(", ".join(sorted(result.entry_points))))
    table.add_row("Reachable", str(len(result.reachable)))
    table.add_row("Orphans", str(len(result.orphans)))
    table.add_row("Dead-ends", str(len(result.dead_ends)))
    if result.average_journey_coverage is not None:
        table.add_row("Journey coverage", f"{result.average_journey_coverage:.0%}")
    table.add_row("Health score", f"[bold]{result.health_score:.1f}[/bold]/10")
    console.print(table)


def _print_findings(result: AnalysisResult) -> None:
    findings = (("Orphaned routes", result.orphans), ("Dead-end routes", result.dead_ends))
    for label, paths in findings:
        if not paths:
            continue
        console.print(f"[bold]{label}[/bold]")
        for path in sorted(paths):
            console.print(f"  - {escape(path)}")

    for journey in result.partial_journeys:
        console.print(
            f"[bold]Journey {escape(journey.name)}[/bold] "
            f"({journey.satisfied_pairs}/{journey.total_pairs} steps linked)"
        )
        for link in journey.missing_links:
            console.print(
                f"  [red]✗[/red] {escape(link.from_path)} -> {escape(link.to_path)} "
                f"[dim]({link.reason})[/dim]"
            )


def _print_checks(report: CheckReport) -> None:
    table = Table(title="Checks")
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Detail", style="dim")

    for check in report.checks:
        status = _SEVERITY_STYLE[check.severity]
        table.add_row(escape(check.name), status, escape(check.message))
    console.print(table)
    console.print(escape(report.summary))


@app.command()
def analyze(
    manifest: Annotated[
        Path,
        typer.Argument(help="Navigation manifest (YAML or JSON)."),
    ],
    journeys_file: Annotated[
        Path | None,
        typer.Option(
            "--journeys",
            "-j",
            help="Journey registry file. Replaces journeys declared in the manifest.",
        ),
    ] = None,
    entry: Annotated[
        list[str] | None,
        typer.Option("--entry", "-e", help="Entry point route (repeatable)."),
    ] = None,
    terminal: Annotated[
        list[str] | None,
        typer.Option("--terminal", "-t", help="Allowed terminal route (repeatable)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: ./navgraph.yaml)."),
    ] = None,
    json_out: Annotated[
        Path | None,
        typer.Option("--json-out", help="Write navgraph-result.json to this directory."),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Abort the analysis after this many seconds."),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Threads used for journey validation."),
    ] = None,
    fail_on_dead_ends: Annotated[
        bool,
        typer.Option("--fail-on-dead-ends", help="Exit 1 when dead-end routes are found."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print the health score line."),
    ] = False,
) -> None:
    """Analyze reachability, journeys and health of a navigation manifest.

    Exits 0 when clean, 1 on orphaned routes or partial journeys, and 2 on
    configuration, manifest or engine errors.

    Examples:
        navgraph analyze routes.yaml
        navgraph analyze routes.yaml --journeys journeys.yaml --json-out reports/
        navgraph analyze routes.yaml -e / -e /admin --fail-on-dead-ends
    """
    from navgraph.export import JsonExporter
    from navgraph.graph.checks import run_all_checks

    log = get_logger(__name__)
    bind_context(manifest=str(manifest))

    if timeout is not None and timeout <= 0:
        raise typer.BadParameter("must be positive", param_hint="--timeout")

    config = _load_config(config_file).with_overrides(
        entry_points=entry or None,
        terminals=terminal or None,
        timeout_seconds=timeout,
        max_workers=workers,
        fail_on_dead_ends=fail_on_dead_ends or None,
    )
    nav_manifest, journeys = _load_inputs(manifest, journeys_file)
    _, result = _run_analysis(nav_manifest, journeys, config)

    if quiet:
        console.print(f"Health score: {result.health_score:.1f}/10")
    else:
        _print_summary(result)
        _print_findings(result)
        _print_checks(run_all_checks(result))

    if json_out is not None:
        output_file = JsonExporter().export(result, json_out)
        log.info("result_exported", path=str(output_file))
        if not quiet:
            console.print(f"[green]✓[/green] Result written to {escape(str(output_file))}")

    exit_code = result.exit_code
    if config.fail_on_dead_ends and result.dead_ends:
        exit_code = 1
    if exit_code:
        raise typer.Exit(exit_code)


@app.command()
def visualize(
    manifest: Annotated[
        Path,
        typer.Argument(help="Navigation manifest (YAML or JSON)."),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: dot or mermaid."),
    ] = "dot",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: ./navgraph.yaml)."),
    ] = None,
) -> None:
    """Render the navigation graph as DOT or Mermaid.

    Entry points, orphans, dead-ends and terminals are styled. Programmatic
    links are drawn dashed.

    Examples:
        navgraph visualize routes.yaml | dot -Tsvg > nav.svg
        navgraph visualize routes.yaml --format mermaid -o nav.mmd
    """
    from navgraph.visualization import build_navigation_view, render_dot, render_mermaid

    renderers = {"dot": render_dot, "mermaid": render_mermaid}
    renderer = renderers.get(output_format.lower())
    if renderer is None:
        raise _fail(f"Unknown format '{output_format}'. Use one of: {', '.join(renderers)}")

    bind_context(manifest=str(manifest))
    config = _load_config(config_file)
    nav_manifest, journeys = _load_inputs(manifest, None)
    graph, result = _run_analysis(nav_manifest, journeys, config)

    content = renderer(build_navigation_view(graph, result))
    if output is None:
        typer.echo(content)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] Graph written to {escape(str(output))}")


if __name__ == "__main__":
    app()
