"""
evalboard CLI - Run evaluations from the terminal.

Commands:
    evalboard serve                 Run the HTTP API
    evalboard upload <file.csv>     Store test cases from a CSV file
    evalboard sample [path]         Write the sample CSV template
    evalboard test-cases            List stored test cases
    evalboard evaluate <id>         Evaluate one test case
    evalboard batch [ids...]        Evaluate several test cases in sequence
    evalboard results               List (or export) evaluation results
    evalboard stats                 Show dashboard totals
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import Settings
from .evaluation import EvaluationError, EvaluationResult
from .evaluation.reporting import (
    SORT_BY_DATE,
    SORT_CHOICES,
    dashboard_stats,
    export_results_csv,
    filter_results,
)
from .ingest import generate_sample_csv, parse_test_cases, validate_csv_file
from .llm import LLMError
from .logging_setup import configure_logging
from .security import ValidationError
from .services import Services, build_services

app = typer.Typer(help="LLM-as-judge evaluation of prompt/expected-output test cases")
console = Console()


def _load_services() -> Services:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    try:
        return build_services(settings)
    except (LLMError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _score_style(score: float) -> str:
    if score >= 8:
        return "green"
    if score >= 5:
        return "yellow"
    return "red"


def _truncate(text: str, width: int = 60) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


def _results_table(title: str, results: list[EvaluationResult]) -> Table:
    table = Table(title=title)
    table.add_column("Test Case", style="bold")
    table.add_column("Prompt")
    table.add_column("Acc", justify="right")
    table.add_column("Cla", justify="right")
    table.add_column("Com", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Model")
    table.add_column("Created")

    for r in results:
        style = _score_style(r.total_score)
        table.add_row(
            r.test_case_id[:8],
            _truncate(r.test_case.prompt) if r.test_case else "-",
            str(r.scores.accuracy),
            str(r.scores.clarity),
            str(r.scores.completeness),
            f"[{style}]{r.total_score:.1f}[/{style}]",
            r.model_used,
            r.created_at,
        )
    return table


# =============================================================================
# SERVE
# =============================================================================


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    console.print(f"\n[bold blue]evalboard serve[/bold blue] on http://{host}:{port}\n")
    uvicorn.run(
        "evalboard.api.gateway:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# =============================================================================
# TEST CASES
# =============================================================================


@app.command()
def upload(
    path: Path = typer.Argument(..., help="CSV file with prompt,expected_output columns"),
):
    """Store test cases from a CSV file."""
    if not path.is_file():
        console.print(f"[bold red]Error:[/bold red] {path} not found")
        raise typer.Exit(1)

    try:
        validate_csv_file(path.name, path.stat().st_size)
        rows = parse_test_cases(path.read_text(encoding="utf-8"))
    except (ValidationError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    services = _load_services()
    created = services.test_cases.insert_many(rows)
    console.print(f"[bold green]Successfully uploaded {len(created)} test case(s)[/bold green]")
    for test_case in created:
        console.print(f"  {test_case.id}  {_truncate(test_case.prompt)}")


@app.command()
def sample(
    path: Path = typer.Argument(None, help="Where to write the template (default: stdout)"),
):
    """Write the sample CSV template."""
    content = generate_sample_csv()
    if path is None:
        typer.echo(content, nl=False)
        return
    path.write_text(content, encoding="utf-8")
    console.print(f"[green]Wrote sample template to {path}[/green]")


@app.command("test-cases")
def list_test_cases():
    """List stored test cases, newest first."""
    services = _load_services()
    test_cases = services.test_cases.get_all()

    table = Table(title=f"Test Cases ({len(test_cases)})")
    table.add_column("ID", style="bold")
    table.add_column("Prompt")
    table.add_column("Expected Output")
    table.add_column("Created")
    for t in test_cases:
        table.add_row(t.id, _truncate(t.prompt), _truncate(t.expected_output), t.created_at)
    console.print(table)


# =============================================================================
# EVALUATE
# =============================================================================


@app.command()
def evaluate(
    test_case_id: str = typer.Argument(..., help="Test case id"),
    actual_output: str = typer.Option(
        None, "--actual-output", "-o", help="Output to judge (default: generate one)"
    ),
):
    """Evaluate one test case."""
    services = _load_services()
    try:
        result = asyncio.run(services.orchestrator.evaluate(test_case_id, actual_output))
    except EvaluationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(_results_table("Evaluation Result", [result]))


@app.command()
def batch(
    test_case_ids: list[str] = typer.Argument(None, help="Test case ids, in order"),
    all_cases: bool = typer.Option(False, "--all", help="Evaluate every stored test case"),
):
    """Evaluate several test cases in sequence, pausing between calls."""
    services = _load_services()
    ids = list(test_case_ids or [])
    if all_cases:
        ids = [t.id for t in services.test_cases.get_all()]
    if not ids:
        console.print("[bold red]Error:[/bold red] give test case ids or --all")
        raise typer.Exit(1)

    console.print(f"\n[bold blue]evalboard batch[/bold blue] ({len(ids)} test case(s))\n")
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Evaluating", total=len(ids))

        def on_progress(position: int, total: int) -> None:
            progress.update(task, completed=position)

        report = asyncio.run(
            services.orchestrator.evaluate_batch_report(ids, on_progress=on_progress)
        )
        progress.update(task, completed=len(ids))

    console.print(_results_table("Batch Results", report.results))
    for failure in report.failures:
        console.print(f"[red]FAILED[/red] {failure.test_case_id}: {failure.error}")

    console.print(f"\n{report.succeeded}/{report.total} evaluated")
    if report.failures:
        raise typer.Exit(1)


# =============================================================================
# RESULTS
# =============================================================================


@app.command()
def results(
    search: str = typer.Option(None, help="Case-insensitive match on prompt or output"),
    sort: str = typer.Option(SORT_BY_DATE, help="Sort by: date, score"),
    export: Path = typer.Option(None, help="Write the listing to this CSV file"),
):
    """List evaluation results, or export them as CSV."""
    if sort not in SORT_CHOICES:
        console.print(f"[bold red]Error:[/bold red] sort must be one of: {', '.join(SORT_CHOICES)}")
        raise typer.Exit(1)

    services = _load_services()
    listing = filter_results(services.results.get_all(), search=search, sort_by=sort)

    if export is not None:
        export.write_text(export_results_csv(listing), encoding="utf-8")
        console.print(f"[green]Exported {len(listing)} result(s) to {export}[/green]")
        return

    console.print(_results_table(f"Results ({len(listing)})", listing))


@app.command()
def stats():
    """Show total test cases, total evaluations and the average score."""
    services = _load_services()
    summary = dashboard_stats(services.test_cases, services.results)

    table = Table(title="Dashboard")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Test cases", str(summary.total_test_cases))
    table.add_row("Evaluations", str(summary.total_evaluations))
    table.add_row("Average score", f"{summary.average_score:.1f}")
    console.print(table)


if __name__ == "__main__":
    app()
