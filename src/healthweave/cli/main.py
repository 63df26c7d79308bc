"""CLI for healthweave: analyze / render / serve commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from healthweave.core.config import AppSettings
from healthweave.core.startup_checks import validate_settings
from healthweave.exceptions import HealthWeaveError
from healthweave.extraction.report_parser import ReportParser
from healthweave.formatters.json_formatter import JSONFormatter
from healthweave.formatters.pdf_formatter import PDFFormatter
from healthweave.hooks import setup_logging
from healthweave.models import ParsedReport, SourceDocument
from healthweave.providers.factory import create_provider_chain
from healthweave.services.analysis_service import AnalysisService

app = typer.Typer(name="healthweave", help="Clinical document synthesis and report rendering")
console = Console()


def _build_analysis_service(settings: AppSettings) -> AnalysisService:
    return AnalysisService(create_provider_chain(settings), ReportParser(settings.extraction))


def _load_documents(files: list[Path]) -> list[SourceDocument]:
    documents = []
    for path in files:
        if not path.is_file():
            raise typer.BadParameter(f"Not a file: {path}")
        documents.append(
            SourceDocument(
                display_name=path.name,
                extracted_text=path.read_text(encoding="utf-8", errors="replace"),
            )
        )
    return documents


def _print_report(report: ParsedReport) -> None:
    console.print(f"\n[bold]Report {report.report_id}[/bold] via [cyan]{report.provider_identifier}[/cyan]")
    console.print(f"\n[bold]Summary:[/bold] {escape(report.summary)}\n")

    table = Table(title="Key Findings")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Finding", max_width=90)
    for i, finding in enumerate(report.key_findings, 1):
        table.add_row(str(i), escape(finding))
    console.print(table)

    table = Table(title="Recommendations")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Recommendation", max_width=90)
    for i, rec in enumerate(report.recommendations, 1):
        table.add_row(str(i), escape(rec))
    console.print(table)


@app.command()
def analyze(
    files: list[Path] = typer.Argument(..., help="Text files with extracted document content"),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Patient context"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write report JSON here"),
    pdf: Optional[Path] = typer.Option(None, "--pdf", help="Also write the PDF here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Analyze documents and print the parsed report."""
    settings = AppSettings()
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)
    validate_settings(settings)

    documents = _load_documents(files)
    console.print(f"[bold]Analyzing {len(documents)} document(s)[/bold]")
    service = _build_analysis_service(settings)

    try:
        report = asyncio.run(service.analyze(documents, context))
    except HealthWeaveError as exc:
        console.print(f"[red]Analysis failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _print_report(report)

    if output:
        JSONFormatter().format_to_file(report, output)
        console.print(f"[green]Report saved to {output}[/green]")
    if pdf:
        PDFFormatter(settings.pdf).format_to_file(report, pdf)
        console.print(f"[green]PDF saved to {pdf}[/green]")


@app.command()
def render(
    report_file: Path = typer.Argument(..., help="Report JSON written by 'analyze'"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="PDF output path"),
) -> None:
    """Render a saved report JSON as a PDF."""
    settings = AppSettings()
    report = ParsedReport.model_validate_json(report_file.read_text(encoding="utf-8"))
    target = output or report_file.with_suffix(".pdf")
    PDFFormatter(settings.pdf).format_to_file(report, target)
    console.print(f"[green]PDF saved to {target}[/green]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from HEALTHWEAVE_API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from HEALTHWEAVE_API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = AppSettings()
    bind_host = host or settings.api.host
    bind_port = port or settings.api.port
    console.print(f"[bold]Serving HealthWeave API on {bind_host}:{bind_port}[/bold]")
    uvicorn.run("healthweave.api.app:app", host=bind_host, port=bind_port, reload=reload)


if __name__ == "__main__":
    app()
