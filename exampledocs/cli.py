"""
exampledocs CLI - Documentation Example Corpus Builder

Regenerates the example corpus from scratch:
1. Provisions a disposable PostgreSQL database and seeds it
2. Builds the shared schema handle
3. Renders every example through its category plugin into examples.json
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from exampledocs.config import BuildSettings
from exampledocs.errors import ProcessFailure
from exampledocs.pipeline import CorpusBuildPipeline

app = typer.Typer(
    name="exampledocs",
    help="Documentation Example Corpus Builder",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _print_error(error: BaseException) -> None:
    err_console.print(f"\n[red]❌ Error: {escape(str(error))}[/red]")

    # Captured tool output is printed verbatim
    failure = error if isinstance(error, ProcessFailure) else None
    cause = error.__cause__
    if failure is None and isinstance(cause, ProcessFailure):
        failure = cause
    if failure is not None:
        for label, output in (("stdout", failure.stdout), ("stderr", failure.stderr)):
            if output.strip():
                err_console.print(f"[dim]{label}:[/dim]")
                err_console.print(output.rstrip(), markup=False, highlight=False)


@app.command()
def build(
    examples_dir: Optional[Path] = typer.Option(
        None,
        "--examples-dir",
        "-e",
        help="Examples directory (default: ./examples)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Artifact path (default: ./examples.json)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Rebuild the example corpus.

    Settings are read from EXAMPLEDOCS_* environment variables (a .env file
    is loaded automatically). EXAMPLEDOCS_SCHEMA_URL and EXAMPLEDOCS_DATA_URL
    must point at the baseline schema and seed data.

    Example:
        EXAMPLEDOCS_SCHEMA_URL=https://... EXAMPLEDOCS_DATA_URL=https://... \\
            exampledocs --examples-dir examples --output examples.json
    """
    _configure_logging(verbose)

    try:
        settings = BuildSettings.from_env(examples_dir=examples_dir, output_path=output)

        console.print(Panel.fit(
            "[bold cyan]Example Corpus Build[/bold cyan]\n\n"
            f"Examples: [yellow]{settings.examples_dir}[/yellow]\n"
            f"Database: [yellow]{settings.database_name}[/yellow]\n"
            f"Schemas: [yellow]{', '.join(settings.exposed_schemas)}[/yellow]\n"
            f"Output: [yellow]{settings.output_path}[/yellow]",
            border_style="cyan"
        ))

        pipeline = CorpusBuildPipeline(settings)
        document = asyncio.run(pipeline.run())
    except KeyboardInterrupt:
        err_console.print("\n[yellow]⚠️  Build interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _print_error(e)
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Section")
    table.add_column("Examples", justify="right")
    for section in document.sections:
        table.add_row(section.category, section.title, str(len(section.examples)))

    console.print("\n")
    console.print(Panel.fit("[bold green]✨ Build Complete![/bold green]", border_style="green"))
    console.print(table)
    console.print(f"\n[bold]📁 Wrote:[/bold] [cyan]{settings.output_path}[/cyan] ({document.example_count} examples)")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
