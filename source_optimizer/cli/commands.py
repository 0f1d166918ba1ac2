"""
Command-line interface for the source optimizer.

This module provides CLI commands for optimizing single files, previewing
the result, batch-processing directories and serving the web API.
"""

import os
import sys
import json
import click
import logging
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.panel import Panel
from rich.text import Text

from .. import __version__
from ..core.pipeline import CodeOptimizer, PipelineConfig
from ..core.language import LANGUAGE_NAMES, PROFILES
from ..core.aggregator import FileStatus, optimize_directory
from ..core.errors import UnsupportedLanguage, OptimizerError

console = Console()

# Configure logging
logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

LANGUAGE_CHOICE = click.Choice(sorted(LANGUAGE_NAMES), case_sensitive=False)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """Source Optimizer - strip comments, split statements, reindent and simplify source files."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Output file (default: optimized_output<ext> next to the input)')
@click.option('--language', '-l', type=LANGUAGE_CHOICE, help='Override language detection')
@click.option('--string-aware', is_flag=True, help='Keep comment markers that appear inside string literals')
@click.option('--report-output', type=click.Path(dir_okay=False), help='Save the report to a file')
@click.option('--report-format', type=click.Choice(['json', 'text']), default='json', help='Report file format')
def optimize(input_path, output, language, string_aware, report_output, report_format):
    """Optimize a source file and write the result."""
    console.print(f"[bold blue]Optimizing:[/bold blue] {input_path}")

    config = PipelineConfig(
        input_path=input_path,
        output_path=output,
        language=language,
        string_aware=string_aware,
    )
    optimizer = CodeOptimizer.from_config(config)

    try:
        result = optimizer.optimize_file(config)
    except UnsupportedLanguage as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    except OptimizerError as e:
        console.print(f"[red]Error during optimization: {e}[/red]")
        sys.exit(1)

    display_result(result)

    if report_output:
        save_report_to_file(result.to_dict(), report_output, report_format)
        console.print(f"[green]Report saved to {report_output}[/green]")


@main.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--language', '-l', type=LANGUAGE_CHOICE, help='Override language detection')
@click.option('--string-aware', is_flag=True, help='Keep comment markers that appear inside string literals')
def preview(input_path, language, string_aware):
    """Preview the optimized output without writing a file."""
    console.print(f"[bold magenta]Preview for:[/bold magenta] {input_path}")

    config = PipelineConfig(input_path=input_path, language=language, string_aware=string_aware)
    optimizer = CodeOptimizer.from_config(config)

    try:
        result = optimizer.preview_file(config)
    except UnsupportedLanguage as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    except OptimizerError as e:
        console.print(f"[red]Error generating preview: {e}[/red]")
        sys.exit(1)

    console.print(Panel(Text(result.output), title="Optimized Code", border_style="green"))
    console.print(f"\n[green]{result.statements} statements, "
                  f"{len(result.suggestions)} simplifications[/green]")


@main.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False))
@click.argument('output_dir', type=click.Path(file_okay=False))
@click.option('--recursive/--no-recursive', default=True, help='Process subdirectories')
@click.option('--string-aware', is_flag=True, help='Keep comment markers that appear inside string literals')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Save the batch report (JSON)')
def batch(directory, output_dir, recursive, string_aware, output):
    """Optimize every supported file in a directory."""
    console.print(f"[bold yellow]Batch:[/bold yellow] {directory} -> {output_dir}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        progress.add_task("Optimizing files...", total=None)
        aggregator = optimize_directory(directory, output_dir, recursive=recursive,
                                        string_aware=string_aware)

    display_batch_results(aggregator)

    if output:
        save_report_to_file(aggregator.export_report(), output, 'json')
        console.print(f"[green]Report saved to {output}[/green]")

    if aggregator.generate_summary().failed_files:
        sys.exit(1)


@main.command()
def languages():
    """List supported languages and file extensions."""
    table = Table(title="Supported Languages")
    table.add_column("Family", style="cyan")
    table.add_column("Name")
    table.add_column("Extensions", justify="center")
    table.add_column("Override", style="dim")
    table.add_column("Reindent", justify="center")

    for kind, profile in PROFILES.items():
        overrides = ", ".join(name for name, k in LANGUAGE_NAMES.items() if k == kind)
        table.add_row(
            kind.value,
            profile.display_name,
            ", ".join(profile.extensions),
            overrides,
            "braces" if profile.brace_structured else "unchanged",
        )

    console.print(table)


@main.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=8080, help='Port to bind to')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--root', type=click.Path(exists=True, file_okay=False), default='.',
              help='Directory the file endpoint may read from and write to')
def dashboard(host, port, debug, root):
    """Launch the web API."""
    try:
        from ..dashboard.app import create_app
    except ImportError as e:
        console.print(f"[red]Web dependencies missing ({e}). Install with: pip install source-optimizer\\[web][/red]")
        sys.exit(1)

    console.print(f"[bold green]Starting API at http://{host}:{port}[/bold green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        app = create_app({'OPTIMIZER_ROOT': os.path.abspath(root)})
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        console.print("\n[yellow]API stopped[/yellow]")


def display_result(result):
    """Display a single-file report."""
    summary_text = f"""
Original Lines: {result.original_lines}
Optimized Lines: {result.optimized_lines}
Lines Saved: {result.lines_saved}
Single-line comments removed: {result.single_line_comments}
Multi-line comments removed: {result.block_comments}
    """.strip()

    console.print(Panel(summary_text, title="Code optimization & formatting complete", border_style="blue"))

    if result.unused_variables:
        console.print("\n[bold yellow]Unused Variables:[/bold yellow]")
        for name in result.unused_variables:
            console.print(f"  - {name}")

    if result.unused_includes:
        console.print("\n[bold yellow]Unused Includes:[/bold yellow]")
        for directive in result.include_directives:
            console.print(f"  - {directive}", markup=False)

    if result.suggestions:
        console.print("\n[bold green]Simplifications Applied:[/bold green]")
        for message in result.suggestion_messages:
            console.print(f"  - {message}", markup=False)

    if result.output_path:
        console.print(f"\n[green]Output saved to: {result.output_path}[/green]")

    console.print(Panel(Text(result.preview), title="Preview", border_style="green"))


def display_batch_results(aggregator):
    """Display batch results in a formatted table."""
    summary = aggregator.generate_summary()

    summary_text = f"""
Total Files: {summary.total_files}
Optimized: {summary.optimized_files}
Skipped: {summary.skipped_files}
Failed: {summary.failed_files}
Lines Saved: {summary.lines_saved}
Comments Removed: {summary.single_line_comments + summary.block_comments}
Simplifications: {sum(summary.simplification_distribution.values())}
    """.strip()

    console.print(Panel(summary_text, title="Batch Summary", border_style="blue"))

    if not aggregator.files:
        console.print("[yellow]No files found[/yellow]")
        return

    table = Table(title="Files")
    table.add_column("File", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Lines Saved", justify="center")
    table.add_column("Details", style="dim")

    for outcome in aggregator.files:
        status_style = {
            FileStatus.OPTIMIZED: "green",
            FileStatus.SKIPPED: "yellow",
            FileStatus.FAILED: "red",
        }.get(outcome.status, "white")

        table.add_row(
            outcome.filename,
            f"[{status_style}]{outcome.status.value}[/{status_style}]",
            str(outcome.lines_saved),
            outcome.message,
        )

    console.print(table)


def save_report_to_file(report_data, output_path, report_format):
    """Save a report to file in the specified format."""
    parent = os.path.dirname(os.path.abspath(output_path))
    Path(parent).mkdir(parents=True, exist_ok=True)

    if report_format == 'json':
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(report_data, f, indent=2)
    else:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(generate_text_report(report_data))


def generate_text_report(report_data):
    """Generate text report content for a single-file report."""
    lines = [
        "SOURCE OPTIMIZATION REPORT",
        "=" * 50,
        "",
        f"Input: {report_data['input_path']}",
        f"Output: {report_data['output_path']}",
        f"Language: {report_data['language']}",
        "",
        f"Original Lines: {report_data['original_lines']}",
        f"Optimized Lines: {report_data['optimized_lines']}",
        f"Lines Saved: {report_data['lines_saved']}",
        "",
        "COMMENTS REMOVED:",
        f"- Single-line comments removed: {report_data['comments_removed']['single_line']}",
        f"- Multi-line comments removed: {report_data['comments_removed']['block']}",
    ]

    if report_data['unused_variables']:
        lines += ["", "UNUSED VARIABLES:"]
        lines += [f"- {name}" for name in report_data['unused_variables']]

    if report_data['unused_includes']:
        lines += ["", "UNUSED INCLUDES:"]
        lines += [f"- {directive}" for directive in report_data['unused_includes']]

    if report_data['simplifications']:
        lines += ["", "SIMPLIFICATIONS APPLIED:"]
        lines += [f"- {item['message']}" for item in report_data['simplifications']]

    lines += ["", "PREVIEW:", report_data['preview']]
    return "\n".join(lines)


if __name__ == '__main__':
    main()
