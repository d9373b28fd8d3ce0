"""Component Extractor CLI - pull a React component and the code it reaches out of a project."""
from pathlib import Path
from typing import Optional

import typer
import click
from rich.table import Table
from rich.markup import escape

from .config import __version__, get_config
from .extractor import ComponentExtractor, ComponentNotFoundError, ExtractionResult
from .utils.logger import configure_logging
from .utils.safe_console import SafeConsole

app = typer.Typer(
    name="component-extractor",
    help="Extract a React component and its tree-shaken dependencies into a standalone project",
    add_completion=False
)
# Use SafeConsole for Windows Unicode compatibility
console = SafeConsole()


def _setup_logging(verbose: bool):
    level = "INFO" if verbose else get_config().log_level
    configure_logging(level, console=SafeConsole(stderr=True))


def _print_summary(result: ExtractionResult):
    """Table of extracted files with what pruning did to each."""
    graph = result.graph
    title = "Files to extract (dry run)" if result.dry_run else "Extracted files"

    table = Table(title=title)
    table.add_column("File", style="cyan", no_wrap=False)
    table.add_column("Used bindings", style="yellow")
    table.add_column("Result", style="magenta")

    for path in result.files:
        used = graph.used_bindings.get(path)
        if path in graph.entries:
            used_text = "entry (kept whole)"
        elif path in graph.fully_used:
            used_text = "* (whole module)"
        elif used:
            used_text = ", ".join(sorted(used))
        else:
            used_text = "-"

        if result.dry_run:
            outcome = "entry" if path in result.entry_files else "dependency"
        else:
            entry = result.ledger.get(path)
            if entry and entry["pruned"]:
                outcome = f"✂ pruned: {', '.join(entry['removed'])}"
            else:
                outcome = "copied"

        table.add_row(escape(path), escape(used_text), escape(outcome))

    console.print(table)

    for cycle in graph.cycles():
        console.warn(f"Import cycle: {' → '.join(cycle)}")


def _run_extract(component_name: str, project: str, output: Optional[str],
                 dry_run: bool, manifest: bool, verbose: bool):
    _setup_logging(verbose)

    project_path = Path(project).resolve()
    if not project_path.is_dir():
        console.error(f"Project path does not exist: {project_path}")
        raise typer.Exit(1)

    console.step("🔍", f"Extracting component: {component_name}")
    extractor = ComponentExtractor(project_path, get_config())

    try:
        with console.status("Analyzing dependencies (tree-shaking)..."):
            result = extractor.extract_component(
                component_name,
                output,
                dry_run=dry_run,
                write_manifest=True if manifest else None,
            )
    except ComponentNotFoundError as e:
        console.error(str(e))
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        console.error(f"Extraction failed: {e}")
        raise typer.Exit(1)

    _print_summary(result)

    if dry_run:
        console.print("\n[bold blue]DRY RUN - No files were written[/bold blue]")
        return

    console.success(f"Extraction complete! Files saved to: {result.output_dir}")
    console.print(f"📁 Extracted files: {len(result.ledger)}")


@app.command()
def extract(
    component_name: str = typer.Argument(..., help="Component name to extract"),
    project: str = typer.Option(".", "--project", "-p", help="Project root path"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory (default: ./extracted)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be extracted without writing anything"),
    manifest: bool = typer.Option(False, "--manifest", help="Write extraction-manifest.json into the output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file as it is processed"),
):
    """Extract a component and the code it depends on."""
    _run_extract(component_name, project, output, dry_run, manifest, verbose)


@app.command("extract-page")
def extract_page(
    page_name: str = typer.Argument(..., help="Page name to extract"),
    project: str = typer.Option(".", "--project", "-p", help="Project root path"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output directory (default: ./extracted)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be extracted without writing anything"),
    manifest: bool = typer.Option(False, "--manifest", help="Write extraction-manifest.json into the output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file as it is processed"),
):
    """Extract a page and the code it depends on."""
    _run_extract(page_name, project, output, dry_run, manifest, verbose)


@app.command("list")
def list_components(
    project: str = typer.Option(".", "--project", "-p", help="Project root path"),
    kind: str = typer.Option(
        "all", "--kind", "-k",
        click_type=click.Choice(["components", "pages", "all"], case_sensitive=False),
        help="Which directories to list definitions from",
    ),
):
    """List the components defined in the project."""
    _setup_logging(False)

    project_path = Path(project).resolve()
    if not project_path.is_dir():
        console.error(f"Project path does not exist: {project_path}")
        raise typer.Exit(1)

    components = ComponentExtractor(project_path, get_config()).list_components(kind.lower())

    if not components:
        console.print("[bold yellow]No components found.[/bold yellow]")
        return

    console.step("🔍", f"Found {len(components)} component(s):")
    for name in components:
        console.print(f"  • {escape(name)}")


def _version_callback(value: bool):
    if value:
        console.print(f"component-extractor {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit"),
):
    """Component Extractor - tree-shaking extraction of React components."""


if __name__ == "__main__":
    app()
