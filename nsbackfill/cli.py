"""
nsbackfill CLI.

Command-line interface for scanning Android projects and backfilling
library namespaces.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import get_config
from .core.exceptions import NamespaceBackfillError
from .core.logging import setup_logging
from .services.backfill import NamespaceBackfillService, OutcomeStatus, extract_package
from .services.backfill.service import read_manifest
from .services.discovery import discover_project
from .services.writer import BuildFileWriterService

app = typer.Typer(
    name="nsbackfill",
    help="Infer missing namespaces of legacy Android library modules",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    OutcomeStatus.BACKFILLED: "green",
    OutcomeStatus.ALREADY_SET: "dim",
    OutcomeStatus.SKIPPED_NO_EXTENSION: "dim",
    OutcomeStatus.SKIPPED_NOT_LIBRARY: "dim",
    OutcomeStatus.SKIPPED_NO_MANIFEST: "yellow",
    OutcomeStatus.NO_PACKAGE: "yellow",
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"nsbackfill v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """nsbackfill: namespace inference for Android library modules."""
    pass


ProjectDirArgument = typer.Argument(
    ...,
    help="Android Gradle project directory (holding settings.gradle)",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)


@app.command()
def scan(
    project_dir: Path = ProjectDirArgument,
    no_flutter: bool = typer.Option(
        False,
        "--no-flutter-plugins",
        help="Ignore modules listed in .flutter-plugins-dependencies",
    ),
) -> None:
    """List modules and the namespace each library would receive."""
    config = get_config()
    setup_logging(config)

    try:
        modules = discover_project(project_dir, include_flutter_plugins=not no_flutter)
    except NamespaceBackfillError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Modules in {project_dir}")
    table.add_column("Module", style="cyan")
    table.add_column("Kind")
    table.add_column("Namespace")
    table.add_column("Manifest package")

    for module in modules:
        kind = module.extension.kind.value if module.extension else "-"
        manifest = module.manifest_path(config.manifest.relative_path)
        package = "-"
        if module.is_library and manifest.is_file():
            try:
                package = extract_package(read_manifest(manifest, config.manifest.encoding)) or "[yellow]none[/yellow]"
            except NamespaceBackfillError as e:
                console.print(f"[red]Error: {e}[/red]")
                raise typer.Exit(1)
        table.add_row(module.name, kind, module.namespace or "[yellow]missing[/yellow]", package)

    console.print(table)


@app.command()
def backfill(
    project_dir: Path = ProjectDirArgument,
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Persist backfilled namespaces into module build files",
    ),
    no_flutter: bool = typer.Option(
        False,
        "--no-flutter-plugins",
        help="Ignore modules listed in .flutter-plugins-dependencies",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Backfill missing library namespaces from AndroidManifest.xml."""
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)

    console.print(Panel.fit(
        "[bold blue]nsbackfill[/bold blue]\n"
        "AndroidManifest package → library namespace",
        border_style="blue",
    ))

    try:
        modules = discover_project(project_dir, include_flutter_plugins=not no_flutter)
        result = NamespaceBackfillService(config).run(modules)
        report = result.data

        written: list[str] = []
        if write or config.writer.enabled:
            by_name = {m.name: m for m in modules}
            written = BuildFileWriterService(config).write_all(
                by_name[o.module] for o in report.backfilled
            )
    except NamespaceBackfillError as e:
        console.print(f"\n[bold red]✗ Backfill failed![/bold red]")
        console.print(f"Error: {e}")
        raise typer.Exit(1)

    table = Table(title="Backfill Results")
    table.add_column("Module", style="cyan")
    table.add_column("Status")
    table.add_column("Namespace")

    for outcome in report.outcomes:
        style = STATUS_STYLES[outcome.status]
        table.add_row(
            outcome.module,
            f"[{style}]{outcome.status.value}[/{style}]",
            outcome.namespace_after or "-",
        )
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    console.print(f"\n[bold green]✓ {len(report.backfilled)} namespace(s) backfilled[/bold green]")
    if written:
        console.print(f"[bold]Build files updated:[/bold] {', '.join(written)}")


@app.command()
def config() -> None:
    """Show current configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Manifest Path", cfg.manifest.relative_path)
    table.add_row("Manifest Encoding", cfg.manifest.encoding)
    table.add_row("Write Back", str(cfg.writer.enabled))

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  NSB_LOG_LEVEL, NSB_MANIFEST_PATH, NSB_MANIFEST_ENCODING, NSB_WRITE_BACK")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
