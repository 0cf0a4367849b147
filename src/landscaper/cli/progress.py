"""
Rich progress displays for CLI operations.

All output goes to stderr to preserve stdout for machine-readable output
(saved file paths, suggestion lines, descriptions).
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from landscaper.core.models import DesignCatalog

# Console for stderr output (preserves stdout for machine output)
console = Console(stderr=True)


@contextmanager
def request_progress(action: str, model: str | None = None) -> Iterator[None]:
    """
    Display a spinner while a model request is in flight.

    Args:
        action: What is happening (e.g. "Redesigning landscape")
        model: The model being called, shown dimmed
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[green]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,  # Disappears when done
    )

    desc_parts = [action]
    if model:
        model_display = model if len(model) <= 40 else f"{model[:37]}..."
        desc_parts.append(f"[dim]({model_display})[/dim]")

    with progress:
        task = progress.add_task(" ".join(desc_parts), total=None)
        yield
        progress.update(task, completed=True)


def catalog_table(catalog: DesignCatalog) -> Table:
    """Two-section table of plants and features."""
    table = Table(show_header=True, header_style="bold cyan", expand=False)
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Species / Description", style="dim")
    for plant in catalog.plants:
        table.add_row("Plant", plant.name, plant.species)
    for feature in catalog.features:
        table.add_row("Feature", feature.name, feature.description)
    return table


def print_redesign_result(
    output_path: Path,
    elapsed: float,
    model_used: str,
    catalog: DesignCatalog,
    catalog_found: bool,
    catalog_path: Path | None = None,
) -> None:
    """Print a panel summarizing a redesign, followed by its catalog."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", justify="right", vertical="top")
    table.add_column(style="white")

    table.add_row("Saved to", f"[bold green]{output_path}[/bold green]")
    if catalog_path is not None:
        table.add_row("Catalog", str(catalog_path))
    table.add_row("Model", model_used)
    table.add_row("Time", f"{elapsed:.1f}s")
    table.add_row("Plants", str(len(catalog.plants)))
    table.add_row("Features", str(len(catalog.features)))

    console.print()
    console.print(
        Panel(
            table,
            title="[bold green]✓ Redesign Generated[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )
    if not catalog_found:
        print_warning("The model did not return a design catalog; showing an empty catalog.")
    elif not catalog.is_empty():
        console.print(catalog_table(catalog))


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")
