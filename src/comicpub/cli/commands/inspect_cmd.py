# ABOUTME: The `comicpub inspect` command for viewing a built comic package.
# ABOUTME: Shows metadata, reading direction, spine size and table of contents.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from comicpub.formats.epub import EpubReadError, read_comic_package

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def inspect(path: Path) -> None:
    """Show the structure of a comic EPUB."""
    try:
        summary = read_comic_package(path)
    except EpubReadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    table = Table(title=str(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", summary.title)
    table.add_row("Author", summary.author or "[dim]unknown[/dim]")
    table.add_row("Publisher", summary.publisher or "[dim]unknown[/dim]")
    table.add_row("Language", summary.language or "[dim]unknown[/dim]")
    table.add_row("Identifier", summary.identifier or "[dim]none[/dim]")
    table.add_row("Layout", summary.layout or "[dim]reflowable[/dim]")
    table.add_row("Direction", summary.direction or "[dim]default[/dim]")
    table.add_row("Spine", f"{summary.spine_length} ({summary.non_linear} non-linear)")
    table.add_row("Images", str(summary.image_count))
    table.add_row("Cover", "yes" if summary.has_cover else "no")

    console.print(table)

    if summary.toc:
        console.print("\n[bold]Contents[/bold]")
        for label, href in summary.toc:
            console.print(f"  {label} [dim]{href}[/dim]")
