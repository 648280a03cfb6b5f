# ABOUTME: The `comicpub build` command for packaging a folder of page images.
# ABOUTME: Scans the folder, builds the EPUB atomically, and reports a summary.

from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from comicpub.cli.options import metadata_from_options, metadata_options
from comicpub.core.builder import DEFAULT_OUTPUT_SUFFIX, build_book
from comicpub.core.scanner import scan_directory
from comicpub.metadata.types import MetadataValidationError
from comicpub.packaging.errors import ComicpubError

console = Console()


def _make_progress(console: Console, disable: bool) -> Progress:
    """Create a Rich progress bar for page packaging."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        disable=disable,
    )


@click.command("build")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: <directory>.epub beside the directory).",
)
@click.option(
    "--cover",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Cover image (default: a cover.* image in the directory).",
)
@click.option(
    "--detect-cover/--no-detect-cover",
    default=True,
    help="Use a cover.* image found in the directory as the cover.",
)
@click.option(
    "--volume",
    type=click.IntRange(1, 99),
    default=1,
    show_default=True,
    help="Volume number used in page identifiers.",
)
@click.option(
    "--overwrite",
    is_flag=True,
    default=False,
    help="Replace an existing output file instead of adding a _N suffix.",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    default=False,
    help="Only print errors and the output path.",
)
@metadata_options
def build(
    directory: Path,
    output: Path | None,
    cover: Path | None,
    detect_cover: bool,
    volume: int,
    overwrite: bool,
    quiet: bool,
    **meta_options,
) -> None:
    """Package the images in DIRECTORY into a fixed-layout EPUB."""
    directory = directory.resolve()
    output = output or directory.with_suffix(DEFAULT_OUTPUT_SUFFIX)
    metadata = metadata_from_options(directory.name, **meta_options)

    scan = scan_directory(directory, detect_cover=detect_cover and cover is None)
    if not quiet:
        for skipped in scan.skipped:
            console.print(f"[dim]Skipped:[/dim] {skipped}")

    try:
        with _make_progress(console, disable=quiet) as progress:
            task = progress.add_task("Packaging", total=scan.total_pages)
            result = build_book(
                scan,
                metadata,
                output,
                cover=cover,
                volume=volume,
                overwrite=overwrite,
                on_page=lambda _source: progress.advance(task),
            )
    except (ComicpubError, MetadataValidationError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    if quiet:
        click.echo(str(result.path))
        return

    console.print(f"[green]Wrote[/green] {result.path}")
    console.print(
        f"{result.pages} page(s), {result.spreads} spread(s), cover: {'yes' if result.has_cover else 'no'}"
    )
    for label in result.labels:
        console.print(f"  {label}")
