# ABOUTME: Build pipeline that drives a ComicEpubWriter from a directory scan.
# ABOUTME: Writes to a temporary sibling file and renames it only after finalize succeeds.

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from comicpub.core.scanner import PageSource, ScanResult
from comicpub.metadata.types import ComicMetadata
from comicpub.packaging.writer import create_at

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_SUFFIX = ".epub"

_MAX_COLLISION_ATTEMPTS = 10_000


@dataclass
class BuildResult:
    """Summary of a finished package."""

    path: Path
    pages: int = 0
    spreads: int = 0
    has_cover: bool = False
    labels: list[str] = field(default_factory=list)


# Called after each page is accepted, for progress reporting.
PageCallback = Callable[[PageSource], None]


def resolve_collision(output_path: Path) -> Path:
    """Find a non-colliding filename by appending _1, _2, etc."""
    stem = output_path.stem
    suffix = output_path.suffix
    parent = output_path.parent
    for counter in range(1, _MAX_COLLISION_ATTEMPTS + 1):
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return candidate
    raise OSError(
        f"Could not find a non-colliding filename after "
        f"{_MAX_COLLISION_ATTEMPTS} attempts: {output_path}"
    )


def _temporary_path(output_path: Path) -> Path:
    return output_path.with_name(f".{output_path.name}.part")


def _cleanup(path: Path) -> None:
    """Remove the file if it exists."""
    if path.exists():
        path.unlink()


def build_book(
    scan: ScanResult,
    metadata: ComicMetadata,
    output_path: Path,
    *,
    cover: Path | None = None,
    volume: int = 1,
    overwrite: bool = False,
    on_page: PageCallback | None = None,
) -> BuildResult:
    """Package every scanned page into a single EPUB.

    The package is assembled at a hidden temporary path next to
    output_path and only renamed into place once finalize() succeeds, so a
    failed build never leaves a half-written book under the final name.

    Args:
        scan: Ordered pages (and optional cover) to package.
        metadata: Book metadata; copied, never modified.
        output_path: Where the finished package should land.
        cover: Cover image overriding scan.cover.
        volume: Volume number used in page identifiers.
        overwrite: Replace an existing output instead of adding a _N suffix.
        on_page: Optional callback invoked after each accepted page.

    Returns:
        BuildResult describing the written package.

    Raises:
        ComicpubError: Any classification, sequencing or container error,
            after the temporary file has been removed.
        MetadataValidationError: If metadata is invalid.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.exists() and not overwrite:
        output_path = resolve_collision(output_path)

    tmp_path = _temporary_path(output_path)
    cover_path = cover or scan.cover
    result = BuildResult(path=output_path)
    current: Path | None = None

    try:
        with create_at(tmp_path, metadata, volume=volume) as writer:
            if cover_path is not None:
                current = cover_path
                with open(cover_path, "rb") as fh:
                    writer.set_cover(fh)
                result.has_cover = True

            for source in scan.pages:
                current = source.path
                with open(source.path, "rb") as fh:
                    page = writer.add_page(fh, source.label)
                result.pages += 1
                if page.spread:
                    result.spreads += 1
                if page.nav_label:
                    result.labels.append(page.nav_label)
                if on_page is not None:
                    on_page(source)
            current = None
    except BaseException:
        if current is not None:
            logger.error("Build of %s failed at %s", output_path, current)
        _cleanup(tmp_path)
        raise

    tmp_path.replace(output_path)
    logger.info("Wrote %s (%d pages, %d spreads)", output_path, result.pages, result.spreads)
    return result
