# ABOUTME: Directory scanner that turns a folder of page images into an ordered page list.
# ABOUTME: Subdirectories become chapters whose first image carries the directory name as label.

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: frozenset[str] = frozenset({".gif", ".jpg", ".jpeg", ".png"})

COVER_STEM = "cover"

_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> list[int | str]:
    """Sort key that orders 'page2' before 'page10'."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(name)]


@dataclass
class PageSource:
    """One image file to add, with its optional TOC label."""

    path: Path
    label: str | None = None


@dataclass
class ScanResult:
    """Ordered pages and optional cover found under a scan root."""

    root: Path
    cover: Path | None = None
    pages: list[PageSource] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def labels(self) -> list[str]:
        return [page.label for page in self.pages if page.label]


def _is_image(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def _sorted_children(directory: Path) -> list[Path]:
    return sorted(directory.iterdir(), key=lambda p: natural_key(p.name))


def _chapter_images(directory: Path, skipped: list[Path]) -> list[Path]:
    """All images under a chapter directory, in natural order of relative path."""
    images: list[Path] = []
    for path in sorted(directory.rglob("*"), key=lambda p: natural_key(str(p.relative_to(directory)))):
        if _is_image(path):
            images.append(path)
        elif path.is_file():
            skipped.append(path)
    return images


def scan_directory(root: Path, *, detect_cover: bool = True) -> ScanResult:
    """Collect pages from a directory of images.

    Images directly in root come first, in natural order. Each immediate
    subdirectory is then a chapter, also in natural order; its first image
    is labeled with the subdirectory name. A root image named cover.* is
    used as the cover when detect_cover is set.

    Args:
        root: Directory to scan.
        detect_cover: Whether to pick up a root cover.* image.

    Returns:
        A ScanResult; files that are not images are listed in skipped.
    """
    result = ScanResult(root=root)
    chapters: list[Path] = []

    for path in _sorted_children(root):
        if path.is_dir():
            chapters.append(path)
        elif _is_image(path):
            if detect_cover and result.cover is None and path.stem.lower() == COVER_STEM:
                result.cover = path
            else:
                result.pages.append(PageSource(path=path))
        else:
            result.skipped.append(path)

    for chapter in chapters:
        images = _chapter_images(chapter, result.skipped)
        if not images:
            logger.warning("Chapter directory %s has no images", chapter)
            continue
        result.pages.append(PageSource(path=images[0], label=chapter.name))
        result.pages.extend(PageSource(path=image) for image in images[1:])

    for path in result.skipped:
        logger.warning("Skipping non-image file %s", path)

    return result
