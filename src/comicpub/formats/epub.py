# ABOUTME: Reads a built comic package back with ebooklib for inspection.
# ABOUTME: Summarizes metadata, reading direction, spine and table of contents.

import logging
from dataclasses import dataclass, field
from pathlib import Path

import ebooklib
from ebooklib import epub

logger = logging.getLogger(__name__)

OPF_NS = "http://www.idpf.org/2007/opf"


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


@dataclass
class PackageSummary:
    """What an inspection of a comic package reports."""

    title: str
    author: str | None = None
    publisher: str | None = None
    language: str | None = None
    identifier: str | None = None
    direction: str | None = None
    layout: str | None = None
    spine_length: int = 0
    non_linear: int = 0
    image_count: int = 0
    has_cover: bool = False
    toc: list[tuple[str, str]] = field(default_factory=list)
    source_path: Path | None = None


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_property_meta(book: epub.EpubBook, prop: str) -> str | None:
    """Value of an EPUB 3 <meta property="..."> entry."""
    for value, attrs in book.metadata.get(OPF_NS, {}).get(None, []):
        if attrs.get("property") == prop and value:
            return str(value).strip()
    return None


def _has_cover(book: epub.EpubBook) -> bool:
    """Whether the package declares a cover image that exists in the manifest."""
    meta_entries = book.get_metadata("OPF", "cover")
    if not meta_entries:
        return False
    cover_id = meta_entries[0][1].get("content")
    return bool(cover_id) and book.get_item_with_id(cover_id) is not None


def _flatten_toc(entries) -> list[tuple[str, str]]:
    flat: list[tuple[str, str]] = []
    for entry in entries:
        if isinstance(entry, epub.Link):
            flat.append((entry.title, entry.href))
        elif isinstance(entry, tuple) and len(entry) == 2:
            section, children = entry
            if getattr(section, "href", None):
                flat.append((section.title, section.href))
            flat.extend(_flatten_toc(children))
    return flat


def read_comic_package(path: Path) -> PackageSummary:
    """Summarize a fixed-layout package.

    Args:
        path: Path to the EPUB file.

    Returns:
        PackageSummary populated from the package and navigation documents.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    title = _get_metadata_value(book, "DC", "title") or path.stem
    images = [
        item for item in book.get_items()
        if item.get_type() in (ebooklib.ITEM_IMAGE, ebooklib.ITEM_COVER)
    ]

    return PackageSummary(
        title=title,
        author=_get_metadata_value(book, "DC", "creator"),
        publisher=_get_metadata_value(book, "DC", "publisher"),
        language=_get_metadata_value(book, "DC", "language"),
        identifier=_get_metadata_value(book, "DC", "identifier"),
        direction=book.direction,
        layout=_get_property_meta(book, "rendition:layout"),
        spine_length=len(book.spine),
        non_linear=sum(1 for _, linear in book.spine if linear == "no"),
        image_count=len(images),
        has_cover=_has_cover(book),
        toc=_flatten_toc(book.toc),
        source_path=path,
    )
