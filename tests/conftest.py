# ABOUTME: Shared pytest fixtures for comicpub tests.
# ABOUTME: Provides metadata, in-memory page images, and sample comic directories.

from datetime import UTC, datetime
from pathlib import Path

import pytest

from comicpub.metadata import ComicMetadata
from tests.fixtures.images import make_image, make_page, make_spread, write_image


@pytest.fixture
def metadata() -> ComicMetadata:
    """Fully populated metadata with a fixed identifier and date."""
    return ComicMetadata(
        id="urn:uuid:12345678-1234-5678-1234-567812345678",
        title="Moon Harbor",
        author="Aiko Tanaka",
        publisher="Lantern Press",
        published_date=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        language="en",
        description="A lighthouse keeper and a tide that never turns.",
        tags={"comics", "fantasy"},
    )


@pytest.fixture
def rtl_metadata(metadata: ComicMetadata) -> ComicMetadata:
    """Same metadata, read right to left."""
    clone = metadata.copy()
    clone.right_to_left = True
    return clone


@pytest.fixture
def page_png() -> bytes:
    """A portrait PNG: a regular page."""
    return make_page()


@pytest.fixture
def spread_png() -> bytes:
    """A landscape PNG: a two-page spread."""
    return make_spread()


@pytest.fixture
def comic_dir(tmp_path: Path) -> Path:
    """Create a comic folder with a cover, loose pages, and two chapters.

    Layout:
        Moon Harbor/
            cover.png
            001.png
            Chapter 1/
                01.png
                02.png
                03.png      (spread)
            Chapter 2/
                01.jpg
                notes.txt
    """
    root = tmp_path / "Moon Harbor"
    write_image(root / "cover.png", make_image(60, 90, color=(10, 10, 10)))
    write_image(root / "001.png", make_page())
    write_image(root / "Chapter 1" / "01.png", make_page())
    write_image(root / "Chapter 1" / "02.png", make_page())
    write_image(root / "Chapter 1" / "03.png", make_spread())
    write_image(root / "Chapter 2" / "01.jpg", make_page(fmt="JPEG"))
    (root / "Chapter 2" / "notes.txt").write_text("lettering notes")
    return root
