# ABOUTME: Packaging package: page classification, sequencing and EPUB container writing.
# ABOUTME: Exports the writer, the classifier and the error hierarchy.

from comicpub.packaging.errors import (
    ComicpubError,
    ContainerWriteError,
    CoverAlreadySetError,
    CoverSizeError,
    InvalidImageError,
    NoPagesError,
    PageSortingError,
    SerializationError,
    UnsupportedImageError,
    WriterCloseError,
    WriterClosedError,
)
from comicpub.packaging.page import PageImage, classify_image
from comicpub.packaging.sequencer import SequencerState, place_page
from comicpub.packaging.writer import ComicEpubWriter, WriterStatus, create_at

__all__ = [
    "ComicEpubWriter",
    "ComicpubError",
    "ContainerWriteError",
    "CoverAlreadySetError",
    "CoverSizeError",
    "InvalidImageError",
    "NoPagesError",
    "PageImage",
    "PageSortingError",
    "SequencerState",
    "SerializationError",
    "UnsupportedImageError",
    "WriterCloseError",
    "WriterClosedError",
    "WriterStatus",
    "classify_image",
    "create_at",
    "place_page",
]
