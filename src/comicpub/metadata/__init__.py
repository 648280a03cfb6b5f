# ABOUTME: Metadata package for book-level descriptive fields.
# ABOUTME: Exports ComicMetadata and its validation error.

from comicpub.metadata.types import (
    DEFAULT_LANGUAGE,
    ComicMetadata,
    MetadataValidationError,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "ComicMetadata",
    "MetadataValidationError",
]
