# ABOUTME: Exception hierarchy for classifying pages and writing comic packages.
# ABOUTME: Every error the packaging layer raises derives from ComicpubError.


class ComicpubError(Exception):
    """Base class for packaging errors."""


class UnsupportedImageError(ComicpubError):
    """Raised when an image is recognised but is not GIF, JPEG or PNG."""

    def __init__(self, image_format: str | None = None) -> None:
        self.image_format = image_format
        detail = f": {image_format}" if image_format else ""
        super().__init__(f"Unsupported image{detail}")


class InvalidImageError(ComicpubError):
    """Raised when image data cannot be identified or decoded."""


class CoverAlreadySetError(ComicpubError):
    """Raised when a second cover is given to the same writer."""

    def __init__(self) -> None:
        super().__init__("Cover already set")


class CoverSizeError(ComicpubError):
    """Raised when the cover image is wider than it is tall."""

    def __init__(self) -> None:
        super().__init__("Cover cannot be wider than tall")


class PageSortingError(ComicpubError):
    """Raised when a spread lands on a slot where it cannot start a page pair."""

    def __init__(self, page_number: int) -> None:
        self.page_number = page_number
        super().__init__(f"Spread not allowed at page {page_number}")


class NoPagesError(ComicpubError):
    """Raised when finalizing a writer that never accepted a body page."""

    def __init__(self) -> None:
        super().__init__("At least one page is required for a valid epub")


class ContainerWriteError(ComicpubError):
    """Raised when the underlying stream or zip container fails."""


class SerializationError(ComicpubError):
    """Raised when a package or navigation document cannot be serialized."""


class WriterClosedError(ComicpubError):
    """Raised when a finalized, closed or failed writer is used again."""


class WriterCloseError(ComicpubError):
    """Raised when a writer that went out of scope could not be closed."""
