# ABOUTME: Streaming writer that packages page images into a fixed-layout EPUB.
# ABOUTME: Owns the zip container, numbers pages, enforces cover/spread rules, finalizes once.

import logging
import zipfile
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from comicpub.metadata.types import ComicMetadata
from comicpub.packaging.errors import (
    ContainerWriteError,
    CoverAlreadySetError,
    CoverSizeError,
    NoPagesError,
    WriterCloseError,
    WriterClosedError,
)
from comicpub.packaging.manifest import build_package_document
from comicpub.packaging.navigation import build_navigation_document
from comicpub.packaging.page import (
    ImageSource,
    PageImage,
    check_xml_text,
    classify_image,
    read_source,
)
from comicpub.packaging.sequencer import COVER_BASE_NAME, SequencerState, place_page
from comicpub.packaging.templates import (
    CONTAINER_XML,
    CONTENT_DIR,
    MIMETYPE,
    NAVIGATION_DOCUMENT,
    PACKAGE_DOCUMENT,
)

logger = logging.getLogger(__name__)

_CONTAINER_ERRORS = (OSError, ValueError, zipfile.BadZipFile, zipfile.LargeZipFile)

# Metadata fields that end up as text in the package, page or nav documents.
_TEXT_FIELDS = (
    "id", "title", "author", "publisher", "language",
    "description", "source", "relation", "copyright", "series",
)


def _check_metadata_text(metadata: ComicMetadata) -> None:
    for name in _TEXT_FIELDS:
        value = getattr(metadata, name)
        if value is not None:
            check_xml_text(value, f"Metadata {name}")
    for tag in metadata.tags:
        check_xml_text(tag, "Metadata tag")
    for key, value in metadata.custom.items():
        check_xml_text(key, "Custom metadata key")
        check_xml_text(value, f"Custom metadata {key!r}")


class WriterStatus(Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    FINALIZED = "finalized"
    CLOSED = "closed"


class ComicEpubWriter:
    """Append-only builder for one fixed-layout comic package.

    Every accepted page is written to the container immediately; only the
    page descriptors are kept until finalize() writes the package and
    navigation documents and closes the container.

    Use as a context manager to finalize on success and just close on
    error. A writer that is garbage collected while still open is closed
    there, and a failure at that point is logged and raised as
    WriterCloseError.
    """

    def __init__(
        self,
        stream: BinaryIO,
        metadata: ComicMetadata,
        *,
        volume: int = 1,
        owns_stream: bool = False,
    ) -> None:
        # Marked closed until the container exists so __del__ is a no-op
        # when validation fails.
        self._closed = True
        metadata.validate()
        _check_metadata_text(metadata)

        self.metadata = metadata.copy()
        self.volume = volume
        self._stream = stream
        self._owns_stream = owns_stream
        self._pages: list[PageImage] = []
        self._cover: PageImage | None = None
        self._state = SequencerState()
        self._finalized = False
        self._failed = False

        try:
            self._zip = zipfile.ZipFile(stream, "w", compression=zipfile.ZIP_DEFLATED)
        except _CONTAINER_ERRORS as exc:
            raise ContainerWriteError(f"Failed to open container: {exc}") from exc
        self._closed = False

        self._write_entry("mimetype", MIMETYPE, compress_type=zipfile.ZIP_STORED)
        self._write_entry("META-INF/container.xml", CONTAINER_XML)

    def __enter__(self) -> "ComicEpubWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.finalize()
        finally:
            self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        logger.warning("Comic writer discarded without finalize(); closing an incomplete package")
        try:
            self.close()
        except Exception as exc:
            logger.critical("Unhandled error closing comic writer: %s", exc)
            raise WriterCloseError(f"Unhandled error on close: {exc}") from exc

    @property
    def status(self) -> WriterStatus:
        if self._finalized:
            return WriterStatus.FINALIZED
        if self._closed:
            return WriterStatus.CLOSED
        if self._pages or self._cover is not None:
            return WriterStatus.ACTIVE
        return WriterStatus.EMPTY

    @property
    def pages(self) -> tuple[PageImage, ...]:
        return tuple(self._pages)

    @property
    def cover(self) -> PageImage | None:
        return self._cover

    @property
    def state(self) -> SequencerState:
        return self._state

    def set_cover(self, source: ImageSource) -> PageImage:
        """Classify and write the cover image and its page.

        Raises:
            CoverAlreadySetError: If this writer already has a cover.
            CoverSizeError: If the image is wider than it is tall.
            UnsupportedImageError, InvalidImageError: From classification.
        """
        self._ensure_open()
        if self._cover is not None:
            raise CoverAlreadySetError()

        data = read_source(source)
        cover = classify_image(data)
        if cover.spread:
            raise CoverSizeError()
        cover.base_name = COVER_BASE_NAME

        self._write_entry(f"{CONTENT_DIR}/{cover.image_file_name()}", data)
        pages = cover.render_pages(lang=self.metadata.language, title=self.metadata.title)
        for file_name, markup in pages:
            self._write_entry(f"{CONTENT_DIR}/{file_name}", markup)

        self._cover = cover
        logger.debug("Cover set (%dx%d %s)", cover.width, cover.height, cover.mime_type)
        return cover

    def add_page(self, source: ImageSource, label: str | None = None) -> PageImage:
        """Classify, number and write one body page.

        A rejected page leaves the writer exactly as it was, so the caller
        may retry with another image.

        Args:
            source: Image bytes or a readable binary stream.
            label: Optional navigation label; starts a new TOC entry.

        Returns:
            The accepted page with its base name assigned.

        Raises:
            PageSortingError: If a spread is not allowed at this position.
            SerializationError: If the label holds characters XML cannot carry.
            UnsupportedImageError, InvalidImageError: From classification.
            ContainerWriteError: If the container write fails.
        """
        self._ensure_open()
        if label is not None and not label.strip():
            label = None
        if label is not None:
            check_xml_text(label, "Page label")

        data = read_source(source)
        page = classify_image(data, label)
        state, base_name = place_page(
            self._state, spread=page.spread, labeled=label is not None, volume=self.volume
        )
        page.base_name = base_name

        self._write_entry(f"{CONTENT_DIR}/{page.image_file_name()}", data)
        rendered = page.render_pages(self.metadata.right_to_left, lang=self.metadata.language)
        for file_name, markup in rendered:
            self._write_entry(f"{CONTENT_DIR}/{file_name}", markup)

        self._state = state
        self._pages.append(page)
        logger.debug(
            "Added page %d as %s (spread=%s, label=%r)",
            state.placed, base_name, page.spread, label,
        )
        return page

    def finalize(self) -> None:
        """Write the package and navigation documents and close the container.

        Calling it again after success does nothing.

        Raises:
            NoPagesError: If no body page was accepted. Nothing is written
                and the writer stays open.
        """
        if self._finalized:
            return
        self._ensure_open()
        if not self._pages:
            raise NoPagesError()

        package = build_package_document(self.metadata, self._cover, self._pages)
        navigation = build_navigation_document(self.metadata, self._cover, self._pages)

        self._write_entry(f"{CONTENT_DIR}/{PACKAGE_DOCUMENT}", package)
        self._write_entry(f"{CONTENT_DIR}/{NAVIGATION_DOCUMENT}", navigation)
        self.close()
        self._finalized = True
        logger.info(
            "Finalized package %r: %d page(s), cover=%s",
            self.metadata.title, len(self._pages), self._cover is not None,
        )

    def close(self) -> None:
        """Close the container. Safe to call more than once.

        Closing without finalize() leaves a package with no package
        document; callers are expected to discard such output.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._zip.close()
        except _CONTAINER_ERRORS as exc:
            if not self._failed:
                raise ContainerWriteError(f"Failed to close container: {exc}") from exc
            logger.warning("Ignoring close error on failed container: %s", exc)
        finally:
            if self._owns_stream:
                self._stream.close()

    def _ensure_open(self) -> None:
        if self._failed:
            raise WriterClosedError("Writer is unusable after a container write failure")
        if self._finalized:
            raise WriterClosedError("Writer is already finalized")
        if self._closed:
            raise WriterClosedError("Writer is closed")

    def _write_entry(
        self, name: str, data: bytes | str, compress_type: int | None = None
    ) -> None:
        try:
            self._zip.writestr(name, data, compress_type=compress_type)
        except _CONTAINER_ERRORS as exc:
            self._failed = True
            raise ContainerWriteError(f"Failed to write {name}: {exc}") from exc


def create_at(path: Path, metadata: ComicMetadata, **kwargs) -> ComicEpubWriter:
    """Open a buffered file at path and return a writer that owns it.

    Raises:
        MetadataValidationError: If metadata is invalid; the file is
            closed again before the error propagates.
    """
    stream = open(path, "wb")
    try:
        return ComicEpubWriter(stream, metadata, owns_stream=True, **kwargs)
    except BaseException:
        stream.close()
        raise
