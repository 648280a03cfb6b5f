# ABOUTME: Page classifier: turns one image's bytes into a PageImage.
# ABOUTME: Detects GIF/JPEG/PNG from content with Pillow and flags wide images as spreads.

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO
from xml.sax.saxutils import escape

from lxml import etree
from PIL import Image

from comicpub.packaging.errors import InvalidImageError, SerializationError, UnsupportedImageError
from comicpub.packaging.templates import PAGE_XML

logger = logging.getLogger(__name__)

# Pillow format name -> (extension, mime type). MPO is how Pillow reports
# JPEGs that carry multi-picture data.
SUPPORTED_FORMATS: dict[str, tuple[str, str]] = {
    "GIF": (".gif", "image/gif"),
    "JPEG": (".jpg", "image/jpeg"),
    "MPO": (".jpg", "image/jpeg"),
    "PNG": (".png", "image/png"),
}

ImageSource = bytes | bytearray | BinaryIO

_ATTR_ENTITIES = {"\"": "&quot;"}

# UnidentifiedImageError is an OSError; truncated data raises OSError or SyntaxError.
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


def check_xml_text(value: str, what: str) -> None:
    """Raise SerializationError if value cannot be written as XML text.

    Control characters and other code points XML forbids are caught here,
    before any markup that would carry them is written.
    """
    try:
        etree.Element("check").text = value
    except ValueError as exc:
        raise SerializationError(f"{what} cannot be written as XML: {value!r}") from exc


def read_source(source: ImageSource) -> bytes:
    """Read an image source fully into memory.

    Accepts raw bytes or any readable binary stream (open file, BytesIO).
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return source.read()


@dataclass
class PageImage:
    """One classified page image.

    base_name stays empty until the writer assigns it; the classifier never
    decides identifiers.
    """

    extension: str
    mime_type: str
    width: int
    height: int
    nav_label: str | None = None
    base_name: str = ""

    @property
    def spread(self) -> bool:
        """A spread is any image wider than it is tall."""
        return self.width > self.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def image_file_name(self) -> str:
        return f"{self.base_name}{self.extension}"

    def page_regular_file_name(self) -> str:
        return f"{self.base_name}.xhtml"

    def page_spread_left_file_name(self) -> str:
        return f"{self.base_name}_L.xhtml"

    def page_spread_right_file_name(self) -> str:
        return f"{self.base_name}_R.xhtml"

    def page_file_names(self, right_to_left: bool = False) -> list[str]:
        """Markup file names in reading order."""
        if not self.spread:
            return [self.page_regular_file_name()]
        names = [self.page_spread_left_file_name(), self.page_spread_right_file_name()]
        if right_to_left:
            names.reverse()
        return names

    def render_pages(
        self, right_to_left: bool = False, *, lang: str = "en", title: str | None = None
    ) -> list[tuple[str, str]]:
        """Generate (file name, markup) pairs in reading order.

        Spread halves point at the same image with a half-width viewport;
        the right half offsets the image by minus half its width.
        """
        page_title = title or self.nav_label or self.base_name
        if not self.spread:
            return [(self.page_regular_file_name(), self._render(page_title, lang, self.width, 0))]

        half = self.width // 2
        pages = [
            (self.page_spread_left_file_name(), self._render(page_title, lang, half, 0)),
            (self.page_spread_right_file_name(), self._render(page_title, lang, half, -half)),
        ]
        if right_to_left:
            pages.reverse()
        return pages

    def _render(self, title: str, lang: str, view_width: int, offset_x: int) -> str:
        return PAGE_XML.format(
            lang=escape(lang, _ATTR_ENTITIES),
            title=escape(title),
            width=self.width,
            height=self.height,
            view_width=view_width,
            offset_x=offset_x,
            href=escape(self.image_file_name(), _ATTR_ENTITIES),
        )


def classify_image(data: bytes, nav_label: str | None = None) -> PageImage:
    """Classify raw image bytes as a regular page or a spread.

    The container format is detected from the content, never from a file
    name. Unsupported formats are rejected before the pixel data is decoded.

    Args:
        data: The complete encoded image.
        nav_label: Optional table-of-contents label for this page.

    Returns:
        A PageImage with an empty base_name.

    Raises:
        InvalidImageError: If the data is not a recognisable image, or a
            supported image fails to decode.
        UnsupportedImageError: If the image is a format other than GIF,
            JPEG or PNG.
    """
    if not data:
        raise InvalidImageError("Invalid image: no data")

    try:
        img = Image.open(io.BytesIO(data))
    except _DECODE_ERRORS as exc:
        raise InvalidImageError(f"Invalid image: {exc}") from exc

    with img:
        type_info = SUPPORTED_FORMATS.get(img.format or "")
        if type_info is None:
            raise UnsupportedImageError(img.format)

        try:
            img.load()
        except _DECODE_ERRORS as exc:
            raise InvalidImageError(f"Invalid image: {exc}") from exc

        width, height = img.size

    extension, mime_type = type_info
    logger.debug("Classified %s image %dx%d (label=%r)", mime_type, width, height, nav_label)
    return PageImage(
        extension=extension,
        mime_type=mime_type,
        width=width,
        height=height,
        nav_label=nav_label,
    )
