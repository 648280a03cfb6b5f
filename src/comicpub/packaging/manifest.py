# ABOUTME: Builds the EPUB 3 package document (metadata, manifest, spine) with lxml.
# ABOUTME: Spread halves get page-spread markers and the spine carries the reading direction.

from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import PurePosixPath

from lxml import etree

from comicpub.metadata.types import ComicMetadata
from comicpub.packaging.errors import SerializationError
from comicpub.packaging.page import PageImage
from comicpub.packaging.templates import NAVIGATION_DOCUMENT

OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
XML_NS = "http://www.w3.org/XML/1998/namespace"
RENDITION_PREFIX = "rendition: http://www.idpf.org/vocab/rendition/#"

XHTML_MEDIA_TYPE = "application/xhtml+xml"

NAV_ID = "nav"
COVER_IMAGE_ID = "cover-image"
COVER_PAGE_ID = "cover-page"


def image_id(page: PageImage) -> str:
    return f"img_{page.base_name}"


def markup_id(file_name: str) -> str:
    """Manifest id for a page markup file, derived from its stem."""
    return f"page_{PurePosixPath(file_name).stem}"


def _timestamp(value: datetime) -> str:
    """UTC timestamp at second precision. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _dc(parent: etree._Element, name: str, text: str, **attrib: str) -> etree._Element:
    elem = etree.SubElement(parent, f"{{{DC_NS}}}{name}", attrib)
    elem.text = text
    return elem


def _meta(parent: etree._Element, text: str | None = None, **attrib: str) -> etree._Element:
    elem = etree.SubElement(parent, f"{{{OPF_NS}}}meta", attrib)
    if text is not None:
        elem.text = text
    return elem


def _item(
    parent: etree._Element, item_id: str, href: str, media_type: str, properties: str | None = None
) -> None:
    attrib = {"id": item_id, "href": href, "media-type": media_type}
    if properties:
        attrib["properties"] = properties
    etree.SubElement(parent, f"{{{OPF_NS}}}item", attrib)


def _spine_properties(page: PageImage, file_name: str) -> str | None:
    """page-spread marker for a spread half, keyed to which half the file shows."""
    if not page.spread:
        return None
    if file_name == page.page_spread_left_file_name():
        return "page-spread-left"
    return "page-spread-right"


def _build_metadata(package: etree._Element, metadata: ComicMetadata, cover: PageImage | None,
                    modified: datetime) -> None:
    meta = etree.SubElement(package, f"{{{OPF_NS}}}metadata", nsmap={"dc": DC_NS})

    _dc(meta, "identifier", metadata.id, id="bookid")
    _dc(meta, "title", metadata.title)
    _dc(meta, "creator", metadata.author, id="creator")
    _dc(meta, "publisher", metadata.publisher)
    _dc(meta, "date", _timestamp(metadata.published_date))
    _dc(meta, "language", metadata.language)

    optional = (
        ("description", metadata.description),
        ("source", metadata.source),
        ("relation", metadata.relation),
        ("rights", metadata.copyright),
    )
    for name, value in optional:
        if value:
            _dc(meta, name, value)

    for tag in sorted(metadata.tags):
        _dc(meta, "subject", tag)

    if metadata.series:
        _meta(meta, metadata.series, property="belongs-to-collection", id="series")
        _meta(meta, "series", refines="#series", property="collection-type")

    for key in sorted(metadata.custom):
        _meta(meta, name=key, content=metadata.custom[key])

    _meta(meta, "pre-paginated", property="rendition:layout")
    _meta(meta, "landscape", property="rendition:spread")
    _meta(meta, _timestamp(modified), property="dcterms:modified")

    if cover is not None:
        _meta(meta, name="cover", content=COVER_IMAGE_ID)


def build_package_document(
    metadata: ComicMetadata,
    cover: PageImage | None,
    pages: Sequence[PageImage],
    modified: datetime | None = None,
) -> bytes:
    """Serialize the package document for a finished book.

    The manifest lists the navigation document, the cover image and page,
    then each page's image followed by its markup files. The spine opens
    with the cover page marked non-linear and follows with every markup
    file in reading order.

    Args:
        metadata: Validated book metadata.
        cover: The cover page, if one was set.
        pages: Body pages in insertion order, base names assigned.
        modified: Last-modified timestamp; defaults to now.

    Returns:
        UTF-8 encoded XML, including the declaration.

    Raises:
        SerializationError: If a value cannot be represented in XML.
    """
    rtl = metadata.right_to_left
    try:
        package = etree.Element(
            f"{{{OPF_NS}}}package",
            {
                "version": "3.0",
                "unique-identifier": "bookid",
                "prefix": RENDITION_PREFIX,
                f"{{{XML_NS}}}lang": metadata.language,
            },
            nsmap={None: OPF_NS},
        )
        _build_metadata(package, metadata, cover, modified or datetime.now(UTC))

        manifest = etree.SubElement(package, f"{{{OPF_NS}}}manifest")
        _item(manifest, NAV_ID, NAVIGATION_DOCUMENT, XHTML_MEDIA_TYPE, "nav")
        if cover is not None:
            _item(manifest, COVER_IMAGE_ID, cover.image_file_name(), cover.mime_type, "cover-image")
            _item(manifest, COVER_PAGE_ID, cover.page_regular_file_name(), XHTML_MEDIA_TYPE, "svg")
        for page in pages:
            _item(manifest, image_id(page), page.image_file_name(), page.mime_type)
            for file_name in page.page_file_names(rtl):
                _item(manifest, markup_id(file_name), file_name, XHTML_MEDIA_TYPE, "svg")

        spine = etree.SubElement(
            package, f"{{{OPF_NS}}}spine", {"page-progression-direction": metadata.direction}
        )
        if cover is not None:
            etree.SubElement(spine, f"{{{OPF_NS}}}itemref", {"idref": COVER_PAGE_ID, "linear": "no"})
        for page in pages:
            for file_name in page.page_file_names(rtl):
                attrib = {"idref": markup_id(file_name)}
                properties = _spine_properties(page, file_name)
                if properties:
                    attrib["properties"] = properties
                etree.SubElement(spine, f"{{{OPF_NS}}}itemref", attrib)

        return etree.tostring(package, xml_declaration=True, encoding="utf-8", pretty_print=True)
    except (etree.Error, ValueError) as exc:
        raise SerializationError(f"Failed to build package document: {exc}") from exc
