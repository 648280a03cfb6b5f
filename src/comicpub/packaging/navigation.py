# ABOUTME: Builds the EPUB 3 navigation document (table of contents) with lxml.
# ABOUTME: One entry per labeled page, or a single title entry when nothing is labeled.

from collections.abc import Sequence
from dataclasses import dataclass

from lxml import etree

from comicpub.metadata.types import ComicMetadata
from comicpub.packaging.errors import SerializationError
from comicpub.packaging.page import PageImage

XHTML_NS = "http://www.w3.org/1999/xhtml"
EPUB_NS = "http://www.idpf.org/2007/ops"
XML_NS = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class NavEntry:
    """A single table-of-contents link."""

    label: str
    href: str


def navigation_entries(
    metadata: ComicMetadata, cover: PageImage | None, pages: Sequence[PageImage]
) -> list[NavEntry]:
    """Collect TOC entries in reading order.

    Labeled pages link to their first markup file in reading order. With no
    labels at all, the book title links to the cover page, or to the first
    body page when there is no cover.
    """
    rtl = metadata.right_to_left
    entries = [
        NavEntry(label=page.nav_label, href=page.page_file_names(rtl)[0])
        for page in pages
        if page.nav_label
    ]
    if entries:
        return entries

    if cover is not None:
        return [NavEntry(label=metadata.title, href=cover.page_regular_file_name())]
    if pages:
        return [NavEntry(label=metadata.title, href=pages[0].page_file_names(rtl)[0])]
    return []


def build_navigation_document(
    metadata: ComicMetadata, cover: PageImage | None, pages: Sequence[PageImage]
) -> bytes:
    """Serialize the navigation document.

    Raises:
        SerializationError: If a label or title cannot be represented in XML.
    """
    try:
        html = etree.Element(
            f"{{{XHTML_NS}}}html",
            {"lang": metadata.language, f"{{{XML_NS}}}lang": metadata.language},
            nsmap={None: XHTML_NS, "epub": EPUB_NS},
        )
        head = etree.SubElement(html, f"{{{XHTML_NS}}}head")
        etree.SubElement(head, f"{{{XHTML_NS}}}meta", {"charset": "utf-8"})
        title = etree.SubElement(head, f"{{{XHTML_NS}}}title")
        title.text = metadata.title

        body = etree.SubElement(html, f"{{{XHTML_NS}}}body")
        nav = etree.SubElement(body, f"{{{XHTML_NS}}}nav", {f"{{{EPUB_NS}}}type": "toc", "id": "toc"})
        ol = etree.SubElement(nav, f"{{{XHTML_NS}}}ol")
        for entry in navigation_entries(metadata, cover, pages):
            li = etree.SubElement(ol, f"{{{XHTML_NS}}}li")
            link = etree.SubElement(li, f"{{{XHTML_NS}}}a", {"href": entry.href})
            link.text = entry.label

        return etree.tostring(html, xml_declaration=True, encoding="utf-8", pretty_print=True)
    except (etree.Error, ValueError) as exc:
        raise SerializationError(f"Failed to build navigation document: {exc}") from exc
