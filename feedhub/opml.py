"""OPML parser for importing and exporting feed subscriptions."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime


@dataclass
class OPMLFeed:
    """A feed entry from an OPML file."""
    url: str
    title: str | None = None
    description: str | None = None


@dataclass
class OPMLFolder:
    """A folder outline holding feeds and nested folders."""
    name: str
    feeds: list[OPMLFeed] = field(default_factory=list)
    children: list["OPMLFolder"] = field(default_factory=list)


@dataclass
class OPMLDocument:
    """Parsed OPML document. The root folder holds top-level outlines."""
    title: str | None
    root: OPMLFolder

    def iter_feeds(self):
        """Yield every feed in document order."""
        stack = [self.root]
        while stack:
            folder = stack.pop()
            yield from folder.feeds
            stack.extend(reversed(folder.children))


def parse_opml(xml_content: str) -> OPMLDocument:
    """
    Parse OPML XML content into a folder tree.

    Args:
        xml_content: Raw OPML XML string

    Returns:
        OPMLDocument with title and the outline tree

    Raises:
        ValueError: If XML is invalid or not OPML format
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML: {e}")

    if root.tag.lower() != "opml":
        raise ValueError(f"Not an OPML document (root element: {root.tag})")

    doc_title = None
    head = root.find("head")
    if head is not None:
        title_elem = head.find("title")
        if title_elem is not None and title_elem.text:
            doc_title = title_elem.text.strip()

    body = root.find("body")
    if body is None:
        raise ValueError("OPML document missing <body> element")

    tree = OPMLFolder(name="")
    _parse_outlines(body, tree)
    return OPMLDocument(title=doc_title, root=tree)


def _parse_outlines(element: ET.Element, folder: OPMLFolder) -> None:
    """
    Recursively parse outline elements.

    Outlines with an xmlUrl are feeds; titled outlines without one are
    folders. Untitled, feedless outlines are flattened into their parent.
    """
    for outline in element.findall("outline"):
        xml_url = outline.get("xmlUrl") or outline.get("xmlurl")
        title = outline.get("title") or outline.get("text")

        if xml_url:
            folder.feeds.append(OPMLFeed(
                url=xml_url.strip(),
                title=title.strip() if title else None,
                description=outline.get("description"),
            ))
        elif title and title.strip():
            child = OPMLFolder(name=title.strip())
            _parse_outlines(outline, child)
            folder.children.append(child)
        else:
            _parse_outlines(outline, folder)


def generate_opml(root: OPMLFolder, title: str = "Feed Subscriptions") -> str:
    """
    Generate OPML 2.0 XML from a folder tree.

    Folders are emitted before the feeds at the same level.
    """
    opml = ET.Element("opml", version="2.0")

    head = ET.SubElement(opml, "head")
    ET.SubElement(head, "title").text = title
    now = format_datetime(datetime.now(timezone.utc))
    ET.SubElement(head, "dateCreated").text = now
    ET.SubElement(head, "dateModified").text = now

    body = ET.SubElement(opml, "body")
    _add_folder_contents(body, root)

    ET.indent(opml)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(
        opml, encoding="unicode"
    )


def _add_folder_contents(parent: ET.Element, folder: OPMLFolder) -> None:
    for child in folder.children:
        element = ET.SubElement(parent, "outline", text=child.name, title=child.name)
        _add_folder_contents(element, child)
    for feed in folder.feeds:
        _add_feed_outline(parent, feed)


def _add_feed_outline(parent: ET.Element, feed: OPMLFeed) -> None:
    """Add a feed outline element to parent."""
    attrs = {
        "type": "rss",
        "xmlUrl": feed.url,
    }
    if feed.title:
        attrs["text"] = feed.title
        attrs["title"] = feed.title
    else:
        attrs["text"] = feed.url
    if feed.description:
        attrs["description"] = feed.description

    ET.SubElement(parent, "outline", **attrs)
