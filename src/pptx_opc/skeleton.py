"""Payloads for the parts of a freshly created, empty presentation package."""

from __future__ import annotations

from lxml import etree

from pptx_opc.namespaces import DRAWINGML, OFFICE_DOC_RELATIONSHIPS, PRESENTATIONML, qualify_name
from pptx_opc.oxml import serialize_xml

PRESENTATION_PARTNAME = "/ppt/presentation.xml"

# 10in x 7.5in slides and 7.5in x 10in notes, in EMU.
SLIDE_SIZE = (9144000, 6858000)
NOTES_SIZE = (6858000, 9144000)


def presentation_xml(slide_size: tuple[int, int] = SLIDE_SIZE) -> bytes:
    """A ``p:presentation`` root with slide and notes sizes and no slides."""
    nsmap = {"a": DRAWINGML, "r": OFFICE_DOC_RELATIONSHIPS, "p": PRESENTATIONML}
    root = etree.Element(qualify_name("presentation", PRESENTATIONML), nsmap=nsmap)
    root.set("saveSubsetFonts", "1")
    cx, cy = slide_size
    etree.SubElement(root, qualify_name("sldSz", PRESENTATIONML), cx=str(cx), cy=str(cy))
    notes_cx, notes_cy = NOTES_SIZE
    etree.SubElement(
        root, qualify_name("notesSz", PRESENTATIONML), cx=str(notes_cx), cy=str(notes_cy)
    )
    etree.SubElement(root, qualify_name("defaultTextStyle", PRESENTATIONML))
    return serialize_xml(root)
