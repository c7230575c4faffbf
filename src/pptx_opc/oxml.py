"""Shared lxml parsing and serialization for package-level XML parts."""

from __future__ import annotations

from lxml import etree

from pptx_opc.errors import InvalidXml

# Package XML never needs DTDs or network access.
XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)


def parse_xml(xml_content: bytes, what: str) -> etree._Element:
    """Parse package XML, translating lxml errors into :class:`InvalidXml`."""
    try:
        return etree.fromstring(xml_content, XML_PARSER)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise InvalidXml(f"{what} is not well-formed: {exc}") from exc


def serialize_xml(root: etree._Element) -> bytes:
    """Serialize with the standalone XML declaration Office writes."""
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)
