"""Core document properties (``/docProps/core.xml``)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from lxml import etree

from pptx_opc.errors import InvalidXml
from pptx_opc.namespaces import CORE_PROPERTIES, DC, DCMITYPE, DCTERMS, XSI, qn
from pptx_opc.oxml import parse_xml, serialize_xml

CORE_PROPERTIES_PARTNAME = "/docProps/core.xml"

_NSMAP = {"cp": CORE_PROPERTIES, "dc": DC, "dcterms": DCTERMS, "dcmitype": DCMITYPE, "xsi": XSI}

# attribute -> element name, in the order Office writes them
_TEXT_ELEMENTS = {
    "title": "dc:title",
    "subject": "dc:subject",
    "creator": "dc:creator",
    "keywords": "cp:keywords",
    "description": "dc:description",
    "last_modified_by": "cp:lastModifiedBy",
    "revision": "cp:revision",
    "category": "cp:category",
}
_DATE_ELEMENTS = {
    "created": "dcterms:created",
    "modified": "dcterms:modified",
}

_W3CDTF = re.compile(r"(\d{4})(?:-(\d{2}))?(?:-(\d{2}))?(?:T(\d{2}):(\d{2})(?::(\d{2}))?)?")


def _parse_w3cdtf(text: str) -> datetime | None:
    match = _W3CDTF.match(text.strip())
    if match is None:
        return None
    parts = [int(g) if g else None for g in match.groups()]
    year, month, day, hour, minute, second = parts
    return datetime(
        year,
        month or 1,
        day or 1,
        hour or 0,
        minute or 0,
        second or 0,
        tzinfo=timezone.utc,
    )


def _format_w3cdtf(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class CoreProperties:
    """Dublin Core metadata stored in the package's core-properties part."""

    title: str = ""
    subject: str = ""
    creator: str = ""
    keywords: str = ""
    description: str = ""
    last_modified_by: str = ""
    revision: str = ""
    category: str = ""
    created: datetime | None = None
    modified: datetime | None = None

    def to_xml(self) -> bytes:
        root = etree.Element(qn("cp:coreProperties"), nsmap=_NSMAP)
        for attr, tag in _TEXT_ELEMENTS.items():
            value = getattr(self, attr)
            if value:
                etree.SubElement(root, qn(tag)).text = value
        for attr, tag in _DATE_ELEMENTS.items():
            value = getattr(self, attr)
            if value is not None:
                elem = etree.SubElement(root, qn(tag))
                elem.set(qn("xsi:type"), "dcterms:W3CDTF")
                elem.text = _format_w3cdtf(value)
        return serialize_xml(root)

    @classmethod
    def from_xml(cls, xml_content: bytes) -> CoreProperties:
        root = parse_xml(xml_content, CORE_PROPERTIES_PARTNAME)
        if root.tag != qn("cp:coreProperties"):
            raise InvalidXml(f"core properties root element is {root.tag!r}")

        values: dict[str, object] = {}
        for attr, tag in _TEXT_ELEMENTS.items():
            elem = root.find(qn(tag))
            if elem is not None and elem.text:
                values[attr] = elem.text
        for attr, tag in _DATE_ELEMENTS.items():
            elem = root.find(qn(tag))
            if elem is not None and elem.text:
                values[attr] = _parse_w3cdtf(elem.text)
        return cls(**values)
