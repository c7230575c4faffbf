"""The content-type registry serialized as ``[Content_Types].xml``."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from lxml import etree

from pptx_opc.errors import InvalidXml, UnknownContentType
from pptx_opc.namespaces import CONTENT_TYPES, DEFAULT_CONTENT_TYPES
from pptx_opc.oxml import parse_xml, serialize_xml
from pptx_opc.packuri import PartName

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CONTENT_TYPES_MEMBER = "[Content_Types].xml"

# Extensions a new package declares up front. Other known extensions get their
# Default the first time a matching part is added.
STANDARD_DEFAULT_EXTENSIONS = (
    "bmp",
    "emf",
    "gif",
    "jpeg",
    "jpg",
    "mp4",
    "png",
    "rels",
    "svg",
    "tif",
    "tiff",
    "wmf",
    "xlsx",
    "xml",
)


class ContentTypeRegistry:
    """Default (per extension) and Override (per part name) content types.

    Overrides take precedence. Extensions are matched case-insensitively, and
    part names are matched exactly first, then case-insensitively, since OPC
    part names compare without regard to ASCII case.
    """

    def __init__(self) -> None:
        self._defaults: dict[str, str] = {}  # lowercase extension -> content_type
        self._overrides: dict[str, str] = {}  # part_name -> content_type
        self._override_keys: dict[str, str] = {}  # lowercase part_name -> part_name

    @classmethod
    def with_standard_defaults(cls) -> ContentTypeRegistry:
        """A registry seeded with Defaults for XML, relationships, and common media."""
        registry = cls()
        for ext in STANDARD_DEFAULT_EXTENSIONS:
            registry.set_default(ext, DEFAULT_CONTENT_TYPES[ext])
        return registry

    @property
    def defaults(self) -> Mapping[str, str]:
        return MappingProxyType(self._defaults)

    @property
    def overrides(self) -> Mapping[str, str]:
        return MappingProxyType(self._overrides)

    def default_for(self, ext: str) -> str | None:
        """Get the Default content type for an extension (without dot)."""
        return self._defaults.get(ext.lstrip(".").lower())

    def set_default(self, ext: str, content_type: str) -> None:
        self._defaults[ext.lstrip(".").lower()] = content_type

    def override_for(self, partname: str) -> str | None:
        """Get the Override content type registered for a part name."""
        if partname in self._overrides:
            return self._overrides[partname]
        key = self._override_keys.get(partname.lower())
        if key is None:
            return None
        return self._overrides[key]

    def set_override(self, partname: str, content_type: str) -> None:
        key = self._override_keys.get(partname.lower(), partname)
        self._overrides[key] = content_type
        self._override_keys[key.lower()] = key

    def remove_override(self, partname: str) -> str | None:
        """Drop the Override for a part name, returning its content type."""
        key = self._override_keys.pop(partname.lower(), None)
        if key is None:
            return None
        return self._overrides.pop(key)

    def resolve(self, partname: str) -> str:
        """Get the effective content type for a part.

        Raises:
            UnknownContentType: Neither an Override nor a Default applies.
        """
        content_type = self.override_for(partname)
        if content_type is not None:
            return content_type

        content_type = self.default_for(PartName(partname).ext)
        if content_type is None:
            raise UnknownContentType(partname)
        return content_type

    def __contains__(self, partname: str) -> bool:
        try:
            self.resolve(partname)
        except UnknownContentType:
            return False
        return True

    def to_xml(self) -> bytes:
        """Serialize as ``[Content_Types].xml``.

        Defaults are sorted by extension and Overrides keep insertion order,
        so serializing an unchanged registry twice gives identical bytes.
        """
        root = etree.Element(f"{{{CONTENT_TYPES}}}Types", nsmap={None: CONTENT_TYPES})
        for ext in sorted(self._defaults):
            etree.SubElement(
                root,
                f"{{{CONTENT_TYPES}}}Default",
                Extension=ext,
                ContentType=self._defaults[ext],
            )
        for partname, content_type in self._overrides.items():
            etree.SubElement(
                root,
                f"{{{CONTENT_TYPES}}}Override",
                PartName=partname,
                ContentType=content_type,
            )
        return serialize_xml(root)

    @classmethod
    def from_xml(cls, xml_content: bytes) -> ContentTypeRegistry:
        """Parse ``[Content_Types].xml`` content.

        Raises:
            InvalidXml: The bytes are not well-formed, the root is not a
                ``Types`` element, or an entry lacks a required attribute.
        """
        root = parse_xml(xml_content, CONTENT_TYPES_MEMBER)

        if root.tag != f"{{{CONTENT_TYPES}}}Types":
            raise InvalidXml(f"{CONTENT_TYPES_MEMBER} root element is {root.tag!r}, expected Types")

        registry = cls()
        ns = {"ct": CONTENT_TYPES}

        for default in root.findall("ct:Default", ns):
            ext = default.get("Extension")
            content_type = default.get("ContentType")
            if not ext or not content_type:
                raise InvalidXml("Default element missing Extension or ContentType")
            registry.set_default(ext, content_type)

        for override in root.findall("ct:Override", ns):
            partname = override.get("PartName")
            content_type = override.get("ContentType")
            if not partname or not content_type:
                raise InvalidXml("Override element missing PartName or ContentType")
            registry.set_override(partname, content_type)

        logger.debug(
            "Parsed %d defaults and %d overrides", len(registry._defaults), len(registry._overrides)
        )
        return registry
