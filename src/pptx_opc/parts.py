"""Parts held by an OPC package."""

from __future__ import annotations

import hashlib
from enum import Enum

from pptx_opc import namespaces as ns
from pptx_opc.errors import RelationshipNotFound
from pptx_opc.packuri import PartName
from pptx_opc.relationships import RelationshipCollection


class PartType(Enum):
    """What a part holds, derived from its content type."""

    PRESENTATION = "presentation"
    SLIDE = "slide"
    SLIDE_LAYOUT = "slide_layout"
    SLIDE_MASTER = "slide_master"
    NOTES_SLIDE = "notes_slide"
    NOTES_MASTER = "notes_master"
    CHART = "chart"
    THEME = "theme"
    CORE_PROPERTIES = "core_properties"
    COMMENTS = "comments"
    FONT = "font"
    WORKBOOK = "workbook"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    UNKNOWN = "unknown"


_PART_TYPES = {
    ns.CT_PML_PRESENTATION_MAIN: PartType.PRESENTATION,
    ns.CT_PML_SLIDE: PartType.SLIDE,
    ns.CT_PML_SLIDE_LAYOUT: PartType.SLIDE_LAYOUT,
    ns.CT_PML_SLIDE_MASTER: PartType.SLIDE_MASTER,
    ns.CT_PML_NOTES_SLIDE: PartType.NOTES_SLIDE,
    ns.CT_PML_NOTES_MASTER: PartType.NOTES_MASTER,
    ns.CT_DML_CHART: PartType.CHART,
    ns.CT_OFC_THEME: PartType.THEME,
    ns.CT_OPC_CORE_PROPERTIES: PartType.CORE_PROPERTIES,
    ns.CT_PML_COMMENTS: PartType.COMMENTS,
    ns.CT_X_FONTDATA: PartType.FONT,
    ns.CT_X_FONT_TTF: PartType.FONT,
    ns.CT_SML_SHEET: PartType.WORKBOOK,
}


def part_type_from_content_type(content_type: str) -> PartType:
    """Classify a content type."""
    if content_type in _PART_TYPES:
        return _PART_TYPES[content_type]
    major = content_type.split("/", 1)[0]
    if major == "image":
        return PartType.IMAGE
    if major == "video":
        return PartType.VIDEO
    if major == "audio":
        return PartType.AUDIO
    return PartType.UNKNOWN


def is_xml_content_type(content_type: str) -> bool:
    return content_type == ns.CT_XML or content_type.endswith("+xml")


class Part:
    """A named payload inside a package, plus the relationships it owns.

    The payload is opaque to the package engine. Callers that edit a part
    parse ``blob``, change it, and assign the whole new byte string back.
    """

    def __init__(
        self,
        partname: str,
        content_type: str,
        blob: bytes = b"",
        rels: RelationshipCollection | None = None,
    ):
        self.partname = partname if isinstance(partname, PartName) else PartName(partname)
        self.content_type = content_type
        self.blob = blob
        self.rels = rels if rels is not None else RelationshipCollection(self.partname.base_uri)

    @property
    def blob(self) -> bytes:
        return self._blob

    @blob.setter
    def blob(self, value: bytes) -> None:
        self._blob = value
        self._sha1: str | None = None

    def __repr__(self) -> str:
        return f"Part({str(self.partname)!r}, {self.content_type!r}, {len(self.blob)} bytes)"

    @property
    def base_uri(self) -> PartName:
        return self.partname.base_uri

    @property
    def part_type(self) -> PartType:
        return part_type_from_content_type(self.content_type)

    @property
    def is_xml(self) -> bool:
        """Whether the payload is XML, judged by content type or extension."""
        return is_xml_content_type(self.content_type) or self.partname.ext.lower() in (
            "xml",
            "rels",
        )

    @property
    def sha1(self) -> str:
        """Lowercase hex SHA1 of the payload, recomputed after ``blob`` changes."""
        if self._sha1 is None:
            self._sha1 = hashlib.sha1(self._blob).hexdigest()
        return self._sha1

    def relate_to(self, target: str, reltype: str) -> str:
        """Add a relationship from this part to another part; returns the new rId."""
        target_name = target if isinstance(target, PartName) else PartName(target)
        return self.rels.add_relationship(reltype, target_name.relative_ref(self.base_uri))

    def related_partname(self, rel_id: str) -> PartName:
        """Resolve a relationship id of this part to the target part name.

        Raises:
            RelationshipNotFound: No such id, or the relationship is external.
        """
        rel = self.rels.get_by_id(rel_id)
        if rel is None:
            raise RelationshipNotFound(f"{self.partname} has no relationship {rel_id}")
        return rel.target_partname(self.base_uri)

    def related_part_ref(self, reltype: str) -> str:
        """Target reference of the single relationship of ``reltype``."""
        return self.rels.by_reltype(reltype).target
