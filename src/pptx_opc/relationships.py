"""Relationship handling for OPC packages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lxml import etree

from pptx_opc.errors import DuplicateRelationshipId, InvalidXml, RelationshipNotFound
from pptx_opc.namespaces import RELATIONSHIPS
from pptx_opc.oxml import parse_xml, serialize_xml
from pptx_opc.packuri import PartName

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_RID = re.compile(r"rId([1-9][0-9]*)")


@dataclass
class Relationship:
    """An OPC relationship from a source part (or the package) to a target."""

    id: str  # Relationship ID (e.g., "rId1")
    type: str  # Relationship type URI
    target: str  # Relative reference for internal targets, any URI for external ones
    is_external: bool = False

    @property
    def target_mode(self) -> str:
        return "External" if self.is_external else "Internal"

    def target_partname(self, base_uri: str) -> PartName:
        """Resolve the target to an absolute part name.

        Args:
            base_uri: Base URI of the source part. For package relationships, use "/".

        Raises:
            RelationshipNotFound: The relationship is external and names no part.
        """
        if self.is_external:
            raise RelationshipNotFound(
                f"relationship {self.id} is external and has no target part: {self.target}"
            )
        return PartName.from_rel_ref(base_uri, self.target)


def rid_number(rel_id: str) -> int | None:
    """The numeric suffix of an ``rIdN`` id, or None for any other form."""
    match = _RID.fullmatch(rel_id)
    if match is None:
        return None
    return int(match.group(1))


class RelationshipCollection:
    """Relationships owned by one source part or by the package root.

    New ids continue from the highest number ever seen in this collection, so
    an id is never handed out twice, even after a relationship is removed.
    """

    def __init__(self, base_uri: str = "/"):
        self._relationships: dict[str, Relationship] = {}
        self._base_uri = base_uri
        self._max_rid = 0

    @property
    def base_uri(self) -> str:
        """Base URI that internal targets are relative to."""
        return self._base_uri

    def add(self, rel: Relationship) -> str:
        """Add a relationship that already carries its id.

        Raises:
            DuplicateRelationshipId: The id is already used in this collection.
        """
        if rel.id in self._relationships:
            raise DuplicateRelationshipId(f"relationship id {rel.id} already in use")
        number = rid_number(rel.id)
        if number is not None:
            self._max_rid = max(self._max_rid, number)
        self._relationships[rel.id] = rel
        return rel.id

    def next_rid(self) -> str:
        """The id the next ``add_relationship`` call will allocate."""
        return f"rId{self._max_rid + 1}"

    def add_relationship(self, reltype: str, target_ref: str, is_external: bool = False) -> str:
        """Append a relationship under a freshly allocated id and return the id.

        The id is what the referencing XML carries in its ``r:id`` or
        ``r:embed`` attribute.
        """
        rel_id = self.next_rid()
        self.add(Relationship(id=rel_id, type=reltype, target=target_ref, is_external=is_external))
        logger.debug("Added %s -> %s (%s) from %s", rel_id, target_ref, reltype, self._base_uri)
        return rel_id

    def get_or_add(self, reltype: str, target_ref: str, is_external: bool = False) -> str:
        """Reuse an identical relationship if one exists, else add one."""
        for rel in self._relationships.values():
            if rel.type == reltype and rel.target == target_ref and rel.is_external == is_external:
                return rel.id
        return self.add_relationship(reltype, target_ref, is_external)

    def remove(self, rel_id: str) -> Relationship | None:
        """Remove a relationship by id. The id is not reused afterwards."""
        return self._relationships.pop(rel_id, None)

    def get_by_id(self, rel_id: str) -> Relationship | None:
        """Get a relationship by its ID."""
        return self._relationships.get(rel_id)

    def get_by_type(self, reltype: str) -> Iterator[Relationship]:
        """Get all relationships of a specific type."""
        for rel in self._relationships.values():
            if rel.type == reltype:
                yield rel

    def get_first_by_type(self, reltype: str) -> Relationship | None:
        """Get the first relationship of a specific type."""
        return next(self.get_by_type(reltype), None)

    def by_reltype(self, reltype: str) -> Relationship:
        """Get the single relationship of a type.

        Raises:
            RelationshipNotFound: Zero or several relationships have that type.
        """
        matches = list(self.get_by_type(reltype))
        if not matches:
            raise RelationshipNotFound(f"no relationship of type {reltype!r}")
        if len(matches) > 1:
            raise RelationshipNotFound(f"multiple relationships of type {reltype!r}")
        return matches[0]

    def resolve_target(self, rel_id: str) -> PartName | None:
        """Resolve the target part name for a relationship ID."""
        rel = self.get_by_id(rel_id)
        if rel is None or rel.is_external:
            return None
        return rel.target_partname(self._base_uri)

    def __iter__(self) -> Iterator[Relationship]:
        return iter(self._relationships.values())

    def __len__(self) -> int:
        return len(self._relationships)

    def __contains__(self, rel_id: str) -> bool:
        return rel_id in self._relationships

    def to_xml(self) -> bytes:
        """Serialize as a ``.rels`` part, ordered by numeric id."""
        root = etree.Element(f"{{{RELATIONSHIPS}}}Relationships", nsmap={None: RELATIONSHIPS})
        ordered = sorted(
            self._relationships.values(),
            key=lambda rel: (rid_number(rel.id) is None, rid_number(rel.id) or 0, rel.id),
        )
        for rel in ordered:
            elem = etree.SubElement(root, f"{{{RELATIONSHIPS}}}Relationship")
            elem.set("Id", rel.id)
            elem.set("Type", rel.type)
            elem.set("Target", rel.target)
            if rel.is_external:
                elem.set("TargetMode", "External")
        return serialize_xml(root)

    @classmethod
    def from_xml(cls, xml_content: bytes, base_uri: str = "/") -> RelationshipCollection:
        """Parse relationships from XML content.

        Args:
            xml_content: The raw XML bytes of the .rels file.
            base_uri: Base URI of the part these relationships belong to.

        Returns:
            A RelationshipCollection whose id counter starts after the highest
            id in the file, wherever that id appears.

        Raises:
            InvalidXml: The file is not well-formed, or an entry lacks an
                attribute or carries an id that is not of the ``rIdN`` form.
        """
        root = parse_xml(xml_content, f"relationships for {base_uri}")
        if root.tag != f"{{{RELATIONSHIPS}}}Relationships":
            raise InvalidXml(f"relationships root element is {root.tag!r}")

        parsed: list[Relationship] = []
        for rel_elem in root.findall(f"{{{RELATIONSHIPS}}}Relationship"):
            rel_id = rel_elem.get("Id")
            reltype = rel_elem.get("Type")
            target = rel_elem.get("Target")
            if not rel_id or not reltype or target is None:
                raise InvalidXml("Relationship element missing Id, Type or Target")
            if rid_number(rel_id) is None:
                raise InvalidXml(f"relationship id is not of the form rIdN: {rel_id!r}")
            parsed.append(
                Relationship(
                    id=rel_id,
                    type=reltype,
                    target=target,
                    is_external=rel_elem.get("TargetMode") == "External",
                )
            )

        collection = cls(base_uri)
        collection._max_rid = max((rid_number(rel.id) or 0 for rel in parsed), default=0)

        for rel in parsed:
            if rel.id in collection:
                renumbered = collection.next_rid()
                logger.warning(
                    "Duplicate relationship id %s for %s renumbered to %s",
                    rel.id,
                    base_uri,
                    renumbered,
                )
                rel.id = renumbered
            collection.add(rel)

        return collection
