"""OPC (Open Packaging Conventions) package handling.

A PPTX file is an OPC package - a ZIP archive containing XML and binary
parts, a content-type registry, and relationships between parts. The whole
package is held in memory: load it, mutate it, and serialize it again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pptx_opc.content_types import CONTENT_TYPES_MEMBER, ContentTypeRegistry
from pptx_opc.core.zipio import LoadLimits, read_entries, write_entries
from pptx_opc.core_properties import CORE_PROPERTIES_PARTNAME, CoreProperties
from pptx_opc.errors import (
    InvalidPartName,
    InvalidXml,
    IssueKind,
    IssueSeverity,
    PackageIssue,
    PackageLoadError,
    PartNotFound,
    ResourceLimit,
    UnknownContentType,
    ZipCorruption,
)
from pptx_opc.namespaces import (
    CT_OCTET_STREAM,
    CT_OPC_CORE_PROPERTIES,
    CT_PML_PRESENTATION_MAIN,
    DEFAULT_CONTENT_TYPES,
    REL_CORE_PROPERTIES,
    REL_OFFICE_DOCUMENT,
)
from pptx_opc.packuri import PartName, next_partname
from pptx_opc.parts import Part, PartType
from pptx_opc.relationships import RelationshipCollection
from pptx_opc.skeleton import PRESENTATION_PARTNAME, presentation_xml

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pptx_opc.media import Audio, Image, Media, Video

logger = logging.getLogger(__name__)

PACKAGE_RELS_MEMBER = "_rels/.rels"

# Maximum .pptx file size accepted by open().
MAX_PACKAGE_SIZE = 2 * 1024 * 1024 * 1024


def _is_rels_member(name: str) -> bool:
    segments = name.split("/")
    return len(segments) >= 2 and segments[-2] == "_rels" and name.endswith(".rels")


def _is_deduplicated(part: Part) -> bool:
    # SVG is XML but stored like any other image.
    return not part.is_xml or part.part_type is PartType.IMAGE


class OpcPackage:
    """An in-memory Open XML package.

    Owns every part (in insertion order), the content-type registry, the
    package-level relationships, and a SHA1 index of binary parts used to
    store identical media only once.
    """

    def __init__(self) -> None:
        self._parts: dict[PartName, Part] = {}
        self._relationships = RelationshipCollection("/")
        self._sha1_index: dict[str, PartName] = {}
        self.content_types = ContentTypeRegistry.with_standard_defaults()
        self.load_issues: list[PackageIssue] = []

    @classmethod
    def new(cls) -> OpcPackage:
        """Create a package holding an empty presentation and core properties."""
        package = cls()
        presentation = Part(PRESENTATION_PARTNAME, CT_PML_PRESENTATION_MAIN, presentation_xml())
        package.put_part(presentation)
        package.relate_to("/", presentation.partname, REL_OFFICE_DOCUMENT)
        package.core_properties = CoreProperties(title="Presentation", revision="1")
        return package

    @classmethod
    def open(
        cls,
        path: str | Path,
        limits: LoadLimits | None = None,
        strict: bool = False,
    ) -> OpcPackage:
        """Load a package from a file.

        Raises:
            ResourceLimit: The file is larger than 2 GiB.
        """
        path = Path(path)
        size = path.stat().st_size
        if size > MAX_PACKAGE_SIZE:
            raise ResourceLimit(
                f"package file size {size} bytes exceeds the limit of {MAX_PACKAGE_SIZE} bytes"
            )
        return cls.from_zip_bytes(path.read_bytes(), limits=limits, strict=strict)

    def save(self, path: str | Path) -> None:
        """Write the package to a file. Nothing is written if serialization fails."""
        data = self.to_zip_bytes()
        Path(path).write_bytes(data)

    # -- part store ---------------------------------------------------------

    @property
    def relationships(self) -> RelationshipCollection:
        """The package-level relationships from _rels/.rels."""
        return self._relationships

    def put_part(self, part: Part) -> None:
        """Insert a part, or replace the part that has the same name.

        A replaced part keeps its position in serialization order. If the
        part's content type differs from the Default for its extension, an
        Override is registered for it.
        """
        if part.partname == "/":
            raise InvalidPartName("'/' names the package itself and cannot hold a part")

        previous = self._parts.get(part.partname)
        self._register_content_type(part)
        self._parts[part.partname] = part
        if previous is not None:
            self._rebuild_sha1_index()
        elif _is_deduplicated(part):
            self._sha1_index.setdefault(part.sha1, part.partname)
        logger.debug(
            "%s part %s (%s)",
            "Replaced" if previous is not None else "Added",
            part.partname,
            part.content_type,
        )

    def part(self, partname: str) -> Part:
        """Get a part by name.

        Raises:
            PartNotFound: No part has that name.
        """
        try:
            return self._parts[partname]
        except KeyError:
            raise PartNotFound(partname) from None

    def part_mut(self, partname: str) -> Part:
        """Get a part for in-place changes to its blob or relationships."""
        return self.part(partname)

    def has_part(self, partname: str) -> bool:
        return partname in self._parts

    def __contains__(self, partname: str) -> bool:
        return self.has_part(partname)

    def __len__(self) -> int:
        return len(self._parts)

    def iter_parts(self) -> Iterator[Part]:
        """Iterate parts in serialization order."""
        return iter(list(self._parts.values()))

    @property
    def partnames(self) -> list[PartName]:
        return list(self._parts)

    def remove_part(self, partname: str) -> Part:
        """Remove a part, its Override, and every relationship that targets it.

        Relationship ids freed this way are not reused.
        """
        part = self.part(partname)
        del self._parts[part.partname]
        self.content_types.remove_override(part.partname)
        self._rebuild_sha1_index()

        for rels in [self._relationships, *(p.rels for p in self._parts.values())]:
            for rel in list(rels):
                if rel.is_external:
                    continue
                try:
                    target = rel.target_partname(rels.base_uri)
                except InvalidPartName:
                    continue
                if target == part.partname:
                    rels.remove(rel.id)
                    logger.debug("Dropped %s from %s with removed part", rel.id, rels.base_uri)
        return part

    def resolve_content_type(self, partname: str) -> str:
        return self.content_types.resolve(partname)

    def _register_content_type(self, part: Part) -> None:
        ext = part.partname.ext.lower()
        default = self.content_types.default_for(ext)
        if default is None and DEFAULT_CONTENT_TYPES.get(ext) == part.content_type:
            self.content_types.set_default(ext, part.content_type)
            default = part.content_type

        if default == part.content_type:
            self.content_types.remove_override(part.partname)
        else:
            self.content_types.set_override(part.partname, part.content_type)

    # -- naming -------------------------------------------------------------

    def next_partname(self, template: str) -> PartName:
        """Next free name for a template such as ``/ppt/charts/chart{}.xml``."""
        return next_partname(template, self._parts)

    def next_image_partname(self, ext: str) -> PartName:
        return self.next_partname(f"/ppt/media/image{{}}.{ext}")

    def next_media_partname(self, ext: str) -> PartName:
        return self.next_partname(f"/ppt/media/media{{}}.{ext}")

    # -- relationships ------------------------------------------------------

    def _rels_for(self, source: str) -> RelationshipCollection:
        if source == "/":
            return self._relationships
        return self.part(source).rels

    def relate_to(self, source: str, target: str, reltype: str) -> str:
        """Add an internal relationship from ``source`` (or "/") to a part.

        Returns:
            The new relationship id.

        Raises:
            PartNotFound: ``source`` or ``target`` is not in the package.
        """
        rels = self._rels_for(source)
        target_part = self.part(target)
        return rels.add_relationship(reltype, target_part.partname.relative_ref(rels.base_uri))

    def relate_external(self, source: str, reltype: str, url: str) -> str:
        """Add an external relationship (hyperlink, linked media) and return its id."""
        return self._rels_for(source).add_relationship(reltype, url, is_external=True)

    def part_by_reltype(self, reltype: str) -> Part:
        """The part targeted by the single package relationship of ``reltype``."""
        rel = self._relationships.by_reltype(reltype)
        return self.part(rel.target_partname("/"))

    @property
    def main_document_part(self) -> Part:
        """The part the officeDocument relationship points at (presentation.xml)."""
        return self.part_by_reltype(REL_OFFICE_DOCUMENT)

    # -- media deduplication ------------------------------------------------

    def or_add_image_part(self, image: Image) -> tuple[PartName, str]:
        """Store an image once; identical bytes return the existing part.

        Returns:
            ``(partname, content_type)`` of the new or existing part.
        """
        return self._or_add_media(image)

    def or_add_media_part(self, media: Video | Audio) -> tuple[PartName, str]:
        """Store a video or audio clip once; identical bytes return the existing part."""
        return self._or_add_media(media)

    def _or_add_media(self, media: Media) -> tuple[PartName, str]:
        existing = self._find_by_sha1(media.sha1)
        if existing is not None:
            logger.debug("Reusing %s for media %s", existing.partname, media.sha1)
            return existing.partname, existing.content_type

        partname = self.next_partname(media.partname_template)
        self.put_part(Part(partname, media.content_type, media.blob))
        return partname, media.content_type

    def _find_by_sha1(self, sha1: str) -> Part | None:
        partname = self._sha1_index.get(sha1)
        if partname is not None:
            part = self._parts.get(partname)
            if part is not None and part.sha1 == sha1:
                return part
        # Blobs may have changed through part_mut(); rescan before reporting a miss.
        self._rebuild_sha1_index()
        partname = self._sha1_index.get(sha1)
        return self._parts[partname] if partname is not None else None

    def _rebuild_sha1_index(self) -> None:
        self._sha1_index = {}
        for part in self._parts.values():
            if _is_deduplicated(part):
                self._sha1_index.setdefault(part.sha1, part.partname)

    # -- core properties ----------------------------------------------------

    @property
    def core_properties(self) -> CoreProperties:
        """Metadata from the core-properties part; empty if there is none."""
        rel = self._relationships.get_first_by_type(REL_CORE_PROPERTIES)
        if rel is None:
            return CoreProperties()
        return CoreProperties.from_xml(self.part(rel.target_partname("/")).blob)

    @core_properties.setter
    def core_properties(self, props: CoreProperties) -> None:
        rel = self._relationships.get_first_by_type(REL_CORE_PROPERTIES)
        if rel is not None:
            self.part_mut(rel.target_partname("/")).blob = props.to_xml()
            return
        part = Part(CORE_PROPERTIES_PARTNAME, CT_OPC_CORE_PROPERTIES, props.to_xml())
        self.put_part(part)
        self.relate_to("/", part.partname, REL_CORE_PROPERTIES)

    # -- serialization ------------------------------------------------------

    def to_zip_bytes(self) -> bytes:
        """Serialize the package to ZIP bytes.

        Entry order is ``[Content_Types].xml``, ``_rels/.rels``, then each part
        followed by its relationships part, so an unchanged package always
        serializes to the same bytes.

        Raises:
            UnknownContentType: Some part has no Override and no Default.
        """
        for part in self._parts.values():
            self.content_types.resolve(part.partname)

        entries: list[tuple[str, bytes]] = [
            (CONTENT_TYPES_MEMBER, self.content_types.to_xml()),
            (PACKAGE_RELS_MEMBER, self._relationships.to_xml()),
        ]
        for part in self._parts.values():
            entries.append((part.partname.membername, part.blob))
            if len(part.rels):
                entries.append((part.partname.rels_uri.membername, part.rels.to_xml()))
        return write_entries(entries)

    @classmethod
    def from_zip_bytes(
        cls,
        data: bytes,
        limits: LoadLimits | None = None,
        strict: bool = False,
    ) -> OpcPackage:
        """Load a package from ZIP bytes.

        Loading is permissive: a damaged relationships part loads as an empty
        collection, and a part without a resolvable content type loads as
        ``application/octet-stream``. Each such finding is appended to
        ``load_issues``. With ``strict=True`` the first finding raises instead.

        Raises:
            ZipCorruption: The data is not a ZIP archive.
            PackageLoadError: ``[Content_Types].xml`` is missing or malformed.
        """
        entries = read_entries(data, limits)
        issues = list(entries.issues)
        if strict and issues:
            raise ZipCorruption(str(issues[0]))

        ct_xml = entries.blobs.get(CONTENT_TYPES_MEMBER)
        if ct_xml is None:
            raise PackageLoadError(f"Missing {CONTENT_TYPES_MEMBER}", issues)
        try:
            registry = ContentTypeRegistry.from_xml(ct_xml)
        except InvalidXml as exc:
            raise PackageLoadError(f"Error parsing {CONTENT_TYPES_MEMBER}: {exc}", issues) from exc

        package = cls()
        package.content_types = registry

        rels_blobs: dict[str, bytes] = {}
        for name, blob in entries.blobs.items():
            if name == CONTENT_TYPES_MEMBER:
                continue
            if _is_rels_member(name):
                rels_blobs[name] = blob
                continue
            try:
                partname = PartName("/" + name)
            except InvalidPartName as exc:
                package._record(issues, strict, exc, IssueKind.PART_NAME, "/" + name)
                continue
            try:
                content_type = registry.resolve(partname)
            except UnknownContentType as exc:
                package._record(issues, strict, exc, IssueKind.CONTENT_TYPE, partname)
                content_type = CT_OCTET_STREAM
            package._parts[partname] = Part(partname, content_type, blob)

        root_rels = rels_blobs.pop(PACKAGE_RELS_MEMBER, None)
        if root_rels is None:
            issues.append(
                PackageIssue(
                    kind=IssueKind.PACKAGE,
                    description=f"Missing {PACKAGE_RELS_MEMBER}",
                    part_uri="/" + PACKAGE_RELS_MEMBER,
                    severity=IssueSeverity.ERROR,
                )
            )
        else:
            package._relationships = package._load_rels(
                root_rels, PartName.package(), issues, strict
            )

        for part in package._parts.values():
            rels_blob = rels_blobs.pop(part.partname.rels_uri.membername, None)
            if rels_blob is not None:
                part.rels = package._load_rels(rels_blob, part.partname, issues, strict)

        for name in rels_blobs:
            logger.warning("Ignoring relationships part with no source part: %s", name)
            issues.append(
                PackageIssue(
                    kind=IssueKind.RELATIONSHIP,
                    description="Relationships part has no source part and was dropped",
                    part_uri="/" + name,
                )
            )

        package._rebuild_sha1_index()
        package.load_issues = issues
        logger.debug("Loaded %d parts with %d issues", len(package._parts), len(issues))
        return package

    def _load_rels(
        self,
        xml_content: bytes,
        source: PartName,
        issues: list[PackageIssue],
        strict: bool,
    ) -> RelationshipCollection:
        try:
            return RelationshipCollection.from_xml(xml_content, source.base_uri)
        except InvalidXml as exc:
            self._record(issues, strict, exc, IssueKind.RELATIONSHIP, source.rels_uri)
            return RelationshipCollection(source.base_uri)

    @staticmethod
    def _record(
        issues: list[PackageIssue],
        strict: bool,
        exc: Exception,
        kind: IssueKind,
        part_uri: str,
    ) -> None:
        if strict:
            raise exc
        logger.warning("Loaded %s with a problem: %s", part_uri, exc)
        issues.append(
            PackageIssue(kind=kind, description=str(exc), part_uri=str(part_uri))
        )

    # -- structure check ----------------------------------------------------

    def validate_structure(self) -> list[PackageIssue]:
        """Check referential integrity of the package.

        Returns:
            Issues found: a missing main document relationship, parts whose
            content type does not resolve, and internal relationships whose
            target part does not exist.
        """
        issues: list[PackageIssue] = []

        main_rel = self._relationships.get_first_by_type(REL_OFFICE_DOCUMENT)
        if main_rel is None:
            issues.append(
                PackageIssue(
                    kind=IssueKind.RELATIONSHIP,
                    description="Missing main document relationship (officeDocument)",
                    part_uri="/" + PACKAGE_RELS_MEMBER,
                    severity=IssueSeverity.ERROR,
                )
            )

        for part in self._parts.values():
            if part.partname not in self.content_types:
                issues.append(
                    PackageIssue(
                        kind=IssueKind.CONTENT_TYPE,
                        description="No Default or Override content type",
                        part_uri=part.partname,
                        severity=IssueSeverity.ERROR,
                    )
                )

        sources = [(PartName.package(), self._relationships)]
        sources.extend((p.partname, p.rels) for p in self._parts.values())
        for source, rels in sources:
            for rel in rels:
                if rel.is_external:
                    continue
                try:
                    target = rel.target_partname(rels.base_uri)
                except InvalidPartName as exc:
                    description = f"Relationship {rel.id} has an invalid target: {exc}"
                else:
                    if target in self._parts:
                        continue
                    description = f"Relationship {rel.id} targets missing part {target}"
                issues.append(
                    PackageIssue(
                        kind=IssueKind.RELATIONSHIP,
                        description=description,
                        part_uri=source.rels_uri,
                        severity=IssueSeverity.ERROR,
                    )
                )

        return issues
