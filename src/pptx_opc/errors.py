"""Package error types and non-fatal load findings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IssueKind(Enum):
    """Categories of package findings."""

    PACKAGE = "package"  # OPC package structure
    ZIP = "zip"  # Container entry could not be read
    PART_NAME = "part_name"  # Entry name is not a valid part name
    CONTENT_TYPE = "content_type"  # Content type could not be resolved
    RELATIONSHIP = "relationship"  # Relationship part or target problem


class IssueSeverity(Enum):
    """Severity levels for package findings."""

    ERROR = "error"  # Saving or opening in Office will fail
    WARNING = "warning"  # Data was dropped or renumbered while loading
    INFO = "info"  # Informational


@dataclass
class PackageIssue:
    """A problem found while loading or checking a package."""

    kind: IssueKind
    description: str
    part_uri: str = ""  # e.g., "/ppt/slides/_rels/slide1.xml.rels"
    severity: IssueSeverity = IssueSeverity.WARNING

    def __str__(self) -> str:
        location = self.part_uri or "/"
        return f"[{self.kind.value}] {location}: {self.description}"


class OpcError(Exception):
    """Base class for all package engine errors."""


class InvalidPartName(OpcError, ValueError):
    """A part name or part name template violates OPC naming rules."""


class PartNotFound(OpcError):
    """No part exists with the requested name."""

    def __init__(self, partname: str):
        super().__init__(f"no part named {partname!r} in package")
        self.partname = partname


class UnknownContentType(OpcError):
    """Neither an Override nor a Default covers a part."""

    def __init__(self, partname: str):
        super().__init__(f"no content type registered for {partname!r}")
        self.partname = partname


class RelationshipNotFound(OpcError, ValueError):
    """A relationship lookup by id or type did not match exactly one entry."""


class DuplicateRelationshipId(OpcError):
    """A relationships part declares the same id twice."""


class InvalidXml(OpcError):
    """Package XML (content types, relationships, core properties) is malformed."""


class ZipCorruption(OpcError):
    """The container or one of its entries cannot be read as ZIP data."""


class ResourceLimit(OpcError):
    """A payload or archive exceeds a configured size or count limit."""


class PackageLoadError(OpcError):
    """Loading failed as a whole; ``issues`` lists what was found before failing."""

    def __init__(self, message: str, issues: list[PackageIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []
