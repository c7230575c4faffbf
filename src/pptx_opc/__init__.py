"""pptx-opc - the package engine underneath PowerPoint (.pptx) authoring.

Tracks every part of an Open Packaging Conventions archive, the content-type
registry, and the relationship graph, and round-trips the whole package
through ZIP bytes without disturbing anything that was not changed.

Example:
    from pptx_opc import Image, OpcPackage, Part
    from pptx_opc.namespaces import CT_DML_CHART, REL_CHART, REL_IMAGE

    package = OpcPackage.open("deck.pptx")

    # Add a chart part and point a slide at it
    chart_name = package.next_partname("/ppt/charts/chart{}.xml")
    package.put_part(Part(chart_name, CT_DML_CHART, chart_xml))
    r_id = package.relate_to("/ppt/slides/slide1.xml", chart_name, REL_CHART)

    # Identical images are stored once
    image_name, _ = package.or_add_image_part(Image.from_file("logo.png"))
    package.relate_to("/ppt/slides/slide1.xml", image_name, REL_IMAGE)

    package.save("deck-out.pptx")
"""

from pptx_opc.content_types import ContentTypeRegistry
from pptx_opc.core.zipio import LoadLimits
from pptx_opc.core_properties import CoreProperties
from pptx_opc.errors import (
    DuplicateRelationshipId,
    InvalidPartName,
    InvalidXml,
    IssueKind,
    IssueSeverity,
    OpcError,
    PackageIssue,
    PackageLoadError,
    PartNotFound,
    RelationshipNotFound,
    ResourceLimit,
    UnknownContentType,
    ZipCorruption,
)
from pptx_opc.media import Audio, Image, UnsupportedMedia, Video
from pptx_opc.package import OpcPackage
from pptx_opc.packuri import PartName, next_partname
from pptx_opc.parts import Part, PartType
from pptx_opc.relationships import Relationship, RelationshipCollection

__version__ = "0.1.0"

__all__ = [
    # Package and parts
    "OpcPackage",
    "Part",
    "PartType",
    "PartName",
    "next_partname",
    "ContentTypeRegistry",
    "Relationship",
    "RelationshipCollection",
    "CoreProperties",
    "LoadLimits",
    # Media
    "Image",
    "Video",
    "Audio",
    # Errors and load findings
    "OpcError",
    "InvalidPartName",
    "PartNotFound",
    "UnknownContentType",
    "RelationshipNotFound",
    "DuplicateRelationshipId",
    "InvalidXml",
    "ZipCorruption",
    "ResourceLimit",
    "UnsupportedMedia",
    "PackageLoadError",
    "PackageIssue",
    "IssueKind",
    "IssueSeverity",
]
