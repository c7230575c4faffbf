"""Open Packaging Conventions namespace, content-type and relationship-type constants.

Based on ECMA-376 Part 2 (OPC) and the PresentationML parts of Part 1.
"""

# Package-level namespaces
CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
RELATIONSHIPS = "http://schemas.openxmlformats.org/package/2006/relationships"
CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"

# Document namespaces
PRESENTATIONML = "http://schemas.openxmlformats.org/presentationml/2006/main"
DRAWINGML = "http://schemas.openxmlformats.org/drawingml/2006/main"
OFFICE_DOC_RELATIONSHIPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

# Core Properties (Dublin Core)
DC = "http://purl.org/dc/elements/1.1/"
DCTERMS = "http://purl.org/dc/terms/"
DCMITYPE = "http://purl.org/dc/dcmitype/"
XSI = "http://www.w3.org/2001/XMLSchema-instance"

# Relationship types
REL_OFFICE_DOCUMENT = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
)
REL_CORE_PROPERTIES = (
    "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
)
REL_EXTENDED_PROPERTIES = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/extended-properties"
)
REL_THUMBNAIL = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/thumbnail"
REL_SLIDE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide"
REL_SLIDE_LAYOUT = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideLayout"
)
REL_SLIDE_MASTER = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideMaster"
)
REL_NOTES_SLIDE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/notesSlide"
)
REL_NOTES_MASTER = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/notesMaster"
)
REL_THEME = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/theme"
REL_IMAGE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/image"
REL_CHART = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/chart"
REL_PACKAGE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/package"
REL_VIDEO = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/video"
REL_AUDIO = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/audio"
REL_MEDIA = "http://schemas.microsoft.com/office/2007/relationships/media"
REL_HYPERLINK = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"
REL_FONT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/font"
REL_COMMENTS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/comments"

# Content types
CT_XML = "application/xml"
CT_OPC_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_OPC_CORE_PROPERTIES = "application/vnd.openxmlformats-package.core-properties+xml"
CT_PML_PRESENTATION_MAIN = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
)
CT_PML_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_PML_SLIDE_LAYOUT = (
    "application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"
)
CT_PML_SLIDE_MASTER = (
    "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
)
CT_PML_NOTES_SLIDE = (
    "application/vnd.openxmlformats-officedocument.presentationml.notesSlide+xml"
)
CT_PML_NOTES_MASTER = (
    "application/vnd.openxmlformats-officedocument.presentationml.notesMaster+xml"
)
CT_PML_COMMENTS = "application/vnd.openxmlformats-officedocument.presentationml.comments+xml"
CT_PML_PRINTER_SETTINGS = (
    "application/vnd.openxmlformats-officedocument.presentationml.printerSettings"
)
CT_DML_CHART = "application/vnd.openxmlformats-officedocument.drawingml.chart+xml"
CT_SML_SHEET = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CT_OFC_THEME = "application/vnd.openxmlformats-officedocument.theme+xml"
CT_X_FONTDATA = "application/x-fontdata"
CT_X_FONT_TTF = "application/x-font-ttf"

CT_BMP = "image/bmp"
CT_GIF = "image/gif"
CT_JPEG = "image/jpeg"
CT_PNG = "image/png"
CT_TIFF = "image/tiff"
CT_X_EMF = "image/x-emf"
CT_X_WMF = "image/x-wmf"
CT_SVG = "image/svg+xml"

CT_MP4 = "video/mp4"
CT_MOV = "video/quicktime"
CT_WMV = "video/x-ms-wmv"
CT_AVI = "video/x-msvideo"

CT_AUDIO_MPEG = "audio/mpeg"
CT_AUDIO_WAV = "audio/wav"
CT_AUDIO_MP4 = "audio/mp4"

CT_OCTET_STREAM = "application/octet-stream"

# Extension -> content type for parts that are conventionally covered by a
# Default element rather than an Override.
DEFAULT_CONTENT_TYPES = {
    "bin": CT_PML_PRINTER_SETTINGS,
    "bmp": CT_BMP,
    "emf": CT_X_EMF,
    "fntdata": CT_X_FONTDATA,
    "gif": CT_GIF,
    "jpe": CT_JPEG,
    "jpeg": CT_JPEG,
    "jpg": CT_JPEG,
    "m4a": CT_AUDIO_MP4,
    "mov": CT_MOV,
    "mp3": CT_AUDIO_MPEG,
    "mp4": CT_MP4,
    "png": CT_PNG,
    "rels": CT_OPC_RELATIONSHIPS,
    "svg": CT_SVG,
    "tif": CT_TIFF,
    "tiff": CT_TIFF,
    "wav": CT_AUDIO_WAV,
    "wmf": CT_X_WMF,
    "wmv": CT_WMV,
    "xlsx": CT_SML_SHEET,
    "xml": CT_XML,
}

# Namespace prefix map for lxml
NSMAP = {
    "ct": CONTENT_TYPES,
    "pr": RELATIONSHIPS,
    "p": PRESENTATIONML,
    "a": DRAWINGML,
    "r": OFFICE_DOC_RELATIONSHIPS,
    "cp": CORE_PROPERTIES,
    "dc": DC,
    "dcterms": DCTERMS,
    "dcmitype": DCMITYPE,
    "xsi": XSI,
}


def qualify_name(local_name: str, namespace: str) -> str:
    """Create a Clark notation qualified name {namespace}local_name."""
    return f"{{{namespace}}}{local_name}"


def qn(prefixed_name: str) -> str:
    """Expand a ``prefix:local`` name using :data:`NSMAP`."""
    prefix, local_name = prefixed_name.split(":", 1)
    return qualify_name(local_name, NSMAP[prefix])
