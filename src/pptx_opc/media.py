"""Binary media payloads (images, video, audio) handed to the package for storage."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path

from pptx_opc import namespaces as ns
from pptx_opc.errors import OpcError, ResourceLimit

MAX_IMAGE_SIZE = 200 * 1024 * 1024
MAX_VIDEO_SIZE = 500 * 1024 * 1024
MAX_AUDIO_SIZE = 500 * 1024 * 1024

JPEG_MAGIC = (b"\xFF\xD8\xFF",)
PNG_MAGIC = (b"\x89PNG\r\n\x1a\n",)
GIF_MAGIC = (b"GIF87a", b"GIF89a")
BMP_MAGIC = (b"BM",)
TIFF_MAGIC = (b"II*\x00", b"MM\x00*")
WMF_PLACEABLE_MAGIC = b"\xD7\xCD\xC6\x9A"

IMAGE_EXTENSIONS = {
    "bmp": ns.CT_BMP,
    "emf": ns.CT_X_EMF,
    "gif": ns.CT_GIF,
    "jpe": ns.CT_JPEG,
    "jpeg": ns.CT_JPEG,
    "jpg": ns.CT_JPEG,
    "png": ns.CT_PNG,
    "svg": ns.CT_SVG,
    "tif": ns.CT_TIFF,
    "tiff": ns.CT_TIFF,
    "wmf": ns.CT_X_WMF,
}
VIDEO_EXTENSIONS = {
    "avi": ns.CT_AVI,
    "mov": ns.CT_MOV,
    "mp4": ns.CT_MP4,
    "wmv": ns.CT_WMV,
}
AUDIO_EXTENSIONS = {
    "m4a": ns.CT_AUDIO_MP4,
    "mp3": ns.CT_AUDIO_MPEG,
    "wav": ns.CT_AUDIO_WAV,
}

# Preferred extension when only a content type is known.
_CANONICAL_EXT = {
    ns.CT_BMP: "bmp",
    ns.CT_X_EMF: "emf",
    ns.CT_GIF: "gif",
    ns.CT_JPEG: "jpeg",
    ns.CT_PNG: "png",
    ns.CT_SVG: "svg",
    ns.CT_TIFF: "tiff",
    ns.CT_X_WMF: "wmf",
    ns.CT_AVI: "avi",
    ns.CT_MOV: "mov",
    ns.CT_MP4: "mp4",
    ns.CT_WMV: "wmv",
    ns.CT_AUDIO_MP4: "m4a",
    ns.CT_AUDIO_MPEG: "mp3",
    ns.CT_AUDIO_WAV: "wav",
}


class UnsupportedMedia(OpcError, ValueError):
    """The media format cannot be determined or is not supported."""


def _starts_with_any(data: bytes, candidates: tuple[bytes, ...]) -> bool:
    return any(data.startswith(prefix) for prefix in candidates)


def _is_emf(data: bytes) -> bool:
    if len(data) < 44:
        return False
    # EMF signature appears at offset 40 as " EMF".
    return data[:4] == b"\x01\x00\x00\x00" and data[40:44] == b" EMF"


def _is_wmf(data: bytes) -> bool:
    if len(data) < 4:
        return False
    if data.startswith(WMF_PLACEABLE_MAGIC):
        return True
    # Non-placeable WMF header: type (1 or 2) + header size (9)
    return data[:2] in (b"\x01\x00", b"\x02\x00") and data[2:4] == b"\x09\x00"


def _is_svg(data: bytes) -> bool:
    head = data[:1024].lstrip()
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in head)


def sniff_image_format(data: bytes) -> tuple[str, str] | None:
    """Detect ``(ext, content_type)`` of an image from its leading bytes."""
    if _starts_with_any(data, PNG_MAGIC):
        return "png", ns.CT_PNG
    if _starts_with_any(data, JPEG_MAGIC):
        return "jpeg", ns.CT_JPEG
    if _starts_with_any(data, GIF_MAGIC):
        return "gif", ns.CT_GIF
    if _starts_with_any(data, TIFF_MAGIC):
        return "tiff", ns.CT_TIFF
    if _is_emf(data):
        return "emf", ns.CT_X_EMF
    if _is_wmf(data):
        return "wmf", ns.CT_X_WMF
    if _starts_with_any(data, BMP_MAGIC):
        return "bmp", ns.CT_BMP
    if _is_svg(data):
        return "svg", ns.CT_SVG
    return None


def _check_size(kind: str, size: int, limit: int) -> None:
    if size > limit:
        raise ResourceLimit(f"{kind} size {size} bytes exceeds the limit of {limit} bytes")


def _file_ext(path: Path) -> str:
    return path.suffix.lstrip(".").lower()


@dataclass(frozen=True)
class Media:
    """A binary payload with its content type and canonical extension."""

    blob: bytes = field(repr=False)
    content_type: str
    ext: str

    @property
    def sha1(self) -> str:
        """Lowercase hex SHA1 digest of the payload."""
        return hashlib.sha1(self.blob).hexdigest()

    @property
    def partname_template(self) -> str:
        return f"/ppt/media/media{{}}.{self.ext}"


@dataclass(frozen=True)
class Image(Media):
    """An image to be stored under ``/ppt/media/imageN.ext``."""

    @property
    def partname_template(self) -> str:
        return f"/ppt/media/image{{}}.{self.ext}"

    @classmethod
    def from_bytes(cls, blob: bytes, content_type: str | None = None) -> Image:
        """Wrap image bytes, sniffing the format when no content type is given."""
        _check_size("image", len(blob), MAX_IMAGE_SIZE)
        if content_type is None:
            detected = sniff_image_format(blob)
            if detected is None:
                raise UnsupportedMedia("cannot determine image format from its bytes")
            ext, content_type = detected
        else:
            ext = _CANONICAL_EXT.get(content_type, "bin")
        return cls(blob=blob, content_type=content_type, ext=ext)

    @classmethod
    def from_file(cls, path: str | Path) -> Image:
        """Read an image file; the extension is used only if sniffing fails."""
        path = Path(path)
        _check_size("image", path.stat().st_size, MAX_IMAGE_SIZE)
        blob = path.read_bytes()
        detected = sniff_image_format(blob)
        if detected is None:
            ext = _file_ext(path)
            if ext not in IMAGE_EXTENSIONS:
                raise UnsupportedMedia(f"unsupported image format: {path.name}")
            detected = ext, IMAGE_EXTENSIONS[ext]
        ext, content_type = detected
        return cls(blob=blob, content_type=content_type, ext=ext)


@dataclass(frozen=True)
class Video(Media):
    """A video to be stored under ``/ppt/media/mediaN.ext``."""

    @classmethod
    def from_bytes(cls, blob: bytes, content_type: str) -> Video:
        _check_size("video", len(blob), MAX_VIDEO_SIZE)
        return cls(blob=blob, content_type=content_type, ext=_CANONICAL_EXT.get(content_type, "bin"))

    @classmethod
    def from_file(cls, path: str | Path) -> Video:
        """Read a video file; the format comes from its extension."""
        path = Path(path)
        _check_size("video", path.stat().st_size, MAX_VIDEO_SIZE)
        ext = _file_ext(path)
        if ext not in VIDEO_EXTENSIONS:
            raise UnsupportedMedia(f"unsupported video format: {path.name}")
        return cls(blob=path.read_bytes(), content_type=VIDEO_EXTENSIONS[ext], ext=ext)


@dataclass(frozen=True)
class Audio(Media):
    """An audio clip to be stored under ``/ppt/media/mediaN.ext``."""

    @classmethod
    def from_bytes(cls, blob: bytes, content_type: str) -> Audio:
        _check_size("audio", len(blob), MAX_AUDIO_SIZE)
        return cls(blob=blob, content_type=content_type, ext=_CANONICAL_EXT.get(content_type, "bin"))

    @classmethod
    def from_file(cls, path: str | Path) -> Audio:
        """Read an audio file; the format comes from its extension."""
        path = Path(path)
        _check_size("audio", path.stat().st_size, MAX_AUDIO_SIZE)
        ext = _file_ext(path)
        if ext not in AUDIO_EXTENSIONS:
            raise UnsupportedMedia(f"unsupported audio format: {path.name}")
        return cls(blob=path.read_bytes(), content_type=AUDIO_EXTENSIONS[ext], ext=ext)
