"""Tests for media payload detection."""

from __future__ import annotations

import dataclasses
import hashlib
from pathlib import Path

import pytest

from pptx_opc import media
from pptx_opc.errors import ResourceLimit
from pptx_opc.media import Audio, Image, UnsupportedMedia, Video, sniff_image_format
from pptx_opc.namespaces import (
    CT_AUDIO_MPEG,
    CT_GIF,
    CT_JPEG,
    CT_MP4,
    CT_PNG,
    CT_SVG,
    CT_X_EMF,
    CT_X_WMF,
)
from tests.fixture_loader import load_sample_part

PNG_BYTES = load_sample_part("ppt/media/image1.png")
EMF_BYTES = b"\x01\x00\x00\x00" + b"\x00" * 36 + b" EMF" + b"\x00" * 8


class TestSniffImageFormat:
    """Tests for magic-byte image detection."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (PNG_BYTES, ("png", CT_PNG)),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", ("jpeg", CT_JPEG)),
            (b"GIF89a\x01\x00\x01\x00", ("gif", CT_GIF)),
            (EMF_BYTES, ("emf", CT_X_EMF)),
            (b"\xd7\xcd\xc6\x9a\x00\x00", ("wmf", CT_X_WMF)),
            (b'<svg xmlns="http://www.w3.org/2000/svg"/>', ("svg", CT_SVG)),
            (b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"/>', ("svg", CT_SVG)),
        ],
    )
    def test_detects(self, data: bytes, expected: tuple[str, str]) -> None:
        """Test known formats are detected."""
        assert sniff_image_format(data) == expected

    def test_unknown(self) -> None:
        """Test unrecognized bytes give None."""
        assert sniff_image_format(b"plain text") is None


class TestImage:
    """Tests for Image."""

    def test_from_bytes_sniffs(self) -> None:
        """Test format detection from bytes."""
        image = Image.from_bytes(PNG_BYTES)

        assert image.content_type == CT_PNG
        assert image.ext == "png"
        assert image.partname_template == "/ppt/media/image{}.png"
        assert image.sha1 == hashlib.sha1(PNG_BYTES).hexdigest()

    def test_from_bytes_with_content_type(self) -> None:
        """Test an explicit content type picks the canonical extension."""
        image = Image.from_bytes(b"\xff\xd8\xff\xe0", CT_JPEG)
        assert image.ext == "jpeg"

    def test_from_bytes_unknown(self) -> None:
        """Test undetectable bytes are rejected."""
        with pytest.raises(UnsupportedMedia):
            Image.from_bytes(b"not an image")

    def test_from_file(self, tmp_path: Path) -> None:
        """Test reading an image file."""
        path = tmp_path / "logo.png"
        path.write_bytes(PNG_BYTES)

        image = Image.from_file(path)

        assert image.blob == PNG_BYTES
        assert image.content_type == CT_PNG

    def test_from_file_falls_back_to_extension(self, tmp_path: Path) -> None:
        """Test the file extension is used when sniffing fails."""
        path = tmp_path / "drawing.WMF"
        path.write_bytes(b"\x00\x00\x00\x00")

        image = Image.from_file(path)

        assert image.content_type == CT_X_WMF
        assert image.ext == "wmf"

    def test_from_file_unsupported(self, tmp_path: Path) -> None:
        """Test an unknown file is rejected."""
        path = tmp_path / "notes.txt"
        path.write_bytes(b"hello")
        with pytest.raises(UnsupportedMedia):
            Image.from_file(path)

    def test_size_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test oversized images are rejected."""
        monkeypatch.setattr(media, "MAX_IMAGE_SIZE", 16)
        with pytest.raises(ResourceLimit):
            Image.from_bytes(PNG_BYTES)

    def test_frozen(self) -> None:
        """Test media values are immutable."""
        image = Image.from_bytes(PNG_BYTES)
        with pytest.raises(dataclasses.FrozenInstanceError):
            image.ext = "gif"  # type: ignore[misc]


class TestVideoAndAudio:
    """Tests for Video and Audio."""

    def test_video_from_file(self, tmp_path: Path) -> None:
        """Test a video's format comes from its extension."""
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"\x00\x00\x00\x18ftypmp42")

        video = Video.from_file(path)

        assert video.content_type == CT_MP4
        assert video.partname_template == "/ppt/media/media{}.mp4"

    def test_video_unsupported_extension(self, tmp_path: Path) -> None:
        """Test an unknown video container is rejected."""
        path = tmp_path / "clip.mkv"
        path.write_bytes(b"\x1a\x45\xdf\xa3")
        with pytest.raises(UnsupportedMedia):
            Video.from_file(path)

    def test_audio_from_bytes(self) -> None:
        """Test an explicit audio content type picks the extension."""
        audio = Audio.from_bytes(b"ID3\x04\x00", CT_AUDIO_MPEG)
        assert audio.ext == "mp3"
        assert audio.partname_template == "/ppt/media/media{}.mp3"

    def test_video_size_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test oversized video is rejected."""
        monkeypatch.setattr(media, "MAX_VIDEO_SIZE", 2)
        with pytest.raises(ResourceLimit):
            Video.from_bytes(b"\x00\x00\x00\x18ftypmp42", CT_MP4)
