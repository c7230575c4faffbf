"""pytest configuration and fixtures for pptx_opc tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from lxml import etree

from pptx_opc import OpcPackage
from tests.fixture_loader import FIXTURES_DIR, build_zip, load_fixture_bytes

SAMPLE_DIR = FIXTURES_DIR / "pptx" / "sample"


def _is_xml_file(path: Path) -> bool:
    if path.name == "[Content_Types].xml":
        return True
    return path.suffix in {".xml", ".rels"}


def read_dir_entries(source_dir: Path) -> dict[str, bytes]:
    """Collect a fixture directory as ZIP entries, content types first."""
    entries: dict[str, bytes] = {}
    for file_path in sorted(source_dir.rglob("*")):
        if file_path.is_dir():
            continue
        rel_path = file_path.relative_to(source_dir).as_posix()
        data = file_path.read_bytes()
        if _is_xml_file(file_path):
            # Validate XML fixtures up front.
            etree.fromstring(data)
        entries[rel_path] = data
    return entries


@pytest.fixture
def sample_entries() -> dict[str, bytes]:
    """ZIP entries of the sample deck: one slide, two charts, one image."""
    return read_dir_entries(SAMPLE_DIR)


@pytest.fixture
def sample_bytes(sample_entries: dict[str, bytes]) -> bytes:
    """The sample deck as ZIP bytes."""
    return build_zip(sample_entries)


@pytest.fixture
def sample_pptx(tmp_path: Path, sample_bytes: bytes) -> Path:
    """The sample deck written to a temporary .pptx file."""
    pptx_path = tmp_path / "sample.pptx"
    pptx_path.write_bytes(sample_bytes)
    return pptx_path


@pytest.fixture
def sample_package(sample_bytes: bytes) -> OpcPackage:
    """The sample deck loaded into memory."""
    return OpcPackage.from_zip_bytes(sample_bytes)


@pytest.fixture
def corrupt_rels_bytes(sample_entries: dict[str, bytes]) -> bytes:
    """The sample deck with a truncated slide relationships part."""
    entries = dict(sample_entries)
    entries["ppt/slides/_rels/slide1.xml.rels"] = load_fixture_bytes("relationships", "truncated.xml")
    return build_zip(entries)


@pytest.fixture
def new_package() -> OpcPackage:
    """A freshly created package."""
    return OpcPackage.new()


@pytest.fixture
def tmp_pptx_path(tmp_path: Path) -> Path:
    """Provide a temporary path for PPTX files."""
    return tmp_path / "test.pptx"
