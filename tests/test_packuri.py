"""Tests for part names and part name templating."""

from __future__ import annotations

import pytest

from pptx_opc.errors import InvalidPartName
from pptx_opc.packuri import PartName, next_partname


class TestPartNameValidation:
    """Tests for the naming rules enforced on construction."""

    def test_valid_partname(self) -> None:
        """Test a normal part name is accepted and compares as a string."""
        name = PartName("/ppt/slides/slide1.xml")
        assert name == "/ppt/slides/slide1.xml"
        assert isinstance(name, str)

    def test_package_pseudo_partname(self) -> None:
        """Test "/" is accepted as the package pseudo-partname."""
        assert PartName.package() == "/"

    @pytest.mark.parametrize(
        "path",
        [
            "ppt/slides/slide1.xml",
            "/ppt/slides/",
            "/ppt//slide1.xml",
            "/ppt/./slide1.xml",
            "/ppt/../slide1.xml",
            "/ppt\\slides\\slide1.xml",
            "",
        ],
    )
    def test_invalid_partnames(self, path: str) -> None:
        """Test malformed names are rejected."""
        with pytest.raises(InvalidPartName):
            PartName(path)

    def test_invalid_partname_is_value_error(self) -> None:
        """Test callers can catch naming errors as ValueError."""
        with pytest.raises(ValueError):
            PartName("no-leading-slash.xml")


class TestPartNameComponents:
    """Tests for the derived components of a part name."""

    def test_base_uri(self) -> None:
        """Test the base URI is the containing directory."""
        assert PartName("/ppt/slides/slide1.xml").base_uri == "/ppt/slides"

    def test_base_uri_of_root_level_part(self) -> None:
        """Test a part at the package root has "/" as its base."""
        assert PartName("/foo.xml").base_uri == "/"
        assert PartName("/").base_uri == "/"

    def test_filename_and_ext(self) -> None:
        """Test filename and extension extraction."""
        name = PartName("/ppt/media/IMAGE1.PNG")
        assert name.filename == "IMAGE1.PNG"
        assert name.ext == "PNG"

    def test_ext_missing(self) -> None:
        """Test a name without a dot has no extension."""
        assert PartName("/ppt/media/blob").ext == ""

    def test_membername(self) -> None:
        """Test the ZIP member name drops the leading slash."""
        assert PartName("/ppt/presentation.xml").membername == "ppt/presentation.xml"

    def test_idx(self) -> None:
        """Test the trailing filename index."""
        assert PartName("/ppt/slides/slide21.xml").idx == 21
        assert PartName("/ppt/presentation.xml").idx is None

    def test_rels_uri(self) -> None:
        """Test the relationships part name for a part."""
        assert PartName("/ppt/slides/slide1.xml").rels_uri == "/ppt/slides/_rels/slide1.xml.rels"

    def test_rels_uri_for_package(self) -> None:
        """Test the package-level relationships part name."""
        assert PartName.package().rels_uri == "/_rels/.rels"


class TestRelativeRef:
    """Tests for computing relationship targets between parts."""

    def test_walk_up_one_directory(self) -> None:
        """Test a target in a sibling directory uses one '..'."""
        slide = PartName("/ppt/slides/slide1.xml")
        chart = PartName("/ppt/charts/chart1.xml")
        assert chart.relative_ref(slide.base_uri) == "../charts/chart1.xml"

    def test_same_directory(self) -> None:
        """Test a target in the same directory is a bare filename."""
        chart = PartName("/ppt/charts/chart1.xml")
        workbook = PartName("/ppt/charts/chart1.xlsx")
        assert workbook.relative_ref(chart.base_uri) == "chart1.xlsx"

    def test_walk_up_two_directories(self) -> None:
        """Test a target two levels up uses two '..' segments."""
        assert PartName("/x.xml").relative_ref("/ppt/slides") == "../../x.xml"

    def test_from_package_root(self) -> None:
        """Test targets from the package root have no leading slash."""
        assert PartName("/ppt/presentation.xml").relative_ref("/") == "ppt/presentation.xml"

    def test_walk_down(self) -> None:
        """Test a target below the source directory."""
        slide = PartName("/ppt/slides/slide1.xml")
        assert slide.relative_ref("/ppt") == "slides/slide1.xml"

    def test_resolves_back(self) -> None:
        """Test resolving the computed reference gives the original name."""
        target = PartName("/ppt/embeddings/Microsoft_Excel_Worksheet1.xlsx")
        base = PartName("/ppt/charts/chart1.xml").base_uri
        assert PartName.from_rel_ref(base, target.relative_ref(base)) == target


class TestFromRelRef:
    """Tests for resolving relationship targets to part names."""

    def test_parent_reference(self) -> None:
        """Test resolving a target that walks up."""
        resolved = PartName.from_rel_ref("/ppt/slides", "../slideLayouts/slideLayout1.xml")
        assert resolved == "/ppt/slideLayouts/slideLayout1.xml"

    def test_from_package_root(self) -> None:
        """Test resolving a package-level target."""
        assert PartName.from_rel_ref("/", "ppt/presentation.xml") == "/ppt/presentation.xml"

    def test_absolute_target(self) -> None:
        """Test an absolute target is taken as is."""
        assert PartName.from_rel_ref("/ppt", "/ppt/slides/slide1.xml") == "/ppt/slides/slide1.xml"


class TestNextPartname:
    """Tests for templated auto-numbering."""

    def test_max_plus_one(self) -> None:
        """Test the next index follows the highest in use, not the first gap."""
        existing = ["/ppt/charts/chart1.xml", "/ppt/charts/chart3.xml"]
        assert next_partname("/ppt/charts/chart{}.xml", existing) == "/ppt/charts/chart4.xml"

    def test_first_name(self) -> None:
        """Test numbering starts at 1."""
        assert next_partname("/ppt/charts/chart{}.xml", []) == "/ppt/charts/chart1.xml"

    def test_ignores_non_numeric_slots(self) -> None:
        """Test names that only share prefix and suffix do not count."""
        existing = [
            "/ppt/charts/chartA.xml",
            "/ppt/charts/chart2b.xml",
            "/ppt/charts/chart.xml",
            "/ppt/slides/slide9.xml",
        ]
        assert next_partname("/ppt/charts/chart{}.xml", existing) == "/ppt/charts/chart1.xml"

    def test_returns_partname(self) -> None:
        """Test the result is a PartName."""
        assert isinstance(next_partname("/ppt/media/image{}.png", []), PartName)

    @pytest.mark.parametrize("template", ["/ppt/charts/chart.xml", "/ppt/charts/chart{}{}.xml"])
    def test_template_needs_one_slot(self, template: str) -> None:
        """Test templates without exactly one placeholder are rejected."""
        with pytest.raises(InvalidPartName):
            next_partname(template, [])

    def test_template_must_be_valid_name(self) -> None:
        """Test a template that cannot produce a valid name is rejected."""
        with pytest.raises(InvalidPartName):
            next_partname("ppt/charts/chart{}.xml", [])
