"""Part names: absolute pack URIs identifying parts inside a package."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pptx_opc.errors import InvalidPartName

if TYPE_CHECKING:
    from collections.abc import Iterable

PLACEHOLDER = "{}"

_DIGITS = re.compile(r"[0-9]+")


class PartName(str):
    """An absolute, ``/``-rooted pack URI such as ``/ppt/slides/slide1.xml``.

    The single-character name ``/`` is the package pseudo-partname; it is the
    source of the package-level relationships and is never the name of a part.
    """

    def __new__(cls, path: str) -> PartName:
        _validate(path)
        return super().__new__(cls, path)

    def __repr__(self) -> str:
        return f"PartName({str.__repr__(self)})"

    @classmethod
    def package(cls) -> PartName:
        """The package pseudo-partname ``/``."""
        return cls("/")

    @classmethod
    def from_rel_ref(cls, base_uri: str, relative_ref: str) -> PartName:
        """Resolve a relationship target against the base URI of its source.

        ``from_rel_ref("/ppt/slides", "../slideLayouts/slideLayout1.xml")``
        gives ``/ppt/slideLayouts/slideLayout1.xml``.
        """
        if relative_ref.startswith("/"):
            return cls(relative_ref)
        joined = f"{base_uri.rstrip('/')}/{relative_ref}"
        return cls(_normalize(joined))

    @property
    def base_uri(self) -> PartName:
        """The containing directory; ``/ppt/slides`` for ``/ppt/slides/slide1.xml``."""
        idx = self.rfind("/")
        if idx <= 0:
            return PartName("/")
        return PartName(self[:idx])

    @property
    def filename(self) -> str:
        """The last segment; empty for the package pseudo-partname."""
        return self[self.rfind("/") + 1 :]

    @property
    def ext(self) -> str:
        """The extension without its dot, e.g. ``xml``; empty if there is none."""
        filename = self.filename
        idx = filename.rfind(".")
        return filename[idx + 1 :] if idx >= 0 else ""

    @property
    def membername(self) -> str:
        """The ZIP entry name: the part name without its leading slash."""
        return self[1:]

    @property
    def idx(self) -> int | None:
        """Trailing integer of the filename stem; 21 for ``slide21.xml``."""
        filename = self.filename
        dot = filename.rfind(".")
        stem = filename[:dot] if dot >= 0 else filename
        match = re.search(r"[0-9]+$", stem)
        if match is None:
            return None
        return int(match.group())

    @property
    def rels_uri(self) -> PartName:
        """Name of the relationships part belonging to this part.

        ``/ppt/slides/slide1.xml`` -> ``/ppt/slides/_rels/slide1.xml.rels``;
        the package pseudo-partname maps to ``/_rels/.rels``.
        """
        base = self.base_uri
        rels_dir = "/_rels" if base == "/" else f"{base}/_rels"
        return PartName(f"{rels_dir}/{self.filename}.rels")

    def relative_ref(self, base_uri: str) -> str:
        """Minimal relative reference from ``base_uri`` to this part name.

        This is the value written as a relationship ``Target``: parts in the
        same directory get a bare filename, ``..`` walks up.
        """
        if base_uri == "/":
            return self[1:]
        from_segments = [s for s in base_uri.split("/") if s]
        to_segments = [s for s in self.split("/") if s]

        common = 0
        for a, b in zip(from_segments, to_segments[:-1]):
            if a != b:
                break
            common += 1

        ups = [".."] * (len(from_segments) - common)
        return "/".join(ups + to_segments[common:])


def _validate(path: str) -> None:
    if not isinstance(path, str):
        raise InvalidPartName(f"part name must be a string, got {type(path).__name__}")
    if not path.startswith("/"):
        raise InvalidPartName(f"part name must begin with '/', got {path!r}")
    if path == "/":
        return
    if path.endswith("/"):
        raise InvalidPartName(f"part name must not end with '/', got {path!r}")
    if "\\" in path:
        raise InvalidPartName(f"part name must not contain backslashes, got {path!r}")
    for segment in path.split("/")[1:]:
        if segment in ("", ".", ".."):
            raise InvalidPartName(f"part name contains invalid segment {segment!r} in {path!r}")


def _normalize(path: str) -> str:
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)
    return "/" + "/".join(segments)


def next_partname(template: str, existing: Iterable[str]) -> PartName:
    """Instantiate ``template`` with one more than the highest index in use.

    ``template`` contains exactly one ``{}`` slot, e.g. ``/ppt/charts/chart{}.xml``.
    Every name in ``existing`` matching the template's fixed prefix and suffix
    with an unsigned integer in the slot counts; gaps are never reused.
    """
    if template.count(PLACEHOLDER) != 1:
        raise InvalidPartName(f"template must contain exactly one '{{}}': {template!r}")
    prefix, suffix = template.split(PLACEHOLDER)
    # Validate the fixed parts up front so a bad template fails before scanning.
    _validate(f"{prefix}1{suffix}")

    highest = 0
    for name in existing:
        if len(name) <= len(prefix) + len(suffix):
            continue
        if not (name.startswith(prefix) and name.endswith(suffix)):
            continue
        slot = name[len(prefix) : len(name) - len(suffix)]
        if _DIGITS.fullmatch(slot):
            highest = max(highest, int(slot))

    return PartName(f"{prefix}{highest + 1}{suffix}")
