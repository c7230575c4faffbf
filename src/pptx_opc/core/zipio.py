"""ZIP container reading and writing for OPC packages."""

from __future__ import annotations

import io
import logging
import lzma
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pptx_opc.errors import (
    InvalidPartName,
    IssueKind,
    IssueSeverity,
    PackageIssue,
    ResourceLimit,
    ZipCorruption,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Fixed timestamp so that saving the same package twice gives identical bytes.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class LoadLimits:
    """Bounds applied to an archive before its entries are inflated."""

    max_entries: int = 10_000
    max_entry_size: int = 100 * 1024 * 1024
    max_total_size: int = 500 * 1024 * 1024


@dataclass
class ZipEntries:
    """Entries of an archive in their stored order, plus per-entry problems."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    issues: list[PackageIssue] = field(default_factory=list)


def read_entries(data: bytes, limits: LoadLimits | None = None) -> ZipEntries:
    """Inflate every file entry of a ZIP archive held in memory.

    An entry whose bytes cannot be inflated is kept with an empty payload and
    reported in ``issues``; only an unreadable archive is fatal.

    Raises:
        ZipCorruption: The data is not a ZIP archive.
        ResourceLimit: Entry count or declared sizes exceed ``limits``.
        InvalidPartName: An entry name walks out of the package with ``..``.
    """
    limits = limits or LoadLimits()
    try:
        archive = zipfile.ZipFile(io.BytesIO(data), "r")
    except zipfile.BadZipFile as exc:
        raise ZipCorruption(f"Invalid ZIP file: {exc}") from exc

    entries = ZipEntries()
    with archive:
        infos = archive.infolist()
        if len(infos) > limits.max_entries:
            raise ResourceLimit(
                f"ZIP archive contains {len(infos)} entries, "
                f"exceeding the limit of {limits.max_entries}"
            )

        total_size = 0
        for info in infos:
            name = info.filename
            if info.is_dir():
                continue
            if ".." in name.replace("\\", "/").split("/"):
                raise InvalidPartName(f"ZIP entry contains path traversal: {name!r}")
            if info.file_size > limits.max_entry_size:
                raise ResourceLimit(
                    f"ZIP entry {name!r} has decompressed size {info.file_size} bytes, "
                    f"exceeding the limit of {limits.max_entry_size} bytes"
                )
            total_size += info.file_size
            if total_size > limits.max_total_size:
                raise ResourceLimit(
                    f"total decompressed size exceeds the limit of {limits.max_total_size} bytes"
                )
            if name in entries.blobs:
                entries.issues.append(
                    PackageIssue(
                        kind=IssueKind.ZIP,
                        description="Duplicate ZIP entry; later copy ignored",
                        part_uri="/" + name,
                    )
                )
                continue

            try:
                entries.blobs[name] = archive.read(info)
            except (
                zipfile.BadZipFile,
                zlib.error,
                lzma.LZMAError,
                EOFError,
                OSError,
                NotImplementedError,
                RuntimeError,
            ) as exc:
                # RuntimeError: encrypted entry. OSError: bad bz2 stream.
                logger.warning("Could not inflate ZIP entry %s: %s", name, exc)
                entries.blobs[name] = b""
                entries.issues.append(
                    PackageIssue(
                        kind=IssueKind.ZIP,
                        description=f"Entry could not be read and was loaded empty: {exc}",
                        part_uri="/" + name,
                        severity=IssueSeverity.ERROR,
                    )
                )

    return entries


def write_entries(entries: Iterable[tuple[str, bytes]]) -> bytes:
    """Write ``(name, blob)`` pairs, in order, into a deflated ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, blob in entries:
            info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, blob)
    return buffer.getvalue()
