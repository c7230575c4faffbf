"""ZIP container layer shared by the package loader and serializer."""

from pptx_opc.core.zipio import LoadLimits, ZipEntries, read_entries, write_entries

__all__ = [
    "LoadLimits",
    "ZipEntries",
    "read_entries",
    "write_entries",
]
