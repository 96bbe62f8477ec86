"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Error taxonomy of the scan engine.

Only InvalidRootError aborts a scan. Every other error describes a single
entry or the report file; the stage that catches it logs it to the
SignalChannel error log and carries on.
"""
from typing import Optional


class ScanError(Exception):
    """Base class for all scan engine errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class InvalidRootError(ScanError):
    """The scan root does not exist or is not a directory."""


class UnknownExtensionError(ScanError):
    """The entry's extension is absent from the catalog."""

    def __init__(self, extension: str, path: str):
        super().__init__(f"Unknown extension {extension or '<none>'}: {path}", path)
        self.extension = extension


class MetadataReadError(ScanError):
    """Filesystem stat or tag parsing failed for an entry."""


class ChecksumReadError(ScanError):
    """Reading file content for a header checksum or full digest failed."""


class ReportWriteError(ScanError):
    """The duplicates report could not be created or written."""
