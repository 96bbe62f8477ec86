"""
Core scan engine: catalog, walker, checksums, confirmation stages and the signal channel.

This package contains the engine behind every caller:
- Catalog: static extension table with caller-owned enable/disable overrides
- DirectoryWalkerImpl: recursive walk that groups accepted files by grouping key
- HasherImpl + Blake2bAlgorithmImpl/XXHashAlgorithmImpl: header checksum and full digests
- Stages: header checksum, content confirmation, metadata confirmation
- SignalChannel: thread-safe logs, progress and cancellation shared with the caller
- ReportWriter: plain text duplicates report

All components are pure Python with no GUI dependencies.
"""

from .catalog import Catalog, CatalogOverrides, CatalogSnapshot, MediaType
from .channel import SignalChannel, CancellationToken, ControlState
from .errors import (
    ScanError, InvalidRootError, UnknownExtensionError, MetadataReadError,
    ChecksumReadError, ReportWriteError)
from .hasher import HasherImpl, Blake2bAlgorithmImpl, XXHashAlgorithmImpl
from .metadata import MutagenTagReader
from .models import (
    ScanMode, DigestAlgorithm, FileCandidate, DuplicateRecord,
    ScanReport, ScanRequest, DuplicateSets)
from .report import ReportWriter
from .scanner import DirectoryWalkerImpl
from .stages import HeaderChecksumStage, ContentConfirmationStage, MetadataConfirmationStage

__all__ = [
    "Catalog",
    "CatalogOverrides",
    "CatalogSnapshot",
    "MediaType",
    "SignalChannel",
    "CancellationToken",
    "ControlState",
    "ScanError",
    "InvalidRootError",
    "UnknownExtensionError",
    "MetadataReadError",
    "ChecksumReadError",
    "ReportWriteError",
    "HasherImpl",
    "Blake2bAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "MutagenTagReader",
    "ScanMode",
    "DigestAlgorithm",
    "FileCandidate",
    "DuplicateRecord",
    "ScanReport",
    "ScanRequest",
    "DuplicateSets",
    "ReportWriter",
    "DirectoryWalkerImpl",
    "HeaderChecksumStage",
    "ContentConfirmationStage",
    "MetadataConfirmationStage",
]
