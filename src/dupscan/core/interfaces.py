"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scan engine.
These protocols enforce structural typing using Python's `typing.Protocol` so that
hash algorithms, tag readers and stages can be swapped (or faked in tests)
without touching the orchestration code.

Key Components:
---------------
- HashAlgorithm: Streaming digest factory (BLAKE2b, xxHash64, ...).
- Hasher: Computes header checksums and full digests for candidates.
- TagReader: Reads audio tags from a file path.
- DirectoryWalker: Walks the root and builds candidate groups.
- ConfirmationStage: Turns candidate groups into confirmed duplicates.
"""

from __future__ import annotations

from typing import Protocol, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from dupscan.core.channel import SignalChannel
    from dupscan.core.models import FileCandidate, ScanReport


# ===== Interfaces =====

class HashState(Protocol):
    """Incremental hash object as returned by hashlib/xxhash constructors."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in different hashing functions like BLAKE2b or xxHash
    without affecting the rest of the confirmation logic.
    """

    @staticmethod
    def new() -> HashState:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for the two checksum tiers of a candidate."""
    def compute_header_checksum(self, candidate: FileCandidate) -> int: ...
    def compute_full_digest(self, candidate: FileCandidate) -> bytes: ...


class TagReader(Protocol):
    """
    Interface for the external tag-reading library.

    read_tags returns a flat key/value map exposing at least Duration, TrackTitle,
    AlbumArtist/TrackArtist and AlbumTitle/OriginalAlbumTitle when present.
    Raises MetadataReadError when the file cannot be parsed.
    """
    def read_tags(self, path: str) -> Dict[str, str]: ...


class DirectoryWalker(Protocol):
    """
    Interface for enumerating the scan root.

    Methods:
        walk: Returns candidate groups (already pruned of singletons).
    """
    def walk(self, channel: SignalChannel) -> Dict[str, List[FileCandidate]]:
        ...


# =============================
# Stage Interfaces
# =============================

class ConfirmationStage(Protocol):
    """
    Interface for the final stage: authoritative pairwise comparison.

    Confirmed members are pushed to the channel's duplicate log and appended
    to the report as they are found.
    """
    def process(
        self,
        groups: Dict[str, List[FileCandidate]],
        channel: SignalChannel,
        report: ScanReport,
    ) -> None:
        ...
