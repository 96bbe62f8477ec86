"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for directory scanning and duplicate confirmation.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Iterable
import os
from enum import Enum

from dupscan.core.config import ScanConfig
from dupscan.core.catalog import Catalog, CatalogSnapshot, get_extension
from dupscan.core.metadata import full_key as compute_full_key


# =============================
# Enums
# =============================

class ScanMode(Enum):
    """
    How candidates are grouped and confirmed.
    """
    CONTENT_HASH = "content"
    METADATA_KEY = "metadata"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            ScanMode.CONTENT_HASH: "Content",
            ScanMode.METADATA_KEY: "Metadata",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            ScanMode.CONTENT_HASH:
                "Size + Extension → Header Checksum → Full Digest (byte-identical files)",
            ScanMode.METADATA_KEY:
                "Duration + Title → Artist/Album/Title/Duration (same recording, any format)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class DigestAlgorithm(Enum):
    BLAKE2B = "blake2b"
    XXHASH = "xxhash"

    @property
    def display_name(self) -> str:
        mapping = {
            DigestAlgorithm.BLAKE2B: "BLAKE2b",
            DigestAlgorithm.XXHASH: "xxHash64",
        }
        return mapping.get(self, self.value)


# ======================
#  Core Data Models
# ======================

@dataclass
class FileCandidate:
    """
    One accepted filesystem entry.
    Carries the cheap signals used for grouping and caches the expensive ones.
    """
    path: str
    size: int  # in bytes
    extension: Optional[str] = None
    header_checksum: int = 0
    header_computed: bool = False
    full_digest: Optional[bytes] = None
    tags: Optional[Dict[str, str]] = None  # metadata mode only
    unreadable: bool = False  # a checksum read failed; never matches
    _full_key: Optional[str] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.extension is None:
            self.extension = get_extension(os.path.basename(self.path))

    @property
    def full_key(self) -> str:
        """Full normalized tag key, computed once on first access."""
        if self._full_key is None:
            self._full_key = compute_full_key(self.tags or {})
        return self._full_key

    def __repr__(self):
        return f"<FileCandidate path={self.path}, size={self.size}>"


@dataclass
class DuplicateRecord:
    """
    A file confirmed identical to at least one other scanned file.
    `set_id` ties together the members of one duplicate set.
    """
    path: str
    set_id: int
    size: int = 0
    tags: Optional[Dict[str, str]] = None

    def __repr__(self):
        return f"<DuplicateRecord path={self.path}, set={self.set_id}>"


@dataclass
class ScanReport:
    """
    Result of one scan. Filled during confirmation; afterwards only
    user-driven deletion removes records from it.
    """
    mode: ScanMode = ScanMode.CONTENT_HASH
    records: List[DuplicateRecord] = field(default_factory=list)
    total_scanned: int = 0
    total_errors: int = 0
    cancelled: bool = False

    @property
    def total_duplicates(self) -> int:
        return len(self.records)

    def add(self, record: DuplicateRecord) -> None:
        self.records.append(record)

    def remove(self, paths: Iterable[str]) -> int:
        """Drops records with the given paths. Returns how many were removed."""
        doomed = set(paths)
        before = len(self.records)
        self.records = [r for r in self.records if r.path not in doomed]
        return before - len(self.records)

    def paths(self) -> List[str]:
        return [r.path for r in self.records]

    def sets(self) -> Dict[int, List[DuplicateRecord]]:
        """Records grouped by duplicate set, in first-seen order."""
        grouped: Dict[int, List[DuplicateRecord]] = {}
        for record in self.records:
            grouped.setdefault(record.set_id, []).append(record)
        return grouped

    def __repr__(self):
        return (f"<ScanReport scanned={self.total_scanned}, errors={self.total_errors}, "
                f"duplicates={self.total_duplicates}, cancelled={self.cancelled}>")


class DuplicateSets:
    """
    Union-find over candidate paths.
    Each confirmed pair is unioned; members of one root form a duplicate set.
    """

    def __init__(self):
        self._parent: Dict[str, str] = {}
        self._ids: Dict[str, int] = {}

    def find(self, path: str) -> str:
        parent = self._parent.setdefault(path, path)
        if parent != path:
            parent = self.find(parent)
            self._parent[path] = parent
        return parent

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self._parent[root_b] = root_a

    def connected(self, a: str, b: str) -> bool:
        return self.find(a) == self.find(b)

    def set_id(self, path: str) -> int:
        """Stable integer id for the set containing `path`."""
        root = self.find(path)
        if root not in self._ids:
            self._ids[root] = len(self._ids)
        return self._ids[root]


"""
DTO for scan parameters with built-in validation.
Interface-agnostic, used by the worker, the command and the CLI.
"""

@dataclass(frozen=True)
class ScanRequest:
    """Immutable description of one scan invocation."""
    root_dir: str
    mode: ScanMode = ScanMode.CONTENT_HASH
    catalog: Optional[CatalogSnapshot] = None
    digest: DigestAlgorithm = DigestAlgorithm.BLAKE2B
    report_path: str = ScanConfig.REPORT_NAME

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if not isinstance(self.mode, ScanMode):
            raise ValueError(f"Unsupported scan mode: {self.mode!r}")

        if self.catalog is None:
            object.__setattr__(self, "catalog", Catalog.snapshot())

