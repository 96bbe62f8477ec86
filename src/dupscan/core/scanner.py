"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Directory walker and filter.
Features:
- Recursively enumerates every non-directory entry under the root (os.walk, no symlink following)
- Classifies entries as accepted, ignored by policy (silent) or errored (logged)
- Builds the candidate group map under the mode's grouping key
- Honors cancellation before every entry
"""

import os
import time
import logging
from pathlib import Path
from typing import Dict, List, Optional

from dupscan.core.catalog import CatalogSnapshot, Catalog, get_extension
from dupscan.core.channel import SignalChannel
from dupscan.core.config import ScanConfig
from dupscan.core.errors import (
    InvalidRootError, MetadataReadError, ScanError, UnknownExtensionError)
from dupscan.core.grouper import CandidateGroups, key_function
from dupscan.core.interfaces import DirectoryWalker, TagReader
from dupscan.core.models import FileCandidate, ScanMode

logger = logging.getLogger(__name__)


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Walks `root_dir` and groups accepted files by grouping key.

    Attributes:
        root_dir: Root directory to scan
        mode: ScanMode deciding the grouping key
        catalog: Snapshot of known/enabled extensions taken at scan start
        tag_reader: TagReader used in metadata mode
    """

    def __init__(
        self,
        root_dir: str,
        mode: ScanMode = ScanMode.CONTENT_HASH,
        catalog: Optional[CatalogSnapshot] = None,
        tag_reader: Optional[TagReader] = None,
    ):
        self.root_dir = root_dir
        self.mode = mode
        self.catalog = catalog or Catalog.snapshot()
        self.tag_reader = tag_reader
        self._key = key_function(mode)

        if mode == ScanMode.METADATA_KEY and tag_reader is None:
            raise ValueError("Metadata scans need a tag reader")

    def walk(self, channel: SignalChannel) -> Dict[str, List[FileCandidate]]:
        """
        Enumerates the tree and returns candidate groups with 2+ members.
        A cancelled walk returns whatever it had grouped so far; callers must
        check the channel before consuming it.
        """
        root_path = Path(os.path.abspath(self.root_dir))
        if not root_path.is_dir():
            raise InvalidRootError(f"{self.root_dir} must be a directory", self.root_dir)

        logger.debug(f"Walking {self.root_dir} (mode={self.mode.value})")
        channel.set_status(ScanConfig.STATUS_SCANNING)

        groups = CandidateGroups()
        start_time = time.time()
        visited = 0

        def on_walk_error(error: OSError) -> None:
            # Unreadable subtree: log it and keep walking elsewhere
            channel.push_error(f"Could not read directory {error.filename}: {error.strerror}")

        for root, dirs, files in os.walk(str(root_path), onerror=on_walk_error, followlinks=False):
            if channel.is_cancelled():
                logger.debug("Walk interrupted by user")
                break

            for filename in files:
                if channel.is_cancelled():
                    break
                visited += 1
                self._process_entry(Path(root) / filename, groups, channel)

        groups.prune()
        logger.debug(f"Walk finished in {time.time() - start_time:.2f}s: "
                     f"{visited} entries, {len(groups)} candidate groups")
        return groups.as_dict()

    def _process_entry(self, path: Path, groups: CandidateGroups, channel: SignalChannel) -> None:
        """Classifies one entry; accepted ones go to the scanned log and the group map."""
        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return
        except OSError as e:
            channel.push_error(f"Could not read metadata of {path}: {e}")
            return

        try:
            candidate = self._accept(path)
        except ScanError as e:
            channel.push_error(str(e))
            return

        if candidate is None:
            return

        try:
            key = self._key(candidate)
        except ScanError as e:
            channel.push_error(str(e))
            return

        channel.push_scanned(candidate.path)
        groups.add(key, candidate)
        logger.debug(f"Accepted {candidate.path} under key {key!r}")

    def _accept(self, path: Path) -> Optional[FileCandidate]:
        """
        Returns a candidate for the entry, None for a silently ignored one.
        Raises UnknownExtensionError or MetadataReadError for logged rejections.
        """
        extension = get_extension(path.name)

        if not self.catalog.is_known(extension):
            raise UnknownExtensionError(extension, str(path))

        if not self.catalog.is_enabled(extension):
            logger.debug(f"Skipping {path} (extension {extension} disabled)")
            return None

        try:
            size = path.stat().st_size
        except OSError as e:
            raise MetadataReadError(f"Could not read metadata of {path}: {e}", str(path)) from e

        candidate = FileCandidate(path=str(path), size=size, extension=extension)

        if self.mode == ScanMode.METADATA_KEY:
            candidate.tags = self.tag_reader.read_tags(candidate.path)

        return candidate
