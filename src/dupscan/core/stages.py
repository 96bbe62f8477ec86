"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Confirmation stages of the scan engine.

CLASS HIERARCHY
---------------
HeaderChecksumStage        : Computes the additive header checksum of every candidate (content mode)
ConfirmationStageBase      : Pairwise comparison inside each candidate group (shared loop)
ContentConfirmationStage   : header checksum equality → full digest equality
MetadataConfirmationStage  : full normalized tag key equality

STAGE CONTRACTS
---------------
Each stage:
  • Iterates candidate groups in map order (unspecified)
  • Reports progress as group_index / total_groups with its own status line
  • Checks cancellation per group (and per pair while confirming); on cancellation
    resets progress to 0 and returns early
  • Logs per-file read failures to the channel and treats that file as non-matching

TRANSITIVITY
------------
Confirmed pairs are unioned in DuplicateSets. A pair already in the same set is
not compared again, so A≡B and B≡C yield {A, B, C} without reading A against C.
Digest equality and exact key equality are both equivalence relations, which
makes this sound.
"""

import logging
from typing import Dict, List, Optional

from dupscan.core.channel import SignalChannel
from dupscan.core.config import ScanConfig
from dupscan.core.errors import ChecksumReadError
from dupscan.core.hasher import HasherImpl
from dupscan.core.interfaces import ConfirmationStage, Hasher
from dupscan.core.models import DuplicateRecord, DuplicateSets, FileCandidate, ScanReport

logger = logging.getLogger(__name__)


class HeaderChecksumStage:
    """
    Computes header checksums once per candidate (O(n) reads per group
    instead of one read per pair).
    """

    def __init__(self, hasher: Optional[Hasher] = None):
        self.hasher = hasher or HasherImpl()

    def process(self, groups: Dict[str, List[FileCandidate]], channel: SignalChannel) -> bool:
        """Returns False when cancelled before finishing."""
        channel.reset_progress()
        total = len(groups)
        if total == 0:
            channel.set_progress(0, 0, ScanConfig.STATUS_CHECKSUMS)
            return True

        for index, members in enumerate(groups.values(), 1):
            if channel.is_cancelled():
                channel.reset_progress()
                return False

            channel.set_progress(index, total, ScanConfig.STATUS_CHECKSUMS)
            for candidate in members:
                try:
                    self.hasher.compute_header_checksum(candidate)
                except ChecksumReadError as e:
                    candidate.unreadable = True
                    channel.push_error(str(e))
        return True


# =============================
# Confirmation Base Class
# =============================
class ConfirmationStageBase(ConfirmationStage):
    """
    Abstract base class for the pairwise confirmation stages.
    Subclasses decide what makes a pair match and what a record carries.
    """

    def _matches(self, a: FileCandidate, b: FileCandidate, channel: SignalChannel) -> bool:
        raise NotImplementedError

    def _make_record(self, candidate: FileCandidate, set_id: int) -> DuplicateRecord:
        return DuplicateRecord(path=candidate.path, set_id=set_id, size=candidate.size)

    def process(
        self,
        groups: Dict[str, List[FileCandidate]],
        channel: SignalChannel,
        report: ScanReport,
    ) -> None:
        """
        Confirms duplicates group by group. Members of every confirmed set are
        pushed to the channel and appended to the report right after their group.
        """
        sets = DuplicateSets()
        channel.reset_progress()
        total = len(groups)
        if total == 0:
            channel.set_progress(0, 0, ScanConfig.STATUS_CONFIRMING)
            return

        for index, (key, members) in enumerate(groups.items(), 1):
            if channel.is_cancelled():
                channel.reset_progress()
                report.cancelled = True
                return

            channel.set_progress(index, total, ScanConfig.STATUS_CONFIRMING)
            matched = self._confirm_group(members, sets, channel)
            if matched is None:
                channel.reset_progress()
                report.cancelled = True
                return

            for candidate in members:
                if candidate.path in matched:
                    record = self._make_record(candidate, sets.set_id(candidate.path))
                    report.add(record)
                    channel.push_duplicate(record)

            if matched:
                logger.debug(f"Group {key!r}: {len(matched)} of {len(members)} confirmed")

    def _confirm_group(self, members: List[FileCandidate], sets: DuplicateSets,
                       channel: SignalChannel) -> Optional[set]:
        """All-pairs comparison; returns the matched paths, None when cancelled."""
        matched = set()
        for i in range(len(members) - 1):
            first = members[i]
            for j in range(i + 1, len(members)):
                if channel.is_cancelled():
                    return None
                second = members[j]
                if first.unreadable or second.unreadable:
                    continue
                if sets.connected(first.path, second.path):
                    continue
                if self._matches(first, second, channel):
                    sets.union(first.path, second.path)
                    matched.update((first.path, second.path))
        return matched


# =============================
# Individual Stages
# =============================
class ContentConfirmationStage(ConfirmationStageBase):
    """Header checksums must agree before the full digest of either file is read."""

    def __init__(self, hasher: Optional[Hasher] = None):
        self.hasher = hasher or HasherImpl()

    def _matches(self, a: FileCandidate, b: FileCandidate, channel: SignalChannel) -> bool:
        try:
            if self.hasher.compute_header_checksum(a) != self.hasher.compute_header_checksum(b):
                return False
            return self.hasher.compute_full_digest(a) == self.hasher.compute_full_digest(b)
        except ChecksumReadError as e:
            bad = a if e.path == a.path else b
            bad.unreadable = True
            channel.push_error(str(e))
            return False


class MetadataConfirmationStage(ConfirmationStageBase):
    """Full normalized key (artist/album/title/duration) must be identical."""

    def _matches(self, a: FileCandidate, b: FileCandidate, channel: SignalChannel) -> bool:
        return a.full_key == b.full_key

    def _make_record(self, candidate: FileCandidate, set_id: int) -> DuplicateRecord:
        return DuplicateRecord(
            path=candidate.path,
            set_id=set_id,
            size=candidate.size,
            tags=dict(candidate.tags or {}),
        )
