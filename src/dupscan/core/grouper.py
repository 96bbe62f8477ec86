"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Grouping key computation and the candidate group map.
Equal keys are necessary but not sufficient for duplication; groups are
working sets for the confirmation stages, never the final answer.
"""

from typing import List, Dict, Callable
from collections import defaultdict

from dupscan.core.metadata import grouping_key
from dupscan.core.models import FileCandidate, ScanMode


def content_key(candidate: FileCandidate) -> str:
    """`{size}{EXTENSION}`, e.g. "1.TXT"; files without extension use the size alone."""
    return f"{candidate.size}{candidate.extension}"


def metadata_key(candidate: FileCandidate) -> str:
    """Duration + normalized title, taken from the candidate's tag map."""
    return grouping_key(candidate.tags or {}, candidate.path)


def key_function(mode: ScanMode) -> Callable[[FileCandidate], str]:
    if mode == ScanMode.METADATA_KEY:
        return metadata_key
    return content_key


class CandidateGroups:
    """
    Grouping key -> candidates sharing it.
    Insertion order inside a group carries no meaning.
    """

    def __init__(self):
        self._groups: Dict[str, List[FileCandidate]] = defaultdict(list)

    def add(self, key: str, candidate: FileCandidate) -> None:
        self._groups[key].append(candidate)

    def prune(self) -> int:
        """Drops groups with fewer than 2 members. Returns how many were dropped."""
        singles = [key for key, members in self._groups.items() if len(members) < 2]
        for key in singles:
            del self._groups[key]
        return len(singles)

    def as_dict(self) -> Dict[str, List[FileCandidate]]:
        return dict(self._groups)

    def __len__(self) -> int:
        return len(self._groups)
