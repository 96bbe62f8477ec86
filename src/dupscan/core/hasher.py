"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements the two checksum tiers used to confirm duplicates.

  • header checksum : plain additive sum of the first HEADER_SIZE bytes.
                      Cheap pre-filter, collisions expected.
  • full digest     : streaming digest of the whole file through a pluggable
                      HashAlgorithm, read in READ_CHUNK_SIZE blocks.

Both are cached on the FileCandidate, so each file is read at most once per tier.
"""

import hashlib
import logging

import xxhash

from dupscan.core.config import ScanConfig
from dupscan.core.errors import ChecksumReadError
from dupscan.core.interfaces import Hasher, HashAlgorithm, HashState
from dupscan.core.models import FileCandidate, DigestAlgorithm

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class Blake2bAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return hashlib.blake2b(digest_size=32)


class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return xxhash.xxh64()


ALGORITHMS = {
    DigestAlgorithm.BLAKE2B: Blake2bAlgorithmImpl,
    DigestAlgorithm.XXHASH: XXHashAlgorithmImpl,
}


def additive_checksum(data: bytes) -> int:
    """Sum of all byte values: b"X" → 88."""
    return sum(data)


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes and caches the header checksum and the full digest of a candidate.
    """

    def __init__(self, algorithm: HashAlgorithm = None,
                 header_size: int = ScanConfig.HEADER_SIZE,
                 chunk_size: int = ScanConfig.READ_CHUNK_SIZE):
        self.algorithm = algorithm or Blake2bAlgorithmImpl()
        self.header_size = header_size
        self.chunk_size = chunk_size

    @classmethod
    def for_digest(cls, digest: DigestAlgorithm) -> "HasherImpl":
        return cls(ALGORITHMS[digest]())

    def compute_header_checksum(self, candidate: FileCandidate) -> int:
        """Computes and caches the additive checksum of the first header_size bytes."""
        if candidate.header_computed:
            return candidate.header_checksum
        try:
            with open(candidate.path, 'rb') as f:
                data = f.read(self.header_size)
        except OSError as e:
            raise ChecksumReadError(
                f"Could not read header of {candidate.path}: {e}", candidate.path) from e
        candidate.header_checksum = additive_checksum(data)
        candidate.header_computed = True
        return candidate.header_checksum

    def compute_full_digest(self, candidate: FileCandidate) -> bytes:
        """Computes and caches the digest of the whole file, streamed in chunks."""
        if candidate.full_digest is not None:
            return candidate.full_digest
        state = self.algorithm.new()
        try:
            with open(candidate.path, 'rb') as f:
                while True:
                    block = f.read(self.chunk_size)
                    if not block:
                        break
                    state.update(block)
        except OSError as e:
            raise ChecksumReadError(
                f"Could not read file {candidate.path}: {e}", candidate.path) from e
        candidate.full_digest = state.digest()
        return candidate.full_digest
