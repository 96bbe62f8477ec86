"""
Shared fixtures for scan engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict

from dupscan.core.catalog import Catalog, CatalogOverrides
from dupscan.core.channel import SignalChannel
from dupscan.core.errors import MetadataReadError


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def channel() -> SignalChannel:
    return SignalChannel()


@pytest.fixture
def catalog_snapshot():
    """Default catalog: every group except 'ignored' enabled."""
    return Catalog.snapshot(CatalogOverrides())


@pytest.fixture
def sample_tree(temp_dir) -> Dict[str, Path]:
    """
    The canonical three-file tree:
    - a.txt and b.txt hold "X" (duplicates)
    - c.txt holds "Y" (same size and extension, different content)
    """
    files = {
        "a": temp_dir / "a.txt",
        "b": temp_dir / "b.txt",
        "c": temp_dir / "c.txt",
    }
    files["a"].write_bytes(b"X")
    files["b"].write_bytes(b"X")
    files["c"].write_bytes(b"Y")
    return files


@pytest.fixture
def mixed_tree(temp_dir) -> Dict[str, Path]:
    """
    Richer tree for walker tests:
    - duplicate pair in root and a third copy in a subdirectory
    - unknown extension (.xyz), ignored-by-default extension (.log)
    - an empty file
    """
    files = {}
    content = b"A" * 1024

    files["dup_a"] = temp_dir / "dup_a.txt"
    files["dup_b"] = temp_dir / "dup_b.txt"
    files["dup_a"].write_bytes(content)
    files["dup_b"].write_bytes(content)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_c.txt"
    files["sub_dup"].write_bytes(content)

    files["unique"] = temp_dir / "unique.txt"
    files["unique"].write_bytes(b"B" * 2048)

    files["unknown"] = temp_dir / "data.xyz"
    files["unknown"].write_bytes(b"Z")

    files["ignored"] = temp_dir / "run.log"
    files["ignored"].write_bytes(b"L")

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    return files


class FakeTagReader:
    """
    TagReader double: returns the tags registered for a file name,
    raises MetadataReadError for unregistered files.
    """

    def __init__(self, tags_by_name: Dict[str, Dict[str, str]]):
        self.tags_by_name = tags_by_name
        self.calls = []

    def read_tags(self, path: str) -> Dict[str, str]:
        self.calls.append(path)
        name = Path(path).name
        if name not in self.tags_by_name:
            raise MetadataReadError(f"Unsupported audio format for file {path}", path)
        return dict(self.tags_by_name[name])
