"""
dupscan: duplicate file finder.

Core features:
- Two scan modes: CONTENT (size + extension → header checksum → full digest),
  METADATA (duration + title → full normalized artist/album/title key)
- Static, toggleable catalog of known extensions
- Cancellable background scan reporting through a thread-safe signal channel
- Safe deletion to system trash (via send2trash)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupscan")
except Exception:
    import tomllib

    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from dupscan.commands import ScanCommand, scan
from dupscan.core import (
    Catalog, CatalogOverrides, SignalChannel, ScanMode, DigestAlgorithm,
    ScanRequest, ScanReport, DuplicateRecord)
from dupscan.services import DuplicateService, FileService
from dupscan.worker import ScanWorker

__all__ = [
    "ScanCommand",
    "scan",
    "ScanWorker",
    "Catalog",
    "CatalogOverrides",
    "SignalChannel",
    "ScanMode",
    "DigestAlgorithm",
    "ScanRequest",
    "ScanReport",
    "DuplicateRecord",
    "DuplicateService",
    "FileService",
    "__version__",
]
