"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/catalog.py
Static registry of recognised file extensions, partitioned into named groups.

The table itself never changes at runtime. Enablement lives in a separate,
caller-owned CatalogOverrides object; the scan engine only ever sees an
immutable CatalogSnapshot taken when the scan starts.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaType:
    group: str
    extension: str  # uppercase, leading dot
    description: str


# group -> enabled by default
GROUP_DEFAULTS: Dict[str, bool] = {
    "audio": True,
    "video": True,
    "image": True,
    "document": True,
    "archive": True,
    "source": True,
    "ignored": False,
}

_TABLE: Tuple[Tuple[str, str, str], ...] = (
    # audio
    ("audio", ".3GP", "Multimedia container, usually AMR speech audio"),
    ("audio", ".8SVX", "IFF-8SVX 8-bit sound samples (Amiga)"),
    ("audio", ".AA", "Low-bitrate audiobook container with DRM"),
    ("audio", ".AAC", "Advanced Audio Coding (ADTS/ADIF)"),
    ("audio", ".AAX", "Encrypted audiobook, AAC/ALAC in MPEG-4"),
    ("audio", ".ACT", "Lossy ADPCM voice recorder format"),
    ("audio", ".AIFF", "Apple uncompressed CD-quality audio"),
    ("audio", ".AIF", "Apple uncompressed CD-quality audio"),
    ("audio", ".ALAC", "Apple Lossless Audio Codec"),
    ("audio", ".AMR", "AMR-NB speech audio"),
    ("audio", ".APE", "Monkey's Audio lossless compression"),
    ("audio", ".AU", "Sun/Unix/Java audio"),
    ("audio", ".AWB", "AMR-WB speech audio (G.722.2)"),
    ("audio", ".CDA", "CD audio track descriptor"),
    ("audio", ".DSS", "Olympus compressed dictation format"),
    ("audio", ".DVF", "Sony compressed voice format"),
    ("audio", ".FLAC", "Free Lossless Audio Codec"),
    ("audio", ".GSM", "GSM telephony voice audio"),
    ("audio", ".IKLAX", "iKlax multi-track audio"),
    ("audio", ".IVS", "3D Solar UK DRM music format"),
    ("audio", ".M4A", "Audio-only MPEG-4 (AAC or ALAC)"),
    ("audio", ".M4B", "Audiobook/podcast MPEG-4 with bookmarks"),
    ("audio", ".M4P", "AAC with Apple FairPlay DRM"),
    ("audio", ".MMF", "Samsung/Yamaha SMAF ringtone format"),
    ("audio", ".MOVPKG", "Apple Music lossless/hi-res package"),
    ("audio", ".MP3", "MPEG Layer III Audio"),
    ("audio", ".MPC", "Musepack lossy audio"),
    ("audio", ".MSV", "Sony Memory Stick voice format"),
    ("audio", ".NMF", "NICE Media Player audio"),
    ("audio", ".OGG", "Ogg container, usually Vorbis"),
    ("audio", ".OGA", "Ogg audio container"),
    ("audio", ".MOGG", "Multi-track Ogg Vorbis"),
    ("audio", ".OPUS", "Opus interactive audio codec (RFC 6716)"),
    ("audio", ".RA", "RealAudio streaming format"),
    ("audio", ".RM", "RealMedia streaming format"),
    ("audio", ".RAW", "Headerless raw audio, usually PCM"),
    ("audio", ".RF64", "Wave successor without the 4GiB limit"),
    ("audio", ".SLN", "Asterisk signed linear PCM"),
    ("audio", ".TTA", "True Audio lossless codec"),
    ("audio", ".VOC", "Creative Voice file"),
    ("audio", ".VOX", "Dialogic ADPCM audio"),
    ("audio", ".WAV", "RIFF wave audio"),
    ("audio", ".WMA", "Windows Media Audio"),
    ("audio", ".WV", "WavPack audio"),
    ("audio", ".WEBM", "Royalty-free web media container"),
    # video
    ("video", ".M4V", "Apple iTunes video"),
    ("video", ".MP4", "MPEG-4 video"),
    ("video", ".VOB", "DVD video object"),
    ("video", ".WMV", "Windows Media Video"),
    ("video", ".MTS", "AVCHD transport stream"),
    ("video", ".MOV", "QuickTime movie"),
    ("video", ".AVI", "Audio Video Interleave"),
    # image
    ("image", ".BMP", "Windows bitmap"),
    ("image", ".GIF", "Graphics Interchange Format"),
    ("image", ".JPG", "JPEG image"),
    ("image", ".JPEG", "JPEG image"),
    ("image", ".PNG", "Portable Network Graphics"),
    ("image", ".MPO", "Multi-picture object (stereo JPEG)"),
    ("image", ".ARW", "Sony raw image"),
    ("image", ".RAF", "Fujifilm raw image"),
    ("image", ".TIF", "Tagged Image File Format"),
    ("image", ".NEF", "Nikon raw image"),
    # document
    ("document", ".TXT", "Plain text"),
    ("document", ".PDF", "Portable Document Format"),
    ("document", ".PPT", "PowerPoint presentation"),
    ("document", ".PPTX", "PowerPoint Open XML presentation"),
    ("document", ".XLS", "Excel spreadsheet"),
    # archive
    ("archive", ".ZIP", "ZIP archive"),
    # source
    ("source", ".RS", "Rust source"),
    ("source", ".JS", "JavaScript source"),
    ("source", ".CSS", "Cascading Style Sheet"),
    ("source", ".HTML", "HTML document"),
    # ignored: known, but skipped unless explicitly enabled
    ("ignored", ".MF", "Manifest"),
    ("ignored", ".GITIGNORE", "Git ignore rules"),
    ("ignored", ".RLIB", "Rust library"),
    ("ignored", ".RMETA", "Rust metadata"),
    ("ignored", ".BIN", "Binary blob"),
    ("ignored", ".TIMESTAMP", "Build timestamp"),
    ("ignored", ".IDX", "Index file"),
    ("ignored", ".LOCK", "Lock file"),
    ("ignored", ".A", "Static library"),
    ("ignored", ".O", "Object file"),
    ("ignored", ".DS_STORE", "macOS folder metadata"),
    ("ignored", ".M3U", "Playlist"),
    ("ignored", ".NFO", "Release info"),
    ("ignored", ".RTF", "Rich Text Format"),
    ("ignored", ".SFV", "Simple file verification"),
    ("ignored", ".URL", "Internet shortcut"),
    ("ignored", ".WPL", "Windows Media playlist"),
    ("ignored", ".LOG", "Log file"),
    ("ignored", ".BAK", "Backup file"),
)

MEDIA_TYPES: Tuple[MediaType, ...] = tuple(MediaType(g, e, d) for g, e, d in _TABLE)

_GROUPS_BY_EXTENSION: Dict[str, List[str]] = {}
for _media_type in MEDIA_TYPES:
    _GROUPS_BY_EXTENSION.setdefault(_media_type.extension, []).append(_media_type.group)


def get_extension(filename: str) -> str:
    """
    Extension of a file name: substring from the last '.' to the end, uppercased.
    Returns "" when the name has no dot.
        "song.Mp3" → ".MP3"
        ".DS_Store" → ".DS_STORE"
        "Makefile" → ""
    """
    idx = filename.rfind(".")
    if idx < 0:
        return ""
    return filename[idx:].upper()


def normalize_extension(extension: str) -> str:
    """'mp3', '.mp3' and '.MP3' all become '.MP3'."""
    ext = extension.strip().upper()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of the catalog taken at scan start."""
    known: FrozenSet[str]
    enabled: FrozenSet[str]

    def is_known(self, extension: str) -> bool:
        return extension in self.known

    def is_enabled(self, extension: str) -> bool:
        return extension in self.enabled


@dataclass
class CatalogOverrides:
    """
    Caller-owned enable/disable flags layered over the static table.
    Missing entries fall back to GROUP_DEFAULTS (groups) and "enabled" (extensions).
    """
    groups: Dict[str, bool] = field(default_factory=dict)
    extensions: Dict[str, bool] = field(default_factory=dict)

    def set_group_enabled(self, group: str, enabled: bool) -> None:
        if group not in GROUP_DEFAULTS:
            raise KeyError(f"Unknown group: {group}")
        self.groups[group] = enabled

    def set_extension_enabled(self, extension: str, enabled: bool) -> None:
        ext = normalize_extension(extension)
        if not Catalog.is_known(ext):
            raise KeyError(f"Unknown extension: {extension}")
        self.extensions[ext] = enabled

    def toggle_group(self, group: str) -> bool:
        new_value = not self.group_enabled(group)
        self.set_group_enabled(group, new_value)
        return new_value

    def toggle_extension(self, extension: str) -> bool:
        ext = normalize_extension(extension)
        new_value = not self.extension_enabled(ext)
        self.set_extension_enabled(ext, new_value)
        return new_value

    def group_enabled(self, group: str) -> bool:
        return self.groups.get(group, GROUP_DEFAULTS.get(group, False))

    def extension_enabled(self, extension: str) -> bool:
        return self.extensions.get(normalize_extension(extension), True)

    def reset(self) -> None:
        self.groups.clear()
        self.extensions.clear()


class Catalog:
    """Pure queries over the static extension table."""

    @staticmethod
    def groups() -> List[str]:
        return list(GROUP_DEFAULTS)

    @staticmethod
    def extensions_of(group: str) -> List[str]:
        if group not in GROUP_DEFAULTS:
            raise KeyError(f"Unknown group: {group}")
        return [mt.extension for mt in MEDIA_TYPES if mt.group == group]

    @staticmethod
    def describe(extension: str) -> Optional[str]:
        ext = normalize_extension(extension)
        for mt in MEDIA_TYPES:
            if mt.extension == ext:
                return mt.description
        return None

    @classmethod
    def is_known(cls, extension: str) -> bool:
        return extension in _GROUPS_BY_EXTENSION

    @classmethod
    def is_enabled(cls, extension: str, overrides: Optional[CatalogOverrides] = None) -> bool:
        """
        Known, not disabled on its own, and in at least one enabled group.
        """
        groups = _GROUPS_BY_EXTENSION.get(extension)
        if not groups:
            return False
        overrides = overrides or CatalogOverrides()
        if not overrides.extension_enabled(extension):
            return False
        return any(overrides.group_enabled(g) for g in groups)

    @classmethod
    def snapshot(cls, overrides: Optional[CatalogOverrides] = None) -> CatalogSnapshot:
        known = frozenset(_GROUPS_BY_EXTENSION)
        enabled = frozenset(ext for ext in known if cls.is_enabled(ext, overrides))
        logger.debug(f"Catalog snapshot: {len(enabled)}/{len(known)} extensions enabled")
        return CatalogSnapshot(known=known, enabled=enabled)
