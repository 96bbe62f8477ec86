"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/metadata.py
Metadata adapter: reads audio tags through mutagen and derives the keys used
by MetadataKey scans.

Two keys are derived from the same tag map:
  • grouping_key : duration + normalized title (cheap bucket, may over-match)
  • full_key     : duration + artist + album + title (authoritative comparison)
"""

import logging
from typing import Dict, Optional

import mutagen

from dupscan.core.errors import MetadataReadError
from dupscan.core.interfaces import TagReader
from dupscan.core.normalizer import normalize_optional

logger = logging.getLogger(__name__)

# mutagen "easy" tag name -> key exposed to the engine
_EASY_KEYS = {
    "title": "TrackTitle",
    "artist": "TrackArtist",
    "albumartist": "AlbumArtist",
    "album": "AlbumTitle",
    "originalalbum": "OriginalAlbumTitle",
    "genre": "Genre",
    "date": "Year",
    "tracknumber": "TrackNumber",
    "discnumber": "DiscNumber",
}


class MutagenTagReader(TagReader):
    """
    TagReader backed by mutagen.
    Returns tag values as strings plus the stream properties; Duration is in whole seconds.
    """

    def read_tags(self, path: str) -> Dict[str, str]:
        try:
            audio = mutagen.File(path, easy=True)
        except mutagen.MutagenError as e:
            raise MetadataReadError(f"{e} for file {path}", path) from e
        except OSError as e:
            raise MetadataReadError(f"{e}, open file {path}", path) from e

        if audio is None:
            raise MetadataReadError(f"Unsupported audio format for file {path}", path)

        tags: Dict[str, str] = {}
        if audio.tags:
            for easy_key, key in _EASY_KEYS.items():
                try:
                    values = audio.tags.get(easy_key)
                except (KeyError, ValueError):
                    # EasyID3 raises for keys it does not register
                    values = None
                if values:
                    tags[key] = str(values[0]) if isinstance(values, list) else str(values)
        else:
            logger.debug(f"No primary tag for file {path}")

        info = getattr(audio, "info", None)
        tags["Duration"] = str(int(getattr(info, "length", 0) or 0))
        tags["SampleRate"] = str(getattr(info, "sample_rate", 0) or 0)
        tags["Channels"] = str(getattr(info, "channels", 0) or 0)
        tags["AudioBitrate"] = str(getattr(info, "bitrate", 0) or 0)
        tags["BitDepth"] = str(getattr(info, "bits_per_sample", 0) or 0)
        return tags


def grouping_key(tags: Dict[str, str], path: Optional[str] = None) -> str:
    """
    Duration followed by the normalized title, e.g. "180test live".
    Raises MetadataReadError when there is no usable title or the duration is zero.
    """
    duration = tags.get("Duration") or "0"
    title = normalize_optional(tags.get("TrackTitle"))
    if not title or duration == "0":
        raise MetadataReadError(f"Empty tags for file {path}", path)
    return f"{duration}{title}"


def full_key(tags: Dict[str, str]) -> str:
    """
    Duration + artist + album + title, every string field normalized.
    Empty AlbumArtist falls back to TrackArtist; empty AlbumTitle to OriginalAlbumTitle.
    """
    artist = tags.get("AlbumArtist") or tags.get("TrackArtist") or ""
    album = tags.get("AlbumTitle") or tags.get("OriginalAlbumTitle") or ""
    title = tags.get("TrackTitle")
    duration = tags.get("Duration") or "0"

    return (f"{duration}{normalize_optional(artist)}"
            f"{normalize_optional(album)}{normalize_optional(title)}")
