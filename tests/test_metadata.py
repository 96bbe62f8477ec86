"""
Unit tests for the metadata adapter.
mutagen is mocked: tests never depend on real audio fixtures.
"""
from types import SimpleNamespace
from unittest.mock import patch

import mutagen
import pytest

from dupscan.core.errors import MetadataReadError
from dupscan.core.metadata import MutagenTagReader, grouping_key, full_key


def fake_audio(tags=None, length=180.7, sample_rate=44100, channels=2, bitrate=320000):
    info = SimpleNamespace(length=length, sample_rate=sample_rate, channels=channels, bitrate=bitrate)
    return SimpleNamespace(tags=tags, info=info)


class TestMutagenTagReader:

    def test_maps_easy_tags_and_stream_info(self):
        audio = fake_audio(tags={
            "title": ["Test (Live)"],
            "artist": ["Artist"],
            "album": ["Album"],
        })
        with patch("mutagen.File", return_value=audio) as mocked:
            tags = MutagenTagReader().read_tags("/music/a.mp3")

        mocked.assert_called_once_with("/music/a.mp3", easy=True)
        assert tags["TrackTitle"] == "Test (Live)"
        assert tags["TrackArtist"] == "Artist"
        assert tags["AlbumTitle"] == "Album"
        assert tags["Duration"] == "180"  # whole seconds, truncated
        assert tags["SampleRate"] == "44100"
        assert tags["Channels"] == "2"
        assert tags["AudioBitrate"] == "320000"
        assert tags["BitDepth"] == "0"
        assert "AlbumArtist" not in tags

    def test_no_tags_still_reports_duration(self):
        with patch("mutagen.File", return_value=fake_audio(tags=None)):
            tags = MutagenTagReader().read_tags("/music/a.flac")
        assert tags["Duration"] == "180"
        assert "TrackTitle" not in tags

    def test_unsupported_format_raises(self):
        with patch("mutagen.File", return_value=None):
            with pytest.raises(MetadataReadError, match="Unsupported audio format") as exc:
                MutagenTagReader().read_tags("/music/cover.jpg")
        assert exc.value.path == "/music/cover.jpg"

    def test_mutagen_error_is_wrapped(self):
        with patch("mutagen.File", side_effect=mutagen.MutagenError("bad header")):
            with pytest.raises(MetadataReadError) as exc:
                MutagenTagReader().read_tags("/music/broken.mp3")
        assert isinstance(exc.value.__cause__, mutagen.MutagenError)

    def test_os_error_is_wrapped(self):
        with patch("mutagen.File", side_effect=PermissionError("denied")):
            with pytest.raises(MetadataReadError, match="denied"):
                MutagenTagReader().read_tags("/music/locked.mp3")


class TestGroupingKey:

    def test_cosmetic_title_variants_share_key(self):
        """Bracket annotations are stripped, so the live tag does not split the bucket."""
        first = grouping_key({"Duration": "180", "TrackTitle": "Test (Live)"})
        second = grouping_key({"Duration": "180", "TrackTitle": "TEST"})
        assert first == second == "180test"

    def test_collapsed_spaces(self):
        assert grouping_key({"Duration": "180", "TrackTitle": "test   live"}) == "180test live"

    def test_different_duration_different_key(self):
        assert (grouping_key({"Duration": "180", "TrackTitle": "Song"})
                != grouping_key({"Duration": "181", "TrackTitle": "Song"}))

    @pytest.mark.parametrize("tags", [
        {"Duration": "180"},
        {"Duration": "180", "TrackTitle": ""},
        {"Duration": "180", "TrackTitle": "(Live)"},
        {"Duration": "0", "TrackTitle": "Song"},
        {"TrackTitle": "Song"},
    ])
    def test_unusable_tags_raise(self, tags):
        with pytest.raises(MetadataReadError, match="Empty tags"):
            grouping_key(tags, "/music/a.mp3")


class TestFullKey:

    def test_concatenates_normalized_fields(self):
        tags = {
            "Duration": "180",
            "AlbumArtist": "The Band",
            "AlbumTitle": "First Album",
            "TrackTitle": "Song (Remastered)",
        }
        assert full_key(tags) == "180the bandfirst albumsong"

    def test_artist_and_album_fallbacks(self):
        primary = {"Duration": "180", "AlbumArtist": "Band", "AlbumTitle": "Album", "TrackTitle": "Song"}
        fallback = {"Duration": "180", "TrackArtist": "Band", "OriginalAlbumTitle": "Album",
                    "TrackTitle": "Song"}
        assert full_key(primary) == full_key(fallback)

    def test_album_artist_wins_over_track_artist(self):
        tags = {"Duration": "180", "AlbumArtist": "Band", "TrackArtist": "Guest", "TrackTitle": "Song"}
        assert full_key(tags) == "180bandsong"

    def test_missing_duration_is_zero(self):
        assert full_key({"TrackTitle": "Song"}) == "0song"

    def test_different_artist_differs(self):
        first = {"Duration": "180", "TrackArtist": "One", "TrackTitle": "Song"}
        second = {"Duration": "180", "TrackArtist": "Two", "TrackTitle": "Song"}
        assert full_key(first) != full_key(second)
