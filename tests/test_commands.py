"""
Integration tests for ScanCommand and the scan() entry point.
Run real scans over temporary trees; the report is written into a temporary working directory.
"""
from pathlib import Path

import pytest

from dupscan.commands import ScanCommand, scan
from dupscan.core.catalog import Catalog, CatalogOverrides
from dupscan.core.channel import ControlState
from dupscan.core.errors import InvalidRootError, ReportWriteError
from dupscan.core.models import DigestAlgorithm, ScanMode, ScanRequest

from conftest import FakeTagReader


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Separate working directory so the report never lands in the scanned tree."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


class TestContentScan:

    def test_sample_tree_end_to_end(self, sample_tree, workdir, channel):
        request = ScanRequest(root_dir=str(sample_tree["a"].parent))
        report = ScanCommand().execute(request, channel)

        assert {Path(p).name for p in report.paths()} == {"a.txt", "b.txt"}
        assert report.total_scanned == 3
        assert report.total_errors == 0
        assert not report.cancelled

        lines = (workdir / "duplicates.log").read_text(encoding="utf-8").splitlines()
        assert sorted(lines) == sorted([str(sample_tree["a"]), str(sample_tree["b"])])
        assert channel.status() == "2 duplicates written to file duplicates.log"

    def test_every_identical_file_reported(self, mixed_tree, temp_dir, workdir, channel):
        report = ScanCommand().execute(ScanRequest(root_dir=str(temp_dir)), channel)
        assert set(report.paths()) == {
            str(mixed_tree["dup_a"]), str(mixed_tree["dup_b"]), str(mixed_tree["sub_dup"])}
        assert len(report.sets()) == 1
        assert report.total_errors == 1  # the .xyz file

    def test_idempotent(self, sample_tree, workdir, channel):
        request = ScanRequest(root_dir=str(sample_tree["a"].parent))
        first = set(ScanCommand().execute(request, channel).paths())
        channel.clear()
        second = set(ScanCommand().execute(request, channel).paths())
        assert first == second

    def test_xxhash_digest(self, sample_tree, workdir, channel):
        request = ScanRequest(root_dir=str(sample_tree["a"].parent), digest=DigestAlgorithm.XXHASH)
        report = ScanCommand().execute(request, channel)
        assert len(report.paths()) == 2

    def test_no_duplicates_clears_status(self, temp_dir, workdir, channel):
        (temp_dir / "only.txt").write_bytes(b"X")
        report = ScanCommand().execute(ScanRequest(root_dir=str(temp_dir)), channel)
        assert report.records == []
        assert channel.status() == ""
        assert (workdir / "duplicates.log").read_text() == ""

    def test_custom_report_path(self, sample_tree, temp_dir, workdir, channel):
        target = workdir / "custom.log"
        request = ScanRequest(root_dir=str(sample_tree["a"].parent), report_path=str(target))
        ScanCommand().execute(request, channel)
        assert len(target.read_text().splitlines()) == 2

    def test_disabled_extension_through_snapshot(self, sample_tree, workdir, channel):
        overrides = CatalogOverrides()
        overrides.set_extension_enabled(".TXT", False)
        request = ScanRequest(root_dir=str(sample_tree["a"].parent), catalog=Catalog.snapshot(overrides))
        report = ScanCommand().execute(request, channel)
        assert report.total_scanned == 0
        assert report.records == []


class TestFailures:

    def test_invalid_root_logged_once_and_raised(self, temp_dir, workdir, channel):
        request = ScanRequest(root_dir=str(temp_dir / "missing"))
        with pytest.raises(InvalidRootError):
            ScanCommand().execute(request, channel)
        assert len(channel.errors()) == 1
        assert channel.scanned() == []
        assert not (workdir / "duplicates.log").exists()

    def test_report_write_error_keeps_report(self, sample_tree, workdir, channel):
        class FailingWriter:
            path = "duplicates.log"

            def write(self, report):
                raise ReportWriteError("Could not write report duplicates.log: disk full", self.path)

        request = ScanRequest(root_dir=str(sample_tree["a"].parent))
        report = ScanCommand(report_writer=FailingWriter()).execute(request, channel)

        assert len(report.records) == 2
        assert report.total_errors == 1
        assert "disk full" in channel.errors()[0]

    def test_cancelled_scan_writes_no_report(self, sample_tree, workdir, channel):
        original_push = channel.push_scanned

        def push_then_stop(path):
            original_push(path)
            channel.stop()

        channel.push_scanned = push_then_stop
        report = ScanCommand().execute(ScanRequest(root_dir=str(sample_tree["a"].parent)), channel)

        assert report.cancelled
        assert report.records == []
        assert not (workdir / "duplicates.log").exists()


class TestMetadataScan:

    def test_same_recording_across_formats(self, temp_dir, workdir, channel):
        (temp_dir / "a.mp3").write_bytes(b"short")
        (temp_dir / "b.flac").write_bytes(b"considerably longer")
        (temp_dir / "c.mp3").write_bytes(b"other")
        reader = FakeTagReader({
            "a.mp3": {"Duration": "180", "TrackTitle": "Test (Live)", "TrackArtist": "Band"},
            "b.flac": {"Duration": "180", "TrackTitle": "TEST", "AlbumArtist": "Band"},
            "c.mp3": {"Duration": "180", "TrackTitle": "Test", "TrackArtist": "Someone Else"},
        })
        request = ScanRequest(root_dir=str(temp_dir), mode=ScanMode.METADATA_KEY)
        report = ScanCommand(tag_reader=reader).execute(request, channel)

        assert {Path(p).name for p in report.paths()} == {"a.mp3", "b.flac"}
        text = (workdir / "duplicates.log").read_text(encoding="utf-8")
        assert "    Duration: 180" in text
        assert "c.mp3" not in text


class TestScanEntryPoint:

    def test_results_flow_through_channel(self, sample_tree, workdir, channel):
        assert scan(sample_tree["a"].parent, ScanMode.CONTENT_HASH, Catalog.snapshot(), channel) is None
        assert {Path(r.path).name for r in channel.duplicates()} == {"a.txt", "b.txt"}

    def test_invalid_root_single_error(self, temp_dir, workdir, channel):
        scan(temp_dir / "missing", ScanMode.CONTENT_HASH, Catalog.snapshot(), channel)
        assert len(channel.errors()) == 1
        assert channel.duplicates() == []

    def test_options_forwarded(self, sample_tree, workdir, channel):
        scan(sample_tree["a"].parent, ScanMode.CONTENT_HASH, None, channel,
             report_path="other.log", digest=DigestAlgorithm.XXHASH)
        assert (workdir / "other.log").exists()

    def test_fresh_scan_after_stop_runs(self, sample_tree, workdir, channel):
        """A stop from an earlier run does not leak into the next invocation."""
        channel.stop()
        scan(sample_tree["a"].parent, ScanMode.CONTENT_HASH, None, channel)

        assert channel.control_state() is ControlState.RUNNING
        assert channel.count_scanned() == 3
        assert {Path(r.path).name for r in channel.duplicates()} == {"a.txt", "b.txt"}
        assert (workdir / "duplicates.log").exists()

    def test_empty_root_single_error(self, workdir, channel):
        scan("", ScanMode.CONTENT_HASH, None, channel)
        assert channel.errors() == ["Root directory cannot be empty"]
        assert channel.count_scanned() == 0
        assert not (workdir / "duplicates.log").exists()
