"""
Critical CLI tests: argument validation, output and deletion safety.
Deletion always goes through a mocked FileService.move_to_trash.
"""
from pathlib import Path
from unittest import mock

import pytest

from dupscan.cli import CLIApplication
from dupscan.core.models import DigestAlgorithm, ScanMode


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


class TestArgumentValidation:

    def test_force_requires_keep_one(self, sample_tree):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-i", str(sample_tree["a"].parent), "--force"])
        assert exc.value.code == 1

    def test_missing_input(self, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run([])
        assert exc.value.code == 1
        assert "--input is required" in capsys.readouterr().err

    def test_invalid_root_exits_with_1(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-i", str(temp_dir / "missing")])
        assert exc.value.code == 1
        assert "Directory not found" in capsys.readouterr().err

    def test_unknown_group_rejected(self, sample_tree, capsys):
        with pytest.raises(SystemExit) as exc:
            CLIApplication().run(["-i", str(sample_tree["a"].parent), "--disable-group", "nonsense"])
        assert exc.value.code == 1
        assert "Unknown group: nonsense" in capsys.readouterr().err

    def test_keep_one_without_tty_needs_force(self, sample_tree):
        with mock.patch("sys.stdin.isatty", return_value=False):
            with pytest.raises(SystemExit) as exc:
                CLIApplication().run(["-i", str(sample_tree["a"].parent), "--keep-one"])
        assert exc.value.code == 1


class TestRequestCreation:

    def test_aliases_map_to_enums(self, sample_tree):
        app = CLIApplication()
        args = app.parse_args(["-i", str(sample_tree["a"].parent), "--mode", "tags", "--digest", "xxhash",
                               "--disable-ext", "pdf", "--report", "out.log"])
        request = app.create_request(args)
        assert request.mode == ScanMode.METADATA_KEY
        assert request.digest == DigestAlgorithm.XXHASH
        assert request.report_path == "out.log"
        assert not request.catalog.is_enabled(".PDF")
        assert request.catalog.is_enabled(".TXT")

    def test_enable_ignored_group(self, sample_tree):
        app = CLIApplication()
        args = app.parse_args(["-i", str(sample_tree["a"].parent), "--enable-group", "ignored"])
        assert app.create_request(args).catalog.is_enabled(".LOG")


class TestOutput:

    def test_list_types(self, capsys):
        CLIApplication().run(["--list-types"])
        out = capsys.readouterr().out
        assert "audio [on]" in out
        assert "ignored [off]" in out
        assert ".MP3" in out

    def test_scan_prints_duplicate_set(self, sample_tree, workdir, capsys):
        CLIApplication().run(["-i", str(sample_tree["a"].parent)])
        out = capsys.readouterr().out
        assert "Found 1 duplicate sets (2 files)" in out
        assert str(sample_tree["a"]) in out
        assert str(sample_tree["b"]) in out
        assert str(sample_tree["c"]) not in out
        assert "2 duplicates written to file duplicates.log" in out
        assert (workdir / "duplicates.log").exists()

    def test_no_duplicates(self, temp_dir, workdir, capsys):
        (temp_dir / "only.txt").write_bytes(b"X")
        CLIApplication().run(["-i", str(temp_dir)])
        assert "No duplicates found." in capsys.readouterr().out

    def test_quiet_suppresses_output(self, sample_tree, workdir, capsys):
        CLIApplication().run(["-i", str(sample_tree["a"].parent), "--quiet"])
        assert capsys.readouterr().out == ""


class TestKeepOne:

    def test_force_trashes_all_but_one(self, sample_tree, workdir, capsys):
        """CRITICAL: exactly one file of the set survives; the other goes to trash."""
        with mock.patch("dupscan.services.duplicate_service.FileService.move_to_trash") as trash:
            CLIApplication().run(["-i", str(sample_tree["a"].parent), "--keep-one", "--force"])

        trash.assert_called_once_with(str(sample_tree["b"]))
        out = capsys.readouterr().out
        assert f"[KEEP] {sample_tree['a']}" in out
        assert f"[DEL]  {sample_tree['b']}" in out
        assert "Successfully moved 1 files to trash." in out

    def test_declined_confirmation_deletes_nothing(self, sample_tree, workdir, capsys):
        with mock.patch("sys.stdin.isatty", return_value=True), \
                mock.patch("sys.stdout.isatty", return_value=True), \
                mock.patch("builtins.input", return_value="n"), \
                mock.patch("dupscan.services.duplicate_service.FileService.move_to_trash") as trash:
            CLIApplication().run(["-i", str(sample_tree["a"].parent), "--keep-one"])

        trash.assert_not_called()
        assert "Deletion cancelled by user." in capsys.readouterr().out

    def test_partial_failure_reported(self, sample_tree, temp_dir, workdir, capsys):
        (temp_dir / "d.txt").write_bytes(b"X")
        with mock.patch("dupscan.services.duplicate_service.FileService.move_to_trash",
                        side_effect=RuntimeError("Failed to move to trash: busy")):
            CLIApplication().run(["-i", str(temp_dir), "--keep-one", "--force"])
        out = capsys.readouterr().out
        assert "Partial success: 0/2 files moved to trash." in out


class TestCancellation:

    def test_ctrl_c_stops_worker_and_exits_130(self, sample_tree):
        worker = mock.Mock()
        worker.is_finished.return_value = False
        worker.channel.progress.return_value = 0.0
        with mock.patch("dupscan.cli.ScanWorker") as worker_cls, \
                mock.patch("dupscan.cli.time.sleep", side_effect=KeyboardInterrupt):
            worker_cls.return_value.start.return_value = worker
            with pytest.raises(SystemExit) as exc:
                CLIApplication().run(["-i", str(sample_tree["a"].parent)])

        assert exc.value.code == 130
        worker.stop.assert_called_once()
        worker.join.assert_called_once()
