#!/usr/bin/env python3
"""
dupscan CLI: headless caller of the scan engine.
Starts the scan on a background worker, polls its SignalChannel and renders the results.
All operations are safe: deletion moves files to system trash, never permanent erase.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

try:
    import mutagen
except ImportError:
    _MISSING_DEPS.append("mutagen")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install -e .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupscan.core.catalog import Catalog, CatalogOverrides
from dupscan.core.channel import SignalChannel
from dupscan.core.config import ScanConfig
from dupscan.core.models import DigestAlgorithm, ScanMode, ScanReport, ScanRequest
from dupscan.services.duplicate_service import DuplicateService
from dupscan.worker import ScanWorker
from dupscan.aliases import (
    SCAN_MODE_ALIASES, SCAN_MODE_CHOICES, SCAN_MODE_HELP_TEXT,
    DIGEST_ALIASES, DIGEST_CHOICES, DIGEST_HELP_TEXT,
    EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="dupscan: duplicate file finder with safe deletion",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            type=str,
            help="Input directory to scan for duplicates"
        )

        # Scan options
        parser.add_argument(
            "--mode",
            choices=SCAN_MODE_CHOICES,
            default="content",
            type=str,
            help=SCAN_MODE_HELP_TEXT
        )
        parser.add_argument(
            "--digest",
            choices=DIGEST_CHOICES,
            default="blake2b",
            type=str,
            help=DIGEST_HELP_TEXT
        )

        # Catalog options
        parser.add_argument(
            "--enable-group",
            nargs="+",
            default=[],
            metavar='',
            help="Catalog groups (space separated) to scan, e.g. ignored"
        )
        parser.add_argument(
            "--disable-group",
            nargs="+",
            default=[],
            metavar='',
            help="Catalog groups (space separated) to skip, e.g. video archive"
        )
        parser.add_argument(
            "--enable-ext",
            nargs="+",
            default=[],
            metavar='',
            help="Extensions (space separated) to scan; their group must be enabled too"
        )
        parser.add_argument(
            "--disable-ext",
            nargs="+",
            default=[],
            metavar='',
            help="Extensions (space separated) to skip, e.g. .txt .pdf"
        )
        parser.add_argument(
            "--list-types",
            action="store_true",
            help="List catalog groups with their extensions and exit"
        )

        # Output options
        parser.add_argument(
            "--report",
            default=ScanConfig.REPORT_NAME,
            type=str,
            metavar='',
            help=f"Report file path. Default: ./{ScanConfig.REPORT_NAME}"
        )

        # Actions
        parser.add_argument(
            "--keep-one",
            action="store_true",
            help="Keep one file per duplicate set and move the rest to trash. "
                 "Always shows preview before deletion for safety."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --keep-one (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and error details"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging on stderr"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if not args.input:
            self.error_exit("--input is required unless --list-types is given")

        if args.force and not args.keep_one:
            self.error_exit("--force can only be used with --keep-one")

        # Prevent interactive confirmation in non-TTY environments
        if args.keep_one and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        root_path = Path(args.input).expanduser().resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

    def build_overrides(self, args: argparse.Namespace) -> CatalogOverrides:
        """Translate the catalog flags into overrides; unknown names abort."""
        overrides = CatalogOverrides()
        try:
            for group in args.enable_group:
                overrides.set_group_enabled(group.strip().lower(), True)
            for group in args.disable_group:
                overrides.set_group_enabled(group.strip().lower(), False)
            for ext in args.enable_ext:
                overrides.set_extension_enabled(ext, True)
            for ext in args.disable_ext:
                overrides.set_extension_enabled(ext, False)
        except KeyError as e:
            self.error_exit(f"{e.args[0]}. Use --list-types to see the catalog")
        return overrides

    def create_request(self, args: argparse.Namespace) -> ScanRequest:
        """Create ScanRequest from CLI arguments."""
        overrides = self.build_overrides(args)
        mode = SCAN_MODE_ALIASES.get(args.mode, ScanMode.CONTENT_HASH)
        digest = DIGEST_ALIASES.get(args.digest, DigestAlgorithm.BLAKE2B)
        try:
            return ScanRequest(
                root_dir=str(Path(args.input).expanduser().resolve()),
                mode=mode,
                catalog=Catalog.snapshot(overrides),
                digest=digest,
                report_path=args.report,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def render_progress(self, channel: SignalChannel) -> None:
        """CLI progress renderer - shows status, progress and counters in console."""
        if not self.verbose:
            return
        percent = channel.progress() * 100
        sys.stderr.write(
            f"\r  [{channel.status() or 'Working...'}] {percent:5.1f}% | "
            f"scanned: {channel.count_scanned()} | errors: {channel.count_errors()} | "
            f"duplicates: {channel.count_duplicates()}"
        )
        sys.stderr.flush()

    def run_scan(self, request: ScanRequest) -> ScanWorker:
        """Run the worker to completion, polling its channel."""
        worker = ScanWorker(request).start()
        if self.verbose:
            print(f"Mode: {request.mode.display_name} ({request.mode.description})")
            print(f"Digest: {request.digest.display_name}")

        try:
            while not worker.is_finished():
                self.render_progress(worker.channel)
                time.sleep(ScanConfig.POLL_INTERVAL)
        except KeyboardInterrupt:
            worker.stop()
            worker.join()
            print("\n⚠️  Scan cancelled by user (Ctrl+C)", file=sys.stderr)
            sys.exit(130)

        self.render_progress(worker.channel)
        if self.verbose:
            sys.stderr.write("\n")

        if worker.error:
            self.error_exit(f"Scan failed: {worker.error}")
        return worker

    def output_results(self, report: ScanReport, channel: SignalChannel) -> None:
        """Print the duplicate sets, error summary and report location."""
        if self.quiet:
            return

        errors = channel.errors()
        if self.verbose and errors:
            print(f"\nErrors ({len(errors)}):")
            for message in errors:
                print(f"   {message}")

        sets = report.sets()
        if not sets:
            print("No duplicates found.")
        else:
            print(f"\nFound {len(sets)} duplicate sets ({report.total_duplicates} files)")
            for idx, records in enumerate(sets.values(), 1):
                print(f"\n📁 Set {idx} | Files: {len(records)}")
                for record in records:
                    print(f"   {record.path} [{record.size} bytes]")

        print(f"\nScanned: {report.total_scanned} | Errors: {report.total_errors}")
        if channel.status():
            print(channel.status())

    def execute_keep_one(self, worker: ScanWorker, force: bool = False) -> None:
        """Keep one file per set, trash the rest. Always shows preview before deletion."""
        channel, report = worker.channel, worker.report
        files_to_delete = DuplicateService.select_all_but_one(channel)

        if not files_to_delete:
            if not self.quiet:
                print("No files to delete.")
            return

        records = channel.duplicates()
        selected = channel.selected()
        sets = {}
        for record, is_selected in zip(records, selected):
            sets.setdefault(record.set_id, []).append((record, is_selected))

        print()
        for idx, members in enumerate(sets.values(), 1):
            print(f"📁 Set {idx} | Files: {len(members)}")
            print("-" * 60)
            for record, is_selected in sorted(members, key=lambda m: m[1]):
                marker = "[DEL] " if is_selected else "[KEEP]"
                print(f"   {marker} {record.path}")
            print()

        print("=" * 60)
        print(f"Summary: Keep 1 file per set ({len(sets)} files preserved, {len(files_to_delete)} files deleted)")
        print()

        # Skip confirmation if --force is used
        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return

        print(f"\nMoving {len(files_to_delete)} files to trash...")
        deleted, failed = DuplicateService.trash_selected(channel, report)

        if failed:
            print(f"\n⚠️  Partial success: {len(deleted)}/{len(files_to_delete)} files moved to trash.")
            print(f"Failed to delete {len(failed)} file(s):")
            for path, error in failed[:5]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if len(failed) > 5:
                print(f"  ...and {len(failed) - 5} more files")
        else:
            print(f"✅ Successfully moved {len(deleted)} files to trash.")

    @staticmethod
    def list_types() -> None:
        """Print every catalog group with its default state and extensions."""
        overrides = CatalogOverrides()
        for group in Catalog.groups():
            state = "on" if overrides.group_enabled(group) else "off"
            extensions: List[str] = Catalog.extensions_of(group)
            print(f"{group} [{state}] ({len(extensions)})")
            print(f"   {' '.join(extensions)}")

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if args.debug:
            logging.getLogger("dupscan").setLevel(logging.DEBUG)

        if args.list_types:
            self.list_types()
            return

        self.validate_args(args)
        request = self.create_request(args)

        if not self.quiet:
            print(f"Scanning directory: {request.root_dir}")

        worker = self.run_scan(request)
        self.output_results(worker.report, worker.channel)

        if args.keep_one:
            self.execute_keep_one(worker, force=args.force)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
