"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

Unified command orchestrator for duplicate scans.
This is the SINGLE source of truth for the scan workflow, used by the worker and the CLI.
No presentation dependencies, pure Python.
"""
import logging
from typing import Optional

from dupscan.core.catalog import CatalogSnapshot
from dupscan.core.channel import SignalChannel
from dupscan.core.errors import InvalidRootError, ReportWriteError
from dupscan.core.hasher import HasherImpl
from dupscan.core.interfaces import Hasher, TagReader
from dupscan.core.metadata import MutagenTagReader
from dupscan.core.models import ScanMode, ScanReport, ScanRequest
from dupscan.core.report import ReportWriter
from dupscan.core.scanner import DirectoryWalkerImpl
from dupscan.core.stages import (
    ContentConfirmationStage, HeaderChecksumStage, MetadataConfirmationStage)

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates one scan:
    1. Walk the root and build candidate groups
    2. Header checksums (content mode only)
    3. Pairwise confirmation for the request's mode
    4. Persist the report

    Usage:
        channel = SignalChannel()
        report = ScanCommand().execute(ScanRequest(root_dir="~/Music"), channel)

    Every result is also pushed to the channel as it is found, so a polling
    caller sees duplicates before execute() returns.
    """

    def __init__(self, hasher: Optional[Hasher] = None,
                 tag_reader: Optional[TagReader] = None,
                 report_writer: Optional[ReportWriter] = None):
        self._hasher = hasher
        self._tag_reader = tag_reader
        self._report_writer = report_writer

    def execute(self, request: ScanRequest, channel: SignalChannel) -> ScanReport:
        """
        Run the scan described by `request`, reporting through `channel`.

        Raises:
            InvalidRootError: the root is not a directory (already logged to the channel)
        """
        report = ScanReport(mode=request.mode)
        hasher = self._hasher or HasherImpl.for_digest(request.digest)
        tag_reader = None
        if request.mode == ScanMode.METADATA_KEY:
            tag_reader = self._tag_reader or MutagenTagReader()

        walker = DirectoryWalkerImpl(
            root_dir=request.root_dir,
            mode=request.mode,
            catalog=request.catalog,
            tag_reader=tag_reader,
        )

        try:
            groups = walker.walk(channel)
        except InvalidRootError as e:
            channel.push_error(str(e))
            raise

        if channel.is_cancelled():
            return self._finish(report, channel, cancelled=True)

        logger.debug(f"{len(groups)} candidate groups after walk")

        if request.mode == ScanMode.CONTENT_HASH:
            if not HeaderChecksumStage(hasher).process(groups, channel):
                return self._finish(report, channel, cancelled=True)
            stage = ContentConfirmationStage(hasher)
        else:
            stage = MetadataConfirmationStage()

        stage.process(groups, channel, report)

        if channel.is_cancelled():
            return self._finish(report, channel, cancelled=True)

        self._finish(report, channel, cancelled=False)
        self._write_report(report, request, channel)
        return report

    @staticmethod
    def _finish(report: ScanReport, channel: SignalChannel, cancelled: bool) -> ScanReport:
        report.cancelled = cancelled
        report.total_scanned = channel.count_scanned()
        report.total_errors = channel.count_errors()
        if cancelled:
            logger.debug("Scan cancelled, report not written")
        return report

    def _write_report(self, report: ScanReport, request: ScanRequest, channel: SignalChannel) -> None:
        writer = self._report_writer or ReportWriter(request.report_path)
        try:
            written = writer.write(report)
        except ReportWriteError as e:
            channel.push_error(str(e))
            report.total_errors = channel.count_errors()
            return

        if written:
            channel.set_status(f"{written} duplicates written to file {writer.path}")
        else:
            channel.set_status("")


def scan(root: str, mode: ScanMode, catalog_snapshot: Optional[CatalogSnapshot],
         channel: SignalChannel, **options) -> None:
    """
    Fire-and-forget entry point: every result flows through `channel`.
    Each call starts from a running control state and zero progress, even
    after an earlier stop. A bad root leaves a single error line in the
    channel and nothing else.

    Options:
        digest, report_path: forwarded to ScanRequest
        hasher, tag_reader, report_writer: forwarded to ScanCommand
    """
    channel.token.reset()
    channel.reset_progress()

    request_options = {k: options.pop(k) for k in ("digest", "report_path") if k in options}
    try:
        request = ScanRequest(root_dir=str(root), mode=mode, catalog=catalog_snapshot, **request_options)
    except ValueError as e:
        channel.push_error(str(e))
        logger.debug(f"Scan aborted: {e}")
        return

    try:
        ScanCommand(**options).execute(request, channel)
    except InvalidRootError:
        logger.debug(f"Scan aborted: invalid root {root}")
