"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/report.py
Persists the confirmed duplicates of a finished scan as a plain text file.

Format:
    /music/a.mp3
        AlbumArtist: Artist
        Duration: 215
        TrackTitle: Song
    /music/b.flac
        ...

One path per line. Tag lines (metadata mode only) are indented by four
spaces and sorted by key.
"""

import logging
from typing import List

from dupscan.core.config import ScanConfig
from dupscan.core.errors import ReportWriteError
from dupscan.core.models import DuplicateRecord, ScanReport

logger = logging.getLogger(__name__)


def format_record(record: DuplicateRecord) -> List[str]:
    lines = [record.path]
    if record.tags:
        for key in sorted(record.tags):
            lines.append(f"    {key}: {record.tags[key]}")
    return lines


class ReportWriter:
    """Writes a ScanReport to `path`, truncating any previous report."""

    def __init__(self, path: str = ScanConfig.REPORT_NAME):
        self.path = path

    def write(self, report: ScanReport) -> int:
        """Returns the number of records written."""
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                for record in report.records:
                    f.write("\n".join(format_record(record)) + "\n")
        except OSError as e:
            raise ReportWriteError(f"Could not write report {self.path}: {e}", self.path) from e

        logger.debug(f"Wrote {report.total_duplicates} records to {self.path}")
        return report.total_duplicates
