"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Selection and deletion workflow over the duplicate log of a SignalChannel.
"""
import logging
from typing import Dict, List, Optional, Tuple

from dupscan.core.channel import SignalChannel
from dupscan.core.models import DuplicateRecord, ScanReport
from dupscan.services.file_service import FileService

logger = logging.getLogger(__name__)


class DuplicateService:
    @staticmethod
    def keeper_order(record: DuplicateRecord) -> Tuple[int, int, str]:
        """Files closer to the root first, then shorter paths, then alphabetical."""
        depth = record.path.replace("\\", "/").count("/")
        return depth, len(record.path), record.path

    @staticmethod
    def select_all_but_one(channel: SignalChannel) -> List[str]:
        """
        Marks every record except one per duplicate set as selected.
        The kept record is the first under keeper_order.

        Returns:
            List[str]: Paths now selected for deletion.
        """
        records = channel.duplicates()
        by_set: Dict[int, List[int]] = {}
        for index, record in enumerate(records):
            by_set.setdefault(record.set_id, []).append(index)

        selected_paths = []
        for indexes in by_set.values():
            ordered = sorted(indexes, key=lambda i: DuplicateService.keeper_order(records[i]))
            channel.set_selected(ordered[0], False)
            for index in ordered[1:]:
                channel.set_selected(index, True)
                selected_paths.append(records[index].path)
        return selected_paths

    @staticmethod
    def trash_selected(channel: SignalChannel,
                       report: Optional[ScanReport] = None) -> Tuple[List[str], List[Tuple[str, str]]]:
        """
        Moves every selected record to the trash.
        Trashed records leave the channel (and the report, when given); failures
        stay in place and are logged to the channel's error log.

        Returns:
            (deleted paths, [(failed path, error message), ...])
        """
        deleted: List[str] = []
        failed: List[Tuple[str, str]] = []

        for record in channel.selected_records():
            try:
                FileService.move_to_trash(record.path)
                deleted.append(record.path)
            except (OSError, RuntimeError) as e:
                failed.append((record.path, str(e)))
                channel.push_error(f"Failed to delete {record.path}: {e}")

        if deleted:
            channel.remove_duplicates(deleted)
            if report is not None:
                report.remove(deleted)
        logger.debug(f"Trashed {len(deleted)} files, {len(failed)} failures")
        return deleted, failed
