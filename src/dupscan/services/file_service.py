"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Safe deletion of confirmed duplicates: files go to the system trash, never erased.
"""
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """Trash operations on behalf of the caller."""

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved to trash: {path}")
