"""Trash operations and the duplicate selection/deletion workflow."""

from .file_service import FileService
from .duplicate_service import DuplicateService

__all__ = ["FileService", "DuplicateService"]
