"""Concurrent recursive directory enumeration."""

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..utils.file_utils import FileHelper
from .models import FileRecord

logger = logging.getLogger(__name__)

# Entry kinds reported by _scan_directory
DIRECTORY = "dir"
REGULAR_FILE = "file"
SYMLINK = "symlink"
SPECIAL = "special"


def _scan_directory(directory: str) -> List[Tuple[str, str]]:
    """List one directory, classifying each entry without following symlinks."""
    entries = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_symlink():
                kind = SYMLINK
            elif entry.is_dir(follow_symlinks=False):
                kind = DIRECTORY
            elif entry.is_file(follow_symlinks=False):
                kind = REGULAR_FILE
            else:
                kind = SPECIAL
            entries.append((entry.path, kind))
    return entries


class DirectoryWalker:
    """Enumerate every regular file below a root directory.

    Subdirectories are listed concurrently. Storage keys are relative to
    ``base_path`` (the working directory at construction time by default)
    and always use ``/`` as separator. Symbolic links are never followed and
    special files are skipped.
    """

    def __init__(self, base_path: Optional[Union[str, Path]] = None, max_concurrency: int = 0):
        """Initialize the walker.

        Args:
            base_path: Base directory for storage keys, defaults to the cwd
            max_concurrency: Maximum directories listed at once, 0 for no limit
        """
        self.base_path = os.path.abspath(base_path if base_path is not None else os.getcwd())
        self.max_concurrency = max_concurrency

    async def walk(self, root: Union[str, Path]) -> List[FileRecord]:
        """Walk ``root`` recursively.

        Args:
            root: Directory to enumerate

        Returns:
            One FileRecord per regular file, in no particular order
        """
        root_path = os.path.abspath(root)
        if not os.path.exists(root_path):
            raise FileNotFoundError(f"Directory not found: {root}")
        if not os.path.isdir(root_path):
            raise NotADirectoryError(f"Not a directory: {root}")

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        records = await self._walk_directory(root_path, semaphore)
        logger.info(f"Found {len(records)} file(s) under {root}")
        return records

    async def _walk_directory(self, directory: str,
                              semaphore: Optional[asyncio.Semaphore]) -> List[FileRecord]:
        logger.debug(f"Scanning {directory}")
        if semaphore is None:
            entries = await asyncio.to_thread(_scan_directory, directory)
        else:
            async with semaphore:
                entries = await asyncio.to_thread(_scan_directory, directory)

        records: List[FileRecord] = []
        subdirectories = []
        for path, kind in entries:
            if kind == DIRECTORY:
                subdirectories.append(path)
            elif kind == REGULAR_FILE:
                records.append(self._make_record(path))
            elif kind == SYMLINK:
                logger.debug(f"Skipping symbolic link: {path}")
            else:
                logger.debug(f"Skipping special file: {path}")

        nested = await asyncio.gather(
            *(self._walk_directory(subdirectory, semaphore) for subdirectory in subdirectories)
        )
        for subdirectory_records in nested:
            records.extend(subdirectory_records)
        return records

    def _make_record(self, path: str) -> FileRecord:
        storage_key = FileHelper.create_storage_key(path, self.base_path)
        return FileRecord(
            absolute_path=path,
            storage_key=storage_key,
            content_type=FileHelper.get_content_type(storage_key),
        )
