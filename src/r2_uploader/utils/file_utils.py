"""File utility functions."""

import os
from pathlib import Path
from typing import Union

DEFAULT_CONTENT_TYPE = 'application/octet-stream'

MIME_TYPES = {
    '.html': 'text/html',
    '.css': 'text/css',
    '.js': 'application/javascript',
    '.json': 'application/json',
    '.png': 'image/png',
    '.svg': 'image/svg+xml',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.woff': 'font/woff',
    '.woff2': 'font/woff2',
    '.ttf': 'font/ttf',
    '.eot': 'application/vnd.ms-fontobject',
}


class FileHelper:
    """Helper class for file operations."""

    @staticmethod
    def get_content_type(filename: str) -> str:
        """Look up the MIME type for a file name by its extension.

        Args:
            filename: File name or storage key

        Returns:
            MIME type, or ``application/octet-stream`` for unknown extensions
        """
        extension = os.path.splitext(filename)[1].lower()
        return MIME_TYPES.get(extension, DEFAULT_CONTENT_TYPE)

    @staticmethod
    def format_file_size(size_bytes: float) -> str:
        """Format file size in human readable format.

        Args:
            size_bytes: Size in bytes

        Returns:
            Formatted size string
        """
        if size_bytes == 0:
            return "0 B"

        size_names = ["B", "KB", "MB", "GB", "TB", "PB"]
        i = 0

        while size_bytes >= 1024 and i < len(size_names) - 1:
            size_bytes /= 1024.0
            i += 1

        return f"{size_bytes:.1f} {size_names[i]}"

    @staticmethod
    def create_storage_key(file_path: Union[str, Path], base_path: Union[str, Path]) -> str:
        """Create the remote storage key for a local file.

        The key is the path relative to ``base_path`` with separators
        normalized to ``/``. Files outside ``base_path`` keep their ``..``
        segments, matching what a relative path would give.

        Args:
            file_path: Full file path
            base_path: Base path the key is relative to

        Returns:
            Storage key
        """
        relative_path = os.path.relpath(os.fspath(file_path), os.fspath(base_path))
        return relative_path.replace(os.sep, '/')
