"""Exceptions raised by the uploader."""

from typing import Optional


class UploaderError(Exception):
    """Base exception for all uploader errors."""


class ConfigurationError(UploaderError):
    """Raised when required configuration is missing or invalid."""


class LedgerSaveError(UploaderError):
    """Raised when the upload ledger could not be written.

    This is fatal for the run: without a saved ledger the next run cannot
    deduplicate anything uploaded by this one.
    """

    def __init__(self, path, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Could not save upload ledger to {path}: {error}")


class FileSyncError(UploaderError):
    """Raised when a single file could not be synced. Aborts the batch."""

    def __init__(self, key: str, message: str, error: Optional[Exception] = None):
        self.key = key
        self.error = error
        super().__init__(message)


class FileReadError(FileSyncError):
    """Raised when a local file could not be read."""

    def __init__(self, key: str, error: Exception):
        super().__init__(key, f"Failed to read {key}: {error}", error)


class UploadFailedError(FileSyncError):
    """Raised when an upload failed after exhausting all retries."""

    def __init__(self, key: str, attempts: int, error: Optional[Exception]):
        self.attempts = attempts
        super().__init__(
            key, f"Failed to upload {key} after {attempts} attempt(s): {error}", error
        )
