"""Sync engine for incremental uploads."""

from .ledger import UploadLedger
from .models import FileRecord, OutcomeStatus, SkipReason, SyncReport, UploadOutcome
from .upload_manager import UploadManager
from .uploader import RetryingUploader, UploadResult
from .walker import DirectoryWalker

__all__ = [
    "DirectoryWalker",
    "FileRecord",
    "OutcomeStatus",
    "RetryingUploader",
    "SkipReason",
    "SyncReport",
    "UploadLedger",
    "UploadManager",
    "UploadOutcome",
    "UploadResult",
]
