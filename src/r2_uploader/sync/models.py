"""Records and outcomes passed between the sync components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class FileRecord:
    """A regular file discovered by the directory walker."""
    absolute_path: str
    storage_key: str
    content_type: str


class OutcomeStatus(str, Enum):
    """What happened to a single file."""
    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"
    PLANNED = "planned"  # dry run: would have been uploaded


class SkipReason(str, Enum):
    """Why a file was skipped."""
    DUPLICATE = "duplicate"
    EMPTY = "empty"


@dataclass(frozen=True)
class UploadOutcome:
    """Per-file result produced by the upload manager."""
    key: str
    status: OutcomeStatus
    reason: Optional[SkipReason] = None
    size: int = 0
    digest: Optional[str] = None
    attempts: int = 0
    error: Optional[BaseException] = None

    @classmethod
    def skipped(cls, key: str, reason: SkipReason, size: int = 0,
                digest: Optional[str] = None) -> "UploadOutcome":
        return cls(key=key, status=OutcomeStatus.SKIPPED, reason=reason, size=size, digest=digest)

    @classmethod
    def uploaded(cls, key: str, size: int, digest: str, attempts: int) -> "UploadOutcome":
        return cls(key=key, status=OutcomeStatus.UPLOADED, size=size, digest=digest, attempts=attempts)

    @classmethod
    def planned(cls, key: str, size: int, digest: str) -> "UploadOutcome":
        return cls(key=key, status=OutcomeStatus.PLANNED, size=size, digest=digest)

    @classmethod
    def failed(cls, key: str, error: Optional[BaseException], attempts: int) -> "UploadOutcome":
        return cls(key=key, status=OutcomeStatus.FAILED, error=error, attempts=attempts)


@dataclass
class SyncReport:
    """Aggregated results of one sync pass."""
    root: str
    bucket: str
    dry_run: bool = False
    outcomes: List[UploadOutcome] = field(default_factory=list)
    duration: float = 0.0
    ledger_saved: bool = False

    def count(self, status: OutcomeStatus, reason: Optional[SkipReason] = None) -> int:
        return len([
            o for o in self.outcomes
            if o.status == status and (reason is None or o.reason == reason)
        ])

    @property
    def files_processed(self) -> int:
        return len(self.outcomes)

    @property
    def files_uploaded(self) -> int:
        return self.count(OutcomeStatus.UPLOADED)

    @property
    def files_planned(self) -> int:
        return self.count(OutcomeStatus.PLANNED)

    @property
    def files_skipped_duplicate(self) -> int:
        return self.count(OutcomeStatus.SKIPPED, SkipReason.DUPLICATE)

    @property
    def files_skipped_empty(self) -> int:
        return self.count(OutcomeStatus.SKIPPED, SkipReason.EMPTY)

    @property
    def bytes_transferred(self) -> int:
        return sum(o.size for o in self.outcomes if o.status == OutcomeStatus.UPLOADED)

    @property
    def succeeded(self) -> bool:
        return all(o.status != OutcomeStatus.FAILED for o in self.outcomes)
