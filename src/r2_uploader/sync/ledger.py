"""Persisted ledger of content digests that were already uploaded."""

import logging
import os
import re
import threading
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set, Union

from ..exceptions import LedgerSaveError

logger = logging.getLogger(__name__)

DIGEST_PATTERN = re.compile(r'^[0-9a-f]{64}$')


class UploadLedger:
    """Set of digests whose content is confirmed written to the bucket.

    A digest is recorded only after the remote write for it was
    acknowledged. The in-memory set is shared by all concurrent upload tasks,
    so every mutation happens under a lock.
    """

    def __init__(self, digests: Optional[Iterable[str]] = None,
                 path: Optional[Union[str, Path]] = None):
        """Initialize the ledger.

        Args:
            digests: Initial digests
            path: Where the ledger was loaded from and is saved to by default
        """
        self.path = Path(path) if path is not None else None
        self._digests: Set[str] = set(digests or ())
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Union[str, Path]) -> "UploadLedger":
        """Load a ledger from disk.

        A missing or unreadable file is not an error: the ledger starts
        empty, as on a first-ever run.

        Args:
            path: Path to the ledger file

        Returns:
            Loaded (or empty) ledger
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No upload ledger at {path}, starting with an empty ledger")
            return cls(path=path)

        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read upload ledger {path}: {e} - starting with an empty ledger")
            return cls(path=path)

        digests = set()
        ignored = 0
        for line in text.split('\n'):
            line = line.strip().lower()
            if not line:
                continue
            if DIGEST_PATTERN.match(line):
                digests.add(line)
            else:
                ignored += 1

        if ignored:
            logger.warning(f"Ignored {ignored} malformed line(s) in upload ledger {path}")
        logger.info(f"Loaded {len(digests)} digest(s) from {path}")
        return cls(digests, path=path)

    def contains(self, digest: str) -> bool:
        """Check whether content with this digest was already uploaded."""
        return digest in self._digests

    def record(self, digest: str) -> None:
        """Record a digest. Recording the same digest twice is a no-op."""
        with self._lock:
            self._digests.add(digest)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the full ledger to disk, replacing any previous file.

        Args:
            path: Destination, defaults to the path the ledger was loaded from

        Returns:
            The path written

        Raises:
            LedgerSaveError: If the ledger could not be written
        """
        path = Path(path) if path is not None else self.path
        if path is None:
            raise LedgerSaveError(path, ValueError("no ledger path configured"))

        with self._lock:
            content = '\n'.join(sorted(self._digests))

        tmp_path = path.with_name(path.name + '.tmp')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding='utf-8')
            os.replace(tmp_path, path)
        except OSError as e:
            raise LedgerSaveError(path, e) from e

        logger.info(f"Saved {len(self)} digest(s) to {path}")
        return path

    def __contains__(self, digest: object) -> bool:
        return digest in self._digests

    def __len__(self) -> int:
        return len(self._digests)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._digests))
