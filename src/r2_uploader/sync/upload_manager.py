"""Upload manager orchestrating one incremental sync pass."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from ..auth.cloud_auth import R2Auth
from ..config.settings import UploaderConfig
from ..destinations.r2_bucket import ObjectStoreClient, R2BucketDestination
from ..exceptions import FileReadError, UploadFailedError
from ..utils.logging import TimedOperation
from .hasher import compute_digest
from .ledger import UploadLedger
from .models import FileRecord, OutcomeStatus, SkipReason, SyncReport, UploadOutcome
from .uploader import RetryingUploader
from .walker import DirectoryWalker

# Module logger
logger = logging.getLogger(__name__)


class UploadManager:
    """Drives a sync pass: load ledger, walk, dedup, upload, save ledger.

    The manager owns the ledger. Digests are recorded only after the bucket
    acknowledged the write, and the ledger is saved only when every file in
    the tree was uploaded or skipped. If any file fails the whole batch
    fails and the ledger file is left untouched, so uploads that did succeed
    in that batch are repeated on the next run.
    """

    def __init__(
        self,
        config: UploaderConfig,
        client: Optional[ObjectStoreClient] = None,
        ledger: Optional[UploadLedger] = None,
        walker: Optional[DirectoryWalker] = None,
        uploader: Optional[RetryingUploader] = None,
    ):
        """Initialize upload manager.

        Args:
            config: Uploader configuration
            client: Object store client, defaults to an R2 bucket destination
            ledger: Preloaded ledger, loaded from the configured path if omitted
            walker: Directory walker, keys relative to the cwd if omitted
            uploader: Retrying uploader wrapping ``client``
        """
        self.config = config
        options = config.sync_options
        self._client = client
        self.ledger = ledger
        self.walker = walker or DirectoryWalker(max_concurrency=options.max_concurrency)
        self._uploader = uploader
        # Digests being uploaded right now, resolved when that upload finishes
        self._in_flight: Dict[str, asyncio.Future] = {}
        self._planned: Set[str] = set()

    @property
    def uploader(self) -> RetryingUploader:
        if self._uploader is None:
            options = self.config.sync_options
            self._uploader = RetryingUploader(
                self._get_client(),
                max_attempts=options.retry_attempts,
                base_delay=options.retry_delay,
            )
        return self._uploader

    def _get_client(self) -> ObjectStoreClient:
        if self._client is None:
            auth = R2Auth.from_credentials(self.config.credentials)
            self._client = R2BucketDestination(auth)
        return self._client

    async def run(self, root: Optional[Union[str, Path]] = None, dry_run: bool = False) -> SyncReport:
        """Run one complete sync pass.

        Args:
            root: Directory to upload, defaults to the configured source dir
            dry_run: Hash and compare only; upload nothing and keep the ledger file

        Returns:
            SyncReport for the pass

        Raises:
            ConfigurationError: If no bucket is configured (raised before any I/O)
            FileSyncError: If a file could not be read or uploaded
            LedgerSaveError: If the ledger could not be written
        """
        bucket = self.config.require_bucket()
        root = root if root is not None else self.config.source_dir
        report = SyncReport(root=os.fspath(root), bucket=bucket, dry_run=dry_run)

        timer = TimedOperation(logger, f"upload of {root} to bucket {bucket}")
        with timer:
            self._planned.clear()
            if self.ledger is None:
                self.ledger = UploadLedger.load(self.config.sync_options.ledger_path)

            records = await self.walker.walk(root)
            report.outcomes = await self._process_batch(bucket, records, dry_run)

            if dry_run:
                logger.info("[DRY RUN] Upload ledger not saved")
            else:
                self.ledger.save()
                report.ledger_saved = True

        report.duration = timer.duration
        return report

    async def _process_batch(self, bucket: str, records: List[FileRecord],
                             dry_run: bool) -> List[UploadOutcome]:
        """Process all records concurrently; the first failure fails the batch."""
        limit = self.config.sync_options.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def process(record: FileRecord) -> UploadOutcome:
            if semaphore is None:
                outcome = await self.process_file(bucket, record, dry_run)
            else:
                async with semaphore:
                    outcome = await self.process_file(bucket, record, dry_run)
            if outcome.status == OutcomeStatus.FAILED:
                raise UploadFailedError(outcome.key, outcome.attempts, outcome.error) from outcome.error
            return outcome

        return list(await asyncio.gather(*(process(record) for record in records)))

    async def process_file(self, bucket: str, record: FileRecord,
                           dry_run: bool = False) -> UploadOutcome:
        """Sync a single file.

        Args:
            bucket: Target bucket
            record: File to sync
            dry_run: Report what would be uploaded without uploading

        Returns:
            UploadOutcome for the file

        Raises:
            FileReadError: If the file could not be read
        """
        key = record.storage_key
        try:
            content = await asyncio.to_thread(Path(record.absolute_path).read_bytes)
        except OSError as e:
            logger.error(f"Failed to read {key}: {e}")
            raise FileReadError(key, e) from e

        if not content:
            logger.info(f"Skipping {key} (empty file)")
            return UploadOutcome.skipped(key, SkipReason.EMPTY)

        digest = await asyncio.to_thread(compute_digest, content)

        if dry_run:
            if self.ledger.contains(digest) or digest in self._planned:
                logger.info(f"Skipping {key} (already uploaded)")
                return UploadOutcome.skipped(key, SkipReason.DUPLICATE, len(content), digest)
            self._planned.add(digest)
            logger.info(f"[DRY RUN] Would upload: {key} ({len(content):,} bytes)")
            return UploadOutcome.planned(key, len(content), digest)

        # Another file with the same content may be uploading; wait for it
        # and only upload ourselves if that attempt failed.
        while True:
            if self.ledger.contains(digest):
                logger.info(f"Skipping {key} (already uploaded)")
                return UploadOutcome.skipped(key, SkipReason.DUPLICATE, len(content), digest)
            pending = self._in_flight.get(digest)
            if pending is None:
                break
            await asyncio.shield(pending)

        claim = asyncio.get_running_loop().create_future()
        self._in_flight[digest] = claim
        try:
            logger.info(f"Uploading {key} ({len(content):,} bytes)...")
            result = await self.uploader.upload(bucket, key, content, record.content_type)
            if result.success:
                self.ledger.record(digest)
        finally:
            del self._in_flight[digest]
            if not claim.done():
                claim.set_result(None)

        if not result.success:
            return UploadOutcome.failed(key, result.error, result.attempts)

        logger.info(f"Uploaded {key} and recorded hash")
        return UploadOutcome.uploaded(key, len(content), digest, result.attempts)
