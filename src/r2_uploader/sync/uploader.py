"""Upload with bounded retries and exponential backoff."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..destinations.r2_bucket import ObjectStoreClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0  # seconds


@dataclass
class UploadResult:
    """Result of one upload including all of its retries."""
    success: bool
    attempts: int
    error: Optional[Exception] = None


class RetryingUploader:
    """Wraps an object store client with retry and exponential backoff.

    Every error kind is retried the same way; the uploader reports failure
    and leaves the decision to abort to the caller.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the uploader.

        Args:
            client: Object store client performing the actual writes
            max_attempts: Total number of attempts, including the first
            base_delay: Wait after the first failure, doubled after each one
            sleep: Coroutine used to wait between attempts
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay to wait after failed attempt number ``attempt`` (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))

    async def upload(self, bucket: str, key: str, body: bytes, content_type: str) -> UploadResult:
        """Upload one object, retrying on failure.

        ``body`` is held in memory and resent unchanged on every attempt.

        Args:
            bucket: Target bucket
            key: Object key
            body: Full object content
            content_type: MIME type

        Returns:
            UploadResult; on failure it carries the last error seen
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                await self.client.put(bucket, key, body, content_type)
                if attempt > 1:
                    logger.info(f"Uploaded {key} on attempt {attempt}")
                return UploadResult(success=True, attempts=attempt)
            except Exception as e:
                last_error = e
                if attempt < self.max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        f"Upload of {key} failed (attempt {attempt}/{self.max_attempts}): {e} "
                        f"- retrying in {delay:.1f}s"
                    )
                    await self._sleep(delay)
                else:
                    logger.error(f"Upload of {key} failed after {attempt} attempt(s): {e}")

        return UploadResult(success=False, attempts=self.max_attempts, error=last_error)
