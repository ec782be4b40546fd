"""Cloudflare R2 bucket destination handler."""

import asyncio
from typing import Any, Dict, Protocol

from ..auth.cloud_auth import R2Auth


class ObjectStoreClient(Protocol):
    """Anything that can store one object in a bucket.

    ``put`` returns on success and raises on any transport or service error.
    """

    async def put(self, bucket: str, key: str, body: bytes, content_type: str) -> Any:
        ...


class R2BucketDestination:
    """R2 (S3-compatible) destination using boto3 ``put_object``."""

    def __init__(self, auth: R2Auth):
        """Initialize R2 destination.

        Args:
            auth: R2 authentication handler
        """
        self.auth = auth

    async def put(self, bucket: str, key: str, body: bytes, content_type: str) -> Dict[str, Any]:
        """Write one object.

        The blocking boto3 call runs in a worker thread so the event loop
        keeps serving other files while the request is in flight.

        Args:
            bucket: Target bucket name
            key: Object key
            body: Full object content
            content_type: MIME type of the object

        Returns:
            The ``put_object`` response
        """
        client = self.auth.get_s3_client()
        return await asyncio.to_thread(
            client.put_object,
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    def test_connection(self, bucket: str) -> bool:
        """Test connection to the bucket."""
        return self.auth.test_connection(bucket)
