"""Object storage destinations."""

from .r2_bucket import ObjectStoreClient, R2BucketDestination

__all__ = ["ObjectStoreClient", "R2BucketDestination"]
