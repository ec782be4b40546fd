"""Cloud storage authentication handling."""

import logging
from typing import Optional

import boto3

from ..config.settings import CredentialsConfig
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class R2Auth:
    """Handle Cloudflare R2 authentication and S3 client creation."""

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        region: str = "auto"
    ):
        """Initialize R2 authentication.

        Args:
            endpoint_url: S3-compatible endpoint of the R2 account
            access_key_id: R2 access key ID
            secret_access_key: R2 secret access key
            region: Region name, ``auto`` for R2
        """
        self.endpoint_url = endpoint_url
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.region = region
        self._s3_client = None

    def get_s3_client(self):
        """Get authenticated S3 client.

        Returns:
            boto3 S3 client
        """
        if self._s3_client is None:
            if not self.endpoint_url:
                raise ConfigurationError(
                    "Please set the CF_ACCOUNT_ID (or CF_ENDPOINT_URL) environment variable"
                )
            # Use provided credentials or fall back to default credential chain
            if self.access_key_id and self.secret_access_key:
                self._s3_client = boto3.client(
                    's3',
                    endpoint_url=self.endpoint_url,
                    aws_access_key_id=self.access_key_id,
                    aws_secret_access_key=self.secret_access_key,
                    region_name=self.region
                )
            else:
                self._s3_client = boto3.client(
                    's3', endpoint_url=self.endpoint_url, region_name=self.region
                )
            logger.debug(f"Created S3 client for {self.endpoint_url}")

        return self._s3_client

    def test_connection(self, bucket_name: str) -> bool:
        """Test the connection by checking if the bucket is accessible.

        Args:
            bucket_name: Name of the bucket to test

        Returns:
            True if connection successful, False otherwise
        """
        try:
            s3_client = self.get_s3_client()
            s3_client.head_bucket(Bucket=bucket_name)
            return True
        except Exception as e:
            logger.error(f"Failed to connect to bucket {bucket_name}: {e}")
            return False

    @classmethod
    def from_credentials(cls, credentials: CredentialsConfig) -> "R2Auth":
        """Create R2 auth from a credentials configuration.

        Args:
            credentials: Credentials configuration

        Returns:
            R2Auth instance
        """
        return cls(
            endpoint_url=credentials.resolved_endpoint(),
            access_key_id=credentials.access_key_id,
            secret_access_key=credentials.secret_access_key,
            region=credentials.region
        )
