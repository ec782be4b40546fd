"""Configuration settings and models for the uploader."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

from ..exceptions import ConfigurationError

DEFAULT_SOURCE_DIR = "./book"
DEFAULT_LEDGER_PATH = "hash.bin"

# Field name -> environment variable
ENV_VARS = {
    'account_id': 'CF_ACCOUNT_ID',
    'access_key_id': 'CF_ACCESS_KEY_ID',
    'secret_access_key': 'CF_SECRET_ACCESS_KEY',
    'bucket': 'CF_BUCKET_NAME',
    'region': 'CF_REGION',
    'endpoint_url': 'CF_ENDPOINT_URL',
}


class CredentialsConfig(BaseModel):
    """Cloudflare R2 connection settings."""
    account_id: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    bucket: Optional[str] = None
    region: str = "auto"
    endpoint_url: Optional[str] = None  # Overrides the account endpoint

    def resolved_endpoint(self) -> Optional[str]:
        """Return the S3 endpoint URL for this account."""
        if self.endpoint_url:
            return self.endpoint_url
        if self.account_id:
            return f"https://{self.account_id}.r2.cloudflarestorage.com"
        return None

    @classmethod
    def from_env(cls) -> "CredentialsConfig":
        """Load credentials from environment variables.

        Only variables that are set and non-empty are applied, so the
        result can be merged over a file-based configuration.
        """
        values = {
            field: os.environ[var] for field, var in ENV_VARS.items() if os.getenv(var)
        }
        return cls(**values)

    def merged_with(self, other: "CredentialsConfig") -> "CredentialsConfig":
        """Return a copy where every value explicitly set in ``other`` wins."""
        return self.model_copy(update=other.model_dump(exclude_unset=True))


class SyncOptions(BaseModel):
    """Synchronization options."""
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=1.0, ge=0)  # seconds, doubled per attempt
    max_concurrency: int = Field(default=16, ge=0)  # 0 means unbounded
    ledger_path: str = DEFAULT_LEDGER_PATH


class UploaderConfig(BaseModel):
    """Main configuration class."""
    source_dir: str = DEFAULT_SOURCE_DIR
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    sync_options: SyncOptions = Field(default_factory=SyncOptions)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def bucket(self) -> Optional[str]:
        return self.credentials.bucket

    def require_bucket(self) -> str:
        """Return the bucket name or fail before any I/O happens."""
        if not self.credentials.bucket:
            raise ConfigurationError(
                "Please set the CF_BUCKET_NAME environment variable"
            )
        return self.credentials.bucket

    @classmethod
    def from_env(cls) -> "UploaderConfig":
        """Build a configuration from environment variables only."""
        return cls(credentials=CredentialsConfig.from_env())

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "UploaderConfig":
        """Load configuration from YAML file.

        Credentials found in the environment take precedence over the file.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        config = cls(**config_data)
        config.credentials = config.credentials.merged_with(CredentialsConfig.from_env())
        return config

    def to_yaml(self, config_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.model_dump(exclude_none=True), f, default_flow_style=False, indent=2)
