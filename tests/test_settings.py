"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from r2_uploader.config.settings import CredentialsConfig, SyncOptions, UploaderConfig
from r2_uploader.exceptions import ConfigurationError


class TestCredentialsConfig:
    """Test CredentialsConfig functionality."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CF_ACCOUNT_ID", "abc123")
        monkeypatch.setenv("CF_ACCESS_KEY_ID", "key")
        monkeypatch.setenv("CF_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("CF_BUCKET_NAME", "my-book")

        creds = CredentialsConfig.from_env()

        assert creds.account_id == "abc123"
        assert creds.access_key_id == "key"
        assert creds.secret_access_key == "secret"
        assert creds.bucket == "my-book"
        assert creds.region == "auto"
        assert creds.resolved_endpoint() == "https://abc123.r2.cloudflarestorage.com"

    def test_endpoint_override(self):
        creds = CredentialsConfig(account_id="abc", endpoint_url="http://localhost:9000")
        assert creds.resolved_endpoint() == "http://localhost:9000"

    def test_no_endpoint_without_account(self):
        assert CredentialsConfig().resolved_endpoint() is None

    def test_empty_env_values_are_ignored(self, monkeypatch):
        monkeypatch.setenv("CF_BUCKET_NAME", "")
        assert CredentialsConfig.from_env().bucket is None

    def test_merge_prefers_explicit_values(self):
        base = CredentialsConfig(bucket="from-file", region="weur")
        merged = base.merged_with(CredentialsConfig(bucket="from-env"))

        assert merged.bucket == "from-env"
        assert merged.region == "weur"


class TestUploaderConfig:
    """Test UploaderConfig functionality."""

    def test_defaults(self):
        config = UploaderConfig()

        assert config.source_dir == "./book"
        assert config.sync_options.retry_attempts == 3
        assert config.sync_options.retry_delay == 1.0
        assert config.sync_options.ledger_path == "hash.bin"
        assert config.bucket is None

    def test_require_bucket(self):
        with pytest.raises(ConfigurationError, match="CF_BUCKET_NAME"):
            UploaderConfig().require_bucket()

        config = UploaderConfig(credentials=CredentialsConfig(bucket="b"))
        assert config.require_bucket() == "b"

    def test_invalid_sync_options(self):
        with pytest.raises(ValidationError):
            SyncOptions(retry_attempts=0)
        with pytest.raises(ValidationError):
            SyncOptions(max_concurrency=-1)

    def test_yaml_round_trip_with_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "config" / "uploader.yaml"
        UploaderConfig(
            source_dir="site",
            credentials=CredentialsConfig(bucket="file-bucket", account_id="acct"),
            sync_options=SyncOptions(max_concurrency=4),
        ).to_yaml(path)
        monkeypatch.setenv("CF_BUCKET_NAME", "env-bucket")

        config = UploaderConfig.from_yaml(path)

        assert config.source_dir == "site"
        assert config.sync_options.max_concurrency == 4
        assert config.credentials.account_id == "acct"
        assert config.bucket == "env-bucket"

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            UploaderConfig.from_yaml(tmp_path / "nope.yaml")

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert UploaderConfig.from_yaml(path).source_dir == "./book"
