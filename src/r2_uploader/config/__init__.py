"""Configuration management for the uploader."""

from .settings import CredentialsConfig, SyncOptions, UploaderConfig

__all__ = ["CredentialsConfig", "SyncOptions", "UploaderConfig"]
