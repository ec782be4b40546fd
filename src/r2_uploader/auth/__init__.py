"""Authentication module for cloud storage."""

from .cloud_auth import R2Auth

__all__ = ["R2Auth"]
