"""
R2 Uploader

Incrementally uploads a local directory tree to a Cloudflare R2 bucket.
Files are deduplicated by content digest against a persisted ledger, so
only content that was never uploaded before is sent.
"""

__version__ = "1.0.0"
__author__ = "R2 Uploader"
__description__ = "Incremental, content-addressed directory upload to Cloudflare R2"

from .config.settings import UploaderConfig
from .sync.upload_manager import UploadManager

__all__ = ["UploaderConfig", "UploadManager"]
