"""Content digests used as deduplication keys."""

import hashlib
from pathlib import Path
from typing import Union


def compute_digest(data: bytes) -> str:
    """Return the SHA-256 hex digest of the full byte content.

    The digest depends on the bytes only, never on name, path or
    modification time.
    """
    return hashlib.sha256(data).hexdigest()


def calculate_file_hash(file_path: Union[str, Path], chunk_size: int = 64 * 1024) -> str:
    """Calculate the SHA-256 hash of a file by streaming it.

    Args:
        file_path: Path to the file
        chunk_size: Size of chunks to read

    Returns:
        SHA-256 hash as hex string
    """
    hash_sha256 = hashlib.sha256()

    with open(file_path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hash_sha256.update(chunk)

    return hash_sha256.hexdigest()
