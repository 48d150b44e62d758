"""Hash utilities for Kit."""

import hashlib


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.

    Args:
        data: Bytes to hash

    Returns:
        40-character lowercase hex string
    """
    return hashlib.sha1(data).hexdigest()
