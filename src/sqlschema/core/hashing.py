"""
Deterministic checksums for update files.

The checksum of an update is the SHA-1 hex digest of the file's raw bytes.
It is computed once at load time and compared against the value stored in
the applied log; a difference means the file changed after it was applied.

Examples:
    >>> compute_checksum(b"abc")
    'a9993e364706816aba3e25717850c26c9cd0d89d'
    >>> compute_checksum(b"x") == compute_checksum(b"x")
    True

Tags:
    hashing, checksum, sha1, sqlschema
"""

import hashlib

CHECKSUM_LENGTH = 40


def compute_checksum(data: bytes) -> str:
    """
    Compute the hex checksum of raw file contents.

    SHA-1 keeps checksums identical to those already stored in existing
    ``schema_updates`` tables.

    Args:
        data: Raw file bytes (never decoded text)

    Returns:
        40-char lowercase hex string
    """
    return hashlib.sha1(data).hexdigest()
