"""Content fingerprinting used as the deduplication key."""

import hashlib


def compute_fingerprint(data: bytes) -> str:
    """Return the SHA-256 hex digest of ``data``.

    The digest is unsalted, so identical bytes map to the same fingerprint
    across calls and process restarts.
    """
    return hashlib.sha256(data).hexdigest()
