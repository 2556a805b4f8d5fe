"""Content hashing for change detection."""

from __future__ import annotations

import hashlib


def content_hash(content: str) -> str:
    """Return the SHA-256 hex digest of text content (UTF-8 encoded)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
