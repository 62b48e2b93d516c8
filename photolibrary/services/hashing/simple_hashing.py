from __future__ import annotations

import hashlib

from photolibrary.domain.ports.hashing import HashingPort


class SimpleHashing(HashingPort):
    """SHA-256 of an asset identifier; names every cache entry for that asset."""

    def sha256_text(self, value: str) -> str:
        return hashlib.sha256(value.encode("utf-8")).hexdigest()
