"""BLAKE2b-256 hash provider."""

from __future__ import annotations

import hashlib


class BLAKE2b:
    """General-purpose provider, BLAKE2b with a 32-byte digest."""

    name = "blake2b"
    digest_length = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=self.digest_length).digest()

    def __repr__(self) -> str:
        return "BLAKE2b()"
