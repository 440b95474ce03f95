"""SHA-2 and SHA-3 hash providers."""

from __future__ import annotations

import hashlib


class SHA256:
    name = "sha256"
    digest_length = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    def __repr__(self) -> str:
        return "SHA256()"


class SHA3:
    """SHA3-256 (FIPS 202). Produces different digests from Keccak256."""

    name = "sha3"
    digest_length = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha3_256(data).digest()

    def __repr__(self) -> str:
        return "SHA3()"
