"""Keccak-256 hash provider (EVM compatible)."""

from __future__ import annotations

from eth_utils import keccak


class Keccak256:
    """Legacy Keccak-256 as used by Ethereum, not the final SHA3-256."""

    name = "keccak256"
    digest_length = 32

    def hash(self, data: bytes) -> bytes:
        return keccak(data)

    def __repr__(self) -> str:
        return "Keccak256()"
