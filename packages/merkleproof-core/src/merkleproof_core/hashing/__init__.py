"""Pluggable hash providers for tree construction and proof verification."""

from merkleproof_core.hashing.base import HashProvider
from merkleproof_core.hashing.blake2b import BLAKE2b
from merkleproof_core.hashing.keccak256 import Keccak256
from merkleproof_core.hashing.sha import SHA3, SHA256

_PROVIDER_MAP: dict[str, type] = {
    "blake2b": BLAKE2b,
    "keccak256": Keccak256,
    "sha256": SHA256,
    "sha3": SHA3,
}

DEFAULT_HASH = "blake2b"


def available_hash_providers() -> list[str]:
    """Names accepted by create_hash_provider(), in registration order."""
    return list(_PROVIDER_MAP)


def create_hash_provider(name: str = DEFAULT_HASH) -> HashProvider:
    """Create a hash provider from its configured name."""
    cls = _PROVIDER_MAP.get(name.lower()) if isinstance(name, str) else None
    if cls is None:
        raise ValueError(
            f"Unsupported hash provider: {name!r}. "
            f"Supported: {', '.join(_PROVIDER_MAP)}"
        )
    return cls()


__all__ = [
    "BLAKE2b",
    "DEFAULT_HASH",
    "HashProvider",
    "Keccak256",
    "SHA256",
    "SHA3",
    "available_hash_providers",
    "create_hash_provider",
]
