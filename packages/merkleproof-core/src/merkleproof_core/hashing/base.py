"""Hash provider interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class HashProvider(Protocol):
    """A fixed-length hash function the tree is built with.

    ``hash()`` must always return exactly ``digest_length`` bytes.
    """

    name: str
    digest_length: int

    def hash(self, data: bytes) -> bytes: ...
