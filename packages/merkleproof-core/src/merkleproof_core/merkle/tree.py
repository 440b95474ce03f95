"""Heap-indexed Merkle tree and its hashing primitives."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from merkleproof_core.hashing import HashProvider, create_hash_provider
from merkleproof_core.merkle.errors import IndexOutOfRangeError, LeafNotFoundError

logger = logging.getLogger(__name__)

# Largest leaf position representable in the 4-byte salt
MAX_SALTED_INDEX = 0xFFFFFFFF


def salt_suffix(index: int) -> bytes:
    """4-byte big-endian encoding of a leaf position."""
    if not 0 <= index <= MAX_SALTED_INDEX:
        raise ValueError(f"leaf index {index} does not fit a 32-bit salt")
    return index.to_bytes(4, "big")


def compute_leaf_hash(
    data: bytes, index: int, hash_provider: HashProvider, salt: bool = False
) -> bytes:
    """Digest stored for the leaf holding *data* at position *index*."""
    if salt:
        return hash_provider.hash(data + salt_suffix(index))
    return hash_provider.hash(data)


def compute_node_hash(left: bytes, right: bytes, hash_provider: HashProvider) -> bytes:
    """Parent digest: hash of the raw left||right concatenation."""
    return hash_provider.hash(left + right)


def padded_leaf_count(n: int) -> int:
    """Smallest power of two >= *n* (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _invalid_tree(reason: str) -> ValueError:
    logger.warning("Rejected tree document: %s", reason)
    return ValueError(f"Invalid tree document: {reason}")


class Tree:
    """Immutable Merkle tree stored as a 1-indexed heap array.

    Node ``i`` has children ``2i`` and ``2i+1``; leaf ``k`` lives at
    ``p + k`` where ``p`` is the padded leaf count.
    """

    version: int = 1

    def __init__(
        self,
        nodes: Sequence[bytes],
        leaf_count: int,
        hash_provider: HashProvider,
        salted: bool = False,
        data: Sequence[bytes] = (),
    ) -> None:
        # nodes[0] is unused so that heap indices map directly
        self._nodes = tuple(nodes)
        self._leaf_count = leaf_count
        self._padded = len(self._nodes) // 2
        self._hash_provider = hash_provider
        self._salted = salted
        self._data = tuple(bytes(d) for d in data)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        return self._nodes[1]

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def padded_leaf_count(self) -> int:
        return self._padded

    @property
    def node_count(self) -> int:
        """Number of stored digests, ``2p - 1``."""
        return len(self._nodes) - 1

    @property
    def depth(self) -> int:
        """Hops from any leaf up to the root."""
        return self._padded.bit_length() - 1

    @property
    def hash_provider(self) -> HashProvider:
        return self._hash_provider

    @property
    def salted(self) -> bool:
        return self._salted

    @property
    def data(self) -> tuple[bytes, ...]:
        return self._data

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """All digests in heap order, index 1 (root) first."""
        return self._nodes[1:]

    def size(self) -> tuple[int, int]:
        """Return ``(leaf_count, padded_leaf_count)``."""
        return self._leaf_count, self._padded

    def node_digest(self, index: int) -> bytes:
        if not 1 <= index < len(self._nodes):
            raise IndexOutOfRangeError("node", index, len(self._nodes), lower=1)
        return self._nodes[index]

    def leaf_digest(self, position: int) -> bytes:
        """Digest of leaf *position*, padding leaves included."""
        if not 0 <= position < self._padded:
            raise IndexOutOfRangeError("leaf", position, self._padded)
        return self._nodes[self._padded + position]

    def index_of(self, data: bytes) -> int:
        """Position of the first leaf holding *data*."""
        for position, leaf in enumerate(self._data):
            if leaf == data:
                return position
        raise LeafNotFoundError(data)

    def __str__(self) -> str:
        return self.root.hex()

    def __repr__(self) -> str:
        return (
            f"Tree(root={self.root.hex()}, leaves={self._leaf_count}, "
            f"hash={self._hash_provider.name}, salted={self._salted})"
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self, include_data: bool = True) -> str:
        """Serialize the digest array and its metadata to JSON."""
        data = {
            "version": self.version,
            "hash": self._hash_provider.name,
            "salted": self._salted,
            "leaf_count": self._leaf_count,
            "padded_leaf_count": self._padded,
            "root": self.root.hex(),
            "nodes": [n.hex() for n in self.nodes],
        }
        if include_data and self._data:
            data["leaves"] = [d.hex() for d in self._data]
        return json.dumps(data, indent=2)

    @classmethod
    def from_json(cls, data: str) -> Tree:
        """Deserialize a tree, checking the layout is self-consistent."""
        try:
            obj = json.loads(data)
            n = int(obj["leaf_count"])
            p = int(obj["padded_leaf_count"])
            nodes = [bytes.fromhex(h) for h in obj["nodes"]]
            leaves = [bytes.fromhex(h) for h in obj.get("leaves", [])]
            provider = create_hash_provider(obj["hash"])
            salted = bool(obj.get("salted", False))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise _invalid_tree(str(e)) from e

        if n < 1 or p != padded_leaf_count(n):
            raise _invalid_tree(f"{n} leaves cannot pad to {p}")
        if len(nodes) != 2 * p - 1:
            raise _invalid_tree(f"expected {2 * p - 1} nodes, got {len(nodes)}")
        if any(len(d) != provider.digest_length for d in nodes):
            raise _invalid_tree("digest length mismatch")
        if leaves and len(leaves) != n:
            raise _invalid_tree(f"expected {n} leaves, got {len(leaves)}")
        if "root" in obj and obj["root"] != nodes[0].hex():
            raise _invalid_tree("root does not match nodes")

        return cls(
            nodes=[b""] + nodes,
            leaf_count=n,
            hash_provider=provider,
            salted=salted,
            data=leaves,
        )

    def save(self, path: Path) -> None:
        """Write the tree to a JSON file."""
        path.write_text(self.to_json())

    @classmethod
    def load(cls, path: Path) -> Tree:
        """Read a tree from a JSON file."""
        return cls.from_json(path.read_text())
