"""Builder for constructing Merkle trees from an ordered list of blocks."""

from __future__ import annotations

import logging
from typing import Sequence

from merkleproof_core.hashing import HashProvider, create_hash_provider
from merkleproof_core.merkle.errors import EmptyInputError
from merkleproof_core.merkle.tree import (
    MAX_SALTED_INDEX,
    Tree,
    compute_leaf_hash,
    compute_node_hash,
    padded_leaf_count,
)

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds an immutable Tree over a fixed sequence of data blocks."""

    def __init__(self, hash_provider: HashProvider | None = None, salt: bool = False) -> None:
        self.hash_provider = hash_provider or create_hash_provider()
        self.salt = salt

    def build(self, leaves: Sequence[bytes] | None) -> Tree:
        """Hash *leaves* into a full binary tree.

        The leaf count is padded up to a power of two with all-zero
        digests, which are stored as-is rather than hashed. Internal
        nodes are then filled bottom-up, one level at a time.
        """
        if not leaves:
            raise EmptyInputError()

        data = [bytes(leaf) for leaf in leaves]
        n = len(data)
        if self.salt and n - 1 > MAX_SALTED_INDEX:
            raise ValueError(f"cannot salt {n} leaves with a 32-bit index")

        p = padded_leaf_count(n)
        provider = self.hash_provider
        logger.debug(
            "Building tree: %d leaves padded to %d (hash=%s, salt=%s)",
            n, p, provider.name, self.salt,
        )

        nodes: list[bytes] = [b""] * (2 * p)

        # Leaf level
        for k, block in enumerate(data):
            nodes[p + k] = compute_leaf_hash(block, k, provider, self.salt)
        zero = bytes(provider.digest_length)
        for k in range(n, p):
            nodes[p + k] = zero

        # Internal levels, children before parents
        level_start = p
        while level_start > 1:
            level_start //= 2
            for i in range(level_start, 2 * level_start):
                nodes[i] = compute_node_hash(nodes[2 * i], nodes[2 * i + 1], provider)

        tree = Tree(
            nodes=nodes,
            leaf_count=n,
            hash_provider=provider,
            salted=self.salt,
            data=data,
        )
        logger.debug("Built tree with root %s", tree.root.hex())
        return tree
