"""Pollard derivation and consistency checks."""

from __future__ import annotations

import logging

from merkleproof_core.hashing import HashProvider
from merkleproof_core.merkle.errors import InvalidDepthError
from merkleproof_core.merkle.models import Pollard
from merkleproof_core.merkle.tree import Tree, compute_node_hash

logger = logging.getLogger(__name__)


class PollardGenerator:
    """Flattens the top levels of a tree into a Pollard."""

    @staticmethod
    def generate(tree: Tree, depth: int) -> Pollard:
        """Digests at indices ``[1, 2**(depth+1) - 1]``, root first."""
        if not 0 <= depth <= tree.depth:
            raise InvalidDepthError(depth, tree.depth)
        count = (1 << (depth + 1)) - 1
        logger.debug("Generated pollard of depth %d (%d digests)", depth, count)
        return Pollard(tree.nodes[:count])


def generate_pollard(tree: Tree, depth: int) -> Pollard:
    """Convenience wrapper around PollardGenerator.generate()."""
    return PollardGenerator.generate(tree, depth)


def verify_pollard(pollard: Pollard, hash_provider: HashProvider) -> bool:
    """Check every internal pollard entry against its two children."""
    digests = pollard.digests
    for i in range(1, (len(digests) + 1) // 2):
        expected = compute_node_hash(digests[2 * i - 1], digests[2 * i], hash_provider)
        if digests[i - 1] != expected:
            logger.debug("Pollard entry %d does not match its children", i)
            return False
    return True
