"""Audit proof generation and verification."""

from __future__ import annotations

import logging

from merkleproof_core.hashing import HashProvider
from merkleproof_core.merkle.errors import (
    IndexOutOfRangeError,
    InvalidDepthError,
    MalformedProofError,
)
from merkleproof_core.merkle.models import AuditProof, Pollard, ProofStep, Side
from merkleproof_core.merkle.tree import (
    MAX_SALTED_INDEX,
    Tree,
    compute_leaf_hash,
    compute_node_hash,
)

logger = logging.getLogger(__name__)

# No tree can hold more than 2**64 leaves, so no path is longer than this
MAX_PATH_LEVELS = 64


def _reject(message: str) -> MalformedProofError:
    logger.warning("Rejected proof: %s", message)
    return MalformedProofError(message)


class ProofGenerator:
    """Derives sibling paths from a built tree."""

    @staticmethod
    def generate(tree: Tree, index: int, height: int = 0) -> AuditProof:
        """Collect the siblings of leaf *index*, leaf-adjacent first.

        With *height* > 0 the walk stops at the lowest level of a
        depth-*height* pollard instead of at the root.
        """
        n, p = tree.size()
        if not 0 <= index < n:
            raise IndexOutOfRangeError("leaf", index, n)
        if not 0 <= height <= tree.depth:
            raise InvalidDepthError(height, tree.depth)

        stop = 1 << height
        i = p + index
        siblings: list[ProofStep] = []
        while i >= 2 * stop:
            # An even index is a left child, so its sibling is on the right
            side = Side.RIGHT if i % 2 == 0 else Side.LEFT
            siblings.append(ProofStep(side=side, digest=tree.node_digest(i ^ 1)))
            i //= 2

        logger.debug(
            "Generated proof for leaf %d: %d siblings (height %d)",
            index, len(siblings), height,
        )
        return AuditProof(index=index, siblings=tuple(siblings), height=height)

    @staticmethod
    def generate_for(tree: Tree, data: bytes, height: int = 0) -> AuditProof:
        """Generate a proof for the first leaf holding *data*."""
        return ProofGenerator.generate(tree, tree.index_of(data), height)


class ProofVerifier:
    """Recomputes a root (or pollard entry) from a leaf and its proof."""

    def __init__(self, hash_provider: HashProvider, salt: bool = False) -> None:
        self.hash_provider = hash_provider
        self.salt = salt

    def check_shape(self, proof: AuditProof) -> None:
        """Raise MalformedProofError if *proof* cannot describe any tree."""
        if proof.index < 0 or proof.height < 0:
            raise _reject(
                f"negative index or height: index={proof.index}, height={proof.height}"
            )
        levels = len(proof.siblings) + proof.height
        if levels > MAX_PATH_LEVELS:
            raise _reject(
                f"path of {levels} levels exceeds the {MAX_PATH_LEVELS}-level limit"
            )
        span = 1 << levels
        if proof.index >= span:
            raise _reject(
                f"index {proof.index} does not fit a path of {len(proof.siblings)} "
                f"siblings at height {proof.height}"
            )
        if self.salt and proof.index > MAX_SALTED_INDEX:
            raise _reject(f"index {proof.index} exceeds the 32-bit salt")

        i = span + proof.index
        for depth, step in enumerate(proof.siblings):
            if len(step.digest) != self.hash_provider.digest_length:
                raise _reject(
                    f"sibling {depth} is {len(step.digest)} bytes, "
                    f"expected {self.hash_provider.digest_length}"
                )
            expected = Side.RIGHT if i % 2 == 0 else Side.LEFT
            if step.side is not expected:
                raise _reject(
                    f"sibling {depth} recorded on the {step.side.value}, "
                    f"expected {expected.value}"
                )
            i //= 2

    def verify(self, data: bytes, proof: AuditProof, target: bytes | Pollard) -> bool:
        """Return True when *data* at *proof.index* folds up to *target*.

        *target* is either the root digest or a Pollard; in the latter
        case folding stops at the first index the pollard covers.
        """
        self.check_shape(proof)
        anchors = target.digests if isinstance(target, Pollard) else (bytes(target),)
        covered = len(anchors)

        i = (1 << (len(proof.siblings) + proof.height)) + proof.index
        current = compute_leaf_hash(data, proof.index, self.hash_provider, self.salt)
        for step in proof.siblings:
            if i <= covered:
                break
            if step.side is Side.RIGHT:
                current = compute_node_hash(current, step.digest, self.hash_provider)
            else:
                current = compute_node_hash(step.digest, current, self.hash_provider)
            i //= 2

        if i > covered:
            logger.debug("Proof for leaf %d ends below the pollard", proof.index)
            return False
        return current == anchors[i - 1]


def generate_proof(tree: Tree, index: int, height: int = 0) -> AuditProof:
    """Convenience wrapper around ProofGenerator.generate()."""
    return ProofGenerator.generate(tree, index, height)


def generate_proof_for(tree: Tree, data: bytes, height: int = 0) -> AuditProof:
    """Convenience wrapper around ProofGenerator.generate_for()."""
    return ProofGenerator.generate_for(tree, data, height)


def verify_proof(
    data: bytes,
    proof: AuditProof,
    target: bytes | Pollard,
    hash_provider: HashProvider,
    salt: bool = False,
) -> bool:
    """Convenience wrapper around ProofVerifier.verify()."""
    return ProofVerifier(hash_provider, salt).verify(data, proof, target)
