"""Merkle tree construction, audit proofs and pollards."""

from __future__ import annotations

from typing import Sequence

from merkleproof_core.hashing import HashProvider
from merkleproof_core.merkle.builder import TreeBuilder
from merkleproof_core.merkle.errors import (
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidDepthError,
    LeafNotFoundError,
    MalformedProofError,
    MerkleError,
)
from merkleproof_core.merkle.models import AuditProof, Pollard, ProofStep, Side
from merkleproof_core.merkle.pollard import (
    PollardGenerator,
    generate_pollard,
    verify_pollard,
)
from merkleproof_core.merkle.proof import (
    ProofGenerator,
    ProofVerifier,
    generate_proof,
    generate_proof_for,
    verify_proof,
)
from merkleproof_core.merkle.tree import (
    Tree,
    compute_leaf_hash,
    compute_node_hash,
    padded_leaf_count,
)


def build_tree(
    leaves: Sequence[bytes],
    hash_provider: HashProvider | None = None,
    salt: bool = False,
) -> Tree:
    """Convenience wrapper around TreeBuilder.build()."""
    return TreeBuilder(hash_provider, salt).build(leaves)


__all__ = [
    "AuditProof",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "InvalidDepthError",
    "LeafNotFoundError",
    "MalformedProofError",
    "MerkleError",
    "Pollard",
    "PollardGenerator",
    "ProofGenerator",
    "ProofStep",
    "ProofVerifier",
    "Side",
    "Tree",
    "TreeBuilder",
    "build_tree",
    "compute_leaf_hash",
    "compute_node_hash",
    "generate_pollard",
    "generate_proof",
    "generate_proof_for",
    "padded_leaf_count",
    "verify_pollard",
    "verify_proof",
]
