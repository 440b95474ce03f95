"""merkleproof core - heap-indexed Merkle trees, audit proofs and pollards."""

from merkleproof_core.config import MerkleProofConfig, load_config
from merkleproof_core.export import DotExporter, to_dot
from merkleproof_core.hashing import HashProvider, create_hash_provider
from merkleproof_core.merkle import (
    AuditProof,
    Pollard,
    PollardGenerator,
    ProofGenerator,
    ProofVerifier,
    Tree,
    TreeBuilder,
    build_tree,
    generate_pollard,
    generate_proof,
    verify_pollard,
    verify_proof,
)

__version__ = "0.1.0"

__all__ = [
    "AuditProof",
    "DotExporter",
    "HashProvider",
    "MerkleProofConfig",
    "Pollard",
    "PollardGenerator",
    "ProofGenerator",
    "ProofVerifier",
    "Tree",
    "TreeBuilder",
    "build_tree",
    "create_hash_provider",
    "generate_pollard",
    "generate_proof",
    "load_config",
    "to_dot",
    "verify_pollard",
    "verify_proof",
]
