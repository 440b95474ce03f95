"""Exceptions raised by tree construction, proofs and pollards."""

from __future__ import annotations


class MerkleError(Exception):
    """Base class for all merkleproof errors."""


class EmptyInputError(MerkleError, ValueError):
    """Raised when a tree is requested over zero leaves."""

    def __init__(self) -> None:
        super().__init__("tree must have at least 1 piece of data")


class IndexOutOfRangeError(MerkleError, IndexError):
    """Raised when a leaf position or node index is outside the tree."""

    def __init__(self, kind: str, index: int, upper: int, lower: int = 0):
        self.kind = kind
        self.index = index
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"{kind} index {index} out of range [{lower}, {upper})"
        )


class InvalidDepthError(MerkleError, ValueError):
    """Raised when a pollard or proof height does not fit the tree."""

    def __init__(self, depth: int, max_depth: int | None = None, msg: str | None = None):
        self.depth = depth
        self.max_depth = max_depth
        if msg is None:
            msg = f"invalid depth {depth}"
            if max_depth is not None:
                msg += f" (tree supports 0..{max_depth})"
        super().__init__(msg)


class MalformedProofError(MerkleError, ValueError):
    """Raised when a proof is structurally invalid.

    A well-formed proof that simply does not match is not an error;
    verification returns False for it.
    """


class LeafNotFoundError(MerkleError, KeyError):
    """Raised when no leaf in the tree holds the requested data."""

    def __init__(self, data: bytes):
        self.data = data
        super().__init__("data not found in tree")

    def __str__(self) -> str:
        return self.args[0]
