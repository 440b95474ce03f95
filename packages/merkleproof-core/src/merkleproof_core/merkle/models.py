"""Value objects derived from a tree: audit proofs and pollards."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from merkleproof_core.merkle.errors import InvalidDepthError, MalformedProofError

logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Which side of its parent a sibling digest sits on."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """One sibling on the path from a leaf to the root."""

    side: Side
    digest: bytes


@dataclass(frozen=True)
class AuditProof:
    """Sibling path proving a leaf's inclusion.

    ``height`` is the depth of the pollard the path stops at; a full proof
    up to the root has height 0.
    """

    index: int
    siblings: tuple[ProofStep, ...] = ()
    height: int = 0

    def __len__(self) -> int:
        return len(self.siblings)

    @property
    def hashes(self) -> list[bytes]:
        return [s.digest for s in self.siblings]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        data: dict = {
            "index": self.index,
            "siblings": [
                {"side": s.side.value, "digest": s.digest.hex()}
                for s in self.siblings
            ],
        }
        if self.height:
            data["height"] = self.height
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, obj: dict) -> AuditProof:
        try:
            siblings = tuple(
                ProofStep(side=Side(s["side"]), digest=bytes.fromhex(s["digest"]))
                for s in obj.get("siblings", [])
            )
            return cls(
                index=int(obj["index"]),
                siblings=siblings,
                height=int(obj.get("height", 0)),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Rejected proof document: %s", e)
            raise MalformedProofError(f"invalid proof document: {e}") from e

    @classmethod
    def from_json(cls, data: str) -> AuditProof:
        try:
            obj = json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning("Rejected proof JSON: %s", e)
            raise MalformedProofError(f"invalid proof JSON: {e}") from e
        return cls.from_dict(obj)


def _depth_for_count(count: int) -> int | None:
    """Return h such that count == 2**(h+1) - 1, or None."""
    total = count + 1
    if count < 1 or total & (total - 1):
        return None
    return total.bit_length() - 2


@dataclass(frozen=True)
class Pollard:
    """Digests of the top ``depth + 1`` tree levels in index order."""

    digests: tuple[bytes, ...]
    depth: int = field(init=False)

    def __post_init__(self) -> None:
        depth = _depth_for_count(len(self.digests))
        if depth is None:
            raise InvalidDepthError(
                -1, msg=f"pollard of {len(self.digests)} digests does not fill whole levels"
            )
        object.__setattr__(self, "digests", tuple(self.digests))
        object.__setattr__(self, "depth", depth)

    @property
    def root(self) -> bytes:
        return self.digests[0]

    def digest_at(self, index: int) -> bytes:
        """Digest stored at 1-based tree *index*."""
        if not 1 <= index <= len(self.digests):
            raise IndexError(f"pollard index {index} out of range")
        return self.digests[index - 1]

    def __len__(self) -> int:
        return len(self.digests)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.digests)

    def to_json(self) -> str:
        return json.dumps(
            {"depth": self.depth, "digests": [d.hex() for d in self.digests]},
            indent=2,
        )

    @classmethod
    def from_json(cls, data: str) -> Pollard:
        try:
            obj = json.loads(data)
            digests = obj["digests"] if isinstance(obj, dict) else obj
            return cls(tuple(bytes.fromhex(d) for d in digests))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Rejected pollard document: %s", e)
            raise ValueError(f"Invalid pollard document: {e}") from e
