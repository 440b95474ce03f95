from pydantic import BaseModel, Field
from typing import Literal


class TreeConfig(BaseModel):
    hash: Literal["blake2b", "keccak256", "sha256", "sha3"] = "blake2b"
    salt: bool = False


class ExportConfig(BaseModel):
    leaf_format: Literal["string", "hex", "truncated"] = "truncated"
    node_format: Literal["string", "hex", "truncated"] = "truncated"


class MerkleProofConfig(BaseModel):
    tree: TreeConfig = Field(default_factory=TreeConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
