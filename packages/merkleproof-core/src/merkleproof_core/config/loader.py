"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from merkleproof_core.hashing import available_hash_providers

from .models import MerkleProofConfig

# Names a config file without passing --config on every call
CONFIG_ENV_VAR = "MERKLEPROOF_CONFIG"


def load_config(cli_path: str | None = None) -> MerkleProofConfig:
    """Load config with resolution order: CLI > $MERKLEPROOF_CONFIG > project-local > user-global > defaults."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path(env_path) if env_path else None,
        Path("./merkleproof.yaml"),
        Path.home() / ".merkleproof" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _normalize_hash(_expand_env_vars(raw), path)
                return MerkleProofConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return MerkleProofConfig()


def _normalize_hash(raw: object, path: Path) -> object:
    """Lower-case tree.hash and check it names a registered provider."""
    if not isinstance(raw, dict) or not isinstance(raw.get("tree"), dict):
        return raw
    name = raw["tree"].get("hash")
    if not isinstance(name, str):
        return raw
    supported = available_hash_providers()
    if name.lower() not in supported:
        raise ValueError(
            f"Invalid config in {path}: unsupported hash {name!r} "
            f"(supported: {', '.join(supported)})"
        )
    return {**raw, "tree": {**raw["tree"], "hash": name.lower()}}


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `merkleproof config init`
DEFAULT_CONFIG_TEMPLATE = """\
# merkleproof.yaml

# Tree construction
tree:
  hash: "blake2b"              # blake2b | keccak256 | sha256 | sha3
  salt: false                  # append each leaf's 4-byte big-endian position

# DOT export labels
export:
  leaf_format: "truncated"     # string | hex | truncated
  node_format: "truncated"     # string | hex | truncated

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
