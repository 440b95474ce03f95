from .loader import load_config
from .models import ExportConfig, MerkleProofConfig, TreeConfig

__all__ = [
    "ExportConfig",
    "MerkleProofConfig",
    "TreeConfig",
    "load_config",
]
