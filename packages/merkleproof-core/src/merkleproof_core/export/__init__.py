"""Human-readable export of built trees."""

from merkleproof_core.export.dot import DotExporter, to_dot
from merkleproof_core.export.formatters import (
    Formatter,
    HexFormatter,
    StringFormatter,
    TruncatedHexFormatter,
    create_formatter,
)

__all__ = [
    "DotExporter",
    "Formatter",
    "HexFormatter",
    "StringFormatter",
    "TruncatedHexFormatter",
    "create_formatter",
    "to_dot",
]
