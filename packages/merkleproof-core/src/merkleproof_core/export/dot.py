"""Graphviz DOT rendering of a built tree."""

from __future__ import annotations

from merkleproof_core.export.formatters import Formatter, TruncatedHexFormatter
from merkleproof_core.merkle.tree import Tree


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DotExporter:
    """Emits a DOT digraph with leaves as ovals and digests as rectangles."""

    def __init__(
        self,
        leaf_formatter: Formatter | None = None,
        node_formatter: Formatter | None = None,
    ) -> None:
        self.leaf_formatter = leaf_formatter or TruncatedHexFormatter()
        self.node_formatter = node_formatter or TruncatedHexFormatter()

    def export(self, tree: Tree) -> str:
        """Render *tree*; it must still carry its leaf data."""
        if len(tree.data) != tree.leaf_count:
            raise ValueError("tree has no leaf data to render")

        n, p = tree.size()
        parts = [
            "digraph MerkleTree {",
            "rankdir = TB;",
            'node [shape=rectangle margin="0.2,0.2"];',
        ]

        # Leaf level, left to right, with invisible edges to hold the order
        for k in range(p):
            idx = p + k
            if k < n:
                label = _quote(self.leaf_formatter.format(tree.data[k]))
                parts.append(f"{label} [shape=oval];")
                edge = f"{label}->{idx}"
                if tree.salted:
                    edge += f' [label="+{k:08x}"]'
                parts.append(edge + ";")
            parts.append(self._node(tree, idx))
            if k > 0:
                parts.append(f"{idx - 1}->{idx} [style=invisible arrowhead=none];")
            if idx > 1:
                parts.append(f"{idx}->{idx // 2};")
        parts.append("{rank=same" + "".join(f";{p + k}" for k in range(p)) + "};")

        # Internal nodes, highest index first
        for idx in range(p - 1, 0, -1):
            parts.append(self._node(tree, idx))
            if idx > 1:
                parts.append(f"{idx}->{idx // 2};")

        parts.append("}")
        return "".join(parts)

    def _node(self, tree: Tree, idx: int) -> str:
        label = _quote(self.node_formatter.format(tree.node_digest(idx)))
        return f"{idx} [label={label}];"


def to_dot(
    tree: Tree,
    leaf_formatter: Formatter | None = None,
    node_formatter: Formatter | None = None,
) -> str:
    """Convenience wrapper around DotExporter.export()."""
    return DotExporter(leaf_formatter, node_formatter).export(tree)
