"""Shared test fixtures for merkleproof."""

import pytest

from merkleproof_core.hashing import BLAKE2b, Keccak256
from merkleproof_core.merkle import build_tree


NINE_LEAVES = [
    b"Foo",
    b"Bar",
    b"Baz",
    b"Qux",
    b"Quux",
    b"Quuz",
    b"FooBar",
    b"FooBaz",
    b"BarBaz",
]


@pytest.fixture
def blake2b():
    return BLAKE2b()


@pytest.fixture
def keccak256():
    return Keccak256()


@pytest.fixture
def nine_leaves():
    return list(NINE_LEAVES)


@pytest.fixture
def nine_leaf_tree(blake2b, nine_leaves):
    return build_tree(nine_leaves, blake2b)


@pytest.fixture
def salted_nine_leaf_tree(blake2b, nine_leaves):
    return build_tree(nine_leaves, blake2b, salt=True)


@pytest.fixture
def leaf_files(tmp_path):
    """Write Foo/Bar/Baz leaf files and return their paths in order."""
    paths = []
    for name, content in [("a.txt", b"Foo"), ("b.txt", b"Bar"), ("c.txt", b"Baz")]:
        p = tmp_path / name
        p.write_bytes(content)
        paths.append(p)
    return paths
