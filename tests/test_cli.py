"""Tests for the merkleproof CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from merkleproof.cli import _JsonFormatter, app
from merkleproof_core.merkle import Tree

runner = CliRunner()

FOO_BAR_BAZ_ROOT = "2c95331b1a38dba3600391a3e864f9418a271388936e54edecd916824bb54203"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files out of CLI runs."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("MERKLEPROOF_CONFIG", raising=False)


def _build(tmp_path: Path, leaf_files: list[Path], *extra: str) -> Path:
    out = tmp_path / "tree.json"
    result = runner.invoke(app, ["build", *map(str, leaf_files), "--output", str(out), *extra])
    assert result.exit_code == 0, result.output
    return out


# ── root / build ────────────────────────────────────────────────────


def test_root(leaf_files):
    result = runner.invoke(app, ["root", *map(str, leaf_files)])
    assert result.exit_code == 0
    assert result.output.strip() == FOO_BAR_BAZ_ROOT


def test_root_salted_differs(leaf_files):
    result = runner.invoke(app, ["root", "--salt", *map(str, leaf_files)])
    assert result.exit_code == 0
    assert result.output.strip() != FOO_BAR_BAZ_ROOT


def test_root_unknown_hash(leaf_files):
    result = runner.invoke(app, ["root", "--hash", "md5", *map(str, leaf_files)])
    assert result.exit_code == 1
    assert "unsupported hash" in result.output


def test_root_hash_name_case_insensitive(leaf_files):
    upper = runner.invoke(app, ["root", "--hash", "KECCAK256", *map(str, leaf_files)])
    lower = runner.invoke(app, ["root", "--hash", "keccak256", *map(str, leaf_files)])
    assert upper.exit_code == 0, upper.output
    assert upper.output == lower.output


def test_root_missing_file(tmp_path):
    result = runner.invoke(app, ["root", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert "not a file" in result.output


def test_root_uses_config(tmp_path, leaf_files):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("tree:\n  hash: keccak256\n")
    result = runner.invoke(app, ["--config", str(cfg), "root", *map(str, leaf_files)])
    assert result.exit_code == 0
    assert result.output.strip() != FOO_BAR_BAZ_ROOT


def test_invalid_config_exits(tmp_path, leaf_files):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("tree:\n  hash: md5\n")
    result = runner.invoke(app, ["--config", str(cfg), "root", *map(str, leaf_files)])
    assert result.exit_code == 1


def test_build_writes_tree(tmp_path, leaf_files):
    out = _build(tmp_path, leaf_files)
    tree = Tree.load(out)
    assert tree.root.hex() == FOO_BAR_BAZ_ROOT
    assert tree.size() == (3, 4)


# ── prove / pollard / verify ────────────────────────────────────────


def test_prove_and_verify(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files, "--salt")
    proof_path = tmp_path / "proof.json"
    result = runner.invoke(app, ["prove", str(tree_path), "1", "--output", str(proof_path)])
    assert result.exit_code == 0, result.output

    root_hex = Tree.load(tree_path).root.hex()
    result = runner.invoke(
        app, ["verify", str(leaf_files[1]), str(proof_path), "--root", root_hex, "--salt"]
    )
    assert result.exit_code == 0
    assert "VALID" in result.output


def test_verify_wrong_leaf(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    proof_path = tmp_path / "proof.json"
    runner.invoke(app, ["prove", str(tree_path), "1", "--output", str(proof_path)])
    result = runner.invoke(
        app, ["verify", str(leaf_files[0]), str(proof_path), "--root", FOO_BAR_BAZ_ROOT]
    )
    assert result.exit_code == 1
    assert "INVALID" in result.output


def test_verify_against_pollard(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    proof_path = tmp_path / "proof.json"
    pollard_path = tmp_path / "pollard.json"
    runner.invoke(app, ["prove", str(tree_path), "2", "--height", "1", "-o", str(proof_path)])
    result = runner.invoke(app, ["pollard", str(tree_path), "1", "-o", str(pollard_path)])
    assert result.exit_code == 0

    result = runner.invoke(
        app, ["verify", str(leaf_files[2]), str(proof_path), "--pollard", str(pollard_path)]
    )
    assert result.exit_code == 0
    assert "VALID" in result.output


def test_verify_needs_exactly_one_target(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    proof_path = tmp_path / "proof.json"
    runner.invoke(app, ["prove", str(tree_path), "0", "-o", str(proof_path)])
    result = runner.invoke(app, ["verify", str(leaf_files[0]), str(proof_path)])
    assert result.exit_code == 1
    assert "exactly one" in result.output


def test_verify_malformed_proof(tmp_path, leaf_files):
    proof_path = tmp_path / "proof.json"
    proof_path.write_text(json.dumps({"index": 0, "siblings": [{"side": "right", "digest": "00"}]}))
    result = runner.invoke(
        app, ["verify", str(leaf_files[0]), str(proof_path), "--root", FOO_BAR_BAZ_ROOT]
    )
    assert result.exit_code == 1
    assert "Error" in result.output


def test_verify_oversized_height(tmp_path, leaf_files):
    proof_path = tmp_path / "proof.json"
    proof_path.write_text(json.dumps({"index": 0, "siblings": [], "height": 1 << 40}))
    result = runner.invoke(
        app, ["verify", str(leaf_files[0]), str(proof_path), "--root", FOO_BAR_BAZ_ROOT]
    )
    assert result.exit_code == 1
    assert "level limit" in result.output


def test_verify_malformed_pollard(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    proof_path = tmp_path / "proof.json"
    runner.invoke(app, ["prove", str(tree_path), "0", "-o", str(proof_path)])
    pollard_path = tmp_path / "pollard.json"
    pollard_path.write_text(json.dumps({"digests": [7]}))
    result = runner.invoke(
        app, ["verify", str(leaf_files[0]), str(proof_path), "--pollard", str(pollard_path)]
    )
    assert result.exit_code == 1
    assert "Invalid pollard document" in result.output


def test_prove_stdout(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    result = runner.invoke(app, ["prove", str(tree_path), "0"])
    assert result.exit_code == 0
    obj = json.loads(result.output)
    assert obj["index"] == 0
    assert len(obj["siblings"]) == 2


def test_prove_padding_index(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    result = runner.invoke(app, ["prove", str(tree_path), "3"])
    assert result.exit_code == 1
    assert "out of range" in result.output


def test_pollard_stdout(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    result = runner.invoke(app, ["pollard", str(tree_path), "0"])
    assert result.exit_code == 0
    assert json.loads(result.output)["digests"] == [FOO_BAR_BAZ_ROOT]


def test_pollard_invalid_depth(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    result = runner.invoke(app, ["pollard", str(tree_path), "3"])
    assert result.exit_code == 1
    assert "invalid depth" in result.output


def test_load_tree_with_non_string_hash(tmp_path, leaf_files):
    tree_path = _build(tmp_path, leaf_files)
    obj = json.loads(tree_path.read_text())
    obj["hash"] = 5
    tree_path.write_text(json.dumps(obj))
    result = runner.invoke(app, ["prove", str(tree_path), "0"])
    assert result.exit_code == 1
    assert "cannot load tree" in result.output


def test_load_bad_tree(tmp_path):
    bad = tmp_path / "tree.json"
    bad.write_text("{}")
    result = runner.invoke(app, ["prove", str(bad), "0"])
    assert result.exit_code == 1
    assert "cannot load tree" in result.output


# ── dot / config ────────────────────────────────────────────────────


def test_dot_string_labels(leaf_files):
    result = runner.invoke(app, ["dot", "--leaf-format", "string", *map(str, leaf_files)])
    assert result.exit_code == 0
    assert result.output.startswith("digraph MerkleTree {")
    assert '"Foo" [shape=oval];"Foo"->4;' in result.output


def test_dot_bad_format(leaf_files):
    result = runner.invoke(app, ["dot", "--leaf-format", "base64", *map(str, leaf_files)])
    assert result.exit_code == 1


def test_config_init_and_show(tmp_path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "merkleproof.yaml").is_file()

    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "blake2b" in result.output


def test_config_from_environment(tmp_path, leaf_files, monkeypatch):
    cfg = tmp_path / "env.yaml"
    cfg.write_text("tree:\n  hash: keccak256\n")
    monkeypatch.setenv("MERKLEPROOF_CONFIG", str(cfg))
    via_env = runner.invoke(app, ["root", *map(str, leaf_files)])
    via_flag = runner.invoke(app, ["root", "--hash", "keccak256", *map(str, leaf_files)])
    assert via_env.exit_code == 0
    assert via_env.output == via_flag.output


# ── logging ─────────────────────────────────────────────────────────


def test_json_log_format_escapes_messages():
    record = logging.LogRecord(
        "merkleproof_core.merkle.proof", logging.WARNING, __file__, 1,
        'Rejected proof: sibling "0" is %d bytes', (20,), None,
    )
    line = _JsonFormatter().format(record)
    obj = json.loads(line)
    assert obj["level"] == "WARNING"
    assert obj["logger"] == "merkleproof_core.merkle.proof"
    assert obj["message"] == 'Rejected proof: sibling "0" is 20 bytes'
