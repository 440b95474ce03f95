"""CLI entry point for merkleproof."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from merkleproof_core.config import MerkleProofConfig, load_config
from merkleproof_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from merkleproof_core.export import create_formatter, to_dot
from merkleproof_core.hashing import available_hash_providers, create_hash_provider
from merkleproof_core.merkle import (
    AuditProof,
    MerkleError,
    Pollard,
    Tree,
    build_tree,
    generate_pollard,
    generate_proof,
    verify_proof,
)

app = typer.Typer(
    name="merkleproof",
    help="Build Merkle trees over data blocks and prove leaf inclusion.",
)

config_app = typer.Typer(help="Manage merkleproof configuration.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


# Global state
_config: MerkleProofConfig | None = None


def _get_config() -> MerkleProofConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(cfg: MerkleProofConfig) -> None:
    level = _LOG_LEVELS[cfg.log_level]
    if cfg.log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level, format=_TEXT_FORMAT)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to merkleproof.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging(_config)


def _read_leaves(files: list[Path]) -> list[bytes]:
    """Read each file as one leaf, in the order given."""
    leaves: list[bytes] = []
    for f in files:
        if not f.is_file():
            rprint(f"[red]Error:[/red] not a file: {f}")
            raise typer.Exit(1)
        leaves.append(f.read_bytes())
    return leaves


def _resolve_hash(name: str | None) -> str:
    resolved = name or _get_config().tree.hash
    if resolved.lower() not in available_hash_providers():
        rprint(
            f"[red]Error:[/red] unsupported hash {resolved!r} "
            f"(supported: {', '.join(available_hash_providers())})"
        )
        raise typer.Exit(1)
    return resolved.lower()


def _resolve_salt(salt: bool | None) -> bool:
    return salt if salt is not None else _get_config().tree.salt


def _build(files: list[Path], hash_name: str | None, salt: bool | None) -> Tree:
    leaves = _read_leaves(files)
    provider = create_hash_provider(_resolve_hash(hash_name))
    try:
        return build_tree(leaves, provider, salt=_resolve_salt(salt))
    except MerkleError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _load_tree(path: Path) -> Tree:
    try:
        return Tree.load(path)
    except (OSError, ValueError) as e:
        rprint(f"[red]Error:[/red] cannot load tree from {path}: {e}")
        raise typer.Exit(1)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text)
        rprint(f"[green]Written:[/green] {output}")


HashOption = Annotated[
    str | None, typer.Option("--hash", help="Hash provider (default from config)")
]
SaltOption = Annotated[
    bool | None,
    typer.Option("--salt/--no-salt", help="Bind each leaf to its position"),
]


@app.command()
def root(
    files: Annotated[list[Path], typer.Argument(help="Leaf files, one leaf each")],
    hash_name: HashOption = None,
    salt: SaltOption = None,
) -> None:
    """Print the root digest of a tree over FILES."""
    tree = _build(files, hash_name, salt)
    typer.echo(str(tree))


@app.command()
def build(
    files: Annotated[list[Path], typer.Argument(help="Leaf files, one leaf each")],
    output: Annotated[Path, typer.Option("--output", "-o", help="Tree JSON path")],
    hash_name: HashOption = None,
    salt: SaltOption = None,
) -> None:
    """Build a tree over FILES and save it as JSON."""
    tree = _build(files, hash_name, salt)
    tree.save(output)

    n, p = tree.size()
    table = Table(title="Merkle Tree")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Root", tree.root.hex())
    table.add_row("Leaves", f"{n} (padded to {p})")
    table.add_row("Depth", str(tree.depth))
    table.add_row("Hash", tree.hash_provider.name)
    table.add_row("Salted", "yes" if tree.salted else "no")
    rprint(table)
    rprint(f"\n[green]Saved:[/green] {output}")


@app.command()
def prove(
    tree_path: Annotated[Path, typer.Argument(help="Tree JSON written by 'build'")],
    index: Annotated[int, typer.Argument(help="0-based leaf position")],
    height: Annotated[
        int, typer.Option("--height", help="Stop at the level of a pollard of this depth")
    ] = 0,
    output: Annotated[Path | None, typer.Option("--output", "-o")] = None,
) -> None:
    """Generate an audit proof for leaf INDEX."""
    tree = _load_tree(tree_path)
    try:
        proof = generate_proof(tree, index, height=height)
    except MerkleError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _emit(proof.to_json(), output)


@app.command()
def pollard(
    tree_path: Annotated[Path, typer.Argument(help="Tree JSON written by 'build'")],
    depth: Annotated[int, typer.Argument(help="Pollard depth, 0 = root only")],
    output: Annotated[Path | None, typer.Option("--output", "-o")] = None,
) -> None:
    """Export the top DEPTH+1 levels of a tree."""
    tree = _load_tree(tree_path)
    try:
        result = generate_pollard(tree, depth)
    except MerkleError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _emit(result.to_json(), output)


@app.command()
def verify(
    leaf: Annotated[Path, typer.Argument(help="File holding the leaf data")],
    proof_path: Annotated[Path, typer.Argument(help="Proof JSON written by 'prove'")],
    root_hex: Annotated[
        str | None, typer.Option("--root", help="Expected root digest (hex)")
    ] = None,
    pollard_path: Annotated[
        Path | None, typer.Option("--pollard", help="Pollard JSON to verify against")
    ] = None,
    hash_name: HashOption = None,
    salt: SaltOption = None,
) -> None:
    """Check that LEAF is included under a root or pollard."""
    if (root_hex is None) == (pollard_path is None):
        rprint("[red]Error:[/red] pass exactly one of --root or --pollard")
        raise typer.Exit(1)

    try:
        proof = AuditProof.from_json(proof_path.read_text())
        if pollard_path is not None:
            target: bytes | Pollard = Pollard.from_json(pollard_path.read_text())
        else:
            target = bytes.fromhex(root_hex)
    except (OSError, ValueError, KeyError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    provider = create_hash_provider(_resolve_hash(hash_name))
    try:
        ok = verify_proof(
            leaf.read_bytes(), proof, target, provider, salt=_resolve_salt(salt)
        )
    except MerkleError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if ok:
        typer.echo("VALID")
    else:
        typer.echo("INVALID")
        raise typer.Exit(code=1)


@app.command()
def dot(
    files: Annotated[list[Path], typer.Argument(help="Leaf files, one leaf each")],
    leaf_format: Annotated[
        str | None, typer.Option("--leaf-format", help="string | hex | truncated")
    ] = None,
    node_format: Annotated[
        str | None, typer.Option("--node-format", help="string | hex | truncated")
    ] = None,
    hash_name: HashOption = None,
    salt: SaltOption = None,
) -> None:
    """Render the tree over FILES as a Graphviz digraph."""
    cfg = _get_config()
    tree = _build(files, hash_name, salt)
    try:
        leaf_fmt = create_formatter(leaf_format or cfg.export.leaf_format)
        node_fmt = create_formatter(node_format or cfg.export.node_format)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    typer.echo(to_dot(tree, leaf_fmt, node_fmt))


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing file")] = False,
) -> None:
    """Write a default merkleproof.yaml in the current directory."""
    path = Path("merkleproof.yaml")
    if path.exists() and not force:
        rprint(f"[yellow]{path} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    path.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created:[/green] {path}")


if __name__ == "__main__":
    app()
