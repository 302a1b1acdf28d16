"""
Shared fixtures for chain registry tests.

Provides hand-built registry trees for lookup tests and a throwaway
upstream git repository (created with the real git executable) for
sync tests, so nothing touches the network.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict

import pytest

from chain_registry.config import ORIGIN_ENV_VAR, REVISION_ENV_VAR, reset_remote_source

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)


JUNO = {
    "$schema": "../chain.schema.json",
    "chain_name": "juno",
    "status": "live",
    "network_type": "mainnet",
    "pretty_name": "Juno",
    "chain_id": "juno-1",
    "bech32_prefix": "juno",
    "slip44": 118,
}

UNI = {
    "$schema": "../../chain.schema.json",
    "chain_name": "junotestnet",
    "status": "live",
    "network_type": "testnet",
    "pretty_name": "Juno Testnet",
    "chain_id": "uni-5",
    "bech32_prefix": "juno",
}

OSMOSIS = {
    "chain_name": "osmosis",
    "pretty_name": "Osmosis",
    "chain_id": "osmosis-1",
}


def write_chain(root: Path, relative_dir: str, record: Dict[str, Any]) -> Path:
    """Write a chain.json under root/relative_dir."""
    chain_dir = root / relative_dir
    chain_dir.mkdir(parents=True, exist_ok=True)
    path = chain_dir / "chain.json"
    path.write_text(json.dumps(record, indent=2), encoding="utf-8")
    return path


def run_git(cwd: Path, *args: str) -> str:
    """Run git with a fixed identity, failing the test on error."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Registry Test",
            "-c", "user.email=registry-test@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "tag.gpgsign=false",
            *args,
        ],
        cwd=str(cwd),
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, f"git {' '.join(args)} failed: {result.stderr}"
    return result.stdout.strip()


class UpstreamRepo:
    """A local repository standing in for github.com/cosmos/chain-registry."""

    def __init__(self, path: Path):
        self.path = path
        path.mkdir(parents=True)
        run_git(path, "init", "--quiet")
        run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")

    @property
    def url(self) -> str:
        return str(self.path)

    def write_chain(self, relative_dir: str, record: Dict[str, Any]) -> Path:
        return write_chain(self.path, relative_dir, record)

    def commit(self, message: str) -> str:
        run_git(self.path, "add", "--all")
        run_git(self.path, "commit", "--quiet", "-m", message)
        return self.head()

    def tag(self, name: str) -> None:
        run_git(self.path, "tag", name)

    def head(self) -> str:
        return run_git(self.path, "rev-parse", "HEAD")


@pytest.fixture(autouse=True)
def clean_remote_source(monkeypatch):
    """Every test starts with default, unresolved remote configuration."""
    monkeypatch.delenv(ORIGIN_ENV_VAR, raising=False)
    monkeypatch.delenv(REVISION_ENV_VAR, raising=False)
    reset_remote_source()
    yield
    reset_remote_source()


@pytest.fixture
def registry_tree(tmp_path: Path) -> Path:
    """A registry-shaped directory with a mainnet and a testnet record."""
    root = tmp_path / "registry"
    write_chain(root, "juno", JUNO)
    write_chain(root, "testnets/junotestnet", UNI)
    (root / "juno" / "assetlist.json").write_text('{"chain_name": "juno", "assets": []}')
    (root / "README.md").write_text("# Chain Registry\n")
    return root


@pytest.fixture
def upstream(tmp_path: Path) -> UpstreamRepo:
    """Upstream repository with juno and uni-5 committed on main."""
    repo = UpstreamRepo(tmp_path / "upstream")
    repo.write_chain("juno", JUNO)
    repo.write_chain("testnets/junotestnet", UNI)
    repo.commit("Add juno and junotestnet")
    return repo


@pytest.fixture
def mirror_path(tmp_path: Path) -> Path:
    return tmp_path / "mirror" / "chain-registry"
