"""
Chain Registry — Synchronized handle over the Cosmos chain registry.

## Usage

    from chain_registry import ChainRegistry

    registry = ChainRegistry.from_remote()
    info = registry.get_by_chain_id("juno-1")

    assert info.chain_name == "juno"
    assert info.pretty_name == "Juno"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import RemoteSource, default_mirror_path, get_remote_source
from .git_sync import SyncResult, ensure_mirror
from .index import find_by_chain_id
from .models import ChainInfo

logger = logging.getLogger(__name__)


class ChainRegistry:
    """
    A local mirror of the chain registry that has been synchronized.

    Instances only come from from_remote(), so every handle points at a
    mirror whose last sync succeeded.
    """

    def __init__(self, sync_result: SyncResult):
        self._sync_result = sync_result

    @classmethod
    def from_remote(
        cls,
        source: Optional[RemoteSource] = None,
        path: Optional[Path] = None,
    ) -> "ChainRegistry":
        """
        Clone or refresh the mirror, then return a handle to it.

        Args:
            source: Remote to track. Defaults to the environment-resolved one.
            path: Mirror directory. Defaults to ``<tempdir>/chain-registry``.

        Raises:
            SyncError: If the mirror could not be brought up to date
        """
        source = source or get_remote_source()
        mirror_path = Path(path) if path is not None else default_mirror_path()

        result = ensure_mirror(source, mirror_path)
        logger.info(
            f"[registry] Chain registry ready at {mirror_path} "
            f"({source.revision} @ {result.short_commit})",
            extra={"mirror_path": mirror_path},
        )
        return cls(result)

    @property
    def path(self) -> Path:
        return self._sync_result.path

    @property
    def sync_result(self) -> SyncResult:
        return self._sync_result

    def get_by_chain_id(self, chain_id: str) -> ChainInfo:
        """
        Get a chain's information by its chain_id, e.g. ``cosmoshub-4``.

        Raises:
            ChainNotFoundError: If no chain.json carries this chain_id
            MalformedRecordError: If a chain.json met during the scan is invalid
        """
        return find_by_chain_id(self.path, chain_id)

    def __repr__(self) -> str:
        return f"ChainRegistry(path={str(self.path)!r}, commit={self._sync_result.short_commit!r})"
