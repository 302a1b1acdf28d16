"""
Errors — Failure taxonomy for mirror synchronization and chain lookups.

Two families, so callers can tell the routine miss from real faults:

- SyncError: the local mirror could not be created or refreshed
- ChainLookupError: a lookup against a synchronized mirror did not
  produce a record

## Usage

    from chain_registry.errors import ChainNotFoundError, RegistryError

    try:
        info = registry.get_by_chain_id("juno-1")
    except ChainNotFoundError:
        info = None
    except RegistryError as e:
        print(f"Registry failure: {e}")
"""

from __future__ import annotations

import builtins
from pathlib import Path
from typing import Optional


class RegistryError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


# --- Synchronization ---


class SyncError(RegistryError):
    """The local mirror could not be brought up to date."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        detail: Optional[str] = None,
    ):
        self.path = path
        super().__init__(message, detail)


class TransportError(SyncError):
    """Clone or fetch failed (network, authentication, unknown ref)."""


class RepositoryCorruptError(SyncError):
    """The mirror path exists but does not hold a usable repository."""


# --- Lookup ---


class ChainLookupError(RegistryError, builtins.LookupError):
    """A lookup against the mirror did not return a record."""


class MalformedRecordError(ChainLookupError):
    """A chain record file could not be parsed into a ChainInfo."""

    def __init__(self, path: Path, detail: Optional[str] = None):
        self.path = path
        super().__init__(f"Malformed chain record {path}", detail)


class ChainNotFoundError(ChainLookupError):
    """No chain record carries the requested chain_id."""

    def __init__(self, chain_id: str, root: Optional[Path] = None):
        self.chain_id = chain_id
        self.root = root
        super().__init__(f"Chain not found: {chain_id}")
