"""
Chain Registry — Read access to the Cosmos chain registry.

Keeps a local git mirror of https://github.com/cosmos/chain-registry and
looks up chain records by chain_id.
"""

from .config import RemoteSource
from .errors import (
    ChainLookupError,
    ChainNotFoundError,
    MalformedRecordError,
    RegistryError,
    RepositoryCorruptError,
    SyncError,
    TransportError,
)
from .models import ChainInfo
from .registry import ChainRegistry

__all__ = [
    "ChainInfo",
    "ChainLookupError",
    "ChainNotFoundError",
    "ChainRegistry",
    "MalformedRecordError",
    "RegistryError",
    "RemoteSource",
    "RepositoryCorruptError",
    "SyncError",
    "TransportError",
]
