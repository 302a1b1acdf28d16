"""
Registry Configuration — Resolve the remote source and mirror location.

The remote is configured through two environment variables:

    GITHUB_CHAIN_REGISTRY_URL=https://github.com/cosmos/chain-registry
    GITHUB_CHAIN_REGISTRY_REF=main

Both are optional. The mirror location is a fixed convention: a
``chain-registry`` directory in the system temp area, or a hidden
``.cosmos-chain-registry`` directory in the working directory.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "https://github.com/cosmos/chain-registry"
DEFAULT_REVISION = "main"

ORIGIN_ENV_VAR = "GITHUB_CHAIN_REGISTRY_URL"
REVISION_ENV_VAR = "GITHUB_CHAIN_REGISTRY_REF"

TEMP_MIRROR_NAME = "chain-registry"
LOCAL_MIRROR_NAME = ".cosmos-chain-registry"


@dataclass(frozen=True)
class RemoteSource:
    """Where the registry lives upstream and which ref to track."""

    origin: str
    revision: str = DEFAULT_REVISION

    @classmethod
    def from_env(cls) -> "RemoteSource":
        """Build a RemoteSource from environment overrides or defaults."""
        origin = os.environ.get(ORIGIN_ENV_VAR, "").strip() or DEFAULT_ORIGIN
        revision = os.environ.get(REVISION_ENV_VAR, "").strip() or DEFAULT_REVISION

        if origin != DEFAULT_ORIGIN:
            logger.info(f"Using registry origin from {ORIGIN_ENV_VAR}: {origin}")
        if revision != DEFAULT_REVISION:
            logger.info(f"Using registry ref from {REVISION_ENV_VAR}: {revision}")

        return cls(origin=origin, revision=revision)


_remote_source: Optional[RemoteSource] = None


def get_remote_source() -> RemoteSource:
    """Return the process-wide RemoteSource, resolving it on first use."""
    global _remote_source
    if _remote_source is None:
        _remote_source = RemoteSource.from_env()
    return _remote_source


def reset_remote_source() -> None:
    """Forget the resolved RemoteSource so the next access re-reads the env."""
    global _remote_source
    _remote_source = None


def default_mirror_path(local: bool = False) -> Path:
    """
    Get the conventional mirror directory.

    Args:
        local: Use ``./.cosmos-chain-registry`` instead of the temp area.
    """
    if local:
        return Path.cwd() / LOCAL_MIRROR_NAME
    return Path(tempfile.gettempdir()) / TEMP_MIRROR_NAME


def load_env_file(path: Optional[Path] = None) -> bool:
    """
    Load a .env file into the process environment.

    Must run before get_remote_source() for the values to take effect.
    Returns True if a file was found and loaded.
    """
    env_file = path or Path.cwd() / ".env"
    if not env_file.exists():
        return False
    load_dotenv(env_file)
    logger.debug(f"Loaded environment from {env_file}")
    return True
