"""
Git Sync — Keep a local mirror of the chain registry up to date.

First run clones the remote into the mirror directory. Every later run
finds the existing repository, fetches the configured ref from origin
and moves the working tree onto it. "Already cloned" is the normal
case, not an error.

Nothing here retries, times out, or cleans up: a failed fetch leaves the
previous checkout untouched and raises. Callers must not run two syncs
against the same directory at once.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from .config import RemoteSource
from .errors import RepositoryCorruptError, SyncError, TransportError

logger = logging.getLogger(__name__)

# Mirror directory states
MIRROR_ABSENT = "absent"  # missing or empty: needs a clone
MIRROR_PRESENT = "present"  # holds a repository: needs a fetch


@dataclass
class SyncResult:
    """Outcome of a successful ensure_mirror() call."""

    path: Path
    origin: str
    revision: str
    commit: str
    cloned: bool = False
    detached: bool = False

    @property
    def short_commit(self) -> str:
        return self.commit[:12]


# ---------------------------------------------------------------------------
# Git helpers
# ---------------------------------------------------------------------------


def _git(
    repo: Path, *args: str, timeout: Optional[int] = None
) -> subprocess.CompletedProcess:
    """Run a git command in the given directory."""
    cmd = ["git"] + list(args)
    logger.debug(f"[mirror-sync] {' '.join(cmd)} (cwd={repo})")

    # Never block on a credential prompt; auth failures must surface.
    env = dict(os.environ, GIT_TERMINAL_PROMPT="0")

    try:
        return subprocess.run(
            cmd,
            cwd=str(repo),
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except FileNotFoundError as e:
        raise SyncError("git executable not found", path=repo, detail=str(e)) from e


def _git_output(repo: Path, *args: str) -> Optional[str]:
    """Run a git command and return stripped stdout, or None on failure."""
    result = _git(repo, *args)
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def _error_text(result: subprocess.CompletedProcess) -> str:
    return (
        result.stderr.strip()
        or result.stdout.strip()
        or f"git exited with status {result.returncode}"
    )


# ---------------------------------------------------------------------------
# Sync steps
# ---------------------------------------------------------------------------


def inspect_mirror(path: Path) -> str:
    """
    Decide whether the mirror directory needs a clone or a fetch.

    Returns MIRROR_ABSENT or MIRROR_PRESENT.

    Raises:
        RepositoryCorruptError: If the path is occupied by something that
            is not a repository rooted at that path.
    """
    if not path.exists():
        return MIRROR_ABSENT

    if not path.is_dir():
        raise RepositoryCorruptError("Mirror path is not a directory", path=path)

    try:
        empty = not any(path.iterdir())
    except OSError as e:
        raise RepositoryCorruptError(
            "Mirror directory cannot be read", path=path, detail=str(e)
        ) from e
    if empty:
        return MIRROR_ABSENT

    result = _git(path, "rev-parse", "--show-toplevel")
    if result.returncode != 0:
        raise RepositoryCorruptError(
            "Mirror path is not a git repository",
            path=path,
            detail=_error_text(result),
        )

    # A plain directory nested in some other checkout also passes rev-parse
    toplevel = Path(result.stdout.strip())
    if toplevel.resolve() != path.resolve():
        raise RepositoryCorruptError(
            "Mirror path is not a git repository",
            path=path,
            detail=f"enclosing repository is {toplevel}",
        )

    return MIRROR_PRESENT


def clone_mirror(source: RemoteSource, path: Path) -> None:
    """Clone the remote into a missing or empty mirror directory."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SyncError(
            "Cannot create mirror parent directory", path=path, detail=str(e)
        ) from e

    logger.info(
        f"[mirror-sync] Cloning chain registry from {source.origin} to {path}",
        extra={"mirror_path": path},
    )
    result = _git(path.parent, "clone", source.origin, str(path.absolute()))

    if result.returncode != 0:
        error = _error_text(result)
        logger.error(f"[mirror-sync] Clone of {source.origin} failed: {error}")
        raise TransportError(
            f"Failed to clone {source.origin}", path=path, detail=error
        )


def resolve_origin(origin: str) -> str:
    """
    Make a local-path origin absolute, relative to the process cwd.

    Git runs in the mirror's parent (clone) or the mirror itself (fetch),
    which would otherwise be the base for a relative path. URLs are
    returned unchanged.
    """
    local = Path(origin)
    if local.exists():
        return str(local.resolve())
    return origin


def ensure_origin(source: RemoteSource, path: Path) -> None:
    """
    Make sure the mirror's origin remote points at the configured URL.

    Raises:
        RepositoryCorruptError: If the repository has no origin remote.
    """
    current_url = _git_output(path, "remote", "get-url", "origin")
    if current_url is None:
        raise RepositoryCorruptError("Mirror has no 'origin' remote", path=path)

    # Update if the configured origin changed since the mirror was cloned
    if current_url != source.origin:
        logger.info(
            f"[mirror-sync] Updating origin URL: {current_url} → {source.origin}"
        )
        result = _git(path, "remote", "set-url", "origin", source.origin)
        if result.returncode != 0:
            raise RepositoryCorruptError(
                "Failed to update origin remote", path=path, detail=_error_text(result)
            )


def fetch_revision(source: RemoteSource, path: Path) -> str:
    """
    Fetch the configured ref from origin.

    Returns the commit id the ref resolved to. The working tree is not
    touched, so a failure here leaves the mirror exactly as it was.
    """
    logger.info(f"[mirror-sync] Fetching {source.revision} from origin")
    result = _git(path, "fetch", "origin", source.revision)

    if result.returncode != 0:
        error = _error_text(result)
        logger.error(f"[mirror-sync] Fetch of {source.revision} failed: {error}")
        raise TransportError(
            f"Failed to fetch {source.revision} from {source.origin}",
            path=path,
            detail=error,
        )

    commit = _git_output(path, "rev-parse", "--verify", "FETCH_HEAD^{commit}")
    if not commit:
        raise RepositoryCorruptError(
            f"Fetched ref {source.revision} does not resolve to a commit", path=path
        )

    return commit


def checkout_revision(path: Path, revision: str, commit: str) -> bool:
    """
    Move the working tree and HEAD onto a fetched commit.

    If ``revision`` is a branch on origin, HEAD becomes a local branch of
    the same name pointing at ``commit``. Tags and raw object ids leave
    HEAD detached at ``commit``.

    Returns True if HEAD is on a branch, False if detached.
    """
    tracking = _git_output(
        path, "rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{revision}^{{commit}}"
    )
    on_branch = tracking == commit

    if on_branch:
        cmd = ["checkout", "--force", "-B", revision, commit]
    else:
        cmd = ["checkout", "--force", "--detach", commit]

    result = _git(path, *cmd)
    if result.returncode != 0:
        error = _error_text(result)
        logger.error(f"[mirror-sync] Checkout of {commit[:12]} failed: {error}")
        raise RepositoryCorruptError(
            f"Failed to check out {revision}", path=path, detail=error
        )

    if on_branch:
        logger.info(
            f"[mirror-sync] {path.name}: {revision} at {commit[:12]}",
            extra={"mirror_path": path},
        )
    else:
        logger.info(
            f"[mirror-sync] {path.name}: detached at {commit[:12]}",
            extra={"mirror_path": path},
        )

    return on_branch


def ensure_mirror(source: RemoteSource, path: Path) -> SyncResult:
    """
    Guarantee that ``path`` holds a checkout of ``source`` at its revision.

    Clones on first use, fetches and fast-forwards on every later call.
    Calling it twice with no upstream change leaves the mirror as it was.

    Args:
        source: Remote origin and revision to track
        path: Mirror directory

    Returns:
        SyncResult describing the checked-out commit

    Raises:
        TransportError: If clone or fetch fails
        RepositoryCorruptError: If the directory is not a usable repository
    """
    path = Path(path)
    source = replace(source, origin=resolve_origin(source.origin))
    cloned = False

    if inspect_mirror(path) == MIRROR_ABSENT:
        clone_mirror(source, path)
        cloned = True
    else:
        logger.info(
            f"[mirror-sync] Chain registry already exists at {path}, pulling latest changes",
            extra={"mirror_path": path},
        )

    ensure_origin(source, path)
    commit = fetch_revision(source, path)
    on_branch = checkout_revision(path, source.revision, commit)

    return SyncResult(
        path=path,
        origin=source.origin,
        revision=source.revision,
        commit=commit,
        cloned=cloned,
        detached=not on_branch,
    )
