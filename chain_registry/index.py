"""
Registry Index — Find chain records in a synchronized mirror.

There is no persisted index. Every lookup walks the mirror, parses each
chain.json it meets and stops at the first one whose chain_id matches.
A record that cannot be parsed aborts the lookup instead of being
skipped, so a broken tree never yields a silently wrong answer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from .errors import ChainNotFoundError, MalformedRecordError
from .models import ChainInfo

logger = logging.getLogger(__name__)

CHAIN_FILE_NAME = "chain.json"

_SKIP_DIRS = {".git"}


def iter_chain_files(root: Path) -> Iterator[Path]:
    """
    Yield every chain.json below ``root``.

    Order is whatever the filesystem walk produces; callers must not
    depend on it.
    """
    for path in Path(root).rglob(CHAIN_FILE_NAME):
        if _SKIP_DIRS.intersection(path.relative_to(root).parts):
            continue
        if path.is_file():
            yield path


def load_chain_file(path: Path) -> ChainInfo:
    """
    Load a chain.json file.

    Args:
        path: Path to the record

    Returns:
        Parsed ChainInfo

    Raises:
        MalformedRecordError: If the file cannot be read, is not valid
            JSON, or lacks one of the required fields
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(path, f"invalid JSON at line {e.lineno}: {e.msg}") from e
    except UnicodeDecodeError as e:
        raise MalformedRecordError(path, f"not UTF-8 text: {e.reason}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals or nesting too deep for the decoder
        raise MalformedRecordError(path, f"cannot be decoded: {e}") from e
    except OSError as e:
        raise MalformedRecordError(path, f"cannot be read: {e}") from e

    if not isinstance(data, dict):
        raise MalformedRecordError(path, f"expected a JSON object, got {type(data).__name__}")

    try:
        return ChainInfo.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedRecordError(path, f"invalid fields: {fields}") from e


def find_by_chain_id(root: Path, chain_id: str) -> ChainInfo:
    """
    Scan the mirror for the record whose chain_id equals ``chain_id``.

    The comparison is exact and case-sensitive. If two records share an
    id, whichever the walk reaches first wins.

    Raises:
        MalformedRecordError: On the first record that fails to parse
        ChainNotFoundError: If no record matches
    """
    root = Path(root)
    log_extra = {"chain_id": chain_id, "mirror_path": root}
    logger.debug(f"[registry-index] Looking up {chain_id} under {root}", extra=log_extra)

    scanned = 0
    for path in iter_chain_files(root):
        scanned += 1
        info = load_chain_file(path)

        if info.chain_id == chain_id:
            logger.debug(
                f"[registry-index] Found {chain_id} in {path.relative_to(root)} "
                f"after {scanned} records",
                extra=log_extra,
            )
            return info

    logger.info(
        f"[registry-index] {chain_id} not found ({scanned} records scanned)",
        extra=log_extra,
    )
    raise ChainNotFoundError(chain_id, root=root)
