"""
Chain Models — Pydantic schema for chain.json records.

Only the identity fields are modelled. Everything else in a registry
document (fees, apis, codebase, ...) is ignored on load.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class ChainInfo(BaseModel):
    """Identity metadata of a single chain, as found in its chain.json."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    chain_name: StrictStr  # e.g. "juno"
    chain_id: StrictStr  # e.g. "juno-1", the lookup key
    pretty_name: StrictStr  # e.g. "Juno"
