"""
CertLedger -- Common Primitives

Shared base classes and utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel
from ulid import ULID


def new_id() -> str:
    """
    Generate a new ULID string. Time-sortable, globally unique.

    Certificate recency is defined as "largest id", so the Aggregator must
    mint certificate ids with this (or another generator that is monotonic
    with creation order). Ordering is guaranteed across milliseconds only.
    """
    return str(ULID())


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


class LedgerBaseModel(BaseModel):
    """Base model for all ledger primitives."""

    model_config = {"populate_by_name": True, "from_attributes": True}
