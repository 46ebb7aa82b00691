"""
CertLedger -- Certificate Record

The immutable attested fact: a block (height + hash) and a Merkle-summarised
state, jointly endorsed by a threshold multi-signature.

The Aggregator builds a CertificateRecord after a signing round completes.
The ledger stores it exactly once and returns it verbatim. MerkleRoot and
MultiSig are opaque bytes here; nothing in this package interprets them.
"""

from __future__ import annotations

from typing import Any

from pydantic import AwareDatetime, Field, StrictBytes, model_validator

from certledger.primitives.common import LedgerBaseModel

# Column order shared by the insert and the select. Any schema change must
# update this tuple, the DDL, and CertificateRecord together.
FIELD_ORDER: tuple[str, ...] = (
    "id",
    "block_number",
    "block_hash",
    "merkle_root",
    "multi_sig",
    "sig_started_at",
    "sig_finished_at",
)


class CertificateRecord(LedgerBaseModel):
    """A finalised certificate, as persisted in the ledger."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1, strict=True)
    block_number: int = Field(ge=0, strict=True)
    block_hash: str = Field(min_length=1, strict=True)
    merkle_root: StrictBytes
    multi_sig: StrictBytes
    sig_started_at: AwareDatetime
    sig_finished_at: AwareDatetime

    @model_validator(mode="after")
    def _check_signing_window(self) -> CertificateRecord:
        if self.sig_started_at > self.sig_finished_at:
            raise ValueError(
                f"sig_started_at ({self.sig_started_at.isoformat()}) is after "
                f"sig_finished_at ({self.sig_finished_at.isoformat()})"
            )
        return self

    @classmethod
    def from_row(cls, values: tuple[Any, ...]) -> CertificateRecord:
        """Build a record from exactly seven values in FIELD_ORDER."""
        (
            cert_id,
            block_number,
            block_hash,
            merkle_root,
            multi_sig,
            sig_started_at,
            sig_finished_at,
        ) = values
        return cls(
            id=cert_id,
            block_number=block_number,
            block_hash=block_hash,
            merkle_root=merkle_root,
            multi_sig=multi_sig,
            sig_started_at=sig_started_at,
            sig_finished_at=sig_finished_at,
        )

    def as_row(self) -> tuple[Any, ...]:
        """Positional insert parameters, in FIELD_ORDER."""
        return (
            self.id,
            self.block_number,
            self.block_hash,
            self.merkle_root,
            self.multi_sig,
            self.sig_started_at,
            self.sig_finished_at,
        )

    @property
    def signing_duration_s(self) -> float:
        return (self.sig_finished_at - self.sig_started_at).total_seconds()
