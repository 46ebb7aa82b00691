"""
CertLedger -- Certificate List Messages

Wire form of the recent-certificate window, as handed to verifying clients.
Binary fields travel hex-encoded; the signing window is exposed as
initiated_at / sealed_at metadata.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from pydantic import AwareDatetime, Field

from certledger.primitives.certificate import CertificateRecord
from certledger.primitives.common import LedgerBaseModel


class CertificateListItemMessageMetadata(LedgerBaseModel):
    # Time at which the signing round opened
    initiated_at: AwareDatetime
    # Time at which the quorum was reached and the multi-signature sealed
    sealed_at: AwareDatetime


class CertificateListItemMessage(LedgerBaseModel):
    """One certificate in the list handed to verifying clients."""

    id: str
    block_number: int = Field(ge=0)
    block_hash: str
    merkle_root: str  # hex
    multi_sig: str  # hex
    metadata: CertificateListItemMessageMetadata

    def to_record(self) -> CertificateRecord:
        """Decode back into a CertificateRecord. Raises ValueError on bad hex."""
        return CertificateRecord(
            id=self.id,
            block_number=self.block_number,
            block_hash=self.block_hash,
            merkle_root=bytes.fromhex(self.merkle_root),
            multi_sig=bytes.fromhex(self.multi_sig),
            sig_started_at=self.metadata.initiated_at,
            sig_finished_at=self.metadata.sealed_at,
        )

    @property
    def sealed_at(self) -> datetime:
        return self.metadata.sealed_at


CertificateListMessage = list[CertificateListItemMessage]


def to_list_item(record: CertificateRecord) -> CertificateListItemMessage:
    return CertificateListItemMessage(
        id=record.id,
        block_number=record.block_number,
        block_hash=record.block_hash,
        merkle_root=record.merkle_root.hex(),
        multi_sig=record.multi_sig.hex(),
        metadata=CertificateListItemMessageMetadata(
            initiated_at=record.sig_started_at,
            sealed_at=record.sig_finished_at,
        ),
    )


def to_list_message(records: Iterable[CertificateRecord]) -> CertificateListMessage:
    """Convert a store window to its message form, preserving order."""
    return [to_list_item(record) for record in records]
