"""
CertLedger -- Shared Primitives

Types every part of the ledger speaks in.
"""

from certledger.primitives.certificate import FIELD_ORDER, CertificateRecord
from certledger.primitives.common import LedgerBaseModel, new_id, utc_now

__all__ = [
    "FIELD_ORDER",
    "CertificateRecord",
    "LedgerBaseModel",
    "new_id",
    "utc_now",
]
